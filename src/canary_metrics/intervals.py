"""Metric interval parsing.

Metric intervals use the duration notation found in canary definitions:
a sequence of decimal numbers, each with an optional fraction and a unit
suffix, e.g. "30s", "1m", "1h30m", "1.5h" or "500ms". A leading sign is
allowed and a bare "0" is accepted.
"""

import re

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# Longer units first so "ms" wins over "m"
_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_interval(value: str) -> float:
    """Parse a duration string into seconds.

    Args:
        value: Duration string such as "1m" or "2h45m".

    Returns:
        The duration in seconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    if not isinstance(value, str):
        raise ValueError(f"invalid duration {value!r}")

    text = value
    sign = 1.0
    if text[:1] in ("-", "+"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT_RE.match(text, pos)
        if match is None:
            if re.match(r"(\d+(?:\.\d*)?|\.\d+)$", text[pos:]):
                raise ValueError(f"missing unit in duration {value!r}")
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        pos = match.end()

    return sign * total
