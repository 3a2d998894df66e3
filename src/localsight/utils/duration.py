import re

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """
    Parses a Go-style duration string ('10s', '1m30s', '500ms', '1.5h') into seconds.

    A bare integer is accepted and interpreted as seconds, which keeps older
    deployments that configured the interval as a plain number working.

    Raises:
        ValueError: If the string is empty, negative or malformed.
    """
    if value is None:
        raise ValueError("Duration must not be empty.")

    text = value.strip().lower()
    if not text:
        raise ValueError("Duration must not be empty.")

    if text.isdigit():
        return float(text)

    if text.startswith("-"):
        raise ValueError(f"Invalid duration '{value}': must not be negative.")
    if text.startswith("+"):
        text = text[1:]

    total = 0.0
    position = 0
    for match in _COMPONENT.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"Invalid duration '{value}'. Use units like 'ms', 's', 'm' or 'h' (e.g. '1m30s').")

    return total
