# tests/utils/test_duration.py

import pytest

from localsight.utils.duration import parse_duration


@pytest.mark.parametrize(
    "value, expected",
    [
        ("10s", 10.0),
        ("1m", 60.0),
        ("1h", 3600.0),
        ("1m30s", 90.0),
        ("500ms", 0.5),
        ("1.5h", 5400.0),
        ("2h45m", 9900.0),
        ("30", 30.0),
        (" 5s ", 5.0),
        ("0s", 0.0),
    ],
)
def test_parse_valid_durations(value, expected):
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "   ", "s", "10x", "1m30", "-5s", "abc", "1 m"])
def test_parse_invalid_durations(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_none_is_rejected():
    with pytest.raises(ValueError):
        parse_duration(None)
