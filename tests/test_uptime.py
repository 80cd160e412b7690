from datetime import timedelta

import pytest

from procparse.common import IncompleteError, InternalError
from procparse.uptime import Uptime, parse_uptime


def test_uptime():
    uptime = parse_uptime(b"2578790.61 1999230.98\n")
    assert uptime.uptime_duration() == timedelta(seconds=2578790, microseconds=610_000)
    assert uptime.idle_duration() == timedelta(seconds=1999230, microseconds=980_000)


def test_uptime_from_text():
    uptime = parse_uptime("2578790.61 1999230.98\n")
    assert uptime == Uptime(2578790.61, 1999230.98)


def test_rounding_carries_into_seconds():
    assert Uptime(1.999, 0.0).uptime_duration() == timedelta(seconds=2)


def test_missing_idle():
    with pytest.raises(IncompleteError):
        parse_uptime("12.5\n")


def test_not_a_number():
    with pytest.raises(InternalError):
        parse_uptime("up 12.5\n")