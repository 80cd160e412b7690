from datetime import datetime, timedelta, timezone

import pytest

from procparse.common import ProcError
from procparse.flags import ProcState, StatFlags
from procparse.stat import parse_stat

BASE = (
    "1234 (cat) R 1000 1234 1000 34816 1234 4194304 100 5 6 7 11 12 -3 -4 20 0 1 0 "
    "5000 10000000 200 18446744073709551615 4194304 4200000 140000000 0 0 0 0 0 0 0 0 0"
)
FULL = BASE + " 17 3 0 0 9 8 7 1 2 3 4 5 6 7 0"


def test_parse_basic_fields():
    stat = parse_stat(FULL)
    assert stat.pid == 1234
    assert stat.comm == "cat"
    assert stat.state == "R"
    assert stat.ppid == 1000
    assert stat.flags == 4194304
    assert stat.cutime == -3
    assert stat.cstime == -4
    assert stat.rsslim == 18446744073709551615
    assert stat.starttime == 5000


def test_optional_fields_present():
    stat = parse_stat(FULL)
    assert stat.exit_signal == 17
    assert stat.processor == 3
    assert stat.guest_time == 8
    assert stat.exit_code == 0


def test_optional_fields_absent():
    stat = parse_stat(BASE)
    assert stat.exit_signal is None
    assert stat.exit_code is None
    assert stat.cnswap == 0


def test_comm_with_parens_and_spaces():
    line = FULL.replace("(cat)", "(my (odd) name)")
    stat = parse_stat(line)
    assert stat.comm == "my (odd) name"
    assert stat.ppid == 1000


def test_bytes_input_and_trailing_newline():
    stat = parse_stat((FULL + "\n").encode())
    assert stat.pid == 1234
    assert stat.exit_code == 0


def test_proc_state():
    assert parse_stat(FULL).proc_state() is ProcState.RUNNING
    assert parse_stat(FULL.replace(" R ", " S ", 1)).proc_state() is ProcState.SLEEPING


def test_unknown_state_raises():
    stat = parse_stat(FULL.replace(" R ", " Q ", 1))
    with pytest.raises(ProcError):
        stat.proc_state()


def test_tty_device_pty():
    assert parse_stat(FULL).tty_device() == (136, 0)


def test_tty_device_zero():
    stat = parse_stat(FULL.replace(" 34816 ", " 0 ", 1))
    assert stat.tty_device() == (0, 0)


def test_stat_flags():
    assert parse_stat(FULL).stat_flags() == StatFlags.PF_RANDOMIZE


def test_stat_flags_unknown_bit():
    stat = parse_stat(FULL.replace(" 4194304 100 ", " 1 100 ", 1))
    with pytest.raises(ProcError):
        stat.stat_flags()


def test_rss_bytes():
    stat = parse_stat(FULL)
    assert stat.rss_bytes(1) == stat.rss
    assert stat.rss_bytes(4096) == stat.rss * 4096


def test_start_datetime():
    boot = datetime(2021, 1, 1, tzinfo=timezone.utc)
    stat = parse_stat(FULL)
    assert stat.start_datetime(boot, 100) == boot + timedelta(seconds=50)
    assert stat.start_datetime(boot, 5000) - boot == timedelta(seconds=1)


def test_truncated_raises():
    with pytest.raises(ProcError):
        parse_stat("1234 (cat) R 1000 1234")


def test_bad_number_raises():
    with pytest.raises(ProcError):
        parse_stat(FULL.replace(" 1000 1234 ", " abc 1234 ", 1))


def test_missing_parens_raises():
    with pytest.raises(ProcError):
        parse_stat("1234 cat R 1 2 3")


def test_out_of_range_pid_raises():
    with pytest.raises(ProcError):
        parse_stat(FULL.replace("1234 (cat)", "99999999999 (cat)", 1))