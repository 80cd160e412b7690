import pytest

from procparse.common import InternalError, ProcError
from procparse.flags import CoredumpFlags, ProcState, StatFlags


@pytest.mark.parametrize(
    "char, state",
    [
        ("R", ProcState.RUNNING),
        ("S", ProcState.SLEEPING),
        ("D", ProcState.WAITING),
        ("Z", ProcState.ZOMBIE),
        ("T", ProcState.STOPPED),
        ("t", ProcState.TRACING),
        ("X", ProcState.DEAD),
        ("x", ProcState.DEAD),
        ("K", ProcState.WAKEKILL),
        ("W", ProcState.WAKING),
        ("P", ProcState.PARKED),
        ("I", ProcState.IDLE),
    ],
)
def test_from_char(char, state):
    assert ProcState.from_char(char) is state


def test_from_char_unknown():
    assert ProcState.from_char("Q") is None


def test_parse_uses_first_character():
    assert ProcState.parse("S (sleeping)") is ProcState.SLEEPING


def test_parse_empty():
    with pytest.raises(ProcError):
        ProcState.parse("")


def test_parse_unknown():
    with pytest.raises(InternalError):
        ProcState.parse("q")


def test_stat_flags_round_trip():
    combined = StatFlags.PF_KTHREAD | StatFlags.PF_FORKNOEXEC
    decoded = StatFlags(int(combined))
    assert decoded == combined
    assert StatFlags.PF_KTHREAD in decoded
    assert StatFlags.PF_EXITING not in decoded


def test_stat_flags_highest_bit():
    assert StatFlags(int(StatFlags.PF_SUSPEND_TASK)) is StatFlags.PF_SUSPEND_TASK


def test_coredump_flags_distinct_bits():
    total = 0
    for flag in CoredumpFlags:
        assert total & int(flag) == 0
        total |= int(flag)
    assert CoredumpFlags(total) == CoredumpFlags.ANONYMOUS_PRIVATE_MAPPINGS | CoredumpFlags(
        total & ~int(CoredumpFlags.ANONYMOUS_PRIVATE_MAPPINGS)
    )