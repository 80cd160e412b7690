import pytest

from procparse.common import IncompleteError, InternalError, ProcError, parse_int


def test_decimal_value():
    assert parse_int("42", 10) == 42


def test_default_radix_is_decimal():
    assert parse_int("3542") == 3542


def test_hex_value():
    assert parse_int("3ffdf", 16) == 0x3FFDF


def test_octal_value():
    assert parse_int("0022", 8) == 0o22


def test_signed_values():
    assert parse_int("-7", 10) == -7
    assert parse_int("+7", 10) == 7


@pytest.mark.parametrize("number", [0, 1, 255, 4096, 2**63, 2**64 - 1])
@pytest.mark.parametrize("radix", [2, 8, 10, 16])
def test_round_trip(number, radix):
    text = {2: format(number, "b"), 8: format(number, "o"), 10: str(number), 16: format(number, "x")}[radix]
    assert parse_int(text, radix) == number


def test_uppercase_hex_accepted():
    assert parse_int("FF", 16) == parse_int("ff", 16)


@pytest.mark.parametrize(
    "text,radix",
    [
        ("", 10),
        ("-", 10),
        (" 1", 10),
        ("1 ", 10),
        ("1_000", 10),
        ("12a", 10),
        ("0x10", 16),
        ("8", 8),
        ("1.5", 10),
    ],
)
def test_rejects_malformed(text, radix):
    with pytest.raises(InternalError):
        parse_int(text, radix)


def test_parse_failure_is_proc_error():
    with pytest.raises(ProcError):
        parse_int("abc", 10)


def test_bad_radix():
    with pytest.raises(ValueError):
        parse_int("1", 1)


def test_incomplete_error_keeps_path():
    err = IncompleteError("/proc/self/stat")
    assert str(err.path) == "/proc/self/stat"
    assert isinstance(err, ProcError)


def test_incomplete_error_without_path():
    err = IncompleteError()
    assert err.path is None
    with pytest.raises(ProcError):
        raise err