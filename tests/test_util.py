import pytest

from procfs.util import (
    ValueParser,
    parse_bool,
    parse_int,
    parse_int64s,
    parse_uint,
    parse_uint32s,
    parse_uint64s,
    read_file_no_stat,
    read_int_from_file,
    read_uint_from_file,
    sys_read_file,
)


def test_value_parser_ok_int():
    assert ValueParser("10").as_int() == 10


@pytest.mark.parametrize("value", ["hello", "0xhello"])
def test_value_parser_bad_int64(value):
    with pytest.raises(ValueError):
        ValueParser(value).as_int64()


@pytest.mark.parametrize("value, expected", [("1", 1), ("0xff", 255)])
def test_value_parser_ok_int64(value, expected):
    assert ValueParser(value).as_int64() == expected


@pytest.mark.parametrize("value", ["-42", "0xhello"])
def test_value_parser_bad_uint64(value):
    with pytest.raises(ValueError):
        ValueParser(value).as_uint64()


@pytest.mark.parametrize("value, expected", [("1", 1), ("0xff", 255)])
def test_value_parser_ok_uint64(value, expected):
    assert ValueParser(value).as_uint64() == expected


@pytest.mark.parametrize(
    "text, expected", [("010", 8), ("0b101", 5), ("0o17", 15), ("0", 0), ("1_000", 1000)]
)
def test_parse_uint_base_zero(text, expected):
    assert parse_uint(text, 0) == expected


def test_parse_uint_explicit_base():
    assert parse_uint("ff", 16) == 255


@pytest.mark.parametrize("text", ["0xff", " 1", "", "+1", "1_0"])
def test_parse_uint_rejects(text):
    with pytest.raises(ValueError):
        parse_uint(text, 16 if text == "0xff" else 10)


def test_parse_uint_range():
    assert parse_uint("255", bits=8) == 255
    with pytest.raises(ValueError, match="out of range"):
        parse_uint("256", bits=8)


def test_parse_int_signs_and_range():
    assert parse_int("-0x10", 0) == -16
    assert parse_int("+7") == 7
    assert parse_int("-9223372036854775808") == -(1 << 63)
    with pytest.raises(ValueError, match="out of range"):
        parse_int("9223372036854775808")


def test_parse_lists():
    assert parse_uint32s(["1", "4294967295"]) == [1, 4294967295]
    assert parse_uint64s(["0", "18446744073709551615"]) == [0, 18446744073709551615]
    assert parse_int64s(["-1", "2"]) == [-1, 2]


def test_parse_uint32s_overflow():
    with pytest.raises(ValueError):
        parse_uint32s(["1", "4294967296"])


def test_parse_uint64s_rejects_negative():
    with pytest.raises(ValueError):
        parse_uint64s(["-1"])


def test_read_uint_from_file(tmp_path):
    path = tmp_path / "value"
    path.write_text("  42\n")
    assert read_uint_from_file(path) == 42


def test_read_int_from_file(tmp_path):
    path = tmp_path / "value"
    path.write_text("-1\n")
    assert read_int_from_file(path) == -1


def test_read_uint_from_file_invalid(tmp_path):
    path = tmp_path / "value"
    path.write_text("-1\n")
    with pytest.raises(ValueError):
        read_uint_from_file(path)


@pytest.mark.parametrize(
    "value, expected", [("enabled", True), ("disabled", False), ("other", None)]
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_read_file_no_stat_limit(tmp_path):
    path = tmp_path / "big"
    path.write_bytes(b"x" * (600 * 1024))
    assert len(read_file_no_stat(path)) == 512 * 1024


def test_read_file_no_stat_small(tmp_path):
    path = tmp_path / "small"
    path.write_bytes(b"abc\n")
    assert read_file_no_stat(path) == b"abc\n"


def test_sys_read_file_strips(tmp_path):
    path = tmp_path / "attr"
    path.write_bytes(b" write back \n")
    assert sys_read_file(path) == "write back"


def test_sys_read_file_limit(tmp_path):
    path = tmp_path / "attr"
    path.write_bytes(b"a" * 200)
    assert sys_read_file(path) == "a" * 128


def test_sys_read_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        sys_read_file(tmp_path / "missing")