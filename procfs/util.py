"""Helpers for reading and parsing pseudo-filesystem files."""

from __future__ import annotations

import os
from collections.abc import Iterable

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_MAX_READ_SIZE = 512 * 1024
_SYS_READ_SIZE = 128


def _split_base(text: str, base: int) -> tuple[int, str, bool]:
    """Return the effective base, the digits and whether underscores are allowed."""
    if base == 0:
        prefix = text[:2].lower()
        if prefix == "0x":
            return 16, text[2:], True
        if prefix == "0o":
            return 8, text[2:], True
        if prefix == "0b":
            return 2, text[2:], True
        if len(text) > 1 and text[0] == "0":
            return 8, text[1:], True
        return 10, text, True
    if not 2 <= base <= 36:
        raise ValueError(f"invalid base {base}")
    return base, text, False


def _parse_magnitude(text: str, base: int, original: str, func: str) -> int:
    digit_base, digits, underscores = _split_base(text, base)
    syntax_error = ValueError(f"{func}: parsing {original!r}: invalid syntax")
    if not digits:
        raise syntax_error
    for char in digits.lower():
        if char == "_":
            if not underscores:
                raise syntax_error
            continue
        position = _DIGITS.find(char)
        if position < 0 or position >= digit_base:
            raise syntax_error
    try:
        return int(digits, digit_base)
    except ValueError:
        raise syntax_error from None


def parse_uint(text: str, base: int = 10, bits: int = 64) -> int:
    """Parse an unsigned integer; base 0 infers the base from a prefix."""
    value = _parse_magnitude(text, base, text, "parse_uint")
    if value >= 1 << bits:
        raise ValueError(f"parse_uint: parsing {text!r}: value out of range")
    return value


def parse_int(text: str, base: int = 10, bits: int = 64) -> int:
    """Parse a signed integer; base 0 infers the base from a prefix."""
    negative = False
    body = text
    if text and text[0] in "+-":
        negative = text[0] == "-"
        body = text[1:]
    value = _parse_magnitude(body, base, text, "parse_int")
    if negative:
        value = -value
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"parse_int: parsing {text!r}: value out of range")
    return value


class ValueParser:
    """Parses a single string as an integer whose base is inferred from its prefix."""

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ValueParser({self.value!r})"

    def as_int(self) -> int:
        return self.as_int64()

    def as_int64(self) -> int:
        return parse_int(self.value, 0, 64)

    def as_uint64(self) -> int:
        return parse_uint(self.value, 0, 64)


def parse_uint32s(values: Iterable[str]) -> list[int]:
    """Parse decimal strings as unsigned 32-bit integers."""
    return [parse_uint(value, 10, 32) for value in values]


def parse_uint64s(values: Iterable[str]) -> list[int]:
    """Parse decimal strings as unsigned 64-bit integers."""
    return [parse_uint(value, 10, 64) for value in values]


def parse_int64s(values: Iterable[str]) -> list[int]:
    """Parse decimal strings as signed 64-bit integers."""
    return [parse_int(value, 10, 64) for value in values]


def read_uint_from_file(path: str | os.PathLike[str]) -> int:
    """Read a file holding one unsigned decimal integer."""
    with open(path, encoding="utf-8") as handle:
        return parse_uint(handle.read().strip())


def read_int_from_file(path: str | os.PathLike[str]) -> int:
    """Read a file holding one signed decimal integer."""
    with open(path, encoding="utf-8") as handle:
        return parse_int(handle.read().strip())


def parse_bool(value: str) -> bool | None:
    """Map "enabled"/"disabled" to True/False; anything else gives None."""
    return {"enabled": True, "disabled": False}.get(value)


def read_file_no_stat(path: str | os.PathLike[str]) -> bytes:
    """Read a whole file, up to 512 KiB, without trusting its reported size."""
    with open(path, "rb") as handle:
        return handle.read(_MAX_READ_SIZE)


def sys_read_file(path: str | os.PathLike[str]) -> str:
    """Read at most 128 bytes with a single read call and strip whitespace."""
    fd = os.open(path, os.O_RDONLY)
    try:
        data = os.read(fd, _SYS_READ_SIZE)
    finally:
        os.close(fd)
    return data.strip().decode("utf-8", errors="replace")