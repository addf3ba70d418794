"""Parsing of the ARP table in /proc/net/arp."""

from __future__ import annotations

import enum
import ipaddress
import string
from dataclasses import dataclass

from procfs.util import parse_uint

_DATA_WIDTH = 6
_HEADER_WIDTH = 9
_MAC_LENGTHS = (6, 8, 20)


class ATF(enum.IntFlag):
    """ARP entry flags from the kernel's if_arp.h."""

    COMPLETE = 0x02
    PERMANENT = 0x04
    PUBLISH = 0x08
    USE_TRAILERS = 0x10
    NETMASK = 0x20
    DONT_PUBLISH = 0x40


@dataclass(frozen=True)
class ARPEntry:
    """One row of /proc/net/arp."""

    ip_addr: ipaddress.IPv4Address | ipaddress.IPv6Address | None
    hw_addr: str
    device: str
    flags: int

    def is_complete(self) -> bool:
        return bool(self.flags & ATF.COMPLETE)


def parse_arp_entries(data: str | bytes) -> list[ARPEntry]:
    """Parse the contents of /proc/net/arp."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    entries = []
    for line in data.split("\n"):
        columns = line.split()
        width = len(columns)
        if width in (0, _HEADER_WIDTH):
            continue
        if width != _DATA_WIDTH:
            raise ValueError(
                f"{width} columns were detected, but {_DATA_WIDTH} were expected"
            )
        try:
            entries.append(_parse_arp_entry(columns))
        except ValueError as err:
            raise ValueError(f"failed to parse ARP entry: {err}") from err
    return entries


def _parse_arp_entry(columns: list[str]) -> ARPEntry:
    try:
        ip_addr = ipaddress.ip_address(columns[0])
    except ValueError:
        ip_addr = None
    hw_addr = _format_mac(_parse_mac(columns[3]))
    flags = parse_uint(columns[2], 0, 8)
    return ARPEntry(ip_addr=ip_addr, hw_addr=hw_addr, device=columns[5], flags=flags)


def _parse_mac(text: str) -> bytes:
    error = ValueError(f"invalid MAC address: {text}")
    if len(text) < 14:
        raise error
    if text[2] in ":-":
        if (len(text) + 1) % 3:
            raise error
        groups = text.split(text[2])
        if len(groups) not in _MAC_LENGTHS or any(len(group) != 2 for group in groups):
            raise error
    elif text[4] == ".":
        if (len(text) + 1) % 5:
            raise error
        groups = text.split(".")
        if 2 * len(groups) not in _MAC_LENGTHS or any(len(group) != 4 for group in groups):
            raise error
    else:
        raise error
    digits = "".join(groups)
    if not all(char in string.hexdigits for char in digits):
        raise error
    return bytes.fromhex(digits)


def _format_mac(mac: bytes) -> str:
    return ":".join(f"{octet:02x}" for octet in mac)