"""Parsing of IPVS statistics and backend status from /proc/net/ip_vs*."""

from __future__ import annotations

import ipaddress
import string
from dataclasses import dataclass

from procfs.util import parse_uint

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class IPVSStats:
    """Totals from /proc/net/ip_vs_stats."""

    connections: int = 0
    incoming_packets: int = 0
    outgoing_packets: int = 0
    incoming_bytes: int = 0
    outgoing_bytes: int = 0


@dataclass(frozen=True)
class IPVSBackendStatus:
    """Current metrics of one virtual/real address pair."""

    local_address: IPAddress | None = None
    remote_address: IPAddress | None = None
    local_port: int = 0
    remote_port: int = 0
    local_mark: str = ""
    proto: str = ""
    active_conn: int = 0
    inact_conn: int = 0
    weight: int = 0


def _text(data: str | bytes) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def parse_ipvs_stats(text: str | bytes) -> IPVSStats:
    """Parse the contents of /proc/net/ip_vs_stats."""
    lines = _text(text).split("\n", 3)
    if len(lines) != 4:
        raise ValueError("ip_vs_stats corrupt: too short")
    fields = lines[2].split()
    if len(fields) != 5:
        raise ValueError("ip_vs_stats corrupt: unexpected number of fields")
    values = [parse_uint(item, 16, 64) for item in fields]
    return IPVSStats(*values)


def parse_ipvs_backend_status(text: str | bytes) -> list[IPVSBackendStatus]:
    """Parse the contents of /proc/net/ip_vs."""
    status: list[IPVSBackendStatus] = []
    proto = ""
    local_mark = ""
    local_address: IPAddress | None = None
    local_port = 0

    for line in _text(text).splitlines():
        fields = line.split()
        if not fields:
            continue
        head = fields[0]
        if head in ("IP", "Prot") or (len(fields) > 1 and fields[1] == "RemoteAddress:Port"):
            continue
        if head in ("TCP", "UDP"):
            if len(fields) < 2:
                continue
            proto = head
            local_mark = ""
            local_address, local_port = parse_ip_port(fields[1])
        elif head == "FWM":
            if len(fields) < 2:
                continue
            proto = head
            local_mark = fields[1]
            local_address = None
            local_port = 0
        elif head == "->":
            if len(fields) < 6:
                continue
            remote_address, remote_port = parse_ip_port(fields[1])
            status.append(
                IPVSBackendStatus(
                    local_address=local_address,
                    remote_address=remote_address,
                    local_port=local_port,
                    remote_port=remote_port,
                    local_mark=local_mark,
                    proto=proto,
                    weight=parse_uint(fields[3], 10, 64),
                    active_conn=parse_uint(fields[4], 10, 64),
                    inact_conn=parse_uint(fields[5], 10, 64),
                )
            )
    return status


def parse_ip_port(value: str) -> tuple[IPAddress, int]:
    """Parse a hex encoded IPv4 "ADDR:PORT" or a bracketed IPv6 "[ADDR]:PORT"."""
    if len(value) == 13:
        digits = value[0:8]
        if not all(char in string.hexdigits for char in digits):
            raise ValueError(f"invalid hex IPv4 address: {digits}")
        ip: IPAddress = ipaddress.IPv4Address(bytes.fromhex(digits))
    elif len(value) == 46:
        try:
            ip = ipaddress.ip_address(value[1:40])
        except ValueError:
            raise ValueError(f"invalid IPv6 address: {value[1:40]}") from None
    else:
        raise ValueError(f"unexpected IP:Port: {value}")

    port = parse_uint(value[-4:], 16, 16)
    return ip, port