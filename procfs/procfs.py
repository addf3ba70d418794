"""Access to system, kernel and process metrics in the proc pseudo-filesystem.

Example::

    fs = ProcFS.default()
    for cpu in fs.cpu_info():
        print(cpu.processor, cpu.model_name)
"""

from __future__ import annotations

import os

from procfs.arp import ARPEntry, parse_arp_entries
from procfs.buddyinfo import BuddyInfo, parse_buddy_info
from procfs.cpuinfo import CPUInfo, parse_cpu_info
from procfs.crypto import Crypto, parse_crypto
from procfs.fscache import Fscacheinfo, parse_fscacheinfo
from procfs.ipvs import (
    IPVSBackendStatus,
    IPVSStats,
    parse_ipvs_backend_status,
    parse_ipvs_stats,
)
from procfs.mount import DEFAULT_PROC_MOUNT_POINT, Mount
from procfs.util import read_file_no_stat

DEFAULT_MOUNT_POINT = DEFAULT_PROC_MOUNT_POINT


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class ProcFS:
    """The proc pseudo-filesystem mounted at a directory."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_MOUNT_POINT) -> None:
        self.mount = Mount(mount_point)

    def __repr__(self) -> str:
        return f"ProcFS({self.mount.mount_point!r})"

    @classmethod
    def default(cls) -> ProcFS:
        """Open proc at its usual mount point."""
        return cls(DEFAULT_MOUNT_POINT)

    def _path(self, *parts: str) -> str:
        return self.mount.path(*parts)

    def gather_arp_entries(self) -> list[ARPEntry]:
        """Return the entries of the ARP table."""
        path = self._path("net/arp")
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except OSError as err:
            raise OSError(err.errno, f"error reading arp {path!r}: {err.strerror}", path) from err
        return parse_arp_entries(_decode(data))

    def buddy_info(self) -> list[BuddyInfo]:
        """Return the free memory fragment counts per node and zone."""
        with open(self._path("buddyinfo"), encoding="utf-8", errors="replace") as handle:
            return parse_buddy_info(handle.read())

    def cmdline(self) -> list[str]:
        """Return the kernel command line split into arguments."""
        return _decode(read_file_no_stat(self._path("cmdline"))).split()

    def cpu_info(self) -> list[CPUInfo]:
        """Return information about the CPUs of this machine."""
        return parse_cpu_info(read_file_no_stat(self._path("cpuinfo")))

    def crypto(self) -> list[Crypto]:
        """Return the registered kernel crypto algorithms."""
        path = self._path("crypto")
        try:
            data = read_file_no_stat(path)
        except OSError as err:
            raise OSError(err.errno, f"error reading crypto {path!r}: {err.strerror}", path) from err
        try:
            return parse_crypto(_decode(data))
        except ValueError as err:
            raise ValueError(f"error parsing crypto {path!r}: {err}") from err

    def fscacheinfo(self) -> Fscacheinfo:
        """Return the fscache statistics."""
        data = read_file_no_stat(self._path("fs/fscache/stats"))
        try:
            return parse_fscacheinfo(_decode(data))
        except ValueError as err:
            raise ValueError(f"failed to parse Fscacheinfo: {err}") from err

    def ipvs_stats(self) -> IPVSStats:
        """Return the IPVS totals."""
        return parse_ipvs_stats(_decode(read_file_no_stat(self._path("net/ip_vs_stats"))))

    def ipvs_backend_status(self) -> list[IPVSBackendStatus]:
        """Return the status of every virtual/real server pair."""
        with open(self._path("net/ip_vs"), encoding="utf-8", errors="replace") as handle:
            return parse_ipvs_backend_status(handle.read())