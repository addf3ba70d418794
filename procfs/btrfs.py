"""Statistics of mounted Btrfs filesystems, read from /sys/fs/btrfs."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field

from procfs.mount import DEFAULT_SYS_MOUNT_POINT, Mount
from procfs.util import parse_uint, sys_read_file

SECTOR_SIZE = 512
"""Linux always counts sectors as 512 bytes, whatever the device's block size."""


@dataclass
class LayoutUsage:
    """Usage statistics of one disk layout."""

    used_bytes: int = 0
    total_bytes: int = 0
    ratio: float = 0.0


@dataclass
class AllocationStats:
    """Allocation statistics of one data type."""

    disk_used_bytes: int = 0
    disk_total_bytes: int = 0
    may_use_bytes: int = 0
    pinned_bytes: int = 0
    total_pinned_bytes: int = 0
    read_only_bytes: int = 0
    reserved_bytes: int = 0
    used_bytes: int = 0
    total_bytes: int = 0
    flags: int = 0
    layouts: dict[str, LayoutUsage] = field(default_factory=dict)


@dataclass
class Allocation:
    """Allocation statistics for data, metadata and system data."""

    global_rsv_reserved: int = 0
    global_rsv_size: int = 0
    data: AllocationStats | None = None
    metadata: AllocationStats | None = None
    system: AllocationStats | None = None


@dataclass
class Device:
    """A device that is part of a Btrfs filesystem."""

    size: int = 0


@dataclass
class Stats:
    """Statistics of one Btrfs filesystem."""

    uuid: str = ""
    label: str = ""
    allocation: Allocation = field(default_factory=Allocation)
    devices: dict[str, Device] = field(default_factory=dict)
    features: list[str] = field(default_factory=list)
    clone_alignment: int = 0
    node_size: int = 0
    quota_override: int = 0
    sector_size: int = 0


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return float("inf") if numerator > 0 else float("nan")
    return numerator / denominator


class _Reader:
    def __init__(self, path: str, dev_count: int = 0) -> None:
        self.path = path
        self.dev_count = dev_count

    def read_file(self, name: str) -> str:
        try:
            return sys_read_file(os.path.join(self.path, name))
        except FileNotFoundError:
            return ""

    def read_value(self, name: str) -> int:
        try:
            return parse_uint(self.read_file(name), 10, 64)
        except ValueError:
            return 0

    def list_files(self, name: str) -> list[str]:
        return sorted(os.listdir(os.path.join(self.path, name)))

    def read_allocation_stats(self, name: str) -> AllocationStats:
        sub = _Reader(os.path.join(self.path, name), self.dev_count)
        return AllocationStats(
            may_use_bytes=sub.read_value("bytes_may_use"),
            pinned_bytes=sub.read_value("bytes_pinned"),
            read_only_bytes=sub.read_value("bytes_readonly"),
            reserved_bytes=sub.read_value("bytes_reserved"),
            used_bytes=sub.read_value("bytes_used"),
            disk_used_bytes=sub.read_value("disk_used"),
            disk_total_bytes=sub.read_value("disk_total"),
            flags=sub.read_value("flags"),
            total_bytes=sub.read_value("total_bytes"),
            total_pinned_bytes=sub.read_value("total_bytes_pinned"),
            layouts=sub.read_layouts(),
        )

    def read_layouts(self) -> dict[str, LayoutUsage]:
        with os.scandir(self.path) as entries:
            names = sorted(
                entry.name for entry in entries if entry.is_dir(follow_symlinks=False)
            )
        return {name: self.read_layout(name) for name in names}

    def read_layout(self, name: str) -> LayoutUsage:
        return LayoutUsage(
            total_bytes=self.read_value(os.path.join(name, "total_bytes")),
            used_bytes=self.read_value(os.path.join(name, "used_bytes")),
            ratio=self.calc_ratio(name),
        )

    def calc_ratio(self, layout: str) -> float:
        if layout in ("single", "raid0"):
            return 1.0
        if layout in ("dup", "raid1", "raid10"):
            return 2.0
        if layout == "raid5":
            return _ratio(self.dev_count, self.dev_count - 1)
        if layout == "raid6":
            return _ratio(self.dev_count, self.dev_count - 2)
        return 0.0

    def read_device_info(self) -> dict[str, Device]:
        return {
            name: Device(size=SECTOR_SIZE * self.read_value(f"devices/{name}/size"))
            for name in self.list_files("devices")
        }

    def read_filesystem_stats(self) -> Stats:
        devices = self.read_device_info()
        self.dev_count = len(devices)
        return Stats(
            devices=devices,
            label=self.read_file("label"),
            uuid=self.read_file("metadata_uuid"),
            features=self.list_files("features"),
            clone_alignment=self.read_value("clone_alignment"),
            node_size=self.read_value("nodesize"),
            quota_override=self.read_value("quota_override"),
            sector_size=self.read_value("sectorsize"),
            allocation=Allocation(
                global_rsv_reserved=self.read_value("allocation/global_rsv_reserved"),
                global_rsv_size=self.read_value("allocation/global_rsv_size"),
                data=self.read_allocation_stats("allocation/data"),
                metadata=self.read_allocation_stats("allocation/metadata"),
                system=self.read_allocation_stats("allocation/system"),
            ),
        )


def get_stats(uuid_path: str | os.PathLike[str]) -> Stats:
    """Collect the statistics of the Btrfs filesystem at a sysfs directory."""
    return _Reader(os.fspath(uuid_path)).read_filesystem_stats()


class BtrfsFS:
    """The sys pseudo-filesystem, seen through its Btrfs statistics."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_SYS_MOUNT_POINT) -> None:
        mount_point = os.fspath(mount_point)
        if not mount_point.strip():
            mount_point = DEFAULT_SYS_MOUNT_POINT
        self.sys = Mount(mount_point)

    def __repr__(self) -> str:
        return f"BtrfsFS({self.sys.mount_point!r})"

    def stats(self) -> list[Stats]:
        """Return statistics for every mounted Btrfs filesystem."""
        pattern = os.path.join(glob.escape(self.sys.path("fs", "btrfs")), "*-*")
        result = []
        for uuid_path in sorted(glob.glob(pattern)):
            stats = get_stats(uuid_path)
            if not stats.uuid:
                stats.uuid = os.path.basename(uuid_path)
            result.append(stats)
        return result