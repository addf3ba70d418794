"""Block device statistics from /proc/diskstats and /sys/block."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, fields

from procfs.mount import DEFAULT_PROC_MOUNT_POINT, DEFAULT_SYS_MOUNT_POINT, Mount
from procfs.util import (
    parse_uint,
    read_int_from_file,
    read_uint_from_file,
    sys_read_file,
)

_PROC_DISKSTATS_PATH = "diskstats"
_SYS_BLOCK_PATH = "block"
_SYS_BLOCK_QUEUE = "queue"
_MIN_DISKSTATS_FIELDS = 14


@dataclass
class Info:
    """Identifying information of a block device."""

    major_number: int = 0
    minor_number: int = 0
    device_name: str = ""


@dataclass
class IOStats:
    """I/O counters of a block device as described in the kernel's iostats documentation."""

    read_ios: int = 0
    read_merges: int = 0
    read_sectors: int = 0
    read_ticks: int = 0
    write_ios: int = 0
    write_merges: int = 0
    write_sectors: int = 0
    write_ticks: int = 0
    ios_in_progress: int = 0
    ios_total_ticks: int = 0
    weighted_io_ticks: int = 0
    discard_ios: int = 0
    discard_merges: int = 0
    discard_sectors: int = 0
    discard_ticks: int = 0
    flush_requests_completed: int = 0
    time_spent_flushing: int = 0


_IOSTATS_FIELDS = tuple(item.name for item in fields(IOStats))


@dataclass
class Diskstats(Info, IOStats):
    """Device information and I/O counters of one /proc/diskstats line.

    io_stats_count is the number of values read from the line: 14 on old
    kernels, 18 from 4.18 on and 20 from 5.5 on.
    """

    io_stats_count: int = 0


@dataclass
class BlockQueueStats:
    """Values of the files in /sys/block/<device>/queue."""

    add_random: int = 0
    dax: int = 0
    discard_granularity: int = 0
    discard_max_hw_bytes: int = 0
    discard_max_bytes: int = 0
    hw_sector_size: int = 0
    io_poll: int = 0
    io_poll_delay: int = 0
    io_timeout: int = 0
    io_stats: int = 0
    logical_block_size: int = 0
    max_hw_sectors_kb: int = 0
    max_integrity_segments: int = 0
    max_sectors_kb: int = 0
    max_segments: int = 0
    max_segment_size: int = 0
    minimum_io_size: int = 0
    no_merges: int = 0
    nr_requests: int = 0
    optimal_io_size: int = 0
    physical_block_size: int = 0
    read_ahead_kb: int = 0
    rotational: int = 0
    rq_affinity: int = 0
    scheduler_list: list[str] = field(default_factory=list)
    scheduler_current: str = ""
    write_cache: str = ""
    write_same_max_bytes: int = 0
    wbt_lat_usec: int = 0
    throttle_sample_time: int | None = None
    zoned: str = ""
    nr_zones: int = 0
    chunk_sectors: int = 0
    fua: int = 0
    max_discard_segments: int = 0
    write_zeroes_max_bytes: int = 0


_QUEUE_UINT_FILES = {
    "add_random": "add_random",
    "dax": "dax",
    "discard_granularity": "discard_granularity",
    "discard_max_hw_bytes": "discard_max_hw_bytes",
    "discard_max_bytes": "discard_max_bytes",
    "hw_sector_size": "hw_sector_size",
    "io_poll": "io_poll",
    "io_timeout": "io_timeout",
    "iostats": "io_stats",
    "logical_block_size": "logical_block_size",
    "max_hw_sectors_kb": "max_hw_sectors_kb",
    "max_integrity_segments": "max_integrity_segments",
    "max_sectors_kb": "max_sectors_kb",
    "max_segments": "max_segments",
    "max_segment_size": "max_segment_size",
    "minimum_io_size": "minimum_io_size",
    "nomerges": "no_merges",
    "nr_requests": "nr_requests",
    "optimal_io_size": "optimal_io_size",
    "physical_block_size": "physical_block_size",
    "read_ahead_kb": "read_ahead_kb",
    "rotational": "rotational",
    "rq_affinity": "rq_affinity",
    "write_same_max_bytes": "write_same_max_bytes",
    "nr_zones": "nr_zones",
    "chunk_sectors": "chunk_sectors",
    "fua": "fua",
    "max_discard_segments": "max_discard_segments",
    "write_zeroes_max_bytes": "write_zeroes_max_bytes",
}
_QUEUE_INT_FILES = {"io_poll_delay": "io_poll_delay", "wbt_lat_usec": "wbt_lat_usec"}
_QUEUE_TEXT_FILES = {"write_cache": "write_cache", "zoned": "zoned"}


def _uint32(text: str) -> int:
    return parse_uint(text, 10, 32)


def _uint64(text: str) -> int:
    return parse_uint(text, 10, 64)


def _scan(tokens: Sequence[str], converters: Sequence[Callable[[str], object]]) -> list[object]:
    """Convert tokens in order; a shorter input yields fewer values, a bad token raises."""
    return [convert(token) for token, convert in zip(tokens, converters)]


_DISKSTATS_CONVERTERS: tuple[Callable[[str], object], ...] = (
    _uint32,
    _uint32,
    str,
    *([_uint64] * len(_IOSTATS_FIELDS)),
)
_DISKSTATS_NAMES = ("major_number", "minor_number", "device_name", *_IOSTATS_FIELDS)


def _parse_diskstats_line(line: str) -> Diskstats:
    values = _scan(line.split(), _DISKSTATS_CONVERTERS)
    stats = Diskstats(**dict(zip(_DISKSTATS_NAMES, values)))
    stats.io_stats_count = len(values)
    return stats


class BlockDeviceFS:
    """The proc and sys pseudo-filesystems, seen through their block device statistics."""

    def __init__(
        self,
        proc_mount_point: str | os.PathLike[str] = DEFAULT_PROC_MOUNT_POINT,
        sys_mount_point: str | os.PathLike[str] = DEFAULT_SYS_MOUNT_POINT,
    ) -> None:
        proc_mount_point = os.fspath(proc_mount_point)
        if not proc_mount_point.strip():
            proc_mount_point = DEFAULT_PROC_MOUNT_POINT
        self.proc = Mount(proc_mount_point)
        sys_mount_point = os.fspath(sys_mount_point)
        if not sys_mount_point.strip():
            sys_mount_point = DEFAULT_SYS_MOUNT_POINT
        self.sys = Mount(sys_mount_point)

    def __repr__(self) -> str:
        return f"BlockDeviceFS({self.proc.mount_point!r}, {self.sys.mount_point!r})"

    def proc_diskstats(self) -> list[Diskstats]:
        """Return one entry per device line of /proc/diskstats."""
        with open(self.proc.path(_PROC_DISKSTATS_PATH), encoding="utf-8", errors="replace") as handle:
            lines = handle.read().splitlines()
        result = []
        for line in lines:
            stats = _parse_diskstats_line(line)
            if stats.io_stats_count >= _MIN_DISKSTATS_FIELDS:
                result.append(stats)
        return result

    def sys_block_devices(self) -> list[str]:
        """Return the device names found in /sys/block, sorted."""
        return sorted(os.listdir(self.sys.path(_SYS_BLOCK_PATH)))

    def sys_block_device_stat(self, device: str) -> tuple[IOStats, int]:
        """Return the counters of /sys/block/<device>/stat and how many were read.

        The count is 15 where discard counters are available and 11 where not.
        """
        with open(self.sys.path(_SYS_BLOCK_PATH, device, "stat"), encoding="utf-8") as handle:
            tokens = handle.read().split()
        values = _scan(tokens, [_uint64] * len(_IOSTATS_FIELDS))
        return IOStats(**dict(zip(_IOSTATS_FIELDS, values))), len(values)

    def sys_block_device_queue_stats(self, device: str) -> BlockQueueStats:
        """Return the values of /sys/block/<device>/queue."""

        def queue_path(name: str) -> str:
            return self.sys.path(_SYS_BLOCK_PATH, device, _SYS_BLOCK_QUEUE, name)

        stats = BlockQueueStats()
        for name, attr in _QUEUE_UINT_FILES.items():
            setattr(stats, attr, read_uint_from_file(queue_path(name)))
        for name, attr in _QUEUE_INT_FILES.items():
            setattr(stats, attr, read_int_from_file(queue_path(name)))
        for name, attr in _QUEUE_TEXT_FILES.items():
            setattr(stats, attr, sys_read_file(queue_path(name)))

        schedulers = []
        for item in sys_read_file(queue_path("scheduler")).split(" "):
            if item.startswith("[") and item.endswith("]"):
                item = item[1:-1]
                stats.scheduler_current = item
            schedulers.append(item)
        stats.scheduler_list = schedulers

        try:
            stats.throttle_sample_time = read_uint_from_file(queue_path("throttle_sample_time"))
        except (OSError, ValueError):
            stats.throttle_sample_time = None
        return stats