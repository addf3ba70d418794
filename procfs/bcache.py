"""Statistics of the bcache block cache, read from /sys/fs/bcache."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field

from procfs.mount import DEFAULT_SYS_MOUNT_POINT, Mount
from procfs.util import parse_int, parse_uint

# Multipliers used by the kernel's bch_hprint().
_MULTIPLIERS = {
    "k": 1 << 10,
    "M": 1 << 20,
    "G": 1 << 30,
    "T": 1 << 40,
    "P": 1 << 50,
    "E": 1 << 60,
    "Z": 1 << 70,
    "Y": 1 << 80,
}
_LAST_DIGIT = ord("9")


@dataclass
class PriorityStats:
    """Values from the priority_stats file of a cache device."""

    unused_percent: int = 0
    metadata_percent: int = 0


@dataclass
class InternalStats:
    """Internal bcache statistics."""

    active_journal_entries: int = 0
    btree_nodes: int = 0
    btree_read_average_duration_nanoseconds: int = 0
    cache_read_races: int = 0


@dataclass
class PeriodStats:
    """Statistics over a time period (five minutes or total)."""

    bypassed: int = 0
    cache_bypass_hits: int = 0
    cache_bypass_misses: int = 0
    cache_hits: int = 0
    cache_miss_collisions: int = 0
    cache_misses: int = 0
    cache_readaheads: int = 0


@dataclass
class WritebackRateDebugStats:
    """Values from the writeback_rate_debug file of a backing device."""

    rate: int = 0
    dirty: int = 0
    target: int = 0
    proportional: int = 0
    integral: int = 0
    change: int = 0
    next_io: int = 0


@dataclass
class BcacheStats:
    """Statistics tied to one bcache ID."""

    average_key_size: int = 0
    btree_cache_size: int = 0
    cache_available_percent: int = 0
    congested: int = 0
    root_usage_percent: int = 0
    tree_depth: int = 0
    internal: InternalStats = field(default_factory=InternalStats)
    five_min: PeriodStats = field(default_factory=PeriodStats)
    total: PeriodStats = field(default_factory=PeriodStats)


@dataclass
class BdevStats:
    """Statistics of one backing device."""

    name: str = ""
    dirty_data: int = 0
    five_min: PeriodStats = field(default_factory=PeriodStats)
    total: PeriodStats = field(default_factory=PeriodStats)
    writeback_rate_debug: WritebackRateDebugStats = field(
        default_factory=WritebackRateDebugStats
    )


@dataclass
class CacheStats:
    """Statistics of one cache device."""

    name: str = ""
    io_errors: int = 0
    metadata_written: int = 0
    written: int = 0
    priority: PriorityStats = field(default_factory=PriorityStats)


@dataclass
class Stats:
    """Runtime statistics of one bcache."""

    name: str = ""
    bcache: BcacheStats = field(default_factory=BcacheStats)
    bdevs: list[BdevStats] = field(default_factory=list)
    caches: list[CacheStats] = field(default_factory=list)


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid float value: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid float value: {text!r}") from None


def parse_pseudo_float(text: str) -> float:
    """Parse the peculiar fractional format written by bch_hprint."""
    parts = text.split(".")
    int_part = _parse_float(parts[0])
    if len(parts) == 1:
        return int_part
    # The fraction is a value from 0 to 1023 printed as hundredths; restore its order.
    return int_part + _parse_float(parts[1]) / 10.24


def dehumanize(text: str | bytes) -> int:
    """Convert a human-readable size such as "1.7M" into an integer."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if not data:
        raise ValueError("zero-length reply")
    last = data[-1]
    if last > _LAST_DIGIT:
        multiplier = _MULTIPLIERS.get(chr(last), 0)
        mantissa = parse_pseudo_float(data[:-1].decode("utf-8", errors="replace"))
    else:
        multiplier = 1
        mantissa = _parse_float(data.decode("utf-8", errors="replace"))
    value = mantissa * multiplier
    if value < 0:
        raise ValueError(f"negative value: {data.decode('utf-8', errors='replace')!r}")
    try:
        return int(value)
    except (OverflowError, ValueError):
        raise ValueError(f"value out of range: {data!r}") from None


def dehumanize_signed(text: str) -> int:
    """Like dehumanize, but honours a leading minus sign."""
    value = dehumanize(text.removeprefix("-"))
    return -value if text.startswith("-") else value


def _last_field(line: str) -> str:
    return line.split()[-1]


def parse_priority_stats(line: str, stats: PriorityStats) -> PriorityStats:
    """Apply one line of priority_stats to stats and return it."""
    if line.startswith("Unused:"):
        stats.unused_percent = parse_uint(_last_field(line).removesuffix("%"), 10, 64)
    elif line.startswith("Metadata:"):
        stats.metadata_percent = parse_uint(_last_field(line).removesuffix("%"), 10, 64)
    return stats


def parse_writeback_rate_debug(
    line: str, stats: WritebackRateDebugStats
) -> WritebackRateDebugStats:
    """Apply one line of writeback_rate_debug to stats and return it."""
    if line.startswith("rate:"):
        stats.rate = dehumanize(_last_field(line).removesuffix("/sec"))
    elif line.startswith("dirty:"):
        stats.dirty = dehumanize(_last_field(line))
    elif line.startswith("target:"):
        stats.target = dehumanize(_last_field(line))
    elif line.startswith("proportional:"):
        stats.proportional = dehumanize_signed(_last_field(line))
    elif line.startswith("integral:"):
        stats.integral = dehumanize_signed(_last_field(line))
    elif line.startswith("change:"):
        stats.change = dehumanize_signed(_last_field(line).removesuffix("/sec"))
    elif line.startswith("next io:"):
        stats.next_io = parse_int(_last_field(line).removesuffix("ms"), 10, 64)
    return stats


def _read_value(directory: str, name: str) -> int:
    path = os.path.join(directory, name)
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as err:
        raise OSError(err.errno, f"failed to read: {path}", path) from err
    # Drop the trailing newline.
    return dehumanize(data[:-1])


def _read_lines(path: str) -> list[str]:
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return handle.read().splitlines()
    except OSError as err:
        raise OSError(err.errno, f"failed to read: {path}", path) from err


def _read_priority_stats(directory: str) -> PriorityStats:
    path = os.path.join(directory, "priority_stats")
    stats = PriorityStats()
    for line in _read_lines(path):
        try:
            parse_priority_stats(line, stats)
        except ValueError as err:
            raise ValueError(f"failed to parse path {path!r}: {err}") from err
    return stats


def _read_writeback_rate_debug(directory: str) -> WritebackRateDebugStats:
    path = os.path.join(directory, "writeback_rate_debug")
    stats = WritebackRateDebugStats()
    for line in _read_lines(path):
        try:
            parse_writeback_rate_debug(line, stats)
        except ValueError as err:
            raise ValueError(f"failed to parse path {path!r}: {err}") from err
    return stats


def _read_period(directory: str) -> PeriodStats:
    return PeriodStats(
        bypassed=_read_value(directory, "bypassed"),
        cache_bypass_hits=_read_value(directory, "cache_bypass_hits"),
        cache_bypass_misses=_read_value(directory, "cache_bypass_misses"),
        cache_hits=_read_value(directory, "cache_hits"),
        cache_miss_collisions=_read_value(directory, "cache_miss_collisions"),
        cache_misses=_read_value(directory, "cache_misses"),
        cache_readaheads=_read_value(directory, "cache_readaheads"),
    )


def _glob_dirs(base: str, pattern: str) -> list[str]:
    return sorted(glob.glob(os.path.join(glob.escape(base), pattern)))


def get_stats(uuid_path: str | os.PathLike[str], priority_stats: bool) -> Stats:
    """Collect the sysfs statistics of one bcache ID directory."""
    base = os.fspath(uuid_path)
    internal_dir = os.path.join(base, "internal")
    bcache = BcacheStats(
        average_key_size=_read_value(base, "average_key_size"),
        btree_cache_size=_read_value(base, "btree_cache_size"),
        cache_available_percent=_read_value(base, "cache_available_percent"),
        congested=_read_value(base, "congested"),
        root_usage_percent=_read_value(base, "root_usage_percent"),
        tree_depth=_read_value(base, "tree_depth"),
        internal=InternalStats(
            active_journal_entries=_read_value(internal_dir, "active_journal_entries"),
            btree_nodes=_read_value(internal_dir, "btree_nodes"),
            btree_read_average_duration_nanoseconds=_read_value(
                internal_dir, "btree_read_average_duration_us"
            ),
            cache_read_races=_read_value(internal_dir, "cache_read_races"),
        ),
        five_min=_read_period(os.path.join(base, "stats_five_minute")),
        total=_read_period(os.path.join(base, "stats_total")),
    )

    bdevs = []
    for bdev_dir in _glob_dirs(base, "bdev[0-9]*"):
        directory = os.path.join(base, os.path.basename(bdev_dir))
        dirty_data = _read_value(directory, "dirty_data")
        writeback = _read_writeback_rate_debug(directory)
        bdevs.append(
            BdevStats(
                name=os.path.basename(bdev_dir),
                dirty_data=dirty_data,
                writeback_rate_debug=writeback,
                five_min=_read_period(os.path.join(directory, "stats_five_minute")),
                total=_read_period(os.path.join(directory, "stats_total")),
            )
        )

    caches = []
    for cache_dir in _glob_dirs(base, "cache[0-9]*"):
        directory = os.path.join(base, os.path.basename(cache_dir))
        cache = CacheStats(
            name=os.path.basename(cache_dir),
            io_errors=_read_value(directory, "io_errors"),
            metadata_written=_read_value(directory, "metadata_written"),
            written=_read_value(directory, "written"),
        )
        if priority_stats:
            cache.priority = _read_priority_stats(directory)
        caches.append(cache)

    return Stats(bcache=bcache, bdevs=bdevs, caches=caches)


class BcacheFS:
    """The sys pseudo-filesystem, seen through its bcache statistics."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_SYS_MOUNT_POINT) -> None:
        mount_point = os.fspath(mount_point)
        if not mount_point.strip():
            mount_point = DEFAULT_SYS_MOUNT_POINT
        self.sys = Mount(mount_point)

    def __repr__(self) -> str:
        return f"BcacheFS({self.sys.mount_point!r})"

    def _stats(self, priority_stats: bool) -> list[Stats]:
        result = []
        for uuid_path in _glob_dirs(self.sys.path("fs", "bcache"), "*-*"):
            stats = get_stats(uuid_path, priority_stats)
            stats.name = os.path.basename(uuid_path)
            result.append(stats)
        return result

    def stats(self) -> list[Stats]:
        """Return full statistics for every bcache."""
        return self._stats(True)

    def stats_without_priority(self) -> list[Stats]:
        """Return statistics for every bcache, skipping the costly priority_stats."""
        return self._stats(False)