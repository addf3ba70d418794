"""Parsing of free memory fragment counts from /proc/buddyinfo."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BuddyInfo:
    """Free fragments of each size 2**n * PAGE_SIZE for one node and zone."""

    node: str
    zone: str
    sizes: list[float] = field(default_factory=list)


def parse_buddy_info(text: str) -> list[BuddyInfo]:
    """Parse the contents of /proc/buddyinfo."""
    result = []
    bucket_count = None
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 4:
            raise ValueError("invalid number of fields when parsing buddyinfo")

        node = parts[1].rstrip(",")
        zone = parts[3].rstrip(",")
        values = parts[4:]

        if bucket_count is None:
            bucket_count = len(values)
        elif bucket_count != len(values):
            raise ValueError(
                "mismatch in number of buddyinfo buckets, "
                f"previous count {bucket_count}, new count {len(values)}"
            )

        try:
            sizes = [float(value) for value in values]
        except ValueError as err:
            raise ValueError(f"invalid value in buddyinfo: {err}") from err

        result.append(BuddyInfo(node=node, zone=zone, sizes=sizes))
    return result