# procfs

Parsers for the Linux `/proc` and `/sys` pseudo-filesystems. Parsed values
come back as plain dataclasses. Every reader takes the directory to read
from, so it works the same on a live `/proc` or `/sys` and on a fixture tree
laid out like one. The package has no dependencies beyond the standard
library.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Reading /proc

`procfs.procfs.ProcFS` wraps a proc mount point. Creating one checks that the
directory exists. A missing path raises `OSError`, and a path that is not a
directory raises `NotADirectoryError`.

```python
from procfs.procfs import ProcFS

fs = ProcFS.default()                 # /proc
# fs = ProcFS("/some/fixtures/proc")

print(fs.cmdline())                   # kernel command line, split on whitespace

for entry in fs.gather_arp_entries():
    print(entry.ip_addr, entry.hw_addr, entry.device, entry.is_complete())

for zone in fs.buddy_info():
    print(zone.node, zone.zone, zone.sizes)

cpus = fs.cpu_info()                  # list[CPUInfo], parsed for this machine
algorithms = fs.crypto()              # list[Crypto]
fscache = fs.fscacheinfo()            # Fscacheinfo
totals = fs.ipvs_stats()              # IPVSStats
backends = fs.ipvs_backend_status()   # list[IPVSBackendStatus]
```

Each method reads one file:

| Method | File |
| --- | --- |
| `gather_arp_entries` | `net/arp` |
| `buddy_info` | `buddyinfo` |
| `cmdline` | `cmdline` |
| `cpu_info` | `cpuinfo` |
| `crypto` | `crypto` |
| `fscacheinfo` | `fs/fscache/stats` |
| `ipvs_stats` | `net/ip_vs_stats` |
| `ipvs_backend_status` | `net/ip_vs` |

A file that cannot be read raises `OSError`. A malformed file raises
`ValueError`.

## Parsing text directly

Every `/proc` parser is also available as a plain function that takes the
file's contents:

```python
from procfs.arp import parse_arp_entries, ATF
from procfs.buddyinfo import parse_buddy_info
from procfs.cpuinfo import (
    parse_cpu_info,
    parse_cpu_info_x86,
    parse_cpu_info_arm,
    parse_cpu_info_s390x,
    parse_cpu_info_mips,
    parse_cpu_info_ppc,
    parse_cpu_info_riscv,
)
from procfs.crypto import parse_crypto
from procfs.fscache import parse_fscacheinfo
from procfs.ipvs import parse_ipvs_stats, parse_ipvs_backend_status, parse_ip_port
```

`parse_cpu_info(data, machine)` picks the parser for a machine name, for
example `"x86_64"`, `"aarch64"`, `"s390x"`, `"mips"`, `"ppc64le"` or
`"riscv64"`. Without a machine name it uses `platform.machine()`. Any other
machine raises `ValueError`.

`parse_ip_port` decodes the address form used in `/proc/net/ip_vs`. It
accepts a hex IPv4 address with a port, such as `"C0A80016:0CEA"`, or a
bracketed IPv6 address with a port. It returns an `ipaddress` object and an
integer port.

In `Crypto`, numeric values missing from an entry are `None`. The entry's
`async` value is stored as `async_`.

## Reading /sys

```python
from procfs.bcache import BcacheFS, dehumanize, dehumanize_signed
from procfs.btrfs import BtrfsFS
from procfs.blockdevice import BlockDeviceFS

for fs_stats in BtrfsFS("/sys").stats():
    print(fs_stats.uuid, fs_stats.label, len(fs_stats.devices))
    print(fs_stats.allocation.data.total_bytes)

for cache in BcacheFS("/sys").stats_without_priority():
    print(cache.name, cache.bcache.average_key_size, len(cache.bdevs))

block = BlockDeviceFS("/proc", "/sys")
for disk in block.proc_diskstats():
    print(disk.device_name, disk.read_ios, disk.write_ios, disk.io_stats_count)
for device in block.sys_block_devices():
    stats, count = block.sys_block_device_stat(device)
    queue = block.sys_block_device_queue_stats(device)
    print(device, count, queue.scheduler_current, queue.scheduler_list)
```

Notes on the `/sys` readers:

- `BtrfsFS`, `BcacheFS` and `BlockDeviceFS` fall back to the default mount
  points when they are given an empty path.
- `BcacheFS.stats()` also reads each cache device's `priority_stats` file,
  which is costly. `stats_without_priority()` skips that file.
- `procfs.btrfs.get_stats(path)` and `procfs.bcache.get_stats(path,
  priority_stats)` read a single filesystem or cache directory directly.
- `dehumanize`, `dehumanize_signed` and `parse_pseudo_float` in
  `procfs.bcache` decode the human-readable sizes that bcache writes, such
  as `"1.7M"` or `"-251.6k"`.

## Helpers

- `procfs.mount.Mount` checks a mount point and joins paths onto it.
- `procfs.util` holds the file readers and number parsers that the other
  modules use:
  - `read_file_no_stat` reads at most 512 KiB.
  - `sys_read_file` does a single read of at most 128 bytes.
  - `read_uint_from_file` and `read_int_from_file` each read one integer.
  - `ValueParser` parses integers with a `0x`, `0o` or `0b` prefix, or with
    a leading `0` for octal.

## What the package does not cover

It reads only the system-wide files listed above. It has no readers for
per-process data under `/proc/<pid>`, nor for other system files such as
`/proc/stat` or `/proc/meminfo`. It is a library only and installs no
command-line program.

## Running the tests

```
pytest
```