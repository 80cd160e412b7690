# procparse

Pure parsers for the text formats the Linux kernel exposes under `/proc`.
Each parser takes the contents of a file as a string and returns plain Python
objects: dataclasses, enums and flag types. The package never opens `/proc`
itself, so it works on captured data, in tests, or on any platform.

It has no dependencies outside the standard library.

## Installation

```
pip install procparse
```

## What it parses

| File | Function or class |
| --- | --- |
| `/proc/<pid>/stat` | `procparse.stat.parse_stat` |
| `/proc/<pid>/status` | `procparse.status.parse_status` |
| `/proc/<pid>/statm` | `procparse.process_io.parse_statm` |
| `/proc/<pid>/io` | `procparse.process_io.parse_io` |
| `/proc/<pid>/fd/*` link targets | `procparse.process_io.parse_fd_target` |
| `/proc/<pid>/maps`, `smaps` | `procparse.maps.parse_memory_maps` |
| `/proc/<pid>/smaps_rollup` | `procparse.maps.parse_smaps_rollup` |
| `/proc/<pid>/mountinfo` | `procparse.mountinfo.parse_mountinfo` |
| `/proc/<pid>/mountstats` | `procparse.mountstats.parse_mountstats` |
| `/proc/<pid>/limits` | `procparse.limit.parse_limits` |
| `/proc/<pid>/schedstat` | `procparse.schedstat.parse_schedstat` |
| `/proc/uptime` | `procparse.uptime.parse_uptime` |
| `/proc/sysvipc/shm` | `procparse.sysvipc_shm.parse_sysvipc_shm` |
| `/proc/sys/kernel/osrelease` | `procparse.kernel.Version.parse` |
| `/proc/sys/kernel/ostype` | `procparse.kernel.KernelType.parse` |
| `/proc/sys/kernel/version` | `procparse.kernel.BuildInfo.parse` |
| `/proc/sys/kernel/sem` | `procparse.kernel.SemaphoreLimits.parse` |
| `/proc/sys/kernel/sysrq` | `procparse.kernel.SysRq.parse` |

Supporting types:

- `procparse.flags`: `StatFlags`, `CoredumpFlags` and `ProcState`.
- `procparse.namespaces.Namespace`: namespaces compare equal when their inode
  number and device ID match.
- `procparse.kernel.AllowedFunctions`, and the `THREADS_MIN` / `THREADS_MAX`
  bounds for `/proc/sys/kernel/threads-max`.

`parse_stat` and `parse_uptime` also accept `bytes`; invalid UTF-8 is
replaced.

## Examples

```python
from pathlib import Path

from procparse.kernel import Version
from procparse.stat import parse_stat
from procparse.uptime import parse_uptime

stat = parse_stat(Path("/proc/self/stat").read_text())
print(stat.pid, stat.comm, stat.proc_state())
print("RSS bytes:", stat.rss_bytes(4096))
print("tty (major, minor):", stat.tty_device())

uptime = parse_uptime("2578790.61 1999230.98\n")
print(uptime.uptime_duration())  # 29 days, 20:19:50.610000

assert Version.parse("3.16.0-6-amd64") == Version(3, 16, 0)
```

Memory maps, including the extra fields found in `smaps`:

```python
from pathlib import Path

from procparse.maps import parse_memory_maps

for mapping in parse_memory_maps(Path("/proc/self/smaps").read_text()):
    print(hex(mapping.address[0]), mapping.perms.as_str(), mapping.pathname.kind)
    print("  Rss bytes:", mapping.extension.map.get("Rss"))
```

Mount information:

```python
from procparse.mountinfo import MountInfo

info = MountInfo.from_line(
    "25 0 8:1 / / rw,relatime shared:1 - ext4 /dev/sda1 rw,errors=remount-ro"
)
print(info.fs_type, info.mount_source, info.super_options["errors"])
```

## Errors

Malformed input raises `procparse.common.ProcError`, a subclass of
`ValueError`, or one of its subclasses: `IncompleteError` when a required
field is missing, `InternalError` when a value cannot be interpreted.
`procparse.common.parse_int` is the strict integer parser the modules share.

## What it does not do

- It does not read `/proc`, list processes or resolve file descriptors; you
  supply the file contents.
- It does not decode the binary entries of `/proc/<pid>/pagemap`, and has no
  type for the values written to `/proc/<pid>/clear_refs`.
- It provides no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```