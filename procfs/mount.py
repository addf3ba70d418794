"""Mount points of kernel pseudo-filesystems such as /proc and /sys."""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass

DEFAULT_PROC_MOUNT_POINT = "/proc"
DEFAULT_SYS_MOUNT_POINT = "/sys"
DEFAULT_CONFIGFS_MOUNT_POINT = "/sys/kernel/config"


@dataclass(frozen=True)
class Mount:
    """A pseudo-filesystem mounted at an existing directory."""

    mount_point: str

    def __post_init__(self) -> None:
        mount_point = os.fspath(self.mount_point)
        object.__setattr__(self, "mount_point", mount_point)
        try:
            info = os.stat(mount_point)
        except OSError as err:
            raise OSError(
                err.errno, f"could not read {mount_point!r}: {err.strerror}", mount_point
            ) from err
        if not os.path.isdir(mount_point) or not _is_dir_mode(info.st_mode):
            raise NotADirectoryError(
                errno.ENOTDIR, f"mount point {mount_point!r} is not a directory", mount_point
            )

    def path(self, *args: str) -> str:
        """Join path elements onto the mount point and normalise the result."""
        return os.path.normpath(os.path.join(self.mount_point, *args))

    def __fspath__(self) -> str:
        return self.mount_point


def _is_dir_mode(mode: int) -> bool:
    import stat

    return stat.S_ISDIR(mode)