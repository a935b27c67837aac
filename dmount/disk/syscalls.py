"""
ctypes bindings for the classic mount(2) and umount2(2) calls.

Failures raise OSError with the errno set, so callers can tell the benign
cases (EBUSY, EINVAL) apart from real errors.
"""

import ctypes
import ctypes.util
import os
from typing import Optional

_libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)

# Mount flags from <sys/mount.h>
MS_RELATIME = 1 << 21
MS_LAZYTIME = 1 << 25


def _check_error(ret: int, msg: str) -> int:
    """Check the return value and raise OSError on failure."""
    if ret < 0:
        err = ctypes.get_errno()
        raise OSError(err, f"{msg}: {os.strerror(err)}")
    return ret


def mount(
    source: str,
    target: str,
    fstype: Optional[str],
    flags: int,
    data: Optional[str] = None,
) -> None:
    """
    Attach the filesystem on `source` at `target`.

    Args:
        source: Block device path
        target: Mount point path
        fstype: Filesystem type or None
        flags: Mount flags (e.g., MS_RELATIME)
        data: Mount options string or None
    """
    ret = _libc.mount(
        source.encode("utf-8"),
        target.encode("utf-8"),
        fstype.encode("utf-8") if fstype else ctypes.c_char_p(None),
        ctypes.c_ulong(flags),
        data.encode("utf-8") if data else ctypes.c_char_p(None),
    )
    _check_error(ret, f"mount({source}, {target})")


def umount(target: str, flags: int = 0) -> None:
    """
    Detach the filesystem mounted at `target`.

    Args:
        target: Mount point path
        flags: Unmount flags (MNT_FORCE, MNT_DETACH, etc.)
    """
    ret = _libc.umount2(target.encode("utf-8"), ctypes.c_int(flags))
    _check_error(ret, f"umount({target})")
