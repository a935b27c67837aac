import errno
import logging
import os
import subprocess

from dmount.exceptions import DiskException
from dmount.status import Status

from . import syscalls
from .resolver import dev_path_for_mapping, dev_path_for_uuid
from .volume import MountResult

logger = logging.getLogger(__name__)

_MOUNT_ROOT = "/mnt"
_MOUNT_FLAGS = syscalls.MS_RELATIME | syscalls.MS_LAZYTIME
_CRYPTSETUP = "cryptsetup"
# Exit status of `cryptsetup status` for a mapping that is not open
_CRYPTSETUP_INACTIVE = 4


def mount_path_for_name(volume_name: str) -> str:
    return os.path.join(_MOUNT_ROOT, volume_name)


def opened_name_for_encrypted(outer_uuid: str, volume_name: str) -> str:
    """
    Name of the device-mapper mapping for an unlocked volume. Derived only from
    its arguments so that every invocation targets the same mapping.
    """
    return f"{outer_uuid}-{volume_name}"


class CLI:
    """
    A Python wrapper for the syscalls and shell commands required to
    attach, detach, unlock and lock volumes.

    Every operation may be called again on partially set up state: the
    known-benign failures (already mounted, not mounted, mapping already open,
    mapping already closed) are treated as success.

    CLI callers must handle DiskException.
    """

    def mount_volume(self, uuid: str, volume_name: str, filesystem: str) -> MountResult:
        """
        Mount the filesystem identified by `uuid` at the volume's mount point.
        """
        return self._mount_device(dev_path_for_uuid(uuid), volume_name, filesystem)

    def mount_mapped(self, session_name: str, volume_name: str, filesystem: str) -> MountResult:
        """
        Mount the plaintext device of an open mapping at the volume's mount point.
        """
        return self._mount_device(dev_path_for_mapping(session_name), volume_name, filesystem)

    def _mount_device(self, device: str, volume_name: str, filesystem: str) -> MountResult:
        mountpoint = mount_path_for_name(volume_name)

        if not os.path.exists(mountpoint):
            logger.info(f"mount path ({mountpoint!r}) does not exist, trying to create it.")
            try:
                os.makedirs(mountpoint, exist_ok=True)
            except OSError as ex:
                raise DiskException(
                    f"creating mount path {mountpoint!r}",
                    status=Status.MOUNT_PATH_CREATION_FAILED,
                    code=ex.errno,
                ) from ex

        logger.debug(f"Mounting {device} ({filesystem}) at {mountpoint}")
        was_already_mounted = False
        try:
            syscalls.mount(device, mountpoint, filesystem, _MOUNT_FLAGS)
        except OSError as ex:
            if ex.errno != errno.EBUSY:
                raise DiskException(
                    f"making mount syscall for {mountpoint!r}",
                    status=Status.ERROR_MOUNT,
                    code=ex.errno,
                ) from ex
            logger.info("mount returned EBUSY, assuming already mounted.")
            was_already_mounted = True

        return MountResult(mountpoint=mountpoint, was_already_mounted=was_already_mounted)

    def unmount_volume(self, volume_name: str) -> None:
        """
        Unmount the volume's mount point. A missing mount point means the volume
        was never mounted, so there is nothing to do.
        """
        mountpoint = mount_path_for_name(volume_name)

        if not os.path.exists(mountpoint):
            logger.debug(f"{mountpoint} does not exist, nothing to unmount")
            return

        try:
            syscalls.umount(mountpoint)
        except OSError as ex:
            if ex.errno != errno.EINVAL:
                raise DiskException(
                    f"making umount syscall for {mountpoint!r}",
                    status=Status.ERROR_UNMOUNT,
                    code=ex.errno,
                ) from ex
            logger.info("umount returned EINVAL, assuming already unmounted.")

    def _cryptsetup(self, *args: str, status: Status, quiet: bool = False) -> None:
        """
        Run cryptsetup. Only the exit status is looked at; a non-zero exit raises
        DiskException with `status` and the exit status as code.
        """
        output = subprocess.DEVNULL if quiet else None
        try:
            subprocess.check_call([_CRYPTSETUP, *args], stdout=output, stderr=output)
        except subprocess.CalledProcessError as ex:
            raise DiskException(
                f"cryptsetup exited with status {ex.returncode}",
                status=status,
                code=ex.returncode,
            ) from ex
        except OSError as ex:
            raise DiskException(
                f"could not run {_CRYPTSETUP}: {ex.strerror}", status=status
            ) from ex

    def is_mapping_active(self, session_name: str, status: Status = Status.ERROR_GENERIC) -> bool:
        """
        Ask cryptsetup whether a mapping is open.

        Only exit status 4 (device inactive) means the mapping is closed; any
        other failure raises DiskException with `status`.
        """
        try:
            self._cryptsetup("status", session_name, status=status, quiet=True)
        except DiskException as ex:
            if ex.code != _CRYPTSETUP_INACTIVE:
                raise
            return False
        return True

    def open_encrypted(self, outer_uuid: str, volume_name: str) -> None:
        """
        Unlock the LUKS device. cryptsetup prompts for the passphrase on the
        inherited terminal.

        If the mapping is already open nothing is run, so no passphrase is asked for.
        """
        session_name = opened_name_for_encrypted(outer_uuid, volume_name)

        if self.is_mapping_active(session_name, Status.ERROR_UNLOCK):
            logger.info(f"{session_name} is already open, not unlocking.")
            return

        device = dev_path_for_uuid(outer_uuid)
        logger.debug(f"Unlocking {device} as {session_name}")
        self._cryptsetup("open", device, session_name, status=Status.ERROR_UNLOCK)

    def close_encrypted(self, outer_uuid: str, volume_name: str) -> None:
        """
        Lock the LUKS device. A mapping that is not open is left alone.

        The filesystem on the mapping must already be unmounted.
        """
        session_name = opened_name_for_encrypted(outer_uuid, volume_name)

        if not self.is_mapping_active(session_name, Status.ERROR_LOCK):
            logger.info(f"{session_name} is not open, nothing to close.")
            return

        logger.debug(f"Closing {session_name}")
        self._cryptsetup("close", session_name, status=Status.ERROR_LOCK)

    def verify_inner_device(self, session_name: str, inner_uuid: str) -> None:
        """
        Check that the unlocked mapping carries the filesystem we expect.

        udev may not have created the by-uuid link yet right after unlocking;
        in that case the check is skipped.
        """
        mapped = dev_path_for_mapping(session_name)
        try:
            expected = dev_path_for_uuid(inner_uuid)
        except DiskException:
            logger.debug(f"No by-uuid link for {inner_uuid} yet, skipping check")
            return

        if mapped != expected:
            logger.error(f"{session_name} is {mapped}, but {inner_uuid} is {expected}")
            raise DiskException(
                f"unlocked device {mapped} does not carry filesystem {inner_uuid}",
                status=Status.DEVICE_MISMATCH,
            )
