import logging
from collections.abc import Generator
from contextlib import contextmanager

from dmount.exceptions import DiskException

from .cli import CLI, opened_name_for_encrypted
from .volume import Encrypted, MountResult, Plain, Volume

logger = logging.getLogger(__name__)


@contextmanager
def _step(description: str) -> Generator:
    """
    Prefix any DiskException raised inside the block with the step that failed.
    Status and code are kept.
    """
    try:
        yield
    except DiskException as ex:
        raise DiskException(
            f"{description}: {ex.message}", status=ex.status, code=ex.code
        ) from ex


class Service:
    """
    Mount and unmount volumes, unlocking and locking encrypted ones around
    the filesystem mount. This is the "API" portion of dmount.

    Nothing is retried or rolled back: every CLI operation is safe to repeat,
    so a failed call can simply be run again.
    """

    def __init__(self, cli: CLI = CLI()):
        self.cli = cli

    def do_mount(self, volume: Volume) -> MountResult:
        name = volume.name_on_disk
        mountable = volume.mountable

        if isinstance(mountable, Plain):
            with _step("mounting"):
                return self.cli.mount_volume(mountable.uuid, name, volume.filesystem)

        elif isinstance(mountable, Encrypted):
            with _step("opening encrypted device"):
                self.cli.open_encrypted(mountable.outer_uuid, name)

            session_name = opened_name_for_encrypted(mountable.outer_uuid, name)
            with _step("mounting"):
                self.cli.verify_inner_device(session_name, mountable.inner_uuid)
                return self.cli.mount_mapped(session_name, name, volume.filesystem)

        # Unreachable
        raise DiskException(f"unreachable: unknown mountable for {volume}: {mountable}")

    def do_unmount(self, volume: Volume) -> None:
        name = volume.name_on_disk
        mountable = volume.mountable

        if isinstance(mountable, Plain):
            with _step("unmounting"):
                self.cli.unmount_volume(name)

        elif isinstance(mountable, Encrypted):
            # The filesystem has to be detached first, cryptsetup refuses to
            # close a mapping that is in use.
            try:
                with _step("unmounting"):
                    self.cli.unmount_volume(name)
            except DiskException as unmount_error:
                logger.error(f"Could not unmount {name}, closing encrypted device anyway")
                try:
                    with _step("closing encrypted device"):
                        self.cli.close_encrypted(mountable.outer_uuid, name)
                except DiskException as ex:
                    logger.error(ex)
                raise unmount_error

            with _step("closing encrypted device"):
                self.cli.close_encrypted(mountable.outer_uuid, name)

        else:
            # Unreachable
            raise DiskException(f"unreachable: unknown mountable for {volume}: {mountable}")
