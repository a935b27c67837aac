import logging
import os
import subprocess
import sys
import time

from dmount.config import Config
from dmount.disk import Service
from dmount.disk.volume import Volume
from dmount.exceptions import DiskException
from dmount.status import Status

logger = logging.getLogger(__name__)


def invoking_user() -> tuple[int, int]:
    """
    Return the uid and gid of the user who ran dmount.

    Under sudo the real ids are root's, so the ids sudo records are preferred.
    """
    uid = os.environ.get("SUDO_UID")
    gid = os.environ.get("SUDO_GID")
    if uid and gid:
        return int(uid), int(gid)
    return os.getuid(), os.getgid()


class Session:
    """
    Mount a volume, run an interactive shell inside it as the invoking user,
    and unmount it again once the shell exits.
    """

    def __init__(self, service: Service, config: Config):
        self.service = service
        self.config = config

    def interactive_session(self, volume: Volume) -> None:
        result = self.service.do_mount(volume)

        try:
            self._run_shell(volume, result.mountpoint)
        finally:
            self._cleanup(volume, result.was_already_mounted)

    def _shell_command(self, volume: Volume) -> list[str]:
        command = [self.config.shell]
        if volume.is_encrypted:
            command.append(self.config.private_flag)
        return command

    def _run_shell(self, volume: Volume, mountpoint: str) -> None:
        """
        Block until the shell exits. Its exit status is not ours to report.
        """
        command = self._shell_command(volume)
        uid, gid = invoking_user()

        logger.info("entering subshell. stay safe, friend.")
        logger.debug(f"Running {command} in {mountpoint} as {uid}:{gid}")
        try:
            shell = subprocess.Popen(
                command, cwd=mountpoint, user=uid, group=gid, extra_groups=[]
            )
        except (OSError, subprocess.SubprocessError) as ex:
            raise DiskException(
                f"spawning sub-shell {command[0]!r}: {ex}", status=Status.ERROR_SESSION_SPAWN
            ) from ex

        returncode = shell.wait()
        logger.debug(f"Sub-shell exited with status {returncode}")

    def _cleanup(self, volume: Volume, was_already_mounted: bool) -> None:
        """
        Unmount unless someone else had the volume mounted before us. A failure
        here is only a warning: the session itself already happened.
        """
        if was_already_mounted:
            logger.info("disk was already mounted; not unmounting.")
            return

        logger.info("cleaning up; unmounting.")
        try:
            self.service.do_unmount(volume)
        except DiskException as ex:
            logger.warning(f"could not clean up {volume.name_on_disk}: {ex}")
            logger.warning(
                f"the disk may still be busy; run `d -u {volume.value}` once it is free."
            )
            if sys.stdin.isatty():
                time.sleep(self.config.cleanup_pause)
