import logging
import os
import platform
import sys
from argparse import ArgumentParser
from logging.handlers import SysLogHandler
from typing import NoReturn, Optional

from dmount import __version__
from dmount.action import Action
from dmount.config import Config
from dmount.disk import Service
from dmount.disk.volume import Volume
from dmount.exceptions import DiskException
from dmount.session import Session
from dmount.status import Status

logger = logging.getLogger(__name__)


def entrypoint(argv: Optional[list[str]] = None) -> NoReturn:
    """
    Entrypoint method (Note: a method is required for setuptools).
    Check privileges, parse arguments, configure logging and run the
    requested action.

    Exits 0 on success. Any failure is reported as a single line on stderr
    and exits 1.
    """
    try:
        if os.geteuid() != 0:
            raise DiskException(
                "must be run as root to (un)mount disks and open/close encryption",
                status=Status.PRIVILEGE_REQUIRED,
            )

        args = arg_parser().parse_args(argv)
        action, volume = _read_action_and_volume(args)

        _configure_logging(args.verbose)
        logger.debug(f"Starting dmount {__version__}: {action.name} {volume.name_on_disk}")

        _run(action, volume)

    except DiskException as ex:
        logger.debug(f"Exiting with {ex.status.value if ex.status else None}", exc_info=ex)
        _exit_with_error(ex)

    except Exception as ex:
        logger.exception("Encountered unexpected exception, exiting")
        _exit_with_error(DiskException(str(ex), status=Status.ERROR_GENERIC))

    sys.exit(0)


def arg_parser() -> ArgumentParser:
    parser = ArgumentParser("d", description="Manage disk mounting")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("-m", "--mount", action="store_true", help="mount the specified disk")
    actions.add_argument(
        "-u", "--unmount", action="store_true", help="unmount the specified disk"
    )
    actions.add_argument(
        "-c",
        "--cd",
        action="store_true",
        help="enter a subshell session within the specified disk. "
        "the disk will be unmounted on exit.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="show debug output on stderr"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "tokens",
        nargs="+",
        metavar="TOKEN",
        help="action token (m, u or c) if no flag is given, followed by the disk: "
        + Volume.describe_tokens(),
    )
    return parser


def _read_action_and_volume(args) -> tuple[Action, Volume]:  # type: ignore [no-untyped-def]
    """
    Accept either `-m DISK` or `m DISK`.
    """
    action = Action.from_flags(args.mount, args.unmount, args.cd)
    tokens = args.tokens

    if action is None:
        if len(tokens) == 1:
            if tokens[0] in {a.value for a in Action}:
                raise DiskException(
                    f"no disk specified. valid disks are {Volume.describe_tokens()}",
                    status=Status.INVALID_VOLUME,
                )
            raise DiskException(
                "no action specified. expected -m, -u, or -c.", status=Status.INVALID_ACTION
            )
        if len(tokens) > 2:
            raise DiskException(
                f"expected an action and a disk, got {' '.join(tokens)!r}.",
                status=Status.INVALID_ACTION,
            )
        return Action.from_token(tokens[0]), Volume.from_token(tokens[1])

    if len(tokens) != 1:
        raise DiskException(
            f"expected a single disk after the action flag, got {' '.join(tokens)!r}.",
            status=Status.INVALID_ACTION,
        )
    return action, Volume.from_token(tokens[0])


def _run(action: Action, volume: Volume) -> None:
    service = Service()

    if action is Action.MOUNT:
        result = service.do_mount(volume)
        logger.info(f"mounted {volume.name_on_disk} at {result.mountpoint!r}.")
    elif action is Action.UNMOUNT:
        service.do_unmount(volume)
        logger.info(f"unmounted {volume.name_on_disk}.")
    elif action is Action.CD:
        Session(service, Config.load()).interactive_session(volume)
    else:
        # Unreachable
        raise DiskException(f"unreachable: unknown action: {action}")


def _configure_logging(verbose: bool = False) -> None:
    """
    All logging related settings are set up by this function.

    Status lines go to stderr; everything goes to syslog when it is available.
    """
    try:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("d: %(message)s"))
        console.setLevel(logging.DEBUG if verbose else logging.INFO)

        # set up primary log
        log = logging.getLogger()
        log.setLevel(logging.DEBUG)
        log.addHandler(console)

        # For syslog handler
        if platform.system() != "Linux":  # pragma: no cover
            syslog_file = "/var/run/syslog"
        else:
            syslog_file = "/dev/log"

        if os.path.exists(syslog_file):
            log_fmt = (
                "%(asctime)s - %(name)s:%(lineno)d(%(funcName)s) "
                "%(levelname)s: %(message)s"
            )
            sysloghandler = SysLogHandler(address=syslog_file)
            sysloghandler.setFormatter(logging.Formatter(log_fmt))
            # add the secondary logger
            log.addHandler(sysloghandler)
    except Exception as ex:
        raise DiskException(status=Status.ERROR_LOGGING) from ex


def _exit_with_error(ex: DiskException) -> NoReturn:
    """
    Write a single-line error to stderr and exit with a non-zero status.
    """
    message = " ".join(str(ex).splitlines())
    sys.stderr.write(f"d: error: {message}\n")
    sys.stderr.flush()
    sys.exit(1)
