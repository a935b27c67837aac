import logging
from pathlib import Path

from dmount.exceptions import DiskException
from dmount.status import Status

logger = logging.getLogger(__name__)

_BY_UUID_PREFIX = "/dev/disk/by-uuid/"
_DEVMAPPER_PREFIX = "/dev/mapper/"


def dev_path_for_uuid(uuid: str) -> str:
    """
    Return the canonical device path registered under /dev/disk/by-uuid/.

    Device names change between boots and on hotplug, so this is looked up
    again on every call. Raises DiskException if the link is missing or
    dangling.
    """
    return _resolve(f"{_BY_UUID_PREFIX}{uuid}")


def dev_path_for_mapping(session_name: str) -> str:
    """
    Return the canonical path of an open device-mapper mapping (/dev/dm-X).
    """
    return _resolve(f"{_DEVMAPPER_PREFIX}{session_name}")


def _resolve(link: str) -> str:
    try:
        device = Path(link).resolve(strict=True)
    except (OSError, RuntimeError) as ex:
        logger.debug(f"Could not resolve {link}: {ex}")
        raise DiskException(
            f"getting canonical device for {link}", status=Status.DEVICE_NOT_FOUND
        ) from ex

    logger.debug(f"{link} resolves to {device}")
    return str(device)
