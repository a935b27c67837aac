import logging
import os
from dataclasses import MISSING, dataclass, fields

from dmount.exceptions import DiskException
from dmount.status import Status

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Configuration of the interactive session, loaded at runtime from
    environment variables."""

    # Mapping of `Config` attributes (keys) to the environment variables
    # they are read from (values).
    mapping = {
        "shell": "DMOUNT_SHELL",
        "private_flag": "DMOUNT_PRIVATE_FLAG",
        "cleanup_pause": "DMOUNT_CLEANUP_PAUSE",
    }

    shell: str = "fish"
    # Appended to the shell's arguments for encrypted volumes, keeps the
    # session out of the shared history
    private_flag: str = "--private"
    # Seconds to wait after a failed unmount so the warning can be read
    cleanup_pause: int = 3

    @classmethod
    def load(cls) -> "Config":
        """For each attribute, look it up from the environment."""
        config = {}

        for field in fields(cls):
            lookup = cls.mapping[field.name]
            logger.debug(f"Reading {lookup} from environment")
            value = os.environ.get(lookup)
            if not value or len(value) == 0:
                value = None

            if value is None and field.default != MISSING:
                logger.debug(f"Using default value for {lookup}")
                value = field.default

            if field.type is int:
                try:
                    value = int(value)
                except ValueError as ex:
                    raise DiskException(
                        f"{lookup} must be an integer, got {value!r}",
                        status=Status.ERROR_GENERIC,
                    ) from ex
            config[field.name] = value

        return cls(**config)
