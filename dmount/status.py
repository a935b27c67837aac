from enum import Enum


class Status(Enum):
    """
    Outcome categories for a dmount invocation. Every DiskException carries one
    of these, so the failing step can be told apart from the message alone.
    """

    PRIVILEGE_REQUIRED = "PRIVILEGE_REQUIRED"  # Not running with euid 0
    INVALID_ACTION = "INVALID_ACTION"  # No action, several actions, or unknown token
    INVALID_VOLUME = "INVALID_VOLUME"  # Unknown volume token

    DEVICE_NOT_FOUND = "DEVICE_NOT_FOUND"  # No by-uuid or mapper link for the device
    DEVICE_MISMATCH = "DEVICE_MISMATCH"  # Unlocked device is not the expected filesystem

    MOUNT_PATH_CREATION_FAILED = "MOUNT_PATH_CREATION_FAILED"
    ERROR_MOUNT = "ERROR_MOUNT"  # mount(2) failed, code is the errno
    ERROR_UNMOUNT = "ERROR_UNMOUNT"  # umount2(2) failed, code is the errno

    ERROR_UNLOCK = "ERROR_UNLOCK"  # cryptsetup open failed, code is the exit status
    ERROR_LOCK = "ERROR_LOCK"  # cryptsetup close failed, code is the exit status

    ERROR_SESSION_SPAWN = "ERROR_SESSION_SPAWN"

    ERROR_LOGGING = "ERROR_LOGGING"
    ERROR_GENERIC = "ERROR_GENERIC"
