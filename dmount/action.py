from enum import Enum
from typing import Optional

from dmount.exceptions import DiskException
from dmount.status import Status


class Action(Enum):
    """
    Supported actions.

    Values are the positional tokens accepted on the command line; the same
    letters are used for the -m, -u and -c flags.
    """

    MOUNT = "m"
    UNMOUNT = "u"
    CD = "c"

    @classmethod
    def from_token(cls, token: str) -> "Action":
        try:
            return cls(token)
        except ValueError:
            valid = ", ".join(action.value for action in cls)
            raise DiskException(
                f"unknown action {token!r}. valid actions are {valid}.",
                status=Status.INVALID_ACTION,
            ) from None

    @classmethod
    def from_flags(cls, mount: bool, unmount: bool, cd: bool) -> Optional["Action"]:
        """
        Return the action selected by flags, or None if no flag was given.

        On the command line argparse's mutually exclusive group already rejects
        more than one flag; the check here covers direct callers.
        """
        selected = [
            action
            for action, flag in ((cls.MOUNT, mount), (cls.UNMOUNT, unmount), (cls.CD, cd))
            if flag
        ]
        if len(selected) > 1:
            raise DiskException(
                "multiple actions specified. only one is allowed.",
                status=Status.INVALID_ACTION,
            )
        return selected[0] if selected else None
