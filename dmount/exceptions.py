from typing import Optional

from dmount.status import Status


class DiskException(Exception):
    """
    Base class for exceptions encountered while handling a volume.
    In order to make use of the additional attributes `status` and `code`,
    pass them as keyword arguments when raising DiskException.

    `code` is the errno for syscall failures and the exit status for
    failures of an external tool.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args)
        self.status: Optional[Status] = kwargs.get("status")
        self.code: Optional[int] = kwargs.get("code")

    @property
    def message(self) -> str:
        """
        The message without the trailing code, falling back to the status value.
        """
        message = super().__str__()
        if not message and self.status is not None:
            message = self.status.value
        return message

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (code {self.code})"
        return self.message
