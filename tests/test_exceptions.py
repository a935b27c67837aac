from dmount.exceptions import DiskException
from dmount.status import Status


def test_exception_attributes():
    ex = DiskException("making mount syscall", status=Status.ERROR_MOUNT, code=19)

    assert ex.status == Status.ERROR_MOUNT
    assert ex.code == 19
    assert ex.message == "making mount syscall"
    assert str(ex) == "making mount syscall (code 19)"


def test_exception_without_message_uses_status():
    ex = DiskException(status=Status.DEVICE_NOT_FOUND)

    assert str(ex) == "DEVICE_NOT_FOUND"
    assert ex.code is None


def test_exception_without_anything():
    ex = DiskException()

    assert ex.status is None
    assert str(ex) == ""
