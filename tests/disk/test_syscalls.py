import errno

import pytest

from dmount.disk import syscalls

_FLAGS = syscalls.MS_RELATIME | syscalls.MS_LAZYTIME


@pytest.fixture
def mock_libc(mocker):
    libc = mocker.patch.object(syscalls, "_libc")
    libc.mount.return_value = 0
    libc.umount2.return_value = 0
    return libc


def test_mount_arguments(mock_libc):
    syscalls.mount("/dev/sda1", "/mnt/zdani", "ext4", _FLAGS)

    args = mock_libc.mount.call_args[0]
    assert args[:3] == (b"/dev/sda1", b"/mnt/zdani", b"ext4")
    assert args[3].value == _FLAGS
    assert args[4].value is None


def test_mount_with_data_and_no_fstype(mock_libc):
    syscalls.mount("/dev/sda1", "/mnt/zdani", None, 0, "errors=remount-ro")

    args = mock_libc.mount.call_args[0]
    assert args[2].value is None
    assert args[4] == b"errors=remount-ro"


def test_mount_error_sets_errno(mock_libc, mocker):
    mock_libc.mount.return_value = -1
    mocker.patch("ctypes.get_errno", return_value=errno.EBUSY)

    with pytest.raises(OSError) as ex:
        syscalls.mount("/dev/sda1", "/mnt/zdani", "ext4", _FLAGS)

    assert ex.value.errno == errno.EBUSY
    assert "/mnt/zdani" in str(ex.value)


def test_umount_arguments(mock_libc):
    syscalls.umount("/mnt/zdani")

    args = mock_libc.umount2.call_args[0]
    assert args[0] == b"/mnt/zdani"
    assert args[1].value == 0


def test_umount_error_sets_errno(mock_libc, mocker):
    mock_libc.umount2.return_value = -1
    mocker.patch("ctypes.get_errno", return_value=errno.EINVAL)

    with pytest.raises(OSError) as ex:
        syscalls.umount("/mnt/zdani")

    assert ex.value.errno == errno.EINVAL


def test_check_error_passes_success_through():
    assert syscalls._check_error(0, "mount") == 0
