import pytest

from dmount.disk import resolver
from dmount.exceptions import DiskException
from dmount.status import Status

_UUID = "9972ca08-32d9-42da-9418-1afa4a7f6966"


@pytest.fixture
def by_uuid(tmp_path, mocker):
    registry = tmp_path / "by-uuid"
    registry.mkdir()
    mocker.patch.object(resolver, "_BY_UUID_PREFIX", f"{registry}/")
    return registry


@pytest.fixture
def mapper(tmp_path, mocker):
    registry = tmp_path / "mapper"
    registry.mkdir()
    mocker.patch.object(resolver, "_DEVMAPPER_PREFIX", f"{registry}/")
    return registry


def test_dev_path_for_uuid_follows_symlink(tmp_path, by_uuid):
    device = tmp_path / "sda1"
    device.touch()
    (by_uuid / _UUID).symlink_to("../sda1")

    assert resolver.dev_path_for_uuid(_UUID) == str(device.resolve())


def test_dev_path_for_uuid_missing(by_uuid):
    with pytest.raises(DiskException) as ex:
        resolver.dev_path_for_uuid(_UUID)

    assert ex.value.status == Status.DEVICE_NOT_FOUND


def test_dev_path_for_uuid_dangling(by_uuid):
    (by_uuid / _UUID).symlink_to("../gone")

    with pytest.raises(DiskException) as ex:
        resolver.dev_path_for_uuid(_UUID)

    assert ex.value.status == Status.DEVICE_NOT_FOUND


def test_dev_path_for_mapping(tmp_path, mapper):
    device = tmp_path / "dm-0"
    device.touch()
    (mapper / "abc-sivydatni").symlink_to("../dm-0")

    assert resolver.dev_path_for_mapping("abc-sivydatni") == str(device.resolve())
