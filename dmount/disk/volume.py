from dataclasses import dataclass
from enum import Enum

from dmount.exceptions import DiskException
from dmount.status import Status


@dataclass(frozen=True)
class Plain:
    """
    A filesystem placed directly on a block device.
    """

    uuid: str


@dataclass(frozen=True)
class Encrypted:
    """
    A LUKS device. Once unlocked it exposes a plaintext device that carries
    the filesystem; `inner_uuid` is the UUID of that filesystem and is used to
    check that the right device was unlocked.
    """

    outer_uuid: str
    inner_uuid: str


Mountable = Plain | Encrypted


@dataclass(frozen=True)
class VolumeInfo:
    name: str
    filesystem: str
    mountable: Mountable


@dataclass(frozen=True)
class MountResult:
    """
    Returned by a mount attempt. Unmounting is always an explicit call,
    this value holds nothing that needs releasing.
    """

    mountpoint: str
    was_already_mounted: bool


class Volume(Enum):
    """
    All volumes known to dmount.

    Values are the tokens accepted on the command line.
    """

    ZDANI = "z"
    SIVYDATNI = "s"
    MUHACKIKU = "m"
    BARDA = "b"
    SIVYBARDA = "sb"

    @classmethod
    def from_token(cls, token: str) -> "Volume":
        try:
            return cls(token)
        except ValueError:
            raise DiskException(
                f"unknown disk {token!r}. valid disks are {cls.describe_tokens()}.",
                status=Status.INVALID_VOLUME,
            ) from None

    @classmethod
    def describe_tokens(cls) -> str:
        return ", ".join(f"{volume.value} ({volume.name_on_disk})" for volume in cls)

    @property
    def info(self) -> VolumeInfo:
        return _VOLUMES[self]

    @property
    def name_on_disk(self) -> str:
        return self.info.name

    @property
    def filesystem(self) -> str:
        return self.info.filesystem

    @property
    def mountable(self) -> Mountable:
        return self.info.mountable

    @property
    def is_encrypted(self) -> bool:
        return isinstance(self.mountable, Encrypted)


_VOLUMES = {
    Volume.ZDANI: VolumeInfo(
        name="zdani",
        filesystem="ext4",
        mountable=Plain(uuid="9972ca08-32d9-42da-9418-1afa4a7f6966"),
    ),
    Volume.SIVYDATNI: VolumeInfo(
        name="sivydatni",
        filesystem="ext4",
        mountable=Encrypted(
            outer_uuid="a02adf15-769d-4b61-9122-ddb3b3d1e7c2",
            inner_uuid="ac80428f-f91d-4b99-9d40-c885d122be18",
        ),
    ),
    Volume.MUHACKIKU: VolumeInfo(
        name="muhackiku",
        filesystem="ext4",
        mountable=Encrypted(
            outer_uuid="809dbaf9-4c95-4baf-890c-e6866dd1a913",
            inner_uuid="e1258f59-cb99-4b6b-8bd7-513c66d64439",
        ),
    ),
    Volume.BARDA: VolumeInfo(
        name="barda",
        filesystem="ext4",
        mountable=Plain(uuid="8f8ccfd3-aeae-4515-b081-3706561c64d4"),
    ),
    Volume.SIVYBARDA: VolumeInfo(
        name="sivybarda",
        filesystem="ext4",
        mountable=Encrypted(
            outer_uuid="4c1e3a57-0d2b-4f86-9a31-7be0f2c8d946",
            inner_uuid="5d9f2b60-8e3c-41a7-b5d2-c6a1e04f7b83",
        ),
    ),
}
