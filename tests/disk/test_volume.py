import pytest

from dmount.disk.volume import Encrypted, Plain, Volume
from dmount.exceptions import DiskException
from dmount.status import Status


class TestVolume:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("z", Volume.ZDANI),
            ("s", Volume.SIVYDATNI),
            ("m", Volume.MUHACKIKU),
            ("b", Volume.BARDA),
            ("sb", Volume.SIVYBARDA),
        ],
    )
    def test_from_token(self, token, expected):
        assert Volume.from_token(token) is expected

    @pytest.mark.parametrize("token", ["x", "", "Z", "zdani", "s b"])
    def test_from_token_unknown(self, token):
        with pytest.raises(DiskException) as ex:
            Volume.from_token(token)

        assert ex.value.status == Status.INVALID_VOLUME
        for valid in ("z", "s", "m", "b", "sb"):
            assert f"{valid} (" in str(ex.value)

    def test_plain_volumes(self):
        assert Volume.ZDANI.mountable == Plain(uuid="9972ca08-32d9-42da-9418-1afa4a7f6966")
        assert not Volume.ZDANI.is_encrypted
        assert not Volume.BARDA.is_encrypted

    def test_encrypted_volumes(self):
        for volume in (Volume.SIVYDATNI, Volume.MUHACKIKU, Volume.SIVYBARDA):
            assert isinstance(volume.mountable, Encrypted)
            assert volume.is_encrypted

    def test_every_volume_has_a_record(self):
        names = [volume.name_on_disk for volume in Volume]

        assert len(set(names)) == len(names)
        assert all(volume.filesystem == "ext4" for volume in Volume)

    def test_mountable_is_immutable(self):
        with pytest.raises(AttributeError):
            Volume.ZDANI.mountable.uuid = "something-else"
