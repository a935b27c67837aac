import pytest

from dmount.action import Action
from dmount.exceptions import DiskException
from dmount.status import Status


@pytest.mark.parametrize(
    "token, expected", [("m", Action.MOUNT), ("u", Action.UNMOUNT), ("c", Action.CD)]
)
def test_from_token(token, expected):
    assert Action.from_token(token) is expected


def test_from_token_unknown():
    with pytest.raises(DiskException) as ex:
        Action.from_token("x")

    assert ex.value.status == Status.INVALID_ACTION
    assert "m, u, c" in str(ex.value)


@pytest.mark.parametrize(
    "flags, expected",
    [
        ((True, False, False), Action.MOUNT),
        ((False, True, False), Action.UNMOUNT),
        ((False, False, True), Action.CD),
        ((False, False, False), None),
    ],
)
def test_from_flags(flags, expected):
    assert Action.from_flags(*flags) is expected


@pytest.mark.parametrize("flags", [(True, True, False), (True, False, True), (True, True, True)])
def test_from_flags_multiple(flags):
    with pytest.raises(DiskException) as ex:
        Action.from_flags(*flags)

    assert ex.value.status == Status.INVALID_ACTION
