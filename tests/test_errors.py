import pytest

from smite.errors import NoiseError, NoiseErrorKind


def test_plain_kinds_render_as_their_tag():
    for kind in NoiseErrorKind:
        if kind.takes_version:
            continue
        assert str(NoiseError(kind)) == kind.value


def test_decryption_failed_message():
    assert str(NoiseError(NoiseErrorKind.DECRYPTION_FAILED)) == "DECRYPTION_FAILED"


def test_versioned_kind_includes_version():
    err = NoiseError(NoiseErrorKind.ACT_TWO_BAD_VERSION, 1)
    assert str(err) == "ACT2_BAD_VERSION 1"
    assert err.version == 1
    assert err.kind is NoiseErrorKind.ACT_TWO_BAD_VERSION


@pytest.mark.parametrize(
    "kind,text",
    [
        (NoiseErrorKind.ACT_ONE_BAD_VERSION, "ACT1_BAD_VERSION 7"),
        (NoiseErrorKind.ACT_TWO_BAD_VERSION, "ACT2_BAD_VERSION 7"),
        (NoiseErrorKind.ACT_THREE_BAD_VERSION, "ACT3_BAD_VERSION 7"),
    ],
)
def test_versioned_kinds_render_with_version(kind, text):
    err = NoiseError(kind, 7)
    assert str(err) == text
    assert err.version == 7


def test_only_version_errors_accept_a_version():
    accepted = set()
    for kind in NoiseErrorKind:
        try:
            NoiseError(kind, 0)
        except ValueError:
            continue
        accepted.add(kind)
    assert accepted == {
        NoiseErrorKind.ACT_ONE_BAD_VERSION,
        NoiseErrorKind.ACT_TWO_BAD_VERSION,
        NoiseErrorKind.ACT_THREE_BAD_VERSION,
    }


def test_equality_compares_kind_and_version():
    a = NoiseError(NoiseErrorKind.ACT_ONE_BAD_VERSION, 2)
    b = NoiseError(NoiseErrorKind.ACT_ONE_BAD_VERSION, 2)
    c = NoiseError(NoiseErrorKind.ACT_ONE_BAD_VERSION, 3)
    d = NoiseError(NoiseErrorKind.ACT_TWO_BAD_VERSION, 2)
    assert a == b
    assert hash(a) == hash(b)
    assert (a == c) is False
    assert (a == d) is False


def test_equality_with_other_types_is_false():
    err = NoiseError(NoiseErrorKind.INVALID_STATE)
    assert (err == "INVALID_STATE") is False


def test_versioned_kind_requires_version():
    with pytest.raises(ValueError):
        NoiseError(NoiseErrorKind.ACT_THREE_BAD_VERSION)


def test_plain_kind_rejects_version():
    with pytest.raises(ValueError):
        NoiseError(NoiseErrorKind.ACT_ONE_BAD_TAG, 0)


def test_version_must_be_a_byte():
    with pytest.raises(ValueError):
        NoiseError(NoiseErrorKind.ACT_ONE_BAD_VERSION, 256)


def test_can_be_raised_and_caught():
    err = NoiseError(NoiseErrorKind.HANDSHAKE_INCOMPLETE)
    with pytest.raises(NoiseError) as info:
        raise err
    assert info.value == NoiseError(NoiseErrorKind.HANDSHAKE_INCOMPLETE)
    assert info.value.kind is NoiseErrorKind.HANDSHAKE_INCOMPLETE
    assert str(info.value) == "HANDSHAKE_INCOMPLETE"