import pytest

from smite.secp import PublicKey, SecretKey, ecdh

RS_PUB = "028d7500dd4c12685d1f568b4c2b5048e8534b873319f3a8daa612b469132ec7f7"
LS_PUB = "034f355bdcb7cc0af728ef3cceb9615d90684bb5b2ca5f859ab0f0b704075871aa"
E_PUB = "036360e856310ce5d294e8be33fc807077dc56ac80d95d9cd4ddbd21325eff73f7"


@pytest.mark.parametrize(
    "byte, expected",
    [(0x21, RS_PUB), (0x11, LS_PUB), (0x12, E_PUB)],
)
def test_public_key_derivation(byte, expected):
    assert SecretKey(bytes([byte]) * 32).public_key().serialize().hex() == expected


def test_compressed_roundtrip():
    pub = SecretKey(b"\x33" * 32).public_key()
    encoded = pub.serialize()
    assert len(encoded) == 33
    assert PublicKey.from_bytes(encoded) == pub


def test_uncompressed_parses_to_same_key():
    pub = SecretKey(b"\x44" * 32).public_key()
    raw = b"\x04" + pub.x.to_bytes(32, "big") + pub.y.to_bytes(32, "big")
    assert PublicKey.from_bytes(raw) == pub


def test_uncompressed_off_curve_rejected():
    pub = SecretKey(b"\x44" * 32).public_key()
    raw = b"\x04" + pub.x.to_bytes(32, "big") + ((pub.y + 1) % 2**256).to_bytes(32, "big")
    with pytest.raises(ValueError):
        PublicKey.from_bytes(raw)


@pytest.mark.parametrize(
    "data",
    [
        b"\x04" + bytes.fromhex(RS_PUB)[1:],
        b"\x02" + b"\xff" * 32,
        bytes.fromhex(RS_PUB)[:32],
        b"",
    ],
)
def test_malformed_public_keys(data):
    with pytest.raises(ValueError):
        PublicKey.from_bytes(data)


@pytest.mark.parametrize(
    "data",
    [
        bytes(32),
        bytes.fromhex("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141"),
        b"\x01" * 31,
    ],
)
def test_invalid_secret_keys(data):
    with pytest.raises(ValueError):
        SecretKey(data)


def test_ecdh_is_symmetric():
    a = SecretKey(b"\x11" * 32)
    b = SecretKey(b"\x22" * 32)
    shared = ecdh(a, b.public_key())
    assert len(shared) == 32
    assert shared == ecdh(b, a.public_key())


def test_ecdh_depends_on_keys():
    a = SecretKey(b"\x11" * 32)
    b = SecretKey(b"\x22" * 32)
    c = SecretKey(b"\x33" * 32)
    assert ecdh(a, b.public_key()) != ecdh(a, c.public_key())


def test_secret_key_equality_and_bytes():
    assert SecretKey(b"\x05" * 32) == SecretKey(b"\x05" * 32)
    assert bytes(SecretKey(b"\x05" * 32)) == b"\x05" * 32
    assert "05" not in repr(SecretKey(b"\x05" * 32))