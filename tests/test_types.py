import pytest

from smite.types import CHANNEL_ID_SIZE, TXID_SIZE, BigSize, ChannelId, Txid


def test_bigsize_new():
    bs = BigSize(42)
    assert bs.value == 42
    assert int(bs) == 42


@pytest.mark.parametrize("v", [0, 1, 252, 253, 65535, 65536, 2**64 - 1])
def test_bigsize_value(v):
    assert BigSize(v).value == v


@pytest.mark.parametrize(
    "v,length",
    [
        (0, 1),
        (0xFC, 1),
        (0xFD, 3),
        (0xFFFF, 3),
        (0x1_0000, 5),
        (0xFFFF_FFFF, 5),
        (0x1_0000_0000, 9),
        (2**64 - 1, 9),
    ],
)
def test_bigsize_encoded_length(v, length):
    assert BigSize(v).encoded_length() == length


@pytest.mark.parametrize("v", [-1, 2**64])
def test_bigsize_out_of_range(v):
    with pytest.raises(ValueError):
        BigSize(v)


def test_channel_id_all_is_zeros():
    assert ChannelId(bytes(CHANNEL_ID_SIZE)) == ChannelId.ALL
    assert bytes(ChannelId.ALL) == bytes(CHANNEL_ID_SIZE)


def test_channel_id_new():
    raw = bytes([0x42] * CHANNEL_ID_SIZE)
    cid = ChannelId(raw)
    assert cid.data == raw
    assert bytes(cid) == raw


def test_channel_id_default_is_all():
    assert ChannelId() == ChannelId.ALL


def test_channel_id_wrong_length():
    with pytest.raises(ValueError):
        ChannelId(bytes(20))


def test_txid_displays_reversed():
    raw = bytes([1] + [0] * (TXID_SIZE - 1))
    assert str(Txid(raw)) == "00" * (TXID_SIZE - 1) + "01"


def test_txid_hex_roundtrip():
    raw = bytes(range(TXID_SIZE))
    txid = Txid(raw)
    assert Txid.from_hex(str(txid)) == txid
    assert bytes(txid) == raw


def test_txid_wrong_length():
    with pytest.raises(ValueError):
        Txid(bytes(31))