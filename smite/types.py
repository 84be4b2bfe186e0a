"""Fundamental types for BOLT message encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

MAX_MESSAGE_SIZE = 65535
"""Maximum Lightning message size (2-byte length prefix limit)."""

CHANNEL_ID_SIZE = 32
"""Size of a channel ID in bytes."""

CHAIN_HASH_SIZE = 32
"""Size of a chain hash (SHA256)."""

TXID_SIZE = 32
"""Size of a transaction ID in bytes."""

COMPACT_SIGNATURE_SIZE = 64
"""Size of a compact ECDSA signature in bytes."""

PUBLIC_KEY_SIZE = 33
"""Size of a compressed secp256k1 public key."""

_U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class ChannelId:
    """A 32-byte channel identifier; all zeros means every channel."""

    data: bytes = bytes(CHANNEL_ID_SIZE)

    ALL: ClassVar[ChannelId]

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if len(data) != CHANNEL_ID_SIZE:
            raise ValueError(
                f"channel id must be {CHANNEL_ID_SIZE} bytes, got {len(data)}"
            )
        object.__setattr__(self, "data", data)

    def __bytes__(self) -> bytes:
        return self.data


ChannelId.ALL = ChannelId()


@dataclass(frozen=True)
class BigSize:
    """A variable-length big-endian unsigned integer."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"BigSize value out of u64 range: {self.value}")

    def __int__(self) -> int:
        return self.value

    def encoded_length(self) -> int:
        """Number of bytes this value occupies when encoded."""
        if self.value < 0xFD:
            return 1
        if self.value < 0x1_0000:
            return 3
        if self.value < 0x1_0000_0000:
            return 5
        return 9


@dataclass(frozen=True)
class Txid:
    """A bitcoin transaction ID (double SHA256), shown byte-reversed."""

    data: bytes

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if len(data) != TXID_SIZE:
            raise ValueError(f"txid must be {TXID_SIZE} bytes, got {len(data)}")
        object.__setattr__(self, "data", data)

    @classmethod
    def from_hex(cls, text: str) -> Txid:
        """Parse the byte-reversed hex form produced by ``str``."""
        return cls(bytes.fromhex(text)[::-1])

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return self.data[::-1].hex()