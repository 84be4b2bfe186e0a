"""Minimal secp256k1 keys and ECDH as used by the Noise handshake."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional, Tuple

_P = 2**256 - 2**32 - 977
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

SECRET_KEY_SIZE = 32
COMPRESSED_SIZE = 33
UNCOMPRESSED_SIZE = 65

_Point = Optional[Tuple[int, int]]


def _on_curve(x: int, y: int) -> bool:
    return (y * y - (x * x * x + 7)) % _P == 0


def _add(a: _Point, b: _Point) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    x1, y1 = a
    x2, y2 = b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        lam = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (lam * lam - x1 - x2) % _P
    y3 = (lam * (x1 - x3) - y1) % _P
    return (x3, y3)


def _multiply(k: int, point: _Point) -> _Point:
    result: _Point = None
    addend = point
    while k:
        if k & 1:
            result = _add(result, addend)
        addend = _add(addend, addend)
        k >>= 1
    return result


@dataclass(frozen=True)
class PublicKey:
    """A point on secp256k1 other than infinity."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if not (0 <= self.x < _P and 0 <= self.y < _P) or not _on_curve(self.x, self.y):
            raise ValueError("point is not on secp256k1")

    @classmethod
    def from_bytes(cls, data: bytes) -> PublicKey:
        """Parse a compressed (33-byte) or uncompressed (65-byte) public key."""
        data = bytes(data)
        if len(data) == COMPRESSED_SIZE and data[0] in (0x02, 0x03):
            x = int.from_bytes(data[1:], "big")
            if x >= _P:
                raise ValueError("x coordinate out of range")
            y_squared = (pow(x, 3, _P) + 7) % _P
            y = pow(y_squared, (_P + 1) // 4, _P)
            if y * y % _P != y_squared:
                raise ValueError("x coordinate is not on secp256k1")
            if y & 1 != data[0] & 1:
                y = _P - y
            return cls(x, y)
        if len(data) == UNCOMPRESSED_SIZE and data[0] in (0x04, 0x06, 0x07):
            x = int.from_bytes(data[1:33], "big")
            y = int.from_bytes(data[33:], "big")
            if data[0] != 0x04 and y & 1 != data[0] & 1:
                raise ValueError("hybrid key parity mismatch")
            return cls(x, y)
        raise ValueError(f"malformed public key of {len(data)} bytes")

    def serialize(self) -> bytes:
        """The 33-byte compressed encoding."""
        prefix = 0x03 if self.y & 1 else 0x02
        return bytes([prefix]) + self.x.to_bytes(32, "big")

    def __bytes__(self) -> bytes:
        return self.serialize()

    def __str__(self) -> str:
        return self.serialize().hex()


class SecretKey:
    """A secp256k1 private key: 32 bytes encoding an integer in [1, n)."""

    def __init__(self, data: bytes) -> None:
        data = bytes(data)
        if len(data) != SECRET_KEY_SIZE:
            raise ValueError(f"secret key must be {SECRET_KEY_SIZE} bytes, got {len(data)}")
        scalar = int.from_bytes(data, "big")
        if not 0 < scalar < _N:
            raise ValueError("secret key out of range")
        self._data = data
        self._scalar = scalar

    @property
    def scalar(self) -> int:
        return self._scalar

    def public_key(self) -> PublicKey:
        """The public key matching this secret."""
        point = _multiply(self._scalar, (_GX, _GY))
        assert point is not None
        return PublicKey(*point)

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return "SecretKey(<hidden>)"


def ecdh(secret: SecretKey, public: PublicKey) -> bytes:
    """SHA256 of the compressed shared point ``secret * public``."""
    point = _multiply(secret.scalar, (public.x, public.y))
    if point is None:
        raise ValueError("shared point is infinity")
    return hashlib.sha256(PublicKey(*point).serialize()).digest()