"""Errors raised by the Noise handshake and transport cipher."""

from __future__ import annotations

from enum import Enum


class NoiseErrorKind(Enum):
    """The ways a Noise handshake or message operation can fail."""

    ACT_ONE_BAD_VERSION = "ACT1_BAD_VERSION"
    ACT_ONE_BAD_PUBKEY = "ACT1_BAD_PUBKEY"
    ACT_ONE_BAD_TAG = "ACT1_BAD_TAG"

    ACT_TWO_BAD_VERSION = "ACT2_BAD_VERSION"
    ACT_TWO_BAD_PUBKEY = "ACT2_BAD_PUBKEY"
    ACT_TWO_BAD_TAG = "ACT2_BAD_TAG"

    ACT_THREE_BAD_VERSION = "ACT3_BAD_VERSION"
    ACT_THREE_BAD_CIPHERTEXT = "ACT3_BAD_CIPHERTEXT"
    ACT_THREE_BAD_PUBKEY = "ACT3_BAD_PUBKEY"
    ACT_THREE_BAD_TAG = "ACT3_BAD_TAG"

    DECRYPTION_FAILED = "DECRYPTION_FAILED"
    HANDSHAKE_INCOMPLETE = "HANDSHAKE_INCOMPLETE"
    INVALID_STATE = "INVALID_STATE"

    @property
    def takes_version(self) -> bool:
        """Whether errors of this kind carry the offending version byte."""
        return self in _VERSIONED


_VERSIONED = frozenset(
    {
        NoiseErrorKind.ACT_ONE_BAD_VERSION,
        NoiseErrorKind.ACT_TWO_BAD_VERSION,
        NoiseErrorKind.ACT_THREE_BAD_VERSION,
    }
)


class NoiseError(Exception):
    """A Noise protocol failure of a given kind."""

    def __init__(self, kind: NoiseErrorKind, version: int | None = None) -> None:
        if kind.takes_version:
            if version is None:
                raise ValueError(f"{kind.value} requires a version byte")
            if not 0 <= version <= 0xFF:
                raise ValueError(f"version byte out of range: {version}")
        elif version is not None:
            raise ValueError(f"{kind.value} does not carry a version byte")
        self.kind = kind
        self.version = version
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.version is None:
            return self.kind.value
        return f"{self.kind.value} {self.version}"

    def __repr__(self) -> str:
        if self.version is None:
            return f"NoiseError({self.kind.name})"
        return f"NoiseError({self.kind.name}, {self.version})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoiseError):
            return NotImplemented
        return self.kind is other.kind and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.kind, self.version))