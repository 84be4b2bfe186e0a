"""The BOLT 8 ``Noise_XK`` handshake."""

from __future__ import annotations

import hashlib
from enum import Enum, auto

from smite.cipher import NoiseCipher, decrypt_with_ad, encrypt_with_ad, hkdf_two_keys
from smite.errors import NoiseError, NoiseErrorKind
from smite.secp import PublicKey, SecretKey, ecdh

PROTOCOL_NAME = b"Noise_XK_secp256k1_ChaChaPoly_SHA256"
PROLOGUE = b"lightning"
VERSION = 0

ACT_ONE_SIZE = 50
"""Act One: 1 (version) + 33 (pubkey) + 16 (MAC)."""

ACT_TWO_SIZE = 50
"""Act Two: 1 (version) + 33 (pubkey) + 16 (MAC)."""

ACT_THREE_SIZE = 66
"""Act Three: 1 (version) + 33 (encrypted pubkey) + 16 (MAC) + 16 (MAC)."""


class _Role(Enum):
    INITIATOR = auto()
    RESPONDER = auto()


class _State(Enum):
    INITIATOR_START = auto()
    INITIATOR_AWAITING_ACT_TWO = auto()
    RESPONDER_START = auto()
    RESPONDER_AWAITING_ACT_THREE = auto()
    COMPLETE = auto()


def _sha256(*parts: bytes) -> bytes:
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part)
    return digest.digest()


def _check_size(data: bytes, size: int, what: str) -> bytes:
    data = bytes(data)
    if len(data) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(data)}")
    return data


class NoiseHandshake:
    """State machine for one side of a Lightning Noise handshake.

    The initiator knows the responder's static key beforehand; the initiator's
    own static key travels encrypted in Act Three.
    """

    def __init__(
        self,
        role: _Role,
        local_static: SecretKey,
        local_ephemeral: SecretKey,
        remote_static: PublicKey | None,
    ) -> None:
        self._role = role
        self._local_static = local_static
        self._local_ephemeral = local_ephemeral
        self._remote_static = remote_static
        self._remote_ephemeral: PublicKey | None = None
        self._temp_k2: bytes | None = None
        if role is _Role.INITIATOR:
            if remote_static is None:
                raise ValueError("initiator needs the remote static key")
            responder_static = remote_static
            self._state = _State.INITIATOR_START
        else:
            responder_static = local_static.public_key()
            self._state = _State.RESPONDER_START
        self._ck = _sha256(PROTOCOL_NAME)
        self._h = _sha256(self._ck, PROLOGUE)
        self._h = _sha256(self._h, responder_static.serialize())

    @classmethod
    def new_initiator(
        cls, local_static: SecretKey, local_ephemeral: SecretKey, remote_static: PublicKey
    ) -> NoiseHandshake:
        """Start a handshake towards a peer whose static key is known."""
        return cls(_Role.INITIATOR, local_static, local_ephemeral, remote_static)

    @classmethod
    def new_responder(
        cls, local_static: SecretKey, local_ephemeral: SecretKey
    ) -> NoiseHandshake:
        """Start a handshake that waits for an initiator's Act One."""
        return cls(_Role.RESPONDER, local_static, local_ephemeral, None)

    @property
    def remote_static(self) -> PublicKey | None:
        """The peer's static key, once known."""
        return self._remote_static

    @property
    def is_complete(self) -> bool:
        return self._state is _State.COMPLETE

    def _mix_hash(self, data: bytes) -> None:
        self._h = _sha256(self._h, data)

    def _mix_key(self, shared: bytes) -> bytes:
        self._ck, temp_key = hkdf_two_keys(self._ck, shared)
        return temp_key

    def get_act_one(self) -> bytes:
        """Produce Act One (initiator): ``version || ephemeral pubkey || MAC``."""
        if self._state is not _State.INITIATOR_START:
            raise NoiseError(NoiseErrorKind.INVALID_STATE)
        assert self._remote_static is not None
        e_pub = self._local_ephemeral.public_key().serialize()
        self._mix_hash(e_pub)
        temp_k1 = self._mix_key(ecdh(self._local_ephemeral, self._remote_static))
        c = encrypt_with_ad(temp_k1, 0, self._h, b"")
        self._mix_hash(c)
        self._state = _State.INITIATOR_AWAITING_ACT_TWO
        return bytes([VERSION]) + e_pub + c

    def process_act_two(self, act_two: bytes) -> bytes:
        """Check Act Two and produce Act Three (initiator)."""
        act_two = _check_size(act_two, ACT_TWO_SIZE, "act two")
        if self._state is not _State.INITIATOR_AWAITING_ACT_TWO:
            raise NoiseError(NoiseErrorKind.INVALID_STATE)
        version, re_bytes, c = act_two[0], act_two[1:34], act_two[34:]
        if version != VERSION:
            raise NoiseError(NoiseErrorKind.ACT_TWO_BAD_VERSION, version)
        try:
            re = PublicKey.from_bytes(re_bytes)
        except ValueError:
            raise NoiseError(NoiseErrorKind.ACT_TWO_BAD_PUBKEY) from None
        self._remote_ephemeral = re
        self._mix_hash(re_bytes)
        temp_k2 = self._mix_key(ecdh(self._local_ephemeral, re))
        self._temp_k2 = temp_k2
        try:
            decrypt_with_ad(temp_k2, 0, self._h, c)
        except NoiseError:
            raise NoiseError(NoiseErrorKind.ACT_TWO_BAD_TAG) from None
        self._mix_hash(c)
        return self._build_act_three()

    def _build_act_three(self) -> bytes:
        assert self._temp_k2 is not None and self._remote_ephemeral is not None
        s_pub = self._local_static.public_key().serialize()
        c = encrypt_with_ad(self._temp_k2, 1, self._h, s_pub)
        self._mix_hash(c)
        temp_k3 = self._mix_key(ecdh(self._local_static, self._remote_ephemeral))
        t = encrypt_with_ad(temp_k3, 0, self._h, b"")
        self._state = _State.COMPLETE
        return bytes([VERSION]) + c + t

    def process_act_one(self, act_one: bytes) -> bytes:
        """Check Act One and produce Act Two (responder)."""
        act_one = _check_size(act_one, ACT_ONE_SIZE, "act one")
        if self._state is not _State.RESPONDER_START:
            raise NoiseError(NoiseErrorKind.INVALID_STATE)
        version, re_bytes, c = act_one[0], act_one[1:34], act_one[34:]
        if version != VERSION:
            raise NoiseError(NoiseErrorKind.ACT_ONE_BAD_VERSION, version)
        try:
            re = PublicKey.from_bytes(re_bytes)
        except ValueError:
            raise NoiseError(NoiseErrorKind.ACT_ONE_BAD_PUBKEY) from None
        self._remote_ephemeral = re
        self._mix_hash(re_bytes)
        temp_k1 = self._mix_key(ecdh(self._local_static, re))
        try:
            decrypt_with_ad(temp_k1, 0, self._h, c)
        except NoiseError:
            raise NoiseError(NoiseErrorKind.ACT_ONE_BAD_TAG) from None
        self._mix_hash(c)
        return self._build_act_two()

    def _build_act_two(self) -> bytes:
        assert self._remote_ephemeral is not None
        e_pub = self._local_ephemeral.public_key().serialize()
        self._mix_hash(e_pub)
        temp_k2 = self._mix_key(ecdh(self._local_ephemeral, self._remote_ephemeral))
        self._temp_k2 = temp_k2
        c = encrypt_with_ad(temp_k2, 0, self._h, b"")
        self._mix_hash(c)
        self._state = _State.RESPONDER_AWAITING_ACT_THREE
        return bytes([VERSION]) + e_pub + c

    def process_act_three(self, act_three: bytes) -> PublicKey:
        """Check Act Three (responder) and return the initiator's static key."""
        act_three = _check_size(act_three, ACT_THREE_SIZE, "act three")
        if self._state is not _State.RESPONDER_AWAITING_ACT_THREE:
            raise NoiseError(NoiseErrorKind.INVALID_STATE)
        version, c, t = act_three[0], act_three[1:50], act_three[50:]
        if version != VERSION:
            raise NoiseError(NoiseErrorKind.ACT_THREE_BAD_VERSION, version)
        assert self._temp_k2 is not None
        try:
            rs_bytes = decrypt_with_ad(self._temp_k2, 1, self._h, c)
        except NoiseError:
            raise NoiseError(NoiseErrorKind.ACT_THREE_BAD_CIPHERTEXT) from None
        try:
            rs = PublicKey.from_bytes(rs_bytes)
        except ValueError:
            raise NoiseError(NoiseErrorKind.ACT_THREE_BAD_PUBKEY) from None
        self._remote_static = rs
        self._mix_hash(c)
        temp_k3 = self._mix_key(ecdh(self._local_ephemeral, rs))
        try:
            decrypt_with_ad(temp_k3, 0, self._h, t)
        except NoiseError:
            raise NoiseError(NoiseErrorKind.ACT_THREE_BAD_TAG) from None
        self._state = _State.COMPLETE
        return rs

    def get_final_keys(self) -> tuple[bytes, bytes]:
        """Return ``(send_key, recv_key)`` for this side of the handshake."""
        if self._state is not _State.COMPLETE:
            raise NoiseError(NoiseErrorKind.HANDSHAKE_INCOMPLETE)
        sk, rk = hkdf_two_keys(self._ck, b"")
        if self._role is _Role.INITIATOR:
            return sk, rk
        return rk, sk

    def into_cipher(self) -> NoiseCipher:
        """Build the transport cipher from a completed handshake."""
        send_key, recv_key = self.get_final_keys()
        return NoiseCipher(send_key, recv_key, self._ck)