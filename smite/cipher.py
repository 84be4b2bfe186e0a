"""Post-handshake transport encryption (BOLT 8)."""

from __future__ import annotations

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from smite.errors import NoiseError, NoiseErrorKind

MAC_SIZE = 16
"""Poly1305 MAC size in bytes."""

MAX_MESSAGE_SIZE = 65535
"""Maximum Lightning message size (limited by the 2-byte length prefix)."""

ENCRYPTED_LENGTH_SIZE = 2 + MAC_SIZE
"""Encrypted length prefix size: 2 bytes of length plus a MAC."""

KEY_ROTATION_THRESHOLD = 1000
"""Rotate a key after this many uses (every 500 messages)."""

_KEY_SIZE = 32


def _check_key(key: bytes, what: str) -> bytes:
    key = bytes(key)
    if len(key) != _KEY_SIZE:
        raise ValueError(f"{what} must be {_KEY_SIZE} bytes, got {len(key)}")
    return key


def encode_nonce(n: int) -> bytes:
    """Encode a nonce as 32 zero bits followed by a 64-bit little-endian counter."""
    return bytes(4) + n.to_bytes(8, "little")


def encrypt_with_ad(key: bytes, nonce: int, ad: bytes, plaintext: bytes) -> bytes:
    """ChaCha20-Poly1305 encryption with associated data; returns ciphertext || MAC."""
    aead = ChaCha20Poly1305(_check_key(key, "key"))
    return aead.encrypt(encode_nonce(nonce), bytes(plaintext), bytes(ad) or None)


def decrypt_with_ad(key: bytes, nonce: int, ad: bytes, ciphertext: bytes) -> bytes:
    """ChaCha20-Poly1305 decryption; raises NoiseError if the MAC does not verify."""
    aead = ChaCha20Poly1305(_check_key(key, "key"))
    try:
        return aead.decrypt(encode_nonce(nonce), bytes(ciphertext), bytes(ad) or None)
    except InvalidTag:
        raise NoiseError(NoiseErrorKind.DECRYPTION_FAILED) from None


def hkdf_two_keys(salt: bytes, ikm: bytes) -> tuple[bytes, bytes]:
    """HKDF-SHA256 extract-and-expand into two 32-byte keys."""
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=2 * _KEY_SIZE,
        salt=_check_key(salt, "salt"),
        info=b"",
    )
    output = hkdf.derive(bytes(ikm))
    return output[:_KEY_SIZE], output[_KEY_SIZE:]


class NoiseCipher:
    """Encrypts and decrypts Lightning messages after a completed handshake.

    Keeps separate send and receive keys and nonces and rotates each key
    after it has been used ``KEY_ROTATION_THRESHOLD`` times.
    """

    def __init__(self, send_key: bytes, recv_key: bytes, chaining_key: bytes) -> None:
        self._send_key = _check_key(send_key, "send_key")
        self._recv_key = _check_key(recv_key, "recv_key")
        chaining_key = _check_key(chaining_key, "chaining_key")
        self._send_ck = chaining_key
        self._recv_ck = chaining_key
        self._send_nonce = 0
        self._recv_nonce = 0

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt a message, returning ``encrypted_length || encrypted_message``."""
        plaintext = bytes(plaintext)
        if len(plaintext) > MAX_MESSAGE_SIZE:
            raise ValueError(
                f"message of {len(plaintext)} bytes exceeds {MAX_MESSAGE_SIZE} bytes"
            )
        encrypted_len = self.encrypt_length(len(plaintext))
        self._maybe_rotate_send_key()
        body = encrypt_with_ad(self._send_key, self._send_nonce, b"", plaintext)
        self._send_nonce += 1
        return encrypted_len + body

    def encrypt_length(self, length: int) -> bytes:
        """Encrypt only the 2-byte length prefix, advancing the send nonce once."""
        if not 0 <= length <= MAX_MESSAGE_SIZE:
            raise ValueError(f"length out of range: {length}")
        self._maybe_rotate_send_key()
        encrypted = encrypt_with_ad(
            self._send_key, self._send_nonce, b"", length.to_bytes(2, "big")
        )
        self._send_nonce += 1
        return encrypted

    def decrypt_length(self, encrypted_len: bytes) -> int:
        """Decrypt an incoming length prefix of ``ENCRYPTED_LENGTH_SIZE`` bytes."""
        encrypted_len = bytes(encrypted_len)
        if len(encrypted_len) != ENCRYPTED_LENGTH_SIZE:
            raise ValueError(
                f"encrypted length must be {ENCRYPTED_LENGTH_SIZE} bytes, "
                f"got {len(encrypted_len)}"
            )
        self._maybe_rotate_recv_key()
        len_bytes = decrypt_with_ad(self._recv_key, self._recv_nonce, b"", encrypted_len)
        self._recv_nonce += 1
        return int.from_bytes(len_bytes, "big")

    def decrypt_message(self, encrypted_msg: bytes) -> bytes:
        """Decrypt a message body (its length plus ``MAC_SIZE`` bytes)."""
        self._maybe_rotate_recv_key()
        plaintext = decrypt_with_ad(self._recv_key, self._recv_nonce, b"", encrypted_msg)
        self._recv_nonce += 1
        return plaintext

    def _maybe_rotate_send_key(self) -> None:
        if self._send_nonce >= KEY_ROTATION_THRESHOLD:
            self._send_ck, self._send_key = hkdf_two_keys(self._send_ck, self._send_key)
            self._send_nonce = 0

    def _maybe_rotate_recv_key(self) -> None:
        if self._recv_nonce >= KEY_ROTATION_THRESHOLD:
            self._recv_ck, self._recv_key = hkdf_two_keys(self._recv_ck, self._recv_key)
            self._recv_nonce = 0