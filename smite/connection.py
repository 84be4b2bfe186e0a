"""Noise-encrypted TCP connection to a Lightning peer."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from datetime import timedelta
from typing import Iterator, Tuple, Union

from smite.cipher import ENCRYPTED_LENGTH_SIZE, MAC_SIZE, MAX_MESSAGE_SIZE, NoiseCipher
from smite.errors import NoiseError
from smite.handshake import ACT_TWO_SIZE, NoiseHandshake
from smite.secp import PublicKey, SecretKey

Address = Tuple[str, int]
Timeout = Union[float, timedelta]


class NoiseConnectionError(Exception):
    """A connection failed; the underlying I/O or Noise error is ``__cause__``."""


class MessageTooLargeError(NoiseConnectionError):
    """A message longer than ``MAX_MESSAGE_SIZE`` was given to send."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"message too large: {size} bytes (max {MAX_MESSAGE_SIZE})")


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except NoiseError as exc:
        raise NoiseConnectionError(f"Noise error: {exc}") from exc
    except OSError as exc:
        raise NoiseConnectionError(f"IO error: {exc}") from exc


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            raise ConnectionError(
                f"connection closed after {len(chunks)} of {size} bytes"
            )
        chunks.extend(chunk)
    return bytes(chunks)


def _seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class NoiseConnection:
    """A TCP stream carrying BOLT 8 encrypted messages."""

    def __init__(self, sock: socket.socket, cipher: NoiseCipher) -> None:
        self._sock = sock
        self._cipher = cipher

    @classmethod
    def connect(
        cls,
        addr: Address,
        remote_pubkey: PublicKey,
        local_static: SecretKey,
        local_ephemeral: SecretKey,
        timeout: Timeout,
    ) -> NoiseConnection:
        """Connect to a node and run the handshake as initiator.

        ``timeout`` bounds the connect and every later read and write.
        """
        seconds = _seconds(timeout)
        with _translate_errors():
            sock = socket.create_connection(addr, timeout=seconds)
        try:
            with _translate_errors():
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                handshake = NoiseHandshake.new_initiator(
                    local_static, local_ephemeral, remote_pubkey
                )
                sock.sendall(handshake.get_act_one())
                act_two = _recv_exact(sock, ACT_TWO_SIZE)
                sock.sendall(handshake.process_act_two(act_two))
                cipher = handshake.into_cipher()
        except BaseException:
            sock.close()
            raise
        return cls(sock, cipher)

    def send_message(self, msg: bytes) -> None:
        """Encrypt and send one message."""
        msg = bytes(msg)
        if len(msg) > MAX_MESSAGE_SIZE:
            raise MessageTooLargeError(len(msg))
        with _translate_errors():
            self._sock.sendall(self._cipher.encrypt(msg))

    def recv_message(self) -> bytes:
        """Receive and decrypt one message."""
        with _translate_errors():
            encrypted_len = _recv_exact(self._sock, ENCRYPTED_LENGTH_SIZE)
            length = self._cipher.decrypt_length(encrypted_len)
            encrypted_msg = _recv_exact(self._sock, length + MAC_SIZE)
            return self._cipher.decrypt_message(encrypted_msg)

    def close(self) -> None:
        """Close the underlying socket."""
        self._sock.close()

    def __enter__(self) -> NoiseConnection:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()