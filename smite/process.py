"""Spawning and controlling subprocesses with graceful shutdown."""

from __future__ import annotations

import logging
import signal
import subprocess
import time
from datetime import timedelta
from typing import Any, Sequence, Union

logger = logging.getLogger(__name__)

Timeout = Union[float, timedelta]

_POLL_INTERVAL = 0.01
_DROP_TIMEOUT = 5.0


def _seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class ManagedProcess:
    """A subprocess that is shut down with SIGTERM, then SIGKILL after a timeout."""

    def __init__(self, popen: subprocess.Popen, name: str) -> None:
        self.popen = popen
        self.name = name

    @classmethod
    def spawn(cls, args: Sequence[str], name: str, **kwargs: Any) -> ManagedProcess:
        """Start a process; extra keyword arguments go to ``subprocess.Popen``."""
        return cls(subprocess.Popen(list(args), **kwargs), name)

    @property
    def pid(self) -> int:
        """The process ID."""
        return self.popen.pid

    def is_running(self) -> bool:
        """Whether the process is still running (non-blocking)."""
        try:
            return self.popen.poll() is None
        except OSError:
            return False

    def _send(self, sig: signal.Signals) -> None:
        try:
            self.popen.send_signal(sig)
        except OSError as exc:
            logger.warning("%s: failed to send %s: %s", self.name, sig.name, exc)

    def shutdown(self, timeout: Timeout) -> int:
        """Send SIGTERM, wait up to ``timeout``, then SIGKILL; return the exit code.

        A negative code is the number of the signal that ended the process.
        """
        seconds = _seconds(timeout)
        status = self.popen.poll()
        if status is not None:
            logger.debug("%s: already exited with %s", self.name, status)
            return status

        logger.debug("%s: sending SIGTERM", self.name)
        self._send(signal.SIGTERM)

        deadline = time.monotonic() + seconds
        while True:
            status = self.popen.poll()
            if status is not None:
                logger.debug("%s: exited with %s", self.name, status)
                return status
            if time.monotonic() >= deadline:
                break
            time.sleep(_POLL_INTERVAL)

        logger.warning(
            "%s: did not exit within %dms, sending SIGKILL",
            self.name,
            int(seconds * 1000),
        )
        self._send(signal.SIGKILL)
        return self.popen.wait()

    def close(self) -> None:
        """Shut the process down if it is still running."""
        if self.is_running():
            logger.debug("%s: closing running process, attempting shutdown", self.name)
            try:
                self.shutdown(_DROP_TIMEOUT)
            except OSError as exc:
                logger.error("%s: failed to shutdown on close: %s", self.name, exc)

    def __enter__(self) -> ManagedProcess:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()