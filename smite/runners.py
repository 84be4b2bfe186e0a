"""Test case runners: where fuzz input comes from and where outcomes go."""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

INPUT_ENV = "SMITE_INPUT"


class Runner(ABC):
    """Supplies fuzz input and receives test case outcomes."""

    @abstractmethod
    def get_fuzz_input(self) -> bytes:
        """Return the next fuzz input."""

    @abstractmethod
    def fail(self, message: str) -> None:
        """Report the last test case as failed."""

    @abstractmethod
    def skip(self) -> None:
        """Report the last test case as skipped."""


class LocalRunner(Runner):
    """Reads input from the file named by ``SMITE_INPUT``, or from stdin.

    Used to reproduce test cases locally. Reported outcomes are kept in
    ``failures`` and ``skipped`` as well as logged.
    """

    def __init__(self) -> None:
        self.failures: list[str] = []
        self.skipped = False

    def get_fuzz_input(self) -> bytes:
        path = os.environ.get(INPUT_ENV)
        if path is not None:
            logger.info("Reading input from %r", path)
            try:
                return Path(path).read_bytes()
            except OSError:
                return b""
        logger.info("Reading input from /dev/stdin")
        try:
            return sys.stdin.buffer.read()
        except (OSError, ValueError, AttributeError) as exc:
            logger.error("Failed to read from stdin: %s", exc)
            return b""

    def fail(self, message: str) -> None:
        self.failures.append(message)
        logger.error("%s", message)

    def skip(self) -> None:
        self.skipped = True
        logger.warning("Skipping test case")


def std_runner() -> Runner:
    """The runner to use in this environment."""
    return LocalRunner()