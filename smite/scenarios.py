"""Scenarios run against a target node, and the entry point that drives them."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Type, Union

from smite.connection import NoiseConnectionError
from smite.runners import std_runner

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class ScenarioOutcome(Enum):
    OK = "ok"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of running a scenario on one input."""

    outcome: ScenarioOutcome
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> ScenarioResult:
        """The scenario ran successfully."""
        return cls(ScenarioOutcome.OK)

    @classmethod
    def skip(cls) -> ScenarioResult:
        """The test case should be skipped."""
        return cls(ScenarioOutcome.SKIP)

    @classmethod
    def fail(cls, reason: str) -> ScenarioResult:
        """The test case failed (e.g. the target crashed)."""
        return cls(ScenarioOutcome.FAIL, reason)


class TargetError(Exception):
    """A target operation failed; an I/O failure is given as ``__cause__``."""


class TargetStartFailed(TargetError):
    """The target failed to start."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"failed to start: {reason}")


class TargetCrashed(TargetError):
    """The target crashed."""

    def __init__(self) -> None:
        super().__init__("target crashed")


def _is_timeout_os_error(exc: Optional[BaseException]) -> bool:
    return isinstance(exc, (TimeoutError, BlockingIOError))


class ScenarioError(Exception):
    """A scenario operation failed.

    Built from a target error, a connection error, an I/O error, or a string
    describing a protocol error.
    """

    def __init__(
        self, error: Union[TargetError, NoiseConnectionError, OSError, str]
    ) -> None:
        if isinstance(error, str):
            message = f"protocol error: {error}"
        elif isinstance(error, TargetError):
            message = f"target error: {error}"
        elif isinstance(error, NoiseConnectionError):
            message = f"connection failed: {error}"
        elif isinstance(error, OSError):
            message = f"io error: {error}"
        else:
            raise TypeError(f"unsupported scenario error source: {error!r}")
        self.error = error
        super().__init__(message)

    def is_timeout(self) -> bool:
        """Whether a connection or target I/O error timed out (a potential hang)."""
        if isinstance(self.error, (NoiseConnectionError, TargetError)):
            return _is_timeout_os_error(self.error.__cause__)
        return False


class Scenario(ABC):
    """A test scenario run against a target node.

    The constructor prepares the initial state and raises ``ScenarioError``
    if that fails.
    """

    @abstractmethod
    def __init__(self, args: Sequence[str]) -> None:
        """Prepare the scenario from the command-line arguments."""

    @abstractmethod
    def run(self, data: bytes) -> ScenarioResult:
        """Run the test with the given fuzz input."""


def smite_run(
    scenario_cls: Type[Scenario], argv: Optional[Sequence[str]] = None
) -> int:
    """Set up a runner and a scenario, run one input, and return an exit code."""
    logging.basicConfig(level=logging.INFO)

    # The runner comes first so that it is ready before any target starts.
    runner = std_runner()

    args = list(sys.argv if argv is None else argv)
    try:
        scenario = scenario_cls(args)
    except ScenarioError as exc:
        logger.error("Failed to initialize scenario: %s", exc)
        return EXIT_FAILURE

    logger.info("Scenario initialized! Executing input...")
    data = runner.get_fuzz_input()

    result = scenario.run(data)
    if result.outcome is ScenarioOutcome.SKIP:
        runner.skip()
        return EXIT_SUCCESS
    if result.outcome is ScenarioOutcome.FAIL:
        runner.fail(f"Test case failed: {result.reason}")
        return EXIT_FAILURE

    logger.info("Test case ran successfully!")
    return EXIT_SUCCESS