"""Oracles: checks evaluated against a context after a test case runs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

C = TypeVar("C")


@dataclass(frozen=True)
class OracleResult:
    """Outcome of an oracle evaluation: a pass, or a failure with a reason."""

    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> OracleResult:
        """The check passed."""
        return cls()

    @classmethod
    def fail(cls, reason: str) -> OracleResult:
        """The check failed for the given reason."""
        return cls(reason)

    @property
    def passed(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.passed


class Oracle(ABC, Generic[C]):
    """Evaluates a condition against some context."""

    @abstractmethod
    def evaluate(self, context: C) -> OracleResult:
        """Evaluate the oracle against the given context."""

    @abstractmethod
    def name(self) -> str:
        """The name of this oracle, for logging."""