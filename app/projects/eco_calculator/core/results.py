"""
Result types shared by the resolver, providers and state machine.

Framework-agnostic; no Flask imports.
"""
import enum
from dataclasses import dataclass
from typing import Optional


class ErrorKind(enum.Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    REMOTE_FAILURE = "remote_failure"
    EVALUATION = "evaluation"


@dataclass
class CalculationResult:
    """Outcome of a calculation: a value, or an error kind with a message."""

    success: bool
    value: Optional[float] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    source: Optional[str] = None  # 'remote', 'fallback' or 'local'
    provider: Optional[str] = None

    @classmethod
    def ok(cls, value, source, provider=None):
        return cls(success=True, value=value, source=source, provider=provider)

    @classmethod
    def failure(cls, error_kind, error, provider=None):
        return cls(success=False, error_kind=error_kind, error=error, provider=provider)

    @property
    def is_remote_failure(self) -> bool:
        return not self.success and self.error_kind is ErrorKind.REMOTE_FAILURE
