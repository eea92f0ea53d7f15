"""
Centralised exception hierarchy for EvoPool.

The optimizer surfaces typed exceptions instead of generic ``ValueError`` or
``RuntimeError`` instances so that the CLI and SDK layers can report
actionable messages while keeping the offending values in ``context``.
"""

from __future__ import annotations

from typing import Any


class EvoPoolError(Exception):
    """Base class for all EvoPool specific exceptions."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class EvoPoolConfigError(EvoPoolError):
    """Raised for invalid run configuration, detected before any generation runs."""


class EvoPoolRuntimeError(EvoPoolError):
    """Raised for runtime orchestration issues."""


class EvoPoolEvaluationError(EvoPoolRuntimeError):
    """Raised when an evaluation pass leaves a score that selection cannot use."""


__all__ = [
    "EvoPoolError",
    "EvoPoolConfigError",
    "EvoPoolRuntimeError",
    "EvoPoolEvaluationError",
]
