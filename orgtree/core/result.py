"""Outcome type returned by use cases.

Expected business-rule failures are values, not exceptions: a failed result
carries an opaque dot-delimited error code for the presentation layer to
translate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success flag plus either a value or an error code."""

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str) -> "Result[T]":
        return cls(success=False, error=error)

    @property
    def failed(self) -> bool:
        return not self.success
