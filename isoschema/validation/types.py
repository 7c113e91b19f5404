"""
Type definitions for isoschema validation.

Provides a minimal Result type (Ok/Err), the closed error taxonomy and the
ValidationError value returned by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, TypeVar

from ..paths import Path

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


class ErrorKind(IntEnum):
    """
    Validation failure kinds.

    The integer values are the codes carried on the wire by the ISO 20022
    message libraries this package binds to. 1004 is assigned to missing
    required fields; 1006 and 1007 cover choice arity.
    """

    TOO_SHORT = 1001
    TOO_LONG = 1002
    BELOW_MINIMUM = 1003
    MISSING_REQUIRED_FIELD = 1004
    PATTERN_MISMATCH = 1005
    MULTIPLE_CHOICE_ALTERNATIVES_POPULATED = 1006
    NO_CHOICE_ALTERNATIVE_POPULATED = 1007
    NOT_IN_ENUMERATION = 1008


@dataclass(frozen=True, slots=True)
class Alt:
    """
    The populated alternative of a choice.

    A choice instance holds exactly one Alt, so "at most one alternative" is
    a property of the value rather than something to check.

    Usage:
        {"id": Alt("iban", "DE89370400440532013000")}
    """

    name: str
    value: Any


@dataclass(frozen=True, slots=True)
class ValidationError:
    """
    The first defect found in an instance.

    Attributes:
        kind: Failure kind
        message: Human-readable description, e.g. "ccy does not match the
            required pattern"
        path: Slot names and sequence indices leading to the offending value
    """

    kind: ErrorKind
    message: str
    path: Path = ()

    @property
    def code(self) -> int:
        """Integer code of the failure kind."""
        return int(self.kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "code": self.code,
            "kind": self.kind.name,
            "message": self.message,
            "path": list(self.path),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationError:
        """Create ValidationError from dict."""
        return cls(
            kind=ErrorKind(data["code"]),
            message=data["message"],
            path=tuple(data.get("path", ())),
        )

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

