"""
Built-in constraints for isoschema validation.

Provides factory functions that return Constraint instances. A constraint is a
pure predicate over one leaf value; it never sees sibling fields.
"""

from __future__ import annotations

import decimal
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from ..paths import field_name
from .types import Err, ErrorKind, Ok, Path, ValidationError

# A check returns None when the value passes, otherwise the failure kind and the
# tail of the message ("is shorter than the minimum length of 3").
Failure = tuple[ErrorKind, str]
CheckFn = Callable[[Any], Failure | None]


def tag_of(value: Any) -> Any:
    """Return the wire tag of a code value, or the value itself."""
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True, slots=True)
class Constraint:
    """
    Immutable constraint attached to a leaf slot.

    Wraps a check function with a description used in reprs and docs. The
    pairing of constraint and leaf kind is fixed when the schema is declared.
    """

    check: CheckFn
    description: str

    def __call__(
        self, value: Any, path: Path = ()
    ) -> Ok[Any] | Err[ValidationError]:
        """
        Check a value.

        Returns:
            Ok(value) if the value satisfies the constraint
            Err(ValidationError) naming the innermost field on `path` otherwise
        """
        failure = self.check(value)
        if failure is None:
            return Ok(value)
        kind, detail = failure
        return Err(ValidationError(kind, f"{field_name(path)} {detail}", path))

    def __repr__(self) -> str:
        return self.description


def _require_length(n: Any, what: str) -> int:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"{what} must be a non-negative int, got {n!r}")
    return n


def Range(lower: int | None = None, upper: int | None = None) -> Constraint:
    """
    Validate length is within range (inclusive).

    Length counts code points, not bytes. Codes are measured by their tag.

    Usage:
        Range(1, 35)        # Max35Text
        Range(lower=1)      # non-empty
        Range(upper=140)    # at most 140 characters
    """
    if lower is None and upper is None:
        raise ValueError("Range() needs at least one bound")
    if lower is not None:
        _require_length(lower, "lower")
    if upper is not None:
        _require_length(upper, "upper")
    if lower is not None and upper is not None and lower > upper:
        raise ValueError(f"Empty length range: {lower} > {upper}")

    def check(x: Any) -> Failure | None:
        n = len(tag_of(x))
        if lower is not None and n < lower:
            return (
                ErrorKind.TOO_SHORT,
                f"is shorter than the minimum length of {lower}",
            )
        if upper is not None and n > upper:
            return (ErrorKind.TOO_LONG, f"exceeds the maximum length of {upper}")
        return None

    if upper is None:
        return Constraint(check, f"MinLength({lower})")
    if lower is None:
        return Constraint(check, f"MaxLength({upper})")
    return Constraint(check, f"Range({lower}, {upper})")


def MinLength(n: int) -> Constraint:
    """Validate minimum length."""
    return Range(lower=n)


def MaxLength(n: int) -> Constraint:
    """Validate maximum length."""
    return Range(upper=n)


def Pattern(pattern: str | re.Pattern[str]) -> Constraint:
    """
    Validate that the whole value matches a regular expression.

    The expression is compiled once here and shared by every validation of
    the field. Matching is anchored at both ends (re.fullmatch).

    Usage:
        Pattern(r"[A-Z]{3,3}")                          # ActiveCurrencyCode
        Pattern(r"[A-Z]{2,2}[0-9]{2,2}[a-zA-Z0-9]{1,30}")  # IBAN2007Identifier
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(x: Any) -> Failure | None:
        if compiled.fullmatch(tag_of(x)) is None:
            return (
                ErrorKind.PATTERN_MISMATCH,
                "does not match the required pattern",
            )
        return None

    return Constraint(check, f"Pattern({compiled.pattern!r})")


def MinValue(minimum: Any) -> Constraint:
    """
    Validate a decimal is at least `minimum` (inclusive).

    NaN and infinities fail: an ISO 20022 decimal is always finite.

    Usage:
        MinValue(0)         # ActiveCurrencyAndAmount_SimpleType
    """

    def check(x: Any) -> Failure | None:
        finite = x.is_finite() if isinstance(x, decimal.Decimal) else math.isfinite(x)
        if not finite:
            return (ErrorKind.BELOW_MINIMUM, "is not a finite number")
        if x < minimum:
            return (
                ErrorKind.BELOW_MINIMUM,
                f"is less than the minimum value of {minimum:f}",
            )
        return None

    return Constraint(check, f"MinValue({minimum!r})")


def EnumMember(values: Iterable[Any] | type[Enum]) -> Constraint:
    """
    Validate a code is one of a closed set of tags.

    Accepts an iterable of tags or an Enum class (whose member values are the
    tags). There is no catch-all member.

    Usage:
        EnumMember({"ADDR", "PBOX", "HOME"})
        EnumMember(AddressType2Code)
    """
    container = frozenset(tag_of(v) for v in values)
    if not container:
        raise ValueError("EnumMember() needs at least one allowed code")

    def check(x: Any) -> Failure | None:
        if tag_of(x) not in container:
            return (
                ErrorKind.NOT_IN_ENUMERATION,
                "is not one of the allowed codes",
            )
        return None

    return Constraint(check, f"EnumMember({sorted(container)!r})")
