"""
Schema building blocks for isoschema validation.

Provides Leaf, Choice, Slot and Node dataclasses plus the Required, Optional and
Repeated slot factories. Schemas are plain data; the engine interprets them.
"""

from __future__ import annotations

import decimal
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .constraints import Constraint, EnumMember
from .types import Err, Ok, ValidationError


class LeafKind(Enum):
    TEXT = "text"
    DECIMAL = "decimal"
    FLAG = "flag"
    CODE = "code"


class Cardinality(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    REPEATED = "repeated"


@dataclass(frozen=True, slots=True)
class Leaf:
    """
    Scalar simple type with its constraints.

    Constraints run in declaration order and the first failure wins.
    """

    kind: LeafKind
    constraints: tuple[Constraint, ...] = ()
    enum: type[Enum] | None = None

    def __post_init__(self) -> None:
        for c in self.constraints:
            if not isinstance(c, Constraint):
                raise TypeError(f"Expected Constraint, got {type(c).__name__}")

    def accepts(self, value: Any) -> bool:
        """Whether `value` has the Python type this leaf kind holds."""
        match self.kind:
            case LeafKind.TEXT:
                return isinstance(value, str)
            case LeafKind.DECIMAL:
                return isinstance(
                    value, (int, float, decimal.Decimal)
                ) and not isinstance(value, bool)
            case LeafKind.FLAG:
                return isinstance(value, bool)
            case LeafKind.CODE:
                if self.enum is not None and isinstance(value, self.enum):
                    return True
                if isinstance(value, Enum):
                    return isinstance(value.value, str)
                return isinstance(value, str)
        return False


def Text(*constraints: Constraint) -> Leaf:
    """
    Text simple type.

    Usage:
        Text(Range(1, 35))                   # Max35Text
        Text(Pattern(r"[A-Z]{3,3}"))         # ActiveCurrencyCode
    """
    return Leaf(LeafKind.TEXT, constraints)


def Decimal(*constraints: Constraint) -> Leaf:
    """Decimal simple type, e.g. Decimal(MinValue(0)) for amounts."""
    return Leaf(LeafKind.DECIMAL, constraints)


def Flag() -> Leaf:
    """Boolean simple type (TrueFalseIndicator, YesNoIndicator)."""
    return Leaf(LeafKind.FLAG)


def Code(*constraints: Any) -> Leaf:
    """
    Coded enumeration.

    The first argument may be an Enum class; its member values become the
    closed set of allowed tags and instances may hold either members or tags.

    Usage:
        Code(AddressType2Code)
        Code(EnumMember({"ADDR", "PBOX"}))
        Code(Range(1, 4))                    # ExternalCode, open list
    """
    enum_cls: type[Enum] | None = None
    rest = constraints
    if constraints and isinstance(constraints[0], type) and issubclass(
        constraints[0], Enum
    ):
        enum_cls = constraints[0]
        rest = (EnumMember(enum_cls), *constraints[1:])
    return Leaf(LeafKind.CODE, tuple(rest), enum=enum_cls)


@dataclass(frozen=True, slots=True)
class Slot:
    """
    One named member of a record.

    `name` is the Python-side key; `tag` is the external wire name when it
    differs ("Ccy", "@Ccy", "$value"). A repeated slot with optional=True may
    be absent altogether; otherwise it must be present, though possibly empty.
    """

    shape: Leaf | Node | Choice
    cardinality: Cardinality = Cardinality.REQUIRED
    name: str = ""
    tag: str | None = None
    optional: bool = False

    @property
    def wire_name(self) -> str:
        return self.tag or self.name

    @property
    def is_required(self) -> bool:
        if self.cardinality is Cardinality.REPEATED:
            return not self.optional
        return self.cardinality is Cardinality.REQUIRED


def Required(shape: Any, tag: str | None = None) -> Slot:
    """
    Mark a field as required (absent or None fails validation).

    Usage:
        Required(Text(Range(1, 35)))
        Required(Text(Pattern(r"[A-Z]{3,3}")), tag="@Ccy")
    """
    return Slot(to_shape(shape), Cardinality.REQUIRED, tag=tag)


def Optional(shape: Any, tag: str | None = None) -> Slot:
    """
    Allow absence, validate if present.

    Usage:
        Optional(PostalAddress24, tag="PstlAdr")
    """
    return Slot(to_shape(shape), Cardinality.OPTIONAL, tag=tag)


def Repeated(shape: Any, tag: str | None = None, optional: bool = False) -> Slot:
    """
    Ordered sequence of values; order is the wire order.

    Usage:
        Repeated(Text(Range(1, 70)), tag="AdrLine")
        Repeated(OtherContact1, tag="Othr", optional=True)
    """
    return Slot(to_shape(shape), Cardinality.REPEATED, tag=tag, optional=optional)


def _named_slots(fields: Mapping[str, Any], owner: str) -> tuple[Slot, ...]:
    slots = []
    for key, spec in fields.items():
        if not isinstance(key, str) or not key:
            raise TypeError(f"{owner}: field names must be non-empty strings")
        slots.append(replace(to_slot(spec, f"{owner}.{key}"), name=key))
    return tuple(slots)


@dataclass(frozen=True, slots=True, init=False)
class Choice:
    """
    Union of named alternatives, at most one populated per instance.

    Instances hold an Alt(name, value). Alternatives are declared like record
    fields, so they carry tags and may be repeated.

    Usage:
        Choice({
            "iban": Optional(Text(Pattern(IBAN)), tag="IBAN"),
            "othr": Optional(GenericAccountIdentification1, tag="Othr"),
        })
    """

    alternatives: tuple[Slot, ...]
    name: str

    def __init__(
        self, alternatives: Mapping[str, Any], name: str = "Choice"
    ) -> None:
        if not isinstance(alternatives, Mapping) or not alternatives:
            raise TypeError("Choice() needs a non-empty mapping of alternatives")
        # A chosen alternative must carry a value, whatever it was declared as
        alts = tuple(
            s if s.cardinality is not Cardinality.OPTIONAL
            else replace(s, cardinality=Cardinality.REQUIRED)
            for s in _named_slots(alternatives, name)
        )
        object.__setattr__(self, "alternatives", alts)
        object.__setattr__(self, "name", name)

    def alternative(self, name: str) -> Slot:
        for alt in self.alternatives:
            if alt.name == name:
                return alt
        raise KeyError(f"{self.name} has no alternative {name!r}")


@dataclass(frozen=True, slots=True, init=False)
class Node:
    """
    Record schema: an ordered list of slots.

    Declaration order is both wire order and validation order, so the first
    reported defect is always the earliest declared one.

    Usage:
        ActiveCurrencyAndAmount = Node("ActiveCurrencyAndAmount", {
            "ccy": Required(Text(Pattern(r"[A-Z]{3,3}")), tag="@Ccy"),
            "value": Required(Decimal(MinValue(0)), tag="$value"),
        })
    """

    name: str
    slots: tuple[Slot, ...]

    def __init__(self, name: str, fields: Mapping[str, Any]) -> None:
        if not isinstance(fields, Mapping):
            raise TypeError(
                f"Node fields must be a mapping, got {type(fields).__name__}"
            )
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "slots", _named_slots(fields, name))

    def slot(self, name: str) -> Slot:
        for s in self.slots:
            if s.name == name:
                return s
        raise KeyError(f"{self.name} has no field {name!r}")

    def validate(self, instance: Any) -> Ok[Any] | Err[ValidationError]:
        """Validate an instance of this record; see Validator."""
        # Import here to avoid circular dependency
        from .engine import Validator

        return Validator(self).validate(instance)


def to_shape(v: Any, name: str = "Anonymous") -> Leaf | Node | Choice:
    """
    Coerce a value to a slot shape.

    Conversion rules:
        Leaf | Node | Choice -> pass through
        dict -> Node with recursive conversion
    """
    if isinstance(v, (Leaf, Node, Choice)):
        return v
    if isinstance(v, Slot):
        raise TypeError("Slot factories cannot be nested; pass the shape directly")
    if isinstance(v, dict):
        return Node(name, v)
    raise TypeError(f"Cannot convert {type(v).__name__} to a schema shape")


def to_slot(v: Any, name: str = "Anonymous") -> Slot:
    """
    Coerce a field declaration to a slot.

    Conversion rules:
        Slot -> pass through
        Leaf | Node | Choice | dict -> Required(shape)
        [shape] -> Repeated(shape)
    """
    if isinstance(v, Slot):
        return v
    if isinstance(v, list):
        if len(v) != 1:
            raise ValueError("Repeated field shorthand takes exactly one item shape")
        return Repeated(to_shape(v[0], name))
    return Slot(to_shape(v, name), Cardinality.REQUIRED)
