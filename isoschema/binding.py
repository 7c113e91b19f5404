"""
Tag binding between wire-shaped dicts and record instances.

Wire dicts are keyed by external tags ("Ccy", "@Ccy", "$value") the way an
XML or JSON decoder hands them over. bind() turns one into an instance keyed by
slot names, with Alt values for choices and Enum members for enumerated codes.
unbind() goes the other way. Neither validates constraints; bind() only fails
on input it cannot decode.
"""

from __future__ import annotations

import decimal
import logging
import math
import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from .paths import format_path
from .validation.core import Cardinality, Choice, Leaf, LeafKind, Node, Slot, to_shape
from .validation.types import Alt, ErrorKind, Path

logger = logging.getLogger(__name__)

_TRUE = frozenset({"true", "1"})
_FALSE = frozenset({"false", "0"})

# xs:decimal lexical space: no exponent, no NaN or infinities
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")


class BindingError(ValueError):
    """
    Wire data that cannot be turned into an instance.

    Attributes:
        path: Slot names and indices leading to the bad value
        kind: Set for choice arity failures, None otherwise
    """

    def __init__(self, message: str, path: Path = (), kind: ErrorKind | None = None):
        where = format_path(path)
        super().__init__(f"{where}: {message}" if where else message)
        self.path = path
        self.kind = kind


def bind(wire: Mapping[str, Any], schema: Node | dict[str, Any]) -> dict[str, Any]:
    """
    Build an instance from a tag-keyed wire dict.

    Args:
        wire: Decoded message body, keyed by tags
        schema: Node schema, or a dict-like declaration of one

    Returns:
        Instance dict keyed by slot names; absent and null fields are omitted

    Raises:
        BindingError: On values of the wrong shape, unknown codes, malformed
            numbers or choices without exactly one alternative

    Examples:
        bind({"@Ccy": "USD", "$value": "10.50"}, ActiveCurrencyAndAmount)
        # {"ccy": "USD", "value": 10.5}
    """
    node = to_shape(schema, "Schema")
    if not isinstance(node, Node):
        raise TypeError("Schema must be a Node or a dict")
    return _bind_node(node, wire, ())


def _bind_node(node: Node, wire: Any, path: Path) -> dict[str, Any]:
    if not isinstance(wire, Mapping):
        raise BindingError(
            f"expected a {node.name} record, got {type(wire).__name__}", path
        )

    record: dict[str, Any] = {}
    for slot in node.slots:
        raw = wire.get(slot.wire_name)
        if raw is None:
            continue
        record[slot.name] = _bind_slot(slot, raw, (*path, slot.name))

    unknown = set(wire) - {s.wire_name for s in node.slots}
    if unknown:
        logger.debug("Ignoring unknown tags in %s: %s", node.name, sorted(unknown))
    return record


def _bind_slot(slot: Slot, raw: Any, path: Path) -> Any:
    if slot.cardinality is not Cardinality.REPEATED:
        return _bind_shape(slot.shape, raw, path)

    # A single occurrence of a repeated element often decodes as a bare value
    items = raw if isinstance(raw, Sequence) and not isinstance(raw, str) else [raw]
    return [_bind_shape(slot.shape, item, (*path, i)) for i, item in enumerate(items)]


def _bind_shape(shape: Leaf | Node | Choice, raw: Any, path: Path) -> Any:
    if isinstance(shape, Leaf):
        return _bind_leaf(shape, raw, path)
    if isinstance(shape, Node):
        return _bind_node(shape, raw, path)
    return _bind_choice(shape, raw, path)


def _bind_choice(choice: Choice, raw: Any, path: Path) -> Alt:
    if not isinstance(raw, Mapping):
        raise BindingError(
            f"expected a {choice.name} record, got {type(raw).__name__}", path
        )

    present = [a for a in choice.alternatives if raw.get(a.wire_name) is not None]
    if len(present) > 1:
        names = ", ".join(a.wire_name for a in present)
        raise BindingError(
            f"more than one alternative of {choice.name} present: {names}",
            path,
            ErrorKind.MULTIPLE_CHOICE_ALTERNATIVES_POPULATED,
        )
    if not present:
        raise BindingError(
            f"no alternative of {choice.name} present",
            path,
            ErrorKind.NO_CHOICE_ALTERNATIVE_POPULATED,
        )

    alt = present[0]
    return Alt(alt.name, _bind_slot(alt, raw[alt.wire_name], (*path, alt.name)))


def _bind_leaf(leaf: Leaf, raw: Any, path: Path) -> Any:
    match leaf.kind:
        case LeafKind.TEXT:
            if isinstance(raw, str):
                return raw
        case LeafKind.DECIMAL:
            if isinstance(raw, (int, float, decimal.Decimal)) and not isinstance(
                raw, bool
            ):
                if not _is_finite(raw):
                    raise BindingError(f"{raw!r} is not a finite number", path)
                return raw
            if isinstance(raw, str):
                if DECIMAL_PATTERN.fullmatch(raw.strip()) is None:
                    raise BindingError(f"{raw!r} is not a decimal number", path)
                return float(raw)
        case LeafKind.FLAG:
            if isinstance(raw, bool):
                return raw
            if isinstance(raw, str) and raw.strip().lower() in _TRUE | _FALSE:
                return raw.strip().lower() in _TRUE
        case LeafKind.CODE:
            if isinstance(raw, Enum):
                raw = raw.value
            if isinstance(raw, str):
                if leaf.enum is None:
                    return raw
                try:
                    return leaf.enum(raw)
                except ValueError:
                    raise BindingError(
                        f"unknown {leaf.enum.__name__} code {raw!r}", path
                    ) from None

    raise BindingError(f"expected {leaf.kind.value}, got {type(raw).__name__}", path)


def _is_finite(x: Any) -> bool:
    if isinstance(x, decimal.Decimal):
        return x.is_finite()
    return math.isfinite(x)


def unbind(
    instance: Mapping[str, Any], schema: Node | dict[str, Any]
) -> dict[str, Any]:
    """
    Emit a tag-keyed wire dict from an instance.

    Absent fields are skipped, choices become a single-key mapping and Enum
    codes become their tags. Values are not validated; run validate() first.
    """
    node = to_shape(schema, "Schema")
    if not isinstance(node, Node):
        raise TypeError("Schema must be a Node or a dict")
    return _unbind_node(node, instance)


def _unbind_record(value: Any, owner: str) -> Mapping[str, Any]:
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        raise TypeError(f"expected a record for {owner}, got {type(value).__name__}")
    return value


def _unbind_node(node: Node, instance: Any) -> dict[str, Any]:
    instance = _unbind_record(instance, node.name)

    wire: dict[str, Any] = {}
    for slot in node.slots:
        value = instance.get(slot.name)
        if value is None:
            continue
        wire[slot.wire_name] = _unbind_slot(slot, value)
    return wire


def _unbind_slot(slot: Slot, value: Any) -> Any:
    if slot.cardinality is Cardinality.REPEATED:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise TypeError(
                f"{slot.name}: expected a sequence, got {type(value).__name__}"
            )
        return [_unbind_shape(slot.shape, item) for item in value]
    return _unbind_shape(slot.shape, value)


def _unbind_shape(shape: Leaf | Node | Choice, value: Any) -> Any:
    if isinstance(shape, Node):
        return _unbind_node(shape, value)
    if isinstance(shape, Choice):
        if isinstance(value, Alt):
            try:
                alt = shape.alternative(value.name)
            except KeyError as e:
                raise TypeError(e.args[0]) from e
            return {alt.wire_name: _unbind_slot(alt, value.value)}
        return _unbind_alternatives(
            shape.alternatives, _unbind_record(value, shape.name)
        )
    if isinstance(value, Enum):
        return value.value
    return value


def _unbind_alternatives(
    alternatives: tuple[Slot, ...], value: Mapping[str, Any]
) -> dict[str, Any]:
    return {
        alt.wire_name: _unbind_slot(alt, value[alt.name])
        for alt in alternatives
        if value.get(alt.name) is not None
    }
