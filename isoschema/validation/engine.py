"""
Depth-first validation engine.

Walks an instance against its Node schema in slot declaration order and stops
at the first defect. The engine holds no state between calls; a Validator can
be shared between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..context import is_strict_choices, max_depth
from ..paths import field_name, format_path
from .core import Cardinality, Choice, Leaf, Node, Slot
from .types import Alt, Err, ErrorKind, Ok, Path, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Validator:
    """
    Validator bound to one record schema.

    Usage:
        result = Validator(ActiveCurrencyAndAmount).validate(
            {"ccy": "USD", "value": 100.0}
        )
        if isinstance(result, Err):
            print(result.error.code, result.error.message)
    """

    schema: Node

    def validate(self, instance: Any) -> Ok[Any] | Err[ValidationError]:
        """
        Validate an instance.

        Returns:
            Ok(instance) if every field satisfies its constraints
            Err(ValidationError) for the first defect in declaration order

        Raises:
            TypeError: If the instance does not have the shape of the schema
                (e.g. a number where text is declared)
            RecursionError: If nesting exceeds the configured max_depth
        """
        error = _check_node(self.schema, instance, (), 1)
        if error is not None:
            logger.debug(
                "%s failed validation at %s: [%d] %s",
                self.schema.name,
                format_path(error.path) or "<root>",
                error.code,
                error.message,
            )
            return Err(error)
        return Ok(instance)

    def __call__(self, instance: Any) -> Ok[Any] | Err[ValidationError]:
        return self.validate(instance)


def _as_record(value: Any, path: Path, owner: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump()
    where = format_path(path) or owner
    raise TypeError(
        f"{where}: expected a record for {owner}, got {type(value).__name__}"
    )


def _missing(path: Path) -> ValidationError:
    return ValidationError(
        ErrorKind.MISSING_REQUIRED_FIELD,
        f"{field_name(path)} is required but was not provided",
        path,
    )


def _check_node(
    node: Node, value: Any, path: Path, depth: int
) -> ValidationError | None:
    limit = max_depth()
    if depth > limit:
        raise RecursionError(
            f"{format_path(path)}: nesting exceeds max_depth={limit} in {node.name}"
        )

    record = _as_record(value, path, node.name)
    for slot in node.slots:
        error = _check_slot(slot, record.get(slot.name), (*path, slot.name), depth)
        if error is not None:
            return error
    return None


def _check_slot(
    slot: Slot, value: Any, path: Path, depth: int
) -> ValidationError | None:
    if value is None:
        return _missing(path) if slot.is_required else None

    if slot.cardinality is not Cardinality.REPEATED:
        return _check_shape(slot.shape, value, path, depth)

    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise TypeError(
            f"{format_path(path)}: expected a sequence, got {type(value).__name__}"
        )
    for i, item in enumerate(value):
        item_path = (*path, i)
        if item is None:
            return _missing(item_path)
        error = _check_shape(slot.shape, item, item_path, depth)
        if error is not None:
            return error
    return None


def _check_shape(
    shape: Leaf | Node | Choice, value: Any, path: Path, depth: int
) -> ValidationError | None:
    if isinstance(shape, Leaf):
        return _check_leaf(shape, value, path)
    if isinstance(shape, Node):
        return _check_node(shape, value, path, depth + 1)
    # A choice wraps one alternative; only records add a nesting level
    return _check_choice(shape, value, path, depth)


def _check_leaf(leaf: Leaf, value: Any, path: Path) -> ValidationError | None:
    if not leaf.accepts(value):
        raise TypeError(
            f"{format_path(path)}: expected {leaf.kind.value}, "
            f"got {type(value).__name__}"
        )
    for constraint in leaf.constraints:
        result = constraint(value, path)
        if isinstance(result, Err):
            return result.error
    return None


def _check_choice(
    choice: Choice, value: Any, path: Path, depth: int
) -> ValidationError | None:
    if isinstance(value, Alt):
        try:
            alt = choice.alternative(value.name)
        except KeyError as e:
            raise TypeError(f"{format_path(path)}: {e.args[0]}") from e
        return _check_slot(alt, value.value, (*path, alt.name), depth)

    # Loosely built value: one key per alternative, as the wire format has it
    record = _as_record(value, path, choice.name)
    populated = [a for a in choice.alternatives if record.get(a.name) is not None]

    if is_strict_choices():
        if len(populated) > 1:
            names = ", ".join(a.name for a in populated)
            return ValidationError(
                ErrorKind.MULTIPLE_CHOICE_ALTERNATIVES_POPULATED,
                f"{field_name(path)} has more than one alternative populated: "
                f"{names}",
                path,
            )
        if not populated:
            return ValidationError(
                ErrorKind.NO_CHOICE_ALTERNATIVE_POPULATED,
                f"{field_name(path)} has no alternative populated",
                path,
            )

    for alt in populated:
        error = _check_slot(alt, record[alt.name], (*path, alt.name), depth)
        if error is not None:
            return error
    return None
