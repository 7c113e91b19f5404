"""
Schema operations for isoschema validation.

Provides validate() and to_pydantic() functions.
"""

from __future__ import annotations

from typing import Any
from typing import Optional as TypingOptional

from pydantic import ConfigDict, Field, create_model

from .core import Cardinality, Choice, Leaf, LeafKind, Node, Slot, to_shape
from .engine import Validator
from .types import Err, Ok, ValidationError


def validate(
    instance: Any, schema: Node | dict[str, Any]
) -> Ok[Any] | Err[ValidationError]:
    """
    Validate an instance against a record schema.

    Args:
        instance: The record to validate (a mapping or a pydantic model)
        schema: Node schema, or a dict-like declaration of one

    Returns:
        Ok(instance) if validation passes
        Err(ValidationError) for the first defect found

    Usage:
        schema = {
            "ccy": Text(Pattern("[A-Z]{3}")),
            "amt": Decimal(MinValue(0)),
        }
        result = validate({"ccy": "USD", "amt": 100.0}, schema)
    """
    node = to_shape(schema, "Schema")

    if not isinstance(node, Node):
        raise TypeError("Schema must be a Node or a dict")

    return Validator(node).validate(instance)


_LEAF_TYPES: dict[LeafKind, type] = {
    LeafKind.TEXT: str,
    LeafKind.DECIMAL: float,
    LeafKind.FLAG: bool,
    LeafKind.CODE: str,
}

_MODEL_CONFIG = ConfigDict(populate_by_name=True, protected_namespaces=())


def to_pydantic(schema: Node | dict[str, Any], name: str | None = None) -> type:
    """
    Compile a record schema to a Pydantic model.

    Slot tags become field aliases, so the model reads tag-keyed wire dicts
    and dumps either form. Choices become a nested model with every
    alternative optional. Constraints are not compiled; run validate() on the
    model instance for those.

    Args:
        schema: Node schema or dict-like declaration
        name: Model class name, defaults to the Node name

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        Amount = to_pydantic(ActiveCurrencyAndAmount)
        amt = Amount.model_validate({"@Ccy": "USD", "$value": 10.5})
        validate(amt, ActiveCurrencyAndAmount)
    """
    node = to_shape(schema, name or "Schema")
    if not isinstance(node, Node):
        raise TypeError("Schema must be a Node or a dict")

    return _model_for(node, name or node.name, {})


def _model_for(node: Node, name: str, cache: dict[Any, type]) -> type:
    if node in cache:
        return cache[node]

    fields: dict[str, Any] = {}
    for slot in node.slots:
        fields[slot.name] = _extract_pydantic_field(slot, f"{name}_{slot.name}", cache)

    model = create_model(name, __config__=_MODEL_CONFIG, **fields)
    cache[node] = model
    return model


def _choice_model(choice: Choice, name: str, cache: dict[Any, type]) -> type:
    if choice in cache:
        return cache[choice]

    fields: dict[str, Any] = {}
    for alt in choice.alternatives:
        field_type, _ = _extract_pydantic_field(alt, f"{name}_{alt.name}", cache)
        fields[alt.name] = (TypingOptional[field_type], Field(None, alias=alt.tag))

    model = create_model(name, __config__=_MODEL_CONFIG, **fields)
    cache[choice] = model
    return model


def _extract_pydantic_field(
    slot: Slot, name: str, cache: dict[Any, type]
) -> tuple[Any, Any]:
    """Extract Pydantic field type and default from a slot."""
    match slot.shape:
        case Leaf(kind=LeafKind.CODE, enum=enum_cls) if enum_cls is not None:
            item_type: Any = enum_cls
        case Leaf(kind=kind):
            item_type = _LEAF_TYPES[kind]
        case Node() as nested:
            item_type = _model_for(nested, nested.name, cache)
        case Choice() as choice:
            # Anonymous choices are named after the slot holding them
            model_name = name if choice.name == "Choice" else choice.name
            item_type = _choice_model(choice, model_name, cache)
        case _:
            item_type = Any

    if slot.cardinality is Cardinality.REPEATED:
        item_type = list[item_type]  # type: ignore[valid-type]

    if slot.is_required:
        return (item_type, Field(..., alias=slot.tag))
    return (TypingOptional[item_type], Field(None, alias=slot.tag))
