"""
isoschema validation - declarative record schemas and a fail-fast validator.

Usage:
    from isoschema.validation import (
        Node, Required, Optional, Text, Decimal, Pattern, MinValue, validate,
    )

    Amount = Node("Amount", {
        "ccy": Required(Text(Pattern("[A-Z]{3}")), tag="@Ccy"),
        "amt": Required(Decimal(MinValue(0)), tag="$value"),
    })

    result = validate({"ccy": "USD", "amt": 100.0}, Amount)
    Model = to_pydantic(Amount)
"""

from .constraints import (
    Constraint,
    EnumMember,
    MaxLength,
    MinLength,
    MinValue,
    Pattern,
    Range,
)
from .core import (
    Cardinality,
    Choice,
    Code,
    Decimal,
    Flag,
    Leaf,
    LeafKind,
    Node,
    Optional,
    Repeated,
    Required,
    Slot,
    Text,
    to_shape,
    to_slot,
)
from .engine import Validator
from .schema import to_pydantic, validate
from .types import Alt, Err, ErrorKind, Ok, ValidationError

__all__ = [
    # Result types
    "Ok",
    "Err",
    "ErrorKind",
    "ValidationError",
    # Constraints
    "Constraint",
    "MinLength",
    "MaxLength",
    "Range",
    "Pattern",
    "MinValue",
    "EnumMember",
    # Leaves
    "Leaf",
    "LeafKind",
    "Text",
    "Decimal",
    "Flag",
    "Code",
    # Records
    "Slot",
    "Cardinality",
    "Required",
    "Optional",
    "Repeated",
    "Choice",
    "Alt",
    "Node",
    "to_shape",
    "to_slot",
    # Engine
    "Validator",
    "validate",
    "to_pydantic",
]
