from .binding import BindingError, bind, unbind
from .context import validation_context
from .paths import format_path, locate, parse_path
from .validation import (
    Alt,
    Choice,
    Err,
    ErrorKind,
    Node,
    Ok,
    ValidationError,
    Validator,
    to_pydantic,
    validate,
)

__all__ = [
    "validate",
    "Validator",
    "Node",
    "Choice",
    "Alt",
    "Ok",
    "Err",
    "ErrorKind",
    "ValidationError",
    "validation_context",
    "bind",
    "unbind",
    "BindingError",
    "to_pydantic",
    "format_path",
    "parse_path",
    "locate",
]
