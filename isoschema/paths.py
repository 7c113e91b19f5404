"""
Field paths for isoschema errors.

A path is a tuple of slot names (str) and sequence indices (int), e.g.
("document", "entries", 1, "amount", "ccy"). It renders as
"document.entries[1].amount.ccy".
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

# Slot names and sequence indices, outermost first
Path = tuple[str | int, ...]

KEY_PATTERN = re.compile(r"^[a-zA-Z_@$][a-zA-Z0-9_-]*")
INDEX_PATTERN = re.compile(r"^\[(\d+)\]")


def field_name(path: Path) -> str:
    """Innermost slot name on a path, used to label error messages."""
    for segment in reversed(path):
        if isinstance(segment, str):
            return segment
    return "value"


def format_path(path: Path) -> str:
    """Render a path tuple as "a.b[1].c"."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


def parse_path(path_str: str) -> Path:
    """
    Parse "a.b[1].c" back into ("a", "b", 1, "c").

    Raises:
        ValueError: On empty input or anything but keys and non-negative indices
    """
    if not path_str:
        raise ValueError("Empty path")

    segments: list[str | int] = []
    remaining = path_str

    while remaining:
        if match := INDEX_PATTERN.match(remaining):
            segments.append(int(match.group(1)))
        elif match := KEY_PATTERN.match(remaining):
            segments.append(match.group(0))
        else:
            raise ValueError(f"Invalid path syntax at: {remaining}")
        remaining = remaining[match.end() :]

        # Skip dot separator if present
        if remaining.startswith("."):
            remaining = remaining[1:]
            if not remaining or remaining.startswith("["):
                raise ValueError(f"Invalid path syntax: {path_str}")

    return tuple(segments)


def locate(instance: Any, path: Path | str, default: Any = None) -> Any:
    """
    Fetch the value at a path inside an instance.

    Args:
        instance: Node instance (mapping, with Alt values for choices)
        path: Path tuple or its string form
        default: Returned when any step is missing

    Examples:
        locate(doc, ("entries", 1, "amount"))
        locate(doc, err.path)
        locate(doc, "entries[1].amount")
    """
    # Import here to avoid circular dependency
    from .validation.types import Alt

    if isinstance(path, str):
        path = parse_path(path)

    current = instance
    for segment in path:
        if current is None:
            return default
        if hasattr(current, "model_dump"):
            current = current.model_dump()

        if isinstance(segment, int):
            if isinstance(current, Sequence) and not isinstance(current, str):
                current = current[segment] if segment < len(current) else None
            else:
                return default
        elif isinstance(current, Alt):
            current = current.value if current.name == segment else None
        elif isinstance(current, Mapping):
            current = current.get(segment)
        else:
            return default

    return default if current is None else current
