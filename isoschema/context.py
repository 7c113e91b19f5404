"""
Context manager for validation configuration (depth bound, choice strictness).
"""

from contextlib import contextmanager
from contextvars import ContextVar

DEFAULT_MAX_DEPTH = 64

# Context variables for engine settings
_max_depth: ContextVar[int] = ContextVar("max_depth", default=DEFAULT_MAX_DEPTH)
_strict_choices: ContextVar[bool] = ContextVar("strict_choices", default=True)


def max_depth() -> int:
    """Deepest level of nested records the engine will descend into."""
    return _max_depth.get()


def is_strict_choices() -> bool:
    """Check if loose choice values must have exactly one populated alternative."""
    return _strict_choices.get()


@contextmanager
def validation_context(
    *, max_depth: int | None = None, strict_choices: bool | None = None
):
    """
    Context manager for validation configuration.

    Args:
        max_depth: Bound on record nesting; a choice does not add a level.
                   Exceeding it raises RecursionError, which keeps traversal
                   finite even for a self-referencing schema. Defaults to 64.
        strict_choices: If False, a choice given as a plain mapping (rather than
                   an Alt) may have zero or several alternatives populated; each
                   populated one is validated in declaration order. Defaults to
                   True, where such values fail with a choice arity error.

    Example:
        from isoschema import validate, validation_context

        # Accept choice records the way older producers emit them
        with validation_context(strict_choices=False):
            validate(loose_instance, schema)
    """
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")

    tokens = []
    if max_depth is not None:
        tokens.append((_max_depth, _max_depth.set(max_depth)))
    if strict_choices is not None:
        tokens.append((_strict_choices, _strict_choices.set(strict_choices)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
