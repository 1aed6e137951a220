"""Alternating key/value context attached to annotated errors."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Final

ERRONEOUS_ERROR_KEY: Final = "ERRONEOUS_ERROR"
ODD_LENGTH: Final = "invalid context, odd length"
NON_STRING_KEY: Final = "invalid context, even-position not a string"

Context = tuple[Any, ...]


def bad_context(message: str) -> Context:
    return (ERRONEOUS_ERROR_KEY, message)


def validate(ctx: Sequence[Any]) -> Context:
    """Return *ctx* as a tuple, or the sentinel pair if it is malformed.

    Well-formed context has even length and a ``str`` at every even index.
    Malformed input is discarded, never raised on.
    """
    if len(ctx) % 2 != 0:
        return bad_context(ODD_LENGTH)
    if not all(isinstance(key, str) for key in ctx[::2]):
        return bad_context(NON_STRING_KEY)
    return tuple(ctx)


def pairs(ctx: Sequence[Any]) -> Iterator[tuple[str, Any]]:
    it = iter(ctx)
    return zip(it, it)


def lookup(ctx: Sequence[Any], key: str, default: Any = None) -> Any:
    """Value paired with the first occurrence of *key*."""
    for k, v in pairs(ctx):
        if k == key:
            return v
    return default


def replace_first(ctx: Context, key: str, value: Any) -> Context | None:
    """Copy of *ctx* with the first *key*'s value swapped, or None if absent."""
    for i in range(0, len(ctx) - 1, 2):
        if ctx[i] == key:
            return ctx[: i + 1] + (value,) + ctx[i + 2 :]
    return None


def to_dict(ctx: Sequence[Any]) -> dict[str, Any]:
    """Mapping view of *ctx*; earlier keys shadow later duplicates."""
    out: dict[str, Any] = {}
    for k, v in pairs(ctx):
        out.setdefault(k, v)
    return out
