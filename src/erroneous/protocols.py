"""Capability set shared by every annotated error."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from erroneous.stack import CallStack


@runtime_checkable
class Error(Protocol):
    """An exception extended with call stack, context and HTTP status code."""

    def unwrap(self) -> BaseException:  # pragma: no cover - protocol definition
        """Return the originally wrapped exception."""

    def context(self) -> tuple[Any, ...]:  # pragma: no cover - protocol definition
        """Return alternating keys and values describing the circumstances."""

    def http_code(self) -> int:  # pragma: no cover - protocol definition
        """Return the HTTP status code set on the error."""

    def value(self, key: str, default: Any = None) -> Any:  # pragma: no cover
        """Return the value for *key* in the context."""

    def stack(self) -> CallStack | None:  # pragma: no cover - protocol definition
        """Return the call stack associated with the error."""

    def with_context(self, *ctx: Any) -> Error:  # pragma: no cover
        """Return a copy with further key/values appended to the context."""

    def with_http_code(self, code: int) -> Error:  # pragma: no cover
        """Return a copy with the HTTP status code replaced."""

    def with_stack(self, *, skip: int = 0) -> Error:  # pragma: no cover
        """Return a copy whose call stack is captured at the caller."""


def is_annotated(err: object) -> bool:
    return isinstance(err, BaseException) and isinstance(err, Error)
