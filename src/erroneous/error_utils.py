from __future__ import annotations

import asyncio
import functools
import inspect
import traceback
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from loguru import logger

from erroneous.config import get_settings
from erroneous.context import to_dict
from erroneous.errors import wrap
from erroneous.protocols import Error

P = ParamSpec("P")
R = TypeVar("R")


def _format_tail(exc: BaseException, *, limit: int) -> str:
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(tb[-limit:])


def describe(err: BaseException, *, skip: int = 0) -> dict[str, Any]:
    """Structured envelope for *err*, suitable for logs and API responses.

    Unannotated errors are wrapped first, with the stack taken at the caller.
    """
    annotated = wrap(err, skip=skip + 1)
    frames = list(annotated.stack() or ())[: get_settings().stack_depth]
    return {
        "message": str(annotated),
        "type": type(annotated.unwrap()).__name__,
        "http_code": annotated.http_code(),
        "context": to_dict(annotated.context()),
        "stack": [f"{frame:+v}" for frame in frames],
    }


def log_error(
    err: BaseException,
    log=logger,  # loguru logger-like
    level: str | None = None,
    *,
    skip: int = 0,
) -> Error:
    """Emit one record for *err* with its context bound, return it annotated."""
    settings = get_settings()
    annotated = wrap(err, skip=skip + 1)
    tail = _format_tail(annotated.unwrap(), limit=settings.traceback_tail)
    log.bind(
        context=to_dict(annotated.context()), http_code=annotated.http_code()
    ).log(level or settings.log_level, "{}\n{}", annotated, tail)
    return annotated


def wrap_exceptions(
    *ctx: Any, http_code: int | None = None
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to annotate, log and re-raise errors escaping the callable.

    The recorded stack starts at the caller of the decorated function.
    """

    def annotate(exc: Exception) -> Error:
        # skip the wrapper frame as well
        annotated = wrap(exc, skip=2)
        if ctx:
            annotated = annotated.with_context(*ctx)
        if http_code is not None:
            annotated = annotated.with_http_code(http_code)
        return log_error(annotated)  # type: ignore[arg-type]

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
                try:
                    return await func(*args, **kwargs)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    raise annotate(exc)  # type: ignore[misc]

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                raise annotate(exc)  # type: ignore[misc]

        return sync_wrapper  # type: ignore[return-value]

    return decorator
