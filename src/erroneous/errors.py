from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Final, overload

from erroneous.context import Context, lookup, pairs, replace_first, validate
from erroneous.protocols import Error, is_annotated
from erroneous.stack import CallStack, capture

HTTP_CODE_KEY: Final = "httpcode"
DEFAULT_HTTP_CODE: Final = 500


def _caller_stack(skip: int) -> CallStack:
    # skip this helper and the public function that called it
    return capture(skip=skip + 2).trim_runtime()


@dataclass(frozen=True, slots=True, eq=False)
class AnnotatedError(Exception):
    """Exception wrapper carrying diagnostics for the wrapped *cause*.

    Instances are immutable; every ``with_*`` method returns a new error that
    shares the cause and whatever parts it does not change. Notes added with
    :meth:`add_note` are the one exception.

    Attributes:
        cause: The original, non-annotated exception. Must be a
            :class:`BaseException`; anything else raises :class:`TypeError`.
        ctx: Alternating keys and values describing the circumstances,
            validated like the context given to :func:`wrap`.
        call_stack: Frames active where the error was wrapped, innermost first.
    """

    cause: BaseException
    ctx: Context = ()
    call_stack: CallStack | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.cause, BaseException):
            raise TypeError(
                f"cause must be an exception, not {type(self.cause).__name__}"
            )
        object.__setattr__(self, "ctx", validate(self.ctx))
        object.__setattr__(self, "args", (self.cause, self.ctx, self.call_stack))
        object.__setattr__(self, "__cause__", self.cause)

    def __setstate__(self, state: dict[str, Any]) -> None:
        for key, value in state.items():
            object.__setattr__(self, key, value)

    def __str__(self) -> str:
        return str(self.cause)

    def add_note(self, note: str) -> None:
        if not isinstance(note, str):
            raise TypeError(f"note must be a str, not {type(note).__name__}")
        try:
            notes = self.__notes__
        except AttributeError:
            notes = []
            object.__setattr__(self, "__notes__", notes)
        notes.append(note)

    def unwrap(self) -> BaseException:
        return self.cause

    def context(self) -> Context:
        return self.ctx

    def pairs(self) -> tuple[tuple[str, Any], ...]:
        return tuple(pairs(self.ctx))

    def value(self, key: str, default: Any = None) -> Any:
        return lookup(self.ctx, key, default)

    def http_code(self) -> int:
        code = self.value(HTTP_CODE_KEY)
        if not isinstance(code, int) or isinstance(code, bool):
            return DEFAULT_HTTP_CODE
        return code

    def stack(self) -> CallStack | None:
        return self.call_stack

    def with_stack(self, *, skip: int = 0) -> AnnotatedError:
        return replace(self, call_stack=_caller_stack(skip))

    def with_context(self, *ctx: Any) -> AnnotatedError:
        return replace(self, ctx=self.ctx + validate(ctx))

    def with_http_code(self, code: int) -> AnnotatedError:
        ctx = replace_first(self.ctx, HTTP_CODE_KEY, code)
        if ctx is None:
            return self.with_context(HTTP_CODE_KEY, code)
        return replace(self, ctx=ctx)


@overload
def wrap(err: None, *ctx: Any, skip: int = 0) -> None: ...


@overload
def wrap(err: BaseException, *ctx: Any, skip: int = 0) -> Error: ...


def wrap(err: BaseException | None, *ctx: Any, skip: int = 0) -> Error | None:
    """Annotate *err* with alternating key/value *ctx* and the caller's stack.

    ``None`` stays ``None`` and an already annotated error is returned as is,
    ignoring *ctx*. *skip* drops that many extra frames above the caller.
    Anything other than ``None`` or an exception raises :class:`TypeError`.
    """
    if err is None:
        return None
    if is_annotated(err):
        return err  # type: ignore[return-value]
    return AnnotatedError(err, validate(ctx), _caller_stack(skip))
