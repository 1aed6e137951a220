"""Call-stack snapshots recording where an error was annotated."""

from __future__ import annotations

import os
import sys
import sysconfig
import traceback
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import cache
from typing import overload


@dataclass(frozen=True, slots=True)
class Frame:
    """A single call site.

    Supports the format verbs ``s`` (file basename), ``+s`` (full path),
    ``d`` (line), ``n`` (function), ``v`` (basename:line) and ``+v``
    (path:line). ``str(frame)`` is the ``v`` form.
    """

    filename: str
    lineno: int
    function: str

    @classmethod
    def from_summary(cls, summary: traceback.FrameSummary) -> Frame:
        return cls(summary.filename, summary.lineno or 0, summary.name)

    @property
    def basename(self) -> str:
        return os.path.basename(self.filename)

    def __str__(self) -> str:
        return f"{self.basename}:{self.lineno}"

    def __format__(self, spec: str) -> str:
        if spec in ("", "v"):
            return str(self)
        if spec == "+v":
            return f"{self.filename}:{self.lineno}"
        if spec == "s":
            return self.basename
        if spec == "+s":
            return self.filename
        if spec == "d":
            return str(self.lineno)
        if spec == "n":
            return self.function
        raise ValueError(f"Unknown format code {spec!r} for Frame")


@dataclass(frozen=True, slots=True)
class CallStack(Sequence[Frame]):
    """Immutable sequence of frames, innermost first."""

    frames: tuple[Frame, ...] = ()

    @overload
    def __getitem__(self, index: int) -> Frame: ...

    @overload
    def __getitem__(self, index: slice) -> CallStack: ...

    def __getitem__(self, index: int | slice) -> Frame | CallStack:
        if isinstance(index, slice):
            return CallStack(self.frames[index])
        return self.frames[index]

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.frames)

    def __str__(self) -> str:
        return format(self, "v")

    def __format__(self, spec: str) -> str:
        return "[" + " ".join(format(frame, spec) for frame in self.frames) + "]"

    def trim_runtime(self) -> CallStack:
        """Drop frames that belong to the interpreter's standard library."""
        return CallStack(tuple(f for f in self.frames if not is_runtime(f)))


@cache
def _install_paths() -> tuple[tuple[str, ...], tuple[str, ...]]:
    paths = sysconfig.get_paths()

    def roots(*keys: str) -> tuple[str, ...]:
        found: set[str] = set()
        for key in keys:
            if key in paths:
                found.add(os.path.normcase(os.path.abspath(paths[key])))
                found.add(os.path.normcase(os.path.realpath(paths[key])))
        return tuple(found)

    return roots("stdlib", "platstdlib"), roots("purelib", "platlib")


def _under(path: str, roots: tuple[str, ...]) -> bool:
    return any(path == root or path.startswith(root + os.sep) for root in roots)


def is_runtime(frame: Frame) -> bool:
    """Whether *frame* runs standard library or frozen bootstrap code."""
    if frame.filename.startswith("<frozen "):
        return True
    runtime, packages = _install_paths()
    path = os.path.normcase(os.path.abspath(frame.filename))
    if _under(path, packages):
        return False
    parts = path.split(os.sep)
    if "site-packages" in parts or "dist-packages" in parts:
        return False
    return _under(path, runtime)


def capture(skip: int = 0, limit: int | None = None) -> CallStack:
    """Snapshot the current thread's stack, starting at the caller of ``capture``.

    *skip* omits that many further frames above the caller; *limit* keeps
    only the innermost frames. Skipping past the outermost frame yields an
    empty stack.
    """
    try:
        frame = sys._getframe(max(skip, 0) + 1)
    except ValueError:
        return CallStack()
    summary = traceback.StackSummary.extract(
        traceback.walk_stack(frame), limit=limit, lookup_lines=False
    )
    return CallStack(tuple(Frame.from_summary(s) for s in summary))
