import os
import sys
import sysconfig

import pytest

from erroneous import CallStack, Frame, wrap
from erroneous.stack import capture, is_runtime


def _line() -> int:
    """Line the caller is executing."""
    return sys._getframe(1).f_lineno


def _wrap_for_caller(exc: BaseException):
    return wrap(exc, skip=1)


def test_produces_stack() -> None:
    st = wrap(ValueError("error here")).stack()
    assert st is not None
    assert len(st) > 0


def test_produces_stack_from_wrap_site() -> None:
    # the wrap() call must sit on the line right before _line()
    err = wrap(ValueError("record me"))
    here = _line()
    top = err.stack()[0]
    assert top.lineno == here - 1
    assert top.basename == "test_stack.py"
    assert top.function == "test_produces_stack_from_wrap_site"


def test_stack_trims_runtime() -> None:
    st = wrap(ValueError("error here")).stack()
    assert not any(is_runtime(frame) for frame in st)
    assert "<frozen" not in format(st, "+s")


def test_with_stack() -> None:
    err = wrap(ValueError("errOR"))

    err = err.with_stack()
    here = _line()
    assert err.stack()[0].lineno == here - 1


def test_with_stack_keeps_cause_and_context() -> None:
    err = wrap(ValueError("errOR"), "foo", "bar")
    err2 = err.with_stack()
    assert err2.unwrap() is err.unwrap()
    assert err2.context() is err.context()
    assert err2.stack() is not err.stack()


def test_skip_attributes_stack_to_outer_caller() -> None:
    err = _wrap_for_caller(ValueError("helper"))
    here = _line()
    assert err.stack()[0].lineno == here - 1
    assert err.stack()[0].function == "test_skip_attributes_stack_to_outer_caller"


def test_capture_limit_keeps_innermost() -> None:
    st = capture(limit=1)
    assert len(st) == 1
    assert st[0].function == "test_capture_limit_keeps_innermost"


def test_skip_past_outermost_frame_gives_empty_stack() -> None:
    assert capture(skip=100_000) == CallStack()
    err = wrap(ValueError("too deep"), "k", "v", skip=100_000)
    assert err.stack() == CallStack()
    assert err.value("k") == "v"


def test_is_runtime() -> None:
    stdlib = sysconfig.get_paths()["stdlib"]
    purelib = sysconfig.get_paths()["purelib"]
    assert is_runtime(Frame(os.path.join(stdlib, "runpy.py"), 88, "_run_code"))
    assert is_runtime(Frame("<frozen importlib._bootstrap>", 1, "_call_with_frames_removed"))
    assert not is_runtime(Frame(os.path.join(purelib, "pkg", "mod.py"), 3, "f"))
    assert not is_runtime(Frame(__file__, 1, "test_is_runtime"))


def test_trim_runtime_drops_stdlib_frames() -> None:
    stdlib = sysconfig.get_paths()["stdlib"]
    ours = Frame(__file__, 10, "f")
    st = CallStack((ours, Frame(os.path.join(stdlib, "threading.py"), 1010, "run")))
    assert st.trim_runtime() == CallStack((ours,))


def test_frame_formatting() -> None:
    frame = Frame("/srv/app/handlers.py", 42, "handle")
    assert str(frame) == "handlers.py:42"
    assert f"{frame}" == "handlers.py:42"
    assert f"{frame:v}" == "handlers.py:42"
    assert f"{frame:+v}" == "/srv/app/handlers.py:42"
    assert f"{frame:s}" == "handlers.py"
    assert f"{frame:+s}" == "/srv/app/handlers.py"
    assert f"{frame:d}" == "42"
    assert f"{frame:n}" == "handle"
    with pytest.raises(ValueError):
        format(frame, "x")


def test_call_stack_sequence_and_formatting() -> None:
    a = Frame("/srv/app/a.py", 1, "f")
    b = Frame("/srv/app/b.py", 2, "g")
    st = CallStack((a, b))
    assert len(st) == 2
    assert st[0] is a
    assert list(st) == [a, b]
    assert st[1:] == CallStack((b,))
    assert str(st) == "[a.py:1 b.py:2]"
    assert f"{st:n}" == "[f g]"
