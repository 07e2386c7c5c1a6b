"""callsite.py - Where a log call came from.

A CallSite is the (file, function, line) triple that the Logger compares
against the previous call to decide whether a header line is needed. The
Logger only cares about the shape; how the three fields are obtained is up
to the caller. ``caller()`` is the resolver used by ``q()`` and ``@trace``:
it walks up the frame stack and never reads source text.
"""

import inspect
import os
from types import FrameType
from typing import Any


def relative_path(path: str) -> str:
    """Return ``path`` relative to the working directory if it lives below it."""
    try:
        rel = os.path.relpath(path)
    except ValueError:
        # Different drive on Windows.
        return path
    if rel.startswith(os.pardir):
        return path
    return rel


class CallSite:
    """An immutable (file_path, function_path, line_number) triple.

    Two call sites are equal iff all three fields are equal.

    Attributes:
        file_path (str): Source file identifier, e.g. ``"app/payments.py"``.
        function_path (str): Fully qualified function, e.g.
            ``"app.payments.Charger.charge"``.
        line_number (int): 1-based line number of the call.

    Example:
        >>> CallSite("src/lib", "pkg.mod.func", 42) == CallSite("src/lib", "pkg.mod.func", 42)
        True
    """

    __slots__ = ("file_path", "function_path", "line_number")

    def __init__(self, file_path: str, function_path: str, line_number: int) -> None:
        object.__setattr__(self, "file_path", file_path)
        object.__setattr__(self, "function_path", function_path)
        object.__setattr__(self, "line_number", line_number)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"CallSite is immutable, cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"CallSite is immutable, cannot delete {name!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallSite):
            return NotImplemented
        return (
            self.file_path == other.file_path
            and self.function_path == other.function_path
            and self.line_number == other.line_number
        )

    def __hash__(self) -> int:
        return hash((self.file_path, self.function_path, self.line_number))

    def __repr__(self) -> str:
        return (
            f"CallSite({self.file_path!r}, {self.function_path!r}, "
            f"{self.line_number})"
        )

    def same_scope(self, other: "CallSite") -> bool:
        """True if both sites share file and function (line is ignored)."""
        return (
            self.file_path == other.file_path
            and self.function_path == other.function_path
        )

    @classmethod
    def from_frame(cls, frame: FrameType) -> "CallSite":
        """Build a CallSite for the line ``frame`` is currently executing.

        ``function_path`` joins the frame's module ``__name__`` with the
        code object's qualified name, so methods appear as
        ``module.Class.method`` and nested functions as
        ``module.outer.<locals>.inner``. Interpreters without
        ``co_qualname`` fall back to the bare function name.
        """
        code = frame.f_code
        module = frame.f_globals.get("__name__", "<module>")
        name = getattr(code, "co_qualname", code.co_name)
        return cls(
            file_path=relative_path(code.co_filename),
            function_path=f"{module}.{name}",
            line_number=frame.f_lineno,
        )


def caller(depth: int = 1) -> CallSite:
    """Return the CallSite ``depth`` frames above the function calling this.

    ``caller()`` (depth 1) inside ``f`` is the line that called ``f``.

    Raises:
        ValueError: If the stack is not deep enough.
    """
    frame = inspect.currentframe()
    try:
        # Skip caller() itself, then the function asking for its caller.
        target = frame.f_back if frame is not None else None
        for _ in range(depth):
            if target is None:
                break
            target = target.f_back
        if target is None:
            raise ValueError(f"call stack is not {depth} frames deep")
        return CallSite.from_frame(target)
    finally:
        del frame
