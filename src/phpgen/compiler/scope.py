"""Local variable scope stack.

Maps template-local names (loop variables, let bindings, parameter
aliases) to the PHP expressions that hold their values. Frames are pushed
on entering a lexical construct and popped on leaving it; lookups scan
from the innermost frame outward, so inner bindings shadow outer ones.

A miss means the name is not a local and must be read from the data
record.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from phpgen.compiler.exprs import PhpExpr
from phpgen.exceptions import InternalCompilerError


class LocalScope:
    """Stack of frames, each an ordered mapping name -> PhpExpr.

    Example:
        >>> scope = LocalScope()
        >>> with scope.frame():
        ...     scope.add("i", PhpExpr("$i12"))
        ...     scope.lookup("i").text
        '$i12'

    """

    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[dict[str, PhpExpr]] = []

    def push_frame(self) -> LocalScope:
        self._frames.append({})
        return self

    def pop_frame(self) -> LocalScope:
        if not self._frames:
            raise InternalCompilerError("Cannot pop a frame from an empty scope stack")
        self._frames.pop()
        return self

    @contextmanager
    def frame(self) -> Iterator[LocalScope]:
        """Push a frame for the duration of the block."""
        self.push_frame()
        try:
            yield self
        finally:
            self.pop_frame()

    def add(self, name: str, expr: PhpExpr) -> LocalScope:
        """Bind ``name`` in the innermost frame."""
        if not self._frames:
            raise InternalCompilerError(f"Cannot bind '{name}' with no open scope frame")
        self._frames[-1][name] = expr
        return self

    def lookup(self, name: str) -> PhpExpr | None:
        for frame in reversed(self._frames):
            if name in frame:
                return frame[name]
        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    @property
    def depth(self) -> int:
        return len(self._frames)
