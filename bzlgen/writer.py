from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TextIO

"""Incremental writer for Starlark macros of a fixed shape.

Every macro takes a single ``ctx`` parameter, threads it through directory
transitions and command calls, and returns it::

    def gen(ctx):
        ctx = ctx.push_directory(ctx, "lib")
        ctx.cc_library(ctx, "foo")
        ctx = ctx.pop_directory(ctx)
        return ctx

The writer is driven by a stream of events with no lookahead. Directory
transitions are deferred so that a push immediately followed by its pop is
dropped instead of reaching the sink.
"""

from .codegen import INDENT, StatementBuffer
from .errors import EmptyDirectoryStackError, EncodingError, NestedMacroError, NoActiveMacroError
from .identifiers import ident_name
from .literals import marshal

logger = logging.getLogger(__name__)

CONTEXT_PARAM: str = "ctx"


class StarlarkWriter:
    """Writes Starlark macros to ``sink``. Not safe for concurrent use."""

    def __init__(self, sink: TextIO) -> None:
        self._sink = sink
        self._pending = StatementBuffer(indent=INDENT)
        self._current_macro: str = ""
        self._dir_stack: list[str] = []

    # -----------------------------
    # State
    # -----------------------------

    @property
    def current_macro(self) -> str:
        return self._current_macro

    @property
    def is_writing(self) -> bool:
        return self._current_macro != ""

    @property
    def directories(self) -> tuple[str, ...]:
        return tuple(self._dir_stack)

    @property
    def depth(self) -> int:
        return len(self._dir_stack)

    # -----------------------------
    # Macros
    # -----------------------------

    def begin_macro(self, name: str) -> None:
        if self.is_writing:
            raise NestedMacroError(self._current_macro, name)
        name = ident_name(name)
        self._pending.defer(f"def {name}({CONTEXT_PARAM}):\n")
        self._current_macro = name
        logger.debug("begin macro %s", name)

    def end_macro(self) -> None:
        self._require_macro("end_macro")
        self._write_buffered()
        self._write(self._pending.render(f"return {CONTEXT_PARAM}"))
        if self._dir_stack:
            logger.warning(
                "macro %s ended with open directories: %s",
                self._current_macro, ", ".join(self._dir_stack),
            )
            self._dir_stack = []
        logger.debug("end macro %s", self._current_macro)
        self._current_macro = ""
        self._sink.flush()

    def macro(self, name: str) -> "_MacroBlock":
        """``with writer.macro("gen"):`` brackets begin_macro/end_macro."""
        return _MacroBlock(self, name)

    # -----------------------------
    # Directories
    # -----------------------------

    def push_directory(self, path: str) -> None:
        self._require_macro("push_directory")
        line = self._push_dir_line(path)
        self._dir_stack.append(path)
        self._pending.defer(line)

    def pop_directory(self) -> str:
        """Close the innermost directory and return its path.

        If nothing was written since the matching push, both statements
        are dropped.
        """
        self._require_macro("pop_directory")
        if not self._dir_stack:
            raise EmptyDirectoryStackError()
        path = self._dir_stack.pop()
        if self._pending.cancel_last(self._push_dir_line(path)):
            logger.debug("elided empty directory %s in macro %s", path, self._current_macro)
            return path
        self._write_buffered()
        self._write(self._pending.render(f"{CONTEXT_PARAM} = {CONTEXT_PARAM}.pop_directory({CONTEXT_PARAM})"))
        return path

    def directory(self, path: str) -> "_DirectoryBlock":
        return _DirectoryBlock(self, path)

    def _push_dir_line(self, path: str) -> str:
        if not isinstance(path, str):
            raise EncodingError(path, "directory paths must be strings")
        literal = marshal(path).decode("utf-8")
        return self._pending.render(
            f"{CONTEXT_PARAM} = {CONTEXT_PARAM}.push_directory({CONTEXT_PARAM}, {literal})"
        )

    # -----------------------------
    # Commands
    # -----------------------------

    def write_command(self, cmd: str, *args: Any) -> None:
        self._require_macro("write_command")
        cmd = ident_name(cmd)
        self._write_buffered()
        # Encode everything up front so a failure leaves no partial call.
        parts = [CONTEXT_PARAM]
        parts.extend(marshal(arg).decode("utf-8") for arg in args)
        self._write(self._pending.render(f"{CONTEXT_PARAM}.{cmd}({', '.join(parts)})"))

    # -----------------------------
    # Output
    # -----------------------------

    def _require_macro(self, operation: str) -> None:
        if not self.is_writing:
            raise NoActiveMacroError(operation)

    def _write(self, s: str) -> None:
        self._sink.write(s)

    def _write_buffered(self) -> None:
        for line in self._pending.drain():
            self._write(line)


class _MacroBlock:
    def __init__(self, writer: StarlarkWriter, name: str) -> None:
        self.writer = writer
        self.name = name

    def __enter__(self) -> StarlarkWriter:
        self.writer.begin_macro(self.name)
        return self.writer

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # Leave the writer idle even when the body raised.
        if self.writer.is_writing:
            self.writer.end_macro()


class _DirectoryBlock:
    def __init__(self, writer: StarlarkWriter, path: str) -> None:
        self.writer = writer
        self.path = path

    def __enter__(self) -> str:
        self.writer.push_directory(self.path)
        return self.path

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None and not (self.writer.is_writing and self.writer.depth):
            return
        self.writer.pop_directory()
