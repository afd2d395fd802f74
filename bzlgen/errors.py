from __future__ import annotations

from typing import Any


class StarlarkWriterError(Exception):
    """Base class for every failure raised while emitting Starlark macros."""


class InvalidIdentifierError(StarlarkWriterError, ValueError):
    def __init__(self, identifier: Any) -> None:
        super().__init__(f"invalid Starlark identifier: {identifier!r}")
        self.identifier = identifier


class NestedMacroError(StarlarkWriterError, RuntimeError):
    def __init__(self, current_macro: str, requested: str) -> None:
        super().__init__(
            f"nested macros are not allowed: cannot begin {requested!r} inside {current_macro!r}"
        )
        self.current_macro = current_macro
        self.requested = requested


class NoActiveMacroError(StarlarkWriterError, RuntimeError):
    def __init__(self, operation: str) -> None:
        super().__init__(f"no current macro: {operation} requires begin_macro() first")
        self.operation = operation


class EmptyDirectoryStackError(StarlarkWriterError, IndexError):
    def __init__(self) -> None:
        super().__init__("no current directory to pop")


class EncodingError(StarlarkWriterError, TypeError):
    def __init__(self, value: Any, reason: str) -> None:
        super().__init__(f"cannot encode {type(value).__name__} as a Starlark literal: {reason}")
        self.value = value
