"""Conversion of Python values into Starlark literal expressions.

``marshal`` is the single entry point. Values can take over their own
encoding by implementing ``marshal_starlark``; everything else falls back to
the built-in encodings for scalars, strings, sequences and mappings.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .errors import EncodingError


@runtime_checkable
class StarlarkMarshaler(Protocol):
    def marshal_starlark(self) -> bytes: ...


_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def quote(s: str) -> str:
    """Return ``s`` as a double-quoted Starlark string literal."""
    out: list[str] = []
    for ch in s:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            out.append(f"\\{ord(ch):03o}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def marshal(value: Any) -> bytes:
    """Encode ``value`` as UTF-8 Starlark literal text.

    Raises EncodingError for values with no Starlark literal form (sets,
    bytes, NaN, arbitrary objects), for self-referencing containers and for
    strings holding lone surrogates.
    """
    try:
        return _encode(value, set()).encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(value, "text is not valid UTF-8 (lone surrogate)") from e


def _encode(value: Any, active: set[int]) -> str:
    if isinstance(value, StarlarkMarshaler) and not isinstance(value, type):
        return _encode_custom(value)
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, int):
        return repr(int(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(value, "non-finite floats have no literal form")
        return repr(float(value))
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raise EncodingError(value, "byte strings are not supported")
    if isinstance(value, (Mapping, Sequence)):
        key = id(value)
        if key in active:
            raise EncodingError(value, "container refers to itself")
        active.add(key)
        try:
            return _encode_container(value, active)
        finally:
            active.discard(key)
    raise EncodingError(value, "unsupported type")


def _encode_container(value: Mapping[Any, Any] | Sequence[Any], active: set[int]) -> str:
    if isinstance(value, Mapping):
        items = [f"{_encode(k, active)}: {_encode(v, active)}" for k, v in value.items()]
        return "{" + ", ".join(items) + "}"
    elems = [_encode(v, active) for v in value]
    if isinstance(value, tuple):
        if len(elems) == 1:
            return f"({elems[0]},)"
        return "(" + ", ".join(elems) + ")"
    return "[" + ", ".join(elems) + "]"


def _encode_custom(value: StarlarkMarshaler) -> str:
    try:
        raw = value.marshal_starlark()
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(value, f"marshal_starlark failed: {e}") from e
    if not isinstance(raw, (bytes, bytearray)):
        raise EncodingError(value, f"marshal_starlark returned {type(raw).__name__}, expected bytes")
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(value, "marshal_starlark returned invalid UTF-8") from e


class ArgumentLiterals(list):
    """A list of string literals spliced into a call as positional arguments.

    Encodes like a plain list minus the enclosing brackets, so
    ``ArgumentLiterals(["a", "b"])`` becomes ``"a", "b"``.
    """

    def marshal_starlark(self) -> bytes:
        for item in self:
            if not isinstance(item, str):
                raise EncodingError(item, "argument literals must be strings")
        return marshal(list(self))[1:-1]
