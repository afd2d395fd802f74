from __future__ import annotations

import re
from typing import Any

from .errors import InvalidIdentifierError

_VALID_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Keywords reserved by the Starlark grammar, including those it reserves for
# future use from Python.
STARLARK_RESERVED: frozenset[str] = frozenset({
    "if", "elif", "else", "assert",
    "and", "or", "not", "in", "is", "as",
    "for", "while", "break", "continue", "return", "yield", "pass",
    "load", "import", "nonlocal", "global",
    "def", "lambda", "class",
    "del", "raise", "except", "try", "finally", "from", "with",
})


def is_valid_identifier(ident: Any) -> bool:
    return isinstance(ident, str) and _VALID_IDENT.fullmatch(ident) is not None


def ident_name(ident: Any) -> str:
    """Return ``ident`` usable as a bare Starlark name.

    Reserved words get a trailing underscore (``if`` -> ``if_``); anything
    outside the identifier grammar raises :class:`InvalidIdentifierError`.
    """
    if not is_valid_identifier(ident):
        raise InvalidIdentifierError(ident)
    if ident in STARLARK_RESERVED:
        return ident + "_"
    return ident
