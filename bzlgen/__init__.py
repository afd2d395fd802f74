from .errors import (
    StarlarkWriterError, InvalidIdentifierError, NestedMacroError, NoActiveMacroError,
    EmptyDirectoryStackError, EncodingError,
)
from .identifiers import STARLARK_RESERVED, ident_name, is_valid_identifier
from .literals import ArgumentLiterals, StarlarkMarshaler, marshal, quote
from .writer import StarlarkWriter
from .validation import ValidationResult, summarize_macros, validate_starlark
from .cst_utils import MacroSummary

__all__ = [
    # errors
    "StarlarkWriterError", "InvalidIdentifierError", "NestedMacroError", "NoActiveMacroError",
    "EmptyDirectoryStackError", "EncodingError",
    # identifiers & literals
    "STARLARK_RESERVED", "ident_name", "is_valid_identifier",
    "ArgumentLiterals", "StarlarkMarshaler", "marshal", "quote",
    # writer
    "StarlarkWriter",
    # validation
    "ValidationResult", "summarize_macros", "validate_starlark", "MacroSummary",
]
