from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import libcst as cst
from libcst.metadata import MetadataWrapper

from .cst_utils import MacroSummary, MacroVisitor

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    errors: List[str]


def _scan(module: cst.Module) -> MacroVisitor:
    w = MetadataWrapper(module)
    visitor = MacroVisitor()
    w.visit(visitor)
    return visitor


def summarize_macros(source: str) -> List[MacroSummary]:
    """Summaries of the macros in ``source``.

    Raises libcst.ParserSyntaxError when ``source`` does not parse.
    """
    return _scan(cst.parse_module(source)).macros


def validate_starlark(source: str) -> ValidationResult:
    try:
        module = cst.parse_module(source)
    except cst.ParserSyntaxError as e:
        return ValidationResult(False, [f"LibCST parse error: {e}"])

    errors: List[str] = []
    for stmt in module.body:
        if not isinstance(stmt, cst.FunctionDef):
            errors.append(f"unexpected top-level statement: {module.code_for_node(stmt).strip()}")

    visitor = _scan(module)
    errors.extend(visitor.errors)
    if errors:
        logger.debug("generated Starlark failed validation: %s", errors)
    return ValidationResult(len(errors) == 0, errors)
