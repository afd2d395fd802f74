from __future__ import annotations

from dataclasses import dataclass, field

import libcst as cst
import libcst.matchers as m
from libcst.metadata import PositionProvider

_CTX = m.Name("ctx")

PUSH_DIRECTORY = m.Assign(
    targets=[m.AssignTarget(target=_CTX)],
    value=m.Call(
        func=m.Attribute(value=_CTX, attr=m.Name("push_directory")),
        args=[m.Arg(value=_CTX, keyword=None), m.Arg(value=m.SimpleString(), keyword=None)],
    ),
)
POP_DIRECTORY = m.Assign(
    targets=[m.AssignTarget(target=_CTX)],
    value=m.Call(
        func=m.Attribute(value=_CTX, attr=m.Name("pop_directory")),
        args=[m.Arg(value=_CTX, keyword=None)],
    ),
)
COMMAND = m.Expr(
    value=m.Call(
        func=m.Attribute(value=_CTX, attr=m.Name()),
        args=[m.Arg(value=_CTX, keyword=None), m.ZeroOrMore(m.Arg(keyword=None))],
    ),
)
RETURN_CTX = m.Return(value=_CTX)


@dataclass
class MacroSummary:
    """Commands and directories of one generated macro, in source order."""

    name: str
    commands: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)


def _takes_only_ctx(params: cst.Parameters) -> bool:
    if params.posonly_params or params.kwonly_params or params.star_kwarg is not None:
        return False
    if not isinstance(params.star_arg, cst.MaybeSentinel):
        return False
    if len(params.params) != 1:
        return False
    only = params.params[0]
    return only.name.value == "ctx" and only.default is None and only.annotation is None


class MacroVisitor(cst.CSTVisitor):
    """Collects a MacroSummary per ``def`` and records shape violations."""

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self) -> None:
        super().__init__()
        self.macros: list[MacroSummary] = []
        self.errors: list[str] = []

    def _error(self, node: cst.CSTNode, macro: str, msg: str) -> None:
        line = self.get_metadata(PositionProvider, node).start.line
        self.errors.append(f"line {line}: macro `{macro}`: {msg}")

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        name = node.name.value
        summary = MacroSummary(name)
        self.macros.append(summary)

        if node.decorators:
            self._error(node, name, "macros must not be decorated")
        if not _takes_only_ctx(node.params):
            self._error(node, name, "must take exactly one parameter `ctx`")
        if not isinstance(node.body, cst.IndentedBlock):
            self._error(node, name, "body must be an indented block")
            return False

        body = list(node.body.body)
        depth = 0
        for i, stmt in enumerate(body):
            last = i == len(body) - 1
            if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
                self._error(stmt, name, "expected one simple statement per line")
                continue
            small = stmt.body[0]
            if m.matches(small, RETURN_CTX):
                if not last:
                    self._error(stmt, name, "`return ctx` must be the final statement")
            elif m.matches(small, PUSH_DIRECTORY):
                path = small.value.args[1].value
                try:
                    summary.directories.append(str(path.evaluated_value))
                except (SyntaxError, ValueError):
                    self._error(stmt, name, "invalid directory string literal")
                depth += 1
            elif m.matches(small, POP_DIRECTORY):
                if depth == 0:
                    self._error(stmt, name, "pop_directory without a matching push_directory")
                else:
                    depth -= 1
            elif m.matches(small, COMMAND):
                func = small.value.func
                summary.commands.append(func.attr.value)
            else:
                self._error(stmt, name, "unexpected statement")
        if not body or not (
            isinstance(body[-1], cst.SimpleStatementLine)
            and len(body[-1].body) == 1
            and m.matches(body[-1].body[0], RETURN_CTX)
        ):
            self._error(node, name, "missing final `return ctx`")
        # Generated macros never nest; do not descend.
        return False
