from __future__ import annotations

from dataclasses import dataclass, field

INDENT: str = "    "


@dataclass
class StatementBuffer:
    """
    Statements rendered but not yet committed to the output stream.
    The last one can still be dropped; anything drained is final.
    """
    indent: str = INDENT
    lines: list[str] = field(default_factory=list)

    def render(self, stmt: str) -> str:
        return f"{self.indent}{stmt}\n"

    def defer(self, line: str) -> None:
        self.lines.append(line)

    def cancel_last(self, line: str) -> bool:
        if self.lines and self.lines[-1] == line:
            self.lines.pop()
            return True
        return False

    def drain(self) -> list[str]:
        pending, self.lines = self.lines, []
        return pending
