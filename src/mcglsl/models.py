from enum import IntEnum

from pydantic import BaseModel

DIAGNOSTIC_SOURCE = "mc-glsl"


class Severity(IntEnum):
    # numeric values follow the LSP DiagnosticSeverity enum
    ERROR = 1
    WARNING = 2


class Position(BaseModel):
    line: int
    character: int


class Range(BaseModel):
    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> "Range":
        return cls(start=Position(line=line, character=start), end=Position(line=line, character=end))


class Diagnostic(BaseModel):
    severity: Severity
    range: Range
    message: str
    source: str = DIAGNOSTIC_SOURCE


class IncludeRecord(BaseModel):
    path: str
    line_in_buffer: int
    line_in_file: int
    parent: str
    raw: str


class IncludeLink(BaseModel):
    """The path literal of one ``#include`` and the file it resolves to."""

    target: str
    range: Range


class LintResult(BaseModel):
    root: str
    diagnostics: dict[str, list[Diagnostic]]
    buffer: str
    includes: list[IncludeRecord]
    validated: bool = False

    def count(self) -> int:
        return sum(len(diags) for diags in self.diagnostics.values())
