from mcglsl.core.diagnostics import map_diagnostics, parse_validator_output, replace_tokens
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.lint import lint_document, merge_document, publish
from mcglsl.core.preprocess import IncludeTable, PreprocessResult, preprocess

__all__ = [
    "IncludeTable",
    "PreprocessResult",
    "WorkspaceIndex",
    "lint_document",
    "map_diagnostics",
    "merge_document",
    "parse_validator_output",
    "preprocess",
    "publish",
    "replace_tokens",
]
