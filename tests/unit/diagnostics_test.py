"""Tests for validator output parsing and diagnostic remapping."""

from __future__ import annotations

from mcglsl.core.diagnostics import map_diagnostics, parse_validator_output, replace_tokens
from mcglsl.core.graph import WorkspaceIndex
from mcglsl.core.preprocess import preprocess
from mcglsl.models import Severity
from tests.helpers import ShaderPack


class TestParseValidatorOutput:
    def test_parses_errors_and_warnings(self) -> None:
        output = "\n".join(
            [
                "ERROR: 0:3: 'x' : undeclared identifier\r",
                "WARNING: /packs/a/shaders/lib.glsl:2: '' : unused variable",
                "ERROR: /packs/a/shaders/lib.glsl:7: unexpected end of file",
            ]
        )
        entries = parse_validator_output(output)

        assert [(e.severity, e.file, e.line, e.message) for e in entries] == [
            (Severity.ERROR, "0", 3, "undeclared identifier"),
            (Severity.WARNING, "/packs/a/shaders/lib.glsl", 2, "unused variable"),
            (Severity.ERROR, "/packs/a/shaders/lib.glsl", 7, "unexpected end of file"),
        ]

    def test_skips_noise_lines(self) -> None:
        output = "\n".join(
            [
                "stdin",
                "ERROR: 1 compilation errors.  No code generated.",
                "ERROR: 0:1: '' : compilation terminated",
                "ERROR: 0:2: '#include' : Could not process include directive for header name: a.glsl",
                "x",
                "",
                "not a diagnostic at all",
            ]
        )
        assert parse_validator_output(output) == []


class TestReplaceTokens:
    def test_first_occurrence_of_each_token(self) -> None:
        message = "syntax error, unexpected SEMICOLON, expecting COMMA or SEMICOLON"
        assert replace_tokens(message) == "syntax error, unexpected ;, expecting , or SEMICOLON"

    def test_repeated_token_only_first_replaced(self) -> None:
        assert replace_tokens("SEMICOLON SEMICOLON") == "; SEMICOLON"

    def test_tokens_match_whole_words_only(self) -> None:
        assert replace_tokens("unexpected SEMICOLON") == "unexpected ;"
        assert replace_tokens("unexpected LEFT_PAREN, RIGHT_BRACE") == "unexpected (, }"
        assert replace_tokens("IDENTIFIER") == "IDENTIFIER"


class TestMapDiagnostics:
    def test_root_sentinel_accounts_for_injected_directive(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", "#version 330\nfloat x\nvoid main() {}\n")
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics("ERROR: 0:3: 'x' : syntax error", result, pack.shaderpacks)

        [diagnostic] = mapped[str(root)]
        assert diagnostic.severity == Severity.ERROR
        assert diagnostic.message == "syntax error"
        assert diagnostic.range.start.line == 1
        assert (diagnostic.range.start.character, diagnostic.range.end.character) == (0, len("float x"))

    def test_lines_before_directive_are_not_shifted(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", "#version 330\nvoid main() {}\n")
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics("WARNING: 0:1: '' : deprecated version", result, pack.shaderpacks)

        [diagnostic] = mapped[str(root)]
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.range.start.line == 0

    def test_out_of_range_line_becomes_internal_error(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", "#version 330\nvoid main() {}\n")
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics("ERROR: 0:99: 'x' : bad", result, pack.shaderpacks)

        [diagnostic] = mapped[str(root)]
        assert diagnostic.message == "Internal error: line 98 is out of range for pack/shaders/final.fsh: bad"
        assert diagnostic.range.start.line == 0
        assert diagnostic.range.end.character == 0

    def test_include_error_fans_out_to_every_site(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", '#version 330\n#include "c.glsl"\n#include "b.glsl"\n')
        b = pack.write("b.glsl", '#include "c.glsl"\n')
        c = pack.write("c.glsl", "float c;\nfloat d\n")
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics(f"ERROR: {c}:2: 'd' : syntax error", result, pack.shaderpacks)

        assert [d.range.start.line for d in mapped[str(c)]] == [1]
        assert mapped[str(c)][0].message == "syntax error"
        assert [d.range.start.line for d in mapped[str(b)]] == [0]
        assert sorted(d.range.start.line for d in mapped[str(root)]) == [1, 2]
        assert {d.message for d in mapped[str(root)]} == {"pack/shaders/c.glsl line 2: syntax error"}

    def test_every_touched_and_previous_file_gets_a_list(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", '#version 330\n#include "b.glsl"\n')
        b = pack.write("b.glsl", "float b;\n")
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics("", result, pack.shaderpacks, previous_files=["/stale.glsl"])

        assert mapped == {str(root): [], str(b): [], "/stale.glsl": []}

    def test_preprocessing_diagnostics_are_included(self, pack: ShaderPack, index: WorkspaceIndex) -> None:
        root = pack.write("final.fsh", '#version 330\n#include "gone.glsl"\n')
        result = preprocess(root, root.read_text(), pack.shaderpacks, index)

        mapped = map_diagnostics("", result, pack.shaderpacks)

        assert [d.message for d in mapped[str(root)]] == ["pack/shaders/gone.glsl is missing."]
