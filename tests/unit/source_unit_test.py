"""Unit tests for turning tree-sitter trees into source units."""

from pathlib import Path

import pytest
from tree_sitter import Parser

from padlint.core.ast import extract_source_unit, extract_source_unit_from_file
from padlint.errors import SourceParseError
from padlint.models import NodeKind, TokenKind


def _texts(source: str, language: str = "javascript") -> list[str]:
    return [token.text for token in extract_source_unit(source, language).tokens]


class TestTokens:
    def test_token_kinds(self) -> None:
        unit = extract_source_unit("if (a) { return this.b + 1; } // done", "javascript")
        kinds = [(token.text, token.kind) for token in unit.tokens]
        assert kinds == [
            ("if", TokenKind.KEYWORD),
            ("(", TokenKind.PUNCTUATOR),
            ("a", TokenKind.IDENTIFIER),
            (")", TokenKind.PUNCTUATOR),
            ("{", TokenKind.PUNCTUATOR),
            ("return", TokenKind.KEYWORD),
            ("this", TokenKind.KEYWORD),
            (".", TokenKind.PUNCTUATOR),
            ("b", TokenKind.IDENTIFIER),
            ("+", TokenKind.PUNCTUATOR),
            ("1", TokenKind.NUMERIC),
            (";", TokenKind.PUNCTUATOR),
            ("}", TokenKind.PUNCTUATOR),
            ("// done", TokenKind.LINE_COMMENT),
        ]

    def test_strings_and_regexes_are_single_tokens(self) -> None:
        unit = extract_source_unit("x = 'a(b)' + /c(d)/g;", "javascript")
        kinds = {token.text: token.kind for token in unit.tokens}
        assert kinds["'a(b)'"] is TokenKind.STRING
        assert kinds["/c(d)/g"] is TokenKind.REGULAR_EXPRESSION

    def test_template_is_split_around_substitutions(self) -> None:
        assert _texts("x = `a(${b})c`;") == ["x", "=", "`a(${", "b", "})c`", ";"]

    def test_template_without_substitution(self) -> None:
        unit = extract_source_unit("x = `(a)`;", "javascript")
        assert [t.kind for t in unit.tokens if t.text.startswith("`")] == [TokenKind.TEMPLATE]

    def test_block_comment(self) -> None:
        unit = extract_source_unit("/* a\n b */ x;", "javascript")
        comment = unit.tokens[0]
        assert comment.kind is TokenKind.BLOCK_COMMENT
        assert comment.is_comment
        assert (comment.end_point.row, comment.end_point.column) == (1, 5)

    def test_offsets_count_characters(self) -> None:
        unit = extract_source_unit("x = 'é'; (y)", "javascript")
        paren = unit.tokens[4]
        assert paren.text == "("
        assert paren.start_offset == 9
        assert unit.text[paren.start_offset] == "("


class TestLines:
    def test_crlf_counts_as_one_break(self) -> None:
        unit = extract_source_unit("a;\r\nb;", "javascript")
        assert unit.lines == ("a;", "b;")
        assert unit.line_starts == (0, 4)
        assert unit.tokens[2].start_point.row == 1

    def test_unicode_line_separators(self) -> None:
        unit = extract_source_unit("a;\u2028b;", "javascript")
        assert unit.lines == ("a;", "b;")


class TestBlocks:
    def test_node_kinds_in_source_order(self) -> None:
        source = "class A {\nstatic {\nx;\n}\nm() {\nswitch (x) {\ncase 1: y();\n}\n}\n}"
        unit = extract_source_unit(source, "javascript")
        assert [block.kind for block in unit.blocks] == [
            NodeKind.CLASS_BODY,
            NodeKind.STATIC_INIT_BLOCK,
            NodeKind.BLOCK_BODY,
            NodeKind.SWITCH_BODY,
        ]

    def test_class_members(self) -> None:
        unit = extract_source_unit("class A {\nm() {}\nf = 1;\nstatic {}\n}", "javascript")
        body = unit.blocks[0]
        assert [member.kind for member in body.children] == [
            NodeKind.METHOD,
            NodeKind.OTHER,
            NodeKind.STATIC_INIT_BLOCK,
        ]

    def test_switch_delimiters_are_its_braces(self) -> None:
        unit = extract_source_unit("switch (a) {\ncase 0: b();\n}", "javascript")
        switch = unit.blocks[0]
        assert switch.kind is NodeKind.SWITCH_BODY
        assert switch.open_token is not None and switch.close_token is not None
        assert unit.tokens[switch.open_token].text == "{"
        assert unit.tokens[switch.close_token].text == "}"
        assert switch.start_offset == 0
        assert len(switch.children) == 1

    def test_static_block_opens_at_its_brace(self) -> None:
        unit = extract_source_unit("class A {\nstatic {\nx;\n}\n}", "javascript")
        static = unit.blocks[1]
        assert static.open_token is not None
        assert unit.tokens[static.open_token].text == "{"
        assert unit.tokens[static.open_token].start_point.row == 1

    def test_object_literals_are_not_blocks(self) -> None:
        assert extract_source_unit("a = {\n\nb: 1\n\n};", "javascript").blocks == ()

    def test_comments_are_not_members(self) -> None:
        unit = extract_source_unit("{\n// note\na();\n}", "javascript")
        assert len(unit.blocks[0].children) == 1

    def test_typescript_and_tsx(self) -> None:
        ts = extract_source_unit("function f(a: number): void {\nreturn;\n}", "typescript")
        assert [block.kind for block in ts.blocks] == [NodeKind.BLOCK_BODY]
        tsx = extract_source_unit("const e = <div>{ (a) }</div>;", "tsx")
        assert "(" in [token.text for token in tsx.tokens]


class TestErrors:
    def test_parse_error_reports_position(self, javascript_parser: Parser) -> None:
        source = "function f() {\n  a(;\n}"
        assert javascript_parser.parse(source.encode()).root_node.has_error
        with pytest.raises(SourceParseError) as exc_info:
            extract_source_unit(source, "javascript")
        assert exc_info.value.row >= 0
        assert "Parsing error" in str(exc_info.value)

    def test_parse_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            extract_source_unit("class {", "javascript")


class TestFromFile:
    def test_detects_language_from_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "a.ts"
        path.write_text("let a: number = (1);\n")
        unit = extract_source_unit_from_file(str(path))
        assert unit.language == "typescript"
        assert unit.path == str(path)

    def test_keeps_crlf(self, tmp_path: Path) -> None:
        path = tmp_path / "a.js"
        path.write_bytes(b"a;\r\nb;\r\n")
        assert extract_source_unit_from_file(str(path)).text == "a;\r\nb;\r\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            extract_source_unit_from_file(str(tmp_path / "missing.js"))
