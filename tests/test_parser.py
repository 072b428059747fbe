"""
Tests for the template parser.
"""

import pytest

from dottpl.errors import CompileError, ParseError, ParseErrorKind
from dottpl.lexer import tokenize_template
from dottpl.nodes import ConditionalNode, EndNode, IdentNode, RangeNode, Span, format_ast_tree
from dottpl.parser import TemplateParser, parse_template


class TestParseIdents:

    def test_empty_template(self):
        """No directives, no declarations"""
        assert parse_template("") == []
        assert parse_template("just text") == []

    def test_single_ident(self):
        """Span covers the whole directive"""
        ast = parse_template("{{ .foo }}")

        assert ast == [IdentNode(span=Span(0, 10), path="foo")]

    def test_two_idents(self):
        """Sibling idents keep their own spans"""
        ast = parse_template("{{ .foo }} {{ .bar }}")

        assert ast == [
            IdentNode(span=Span(0, 10), path="foo"),
            IdentNode(span=Span(11, 21), path="bar"),
        ]

    def test_nested_path_kept_verbatim(self):
        """Dotted path text is stored as written"""
        ast = parse_template("{{ .foo.bar.baz }}")

        assert ast[0].path == "foo.bar.baz"

    def test_empty_directive_is_noop(self):
        """'{{}}' produces no declaration"""
        assert parse_template("a {{}} b") == []
        assert parse_template("{{ }}{{ .x }}") == [IdentNode(span=Span(5, 13), path="x")]

    def test_parser_accepts_pretokenized_input(self):
        """Tokens can be computed separately"""
        text = "{{ .foo }}"
        parser = TemplateParser(text, tokenize_template(text))

        assert parser.parse() == [IdentNode(span=Span(0, 10), path="foo")]


class TestParseBlocks:

    def test_range_block(self):
        """Range body ends with its own EndNode"""
        text = "{{ range .foo }}- {{ .bar }}\n{{ end }}"
        ast = parse_template(text)

        assert len(ast) == 1
        node = ast[0]
        assert isinstance(node, RangeNode)
        assert node.path == "foo"
        assert node.span == Span(0, 16)
        assert node.body == (
            IdentNode(span=Span(18, 28), path="bar"),
            EndNode(span=Span(29, 38)),
        )
        assert node.outer_span == Span(0, 38)
        assert node.children == (IdentNode(span=Span(18, 28), path="bar"),)

    def test_if_block(self):
        """Conditional has the same shape as range"""
        ast = parse_template("{{ if .ok }}yes{{ end }}")

        node = ast[0]
        assert isinstance(node, ConditionalNode)
        assert node.path == "ok"
        assert node.children == ()
        assert isinstance(node.end_node, EndNode)

    def test_nested_blocks_own_their_end(self):
        """Inner block's 'end' never closes the outer block"""
        text = "{{ range .a }}{{ range .b }}{{ .c }}{{ end }}tail{{ end }}after"
        ast = parse_template(text)

        assert len(ast) == 1
        outer = ast[0]
        assert isinstance(outer, RangeNode)
        assert len(outer.body) == 2

        inner = outer.body[0]
        assert isinstance(inner, RangeNode)
        assert inner.path == "b"
        assert inner.children == (IdentNode(span=Span(28, 36), path="c"),)
        assert inner.end_node.span.slice(text) == "{{ end }}"

        assert outer.end_node.span.slice(text) == "{{ end }}"
        assert text[outer.outer_span.end:] == "after"

    def test_deep_nesting(self):
        """Blocks nest to arbitrary depth"""
        depth = 30
        text = "{{ if .x }}" * depth + "{{ .x }}" + "{{ end }}" * depth
        ast = parse_template(text)

        node = ast[0]
        for _ in range(depth - 1):
            assert isinstance(node, ConditionalNode)
            node = node.body[0]
        assert node.children == (IdentNode(span=Span(11 * depth, 11 * depth + 8), path="x"),)

    def test_siblings_after_block(self):
        """Top-level parsing resumes after a closed block"""
        ast = parse_template("{{ if .a }}x{{ end }} {{ .b }}")

        assert [type(n) for n in ast] == [ConditionalNode, IdentNode]

    def test_empty_directive_inside_block(self):
        """'{{}}' inside a body is skipped"""
        ast = parse_template("{{ range .a }}{{}}{{ end }}")

        assert ast[0].children == ()

    def test_stray_end_at_top_level(self):
        """'end' without a block parses as a top-level EndNode"""
        ast = parse_template("a {{ end }} b")

        assert ast == [EndNode(span=Span(2, 11))]


class TestParseErrors:

    def test_unterminated_range(self):
        """Missing 'end' fails instead of truncating"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ range .foo }}{{ .bar }}")

        assert exc.value.kind is ParseErrorKind.EXPECTED_END_KEYWORD
        assert exc.value.position == 0
        assert "unterminated 'range' block" in str(exc.value)

    def test_unterminated_inner_block(self):
        """Outer 'end' is consumed by the inner block, outer stays open"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ if .a }}{{ range .b }}{{ end }}")

        assert exc.value.kind is ParseErrorKind.EXPECTED_END_KEYWORD
        assert "unterminated 'if' block" in str(exc.value)

    def test_missing_close_brace(self):
        """Ident without closing braces"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ .foo")

        assert exc.value.kind is ParseErrorKind.EXPECTED_CLOSE_BRACE

    def test_missing_open_brace(self):
        """Closing braces without an opening pair"""
        with pytest.raises(ParseError) as exc:
            parse_template("text }} more")

        assert exc.value.kind is ParseErrorKind.EXPECTED_OPEN_BRACE
        assert exc.value.position == 5

    def test_block_without_path(self):
        """Block header requires a path"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ range }}{{ end }}")

        assert exc.value.kind is ParseErrorKind.EXPECTED_IDENT

    def test_bare_dot_in_block_header(self):
        """Empty path is not an identifier"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ range . }}{{ end }}")

        assert exc.value.kind is ParseErrorKind.EXPECTED_IDENT

    def test_bare_dot_directive_is_noop(self):
        """'{{ . }}' tokenizes to '{{' '}}', the empty directive"""
        assert parse_template("{{ . }} x") == []

    def test_word_without_dot_is_noop(self):
        """Words that are neither paths nor keywords produce no tokens"""
        assert parse_template("{{ .a }}{{ foo }}") == [IdentNode(span=Span(0, 8), path="a")]

    def test_open_brace_after_open_brace(self):
        """'{{' directly after '{{' is rejected"""
        with pytest.raises(ParseError) as exc:
            parse_template("{{ if .a }}{{ {{ end }}")

        assert exc.value.kind is ParseErrorKind.EXPECTED_IDENT

    def test_dangling_open_brace(self):
        """'{{' at the very end"""
        with pytest.raises(ParseError) as exc:
            parse_template("abc {{")

        assert exc.value.kind is ParseErrorKind.EXPECTED_IDENT

    def test_error_location(self):
        """Line, column and source line of the offending token"""
        text = "first line\nsecond {{ .x }} and {{ range .y }}\nthird"
        with pytest.raises(ParseError) as exc:
            parse_template(text)

        err = exc.value
        assert err.line == 2
        assert err.column == 21
        assert err.position == 31
        assert err.line_text == "second {{ .x }} and {{ range .y }}"
        assert "at 2:21" in str(err)
        assert str(err).splitlines()[-1].index("^") == 2 + 20

    def test_parse_error_is_compile_error(self):
        """ParseError belongs to the compile-time hierarchy"""
        with pytest.raises(CompileError):
            parse_template("{{ if .a }}")


class TestFormatAstTree:

    def test_tree_listing(self):
        """Nested nodes are indented under their block"""
        text = "{{ range .xs }}{{ .name }}{{ end }}"
        listing = format_ast_tree(parse_template(text), text)

        assert listing.splitlines() == [
            "RangeNode(path='xs') '{{ range .xs }}' @ 0:15",
            "  IdentNode(path='name') '{{ .name }}' @ 15:26",
            "  EndNode '{{ end }}' @ 26:35",
        ]
