"""Tests for the minimal JS/JSX lexer."""

from __future__ import annotations

import pytest

from blankfix.scanner.tokenizer import LexError, check_nesting, tokenize


class TestTokenize:
    def test_counts_real_delimiters(self):
        result = tokenize("function f(a) { return [a]; }\n")
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "(){[]}"
        assert result.imbalance() == {}

    def test_ignores_delimiters_in_strings_and_comments(self):
        source = (
            'const s = "{ not a brace";\n'
            "// ( nor this\n"
            "/* [ nor this ] */\n"
            "const t = '}';\n"
        )
        result = tokenize(source)
        assert result.delimiters == []
        assert result.comments == 2
        assert result.strings == 2

    def test_template_substitution_braces_are_not_delimiters(self):
        source = "const c = <div className={`box ${active ? 'on' : 'off'}`} />;\n"
        result = tokenize(source)
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "{}"
        check_nesting(result)

    def test_nested_braces_inside_substitution(self):
        result = tokenize("const x = `a ${fn({ b: 1 })} c`;\n")
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "({})"

    def test_tracks_line_numbers(self):
        result = tokenize("a\n/* x\ny */\n{\n")
        assert result.delimiters[0].line == 4
        assert result.lines == 5

    def test_strict_rejects_unterminated_block_comment(self):
        with pytest.raises(LexError) as exc:
            tokenize("const a = 1;\n/* open", strict=True)
        assert exc.value.line == 2

    def test_strict_rejects_multiline_quoted_string(self):
        with pytest.raises(LexError):
            tokenize("const a = 'abc\ndef';\n", strict=True)

    def test_strict_rejects_unterminated_template(self):
        with pytest.raises(LexError):
            tokenize("const a = `abc", strict=True)

    def test_lenient_closes_string_at_newline(self):
        result = tokenize("<p>Don't panic</p>\n{x}\n", strict=False)
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "{}"

    def test_lenient_tolerates_unterminated_comment(self):
        result = tokenize("{ /* never closed", strict=False)
        assert result.imbalance() == {"{": 1}


class TestCheckNesting:
    def test_balanced_passes(self):
        check_nesting(tokenize("if (a) { b[0](); }"))

    def test_mismatched_raises(self):
        with pytest.raises(LexError) as exc:
            check_nesting(tokenize("(\n]"))
        assert exc.value.line == 2

    def test_unexpected_closer_raises(self):
        with pytest.raises(LexError, match="Unexpected"):
            check_nesting(tokenize("}"))

    def test_unclosed_raises(self):
        with pytest.raises(LexError, match="Unclosed"):
            check_nesting(tokenize("function f() {\n  return 1;\n"))


class TestJsxText:
    def test_apostrophe_in_jsx_text_is_not_a_string(self):
        source = "export const N = () => (\n  <p>Don't panic</p>\n);\n"
        result = tokenize(source, strict=True, jsx=True)
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "()()"
        assert result.strings == 0
        check_nesting(result)

    def test_plain_js_mode_still_reads_apostrophe_as_quote(self):
        with pytest.raises(LexError):
            tokenize("const p = <p>Don't panic</p>;\n", strict=True)

    def test_expression_children_are_still_scanned(self):
        source = "const L = () => <ul>{items.map(i => <li key={i}>{i}'s</li>)}</ul>;\n"
        result = tokenize(source, strict=True, jsx=True)
        chars = "".join(d.char for d in result.delimiters)
        assert chars == "(){({}{})}"
        check_nesting(result)

    def test_comparison_is_not_a_tag(self):
        result = tokenize("if (a <b) { x = 'y'; }\n", strict=True, jsx=True)
        assert result.strings == 1
        assert "".join(d.char for d in result.delimiters) == "(){}"

    def test_lenient_mode_skips_text_too(self):
        result = tokenize("const N = <h1>It's {name}'s</h1>;\n", strict=False, jsx=True)
        assert result.strings == 0
        assert "".join(d.char for d in result.delimiters) == "{}"
