"""Minimal JavaScript/JSX lexer used by the structural and tokenizer strategies.

The lexer does not understand the grammar. It only knows enough about
comments, strings and template literals to tell real delimiters from ones
inside text, so that delimiter nesting can be checked.

Two modes:

* ``strict`` -- quoted strings may not span lines, and any unterminated
  construct raises :class:`LexError`.
* lenient -- a newline closes a quoted string, and unterminated constructs
  simply end at EOF.
"""

from __future__ import annotations

from dataclasses import dataclass, field

OPENERS = {"{": "}", "(": ")", "[": "]"}
CLOSERS = {v: k for k, v in OPENERS.items()}

JSX_SUFFIXES = frozenset({".js", ".jsx", ".tsx"})

# What may precede a ``<`` that opens a JSX tag outside JSX text.
_JSX_LEAD_CHARS = frozenset("(,=?:{}[&|>;!")
_JSX_LEAD_WORDS = ("return", "yield", "default")


class LexError(Exception):
    """Raised by the strict lexer on malformed input."""

    def __init__(self, message: str, line: int):
        super().__init__(f"{message} (line {line})")
        self.line = line


@dataclass
class Delimiter:
    char: str
    line: int


@dataclass
class LexResult:
    delimiters: list[Delimiter] = field(default_factory=list)
    comments: int = 0
    strings: int = 0
    lines: int = 0

    def imbalance(self) -> dict[str, int]:
        """Net open minus close count per bracket pair (non-zero entries only)."""
        counts: dict[str, int] = {}
        for d in self.delimiters:
            key = d.char if d.char in OPENERS else CLOSERS[d.char]
            counts[key] = counts.get(key, 0) + (1 if d.char in OPENERS else -1)
        return {k: v for k, v in counts.items() if v}


def tokenize(source: str, strict: bool = True, jsx: bool = False) -> LexResult:
    """Scan *source* and return every structural delimiter outside text.

    With ``jsx`` set, text between JSX tags is skipped, so an apostrophe
    in ``<p>Don't panic</p>`` does not open a string.
    """
    result = LexResult(lines=source.count("\n") + 1)
    i = 0
    line = 1
    n = len(source)
    # Brace depth at which each open ``${`` substitution started.
    substitutions: list[int] = []
    brace_depth = 0
    # None for an open JSX element, else the brace depth of a ``{...}`` child.
    jsx_stack: list[int | None] = []
    tag_depth: int | None = None
    closing_tag = False

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""
        in_text = tag_depth is None and bool(jsx_stack) and jsx_stack[-1] is None

        if ch == "\n":
            line += 1
            i += 1
        elif jsx and tag_depth is None and ch == "<" and _opens_tag(source, i, in_text):
            tag_depth = brace_depth
            closing_tag = nxt == "/"
            i += 1
        elif in_text and ch != "{":
            i += 1
        elif tag_depth is not None and ch == ">" and brace_depth == tag_depth:
            if closing_tag:
                if jsx_stack:
                    jsx_stack.pop()
            elif source[i - 1] != "/":
                jsx_stack.append(None)
            tag_depth = None
            i += 1
        elif ch == "/" and nxt == "/":
            end = source.find("\n", i)
            i = n if end == -1 else end
            result.comments += 1
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            if end == -1:
                if strict:
                    raise LexError("Unterminated block comment", line)
                line += source.count("\n", i)
                i = n
            else:
                line += source.count("\n", i, end)
                i = end + 2
            result.comments += 1
        elif ch in ("'", '"'):
            i = _skip_quoted(source, i, line, ch, strict)
            result.strings += 1
        elif ch == "`" or (ch == "}" and substitutions and substitutions[-1] == brace_depth):
            if ch == "}":
                substitutions.pop()
            else:
                result.strings += 1
            i, line, opened = _skip_template(source, i + 1, line, strict)
            if opened:
                substitutions.append(brace_depth)
        elif ch in OPENERS or ch in CLOSERS:
            if ch == "{":
                if in_text:
                    jsx_stack.append(brace_depth)
                brace_depth += 1
            elif ch == "}":
                brace_depth -= 1
                if jsx_stack and jsx_stack[-1] == brace_depth:
                    jsx_stack.pop()
            result.delimiters.append(Delimiter(ch, line))
            i += 1
        else:
            i += 1

    if strict and substitutions:
        raise LexError("Unterminated template substitution", line)
    return result


def _opens_tag(source: str, i: int, in_text: bool) -> bool:
    """Whether the ``<`` at *i* starts a JSX tag rather than a comparison."""
    nxt = source[i + 1] if i + 1 < len(source) else ""
    if not (nxt.isalpha() or nxt in ("/", ">")):
        return False
    if in_text:
        return True
    j = i - 1
    while j >= 0 and source[j] in " \t\r\n":
        j -= 1
    if j < 0 or source[j] in _JSX_LEAD_CHARS:
        return True
    k = j
    while k >= 0 and (source[k].isalnum() or source[k] in "_$"):
        k -= 1
    return source[k + 1 : j + 1] in _JSX_LEAD_WORDS


def _skip_quoted(source: str, i: int, line: int, quote: str, strict: bool) -> int:
    n = len(source)
    j = i + 1
    while j < n:
        c = source[j]
        if c == "\\":
            j += 2
            continue
        if c == quote:
            return j + 1
        if c == "\n":
            if strict:
                raise LexError("Unterminated string literal", line)
            return j
        j += 1
    if strict:
        raise LexError("Unterminated string literal", line)
    return n


def _skip_template(source: str, j: int, line: int, strict: bool) -> tuple[int, int, bool]:
    """Skip a template body starting at *j*.

    Returns ``(index, line, opened)`` where *opened* is true when the body
    stopped at a ``${`` substitution rather than the closing backtick.
    """
    n = len(source)
    while j < n:
        c = source[j]
        if c == "\\":
            j += 2
            continue
        if c == "\n":
            line += 1
        elif c == "`":
            return j + 1, line, False
        elif c == "$" and j + 1 < n and source[j + 1] == "{":
            return j + 2, line, True
        j += 1
    if strict:
        raise LexError("Unterminated template literal", line)
    return n, line, False


def check_nesting(result: LexResult) -> None:
    """Raise :class:`LexError` on the first mismatched or unclosed delimiter."""
    stack: list[Delimiter] = []
    for d in result.delimiters:
        if d.char in OPENERS:
            stack.append(d)
            continue
        if not stack:
            raise LexError(f"Unexpected '{d.char}'", d.line)
        top = stack.pop()
        if OPENERS[top.char] != d.char:
            raise LexError(
                f"Expected '{OPENERS[top.char]}' to close '{top.char}' "
                f"from line {top.line}, found '{d.char}'",
                d.line,
            )
    if stack:
        top = stack[-1]
        raise LexError(f"Unclosed '{top.char}'", top.line)
