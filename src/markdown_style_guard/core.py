# Structural style rules for Markdown documents.
#
# Each rule reads a parsed ``Document`` (raw lines + token stream) and yields the
# 1-based line numbers where a convention is broken. Rules are pure: they keep no
# state between calls, so the same ``Rule`` objects serve every document.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Mapping

from markdown_style_guard.document import Document, Token, TokenType
from markdown_style_guard.options import (
    HeadingStyleOptions,
    LineLengthOptions,
    ListIndentOptions,
    ListStyleOptions,
    RuleOptions,
)

# ---------------------------------------------------------------------------
# Rule contract
# ---------------------------------------------------------------------------

_Check = Callable[[Document, Any], Iterable[int]]


@dataclass(frozen=True)
class Rule:
    """A named, stateless check over a ``Document``."""

    name: str
    description: str
    check: _Check
    options_model: type[RuleOptions] = RuleOptions

    @property
    def config_schema(self) -> dict[str, dict[str, Any]]:
        return self.options_model.schema_summary()

    def resolve_options(self, config: Mapping[str, Any] | None = None) -> RuleOptions:
        return self.options_model.model_validate(dict(config or {}))

    def evaluate(self, document: Document, config: Mapping[str, Any] | None = None) -> tuple[int, ...]:
        """Return the violated line numbers, ascending and without duplicates.

        Raises:
            pydantic.ValidationError: if *config* holds an invalid option value.
        """
        options = self.resolve_options(config)
        return tuple(sorted(set(self.check(document, options))))


# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------

_CLOSED_ATX_RE = re.compile(r"#\s*$")
_TRAILING_SPACE_RE = re.compile(r"\s$")
_REVERSED_LINK_RE = re.compile(r"\([^)]+\)\[[^\]]+\]")
_FENCE_RE = re.compile(r"^(```|~~~)")
_LIST_MARKER_RE = re.compile(r"^([*+\-]|(\d+\.))\s")
_BLANK_OR_INDENTED_RE = re.compile(r"^($|\s)")

_BULLET_STYLES = {"*": "asterisk", "-": "dash", "+": "plus"}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _indent_for(document: Document, token: Token) -> int:
    line = document.line_for(token)
    return len(line) - len(line.lstrip())


def _heading_style_for(document: Document, token: Token) -> str:
    start, end = token.span
    if end - start == 1:
        if _CLOSED_ATX_RE.search(document.line_for(token)):
            return "atx_closed"
        return "atx"
    return "setext"


def _unordered_list_style_for(document: Document, token: Token) -> str | None:
    return _BULLET_STYLES.get(document.line_for(token).lstrip()[:1])


def _pad_and_trim(lines: Iterable[str]) -> list[str]:
    return ["", *(line.strip() for line in lines), ""]


def _consistent(styles: list[tuple[int, str | None]], style: str) -> Iterator[int]:
    """Yield lines whose style differs from *style* (the first occurrence if 'consistent')."""
    if style == "consistent":
        style = styles[0][1] if styles else None
    for line_number, found in styles:
        if found is not None and found != style:
            yield line_number


# ---------------------------------------------------------------------------
# Token-filtering rules
# ---------------------------------------------------------------------------


def _check_heading_increment(document: Document, _options: RuleOptions) -> Iterator[int]:
    prev_level = 0
    for token in document.filter_tokens(TokenType.HEADING_OPEN):
        if prev_level and token.heading_level > prev_level + 1:
            yield token.line_number
        prev_level = token.heading_level


def _check_first_heading_h1(document: Document, _options: RuleOptions) -> Iterator[int]:
    for token in document.filter_tokens(TokenType.HEADING_OPEN):
        if token.heading_level != 1:
            yield token.line_number
        return


def _check_reversed_link(document: Document, _options: RuleOptions) -> Iterator[int]:
    for token in document.filter_tokens(TokenType.INLINE):
        if any(
            child.type == TokenType.TEXT and _REVERSED_LINK_RE.search(child.content)
            for child in token.children
        ):
            yield token.line_number


# ---------------------------------------------------------------------------
# Style-consistency rules
# ---------------------------------------------------------------------------


def _check_heading_style(document: Document, options: HeadingStyleOptions) -> Iterator[int]:
    styles = [
        (token.line_number, _heading_style_for(document, token))
        for token in document.filter_tokens(TokenType.HEADING_OPEN)
    ]
    return _consistent(styles, options.style)


def _check_list_style(document: Document, options: ListStyleOptions) -> Iterator[int]:
    styles = [
        (token.line_number, _unordered_list_style_for(document, token))
        for token in document.filter_tokens(TokenType.LIST_ITEM_OPEN)
    ]
    return _consistent(styles, options.style)


# ---------------------------------------------------------------------------
# Indentation rules
# ---------------------------------------------------------------------------


def _check_list_indent(document: Document, _options: RuleOptions) -> Iterator[int]:
    indent_levels: dict[int, int] = {}
    for token in document.filter_tokens(TokenType.LIST_ITEM_OPEN):
        indent = _indent_for(document, token)
        expected = indent_levels.setdefault(token.level, indent)
        if indent != expected:
            yield token.line_number


def _check_top_level_bullets(document: Document, _options: RuleOptions) -> Iterator[int]:
    depth = 0
    for token in document.tokens:
        if token.type == TokenType.BULLET_LIST_OPEN:
            depth += 1
            if depth == 1 and _indent_for(document, token) != 0:
                yield token.line_number
        elif token.type == TokenType.BULLET_LIST_CLOSE:
            depth -= 1


def _check_list_indent_step(document: Document, options: ListIndentOptions) -> Iterator[int]:
    prev_indent = 0
    for token in document.filter_tokens(TokenType.BULLET_LIST_OPEN):
        indent = _indent_for(document, token)
        if indent > prev_indent and indent - prev_indent != options.indent:
            yield token.line_number
        prev_indent = indent


# ---------------------------------------------------------------------------
# Line rules
# ---------------------------------------------------------------------------


def _check_trailing_spaces(document: Document, _options: RuleOptions) -> Iterator[int]:
    for index, line in enumerate(document.lines):
        if _TRAILING_SPACE_RE.search(line):
            yield index + 1


def _check_hard_tabs(document: Document, _options: RuleOptions) -> Iterator[int]:
    for index, line in enumerate(document.lines):
        if "\t" in line:
            yield index + 1


def _check_line_length(document: Document, options: LineLengthOptions) -> Iterator[int]:
    # Only lines with a break opportunity past the limit count; a lone long URL does not.
    pattern = re.compile(r"^.{%d}.*\s" % options.line_length)
    for index, line in enumerate(document.lines):
        if pattern.match(line):
            yield index + 1


# ---------------------------------------------------------------------------
# Line/token state machines
# ---------------------------------------------------------------------------


def _check_blockquote_blank(document: Document, _options: RuleOptions) -> Iterator[int]:
    prev_type = None
    for token in document.tokens:
        if token.type == TokenType.BLOCKQUOTE_OPEN and prev_type == TokenType.BLOCKQUOTE_CLOSE:
            yield token.line_number - 1
        prev_type = token.type


def _check_multiple_blanks(document: Document, _options: RuleOptions) -> Iterator[int]:
    exclusions: set[int] = set()
    for token in document.filter_tokens(TokenType.CODE_BLOCK, TokenType.FENCE):
        start, end = token.span
        exclusions.update(range(start, end))
    prev_line = "-"
    for index, raw in enumerate(document.lines):
        line = raw.strip()
        if not line and not prev_line and index not in exclusions:
            yield index + 1
        prev_line = line


def _check_fence_surround(document: Document, _options: RuleOptions) -> Iterator[int]:
    # The parser misses fences that lack surrounding blank lines, so read the lines.
    lines = _pad_and_trim(document.lines)
    in_code = False
    for line_number, line in enumerate(lines):
        if _FENCE_RE.match(line):
            in_code = not in_code
            if (in_code and lines[line_number - 1]) or (not in_code and lines[line_number + 1]):
                yield line_number


def _check_list_surround(document: Document, _options: RuleOptions) -> Iterator[int]:
    # Same parser weakness as fences: lists are found from the raw lines.
    in_list = False
    in_code = False
    prev_line = ""
    for index, line in enumerate(document.lines):
        if not in_code:
            is_marker = bool(_LIST_MARKER_RE.match(line.strip()))
            if is_marker and not in_list and not _BLANK_OR_INDENTED_RE.match(prev_line):
                yield index + 1
            elif not is_marker and in_list and not _BLANK_OR_INDENTED_RE.match(line):
                yield index
            in_list = is_marker
        if _FENCE_RE.match(line.strip()):
            in_code = not in_code
            in_list = False
        prev_line = line


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

RULES: tuple[Rule, ...] = (
    Rule("MD001", "Header levels should only increment by one level at a time", _check_heading_increment),
    Rule("MD002", "First header should be a h1 header", _check_first_heading_h1),
    Rule("MD003", "Header style", _check_heading_style, HeadingStyleOptions),
    Rule("MD004", "Unordered list style", _check_list_style, ListStyleOptions),
    Rule("MD005", "Inconsistent indentation for list items at the same level", _check_list_indent),
    Rule("MD006", "Consider starting bulleted lists at the beginning of the line", _check_top_level_bullets),
    Rule("MD007", "Unordered list indentation", _check_list_indent_step, ListIndentOptions),
    Rule("MD009", "Trailing spaces", _check_trailing_spaces),
    Rule("MD010", "Hard tabs", _check_hard_tabs),
    Rule("MD011", "Reversed link syntax", _check_reversed_link),
    Rule("MD012", "Multiple consecutive blank lines", _check_multiple_blanks),
    Rule("MD013", "Line length", _check_line_length, LineLengthOptions),
    Rule("MD028", "Blank line inside blockquote", _check_blockquote_blank),
    Rule("MD031", "Fenced code blocks should be surrounded by blank lines", _check_fence_surround),
    Rule("MD032", "Lists should be surrounded by blank lines", _check_list_surround),
)


def get_rule(name: str, rules: Iterable[Rule] = RULES) -> Rule:
    """Look up a rule by name, ignoring case.

    Raises:
        KeyError: if no rule carries *name*.
    """
    wanted = name.upper()
    for rule in rules:
        if rule.name.upper() == wanted:
            return rule
    raise KeyError(f"Unknown rule {name!r}")
