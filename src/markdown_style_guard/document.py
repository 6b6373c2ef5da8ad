"""Read-only view of a parsed Markdown document.

A ``Document`` pairs the raw source lines with the flattened token stream an
external Markdown parser produced for them. Rules only ever read from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")


class TokenType(str, Enum):
    """Token kinds the rules look at (markdown-it naming)."""

    HEADING_OPEN = "heading_open"
    HEADING_CLOSE = "heading_close"
    BULLET_LIST_OPEN = "bullet_list_open"
    BULLET_LIST_CLOSE = "bullet_list_close"
    ORDERED_LIST_OPEN = "ordered_list_open"
    ORDERED_LIST_CLOSE = "ordered_list_close"
    LIST_ITEM_OPEN = "list_item_open"
    LIST_ITEM_CLOSE = "list_item_close"
    BLOCKQUOTE_OPEN = "blockquote_open"
    BLOCKQUOTE_CLOSE = "blockquote_close"
    PARAGRAPH_OPEN = "paragraph_open"
    PARAGRAPH_CLOSE = "paragraph_close"
    INLINE = "inline"
    TEXT = "text"
    CODE_BLOCK = "code_block"
    FENCE = "fence"


@dataclass(frozen=True)
class Token:
    """One node of the pre-order flattened parse tree.

    Attributes:
        type: Node kind, a ``TokenType`` or its plain string value.
        line_number: 1-based line the token starts on.
        line_span: 0-based half-open ``(start, end)`` range of line indices the
            token covers. Defaults to the single line at ``line_number``.
        level: Nesting depth of the token.
        heading_level: 1-6 on heading tokens, ``None`` elsewhere.
        children: Inline child tokens (only on ``inline`` tokens).
        content: Text content of leaf tokens.
    """

    type: str
    line_number: int
    line_span: tuple[int, int] | None = None
    level: int = 0
    heading_level: int | None = None
    children: tuple[Token, ...] = ()
    content: str = ""

    @property
    def span(self) -> tuple[int, int]:
        if self.line_span is None:
            return (self.line_number - 1, self.line_number)
        return self.line_span


@dataclass(frozen=True)
class Document:
    lines: tuple[str, ...]
    tokens: tuple[Token, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "tokens", tuple(self.tokens))

    @classmethod
    def from_text(cls, text: str, tokens: Iterable[Token] = ()) -> Document:
        return cls(lines=tuple(_LINE_SPLIT_RE.split(text)), tokens=tuple(tokens))

    def line_for(self, token: Token) -> str:
        """Return the source line *token* starts on."""
        return self.lines[token.line_number - 1]

    def filter_tokens(self, *types: str) -> list[Token]:
        return [token for token in self.tokens if token.type in types]
