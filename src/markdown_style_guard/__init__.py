# SPDX-License-Identifier: Apache-2.0
"""Structural style checks for Markdown.

Runs a fixed set of independent rules (heading levels and styles, list markers
and indentation, whitespace, blank lines around fences and lists) over a parsed
document and reports the line numbers that break each convention. No rendering,
no auto-fixing.

Usage::

    from markdown_style_guard import Document, lint_document

    document = Document.from_text(text, tokens=parser_tokens)
    result = lint_document(document, {"MD013": {"line_length": 100}, "MD009": False})
    for violation in result.violations:
        print(violation.rule_name, violation.line_number)
"""

from markdown_style_guard.config import LintConfig
from markdown_style_guard.core import RULES, Rule, get_rule
from markdown_style_guard.document import Document, Token, TokenType
from markdown_style_guard.engine import LintResult, RuleError, RuleViolation, lint_document

__all__ = [
    "Document",
    "LintConfig",
    "LintResult",
    "RULES",
    "Rule",
    "RuleError",
    "RuleViolation",
    "Token",
    "TokenType",
    "get_rule",
    "lint_document",
]
