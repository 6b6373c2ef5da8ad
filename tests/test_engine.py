import logging

import pytest
from pydantic import ValidationError

from markdown_style_guard import RULES, Document, LintConfig, Rule, Token, TokenType, lint_document


MESSY_TEXT = "## Title\ntext   \n* a\n\n\n\tend"
MESSY_DOC = Document.from_text(MESSY_TEXT, [Token(TokenType.HEADING_OPEN, 1, heading_level=2)])

CLEAN_DOC = Document.from_text(
    "# Title\n\nSome text.\n",
    [
        Token(TokenType.HEADING_OPEN, 1, heading_level=1),
        Token(TokenType.HEADING_CLOSE, 1, heading_level=1),
    ],
)


def _boom(document, options):
    raise RuntimeError("unexpected token shape")


class TestLintDocument:
    def test_clean_document(self):
        result = lint_document(CLEAN_DOC)
        assert result.is_clean
        assert result.violations == ()
        assert set(result.by_rule()) == {rule.name for rule in RULES}

    def test_messy_document(self):
        grouped = lint_document(MESSY_DOC).by_rule()
        assert grouped["MD002"] == [1]
        assert grouped["MD009"] == [2]
        assert grouped["MD010"] == [6]
        assert grouped["MD012"] == [5]
        assert grouped["MD032"] == [3]
        assert grouped["MD001"] == []

    def test_violations_follow_rule_then_line_order(self):
        result = lint_document(Document.from_text("a \n\tb \n"))
        pairs = [(v.rule_name, v.line_number) for v in result.violations]
        assert pairs == [("MD009", 1), ("MD009", 2), ("MD010", 2)]

    def test_disabled_rule_is_skipped(self):
        result = lint_document(MESSY_DOC, {"MD009": False})
        assert "MD009" not in result.by_rule()
        assert all(v.rule_name != "MD009" for v in result.violations)

    def test_default_off_with_selected_rules(self):
        result = lint_document(MESSY_DOC, {"default": False, "md010": True})
        assert result.by_rule() == {"MD010": [6]}

    def test_rule_options_are_passed_through(self):
        doc = Document.from_text("word word word word")
        assert lint_document(doc, {"default": False, "MD013": {"line_length": 5}}).by_rule() == {"MD013": [1]}

    def test_accepts_lint_config(self):
        config = LintConfig(default=False, rules={"MD009": True})
        assert lint_document(MESSY_DOC, config).by_rule() == {"MD009": [2]}

    def test_to_payload(self):
        payload = lint_document(Document.from_text("x "), {"default": False, "MD009": True}).to_payload()
        assert payload == {"violations": [{"type": "RuleViolation", "rule": "MD009", "line": 1}], "errors": []}


class TestRuleIsolation:
    def test_failing_rule_does_not_stop_others(self):
        rules = (Rule("BROKEN", "Always fails", _boom),) + RULES
        result = lint_document(MESSY_DOC, rules=rules)
        assert [e.rule_name for e in result.errors] == ["BROKEN"]
        assert "RuntimeError" in result.errors[0].message
        assert "BROKEN" not in result.by_rule()
        assert result.by_rule()["MD009"] == [2]
        assert not result.is_clean

    def test_invalid_options_become_rule_error(self):
        result = lint_document(MESSY_DOC, {"MD003": {"style": "fancy"}})
        assert [e.rule_name for e in result.errors] == ["MD003"]
        assert "ValidationError" in result.errors[0].message
        assert result.by_rule()["MD009"] == [2]

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="markdown_style_guard.engine"):
            lint_document(CLEAN_DOC, rules=(Rule("BROKEN", "Always fails", _boom),))
        assert "BROKEN" in caplog.text


class TestLintConfig:
    def test_defaults(self):
        config = LintConfig()
        assert config.is_enabled("MD001")
        assert config.options_for("MD013") == {}

    def test_from_mapping(self):
        config = LintConfig.from_mapping({"default": False, "MD013": {"line_length": 100}, "md009": True})
        assert not config.default
        assert config.is_enabled("MD013")
        assert config.is_enabled("MD009")
        assert not config.is_enabled("MD001")
        assert config.options_for("md013") == {"line_length": 100}

    def test_from_empty_mapping(self):
        assert LintConfig.from_mapping(None) == LintConfig()

    def test_rejects_bad_setting(self):
        with pytest.raises(ValidationError):
            LintConfig.from_mapping({"MD013": "loud"})

    def test_rejects_names_differing_only_in_case(self):
        with pytest.raises(ValidationError, match="configured more than once"):
            LintConfig.from_mapping({"md013": {"line_length": 100}, "MD013": False})

    def test_unknown_rule_is_warned_and_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="markdown_style_guard.engine"):
            result = lint_document(CLEAN_DOC, {"MD999": False})
        assert result.is_clean
        assert "MD999" in caplog.text
