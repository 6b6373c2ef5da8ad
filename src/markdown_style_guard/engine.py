from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from markdown_style_guard.config import LintConfig
from markdown_style_guard.core import RULES, Rule
from markdown_style_guard.document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleViolation:
    rule_name: str
    line_number: int

    def to_payload(self) -> dict[str, object]:
        return {"type": "RuleViolation", "rule": self.rule_name, "line": self.line_number}


@dataclass(frozen=True)
class RuleError:
    """A rule that raised instead of reporting; it contributes no violations."""

    rule_name: str
    message: str

    def to_payload(self) -> dict[str, object]:
        return {"type": "RuleError", "rule": self.rule_name, "message": self.message}


@dataclass(frozen=True)
class LintResult:
    violations: tuple[RuleViolation, ...]
    errors: tuple[RuleError, ...]
    evaluated: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.violations and not self.errors

    def by_rule(self) -> dict[str, list[int]]:
        """Map every successfully evaluated rule to its violated lines."""
        failed = {e.rule_name for e in self.errors}
        grouped: dict[str, list[int]] = {name: [] for name in self.evaluated if name not in failed}
        for v in self.violations:
            grouped.setdefault(v.rule_name, []).append(v.line_number)
        return grouped

    def to_payload(self) -> dict[str, object]:
        return {
            "violations": [v.to_payload() for v in self.violations],
            "errors": [e.to_payload() for e in self.errors],
        }


def _coerce_config(config: LintConfig | Mapping[str, Any] | None) -> LintConfig:
    if isinstance(config, LintConfig):
        return config
    return LintConfig.from_mapping(config)


def lint_document(
    document: Document,
    config: LintConfig | Mapping[str, Any] | None = None,
    rules: Sequence[Rule] = RULES,
) -> LintResult:
    """Run every enabled rule against *document*.

    Args:
        document: Lines and tokens of the document to check.
        config: A ``LintConfig`` or the flat mapping accepted by
            ``LintConfig.from_mapping``. All rules run with defaults if omitted.
        rules: Rules to choose from. Defaults to the built-in ``RULES``.

    Returns:
        ``LintResult`` with violations in rule order, then line order. A rule
        that raises is recorded in ``errors`` and the remaining rules still run.
    """
    lint_config = _coerce_config(config)
    known = {rule.name.upper() for rule in rules}
    for name in lint_config.rules:
        if name not in known:
            logger.warning(f"Ignoring configuration for unknown rule {name!r}")

    enabled = [rule for rule in rules if lint_config.is_enabled(rule.name)]
    logger.info(f"Linting {len(document.lines)} lines with {len(enabled)} of {len(rules)} rules")

    violations: list[RuleViolation] = []
    errors: list[RuleError] = []
    for rule in enabled:
        try:
            lines = rule.evaluate(document, lint_config.options_for(rule.name))
        except Exception as exc:
            logger.warning(f"Rule {rule.name} failed: {exc!r}")
            errors.append(RuleError(rule.name, f"{type(exc).__name__}: {exc}"))
            continue
        logger.debug(f"   {rule.name}: {len(lines)} violation(s)")
        violations.extend(RuleViolation(rule.name, line) for line in lines)

    return LintResult(
        violations=tuple(violations),
        errors=tuple(errors),
        evaluated=tuple(rule.name for rule in enabled),
    )
