from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LintConfig(BaseModel):
    """Which rules run and with what options.

    Attributes:
        default: Whether rules not listed in ``rules`` are enabled.
        rules: Per-rule setting keyed by rule name. ``False`` disables the rule,
            ``True`` enables it with default options, and a mapping enables it
            with those option overrides.
    """

    model_config = ConfigDict(frozen=True)

    default: bool = Field(default=True, description="Enable rules that are not configured explicitly")
    rules: dict[str, bool | dict[str, Any]] = Field(default_factory=dict, description="Per-rule enable flag or options")

    @field_validator("rules")
    @classmethod
    def _normalize_names(cls, value: dict[str, bool | dict[str, Any]]) -> dict[str, bool | dict[str, Any]]:
        normalized: dict[str, bool | dict[str, Any]] = {}
        for name, setting in value.items():
            key = name.upper()
            if key in normalized:
                raise ValueError(f"Rule {key!r} is configured more than once")
            normalized[key] = setting
        return normalized

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> LintConfig:
        """Build from the flat layout ``{"default": true, "MD013": {...}, "MD009": false}``."""
        data = dict(data or {})
        default = data.pop("default", True)
        return cls(default=default, rules=data)

    def is_enabled(self, name: str) -> bool:
        setting = self.rules.get(name.upper())
        if setting is None:
            return self.default
        if isinstance(setting, bool):
            return setting
        return True

    def options_for(self, name: str) -> dict[str, Any]:
        setting = self.rules.get(name.upper())
        if isinstance(setting, dict):
            return dict(setting)
        return {}
