from __future__ import annotations

from typing import Any, Literal, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field


class RuleOptions(BaseModel):
    """Base for per-rule option schemas.

    Unknown keys are dropped and missing keys fall back to the field default,
    so any raw mapping from a config file can be fed to ``model_validate``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def schema_summary(cls) -> dict[str, dict[str, Any]]:
        """Describe each option as ``{"default": ..., "accepted"|"type": ...}``."""
        summary: dict[str, dict[str, Any]] = {}
        for name, info in cls.model_fields.items():
            entry: dict[str, Any] = {"default": info.default}
            if get_origin(info.annotation) is Literal:
                entry["accepted"] = list(get_args(info.annotation))
            else:
                entry["type"] = getattr(info.annotation, "__name__", str(info.annotation))
            if info.description:
                entry["description"] = info.description
            summary[name] = entry
        return summary


class HeadingStyleOptions(RuleOptions):
    style: Literal["consistent", "atx", "atx_closed", "setext"] = Field(
        default="consistent", description="Required heading style, or 'consistent' to follow the first heading"
    )


class ListStyleOptions(RuleOptions):
    style: Literal["consistent", "asterisk", "dash", "plus"] = Field(
        default="consistent", description="Required bullet marker, or 'consistent' to follow the first list item"
    )


class ListIndentOptions(RuleOptions):
    indent: int = Field(default=2, ge=1, description="Spaces a nested bullet list is indented by")


class LineLengthOptions(RuleOptions):
    line_length: int = Field(default=80, ge=1, description="Maximum line length before a break is expected")
