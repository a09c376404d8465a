"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EligibilityConfig(BaseModel):
    rules_path: Path | None = None
    include_body_composition: bool = False
    order_by_severity: bool = False

    model_config = ConfigDict(extra="forbid")


class BodyCompositionConfig(BaseModel):
    tables_dir: Path | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    eligibility: EligibilityConfig = Field(default_factory=EligibilityConfig)
    body_composition: BodyCompositionConfig = Field(default_factory=BodyCompositionConfig)
    scoring: dict[str, Any] | None = None
    aging: dict[str, Any] | None = None

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {
            "eligibility": self.eligibility.model_dump(),
            "body_composition": self.body_composition.model_dump(),
        }
        evaluator_settings = {
            key: value
            for key, value in (("scoring", self.scoring), ("aging", self.aging))
            if value
        }
        if evaluator_settings:
            settings["evaluators"] = evaluator_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    """Validate a parsed YAML document; ``None`` yields the defaults."""
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
