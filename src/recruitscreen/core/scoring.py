"""Prospect likelihood scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schemas import Candidate


@dataclass
class ScoringConfig:
    """Weights and thresholds for the prospect score."""

    age_min: int = 17
    age_max: int = 24
    age_weight: float = 0.4
    education_keywords: tuple[str, ...] = ("hs", "high school")
    education_weight: float = 0.3
    interest_threshold: int = 8
    interest_weight: float = 0.3


class ProspectScorer:
    """Rough likelihood that a lead converts, in ``[0, 1]``."""

    method = "prospect"

    def __init__(self, *, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()

    def evaluate(self, candidate: dict[str, Any], context: dict[str, Any]) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        config = self._config

        in_age_window = profile.age is not None and config.age_min <= profile.age <= config.age_max
        education = profile.education_level.lower()
        has_diploma = any(keyword in education for keyword in config.education_keywords)
        interested = profile.interest_level > config.interest_threshold

        score = 0.0
        if in_age_window:
            score += config.age_weight
        if has_diploma:
            score += config.education_weight
        if interested:
            score += config.interest_weight

        return {
            "method": self.method,
            "scores": {"prospect_score": min(score, 1.0)},
            "metadata": {
                "in_age_window": in_age_window,
                "has_diploma": has_diploma,
                "interested": interested,
            },
        }
