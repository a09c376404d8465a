"""Pipeline activity aging."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Literal

import pendulum

from ..schemas import Candidate

AgingLevel = Literal["fresh", "warn", "danger", "unknown"]


@dataclass
class AgingConfig:
    """Day thresholds after which a stalled candidate is flagged."""

    warn_days: int = 7
    danger_days: int = 14


class ActivityAgingEvaluator:
    """Flag candidates whose last recorded activity is getting old."""

    method = "aging"

    def __init__(
        self,
        *,
        config: AgingConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or AgingConfig()
        self._now_provider = now_provider or pendulum.now

    def evaluate(self, candidate: dict[str, Any], context: dict[str, Any]) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        as_of = self._resolve_as_of(context)
        last_touch = profile.last_activity_at or profile.updated_at

        days: int | None = None
        level: AgingLevel = "unknown"
        if last_touch is not None:
            days = max(pendulum.instance(last_touch).diff(as_of, abs=False).in_days(), 0)
            level = self._level(days)

        return {
            "method": self.method,
            "scores": {"days_since_activity": float(days or 0)},
            "metadata": {
                "level": level,
                "days_since_activity": days,
                "as_of": as_of.to_iso8601_string(),
            },
        }

    def _level(self, days: int) -> AgingLevel:
        if days >= self._config.danger_days:
            return "danger"
        if days >= self._config.warn_days:
            return "warn"
        return "fresh"

    def _resolve_as_of(self, context: dict[str, Any]) -> pendulum.DateTime:
        as_of = context.get("as_of")
        default_now = self._now_provider()
        if as_of is None:
            return default_now
        if isinstance(as_of, pendulum.DateTime):
            return as_of
        if isinstance(as_of, datetime):
            return pendulum.instance(as_of)
        try:
            parsed = pendulum.parse(str(as_of))
        except ValueError:
            return default_now
        return parsed if isinstance(parsed, pendulum.DateTime) else default_now


def summarize_aging(levels: Iterable[str]) -> dict[str, int]:
    """Count warn/danger candidates for the daily aging summary."""
    counts = {"warn": 0, "danger": 0}
    for level in levels:
        if level in counts:
            counts[level] += 1
    return counts
