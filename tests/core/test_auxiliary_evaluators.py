from __future__ import annotations

from typing import Any

import pendulum
import pytest

from recruitscreen.core import (
    ActivityAgingEvaluator,
    AgingConfig,
    Evaluator,
    ProspectScorer,
    ScoringConfig,
    summarize_aging,
)
from recruitscreen.schemas import Candidate

FIXED_NOW = pendulum.datetime(2025, 3, 20, 12)


def build_candidate(**kwargs: Any) -> dict[str, Any]:
    return Candidate(candidate_id="A-300", **kwargs).model_dump(mode="python")


def test_evaluators_satisfy_protocol():
    assert isinstance(ProspectScorer(), Evaluator)
    assert isinstance(ActivityAgingEvaluator(), Evaluator)


def test_prospect_score_sums_signals_and_caps():
    scorer = ProspectScorer()

    result = scorer.evaluate(
        build_candidate(age=18, education_level="HS Diploma", interest_level=9), {}
    )

    assert result["method"] == "prospect"
    assert result["scores"]["prospect_score"] == pytest.approx(1.0)
    assert result["metadata"] == {"in_age_window": True, "has_diploma": True, "interested": True}


def test_prospect_score_without_age_counts_other_signals():
    result = ProspectScorer().evaluate(build_candidate(education_level="GED", interest_level=10), {})

    assert result["scores"]["prospect_score"] == pytest.approx(0.3)
    assert result["metadata"]["in_age_window"] is False


def test_prospect_score_config_override():
    scorer = ProspectScorer(config=ScoringConfig(interest_threshold=4))

    result = scorer.evaluate(build_candidate(interest_level=5), {})

    assert result["scores"]["prospect_score"] == pytest.approx(0.3)


@pytest.mark.parametrize(
    ("last_activity", "level", "days"),
    [
        ("2025-03-18T12:00:00+00:00", "fresh", 2),
        ("2025-03-13T12:00:00+00:00", "warn", 7),
        ("2025-03-01T12:00:00+00:00", "danger", 19),
    ],
)
def test_aging_levels(last_activity, level, days):
    evaluator = ActivityAgingEvaluator(now_provider=lambda: FIXED_NOW)

    result = evaluator.evaluate(build_candidate(last_activity_at=last_activity), {})

    assert result["metadata"]["level"] == level
    assert result["metadata"]["days_since_activity"] == days


def test_aging_falls_back_to_updated_at_and_as_of():
    evaluator = ActivityAgingEvaluator(config=AgingConfig(warn_days=3, danger_days=30))
    candidate = build_candidate(updated_at="2025-01-01T00:00:00")

    result = evaluator.evaluate(candidate, {"as_of": "2025-01-05"})

    assert result["metadata"]["days_since_activity"] == 4
    assert result["metadata"]["level"] == "warn"


def test_aging_without_timestamps_is_unknown():
    evaluator = ActivityAgingEvaluator(now_provider=lambda: FIXED_NOW)

    result = evaluator.evaluate(build_candidate(), {"as_of": "not a date"})

    assert result["metadata"]["level"] == "unknown"
    assert result["metadata"]["days_since_activity"] is None


def test_summarize_aging_counts_flags():
    assert summarize_aging(["fresh", "warn", "danger", "danger", "unknown"]) == {"warn": 1, "danger": 2}
