"""Core eligibility and body composition engines."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..schemas import Candidate, Rule, Sex
from .aging import ActivityAgingEvaluator, AgingConfig, summarize_aging
from .bodycomp import (
    BodyCompositionEvaluator,
    BodyCompositionTables,
    BodyCompResult,
    BodyCompStatus,
)
from .predicates import FIELD_ACCESSORS, evaluate_predicate
from .rules import RuleOutcome, RulesEngine, order_by_severity
from .scoring import ProspectScorer, ScoringConfig


@runtime_checkable
class Evaluator(Protocol):
    """Contract for auxiliary per-candidate evaluators (scoring, aging)."""

    def evaluate(self, candidate: dict, context: dict) -> dict:
        """Return evaluation results for a candidate under the given context."""


def evaluate_eligibility(candidate: Candidate, rule_set: Iterable[Rule]) -> RuleOutcome:
    """Evaluate ``rule_set`` in order; the last failing rule sets the headline."""
    return RulesEngine().evaluate(rule_set, candidate)


def evaluate_body_composition(
    candidate: Candidate,
    sex: Sex | None = None,
    age: int | None = None,
) -> BodyCompResult:
    """Classify ``candidate`` against the process-wide embedded tables."""
    return BodyCompositionEvaluator().evaluate_candidate(candidate, sex=sex, age=age)


__all__ = [
    "Evaluator",
    "evaluate_eligibility",
    "evaluate_body_composition",
    "evaluate_predicate",
    "FIELD_ACCESSORS",
    "RulesEngine",
    "RuleOutcome",
    "order_by_severity",
    "BodyCompositionEvaluator",
    "BodyCompositionTables",
    "BodyCompResult",
    "BodyCompStatus",
    "ProspectScorer",
    "ScoringConfig",
    "ActivityAgingEvaluator",
    "AgingConfig",
    "summarize_aging",
]
