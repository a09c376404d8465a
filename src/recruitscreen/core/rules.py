"""Eligibility rules engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..schemas import Candidate, EligibilityHeadline, Rule
from .predicates import evaluate_predicate


@dataclass(slots=True)
class RuleOutcome:
    """Accumulated verdict of one rule set against one candidate."""

    headline: EligibilityHeadline = EligibilityHeadline.ELIGIBLE
    chips: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)


class RulesEngine:
    """Folds an ordered rule list into a single :class:`RuleOutcome`.

    A rule whose predicate evaluates true is passed and leaves the outcome
    untouched. A failing rule appends its chip (and action, when set) and
    *overwrites* the headline with its ``fail_headline``.

    Ordering contract: the final headline is that of the **last failing rule
    in list order**, not the most severe one. Callers who want the most
    severe failure to win must order the rules with :func:`order_by_severity`
    (or equivalent) before evaluation. Chips and actions keep rule order and
    are not deduplicated.
    """

    def evaluate(self, rules: Iterable[Rule], candidate: Candidate) -> RuleOutcome:
        outcome = RuleOutcome()
        for rule in rules:
            if evaluate_predicate(rule.predicate, candidate):
                continue
            outcome.headline = rule.fail_headline
            outcome.chips.append(rule.chip)
            if rule.action is not None:
                outcome.actions.append(rule.action)
        return outcome


def order_by_severity(rules: Iterable[Rule]) -> list[Rule]:
    """Stable-sort rules so the most severe ``fail_headline`` is evaluated last."""
    return sorted(rules, key=lambda rule: rule.fail_headline.severity)
