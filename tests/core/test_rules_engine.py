from __future__ import annotations

from typing import Any

from recruitscreen.core import RulesEngine, evaluate_eligibility, order_by_severity
from recruitscreen.rules_store import starter_rules
from recruitscreen.schemas import (
    AndPredicate,
    Candidate,
    EligibilityHeadline,
    NumberCompare,
    OrPredicate,
    Rule,
    Stage,
)

ALWAYS_FAILS = OrPredicate(items=[])
ALWAYS_PASSES = AndPredicate(items=[])


def build_rule(name: str, headline: EligibilityHeadline, *, passes: bool = False, action: str | None = None) -> Rule:
    return Rule(
        name=name,
        predicate=ALWAYS_PASSES if passes else ALWAYS_FAILS,
        fail_headline=headline,
        chip=f"{name} chip",
        action=action,
    )


def build_candidate(**kwargs: Any) -> Candidate:
    defaults: dict[str, Any] = {
        "candidate_id": "A-100",
        "age": 20,
        "education_level": "High School",
        "dependents": 0,
        "stage": Stage.SCREENING,
    }
    defaults.update(kwargs)
    return Candidate(**defaults)


def test_empty_rule_set_is_eligible():
    outcome = RulesEngine().evaluate([], build_candidate())

    assert outcome.headline is EligibilityHeadline.ELIGIBLE
    assert outcome.chips == []
    assert outcome.actions == []


def test_passing_rules_leave_outcome_untouched():
    rules = [build_rule("ok", EligibilityHeadline.INELIGIBLE, passes=True, action="never")]

    outcome = RulesEngine().evaluate(rules, build_candidate())

    assert outcome.headline is EligibilityHeadline.ELIGIBLE
    assert outcome.actions == []


def test_last_failing_rule_sets_headline():
    waiver = build_rule("R1", EligibilityHeadline.NEEDS_WAIVER, action="waiver")
    blocked = build_rule("R2", EligibilityHeadline.INELIGIBLE, action="refer")
    engine = RulesEngine()

    forward = engine.evaluate([waiver, blocked], build_candidate())
    backward = engine.evaluate([blocked, waiver], build_candidate())

    assert forward.headline is EligibilityHeadline.INELIGIBLE
    assert backward.headline is EligibilityHeadline.NEEDS_WAIVER
    assert forward.chips == ["R1 chip", "R2 chip"]
    assert backward.chips == ["R2 chip", "R1 chip"]
    assert sorted(forward.actions) == sorted(backward.actions)


def test_missing_action_is_not_appended_and_duplicates_are_kept():
    rules = [
        build_rule("dup", EligibilityHeadline.NEEDS_DOCUMENTS, action="Get DOB"),
        build_rule("dup", EligibilityHeadline.NEEDS_DOCUMENTS, action="Get DOB"),
        build_rule("silent", EligibilityHeadline.NEEDS_DOCUMENTS),
    ]

    outcome = RulesEngine().evaluate(rules, build_candidate())

    assert outcome.chips == ["dup chip", "dup chip", "silent chip"]
    assert outcome.actions == ["Get DOB", "Get DOB"]


def test_order_by_severity_puts_most_severe_last():
    rules = [
        build_rule("blocked", EligibilityHeadline.INELIGIBLE),
        build_rule("docs", EligibilityHeadline.NEEDS_DOCUMENTS),
        build_rule("waiver", EligibilityHeadline.NEEDS_WAIVER),
    ]

    ordered = order_by_severity(rules)
    outcome = RulesEngine().evaluate(ordered, build_candidate())

    assert [rule.name for rule in ordered] == ["docs", "waiver", "blocked"]
    assert outcome.headline is EligibilityHeadline.INELIGIBLE


def test_starter_rules_clear_a_complete_candidate():
    outcome = evaluate_eligibility(build_candidate(), starter_rules())

    assert outcome.headline is EligibilityHeadline.ELIGIBLE
    assert outcome.chips == []


def test_starter_rules_on_empty_candidate():
    outcome = evaluate_eligibility(Candidate(), starter_rules())

    assert outcome.headline is EligibilityHeadline.NEEDS_DOCUMENTS
    assert outcome.chips == ["Under 17", "Add DOB/Age", "Dependents > 3", "Add Education"]
    assert outcome.actions == ["Wait until 17", "Get DOB", "Dependency Waiver", "Transcripts/GED"]


def test_starter_rules_flag_legal_and_tattoo_issues():
    candidate = build_candidate(
        legal_issues="Currently on parole",
        has_tattoos=True,
        tattoos_notes="Small neck tattoo",
    )

    outcome = evaluate_eligibility(candidate, starter_rules())

    assert outcome.chips == ["Legal Hold", "Tattoo Waiver?"]
    assert outcome.headline is EligibilityHeadline.NEEDS_WAIVER


def test_underage_rule_reports_ineligible():
    rule = Rule(
        name="Underage",
        predicate=NumberCompare(field="age", op="gte", value=17),
        fail_headline=EligibilityHeadline.INELIGIBLE,
        chip="Under 17",
    )

    outcome = evaluate_eligibility(build_candidate(age=16), [rule])

    assert outcome.headline is EligibilityHeadline.INELIGIBLE
    assert outcome.actions == []
