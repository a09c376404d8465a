"""Predicate evaluation over candidate snapshots.

Evaluation is total: unknown fields, missing values and type mismatches all
resolve to a defined boolean instead of raising.
"""

from __future__ import annotations

import operator
from typing import Any, Callable

from ..schemas import Candidate
from ..schemas.rules import (
    AndPredicate,
    BoolEquals,
    FieldExists,
    NotPredicate,
    NumberCompare,
    OrPredicate,
    StringContainsAny,
)


def _joined(values: list[Any]) -> str:
    return " ".join(str(getattr(value, "value", value)) for value in values)


FIELD_ACCESSORS: dict[str, Callable[[Candidate], Any]] = {
    "age": lambda c: c.age,
    "priorService": lambda c: c.prior_service,
    "legalIssues": lambda c: c.legal_issues,
    "physicalHealth": lambda c: c.physical_health,
    "educationLevel": lambda c: c.education_level,
    "hasTattoos": lambda c: c.has_tattoos,
    "tattoosNotes": lambda c: c.tattoos_notes,
    "dependents": lambda c: c.dependents,
    "heightInInches": lambda c: c.height_in_inches,
    "weightInPounds": lambda c: c.weight_in_pounds,
    "waistInInches": lambda c: c.waist_in_inches,
    "stage": lambda c: c.stage.value,
    "medicalFlags": lambda c: _joined(c.medical_flags),
    "legalHistory": lambda c: _joined(c.legal_history),
    "bodyCompositionStatus": lambda c: c.body_composition_status,
}

_NUMBER_OPS: dict[str, Callable[[float, float], bool]] = {
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
    "eq": operator.eq,
    "neq": operator.ne,
}


def field_value(field: str, candidate: Candidate) -> Any:
    """Resolve ``field`` through the accessor table; unknown names are ``None``."""
    accessor = FIELD_ACCESSORS.get(field)
    if accessor is None:
        return None
    return accessor(candidate)


def _number_value(field: str, candidate: Candidate) -> float | None:
    value = field_value(field, candidate)
    # bool is an int subclass but never counts as a number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def evaluate_predicate(predicate: Any, candidate: Candidate) -> bool:
    """Evaluate ``predicate`` against ``candidate``.

    Numeric and boolean checks fail closed when the field is absent or of the
    wrong type. ``StringContainsAny`` treats an absent field as ``""``, so
    ``Not(StringContainsAny(...))`` holds for a candidate with nothing recorded.
    """
    if isinstance(predicate, AndPredicate):
        return all(evaluate_predicate(item, candidate) for item in predicate.items)

    if isinstance(predicate, OrPredicate):
        return any(evaluate_predicate(item, candidate) for item in predicate.items)

    if isinstance(predicate, NotPredicate):
        return not evaluate_predicate(predicate.item, candidate)

    if isinstance(predicate, NumberCompare):
        number = _number_value(predicate.field, candidate)
        compare = _NUMBER_OPS.get(predicate.op)
        if number is None or compare is None:
            return False
        return compare(number, predicate.value)

    if isinstance(predicate, BoolEquals):
        value = field_value(predicate.field, candidate)
        if not isinstance(value, bool):
            return False
        return value == predicate.equals

    if isinstance(predicate, StringContainsAny):
        value = field_value(predicate.field, candidate)
        haystack = value.lower() if isinstance(value, str) else ""
        return any(keyword.lower() in haystack for keyword in predicate.keywords)

    if isinstance(predicate, FieldExists):
        present = _is_present(field_value(predicate.field, candidate))
        return present == predicate.should_exist

    return False
