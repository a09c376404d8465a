"""Pydantic schema definitions for candidates, rules and configuration."""

from __future__ import annotations

from .candidate import (
    Candidate,
    LegalDisqualifier,
    MedicalFlag,
    Sex,
    Stage,
)
from .rules import (
    AndPredicate,
    BoolEquals,
    EligibilityHeadline,
    FieldExists,
    NotPredicate,
    NumberCompare,
    OrPredicate,
    Predicate,
    Rule,
    StringContainsAny,
    dump_predicate,
    parse_predicate,
)

__all__ = [
    "Candidate",
    "Sex",
    "Stage",
    "MedicalFlag",
    "LegalDisqualifier",
    "EligibilityHeadline",
    "Predicate",
    "AndPredicate",
    "OrPredicate",
    "NotPredicate",
    "NumberCompare",
    "BoolEquals",
    "StringContainsAny",
    "FieldExists",
    "Rule",
    "parse_predicate",
    "dump_predicate",
]
