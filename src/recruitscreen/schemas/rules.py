"""Eligibility rule and predicate schema.

Predicates serialise as a tagged union with a ``type`` discriminator, e.g.::

    {"type": "not", "items": {"type": "stringContains", "field": "legalIssues",
                              "values": ["felony", "parole"]}}
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

NumberOp = Literal["lt", "lte", "gt", "gte", "eq", "neq"]


class EligibilityHeadline(str, Enum):
    ELIGIBLE = "Eligible"
    NEEDS_DOCUMENTS = "Needs Documents"
    NEEDS_WAIVER = "Needs Waiver"
    INELIGIBLE = "Ineligible"

    @property
    def severity(self) -> int:
        return list(EligibilityHeadline).index(self)


class _PredicateModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AndPredicate(_PredicateModel):
    type: Literal["and"] = "and"
    items: list[Predicate] = Field(default_factory=list)


class OrPredicate(_PredicateModel):
    type: Literal["or"] = "or"
    items: list[Predicate] = Field(default_factory=list)


class NotPredicate(_PredicateModel):
    type: Literal["not"] = "not"
    item: Predicate = Field(alias="items")


class NumberCompare(_PredicateModel):
    type: Literal["number"] = "number"
    field: str
    op: NumberOp
    value: float


class BoolEquals(_PredicateModel):
    type: Literal["bool"] = "bool"
    field: str
    equals: bool


class StringContainsAny(_PredicateModel):
    type: Literal["stringContains"] = "stringContains"
    field: str
    keywords: list[str] = Field(default_factory=list, alias="values")


class FieldExists(_PredicateModel):
    type: Literal["exists"] = "exists"
    field: str
    should_exist: bool = Field(default=True, alias="shouldExist")


Predicate = Annotated[
    Union[
        AndPredicate,
        OrPredicate,
        NotPredicate,
        NumberCompare,
        BoolEquals,
        StringContainsAny,
        FieldExists,
    ],
    Field(discriminator="type"),
]

for _model in (AndPredicate, OrPredicate, NotPredicate):
    _model.model_rebuild()

_predicate_adapter: TypeAdapter[Any] = TypeAdapter(Predicate)


class Rule(BaseModel):
    """Named predicate plus the consequence of failing it."""

    name: str
    predicate: Predicate
    fail_headline: EligibilityHeadline = Field(alias="failHeadline")
    chip: str
    action: str | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_document(self) -> dict[str, Any]:
        """Return the configuration-document form of this rule."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_predicate(data: Any) -> Any:
    """Validate a configuration-document predicate into its model."""
    return _predicate_adapter.validate_python(data)


def dump_predicate(predicate: Any) -> dict[str, Any]:
    return _predicate_adapter.dump_python(predicate, mode="json", by_alias=True)
