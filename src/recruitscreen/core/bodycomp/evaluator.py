"""Two-tier body composition classification."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from ...schemas import Candidate, Sex
from .tables import BodyCompositionTables, CircumferenceRow, load_default_tables


class BodyCompStatus(str, Enum):
    PASS_NO_TAPE = "pass_no_tape"
    NEEDS_TAPE = "needs_tape"
    PASS_ON_SITE = "pass_on_site"
    FAIL_ON_SITE = "fail_on_site"


@dataclass(frozen=True, slots=True)
class BodyCompResult:
    status: BodyCompStatus
    screening_limit: int | None = None
    measured_body_fat_percent: int | None = None
    max_body_fat_percent: int | None = None


def _finite(value: float | None) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class BodyCompositionEvaluator:
    """Classify body composition compliance from height, weight and waist.

    Tier 1 screens weight against the height/weight table. When that does not
    clear the candidate, tier 2 estimates body fat from the waist measurement
    and compares it with the age-banded ceiling. Missing or unusable inputs
    always degrade to ``NEEDS_TAPE``.
    """

    def __init__(self, *, tables: BodyCompositionTables | None = None) -> None:
        self._tables = tables or load_default_tables()

    @property
    def tables(self) -> BodyCompositionTables:
        return self._tables

    def evaluate(
        self,
        height_in: float | None,
        weight_lb: float | None,
        waist_in: float | None,
        sex: Sex,
        age: int | None,
    ) -> BodyCompResult:
        height = _finite(height_in)
        weight = _finite(weight_lb)
        if height is None or weight is None:
            return BodyCompResult(status=BodyCompStatus.NEEDS_TAPE)

        body_weight = math.floor(weight)
        screen = self.allowed_weight(_round_half_up(height), sex, age)
        if screen is not None and body_weight <= screen:
            return BodyCompResult(status=BodyCompStatus.PASS_NO_TAPE, screening_limit=screen)

        waist = _finite(waist_in)
        if waist is None:
            return BodyCompResult(status=BodyCompStatus.NEEDS_TAPE, screening_limit=screen)

        measured = self.one_site_percent(sex, _round_half_up(waist), body_weight)
        ceiling = self.max_body_fat_percent(sex, age)
        if measured is None or ceiling is None:
            return BodyCompResult(status=BodyCompStatus.NEEDS_TAPE, screening_limit=screen)

        status = BodyCompStatus.PASS_ON_SITE if measured <= ceiling else BodyCompStatus.FAIL_ON_SITE
        return BodyCompResult(
            status=status,
            screening_limit=screen,
            measured_body_fat_percent=measured,
            max_body_fat_percent=ceiling,
        )

    def evaluate_candidate(
        self,
        candidate: Candidate,
        *,
        sex: Sex | None = None,
        age: int | None = None,
    ) -> BodyCompResult:
        return self.evaluate(
            candidate.height_in_inches,
            candidate.weight_in_pounds,
            candidate.waist_in_inches,
            sex or candidate.sex,
            age if age is not None else candidate.age,
        )

    def allowed_weight(self, height_in: int, sex: Sex, age: int | None) -> int | None:
        """Screening weight limit, or ``None`` when height or age band is unmatched."""
        if age is None:
            return None
        row = next((r for r in self._tables.height_weight if r.height_in == height_in), None)
        if row is None:
            return None
        for limit in row.limits:
            if limit.sex == sex and limit.band.contains(age):
                return limit.max_weight
        return None

    def max_body_fat_percent(self, sex: Sex, age: int | None) -> int | None:
        if age is None:
            return None
        for standard in self._tables.body_fat_limits:
            if standard.band.contains(age):
                return standard.max_pct(sex)
        return None

    def one_site_percent(self, sex: Sex, waist_in: int, weight_lb: int) -> int | None:
        """Estimated body fat from the nearest waist row and weight bucket.

        Weight is stepped down to a multiple of 5 lb. Ties on either the waist
        row or the bucket column go to the first one in table order.
        """
        row = _nearest_row(self._tables.chart(sex), waist_in)
        if row is None or not row.buckets:
            return None
        stepped = (weight_lb // 5) * 5
        for bucket, percent in row.buckets:
            if bucket == stepped:
                return percent
        _, percent = min(row.buckets, key=lambda pair: abs(pair[0] - stepped))
        return percent


def _nearest_row(chart: tuple[CircumferenceRow, ...], waist_in: int) -> CircumferenceRow | None:
    if not chart:
        return None
    return min(chart, key=lambda row: abs(row.waist_in - waist_in))
