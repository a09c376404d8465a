"""Body composition reference tables.

Tables are kept as header + comma-separated text. Parsing skips any row it
cannot read (logging the skip) so one garbled line never empties a table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import structlog

from ...schemas import Sex

logger = structlog.get_logger(__name__)

EMBEDDED_HEIGHT_WEIGHT = """\
heightIn,minWeight,male17_20,male21_27,male28_39,male40plus,female17_20,female21_27,female28_39,female40plus
60,97,132,136,139,141,128,129,131,133
61,100,136,140,144,146,132,134,135,137
62,104,141,144,148,150,136,138,140,142
63,107,145,149,153,155,141,143,144,146
64,110,150,154,158,160,145,147,149,151
65,114,155,159,163,165,150,152,154,156
66,117,160,163,168,170,155,156,158,161
67,121,165,169,174,176,159,161,163,166
68,125,170,174,179,181,164,166,168,171
69,128,175,179,184,186,169,171,173,176
70,132,180,185,189,192,174,176,178,181
"""

EMBEDDED_BODY_FAT_LIMITS = """\
minAge,maxAge,maleMaxPct,femaleMaxPct
17,20,20,30
21,27,22,32
28,39,24,34
40,150,26,36
"""

EMBEDDED_CIRCUMFERENCE_MALE = """\
waistIn,w120,w125,w130,w135
28,7,8,9,10
29,8,9,10,11
30,9,10,11,12
"""

EMBEDDED_CIRCUMFERENCE_FEMALE = """\
waistIn,w120,w125,w130,w135
28,15,16,17,18
29,16,17,18,19
30,17,18,19,20
"""

TABLE_FILES = {
    "height_weight": "height_weight.csv",
    "body_fat_limits": "body_fat_limits.csv",
    "circumference_male": "circumference_male.csv",
    "circumference_female": "circumference_female.csv",
}

_BAND_COLUMN = re.compile(r"^(male|female)(\d+)(?:_(\d+)|plus)$")


@dataclass(frozen=True, slots=True)
class AgeBand:
    """Inclusive age range; ``maximum`` of ``None`` means open-ended."""

    minimum: int
    maximum: int | None = None

    def contains(self, age: int) -> bool:
        if age < self.minimum:
            return False
        return self.maximum is None or age <= self.maximum


@dataclass(frozen=True, slots=True)
class WeightLimit:
    sex: Sex
    band: AgeBand
    max_weight: int


@dataclass(frozen=True, slots=True)
class HeightWeightRow:
    height_in: int
    min_weight: int
    limits: tuple[WeightLimit, ...]


@dataclass(frozen=True, slots=True)
class BodyFatStandard:
    band: AgeBand
    male_max_pct: int
    female_max_pct: int

    def max_pct(self, sex: Sex) -> int:
        return self.male_max_pct if sex == Sex.MALE else self.female_max_pct


@dataclass(frozen=True, slots=True)
class CircumferenceRow:
    """Body fat percentages for one waist measurement, by weight bucket.

    ``buckets`` keeps the table's column order as ``(weight_lb, percent)`` pairs.
    """

    waist_in: int
    buckets: tuple[tuple[int, int], ...]


@dataclass(frozen=True, slots=True)
class BodyCompositionTables:
    height_weight: tuple[HeightWeightRow, ...]
    body_fat_limits: tuple[BodyFatStandard, ...]
    male_chart: tuple[CircumferenceRow, ...]
    female_chart: tuple[CircumferenceRow, ...]

    @classmethod
    def from_text(
        cls,
        *,
        height_weight: str = EMBEDDED_HEIGHT_WEIGHT,
        body_fat_limits: str = EMBEDDED_BODY_FAT_LIMITS,
        circumference_male: str = EMBEDDED_CIRCUMFERENCE_MALE,
        circumference_female: str = EMBEDDED_CIRCUMFERENCE_FEMALE,
    ) -> "BodyCompositionTables":
        return cls(
            height_weight=tuple(parse_height_weight(height_weight)),
            body_fat_limits=tuple(parse_body_fat_limits(body_fat_limits)),
            male_chart=tuple(parse_circumference_chart(circumference_male)),
            female_chart=tuple(parse_circumference_chart(circumference_female)),
        )

    def chart(self, sex: Sex) -> tuple[CircumferenceRow, ...]:
        return self.male_chart if sex == Sex.MALE else self.female_chart


def _split_lines(text: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return [], []
    header = [cell.strip() for cell in lines[0].split(",")]
    rows = [
        (idx, [cell.strip() for cell in line.split(",")])
        for idx, line in enumerate(lines[1:], start=2)
    ]
    return header, rows


def _ints(cells: list[str]) -> list[int] | None:
    try:
        return [int(cell) for cell in cells]
    except ValueError:
        return None


def _skip(table: str, line: int, reason: str) -> None:
    logger.warning("tables.row_skipped", table=table, line=line, reason=reason)


def _band_columns(header: list[str]) -> list[tuple[int, Sex, AgeBand]]:
    columns: list[tuple[int, Sex, AgeBand]] = []
    for idx, name in enumerate(header):
        match = _BAND_COLUMN.match(name)
        if not match:
            continue
        sex_name, low, high = match.groups()
        band = AgeBand(int(low), int(high) if high is not None else None)
        columns.append((idx, Sex(sex_name), band))
    return columns


def parse_height_weight(text: str) -> list[HeightWeightRow]:
    """Parse the height/weight screening table.

    Age bands come from the column names (``male17_20``, ``female40plus``);
    band order in the header is the lookup order.
    """
    header, rows = _split_lines(text)
    columns = _band_columns(header)
    width = max([2] + [idx + 1 for idx, _, _ in columns])
    parsed: list[HeightWeightRow] = []
    for line, cells in rows:
        if len(cells) < width:
            _skip("height_weight", line, "too_few_cells")
            continue
        values = _ints(cells[:width])
        if values is None:
            _skip("height_weight", line, "non_integer_cell")
            continue
        limits = tuple(
            WeightLimit(sex=sex, band=band, max_weight=values[idx])
            for idx, sex, band in columns
        )
        parsed.append(HeightWeightRow(height_in=values[0], min_weight=values[1], limits=limits))
    return parsed


def parse_body_fat_limits(text: str) -> list[BodyFatStandard]:
    _, rows = _split_lines(text)
    parsed: list[BodyFatStandard] = []
    for line, cells in rows:
        if len(cells) < 4:
            _skip("body_fat_limits", line, "too_few_cells")
            continue
        values = _ints(cells[:4])
        if values is None:
            _skip("body_fat_limits", line, "non_integer_cell")
            continue
        min_age, max_age, male_pct, female_pct = values
        parsed.append(
            BodyFatStandard(
                band=AgeBand(min_age, max_age),
                male_max_pct=male_pct,
                female_max_pct=female_pct,
            )
        )
    return parsed


def parse_circumference_chart(text: str) -> list[CircumferenceRow]:
    """Parse a one-site circumference chart (``waistIn,w120,w125,...``).

    Columns whose name is not ``w<weight>`` are ignored. Short rows keep the
    buckets they have.
    """
    header, rows = _split_lines(text)
    bucket_columns: list[tuple[int, int]] = []
    for idx, name in enumerate(header[1:], start=1):
        if name[:1].lower() == "w" and name[1:].isdigit():
            bucket_columns.append((idx, int(name[1:])))

    parsed: list[CircumferenceRow] = []
    for line, cells in rows:
        present = [(idx, weight) for idx, weight in bucket_columns if idx < len(cells)]
        values = _ints([cells[0]] + [cells[idx] for idx, _ in present])
        if values is None:
            _skip("circumference", line, "non_integer_cell")
            continue
        buckets = tuple((weight, value) for (_, weight), value in zip(present, values[1:]))
        parsed.append(CircumferenceRow(waist_in=values[0], buckets=buckets))
    return parsed


@lru_cache(maxsize=None)
def load_default_tables() -> BodyCompositionTables:
    """Embedded tables, built once per process."""
    return BodyCompositionTables.from_text()


def load_tables(tables_dir: str | Path | None = None) -> BodyCompositionTables:
    """Load tables from ``tables_dir``, using embedded text for missing or unreadable files."""
    if tables_dir is None:
        return load_default_tables()

    base = Path(tables_dir)
    sources: dict[str, str] = {}
    for key, filename in TABLE_FILES.items():
        path = base / filename
        if not path.is_file():
            continue
        try:
            # undecodable bytes become U+FFFD so the row parser skips them
            sources[key] = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("tables.load_failed", table=key, path=str(path), error=str(exc))
            continue
        logger.info("tables.loaded", table=key, path=str(path))
    return BodyCompositionTables.from_text(**sources)
