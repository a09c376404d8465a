from __future__ import annotations

from pathlib import Path

from recruitscreen.core.bodycomp import load_default_tables, load_tables
from recruitscreen.core.bodycomp.tables import (
    AgeBand,
    parse_body_fat_limits,
    parse_circumference_chart,
    parse_height_weight,
)
from recruitscreen.schemas import Sex


def test_embedded_tables_load_once():
    first = load_default_tables()
    second = load_default_tables()

    assert first is second
    assert len(first.height_weight) == 11
    assert len(first.body_fat_limits) == 4
    assert [row.waist_in for row in first.male_chart] == [28, 29, 30]


def test_height_weight_bands_come_from_header():
    rows = parse_height_weight(
        "heightIn,minWeight,male17_20,male40plus,female17_20\n64,110,150,160,145\n"
    )

    limits = rows[0].limits
    assert [(limit.sex, limit.band) for limit in limits] == [
        (Sex.MALE, AgeBand(17, 20)),
        (Sex.MALE, AgeBand(40, None)),
        (Sex.FEMALE, AgeBand(17, 20)),
    ]
    assert AgeBand(40, None).contains(120)
    assert not AgeBand(17, 20).contains(21)


def test_height_weight_skips_malformed_rows():
    text = (
        "heightIn,minWeight,male17_20,female17_20\n"
        "60,97,132,128\n"
        "61,100,abc,132\n"
        "62,104\n"
        "\n"
        "63,107,145,141\n"
    )

    rows = parse_height_weight(text)

    assert [row.height_in for row in rows] == [60, 63]


def test_body_fat_limits_skip_malformed_rows():
    rows = parse_body_fat_limits("minAge,maxAge,maleMaxPct,femaleMaxPct\n17,20,20,30\n21,x,22,32\n28,39\n")

    assert len(rows) == 1
    assert rows[0].max_pct(Sex.FEMALE) == 30


def test_circumference_chart_keeps_bucket_order_and_short_rows():
    rows = parse_circumference_chart("waistIn,w130,w120,note\n28,9,7\n29,10\nbad,1,2\n")

    assert [row.waist_in for row in rows] == [28, 29]
    assert rows[0].buckets == ((130, 9), (120, 7))
    assert rows[1].buckets == ((130, 10),)


def test_load_tables_reads_overrides_and_falls_back(tmp_path: Path):
    (tmp_path / "circumference_male.csv").write_text("waistIn,w200\n40,31\n", encoding="utf-8")

    tables = load_tables(tmp_path)

    assert [row.waist_in for row in tables.male_chart] == [40]
    assert tables.height_weight == load_default_tables().height_weight


def test_load_tables_without_directory_uses_embedded():
    assert load_tables(None) is load_default_tables()


def test_circumference_chart_ignores_non_bucket_cells():
    rows = parse_circumference_chart("waistIn,w120,note\n28,7,tall\n29,x,short\n")

    assert [row.waist_in for row in rows] == [28]
    assert rows[0].buckets == ((120, 7),)


def test_load_tables_skips_undecodable_rows(tmp_path: Path):
    (tmp_path / "circumference_male.csv").write_bytes(b"waistIn,w120\n28,7\n\xff,1\n")

    tables = load_tables(tmp_path)

    assert [row.waist_in for row in tables.male_chart] == [28]
    assert tables.male_chart[0].buckets == ((120, 7),)
