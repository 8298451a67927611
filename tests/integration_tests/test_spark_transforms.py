# tests/integration_tests/test_spark_transforms.py

import io
import zipfile
from decimal import Decimal

from pyspark.sql import Row

from tournament_results.gg_summary_parser import parse_tournament_summary_text
from tournament_results.spark_transforms import (
    entry_fee_summary,
    overall_summary,
    records_from_archives,
    records_from_text,
)
from tournament_results.stats import categorize, summarize

EXPORT = """Tournament #100, Sunday Major, Hold'em No Limit
Buy-in: $10.00 + $1.00
50 Players
----
Tournament #101, Daily Hyper, Hold'em No Limit
Buy-in: $5
18 Players
Tournament started 2026/01/15 00:22:55
1st : Hero, $45
You received a total of $45.
----
Not a tournament
----
Tournament #102, Sunday Major, Hold'em No Limit
Buy-in: $10+$1
120 Players
You made 2 re-entries.
7th : Hero, $150
You received a total of $150.00.
"""


def make_zip(members):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, text in members:
            archive.writestr(name, text)
    return buffer.getvalue()


def test_records_from_text(spark):
    """
    Parsing a bronze DataFrame of whole-text exports gives one row per
    tournament, skipped blocks left out, money as decimal(10,2).
    """
    df_bronze = spark.createDataFrame(
        [Row(raw_content=EXPORT, file_name="GG20260115.txt"), Row(raw_content="", file_name="empty.txt")]
    )

    rows = records_from_text(df_bronze).orderBy("tournament_id").collect()

    assert [r.tournament_id for r in rows] == ["100", "101", "102"]
    assert rows[0].entry_fee == Decimal("11.00")
    assert rows[2].total_entry_cost == Decimal("33.00")
    assert rows[2].payout == Decimal("150.00")
    assert rows[1].started_at.year == 2026
    assert rows[0].prize_pool is None
    assert {r.source_file for r in rows} == {"GG20260115.txt"}


def test_records_from_archives(spark):
    """Zip archives are read member by member; unreadable archives add no rows"""
    df_bronze = spark.createDataFrame([
        Row(path="dbfs:/Volumes/poker/bronze/export.zip", content=bytearray(make_zip([("a.txt", EXPORT)]))),
        Row(path="dbfs:/Volumes/poker/bronze/broken.zip", content=bytearray(b"not a zip")),
    ])

    rows = records_from_archives(df_bronze).collect()

    assert len(rows) == 3
    assert {r.source_file for r in rows} == {"export.zip/a.txt"}


def test_entry_fee_summary_matches_categorize(spark):
    """Gold per-fee totals agree with the in-memory categorizer"""
    df_records = records_from_text(spark.createDataFrame([Row(raw_content=EXPORT)]))

    actual = {r.entry_fee_key: r for r in entry_fee_summary(df_records).collect()}
    expected = categorize(parse_tournament_summary_text(EXPORT))

    assert list(actual) == ["$5.00", "$11.00"]
    for key, bucket in expected.items():
        assert actual[key]["count"] == bucket.count
        assert actual[key].total_entry_cost == bucket.total_entry_cost
        assert actual[key].total_payout == bucket.total_payout
        assert actual[key].net_profit == bucket.net_profit


def test_overall_summary_matches_summarize(spark):
    df_records = records_from_text(spark.createDataFrame([Row(raw_content=EXPORT)]))

    row = overall_summary(df_records).collect()[0]
    expected = summarize(parse_tournament_summary_text(EXPORT))

    assert row.total_records == expected.total_records
    assert row.total_payout == expected.total_payout
    assert row.total_entry_cost == expected.total_entry_cost
    assert row.net_profit == expected.net_profit
    assert row.count_with_payout == expected.count_with_payout
    assert abs(row.win_rate - expected.win_rate) < 1e-9


def test_overall_summary_of_nothing(spark):
    df_records = records_from_text(spark.createDataFrame([Row(raw_content="no tournaments here")]))

    row = overall_summary(df_records).collect()[0]

    assert row.total_records == 0
    assert row.total_payout == Decimal("0.00")
    assert row.count_with_payout == 0
    assert row.win_rate == 0.0
