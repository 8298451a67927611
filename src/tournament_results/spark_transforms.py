"""
Spark transforms for tournament summaries.

Bronze tables hold raw exports (whole-text files or binaryFile zip archives);
these functions parse them into one silver row per tournament and aggregate
silver rows into gold summaries. Parsing runs the same GGTournamentSummaryParser
inside a UDF, so skipped blocks behave exactly as outside Spark.
"""

import logging
from typing import Optional

from pyspark.sql import DataFrame
from pyspark.sql import functions as F
from pyspark.sql.functions import col, udf
from pyspark.sql.types import (
    ArrayType,
    DoubleType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)

from tournament_results.archive import ArchiveError, read_archive
from tournament_results.gg_summary_parser import GGTournamentSummaryParser, TournamentRecord

logger = logging.getLogger(__name__)

MONEY_TYPE = "decimal(10,2)"
TOTAL_MONEY_TYPE = "decimal(20,2)"

TOURNAMENT_RECORD_SCHEMA = StructType([
    StructField("tournament_id", StringType(), True),
    StructField("tournament_name", StringType(), True),
    StructField("game_type", StringType(), True),
    StructField("entry_fee", DoubleType(), True),
    StructField("re_entry_count", IntegerType(), True),
    StructField("total_entry_cost", DoubleType(), True),
    StructField("finish_position", IntegerType(), True),
    StructField("field_size", IntegerType(), True),
    StructField("finish_percentile", DoubleType(), True),
    StructField("payout", DoubleType(), True),
    StructField("prize_pool", DoubleType(), True),
    StructField("started_at", StringType(), True),
    StructField("member_name", StringType(), True),
])


def _record_row(record: TournamentRecord, member_name: Optional[str] = None) -> dict:
    row = record.to_dict()
    values = {f.name: row.get(f.name) for f in TOURNAMENT_RECORD_SCHEMA.fields}
    values["member_name"] = member_name
    return values


def parse_summary_text(raw_content: Optional[str], member_name: Optional[str] = None) -> list[dict]:
    """Parse one export into record rows"""
    if not raw_content:
        return []
    parser = GGTournamentSummaryParser(text=raw_content)
    return [_record_row(r, member_name) for r in parser.parse()]


def parse_summary_archive(content: Optional[bytes]) -> list[dict]:
    """Parse every export inside a zip archive into record rows"""
    if content is None:
        return []
    try:
        members = read_archive(bytes(content), "archive.zip")
    except ArchiveError as e:
        logger.warning(f"Skipping unreadable archive: {e.message}")
        return []

    rows = []
    for member in members:
        rows.extend(parse_summary_text(member.text, member.name))
    return rows


parse_summary_text_udf = udf(parse_summary_text, ArrayType(TOURNAMENT_RECORD_SCHEMA))
parse_summary_archive_udf = udf(parse_summary_archive, ArrayType(TOURNAMENT_RECORD_SCHEMA))


def _flatten_records(df: DataFrame) -> DataFrame:
    """Flatten the exploded `record` struct to typed silver columns"""
    return df.select(
        col("record.tournament_id").alias("tournament_id"),
        col("record.tournament_name").alias("tournament_name"),
        col("record.game_type").alias("game_type"),
        col("record.entry_fee").cast(MONEY_TYPE).alias("entry_fee"),
        col("record.re_entry_count").alias("re_entry_count"),
        col("record.total_entry_cost").cast(MONEY_TYPE).alias("total_entry_cost"),
        col("record.finish_position").alias("finish_position"),
        col("record.field_size").alias("field_size"),
        col("record.finish_percentile").alias("finish_percentile"),
        col("record.payout").cast(MONEY_TYPE).alias("payout"),
        col("record.prize_pool").cast(MONEY_TYPE).alias("prize_pool"),
        col("record.started_at").cast("timestamp").alias("started_at"),
        col("source_file"),
    )


def records_from_text(df: DataFrame, content_col: str = "raw_content") -> DataFrame:
    """One row per tournament from a DataFrame of whole-text exports"""
    if "file_name" in df.columns:
        source_file = col("file_name")
    else:
        source_file = F.lit(None).cast("string")

    df_exploded = df.select(
        F.explode(parse_summary_text_udf(col(content_col))).alias("record"),
        source_file.alias("source_file"),
    )
    return _flatten_records(df_exploded)


def records_from_archives(df: DataFrame, content_col: str = "content", path_col: str = "path") -> DataFrame:
    """One row per tournament from a binaryFile DataFrame of zip archives"""
    df_exploded = (
        df.select(
            F.explode(parse_summary_archive_udf(col(content_col))).alias("record"),
            F.regexp_extract(col(path_col), r"[^/]+$", 0).alias("archive_name"),
        )
        .withColumn("source_file", F.concat_ws("/", col("archive_name"), col("record.member_name")))
    )
    return _flatten_records(df_exploded)


def entry_fee_summary(df_records: DataFrame) -> DataFrame:
    """Per entry fee: tournament count, total entry cost, total payout, net profit.

    Rows are ordered by entry fee, not by first appearance as in
    stats.categorize(); match the two on entry_fee_key.
    """
    return (
        df_records
        .groupBy("entry_fee")
        .agg(
            F.count("*").alias("count"),
            F.sum("total_entry_cost").cast(TOTAL_MONEY_TYPE).alias("total_entry_cost"),
            F.sum("payout").cast(TOTAL_MONEY_TYPE).alias("total_payout"),
        )
        .withColumn("net_profit", (col("total_payout") - col("total_entry_cost")).cast(TOTAL_MONEY_TYPE))
        .withColumn("entry_fee_key", F.format_string("$%.2f", col("entry_fee")))
        .select("entry_fee_key", "entry_fee", "count", "total_entry_cost", "total_payout", "net_profit")
        .orderBy("entry_fee")
    )


def overall_summary(df_records: DataFrame) -> DataFrame:
    """Single row with the overall profit statistics"""
    zero = F.lit(0).cast(TOTAL_MONEY_TYPE)
    return (
        df_records
        .agg(
            F.count("*").alias("total_records"),
            F.coalesce(F.sum("payout").cast(TOTAL_MONEY_TYPE), zero).alias("total_payout"),
            F.coalesce(F.sum("total_entry_cost").cast(TOTAL_MONEY_TYPE), zero).alias("total_entry_cost"),
            F.coalesce(F.sum(F.when(col("payout") > 0, 1).otherwise(0)), F.lit(0)).alias("count_with_payout"),
        )
        .withColumn("net_profit", (col("total_payout") - col("total_entry_cost")).cast(TOTAL_MONEY_TYPE))
        .withColumn(
            "win_rate",
            F.when(col("total_records") > 0, col("count_with_payout") / col("total_records") * 100)
            .otherwise(F.lit(0.0)),
        )
    )
