# Databricks notebook source
# MAGIC %md
# MAGIC # Transform Tournament Archives to Silver and Gold
# MAGIC Parse zipped tournament summaries from bronze, write one row per tournament,
# MAGIC then aggregate results per entry fee.
# MAGIC
# MAGIC **Source:** `poker.bronze.tournament_archives`
# MAGIC **Targets:** `poker.silver.tournament_results`, `poker.gold.tournament_results_by_entry_fee`

# COMMAND ----------

import sys
import os

# Add src folder to path for package imports
# Works both in Repos and Workspace Files
notebook_path = os.getcwd()
src_path = os.path.dirname(os.path.dirname(notebook_path))  # Go up from notebooks/silver to src
if src_path not in sys.path:
    sys.path.insert(0, src_path)

# COMMAND ----------

from pyspark.sql.functions import col, current_timestamp
from tournament_results.spark_transforms import (
    entry_fee_summary,
    overall_summary,
    records_from_archives,
)

# COMMAND ----------

# Configuration
SOURCE_TABLE = "poker.bronze.tournament_archives"
SILVER_TABLE = "poker.silver.tournament_results"
GOLD_TABLE = "poker.gold.tournament_results_by_entry_fee"

# COMMAND ----------

# MAGIC %md
# MAGIC ## Read from bronze and parse

# COMMAND ----------

# Full refresh - small table, always recalculate
df_bronze = spark.read.table(SOURCE_TABLE)

df_silver = (
    records_from_archives(df_bronze)
    .withColumn("ingested_at", current_timestamp())
)

df_silver.display()

# COMMAND ----------

# MAGIC %md
# MAGIC ## Write to silver (full overwrite)

# COMMAND ----------

df_silver.write \
    .format("delta") \
    .mode("overwrite") \
    .option("overwriteSchema", "true") \
    .saveAsTable(SILVER_TABLE)

print(f"✅ Refreshed {SILVER_TABLE}")

# COMMAND ----------

# MAGIC %md
# MAGIC ## Aggregate to gold

# COMMAND ----------

df_results = spark.read.table(SILVER_TABLE)

overall_summary(df_results).display()

df_gold = entry_fee_summary(df_results)

df_gold.write \
    .format("delta") \
    .mode("overwrite") \
    .option("overwriteSchema", "true") \
    .saveAsTable(GOLD_TABLE)

print(f"✅ Refreshed {GOLD_TABLE}")

# COMMAND ----------

spark.table(GOLD_TABLE).orderBy(col("entry_fee")).display()
