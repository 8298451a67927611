# Databricks notebook source
# MAGIC %md
# MAGIC # Load Tournament Archives to Bronze
# MAGIC Load zipped tournament summary exports using Auto Loader.
# MAGIC
# MAGIC **Source:** `/Volumes/poker/bronze/bronze/gg_tournament_archives/`
# MAGIC **Target:** `poker.bronze.tournament_archives`

# COMMAND ----------

from pyspark.sql.functions import col, current_timestamp, regexp_extract

# COMMAND ----------

# Configuration
SOURCE_PATH = "/Volumes/poker/bronze/bronze/gg_tournament_archives/"
TARGET_TABLE = "poker.bronze.tournament_archives"
CHECKPOINT_PATH = "/Volumes/poker/bronze/bronze/_checkpoints/tournament_archives"

# COMMAND ----------

# MAGIC %md
# MAGIC ## Preview source files (for debugging)

# COMMAND ----------

dbutils.fs.ls(SOURCE_PATH)

# COMMAND ----------

df_sample = (
    spark.read
    .format("binaryFile")
    .option("pathGlobFilter", "*.zip")
    .load(SOURCE_PATH)
    .limit(5)
)

df_sample.select("path", "length", "modificationTime").display()

# COMMAND ----------

# MAGIC %md
# MAGIC ## Define streaming ingestion

# COMMAND ----------

def load_tournament_archives():
    """
    Stream zip archives from volume to bronze table.
    Each row keeps the raw archive bytes; parsing happens in silver.
    """
    df = (
        spark.readStream
        .format("cloudFiles")
        .option("cloudFiles.format", "binaryFile")
        .option("cloudFiles.includeExistingFiles", "true")
        .option("pathGlobFilter", "*.zip")
        .load(SOURCE_PATH)
        .select(
            col("content"),
            col("path"),
            col("length"),
            current_timestamp().alias("ingested_at")
        )
        .withColumn(
            "file_name",
            regexp_extract(col("path"), r"[^/]+$", 0)
        )
        .select("content", "file_name", "path", "length", "ingested_at")
    )

    return df

# COMMAND ----------

# MAGIC %md
# MAGIC ## Run the stream

# COMMAND ----------

df_stream = load_tournament_archives()

query = (
    df_stream.writeStream
    .format("delta")
    .outputMode("append")
    .option("checkpointLocation", CHECKPOINT_PATH)
    .trigger(availableNow=True)
    .toTable(TARGET_TABLE)
)

query.awaitTermination()

# COMMAND ----------

# MAGIC %md
# MAGIC ## Verify results

# COMMAND ----------

count = spark.table(TARGET_TABLE).count()
print(f"Total archives in {TARGET_TABLE}: {count}")

# COMMAND ----------

spark.table(TARGET_TABLE).select("file_name", "length", "ingested_at").orderBy(col("ingested_at").desc()).limit(10).display()
