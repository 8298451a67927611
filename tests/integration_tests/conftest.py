# tests/integration_tests/conftest.py
import pytest
from pyspark.sql import SparkSession

@pytest.fixture(scope="session")
def spark():
    # Outside Databricks there is no ambient session, so start a local one.
    spark = (
        SparkSession.builder
        .master("local[1]")
        .appName("tournament-results-integration-tests")
        .config("spark.sql.shuffle.partitions", "1")
        .getOrCreate()
    )
    yield spark
    spark.stop()
