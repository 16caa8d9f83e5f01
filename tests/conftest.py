"""
Pytest fixtures for stratamatch testing.
"""

import os

import pytest
from pyspark.sql import SparkSession


@pytest.fixture(scope="session")
def spark():
    """Create a SparkSession for testing."""
    os.environ["SPARK_LOCAL_IP"] = "127.0.0.1"

    session = (
        SparkSession.builder.master("local[2]")
        .appName("stratamatch-test")
        .config("spark.sql.shuffle.partitions", "4")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")
        .config("spark.sql.execution.arrow.pyspark.enabled", "false")
        .config("spark.driver.extraJavaOptions", "-Djava.security.manager=allow")
        .config("spark.executor.extraJavaOptions", "-Djava.security.manager=allow")
        .getOrCreate()
    )
    yield session
    session.stop()


@pytest.fixture(scope="session")
def two_level_df(spark):
    """
    75 rows, one covariate with levels A and B.

    A: 40 rows, 10 treated and 30 control.
    B: 35 rows, 20 treated and 15 control.
    """
    rows = (
        [(1, "A", i) for i in range(10)]
        + [(0, "A", i) for i in range(10, 40)]
        + [(1, "B", i) for i in range(40, 60)]
        + [(0, "B", i) for i in range(60, 75)]
    )
    return spark.createDataFrame(rows, "treat int, B1 string, id int")


@pytest.fixture(scope="session")
def two_covariate_df(spark):
    """Rows stratified by two covariates, with combinations repeated out of order."""
    rows = [
        (0, "y", 2, 0),
        (1, "x", 1, 1),
        (0, "y", 2, 2),
        (1, "x", 2, 3),
        (0, "x", 1, 4),
        (1, "y", 1, 5),
        (1, "y", 2, 6),
        (0, "x", 2, 7),
    ]
    return spark.createDataFrame(rows, "treat int, B1 string, B2 int, id int")
