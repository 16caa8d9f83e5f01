"""
Shared utility functions for stratamatch.

This module contains input conversion and column inspection helpers used by
the validator, the stratum assigner and the issue table.
"""

from typing import Any, List

import numpy as np
import pandas as pd
import pyspark.sql.functions as F
from pyspark.sql import Column, DataFrame, SparkSession
from pyspark.sql.types import BooleanType, NumericType


def _is_bool(value: Any) -> bool:
    """Check if value is a Python or numpy boolean."""
    return isinstance(value, (bool, np.bool_))


def _col(name: str) -> Column:
    """
    Reference a column by its exact name.

    Backtick quoting stops Spark from reading dots in names such as
    "age.group" as struct field access.
    """
    return F.col("`" + name.replace("`", "``") + "`")


def _categorical_columns(pdf: pd.DataFrame) -> List[str]:
    """Names of pandas columns with the category dtype."""
    return [
        name for name in pdf.columns
        if isinstance(pdf[name].dtype, pd.CategoricalDtype)
    ]


def _to_spark(data: Any) -> DataFrame:
    """
    Return data as a Spark DataFrame.

    pandas DataFrames are converted with the active SparkSession (one is
    created if none is running). The pandas index is discarded; row order is
    preserved. Categorical columns become string columns, so they stay
    non-numeric (discrete) on the Spark side.
    """
    if isinstance(data, DataFrame):
        return data
    if isinstance(data, pd.DataFrame):
        pdf = data.reset_index(drop=True)
        for name in _categorical_columns(pdf):
            pdf[name] = pdf[name].astype(object).map(
                lambda v: None if pd.isna(v) else str(v)
            )
        spark = SparkSession.builder.getOrCreate()
        return spark.createDataFrame(pdf)
    raise TypeError("data must be a DataFrame")


def _missing_columns(df: DataFrame, names: List[str]) -> List[str]:
    """Names not present among the DataFrame's columns, in the given order."""
    return [name for name in names if name not in df.columns]


def _is_numeric_column(df: DataFrame, name: str) -> bool:
    """Check if a column has a numeric Spark type (booleans are not numeric)."""
    return isinstance(df.schema[name].dataType, NumericType)


def _is_boolean_column(df: DataFrame, name: str) -> bool:
    """Check if a column has the Spark boolean type."""
    return isinstance(df.schema[name].dataType, BooleanType)


def _distinct_values(df: DataFrame, name: str) -> List[Any]:
    """Collect the distinct values of a column, including None for nulls."""
    return [row[0] for row in df.select(_col(name)).distinct().collect()]


def _count_distinct(df: DataFrame, name: str) -> int:
    """Count distinct values of a column, counting null as one value."""
    return df.select(_col(name)).distinct().count()
