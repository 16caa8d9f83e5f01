"""
Input checks for manual stratification.

Everything here runs before any grouping work, so a bad call fails fast and
leaves nothing behind.
"""

from typing import List, Optional

from pyspark.sql import DataFrame

from .errors import ContinuityError, SchemaError, SemanticError
from .formula import StrataFormula
from .utils import (
    _count_distinct,
    _distinct_values,
    _is_bool,
    _is_boolean_column,
    _is_numeric_column,
    _missing_columns,
)
from .warnings_util import warn

# Numeric covariates with more distinct values than
# min(MAX_DISTINCT_VALUES, MAX_DISTINCT_FRACTION * n) look continuous.
MAX_DISTINCT_VALUES = 15
MAX_DISTINCT_FRACTION = 0.3

# Column manual_stratify writes stratum ids to
RESERVED_COLUMN = "stratum"


def continuity_threshold(n: int) -> float:
    """Largest number of distinct values a numeric covariate may have."""
    return min(MAX_DISTINCT_VALUES, MAX_DISTINCT_FRACTION * n)


def is_binary(df: DataFrame, name: str) -> bool:
    """
    Check that a column is a binary treatment indicator.

    The column must hold exactly two distinct values: 0 and 1 for numeric
    columns, False and True for boolean columns. Nulls are not allowed.
    """
    if _is_boolean_column(df, name):
        return set(_distinct_values(df, name)) == {False, True}
    if _is_numeric_column(df, name):
        values = _distinct_values(df, name)
        if any(v is None for v in values):
            return False
        return len(values) == 2 and set(values) == {0, 1}
    return False


def warn_if_continuous(
    df: DataFrame, name: str, force: bool, n: int
) -> Optional[str]:
    """
    Raise (or warn) if a covariate looks continuous.

    Only categorical or binary covariates should be used to stratify, but a
    discrete covariate with real-numbered values is hard to tell apart from a
    continuous one. Non-numeric columns are assumed discrete. Numeric columns
    fail when they have more than ``continuity_threshold(n)`` distinct values.

    Parameters
    ----------
    df : DataFrame
        Data being stratified
    name : str
        Covariate column to check
    force : bool
        If True, warn instead of raising
    n : int
        Number of rows in the data

    Returns
    -------
    Optional[str]
        The warning message if one was issued, otherwise None

    Raises
    ------
    ContinuityError
        If the column looks continuous and force is False
    """
    if not _is_numeric_column(df, name):
        return None

    values = _count_distinct(df, name)
    if values <= continuity_threshold(n):
        return None

    message = f"There are {values} distinct values for {name}. Is it continuous?"
    if not force:
        raise ContinuityError(message)
    return warn(message, stacklevel=4)


def check_inputs_manual_stratify(
    data: DataFrame, strata_formula: StrataFormula, force: bool
) -> List[str]:
    """
    Check the inputs to manual_stratify.

    Parameters
    ----------
    data : DataFrame
        Spark DataFrame to stratify
    strata_formula : StrataFormula
        Parsed stratification formula
    force : bool
        If True, continuous-looking covariates produce warnings, not errors

    Returns
    -------
    List[str]
        Messages of the non-fatal warnings issued while checking

    Raises
    ------
    TypeError
        If an argument has the wrong type
    SchemaError
        If a formula variable is not a column of data
    SemanticError
        If the treatment column is not binary
    ContinuityError
        If a covariate looks continuous and force is False
    """
    if not isinstance(data, DataFrame):
        raise TypeError("data must be a DataFrame")
    if not isinstance(strata_formula, StrataFormula):
        raise TypeError("strata_formula must be a formula")
    if not _is_bool(force):
        raise TypeError("force must equal either True or False")

    missing = _missing_columns(data, list(strata_formula.variables))
    if missing:
        raise SchemaError(
            f"Not all variables in strata_formula appear in data; missing: {missing}"
        )
    if RESERVED_COLUMN in strata_formula.variables:
        raise SchemaError(
            f"'{RESERVED_COLUMN}' is reserved for stratum ids and cannot be "
            "used in strata_formula"
        )

    if not is_binary(data, strata_formula.treat):
        raise SemanticError("treatment column must be binary or logical")

    n = data.count()
    messages = []
    for covariate in strata_formula.covariates:
        message = warn_if_continuous(data, covariate, force, n)
        if message is not None:
            messages.append(message)
    return messages
