"""
Manual stratification for stratamatch.

This module splits a data set into strata by exact combinations of
categorical covariates, so that matching can be run on each stratum
independently.
"""

from typing import Any, Sequence

import pandas as pd
import pyspark.sql.functions as F
from pyspark.sql import DataFrame
from pyspark.sql.window import Window

from .formula import FormulaLike, as_formula
from .strata import ManualStrata, new_manual_strata
from .summary import make_issue_table, print_issue_table
from .utils import _col, _to_spark
from .validation import check_inputs_manual_stratify

STRATUM_COL = "stratum"

# Helper columns, dropped before results are returned
_ROW_ID = "__stratamatch_row_id"
_FIRST_SEEN = "__stratamatch_first_seen"


def assign_strata(df: DataFrame, covariates: Sequence[str]) -> DataFrame:
    """
    Label every row with the id of its covariate combination.

    Ids are consecutive integers starting at 1, given to combinations in the
    order they first appear in the input rows. Nulls are grouped like any
    other value.

    Parameters
    ----------
    df : DataFrame
        Validated input data
    covariates : Sequence[str]
        Columns whose exact value combination defines a stratum

    Returns
    -------
    DataFrame
        Input columns plus an integer "stratum" column, in input row order.
        Any existing "stratum" column is replaced.
    """
    if STRATUM_COL in df.columns:
        df = df.drop(STRATUM_COL)

    indexed = df.withColumn(_ROW_ID, F.monotonically_increasing_id())

    # Each row learns where its combination first appeared
    by_combination = Window.partitionBy(*[_col(c) for c in covariates])
    first_seen = indexed.withColumn(
        _FIRST_SEEN, F.min(_ROW_ID).over(by_combination)
    )

    # Number combinations 1..K in order of first appearance
    stratum_ids = (
        first_seen.select(_FIRST_SEEN)
        .distinct()
        .withColumn(
            STRATUM_COL,
            F.row_number().over(Window.orderBy(_FIRST_SEEN)).cast("int"),
        )
    )

    analysis_set = (
        first_seen.join(F.broadcast(stratum_ids), on=_FIRST_SEEN, how="inner")
        .orderBy(_ROW_ID)
        .drop(_ROW_ID, _FIRST_SEEN)
    )

    return _materialize(analysis_set)


def _materialize(df: DataFrame) -> DataFrame:
    """
    Compute df once and cut its lineage.

    Row ids are regenerated on every action unless the result is
    materialized. A reliable checkpoint is written when the SparkContext has
    a checkpoint directory; otherwise a local checkpoint is used, which is
    held by the executors and is lost if an executor goes away.
    """
    if df.sparkSession.sparkContext.getCheckpointDir() is not None:
        return df.checkpoint(eager=True)
    return df.localCheckpoint(eager=True)


def make_strata_table(analysis_set: DataFrame, covariates: Sequence[str]) -> pd.DataFrame:
    """
    Summarize each stratum's covariate values and size.

    Returns
    -------
    pd.DataFrame
        One row per stratum, ordered by stratum id, with the covariate
        columns followed by "stratum" and "size"
    """
    return (
        analysis_set.groupBy(*[_col(c) for c in covariates], STRATUM_COL)
        .agg(F.count(F.lit(1)).alias("size"))
        .orderBy(STRATUM_COL)
        .toPandas()
    )


def manual_stratify(
    data: Any,
    strata_formula: FormulaLike,
    force: bool = False,
    verbose: bool = False,
) -> ManualStrata:
    """
    Stratify a data set on a set of categorical covariates.

    Rows are grouped by their exact combination of covariate values; each
    group is a stratum that can be matched on its own.

    Parameters
    ----------
    data : DataFrame
        Spark DataFrame (or pandas DataFrame, converted with the active
        SparkSession) with observations as rows
    strata_formula : str, StrataFormula, mapping or tuple
        Stratification formula, e.g. ``"treat ~ B1 + B2"``. The variable on
        the left is the binary treatment column, the variables on the right
        are the covariates to stratify on. Also accepted:
        ``{"treat": "treat", "covariates": ["B1", "B2"]}`` or
        ``("treat", ["B1", "B2"])``.
    force : bool
        If True, run even if a covariate appears continuous, issuing a
        ContinuityWarning instead of raising ContinuityError (default: False)
    verbose : bool
        If True, print the number of strata and the issue table

    Returns
    -------
    ManualStrata
        Result with:
        - treat: name of the treatment column
        - covariates: names of the stratification covariates
        - analysis_set: data with an integer "stratum" column
        - call: record of the arguments used
        - issue_table: per-stratum counts and potential issues
        - strata_table: per-stratum covariate values and size
        - warnings: non-fatal warnings issued while checking inputs

    Raises
    ------
    TypeError
        If data is not a DataFrame, strata_formula is not a formula (a
        FormulaError), or force is not a boolean
    SchemaError
        If a formula variable is not a column of data
    SemanticError
        If the treatment column is not binary
    ContinuityError
        If a covariate appears continuous and force is False

    Example
    -------
    >>> m_strat = manual_stratify(df, "treat ~ B1 + B2")
    >>> m_strat.issue_table
    >>> first = m_strat.get_stratum(1)
    """
    data = _to_spark(data)
    formula = as_formula(strata_formula)
    messages = check_inputs_manual_stratify(data, formula, force)

    treat = formula.treat
    covariates = list(formula.covariates)

    analysis_set = assign_strata(data, covariates)
    strata_table = make_strata_table(analysis_set, covariates)
    issue_table = make_issue_table(analysis_set, treat)

    result = new_manual_strata(
        analysis_set=analysis_set,
        treat=treat,
        covariates=covariates,
        call={
            "function": "manual_stratify",
            "strata_formula": str(formula),
            "force": bool(force),
        },
        issue_table=issue_table,
        strata_table=strata_table,
        warnings=messages,
    )

    if verbose:
        _print_stratification_summary(result)

    return result


def _print_stratification_summary(result: ManualStrata) -> None:
    """Print stratification summary."""
    print(f"\nstratamatch: manual stratification on {result.call['strata_formula']}")
    print(f" - covariates: {', '.join(result.covariates)}")
    print(f" - number of strata: {result.n_strata}")
    print(f" - rows: {int(result.strata_table['size'].sum())}")
    print_issue_table(result.issue_table)
