"""
Stratum diagnostics for stratamatch.

This module builds the issue table: per-stratum treated and control counts,
flagged when a stratum is likely to match slowly or poorly.
"""

from typing import List

import numpy as np
import pandas as pd
import pyspark.sql.functions as F
from pyspark.sql import DataFrame

from .utils import _col

# Strata outside these bounds are flagged. Bounds are exclusive: a stratum of
# exactly SIZE_MIN rows or with exactly CONTROL_MAX controls is not flagged.
SIZE_MAX = 4000
SIZE_MIN = 75
CONTROL_MAX = 0.8
CONTROL_MIN = 0.2

NO_ISSUES = "none"

ISSUE_TABLE_COLUMNS = [
    "Stratum",
    "Treated",
    "Control",
    "Total",
    "Control_Proportion",
    "Potential_Issues",
]


def classify(total: int, control_proportion: float) -> List[str]:
    """
    List the potential issues of a stratum, in fixed order.

    Parameters
    ----------
    total : int
        Number of rows in the stratum
    control_proportion : float
        Fraction of the stratum's rows that are controls

    Returns
    -------
    List[str]
        Zero or more of "Too many samples", "Too few samples",
        "Not enough treated samples", "Not enough control samples"
    """
    issues = []
    if total > SIZE_MAX:
        issues.append("Too many samples")
    if total < SIZE_MIN:
        issues.append("Too few samples")
    if control_proportion > CONTROL_MAX:
        issues.append("Not enough treated samples")
    if control_proportion < CONTROL_MIN:
        issues.append("Not enough control samples")
    return issues


def get_issues(total: int, control_proportion: float) -> str:
    """Potential issues of a stratum joined with "; ", or "none"."""
    issues = classify(total, control_proportion)
    if not issues:
        return NO_ISSUES
    return "; ".join(issues)


def make_issue_table(analysis_set: DataFrame, treat: str) -> pd.DataFrame:
    """
    Count treated and control rows in each stratum and flag potential issues.

    Strata that are very small give imprecise matches, very large ones are
    slow to match, and strata dominated by treated or control rows leave few
    feasible matches.

    Parameters
    ----------
    analysis_set : DataFrame
        Stratified data with an integer "stratum" column
    treat : str
        Name of the binary treatment column

    Returns
    -------
    pd.DataFrame
        One row per stratum, ordered by stratum id, with columns:
        - Stratum: stratum id
        - Treated: number of treated rows
        - Control: number of control rows
        - Total: number of rows
        - Control_Proportion: Control / Total
        - Potential_Issues: "; "-joined issue labels, or "none"
    """
    counts = (
        analysis_set.groupBy("stratum")
        .agg(
            F.sum(_col(treat).cast("int")).alias("Treated"),
            F.count(F.lit(1)).alias("Total"),
        )
        .orderBy("stratum")
        .toPandas()
    )

    treated = counts["Treated"].to_numpy(dtype=np.int64)
    total = counts["Total"].to_numpy(dtype=np.int64)
    control = total - treated

    df = pd.DataFrame(
        {
            "Stratum": counts["stratum"].to_numpy(dtype=np.int64),
            "Treated": treated,
            "Control": control,
            "Total": total,
            "Control_Proportion": control / total,
        }
    )
    df["Potential_Issues"] = [
        get_issues(t, p) for t, p in zip(df["Total"], df["Control_Proportion"])
    ]
    return df[ISSUE_TABLE_COLUMNS]


def print_issue_table(issue_table: pd.DataFrame) -> None:
    """Print formatted issue table."""
    print("\nStrata Issues")
    print("=" * 100)

    display_df = issue_table.copy()
    display_df["Control_Proportion"] = display_df["Control_Proportion"].apply(
        lambda x: f"{x:.4f}" if pd.notna(x) else "-"
    )
    display_df.columns = [
        "Stratum", "Treated", "Control", "Total", "Control Prop.", "Potential Issues"
    ]
    print(display_df.to_string(index=False))
    print("=" * 100)

    flagged = issue_table[issue_table["Potential_Issues"] != NO_ISSUES]
    print(f"\n{len(flagged)} of {len(issue_table)} strata have potential issues")
