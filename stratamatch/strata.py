"""
Stratification results for stratamatch.

A ManualStrata is the hand-off to whatever matches each stratum: it carries
the stratified data plus the diagnostic tables describing every stratum.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Sequence, Tuple

import pandas as pd
import pyspark.sql.functions as F
from pyspark.sql import DataFrame

from .summary import NO_ISSUES


@dataclass(frozen=True, eq=False)
class ManualStrata:
    """
    Result of manual_stratify.

    Attributes
    ----------
    treat : str
        Name of the column encoding treatment assignment
    covariates : Tuple[str, ...]
        Categorical columns the data were stratified on
    analysis_set : DataFrame
        Input data with an added integer "stratum" column
    call : Mapping[str, Any]
        Arguments manual_stratify was called with
    issue_table : pd.DataFrame
        Per-stratum treated/control counts and potential issues
    strata_table : pd.DataFrame
        Per-stratum covariate values, id and size
    warnings : Tuple[str, ...]
        Non-fatal warnings issued while checking the inputs

    Notes
    -----
    Consumers read the tables and filter analysis_set by stratum; none of
    them should be modified in place.
    """

    treat: str
    covariates: Tuple[str, ...]
    analysis_set: DataFrame
    call: Mapping[str, Any]
    issue_table: pd.DataFrame
    strata_table: pd.DataFrame
    warnings: Tuple[str, ...] = ()

    @property
    def treatment_column(self) -> str:
        return self.treat

    @property
    def covariate_columns(self) -> Tuple[str, ...]:
        return self.covariates

    @property
    def invocation_record(self) -> Mapping[str, Any]:
        return self.call

    @property
    def n_strata(self) -> int:
        """Number of strata."""
        return len(self.strata_table)

    def get_stratum(self, stratum: int) -> DataFrame:
        """
        Rows of analysis_set belonging to one stratum.

        Raises
        ------
        KeyError
            If no stratum has this id
        """
        if stratum not in set(self.strata_table["stratum"].tolist()):
            raise KeyError(f"No stratum with id {stratum}")
        return self.analysis_set.filter(F.col("stratum") == F.lit(int(stratum)))

    def strata_with_issues(self) -> pd.DataFrame:
        """Rows of the issue table for strata with at least one potential issue."""
        flagged = self.issue_table["Potential_Issues"] != NO_ISSUES
        return self.issue_table[flagged].reset_index(drop=True)

    def summary(self) -> str:
        """Short text description of the stratification."""
        sizes = self.strata_table["size"]
        lines = [
            f"Manual stratification: {self.call['strata_formula']}",
            f" - covariates: {', '.join(self.covariates)}",
            f" - number of strata: {self.n_strata}",
            f" - stratum sizes: min {sizes.min()}, max {sizes.max()}, "
            f"total {sizes.sum()}",
            f" - strata with potential issues: {len(self.strata_with_issues())}",
        ]
        for message in self.warnings:
            lines.append(f" - warning: {message}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ManualStrata(formula='{self.call['strata_formula']}', "
            f"n_strata={self.n_strata}, force={self.call['force']})"
        )


def new_manual_strata(
    analysis_set: DataFrame,
    treat: str,
    covariates: Sequence[str],
    call: Mapping[str, Any],
    issue_table: pd.DataFrame,
    strata_table: pd.DataFrame,
    warnings: Sequence[str] = (),
) -> ManualStrata:
    """
    Package the pieces of a stratification into a ManualStrata.

    No validation is done here; manual_stratify checks its inputs before
    building any of the pieces.
    """
    return ManualStrata(
        treat=treat,
        covariates=tuple(covariates),
        analysis_set=analysis_set,
        call=MappingProxyType(dict(call)),
        issue_table=issue_table,
        strata_table=strata_table,
        warnings=tuple(warnings),
    )
