"""
stratamatch: Stratification of large observational data sets for matching.

stratamatch splits a Spark DataFrame into strata by exact combinations of
categorical covariates and flags strata that are too small, too large or too
imbalanced to match well, so matching can be run on each stratum separately.
"""

from .errors import (
    ContinuityError,
    ContinuityWarning,
    FormulaError,
    SchemaError,
    SemanticError,
    StratificationError,
)
from .formula import StrataFormula, as_formula
from .strata import ManualStrata, new_manual_strata
from .stratify import assign_strata, make_strata_table, manual_stratify
from .summary import get_issues, make_issue_table

__version__ = "0.1.0"
__all__ = [
    "manual_stratify",
    "assign_strata",
    "make_strata_table",
    "make_issue_table",
    "get_issues",
    "new_manual_strata",
    "ManualStrata",
    "StrataFormula",
    "as_formula",
    "StratificationError",
    "FormulaError",
    "SchemaError",
    "SemanticError",
    "ContinuityError",
    "ContinuityWarning",
]
