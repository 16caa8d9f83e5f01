"""
Error and warning types raised while stratifying a data set.

All checks run before any grouping work starts, so none of these leave a
partial result behind.
"""


class StratificationError(Exception):
    """Base class for errors raised by stratamatch."""


class FormulaError(StratificationError, TypeError):
    """The stratification formula is not of the form ``treat ~ X1 + X2``."""


class SchemaError(StratificationError, ValueError):
    """A variable named in the formula is not a column of the data."""


class SemanticError(StratificationError, ValueError):
    """The treatment column is not binary."""


class ContinuityError(StratificationError, ValueError):
    """A covariate has too many distinct values to be used for stratification."""


class ContinuityWarning(UserWarning):
    """A covariate looks continuous but was used anyway because force=True."""
