"""
Stratification formulas for stratamatch.

A stratification formula names the treatment column on the left of ``~`` and
the covariates to stratify on on the right, e.g. ``"treat ~ B1 + B2"``.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple, Union

from .errors import FormulaError

# Terms on the right-hand side may be joined with +, * or : (every variable
# that appears is a stratification covariate).
_TERM_SEP = re.compile(r"[+*:]")
_NAME = re.compile(r"^[A-Za-z_.][A-Za-z0-9_.]*$")
_QUOTED_NAME = re.compile(r"^`([^`]+)`$")


def _parse_name(term: str, formula_text: str) -> str:
    term = term.strip()
    quoted = _QUOTED_NAME.match(term)
    if quoted:
        return quoted.group(1)
    if not _NAME.match(term):
        raise FormulaError(
            f"Invalid variable '{term}' in strata_formula '{formula_text}'"
        )
    return term


def _unique(names: Sequence[str]) -> Tuple[str, ...]:
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return tuple(seen)


@dataclass(frozen=True)
class StrataFormula:
    """
    Treatment column and stratification covariates.

    Attributes
    ----------
    treat : str
        Name of the binary treatment assignment column
    covariates : Tuple[str, ...]
        Names of the categorical columns to stratify on, in formula order
    """

    treat: str
    covariates: Tuple[str, ...]

    def __post_init__(self):
        if not isinstance(self.treat, str) or not self.treat:
            raise FormulaError("treat must be a non-empty column name")
        if isinstance(self.covariates, str):
            raise FormulaError("covariates must be a sequence of column names")
        covariates = _unique(list(self.covariates))
        if len(covariates) == 0:
            raise FormulaError("strata_formula must name at least one covariate")
        for c in covariates:
            if not isinstance(c, str) or not c:
                raise FormulaError(f"Invalid covariate name: {c!r}")
        if self.treat in covariates:
            raise FormulaError(
                f"Treatment column '{self.treat}' cannot also be a covariate"
            )
        object.__setattr__(self, "covariates", covariates)

    @classmethod
    def parse(cls, text: str) -> "StrataFormula":
        """
        Parse a formula string such as ``"treat ~ B1 + B2"``.

        Raises
        ------
        FormulaError
            If the text does not contain exactly one ``~``, the left side is
            not a single variable, or the right side names no variables.
        """
        if not isinstance(text, str):
            raise FormulaError("strata_formula must be a formula")
        sides = text.split("~")
        if len(sides) != 2:
            raise FormulaError(
                f"strata_formula must contain exactly one '~', got '{text}'"
            )
        lhs, rhs = sides
        if not lhs.strip():
            raise FormulaError(
                f"strata_formula must name a treatment column left of '~', got '{text}'"
            )
        treat = _parse_name(lhs, text)
        terms = _TERM_SEP.split(rhs)
        if not rhs.strip() or any(not t.strip() for t in terms):
            raise FormulaError(
                f"strata_formula must name covariates right of '~', got '{text}'"
            )
        covariates = [_parse_name(t, text) for t in terms]
        return cls(treat=treat, covariates=tuple(covariates))

    @property
    def variables(self) -> Tuple[str, ...]:
        """All variables in the formula, treatment first."""
        return (self.treat,) + self.covariates

    def __str__(self) -> str:
        def fmt(name):
            return name if _NAME.match(name) else f"`{name}`"

        return f"{fmt(self.treat)} ~ {' + '.join(fmt(c) for c in self.covariates)}"


FormulaLike = Union[str, StrataFormula, Mapping[str, Any], Tuple[str, Sequence[str]]]


def as_formula(strata_formula: FormulaLike) -> StrataFormula:
    """
    Coerce any supported formula representation to a StrataFormula.

    Accepts a formula string, a StrataFormula, a mapping with ``treat`` and
    ``covariates`` keys, or a ``(treat, covariates)`` pair.
    """
    if isinstance(strata_formula, StrataFormula):
        return strata_formula
    if isinstance(strata_formula, str):
        return StrataFormula.parse(strata_formula)
    if isinstance(strata_formula, Mapping):
        if set(strata_formula.keys()) != {"treat", "covariates"}:
            raise FormulaError(
                "strata_formula mapping must have exactly the keys 'treat' and 'covariates'"
            )
        covariates = strata_formula["covariates"]
        if isinstance(covariates, str):
            covariates = [covariates]
        return StrataFormula(
            treat=strata_formula["treat"], covariates=tuple(covariates)
        )
    if isinstance(strata_formula, tuple) and len(strata_formula) == 2:
        treat, covariates = strata_formula
        if isinstance(covariates, str):
            covariates = [covariates]
        return StrataFormula(treat=treat, covariates=tuple(covariates))
    raise FormulaError("strata_formula must be a formula")
