"""
Tests for stratification formulas in stratamatch.
"""

import pytest

from stratamatch import FormulaError, StrataFormula, as_formula


def test_parse_single_covariate():
    formula = StrataFormula.parse("treat ~ B1")
    assert formula.treat == "treat"
    assert formula.covariates == ("B1",)


def test_parse_several_covariates():
    """Test that covariates keep formula order and whitespace is ignored."""
    formula = StrataFormula.parse("  treat~B2 +B1+  age_group ")
    assert formula.treat == "treat"
    assert formula.covariates == ("B2", "B1", "age_group")
    assert formula.variables == ("treat", "B2", "B1", "age_group")


def test_parse_interaction_terms():
    """Test that every variable in an interaction becomes a covariate."""
    formula = StrataFormula.parse("treat ~ B1 * B2 + B3:B4")
    assert formula.covariates == ("B1", "B2", "B3", "B4")


def test_duplicate_covariates_dropped():
    formula = StrataFormula.parse("treat ~ B1 + B2 + B1")
    assert formula.covariates == ("B1", "B2")


def test_quoted_names():
    """Test that backtick-quoted names may contain any character but a backtick."""
    formula = StrataFormula.parse("`is treated` ~ `age group` + B1")
    assert formula.treat == "is treated"
    assert formula.covariates == ("age group", "B1")
    assert str(formula) == "`is treated` ~ `age group` + B1"


def test_str_is_canonical():
    assert str(StrataFormula.parse("treat~B1+B2")) == "treat ~ B1 + B2"


@pytest.mark.parametrize(
    "text",
    [
        "treat B1",
        "treat ~ B1 ~ B2",
        "~ B1",
        "treat ~",
        "treat ~ B1 +",
        "treat ~ B1 + + B2",
        "treat + other ~ B1",
        "treat ~ log(B1)",
        "treat ~ treat",
    ],
)
def test_invalid_formulas(text):
    with pytest.raises(FormulaError):
        StrataFormula.parse(text)


def test_formula_error_is_type_error():
    with pytest.raises(TypeError):
        StrataFormula.parse("treat")


def test_constructor_validates():
    with pytest.raises(FormulaError):
        StrataFormula("treat", ())
    with pytest.raises(FormulaError):
        StrataFormula("treat", "B1")
    with pytest.raises(FormulaError):
        StrataFormula("", ("B1",))


def test_as_formula_accepts_representations():
    expected = StrataFormula("treat", ("B1", "B2"))

    assert as_formula("treat ~ B1 + B2") == expected
    assert as_formula(expected) is expected
    assert as_formula({"treat": "treat", "covariates": ["B1", "B2"]}) == expected
    assert as_formula(("treat", ["B1", "B2"])) == expected
    assert as_formula(("treat", "B1")) == StrataFormula("treat", ("B1",))


def test_as_formula_rejects_other_values():
    with pytest.raises(FormulaError):
        as_formula(None)
    with pytest.raises(FormulaError):
        as_formula(["treat", "B1"])
    with pytest.raises(FormulaError):
        as_formula({"treatment": "treat", "covariates": ["B1"]})


def test_formula_is_immutable():
    formula = StrataFormula.parse("treat ~ B1")
    with pytest.raises(AttributeError):
        formula.treat = "other"
