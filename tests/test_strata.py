"""
Tests for the ManualStrata result in stratamatch.
"""

import dataclasses

import pytest

from stratamatch import manual_stratify, new_manual_strata


@pytest.fixture(scope="module")
def m_strat(two_covariate_df):
    return manual_stratify(two_covariate_df, "treat ~ B1 + B2")


def test_get_stratum(m_strat):
    """Test that get_stratum returns exactly one stratum's rows."""
    first = m_strat.get_stratum(1).toPandas()

    assert len(first) == 3
    assert set(first["stratum"]) == {1}
    assert first["id"].tolist() == [0, 2, 6]


def test_get_stratum_unknown_id(m_strat):
    with pytest.raises(KeyError):
        m_strat.get_stratum(99)


def test_strata_are_disjoint_partitions(m_strat):
    """Test that the strata partition analysis_set."""
    ids = []
    for stratum in m_strat.strata_table["stratum"]:
        ids.extend(m_strat.get_stratum(stratum).toPandas()["id"].tolist())

    assert sorted(ids) == list(range(8))


def test_strata_with_issues(spark):
    """Test that only flagged strata are returned."""
    rows = [(0 if i < 40 else 1, "ok") for i in range(80)] + [(1, "small"), (0, "small")]
    m_strat = manual_stratify(
        spark.createDataFrame(rows, "treat int, B1 string"), "treat ~ B1"
    )
    flagged = m_strat.strata_with_issues()

    assert flagged["Stratum"].tolist() == [2]
    assert flagged["Potential_Issues"].tolist() == ["Too few samples"]


def test_summary_text(m_strat):
    text = m_strat.summary()

    assert "treat ~ B1 + B2" in text
    assert "number of strata: 4" in text
    assert "min 1, max 3, total 8" in text
    assert "strata with potential issues: 4" in text


def test_repr(m_strat):
    assert repr(m_strat) == "ManualStrata(formula='treat ~ B1 + B2', n_strata=4, force=False)"


def test_result_is_read_only(m_strat):
    with pytest.raises(dataclasses.FrozenInstanceError):
        m_strat.treat = "other"
    with pytest.raises(TypeError):
        m_strat.call["force"] = True


def test_new_manual_strata_packages_inputs(m_strat):
    """Test that new_manual_strata copies the call record and tuples the sequences."""
    call = {"function": "manual_stratify", "strata_formula": "treat ~ B1 + B2", "force": False}
    built = new_manual_strata(
        analysis_set=m_strat.analysis_set,
        treat="treat",
        covariates=["B1", "B2"],
        call=call,
        issue_table=m_strat.issue_table,
        strata_table=m_strat.strata_table,
        warnings=["a warning"],
    )
    call["force"] = True

    assert built.covariates == ("B1", "B2")
    assert built.warnings == ("a warning",)
    assert built.call["force"] is False
    assert "warning: a warning" in built.summary()
