import numpy as np
import pandas as pd
import pytest

from config.parameters import LogisticIntakeParams
from core.exceptions import IntakeHorizonError
from core.intake import LogisticIntake, TabulatedIntake, load_intake_table


def test_logistic_default_plateau():
    intake = LogisticIntake()
    np.testing.assert_allclose(intake([10.0, 14.0]), [2700.0, 2700.0])


def test_logistic_formula():
    params = LogisticIntakeParams(K=2000.0, Q=1.0, A=1000.0, B=0.0, nu=1.0, C=1.0)
    assert LogisticIntake(params)([7.0])[0] == pytest.approx(1500.0)

    params = LogisticIntakeParams(K=2800.0, Q=2000.0, A=1000.0, B=0.7, nu=1.0, C=1.0)
    expected = 1000.0 + 1800.0 / (1.0 + 2000.0 * np.exp(-0.7 * 11.0))
    assert LogisticIntake(params)([11.0])[0] == pytest.approx(expected)


def test_logistic_constant_when_q_is_zero():
    params = LogisticIntakeParams(K=2100.0, Q=0.0, A=3.0, B=12.0, nu=4.0, C=1.0)
    np.testing.assert_array_equal(LogisticIntake(params)([5.0, 9.0, 16.0]), [2100.0] * 3)


@pytest.fixture
def table():
    rows = np.arange(5, dtype=float)[:, None] * 100.0
    return rows + np.array([0.0, 1.0])


def test_tabulated_rows(table):
    intake = TabulatedIntake(table, [10.0, 12.0], dt=1.0)
    np.testing.assert_array_equal(intake([10.0 + 0.5 / 365, 12.0]), [0.0, 1.0])
    np.testing.assert_array_equal(intake([10.0 + 2.5 / 365, 12.0]), [200.0, 201.0])
    np.testing.assert_array_equal(intake([10.0 + 3.0 / 365, 12.0]), [300.0, 301.0])


def test_tabulated_rows_with_larger_step(table):
    intake = TabulatedIntake(table, [10.0, 10.0], dt=2.0)
    assert intake.row([10.0 + 4.0 / 365]) == 2
    assert intake.row([10.0 + 3.0 / 365]) == 1


def test_tabulated_beyond_horizon_raises(table):
    intake = TabulatedIntake(table, [10.0, 10.0], dt=1.0)
    with pytest.raises(IntakeHorizonError, match="Insufficient intake horizon"):
        intake([10.0 + 5.0 / 365, 10.0])
    with pytest.raises(IndexError):
        intake([9.0, 9.0])


def test_check_horizon(table):
    intake = TabulatedIntake(table, [10.0, 10.0], dt=1.0)
    intake.check_horizon(4)
    with pytest.raises(IntakeHorizonError):
        intake.check_horizon(5)


def test_one_dimensional_table_is_one_individual():
    intake = TabulatedIntake(np.array([1500.0, 1600.0]), [8.0], dt=1.0)
    assert intake.table.shape == (2, 1)
    np.testing.assert_array_equal(intake([8.0 + 1.0 / 365]), [1600.0])


def test_load_intake_table(tmp_path):
    path = tmp_path / "intake.csv"
    pd.DataFrame({'child_a': [1800.0, 1810.0, 1820.0],
                  'child_b': [2000.0, 2005.0, 2010.0]}).to_csv(path, index=False)
    table = load_intake_table(str(path))
    assert table.shape == (3, 2)
    np.testing.assert_array_equal(table[:, 1], [2000.0, 2005.0, 2010.0])


def test_load_intake_table_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_intake_table(str(tmp_path / "missing.csv"))
