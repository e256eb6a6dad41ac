import numpy as np
import pandas as pd
import pytest

from config.parameters import BMICategory, LogisticIntakeParams, ModelParams, NumericalParams, ReferenceValues
from core.cohort import Cohort, Individual
from core.exceptions import IntakeHorizonError
from core.integrator import ChildWeightIntegrator, SimulationTrace, masses_valid

MAINTENANCE = dict(K=2000.0, Q=10.0, A=3.0, B=12.0, nu=4.0, C=1.0)


def _boy(n=1, **intake):
    params = dict(MAINTENANCE)
    params.update(intake)
    return ChildWeightIntegrator.from_logistic(
        age=np.full(n, 10.0), sex=np.zeros(n), bmi_cat=np.full(n, 2),
        ffm=np.full(n, 25.0), fm=np.full(n, 6.0), dt=1.0, **params)


def test_ten_day_trace_has_eleven_points():
    trace = _boy().simulate(10)
    np.testing.assert_array_equal(trace.time, np.arange(11, dtype=float))
    assert trace.body_weight.shape == (1, 11)
    assert trace.n_steps == 10


def test_step_count_floors_partial_steps():
    integrator = ChildWeightIntegrator.from_logistic(
        [10.0], [0], [2], [25.0], [6.0], dt=3.0, **MAINTENANCE)
    trace = integrator.simulate(10)
    np.testing.assert_array_equal(trace.time, [0.0, 3.0, 6.0, 9.0])


def test_weight_is_sum_of_compartments():
    integrator = ChildWeightIntegrator.from_logistic(
        age=[6.0, 9.5, 14.0], sex=[0, 1, 1], bmi_cat=[1, 3, 4],
        ffm=[17.0, 27.0, 47.0], fm=[2.5, 9.0, 28.0], **MAINTENANCE)
    trace = integrator.simulate(120)
    np.testing.assert_allclose(trace.body_weight, trace.fat_free_mass + trace.fat_mass,
                               rtol=0, atol=1e-12)


def test_initial_state_recorded():
    trace = _boy().simulate(5)
    assert trace.fat_free_mass[0, 0] == 25.0
    assert trace.fat_mass[0, 0] == 6.0
    assert trace.age[0, 0] == 10.0


def test_repeat_runs_are_bit_identical():
    first = _boy().simulate(90)
    second = _boy().simulate(90)
    np.testing.assert_array_equal(first.body_weight, second.body_weight)
    np.testing.assert_array_equal(first.fat_mass, second.fat_mass)

    integrator = _boy()
    np.testing.assert_array_equal(integrator.simulate(90).body_weight,
                                  integrator.simulate(90).body_weight)


def test_one_year_boy_end_to_end():
    trace = _boy().simulate(365)

    assert len(trace.time) == 366
    assert trace.age[0, 0] == pytest.approx(10.0)
    assert trace.age[0, -1] == pytest.approx(11.0)
    assert np.all(np.diff(trace.age[0]) > 0)

    final = trace.final_weight()[0]
    assert np.isfinite(final)
    assert 20.0 < final < 80.0
    assert trace.correct_values
    assert trace.model_type == "Children"


def test_cohort_size_does_not_couple_individuals():
    single = _boy(1).simulate(200)
    many = _boy(50).simulate(200)
    for i in range(50):
        np.testing.assert_allclose(many.body_weight[i], single.body_weight[0], rtol=1e-12)
        np.testing.assert_allclose(many.fat_mass[i], single.fat_mass[0], rtol=1e-12)


def test_mixed_cohort_matches_individual_runs():
    ages, sexes, bmis = [7.0, 12.0, 15.5], [1, 0, 1], [2, 4, 1]
    ffms, fms = [19.0, 45.0, 33.0], [5.0, 20.0, 5.0]
    cohort_trace = ChildWeightIntegrator.from_logistic(
        ages, sexes, bmis, ffms, fms, **MAINTENANCE).simulate(60)
    for i in range(3):
        solo = ChildWeightIntegrator.from_logistic(
            [ages[i]], [sexes[i]], [bmis[i]], [ffms[i]], [fms[i]], **MAINTENANCE).simulate(60)
        np.testing.assert_allclose(cohort_trace.fat_free_mass[i], solo.fat_free_mass[0], rtol=1e-12)


def test_tabulated_constant_matches_logistic_constant():
    days, n = 100, 3
    args = dict(age=[8.0, 8.0, 8.0], sex=[0, 1, 0], bmi_cat=[2, 2, 3],
                ffm=[21.0, 20.0, 24.0], fm=[4.0, 4.9, 6.3])
    table = np.full((days + 1, n), 2100.0)

    tabulated = ChildWeightIntegrator.from_intake_table(intake_table=table, dt=1.0, **args)
    logistic = ChildWeightIntegrator.from_logistic(
        K=2100.0, Q=0.0, A=3.0, B=12.0, nu=4.0, C=1.0, dt=1.0, **args)

    np.testing.assert_allclose(tabulated.simulate(days).body_weight,
                               logistic.simulate(days).body_weight, rtol=1e-12)


def test_tabulated_intake_changes_trajectory():
    days = 60
    args = dict(age=[9.0, 9.0], sex=[0, 0], bmi_cat=[2, 2], ffm=[23.0, 23.0], fm=[4.5, 4.5])
    table = np.column_stack([np.full(days + 1, 1700.0), np.full(days + 1, 2500.0)])
    trace = ChildWeightIntegrator.from_intake_table(intake_table=table, **args).simulate(days)
    assert trace.fat_mass[1, -1] > trace.fat_mass[0, -1]


def test_short_intake_table_fails_fast():
    integrator = ChildWeightIntegrator.from_intake_table(
        [10.0], [0], [2], [25.0], [6.0], np.full((30, 1), 2000.0))
    with pytest.raises(IntakeHorizonError):
        integrator.simulate(30)
    assert integrator.simulate(29).n_steps == 29


def test_larger_step_reads_one_row_per_step():
    table = np.full((6, 1), 2000.0)
    integrator = ChildWeightIntegrator.from_intake_table(
        [10.0], [1], [2], [24.0], [7.0], table, dt=2.0)
    trace = integrator.simulate(10)
    np.testing.assert_array_equal(trace.time, [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])


def test_value_checks_flag_invalid_masses():
    args = dict(age=[10.0, 10.0], sex=[0, 0], bmi_cat=[2, 2], ffm=[25.0, 25.0], fm=[6.0, np.nan])
    checked = ChildWeightIntegrator.from_logistic(check_values=True, **args, **MAINTENANCE)
    unchecked = ChildWeightIntegrator.from_logistic(check_values=False, **args, **MAINTENANCE)
    assert checked.simulate(5).correct_values is False
    assert unchecked.simulate(5).correct_values is True


def test_masses_valid():
    assert masses_valid(np.array([1.0, 2.0]), np.array([0.0, 3.0]))
    assert not masses_valid(np.array([1.0, -0.1]), np.array([0.0, 3.0]))
    assert not masses_valid(np.array([1.0, 2.0]), np.array([np.inf, 3.0]))


def test_more_intake_means_more_fat_gain():
    integrator = _boy()
    t = np.array([10.0])
    low = integrator.mass_rates(t, np.array([25.0]), np.array([6.0]))
    high = _boy(K=2600.0).mass_rates(t, np.array([25.0]), np.array([6.0]))
    assert high.fm[0] > low.fm[0]
    assert high.ffm[0] > low.ffm[0]


def test_step_matches_first_trace_column():
    integrator = _boy()
    ffm1, fm1 = integrator.step(np.array([10.0]), np.array([25.0]), np.array([6.0]))
    trace = integrator.simulate(1)
    assert trace.fat_free_mass[0, 1] == ffm1[0]
    assert trace.fat_mass[0, 1] == fm1[0]


def test_step_scales_stages_by_timestep():
    integrator = ChildWeightIntegrator.from_logistic(
        [10.0], [0], [2], [25.0], [6.0], dt=2.0, **MAINTENANCE)
    age, ffm, fm = np.array([10.0]), np.array([25.0]), np.array([6.0])
    dt = 2.0

    k1 = integrator.mass_rates(age, ffm, fm)
    k2 = integrator.mass_rates(age + 1.0 / 365.0, ffm + 1.0 * k1.ffm, fm + 1.0 * k1.fm)
    k3 = integrator.mass_rates(age + 1.0 / 365.0, ffm + 1.0 * k2.ffm, fm + 1.0 * k2.fm)
    k4 = integrator.mass_rates(age + 2.0 / 365.0, ffm + 2.0 * k3.ffm, fm + 2.0 * k3.fm)
    expected_ffm = ffm + dt / 6.0 * (k1.ffm + 2 * k2.ffm + 2 * k3.ffm + k4.ffm)
    expected_fm = fm + dt / 6.0 * (k1.fm + 2 * k2.fm + 2 * k3.fm + k4.fm)

    ffm2, fm2 = integrator.step(age, ffm, fm)
    np.testing.assert_allclose(ffm2, expected_ffm, rtol=1e-12)
    np.testing.assert_allclose(fm2, expected_fm, rtol=1e-12)


def test_bmi_category_codes_must_be_whole_categories():
    with pytest.raises(ValueError):
        Cohort(age=[10.0], sex=[0], bmi_category=[2.5], ffm=[25.0], fm=[6.0])
    with pytest.raises(ValueError):
        Cohort(age=[10.0, 10.0], sex=[0, 0], bmi_category=[2, 5], ffm=[25.0, 25.0], fm=[6.0, 6.0])
    cohort = Cohort(age=[10.0], sex=[0], bmi_category=[BMICategory.OBESE], ffm=[25.0], fm=[6.0])
    assert cohort[0].bmi_category is BMICategory.OBESE


def test_reference_variant_matters():
    args = dict(age=[10.0], sex=[0], bmi_cat=[2], ffm=[25.0], fm=[6.0])
    mean = ChildWeightIntegrator.from_logistic(**args, **MAINTENANCE).simulate(30)
    median = ChildWeightIntegrator.from_logistic(
        reference_values=ReferenceValues.MEDIAN, **args, **MAINTENANCE).simulate(30)
    assert not np.allclose(mean.body_weight, median.body_weight, rtol=1e-10, atol=0)


def test_from_params():
    params = ModelParams(numerical=NumericalParams(dt=2.0, days=20),
                         intake=LogisticIntakeParams(**MAINTENANCE))
    cohort = Cohort(age=[10.0], sex=[0], bmi_category=[2], ffm=[25.0], fm=[6.0])
    integrator = ChildWeightIntegrator.from_params(cohort, params)
    trace = integrator.simulate(params.numerical.days)
    assert integrator.dt == 2.0
    assert len(trace.time) == 11


def test_trace_to_frame():
    integrator = ChildWeightIntegrator.from_logistic(
        [10.0, 11.0], [0, 1], [2, 3], [25.0, 28.0], [6.0, 11.0], **MAINTENANCE)
    trace = integrator.simulate(4)
    frame = trace.to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ['individual', 'time', 'age', 'fat_free_mass', 'fat_mass', 'body_weight']
    assert len(frame) == 2 * 5
    second = frame[frame['individual'] == 1]
    np.testing.assert_array_equal(second['body_weight'].to_numpy(), trace.body_weight[1])
    np.testing.assert_array_equal(second['time'].to_numpy(), trace.time)


def test_cohort_arrays_must_match():
    with pytest.raises(ValueError):
        Cohort(age=[10.0, 11.0], sex=[0], bmi_category=[2, 2], ffm=[25.0, 26.0], fm=[6.0, 7.0])


def test_cohort_from_individuals():
    members = [Individual(10.0, 0, BMICategory.NORMAL, 25.0, 6.0),
               Individual(12.0, 1, BMICategory.OBESE, 35.0, 20.0)]
    cohort = Cohort.from_individuals(members)
    assert cohort.n == 2
    np.testing.assert_array_equal(cohort.weight, [31.0, 55.0])
    assert cohort[1] == members[1]
    assert cohort[1].weight == 55.0
