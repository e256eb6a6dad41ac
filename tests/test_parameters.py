import numpy as np
import pytest

from config.parameters import (
    BMICategory,
    ModelParams,
    NumericalParams,
    ReferenceValues,
    load_default_params,
    parameters_for_sex,
    sex_blend,
)


def test_male_and_female_constants():
    bundle = parameters_for_sex([0, 1])
    np.testing.assert_allclose(bundle.K, [800.0, 700.0])
    np.testing.assert_allclose(bundle.deltamax, [19.0, 17.0])
    np.testing.assert_allclose(bundle.growth.D, [10.1, 1.1])
    np.testing.assert_allclose(bundle.growth.tD, [15.0, 16.2])
    np.testing.assert_allclose(bundle.growth_impact.D, [10.0, 1.1])
    np.testing.assert_allclose(bundle.growth_impact.tauB, [0.94, 0.94])
    np.testing.assert_allclose(bundle.eb_impact.A, [7.2, 16.5])
    np.testing.assert_allclose(bundle.eb_impact.tauA, [15.0, 7.0])


def test_sex_is_a_linear_blend():
    bundle = parameters_for_sex([0.5])
    np.testing.assert_allclose(bundle.K, [750.0])
    np.testing.assert_allclose(bundle.eb_impact.B, [38.5])
    assert sex_blend(2.0, 4.0, 0.25) == pytest.approx(2.5)


def test_bundle_is_immutable():
    bundle = parameters_for_sex([0])
    with pytest.raises(AttributeError):
        bundle.K = np.array([1.0])


def test_scalar_sex_gives_length_one_vectors():
    bundle = parameters_for_sex(1)
    assert bundle.K.shape == (1,)


def test_numerical_steps():
    assert NumericalParams(dt=1.0, days=10).n_steps == 10
    assert NumericalParams(dt=0.5, days=10).n_steps == 20
    assert NumericalParams(dt=3.0, days=10).n_steps == 3


def test_numerical_rejects_non_positive_dt():
    with pytest.raises(AssertionError):
        NumericalParams(dt=0.0)


def test_enum_codes():
    assert [int(c) for c in BMICategory] == [1, 2, 3, 4]
    assert ReferenceValues(1) is ReferenceValues.MEDIAN


def test_summary_mentions_key_settings():
    params = load_default_params()
    assert isinstance(params, ModelParams)
    text = params.summary()
    assert "mean" in text
    assert "365 days" in text
