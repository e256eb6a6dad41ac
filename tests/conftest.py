import numpy as np
import pytest

from config.parameters import parameters_for_sex
from core.energetics import EnergyBalance
from core.intake import LogisticIntake
from core.reference import ReferenceCurves


@pytest.fixture
def make_balance():
    """Build an EnergyBalance for given sex and BMI category vectors."""
    def _make(sex, bmi, intake=None):
        sex = np.atleast_1d(np.asarray(sex, dtype=float))
        params = parameters_for_sex(sex)
        reference = ReferenceCurves(sex, bmi)
        return EnergyBalance(params, reference, intake if intake is not None else LogisticIntake())
    return _make
