"""
Reference curves module: population FFM/FM at fractional ages.

The reference curves feed only the reference intake of the expenditure
closure. They never constrain the simulated trajectory.

Per individual, the published tables are reduced to one column by
  1. weighting the four BMI categories with one-hot indicators
  2. blending male and female values with the sex weight
and looked up with piecewise-linear interpolation between whole years.
Ages >= 18 return the age-18 row; ages below 2 reuse the first interval.
"""

import numpy as np

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))
from config.parameters import BMICategory, ReferenceValues
from config.reference_tables import FFM, FM, MAX_AGE, MIN_AGE, N_ROWS, get_table

_LAST_ROW = N_ROWS - 1


def category_weights(bmi_category) -> np.ndarray:
    """
    One-hot BMI indicators.

    Args:
        bmi_category: Per-individual BMICategory codes

    Returns:
        Array [n, 4] with columns under, normal, over, obese
    """
    codes = np.atleast_1d(np.asarray(bmi_category))
    return np.stack([(codes == c).astype(float) for c in BMICategory], axis=1)


def cohort_table(table: np.ndarray, sex, bmi_category) -> np.ndarray:
    """
    Reduce a [17, 4, 2] reference table to [17, n] for a cohort.
    """
    sex = np.atleast_1d(np.asarray(sex, dtype=float))
    weights = category_weights(bmi_category)
    by_sex = table[:, :, 0][:, :, None] * (1.0 - sex) + table[:, :, 1][:, :, None] * sex
    return np.einsum('rcn,nc->rn', by_sex, weights)


def interpolate(table: np.ndarray, t) -> np.ndarray:
    """
    Piecewise-linear lookup at fractional ages.

    Args:
        table: Cohort table [17, n]
        t: Ages [years], one per individual

    Returns:
        Interpolated reference values [n]
    """
    t = np.asarray(t, dtype=float)
    cols = np.arange(table.shape[1])

    whole = np.floor(t)
    jmin = np.maximum(whole.astype(int), MIN_AGE) - MIN_AGE
    jmin = np.minimum(jmin, _LAST_ROW)
    jmax = np.minimum(jmin + 1, _LAST_ROW)
    frac = t - whole

    lower = table[jmin, cols]
    value = lower + frac * (table[jmax, cols] - lower)
    return np.where(t >= MAX_AGE, table[_LAST_ROW, cols], value)


class ReferenceCurves:
    """
    Reference FFM and FM curves for a cohort.

    Tables are resolved once at construction and are read-only afterwards.
    """

    def __init__(self, sex, bmi_category, variant=ReferenceValues.MEAN):
        """
        Args:
            sex: Per-individual sex weights
            bmi_category: Per-individual BMICategory codes
            variant: ReferenceValues.MEAN or ReferenceValues.MEDIAN
        """
        self.variant = ReferenceValues(variant)
        self.ffm_table = cohort_table(get_table(self.variant, FFM), sex, bmi_category)
        self.fm_table = cohort_table(get_table(self.variant, FM), sex, bmi_category)

    def ffm(self, t) -> np.ndarray:
        """Reference fat-free mass [kg] at age t"""
        return interpolate(self.ffm_table, t)

    def fm(self, t) -> np.ndarray:
        """Reference fat mass [kg] at age t"""
        return interpolate(self.fm_table, t)
