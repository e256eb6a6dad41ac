"""
Reference body-composition tables for children aged 2-18.

Population mean and median fat-free mass (FFM) and fat mass (FM) in kg at
whole-year ages. Ages 2-5 are not stratified by BMI category; from age 6 on
each row holds (male, female) pairs for the underweight, normal, overweight
and obese categories, in that order.

References:
- Fomon et al. (1982) - reference children, birth to 10 years
- Haschke (1989) - body composition during adolescence
- Ellis et al. (2000) - reference child and adolescent models
"""

from typing import Dict, List, Tuple
import numpy as np

from config.parameters import ReferenceValues

MIN_AGE = 2
MAX_AGE = 18
N_ROWS = MAX_AGE - MIN_AGE + 1  # 17

FFM = 'ffm'
FM = 'fm'

_Pair = Tuple[float, float]


def _shared(male: float, female: float) -> List[_Pair]:
    """Row with the same value for every BMI category."""
    return [(male, female)] * 4


def _by_category(*values: float) -> List[_Pair]:
    """Row from (male, female) pairs ordered under, normal, over, obese."""
    return [(values[i], values[i + 1]) for i in range(0, 8, 2)]


_EARLY_FFM = [
    _shared(10.134, 9.477),  # 2
    _shared(12.099, 11.494),  # 3
    _shared(14.0, 13.2),  # 4
    _shared(15.72, 14.86),  # 5
]

_EARLY_FM = [
    _shared(2.456, 2.433),  # 2
    _shared(2.576, 2.606),  # 3
    _shared(2.7, 2.8),  # 4
    _shared(3.66, 4.47),  # 5
]

_MEAN_FFM = _EARLY_FFM + [
    _by_category(13.78, 15.97, 17.59, 15.81, 19.43, 18.59, 21.87, 21.12),  # 6
    _by_category(17.59, 16.89, 18.97, 17.96, 21.84, 21.07, 24.88, 25.64),  # 7
    _by_category(17.84, 18.11, 20.72, 19.99, 25.18, 22.99, 28.81, 28.21),  # 8
    _by_category(19.88, 16.14, 23.46, 22.13, 27.45, 27.50, 32.39, 31.09),  # 9
    _by_category(23.36, 23.89, 25.35, 25.22, 30.94, 31.30, 35.98, 35.88),  # 10
    _by_category(23.89, 21.65, 28.65, 29.40, 33.65, 35.30, 39.31, 39.46),  # 11
    _by_category(27.80, 26.46, 33.08, 32.61, 39.48, 37.21, 44.78, 42.21),  # 12
    _by_category(31.85, 28.45, 38.71, 35.03, 42.83, 39.29, 47.03, 45.01),  # 13
    _by_category(34.02, 34.24, 42.24, 36.52, 48.24, 41.28, 54.66, 46.63),  # 14
    _by_category(34.97, 33.17, 45.14, 38.67, 50.03, 43.47, 55.64, 47.78),  # 15
    _by_category(39.77, 31.70, 47.04, 39.64, 53.71, 45.74, 58.05, 50.88),  # 16
    _by_category(42.10, 33.63, 48.25, 39.85, 55.36, 45.26, 60.13, 50.52),  # 17
    _by_category(44.56, 35.98, 49.11, 40.92, 56.32, 46.59, 61.05, 50.02),  # 18
]

_MEDIAN_FFM = _EARLY_FFM + [
    _by_category(14.58, 14.61, 17.28, 15.67, 19.14, 19.07, 21.68, 20.68),  # 6
    _by_category(18.82, 16.14, 18.78, 17.94, 22.30, 20.92, 24.91, 25.33),  # 7
    _by_category(17.26, 18.20, 20.44, 20.16, 24.75, 22.76, 28.54, 27.93),  # 8
    _by_category(19.30, 16.31, 23.42, 21.85, 26.94, 27.04, 31.99, 30.77),  # 9
    _by_category(23.89, 23.89, 24.99, 25.32, 31.37, 31.09, 35.81, 35.76),  # 10
    _by_category(23.74, 21.20, 28.19, 29.95, 33.20, 35.68, 38.81, 39.30),  # 11
    _by_category(28.13, 25.50, 32.71, 33.00, 38.84, 36.92, 46.35, 42.30),  # 12
    _by_category(32.61, 28.45, 38.70, 35.08, 43.40, 38.67, 47.86, 44.98),  # 13
    _by_category(35.03, 37.22, 42.27, 36.28, 47.71, 41.50, 54.53, 46.94),  # 14
    _by_category(30.64, 32.87, 44.69, 38.99, 50.18, 43.76, 54.58, 47.37),  # 15
    _by_category(41.86, 31.44, 46.71, 39.61, 53.18, 46.38, 57.93, 50.98),  # 16
    _by_category(42.27, 34.11, 48.75, 39.49, 55.31, 45.69, 60.26, 50.13),  # 17
    _by_category(43.32, 35.98, 48.78, 41.66, 57.29, 46.94, 59.68, 49.72),  # 18
]

_MEAN_FM = _EARLY_FM + [
    _by_category(2.02, 2.77, 3.52, 3.99, 4.87, 6.01, 7.34, 9.10),  # 6
    _by_category(2.43, 2.92, 3.70, 4.51, 5.43, 6.79, 8.73, 11.60),  # 7
    _by_category(2.19, 3.02, 3.99, 4.89, 6.30, 7.40, 10.49, 12.71),  # 8
    _by_category(2.54, 2.37, 4.41, 5.23, 6.92, 9.09, 12.56, 14.88),  # 9
    _by_category(2.96, 4.00, 4.63, 6.07, 8.25, 10.95, 13.87, 17.80),  # 10
    _by_category(2.83, 3.62, 5.32, 7.33, 9.06, 12.84, 16.32, 22.61),  # 11
    _by_category(3.20, 4.35, 6.33, 8.59, 11.39, 14.45, 19.77, 24.10),  # 12
    _by_category(3.44, 4.38, 7.79, 9.73, 12.66, 15.46, 21.56, 29.22),  # 13
    _by_category(3.81, 5.44, 8.71, 9.89, 14.96, 16.18, 26.44, 27.85),  # 14
    _by_category(3.98, 5.17, 9.44, 10.85, 16.07, 17.81, 28.15, 29.34),  # 15
    _by_category(4.45, 4.95, 10.04, 11.16, 18.43, 19.81, 30.06, 32.58),  # 16
    _by_category(4.66, 5.19, 10.25, 10.94, 18.50, 19.14, 30.60, 30.37),  # 17
    _by_category(5.07, 5.04, 10.78, 11.02, 19.24, 19.53, 37.55, 31.50),  # 18
]

_MEDIAN_FM = _EARLY_FM + [
    _by_category(2.22, 2.57, 3.44, 3.97, 4.74, 6.00, 6.56, 8.57),  # 6
    _by_category(2.73, 2.93, 3.70, 4.52, 5.52, 6.73, 8.11, 10.80),  # 7
    _by_category(2.02, 3.06, 4.00, 4.99, 6.23, 7.22, 9.35, 11.84),  # 8
    _by_category(2.57, 2.79, 4.46, 4.98, 6.74, 8.82, 11.91, 13.08),  # 9
    _by_category(3.01, 4.01, 4.67, 5.86, 8.33, 10.68, 14.07, 16.46),  # 10
    _by_category(2.76, 3.57, 4.92, 7.33, 8.96, 12.53, 14.80, 20.96),  # 11
    _by_category(3.17, 4.18, 6.25, 8.59, 11.46, 14.09, 19.12, 22.63),  # 12
    _by_category(3.64, 4.38, 7.67, 9.94, 12.15, 14.67, 22.42, 28.20),  # 13
    _by_category(3.77, 5.88, 8.51, 9.54, 14.70, 15.84, 24.80, 25.32),  # 14
    _by_category(3.66, 5.30, 9.04, 10.93, 15.74, 17.67, 25.71, 28.37),  # 15
    _by_category(4.43, 4.99, 9.87, 11.09, 18.88, 19.74, 27.81, 31.11),  # 16
    _by_category(4.40, 5.36, 10.35, 10.43, 17.69, 18.50, 27.69, 29.70),  # 17
    _by_category(5.18, 5.05, 10.44, 11.10, 19.39, 18.70, 31.82, 28.55),  # 18
]

# (variant, channel) -> array [age row, BMI category, sex]
REFERENCE_TABLES: Dict[Tuple[ReferenceValues, str], np.ndarray] = {
    (ReferenceValues.MEAN, FFM): np.array(_MEAN_FFM),
    (ReferenceValues.MEAN, FM): np.array(_MEAN_FM),
    (ReferenceValues.MEDIAN, FFM): np.array(_MEDIAN_FFM),
    (ReferenceValues.MEDIAN, FM): np.array(_MEDIAN_FM),
}

for _table in REFERENCE_TABLES.values():
    _table.setflags(write=False)


def get_table(variant, channel: str) -> np.ndarray:
    """
    Get one reference table.

    Args:
        variant: ReferenceValues.MEAN or ReferenceValues.MEDIAN (0/1)
        channel: 'ffm' or 'fm'

    Returns:
        Read-only array of shape (17, 4, 2)
    """
    return REFERENCE_TABLES[(ReferenceValues(variant), channel)]
