"""
Parameter definitions for the child body-composition model.

Sex-specific constants are published regression coefficients; every
constant is stored as a (male, female) pair and blended per individual as

    value = male × (1 - sex) + female × sex

so sex may be any real weight (0 = male, 1 = female).

References:
- Hall et al. (2013) Lancet Diabetes Endocrinol 1(2):97-105 - child model
- Ellis et al. (2000) - reference child body composition
- Deurenberg et al. (1991) - BMI as a measure of body fatness
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Tuple
import numpy as np


class BMICategory(IntEnum):
    """BMI category codes used by the reference tables."""
    UNDERWEIGHT = 1
    NORMAL = 2
    OVERWEIGHT = 3
    OBESE = 4


class ReferenceValues(IntEnum):
    """Published reference table variant."""
    MEAN = 0
    MEDIAN = 1


# (male, female) coefficient pairs
SEX_COEFFICIENTS: Dict[str, Tuple[float, float]] = {
    'K': (800.0, 700.0),
    'deltamax': (19.0, 17.0),

    # Growth dynamic (drives dFFM/dt and dFM/dt directly)
    'A': (3.2, 2.3),
    'B': (9.6, 8.4),
    'D': (10.1, 1.1),
    'tA': (4.7, 4.5),  # years
    'tB': (12.5, 11.7),  # years
    'tD': (15.0, 16.2),  # years
    'tauA': (2.5, 1.0),  # years
    'tauB': (1.0, 0.9),  # years
    'tauD': (1.5, 0.7),  # years

    # Energy balance impact (reference intake only)
    'A_EB': (7.2, 16.5),
    'B_EB': (30.0, 47.0),
    'D_EB': (21.0, 41.0),
    'tA_EB': (5.6, 4.8),
    'tB_EB': (9.8, 9.1),
    'tD_EB': (15.0, 13.5),
    'tauA_EB': (15.0, 7.0),
    'tauB_EB': (1.5, 1.0),
    'tauD_EB': (2.0, 1.5),

    # Growth impact
    'A1': (3.2, 2.3),
    'B1': (9.6, 8.4),
    'D1': (10.0, 1.1),
    'tA1': (4.7, 4.5),
    'tB1': (12.5, 11.7),
    'tD1': (15.0, 16.0),
    'tauA1': (1.0, 1.0),
    'tauB1': (0.94, 0.94),
    'tauD1': (0.69, 0.69),
}

_CURVE_FIELDS = ('A', 'B', 'D', 'tA', 'tB', 'tD', 'tauA', 'tauB', 'tauD')


def sex_blend(male: float, female: float, sex) -> np.ndarray:
    """Linear blend between male and female values."""
    sex = np.asarray(sex, dtype=float)
    return male * (1.0 - sex) + female * sex


@dataclass(frozen=True)
class CurveCoefficients:
    """
    Coefficients of one exponential + two-Gaussian curve.

    f(t) = A·exp(-(t-tA)/tauA) + B·exp(-½((t-tB)/tauB)²) + D·exp(-½((t-tD)/tauD)²)
    """
    A: np.ndarray
    B: np.ndarray
    D: np.ndarray
    tA: np.ndarray
    tB: np.ndarray
    tD: np.ndarray
    tauA: np.ndarray
    tauB: np.ndarray
    tauD: np.ndarray

    @classmethod
    def for_sex(cls, sex, suffix: str = '') -> 'CurveCoefficients':
        values = {name: sex_blend(*SEX_COEFFICIENTS[name + suffix], sex)
                  for name in _CURVE_FIELDS}
        return cls(**values)


@dataclass(frozen=True)
class ParameterBundle:
    """
    Sex-dependent constants resolved for a cohort.

    Every array has one entry per individual. Built once by
    parameters_for_sex() and passed explicitly to every component.
    """
    sex: np.ndarray
    K: np.ndarray
    deltamax: np.ndarray
    growth: CurveCoefficients
    growth_impact: CurveCoefficients
    eb_impact: CurveCoefficients


def parameters_for_sex(sex) -> ParameterBundle:
    """
    Resolve the parameter bundle for a sex vector.

    Args:
        sex: Per-individual sex weight (0 = male, 1 = female)

    Returns:
        Immutable ParameterBundle
    """
    sex = np.atleast_1d(np.asarray(sex, dtype=float))
    return ParameterBundle(
        sex=sex,
        K=sex_blend(*SEX_COEFFICIENTS['K'], sex),
        deltamax=sex_blend(*SEX_COEFFICIENTS['deltamax'], sex),
        growth=CurveCoefficients.for_sex(sex),
        growth_impact=CurveCoefficients.for_sex(sex, '1'),
        eb_impact=CurveCoefficients.for_sex(sex, '_EB'),
    )


@dataclass(frozen=True)
class EnergyConstants:
    """
    Sex-independent energy constants.

    Energies are in kcal/day, densities in kcal/kg.
    """
    rho_fm: float = 9.4 * 1000.0  # Fat tissue energy density
    deltamin: float = 10.0  # Adult adaptive thermogenesis floor
    P: float = 12.0  # Age of half decay of delta [years]
    h: float = 10.0  # Hill exponent of delta decay

    # rhoFFM = slope × FFM + intercept
    rho_ffm_slope: float = 4.3
    rho_ffm_intercept: float = 837.0

    partition_scale: float = 10.4  # Forbes constant in C = 10.4 × rhoFFM / rhoFM
    tef: float = 0.24  # Thermic effect of feeding
    ffm_deposition_cost: float = 230.0
    fm_deposition_cost: float = 180.0
    ffm_maintenance: float = 22.4
    fm_maintenance: float = 4.5


@dataclass
class NumericalParams:
    """
    Integration control parameters.

    Fixed-step RK4; no adaptive step-size control.
    """
    dt: float = 1.0  # Timestep [days]
    days: float = 365.0  # Simulation horizon [days]
    check_values: bool = False  # Flag non-finite/negative masses

    def __post_init__(self):
        assert self.dt > 0, "Timestep must be positive"
        assert self.days >= 0, "Horizon must be non-negative"

    @property
    def n_steps(self) -> int:
        """Total number of timesteps"""
        return int(np.floor(self.days / self.dt))


@dataclass
class LogisticIntakeParams:
    """
    Generalized logistic (Richards) intake curve.

        Intake(t) = A + (K - A) / (C + Q·exp(-B·t))^(1/nu)

    with t the age in years. Defaults reproduce the model's
    published default curve (≈2700 kcal/day for school-age children).
    """
    K: float = 2700.0  # Upper asymptote [kcal/day]
    Q: float = 10.0
    A: float = 3.0  # Lower asymptote [kcal/day]
    B: float = 12.0  # Growth rate [1/year]
    nu: float = 4.0
    C: float = 1.0

    def __post_init__(self):
        assert self.nu != 0, "nu must be non-zero"


@dataclass
class ModelParams:
    """
    Complete model parameter set.
    """
    energy: EnergyConstants = field(default_factory=EnergyConstants)
    numerical: NumericalParams = field(default_factory=NumericalParams)
    intake: LogisticIntakeParams = field(default_factory=LogisticIntakeParams)
    reference_values: ReferenceValues = ReferenceValues.MEAN

    def summary(self) -> str:
        """
        Generate parameter summary string.

        Returns:
            Formatted summary of key parameters
        """
        lines = [
            "=" * 60,
            "CHILD BODY-COMPOSITION MODEL PARAMETERS",
            "=" * 60,
            "",
            "ENERGY:",
            f"  Fat energy density: {self.energy.rho_fm:,.0f} kcal/kg",
            f"  FFM energy density: {self.energy.rho_ffm_slope} × FFM + {self.energy.rho_ffm_intercept:.0f} kcal/kg",
            f"  Thermic effect of feeding: {self.energy.tef:.0%}",
            f"  Adaptive thermogenesis: δ_min={self.energy.deltamin}, P={self.energy.P} yr, h={self.energy.h}",
            "",
            "INTAKE (generalized logistic):",
            f"  K={self.intake.K}, Q={self.intake.Q}, A={self.intake.A}, "
            f"B={self.intake.B}, nu={self.intake.nu}, C={self.intake.C}",
            "",
            "REFERENCE CURVES:",
            f"  Variant: {self.reference_values.name.lower()}",
            "",
            "NUMERICAL:",
            f"  Timestep: {self.numerical.dt:g} days",
            f"  Duration: {self.numerical.days:g} days ({self.numerical.n_steps} steps)",
            f"  Value checks: {'on' if self.numerical.check_values else 'off'}",
            "=" * 60,
        ]
        return "\n".join(lines)


def load_default_params() -> ModelParams:
    """
    Load default parameter set.

    Returns:
        ModelParams with default values
    """
    return ModelParams()


if __name__ == "__main__":
    params = load_default_params()
    print(params.summary())

    bundle = parameters_for_sex([0, 1])
    print("\nSex-specific constants (male, female):")
    print(f"  K: {bundle.K}")
    print(f"  deltamax: {bundle.deltamax}")
    print(f"  Growth amplitude A: {bundle.growth.A}")
