"""
Growth module: age-dependent growth and energy-balance curves.

All three curves share one family, an exponential decay plus two Gaussian
bumps:

    f(t) = A·exp(-(t - tA)/tauA)
         + B·exp(-½((t - tB)/tauB)²)
         + D·exp(-½((t - tD)/tauD)²)

with t the age in years. Coefficient sets:
- growth dynamic: tissue deposition cost entering dFFM/dt and dFM/dt
- growth impact: growth contribution to the reference intake
- energy balance impact: surplus that sustains reference growth

References:
- Hall et al. (2013) - Appendix, growth and energy balance terms
"""

import numpy as np

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))
from config.parameters import CurveCoefficients, ParameterBundle


def growth_curve(t, c: CurveCoefficients) -> np.ndarray:
    """Evaluate the shared curve family at age t [years]."""
    t = np.asarray(t, dtype=float)
    return (c.A * np.exp(-(t - c.tA) / c.tauA)
            + c.B * np.exp(-0.5 * ((t - c.tB) / c.tauB) ** 2)
            + c.D * np.exp(-0.5 * ((t - c.tD) / c.tauD) ** 2))


class GrowthCurves:
    """
    The three named curve instances for a cohort.
    """

    def __init__(self, params: ParameterBundle):
        self.params = params

    def growth_dynamic(self, t) -> np.ndarray:
        return growth_curve(t, self.params.growth)

    def growth_impact(self, t) -> np.ndarray:
        return growth_curve(t, self.params.growth_impact)

    def eb_impact(self, t) -> np.ndarray:
        return growth_curve(t, self.params.eb_impact)
