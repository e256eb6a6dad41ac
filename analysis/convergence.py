"""
Step-size convergence check.

The RK4 engine has no adaptive step control, so the choice of dt is left
to the caller. These helpers solve the same ODE with scipy's adaptive
solve_ivp and report how far the fixed-step trace drifts from it.

Only closed-form intakes are supported: a tabulated intake is piecewise
constant on the RK4 grid and has no meaning between grid points.
"""

import logging
from typing import Dict

import numpy as np
from scipy.integrate import solve_ivp

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))
from core.intake import TabulatedIntake

logger = logging.getLogger(__name__)


def reference_solution(integrator, days, rtol=1e-8, atol=1e-10):
    """
    Solve the cohort ODE with an adaptive Runge-Kutta method.

    Args:
        integrator: ChildWeightIntegrator with a closed-form intake
        days: Horizon [days]

    Returns:
        Dict with 'time' (steps + 1,), 'fat_free_mass' and 'fat_mass'
        (n, steps + 1) evaluated on the integrator's time grid
    """
    if isinstance(integrator.intake, TabulatedIntake):
        raise ValueError("Reference solution requires a closed-form intake")

    cohort = integrator.cohort
    n = cohort.n
    n_steps = int(np.floor(days / integrator.dt))
    t_eval = np.arange(n_steps + 1) * integrator.dt

    def rhs(t, y):
        age = cohort.age + t / 365.0
        rates = integrator.mass_rates(age, y[:n], y[n:])
        return np.concatenate([rates.ffm, rates.fm])

    y0 = np.concatenate([cohort.ffm, cohort.fm])
    sol = solve_ivp(rhs, (0.0, t_eval[-1]), y0, method='RK45',
                    t_eval=t_eval, rtol=rtol, atol=atol)
    if not sol.success:
        raise RuntimeError(f"Reference solver failed: {sol.message}")

    return {
        'time': sol.t,
        'fat_free_mass': sol.y[:n],
        'fat_mass': sol.y[n:],
    }


def step_size_error(integrator, days) -> Dict[str, float]:
    """
    Maximum absolute deviation of the RK4 trace from the reference solution.

    Returns:
        Dict with 'ffm_max_error' and 'fm_max_error' [kg]
    """
    trace = integrator.simulate(days)
    ref = reference_solution(integrator, days)

    errors = {
        'ffm_max_error': float(np.max(np.abs(trace.fat_free_mass - ref['fat_free_mass']))),
        'fm_max_error': float(np.max(np.abs(trace.fat_mass - ref['fat_mass']))),
    }
    logger.info("dt=%g days: max |ΔFFM|=%.2e kg, max |ΔFM|=%.2e kg",
                integrator.dt, errors['ffm_max_error'], errors['fm_max_error'])
    return errors
