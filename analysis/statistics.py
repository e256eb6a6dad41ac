"""Statistical summaries of simulation traces."""

import numpy as np

PERCENTILES = [5, 25, 50, 75, 95]


def _summary(prefix, values):
    return {
        f'{prefix}_mean': float(np.mean(values)),
        f'{prefix}_std': float(np.std(values)),
        f'{prefix}_min': float(np.min(values)),
        f'{prefix}_max': float(np.max(values)),
        f'{prefix}_percentiles': {p: float(np.percentile(values, p)) for p in PERCENTILES},
    }


def trace_statistics(trace):
    """
    Compute cohort statistics at the end of a trace.

    Args:
        trace: SimulationTrace

    Returns:
        stats: Final weight, FFM and FM summaries, weight change and
            fat fraction
    """
    final_weight = trace.body_weight[:, -1]
    weight_change = final_weight - trace.body_weight[:, 0]
    fat_fraction = trace.fat_mass[:, -1] / final_weight

    stats = {
        'n_individuals': trace.n_individuals,
        'days': float(trace.time[-1]),
        'weight_change_mean': float(np.mean(weight_change)),
        'weight_change_std': float(np.std(weight_change)),
        'fat_fraction_mean': float(np.mean(fat_fraction)),
        'correct_values': trace.correct_values,
    }
    stats.update(_summary('weight', final_weight))
    stats.update(_summary('FFM', trace.fat_free_mass[:, -1]))
    stats.update(_summary('FM', trace.fat_mass[:, -1]))
    return stats


def confidence_intervals(data, confidence=0.95):
    """Compute percentile confidence intervals."""
    alpha = 1 - confidence
    lower = np.percentile(data, alpha/2 * 100)
    upper = np.percentile(data, (1 - alpha/2) * 100)
    return lower, upper


if __name__ == "__main__":
    """Demo: statistics for a mixed cohort under the default scenario"""
    import sys
    from pathlib import Path
    sys.path.insert(0, str(Path(__file__).parent.parent))

    from config.scenarios import get_scenario
    from core.cohort import Cohort
    from core.integrator import ChildWeightIntegrator
    from core.intake import LogisticIntake

    rng = np.random.RandomState(42)
    n = 40
    cohort = Cohort(
        age=rng.uniform(6, 12, n),
        sex=rng.randint(0, 2, n),
        bmi_category=rng.randint(1, 5, n),
        ffm=rng.uniform(18, 30, n),
        fm=rng.uniform(3, 10, n),
    )
    scenario = get_scenario('MAINTENANCE')
    integrator = ChildWeightIntegrator(cohort, LogisticIntake(scenario.intake))

    print(f"Running {scenario.name} for {n} individuals (365 days)...")
    trace = integrator.simulate(365)
    stats = trace_statistics(trace)
    lower, upper = confidence_intervals(trace.final_weight())

    print(f"\nCohort Statistics:")
    print(f"  Final weight: {stats['weight_mean']:.1f} ± {stats['weight_std']:.1f} kg")
    print(f"  95% interval: [{lower:.1f}, {upper:.1f}] kg")
    print(f"  Weight change: {stats['weight_change_mean']:+.1f} kg")
    print(f"  Fat fraction: {stats['fat_fraction_mean']:.1%}")
