"""Time series visualization."""

import matplotlib.pyplot as plt
import numpy as np


def plot_trajectories(trace, individuals=None, save_path=None):
    """Plot standard 3-panel body-composition trajectories against age."""
    fig, axes = plt.subplots(3, 1, figsize=(12, 9), sharex=True)

    if individuals is None:
        individuals = range(trace.n_individuals)

    for i in individuals:
        age = trace.age[i]
        axes[0].plot(age, trace.body_weight[i], 'b-', alpha=0.7)
        axes[1].plot(age, trace.fat_free_mass[i], 'g-', alpha=0.7)
        axes[2].plot(age, trace.fat_mass[i], color='orange', alpha=0.7)

    # Weight
    axes[0].set_ylabel('Body weight (kg)')
    axes[0].set_title('Body Weight')
    axes[0].grid(True, alpha=0.3)

    # FFM
    axes[1].set_ylabel('FFM (kg)')
    axes[1].set_title('Fat-Free Mass')
    axes[1].grid(True, alpha=0.3)

    # FM
    axes[2].set_ylabel('FM (kg)')
    axes[2].set_xlabel('Age (years)')
    axes[2].set_title('Fat Mass')
    axes[2].grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig, axes


def plot_cohort_band(trace, save_path=None):
    """Plot cohort mean body weight with 5th-95th percentile band over time."""
    fig, ax = plt.subplots(figsize=(10, 6))

    days = trace.time
    weight = trace.body_weight
    ax.plot(days, weight.mean(axis=0), 'b-', linewidth=2, label='Mean')
    ax.fill_between(days,
                    np.percentile(weight, 5, axis=0),
                    np.percentile(weight, 95, axis=0),
                    alpha=0.3, label='5th-95th percentile')
    ax.set_xlabel('Days since start')
    ax.set_ylabel('Body weight (kg)')
    ax.set_title(f'Cohort Body Weight (n={trace.n_individuals})')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig, ax


if __name__ == "__main__":
    """Demo: trajectories for one boy and one girl"""
    import sys
    from pathlib import Path
    sys.path.insert(0, str(Path(__file__).parent.parent))

    from config.scenarios import get_scenario
    from core.cohort import Cohort
    from core.integrator import ChildWeightIntegrator
    from core.intake import LogisticIntake

    print("Running two-child simulation for trajectory visualization...")
    cohort = Cohort(age=[8.0, 8.0], sex=[0, 1], bmi_category=[2, 2],
                    ffm=[20.7, 20.0], fm=[4.0, 4.9])
    scenario = get_scenario('ADOLESCENT_RAMP')
    integrator = ChildWeightIntegrator(cohort, LogisticIntake(scenario.intake))

    trace = integrator.simulate(5 * 365)
    print(f"  Duration: {len(trace.time)} timesteps")

    output_dir = Path(__file__).parent.parent / 'output'
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / 'trajectories.png'

    plot_trajectories(trace, save_path=str(output_path))
    print(f"Saved: {output_path}")
