"""Body-composition phase space visualization."""

import matplotlib.pyplot as plt
import numpy as np


def plot_composition_phase(trace, save_path=None):
    """FFM-FM phase portrait, one trajectory per individual, colored by age."""
    fig, ax = plt.subplots(figsize=(8, 7))

    for i in range(trace.n_individuals):
        ax.plot(trace.fat_free_mass[i], trace.fat_mass[i], 'k-', alpha=0.2, linewidth=0.5)
        points = ax.scatter(trace.fat_free_mass[i, ::30], trace.fat_mass[i, ::30],
                            c=trace.age[i, ::30], cmap='viridis', s=8)

    ax.scatter(trace.fat_free_mass[:, 0], trace.fat_mass[:, 0],
               marker='o', facecolors='none', edgecolors='r', label='Start')
    plt.colorbar(points, ax=ax, label='Age (years)')
    ax.set_xlabel('Fat-free mass (kg)')
    ax.set_ylabel('Fat mass (kg)')
    ax.set_title('FFM-FM Phase Space')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig, ax


def plot_fat_fraction(trace, save_path=None):
    """Fat fraction FM / weight against age."""
    fig, ax = plt.subplots(figsize=(10, 6))

    fraction = trace.fat_mass / trace.body_weight
    for i in range(trace.n_individuals):
        ax.plot(trace.age[i], 100 * fraction[i], alpha=0.6)

    ax.set_xlabel('Age (years)')
    ax.set_ylabel('Body fat (%)')
    ax.set_title('Fat Fraction')
    ax.grid(True, alpha=0.3)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig, ax


if __name__ == "__main__":
    """Demo: phase portraits across BMI categories"""
    import sys
    from pathlib import Path
    sys.path.insert(0, str(Path(__file__).parent.parent))

    from config.reference_tables import FFM, FM, get_table
    from config.scenarios import get_scenario
    from core.cohort import Cohort
    from core.integrator import ChildWeightIntegrator
    from core.intake import LogisticIntake

    # Start every category at its age-10 male reference composition
    ffm0 = get_table(0, FFM)[8, :, 0]
    fm0 = get_table(0, FM)[8, :, 0]
    cohort = Cohort(age=np.full(4, 10.0), sex=np.zeros(4),
                    bmi_category=[1, 2, 3, 4], ffm=ffm0, fm=fm0)

    scenario = get_scenario('DEFAULT')
    integrator = ChildWeightIntegrator(cohort, LogisticIntake(scenario.intake))
    trace = integrator.simulate(3 * 365)

    print("Creating phase portraits...")

    output_dir = Path(__file__).parent.parent / 'output'
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / 'composition_phase.png'

    plot_composition_phase(trace, str(output_path))
    print(f"Saved: {output_path}")

    output_path_fat = output_dir / 'fat_fraction.png'
    plot_fat_fraction(trace, str(output_path_fat))
    print(f"Saved: {output_path_fat}")
