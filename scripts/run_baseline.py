#!/usr/bin/env python3
"""Run baseline one-year simulation for a 10-year-old boy."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.parameters import BMICategory, ModelParams
from config.scenarios import get_scenario
from core.cohort import Cohort
from core.integrator import ChildWeightIntegrator
import matplotlib.pyplot as plt

params = ModelParams()
params.intake = get_scenario('MAINTENANCE').intake

cohort = Cohort(age=[10.0], sex=[0], bmi_category=[BMICategory.NORMAL],
                ffm=[25.0], fm=[6.0])
integrator = ChildWeightIntegrator.from_params(cohort, params)

print(f"Running baseline (K={params.intake.K:.0f} kcal/day, {params.numerical.days:g} days)")
trace = integrator.simulate(params.numerical.days)

print(f"\nResults:")
print(f"  Weight: {trace.body_weight[0, 0]:.1f} → {trace.body_weight[0, -1]:.1f} kg")
print(f"  FFM: {trace.fat_free_mass[0, 0]:.1f} → {trace.fat_free_mass[0, -1]:.1f} kg")
print(f"  FM: {trace.fat_mass[0, 0]:.1f} → {trace.fat_mass[0, -1]:.1f} kg")

# Quick plot
fig, axes = plt.subplots(3, 1, figsize=(10, 8))
axes[0].plot(trace.age[0], trace.body_weight[0])
axes[0].set_ylabel('Weight (kg)')
axes[1].plot(trace.age[0], trace.fat_free_mass[0])
axes[1].set_ylabel('FFM (kg)')
axes[2].plot(trace.age[0], trace.fat_mass[0])
axes[2].set_ylabel('FM (kg)')
axes[2].set_xlabel('Age (years)')
plt.tight_layout()

# Create output directory and save
output_dir = Path(__file__).parent.parent / 'output'
output_dir.mkdir(exist_ok=True)
output_path = output_dir / 'baseline.png'
plt.savefig(output_path, dpi=150)
print(f"\nSaved: {output_path}")
