#!/usr/bin/env python3
"""Run intake asymptote sweep (K) for one child per BMI category."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from analysis.sweep import intake_sweep
from config.reference_tables import FFM, FM, get_table
from core.cohort import Cohort
import matplotlib.pyplot as plt
import numpy as np

# Girls at their age-10 reference composition, one per BMI category
ffm0 = get_table(0, FFM)[8, :, 1]
fm0 = get_table(0, FM)[8, :, 1]

K_values = np.linspace(1500, 3200, 12)
labels = ['Underweight', 'Normal', 'Overweight', 'Obese']

fig, ax = plt.subplots(figsize=(10, 6))

print("Running intake sweep...")
for category, label in enumerate(labels, start=1):
    cohort = Cohort(age=[10.0], sex=[1], bmi_category=[category],
                    ffm=[ffm0[category - 1]], fm=[fm0[category - 1]])
    results = intake_sweep(cohort, 'K', K_values, days=365)
    ax.plot(K_values, results['weight_mean'], 'o-', label=label)
    print(f"  {label}: {results['weight_mean'][0]:.1f} → {results['weight_mean'][-1]:.1f} kg")

ax.set_xlabel('Intake asymptote K (kcal/day)')
ax.set_ylabel('Weight after one year (kg)')
ax.set_title('Final Weight vs Intake')
ax.legend()
ax.grid(True, alpha=0.3)
plt.tight_layout()

output_dir = Path(__file__).parent.parent / 'output'
output_dir.mkdir(exist_ok=True)
output_path = output_dir / 'intake_sweep.png'
plt.savefig(output_path, dpi=150)
print(f"\nSaved: {output_path}")
