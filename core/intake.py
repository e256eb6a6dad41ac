"""
Intake module: caloric intake schedules.

Two variants, chosen at construction and fixed for the run:
- TabulatedIntake: a days × individuals matrix indexed by elapsed
  timesteps since the cohort's starting age
- LogisticIntake: generalized logistic (Richards) curve of age,
  identical for every individual

Both are callables mapping a vector of ages [years] to intake [kcal/day].
"""

import logging
from typing import Optional
import numpy as np
import pandas as pd
from pathlib import Path

import sys
sys.path.append(str(Path(__file__).parent.parent))
from config.parameters import LogisticIntakeParams
from core.exceptions import IntakeHorizonError

logger = logging.getLogger(__name__)

# Absorbs round-off in stage ages so a completed step is never floored away
_ROW_TOLERANCE = 1e-6


class IntakeModel:
    """Base class for intake schedules."""

    def __call__(self, t) -> np.ndarray:
        return self.intake(t)

    def intake(self, t) -> np.ndarray:
        raise NotImplementedError

    def check_horizon(self, n_steps: int) -> None:
        """Raise IntakeHorizonError if n_steps cannot be simulated."""
        pass


class TabulatedIntake(IntakeModel):
    """
    Precomputed daily intake, one row per timestep and one column per individual.

    Row lookup:
        row = floor(365 × (t - age0) / dt)

    where age0 is the starting age of the cohort's first individual. The
    cohort shares one time axis, so the elapsed time is the same for all.
    """

    def __init__(self, table, start_age, dt: float):
        """
        Args:
            table: Intake [kcal/day], shape (rows, n_individuals)
            start_age: Starting ages of the cohort [years]
            dt: Timestep [days]
        """
        table = np.asarray(table, dtype=float)
        if table.ndim == 1:
            table = table[:, None]
        self.table = table
        self.start_age = float(np.atleast_1d(np.asarray(start_age, dtype=float))[0])
        self.dt = dt

    @property
    def n_rows(self) -> int:
        return self.table.shape[0]

    def row(self, t) -> int:
        """Table row for age t (first individual's age is used)."""
        t0 = float(np.atleast_1d(np.asarray(t, dtype=float))[0])
        return int(np.floor(365.0 * (t0 - self.start_age) / self.dt + _ROW_TOLERANCE))

    def intake(self, t) -> np.ndarray:
        row = self.row(t)
        if row < 0 or row >= self.n_rows:
            raise IntakeHorizonError(
                f"Insufficient intake horizon: row {row} requested, "
                f"table has {self.n_rows} rows"
            )
        return self.table[row, :]

    def check_horizon(self, n_steps: int) -> None:
        """
        The RK4 stage at the end of step n reads row n, so the table must
        hold n_steps + 1 rows.
        """
        required = n_steps + 1
        if self.n_rows < required:
            raise IntakeHorizonError(
                f"Insufficient intake horizon: {n_steps} steps need "
                f"{required} rows, table has {self.n_rows}"
            )


class LogisticIntake(IntakeModel):
    """
    Generalized logistic intake curve.

        Intake(t) = A + (K - A) / (C + Q·exp(-B·t))^(1/nu)
    """

    def __init__(self, params: Optional[LogisticIntakeParams] = None):
        self.params = params if params is not None else LogisticIntakeParams()

    def intake(self, t) -> np.ndarray:
        p = self.params
        t = np.asarray(t, dtype=float)
        return p.A + (p.K - p.A) / np.power(p.C + p.Q * np.exp(-p.B * t), 1.0 / p.nu)


def load_intake_table(csv_path: str) -> np.ndarray:
    """
    Load a tabulated intake from CSV.

    Expected layout: one column per individual, one row per day, intake in
    kcal/day. A header row is required; column names are ignored.

    Args:
        csv_path: Path to CSV file

    Returns:
        Array of shape (days, n_individuals)

    Raises:
        FileNotFoundError: If CSV file doesn't exist
    """
    if not Path(csv_path).exists():
        raise FileNotFoundError(f"Intake table not found: {csv_path}")

    df = pd.read_csv(csv_path)
    logger.info("Loaded intake table: %d days × %d individuals from %s",
                df.shape[0], df.shape[1], csv_path)
    return df.to_numpy(dtype=float)
