"""
Cohort module: per-individual state arrays.

A cohort is an ordered set of individuals sharing a common time axis.
Every per-individual quantity is a numpy array of length n; position in the
array is the individual's identity for the whole run.
"""

from dataclasses import dataclass
from typing import Iterable, List
import numpy as np

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))
from config.parameters import BMICategory


@dataclass(frozen=True)
class Individual:
    """
    One cohort member.

    Attributes:
        age: Age [years]
        sex: 0 = male, 1 = female
        bmi_category: BMICategory code
        ffm: Fat-free mass [kg]
        fm: Fat mass [kg]
    """
    age: float
    sex: float
    bmi_category: BMICategory
    ffm: float
    fm: float

    @property
    def weight(self) -> float:
        return self.ffm + self.fm


@dataclass
class Cohort:
    """
    Cohort of individuals as equal-length arrays.

    Attributes:
        age: Starting ages [years]
        sex: Sex weights (0 = male, 1 = female)
        bmi_category: BMI category codes (1-4)
        ffm: Initial fat-free mass [kg]
        fm: Initial fat mass [kg]
    """
    age: np.ndarray
    sex: np.ndarray
    bmi_category: np.ndarray
    ffm: np.ndarray
    fm: np.ndarray

    def __post_init__(self):
        self.age = np.atleast_1d(np.asarray(self.age, dtype=float))
        self.sex = np.atleast_1d(np.asarray(self.sex, dtype=float))
        codes = np.atleast_1d(np.asarray(self.bmi_category, dtype=float))
        valid = np.isin(codes, [int(c) for c in BMICategory])
        if not np.all(valid):
            raise ValueError(
                f"BMI category codes must be integers 1-4, got {codes[~valid].tolist()}"
            )
        self.bmi_category = codes.astype(int)
        self.ffm = np.atleast_1d(np.asarray(self.ffm, dtype=float))
        self.fm = np.atleast_1d(np.asarray(self.fm, dtype=float))

        lengths = {len(self.age), len(self.sex), len(self.bmi_category),
                   len(self.ffm), len(self.fm)}
        if len(lengths) != 1:
            raise ValueError(
                f"Cohort arrays must have equal length, got "
                f"age={len(self.age)}, sex={len(self.sex)}, "
                f"bmi_category={len(self.bmi_category)}, "
                f"ffm={len(self.ffm)}, fm={len(self.fm)}"
            )

    @classmethod
    def from_individuals(cls, individuals: Iterable[Individual]) -> 'Cohort':
        members: List[Individual] = list(individuals)
        return cls(
            age=[m.age for m in members],
            sex=[m.sex for m in members],
            bmi_category=[int(m.bmi_category) for m in members],
            ffm=[m.ffm for m in members],
            fm=[m.fm for m in members],
        )

    @property
    def n(self) -> int:
        """Number of individuals"""
        return len(self.age)

    @property
    def weight(self) -> np.ndarray:
        """Initial body weight [kg]"""
        return self.ffm + self.fm

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, i: int) -> Individual:
        return Individual(
            age=float(self.age[i]),
            sex=float(self.sex[i]),
            bmi_category=BMICategory(int(self.bmi_category[i])),
            ffm=float(self.ffm[i]),
            fm=float(self.fm[i]),
        )
