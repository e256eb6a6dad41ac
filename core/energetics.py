"""
Energetics module: energy partition and expenditure closure.

Implements:
- FFM energy density rhoFFM(FFM)
- Forbes partition p(FFM, FM) of energy imbalance between FFM and FM
- Age-decaying adaptive thermogenesis δ(t)
- Reference intake sustaining population-reference growth
- Total energy expenditure E(t, FFM, FM)

Balance equations (per individual, kcal/day):

    IntakeRef = EB + K + (22.4 + δ)·FFMref + (4.5 + δ)·FMref
              + 230/rhoFFMref·(pref·EB + G) + 180/rhoFM·((1 - pref)·EB - G)

    E·(1 + a) = K + (22.4 + δ)·FFM + (4.5 + δ)·FM + 0.24·(I - IntakeRef)
              + a·I + G·(230/rhoFFM - 180/rhoFM)

    a = 230/rhoFFM·p + 180/rhoFM·(1 - p)

where EB is the energy-balance impact curve and G the growth dynamic curve.

References:
- Hall et al. (2013) Lancet Diabetes Endocrinol 1(2):97-105
- Forbes (1987) - body fat content and lean mass partition
"""

import numpy as np
from typing import Dict, Optional

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))
from config.parameters import EnergyConstants, ParameterBundle
from core.exceptions import DegeneratePartitionError
from core.growth import GrowthCurves
from core.intake import IntakeModel
from core.reference import ReferenceCurves


class EnergyBalance:
    """
    Energy partition and expenditure for a cohort.

    Holds only read-only collaborators; every method is a pure function of
    its arguments.
    """

    def __init__(self,
                 params: ParameterBundle,
                 reference: ReferenceCurves,
                 intake: IntakeModel,
                 energy: Optional[EnergyConstants] = None):
        """
        Args:
            params: Sex-dependent ParameterBundle
            reference: ReferenceCurves for the cohort
            intake: Intake schedule
            energy: EnergyConstants (defaults if None)
        """
        self.params = params
        self.reference = reference
        self.intake = intake
        self.energy = energy if energy is not None else EnergyConstants()
        self.growth = GrowthCurves(params)

    def rho_ffm(self, ffm) -> np.ndarray:
        """Energy density of fat-free mass [kcal/kg]"""
        return self.energy.rho_ffm_slope * np.asarray(ffm, dtype=float) + self.energy.rho_ffm_intercept

    def partition(self, ffm, fm) -> np.ndarray:
        """
        Fraction of energy imbalance routed to fat-free mass.

            C = 10.4 × rhoFFM / rhoFM
            p = C / (C + FM)

        Raises:
            DegeneratePartitionError: If C + FM == 0 for any individual
        """
        fm = np.asarray(fm, dtype=float)
        C = self.energy.partition_scale * self.rho_ffm(ffm) / self.energy.rho_fm
        denom = C + fm
        if np.any(denom == 0):
            raise DegeneratePartitionError(
                "Energy partition undefined: C + FM == 0 "
                f"for individuals {np.flatnonzero(denom == 0).tolist()}"
            )
        return C / denom

    def delta(self, t) -> np.ndarray:
        """Adaptive thermogenesis offset [kcal/kg/day]"""
        e = self.energy
        t = np.asarray(t, dtype=float)
        return e.deltamin + (self.params.deltamax - e.deltamin) / (1.0 + np.power(t / e.P, e.h))

    def _deposition_weight(self, rho_ffm: np.ndarray, p: np.ndarray) -> np.ndarray:
        e = self.energy
        return e.ffm_deposition_cost / rho_ffm * p + e.fm_deposition_cost / e.rho_fm * (1.0 - p)

    def _maintenance(self, t, ffm, fm) -> np.ndarray:
        e = self.energy
        delta = self.delta(t)
        return self.params.K + (e.ffm_maintenance + delta) * ffm + (e.fm_maintenance + delta) * fm

    def intake_reference(self, t) -> np.ndarray:
        """
        Intake that sustains the population-reference trajectory at age t.

        Independent of the simulated masses.
        """
        e = self.energy
        eb = self.growth.eb_impact(t)
        growth = self.growth.growth_dynamic(t)
        ffm_ref = self.reference.ffm(t)
        fm_ref = self.reference.fm(t)
        p = self.partition(ffm_ref, fm_ref)
        rho_ffm = self.rho_ffm(ffm_ref)

        return (eb + self._maintenance(t, ffm_ref, fm_ref)
                + e.ffm_deposition_cost / rho_ffm * (p * eb + growth)
                + e.fm_deposition_cost / e.rho_fm * ((1.0 - p) * eb - growth))

    def expenditure(self, t, ffm, fm, intake=None) -> np.ndarray:
        """
        Total energy expenditure [kcal/day].

        Args:
            t: Ages [years]
            ffm: Fat-free mass [kg]
            fm: Fat mass [kg]
            intake: Intake at t; evaluated from the intake schedule if None
        """
        e = self.energy
        if intake is None:
            intake = self.intake(t)
        p = self.partition(ffm, fm)
        rho_ffm = self.rho_ffm(ffm)
        growth = self.growth.growth_dynamic(t)
        weight = self._deposition_weight(rho_ffm, p)

        expend = (self._maintenance(t, ffm, fm)
                  + e.tef * (intake - self.intake_reference(t))
                  + weight * intake
                  + growth * (e.ffm_deposition_cost / rho_ffm - e.fm_deposition_cost / e.rho_fm))
        return expend / (1.0 + weight)

    def energy_budget(self, t, ffm, fm) -> Dict[str, np.ndarray]:
        """
        Compute the complete energy budget at one state.

        Returns:
            Dictionary of per-individual vectors
        """
        intake = self.intake(t)
        expend = self.expenditure(t, ffm, fm, intake=intake)
        return {
            'intake_kcal_day': intake,
            'intake_reference_kcal_day': self.intake_reference(t),
            'expenditure_kcal_day': expend,
            'imbalance_kcal_day': intake - expend,
            'partition': self.partition(ffm, fm),
            'growth_kcal_day': self.growth.growth_dynamic(t),
            'rho_ffm': self.rho_ffm(ffm),
        }
