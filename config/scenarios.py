"""
Pre-defined generalized logistic intake scenarios.

Scenario parameters are loaded dynamically from config/data/intake_scenarios.csv,
which ships with the package.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from pathlib import Path

from config.parameters import LogisticIntakeParams


@dataclass
class Scenario:
    """Intake scenario definition"""
    key: str
    name: str
    intake: LogisticIntakeParams


DATA_PATH = Path(__file__).parent / 'data' / 'intake_scenarios.csv'

# Cache for loaded scenarios
_SCENARIOS_CACHE: Optional[Dict[str, Scenario]] = None


def _load_scenarios_from_csv(data_path: Path = DATA_PATH) -> Dict[str, Scenario]:
    """Load scenario parameters from CSV file."""
    import pandas as pd

    if not data_path.exists():
        raise FileNotFoundError(f"Intake scenarios not found at {data_path}")

    df = pd.read_csv(data_path)

    scenarios = {}
    for row in df.itertuples(index=False):
        key = str(row.key).upper()
        scenarios[key] = Scenario(
            key=key,
            name=row.name,
            intake=LogisticIntakeParams(
                K=float(row.K),
                Q=float(row.Q),
                A=float(row.A),
                B=float(row.B),
                nu=float(row.nu),
                C=float(row.C),
            ),
        )

    return scenarios


def get_scenarios() -> Dict[str, Scenario]:
    """Get all scenarios, loading from CSV if needed."""
    global _SCENARIOS_CACHE

    if _SCENARIOS_CACHE is None:
        _SCENARIOS_CACHE = _load_scenarios_from_csv()

    return _SCENARIOS_CACHE


def get_scenario(name: str) -> Scenario:
    """Get scenario by key (case-insensitive)."""
    scenarios = get_scenarios()
    return scenarios[name.upper()]


def __getattr__(name):
    if name == 'SCENARIOS':
        return get_scenarios()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
