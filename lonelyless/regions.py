import math
import numbers
import warnings
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import numpy as np
import pandas as pd


# Cost-of-living multipliers relative to the national average
DEFAULT_REGION_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    'NSW': 1.10,
    'VIC': 1.05,
    'QLD': 1.00,
    'SA': 0.98,
    'WA': 1.08,
    'TAS': 0.97,
    'ACT': 1.12,
    'NT': 1.15,
})


class RegionAdjustment:
    """
    Read-only lookup of regional cost multipliers.

    Formula: cost_adj = cost × M(region)
    where M(region) = 1.0 for unknown or missing regions.
    """

    def __init__(self, multipliers: Optional[Mapping[str, float]] = None):
        """Initialize with a region -> multiplier table (default table if None)."""
        if multipliers is None:
            multipliers = DEFAULT_REGION_MULTIPLIERS
        self._multipliers = MappingProxyType(
            {str(code).upper(): float(value) for code, value in multipliers.items()}
        )

    @property
    def multipliers(self) -> Mapping[str, float]:
        return self._multipliers

    def multiplier(self, region_code: Optional[str]) -> float:
        if not region_code:
            return 1.0
        return self._multipliers.get(region_code.upper(), 1.0)

    def adjust_cost(self, cost: float, region_code: Optional[str], enabled: bool = True) -> float:
        """Apply the region multiplier to a cost when adjustment is enabled."""
        if not enabled:
            return cost
        multiplier = self.multiplier(region_code)
        if multiplier == 1.0:
            return cost
        return cost * multiplier


def load_region_multipliers(path: Union[str, Path]) -> RegionAdjustment:
    """
    Load region multipliers from a JSON file shaped {"NSW": 1.1, ...}.

    Any failure (missing file, malformed JSON, not a JSON object,
    non-numeric or non-positive values) falls back to the built-in table
    with a warning.

    Args:
        path: Path to the JSON file

    Returns:
        RegionAdjustment built from the file, or from the default table
    """
    try:
        series = pd.read_json(Path(path), typ='series', dtype=False, convert_axes=False)
        table = {}
        for code, value in series.items():
            # JSON arrays load with integer positions as labels
            if not isinstance(code, str):
                raise ValueError("expected a JSON object of region codes")
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
                raise ValueError(f"non-numeric multiplier {value!r} for region {code!r}")
            value = float(value)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"invalid multiplier {value!r} for region {code!r}")
            table[str(code)] = value
        if not table:
            raise ValueError("region table is empty")
    except Exception as e:
        warnings.warn(f"Could not load region multipliers from {path}: {e}. Using built-in table.")
        return RegionAdjustment()

    return RegionAdjustment(table)
