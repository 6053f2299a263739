"""
Choice Model Coefficients
=========================
Pre-estimated mixed-logit coefficients for each population segment.

Utilities are logit coefficients relative to the reference level of each
attribute (reference levels carry 0 and may be omitted). The cost weight is
per AUD per participant per month.

NOTE: values are placeholders in the range reported for loneliness
interventions; replace with the LonelyLess DCE estimates before use.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping


def _frozen(weights: Dict[str, Dict[str, float]]) -> Mapping[str, Mapping[str, float]]:
    return MappingProxyType({
        attribute: MappingProxyType(dict(levels))
        for attribute, levels in weights.items()
    })


@dataclass(frozen=True)
class CoefficientSet:
    """
    Utility weights for one population segment.

    Utility of the programme alternative:
        U_prog = ASC_prog + Σ β_level + β_cost × cost
    Utility of opting out:
        U_opt = ASC_opt
    """
    label: str
    asc_programme: float = 0.0
    asc_opt_out: float = 0.0
    attribute_weights: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    cost_weight: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'attribute_weights', _frozen(self.attribute_weights))


def lookup_weight(coefficients: CoefficientSet, attribute: str, level) -> float:
    """
    Weight of an attribute level, 0.0 when the attribute or level is unknown.

    Unknown levels are treated as the reference level on purpose: form input
    that does not match the coefficient table must still produce a result.
    """
    levels = coefficients.attribute_weights.get(attribute, {})
    return float(levels.get(level, 0.0) or 0.0)


AVERAGE = CoefficientSet(
    label="Average preference model",
    asc_programme=0.25,
    asc_opt_out=-0.5,
    attribute_weights={
        'support_type': {
            'community_engagement': 0.30,
            'psychological_counselling': 0.25,
            'virtual_reality': -0.35,
        },
        'delivery_mode': {'virtual': -0.40, 'hybrid': -0.10},
        'frequency': {'weekly': 0.35, 'daily': 0.10},
        'duration': {'four_hours': -0.15},
        'accessibility': {'local_area': 0.30, 'at_home': 0.45},
    },
    cost_weight=-0.0002,
)

SUPPORTIVE = CoefficientSet(
    label="Supportive group",
    asc_programme=0.4,
    asc_opt_out=-1.0,
    attribute_weights={
        'support_type': {
            'community_engagement': 0.45,
            'psychological_counselling': 0.40,
            'virtual_reality': -0.20,
        },
        'delivery_mode': {'virtual': -0.30, 'hybrid': 0.05},
        'frequency': {'weekly': 0.45, 'daily': 0.25},
        'duration': {'four_hours': -0.05},
        'accessibility': {'local_area': 0.35, 'at_home': 0.55},
    },
    cost_weight=-0.0003,
)

CONSERVATIVE = CoefficientSet(
    label="More cautious group",
    asc_programme=0.1,
    asc_opt_out=0.5,
    attribute_weights={
        'support_type': {
            'community_engagement': 0.10,
            'psychological_counselling': 0.05,
            'virtual_reality': -0.50,
        },
        'delivery_mode': {'virtual': -0.55, 'hybrid': -0.25},
        'frequency': {'weekly': 0.15, 'daily': -0.10},
        'duration': {'four_hours': -0.30},
        'accessibility': {'local_area': 0.15, 'at_home': 0.20},
    },
    cost_weight=-0.0001,
)

MODERATE_LONELINESS = CoefficientSet(
    label="Moderately lonely",
    asc_programme=0.3,
    asc_opt_out=-0.3,
    attribute_weights={
        'support_type': {
            'community_engagement': 0.35,
            'psychological_counselling': 0.20,
            'virtual_reality': -0.30,
        },
        'delivery_mode': {'virtual': -0.35, 'hybrid': -0.05},
        'frequency': {'weekly': 0.30, 'daily': 0.05},
        'duration': {'four_hours': -0.10},
        'accessibility': {'local_area': 0.25, 'at_home': 0.40},
    },
    cost_weight=-0.00025,
)

SEVERE_LONELINESS = CoefficientSet(
    label="Severely lonely",
    asc_programme=0.5,
    asc_opt_out=-0.2,
    attribute_weights={
        'support_type': {
            'community_engagement': 0.20,
            'psychological_counselling': 0.50,
            'virtual_reality': -0.15,
        },
        'delivery_mode': {'virtual': -0.20, 'hybrid': 0.10},
        'frequency': {'weekly': 0.40, 'daily': 0.30},
        'duration': {'four_hours': 0.05},
        'accessibility': {'local_area': 0.30, 'at_home': 0.60},
    },
    cost_weight=-0.00015,
)

SEGMENTS: Mapping[str, CoefficientSet] = MappingProxyType({
    'average': AVERAGE,
    'supportive': SUPPORTIVE,
    'conservative': CONSERVATIVE,
    'moderate_loneliness': MODERATE_LONELINESS,
    'severe_loneliness': SEVERE_LONELINESS,
})

DEFAULT_SEGMENT = 'average'


def get_coefficients(segment: str, table: Mapping[str, CoefficientSet] = SEGMENTS) -> CoefficientSet:
    """Coefficient set for a segment key, the average model when unknown."""
    return table.get(segment, table[DEFAULT_SEGMENT])
