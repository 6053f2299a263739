from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from .parameters import ModelParameters


# Levels per attribute; the first entry is the reference level (utility 0)
ATTRIBUTE_LEVELS: Mapping[str, tuple] = MappingProxyType({
    'support_type': ('peer_support', 'community_engagement',
                     'psychological_counselling', 'virtual_reality'),
    'delivery_mode': ('in_person', 'virtual', 'hybrid'),
    'frequency': ('monthly', 'weekly', 'daily'),
    'duration': ('two_hours', 'four_hours'),
    'accessibility': ('wider_community', 'local_area', 'at_home'),
})

ATTRIBUTES = tuple(ATTRIBUTE_LEVELS)

REFERENCE_LEVELS: Mapping[str, str] = MappingProxyType(
    {attribute: levels[0] for attribute, levels in ATTRIBUTE_LEVELS.items()}
)

LEVEL_LABELS: Mapping[str, str] = MappingProxyType({
    'peer_support': 'peer support',
    'community_engagement': 'community engagement',
    'psychological_counselling': 'psychological counselling',
    'virtual_reality': 'virtual reality',
    'in_person': 'in person',
    'virtual': 'virtual',
    'hybrid': 'hybrid (in person and online)',
    'monthly': 'monthly',
    'weekly': 'weekly',
    'daily': 'daily',
    'two_hours': '2-hour sessions',
    'four_hours': '4-hour sessions',
    'wider_community': 'in the wider community',
    'local_area': 'in the local area',
    'at_home': 'at home',
})


class ConfigurationError(ValueError):
    """Raised when a programme configuration is contradictory or out of range."""

    def __init__(self, message: str, attribute: Optional[str] = None):
        super().__init__(message)
        self.attribute = attribute


@dataclass(frozen=True)
class Configuration:
    """
    One programme design as selected by the user.

    Categorical levels are plain strings; a level missing from the
    coefficient table contributes zero utility (reference level).
    """
    support_type: str = REFERENCE_LEVELS['support_type']
    delivery_mode: str = REFERENCE_LEVELS['delivery_mode']
    frequency: str = REFERENCE_LEVELS['frequency']
    duration: str = REFERENCE_LEVELS['duration']
    accessibility: str = REFERENCE_LEVELS['accessibility']

    unit_cost: float = 0.0               # per participant per month
    region_code: Optional[str] = None
    apply_region_adjustment: bool = False

    participants_per_group: int = 0
    number_of_groups: int = 0
    duration_periods: int = 12           # months
    include_opportunity_cost: bool = True

    name: str = ''
    notes: str = ''

    def levels(self) -> dict:
        """Selected level for each categorical attribute."""
        return {attribute: getattr(self, attribute) for attribute in ATTRIBUTES}

    @property
    def total_participants(self) -> int:
        return self.participants_per_group * self.number_of_groups

    def describe(self) -> str:
        """One-line description of the programme design."""
        lv = {a: LEVEL_LABELS.get(level, str(level)) for a, level in self.levels().items()}
        return (f"{lv['support_type']} delivered {lv['delivery_mode']}, {lv['frequency']}, "
                f"{lv['duration']}, {lv['accessibility']}")


def reference_configuration(**overrides) -> Configuration:
    """Configuration with every attribute at its reference level."""
    return Configuration(**{**REFERENCE_LEVELS, **overrides})


def _resolve_level(attribute: str, selected: Union[str, Iterable[str], None]) -> str:
    if selected is None:
        return REFERENCE_LEVELS[attribute]
    if isinstance(selected, str):
        return selected

    chosen = [level for level in selected if level]
    if not chosen:
        return REFERENCE_LEVELS[attribute]
    if len(set(chosen)) > 1:
        raise ConfigurationError(
            f"Only one {attribute.replace('_', ' ')} can be selected, got: {', '.join(chosen)}",
            attribute=attribute,
        )
    return chosen[0]


def build_configuration(selections: Optional[Mapping[str, Union[str, Iterable[str], None]]] = None,
                        params: Optional[ModelParameters] = None,
                        **values) -> Configuration:
    """
    Build a validated Configuration from form-style input.

    Each attribute in `selections` may be a single level or the collection
    of ticked levels. Ticking more than one level of the same attribute
    (e.g. weekly and monthly) is rejected rather than resolved.

    Args:
        selections: attribute -> selected level(s)
        params: supplies the default programme duration when none is given
        **values: remaining Configuration fields (unit_cost, region_code, ...)

    Returns:
        Configuration

    Raises:
        ConfigurationError: contradictory selections, unknown fields or
            out-of-range numeric values
    """
    selections = dict(selections or {})
    params = params or ModelParameters()
    values.setdefault('duration_periods', params.default_duration_periods)
    unknown = set(selections) - set(ATTRIBUTES)
    unknown |= set(values) - {f.name for f in fields(Configuration)} - set(ATTRIBUTES)
    if unknown:
        raise ConfigurationError(f"Unknown configuration field(s): {', '.join(sorted(unknown))}")

    for attribute in ATTRIBUTES:
        if attribute in values:
            selections.setdefault(attribute, values.pop(attribute))

    levels = {attribute: _resolve_level(attribute, selections.get(attribute))
              for attribute in ATTRIBUTES}

    if values.get('unit_cost', 0) < 0:
        raise ConfigurationError("Cost per participant must be zero or more")
    for count in ('participants_per_group', 'number_of_groups'):
        if values.get(count, 0) < 0:
            raise ConfigurationError(f"{count.replace('_', ' ').capitalize()} must be zero or more")
    for count in ('participants_per_group', 'number_of_groups', 'duration_periods'):
        if count in values:
            if int(values[count]) != values[count]:
                raise ConfigurationError(f"{count.replace('_', ' ').capitalize()} must be a whole number")
            values[count] = int(values[count])
    if 'duration_periods' in values and values['duration_periods'] <= 0:
        raise ConfigurationError("Programme duration must be at least one month")

    return Configuration(**levels, **values)
