import math
from dataclasses import dataclass, replace
from typing import Optional

import pandas as pd

from .choice import ChoiceProbabilityEngine
from .coefficients import CoefficientSet, lookup_weight
from .configuration import ATTRIBUTE_LEVELS, Configuration, reference_configuration
from .parameters import ModelParameters


@dataclass(frozen=True)
class BenefitResult:
    """
    Monetised benefit estimates.

    Fields are None when the corresponding benefit definition was not
    computed or is not applicable (e.g. WTP with a zero cost weight).

    One result holds a single QALY scenario. When several QALY
    definitions are evaluated together, the merged result keeps the
    fields of the last one; each scenario's total stays available in
    its own labelled aggregate.
    """
    wtp_per_participant_per_period: Optional[float] = None
    wtp_per_group: Optional[float] = None
    total_wtp_all_groups: Optional[float] = None
    effective_wtp_all_groups: Optional[float] = None
    qaly_scenario: Optional[str] = None
    engaged_participants: Optional[float] = None
    qaly_gains_total: Optional[float] = None
    monetised_qaly_benefit: Optional[float] = None
    savings_total: Optional[float] = None

    def merge(self, other: 'BenefitResult') -> 'BenefitResult':
        """Combine two results, keeping defined values from `other`."""
        updates = {name: value for name, value in vars(other).items() if value is not None}
        return replace(self, **updates)


class BenefitModel:
    """
    Benefit estimates under three independent definitions.

    - WTP: preference-based value of the attribute bundle relative to the
      reference bundle (baseline-differential method)
    - QALY: health gains of engaged participants valued per QALY
    - Savings: avoided health-service use of engaged participants

    The definitions answer different questions and are never summed.
    """

    def __init__(self, params: Optional[ModelParameters] = None):
        """Initialize with model parameters."""
        self.params = params or ModelParameters()
        self._utility = ChoiceProbabilityEngine(self.params)

    def calculate_wtp_per_period(self,
                                 config: Configuration,
                                 coefficients: CoefficientSet) -> Optional[float]:
        """
        Willingness to pay per participant per period.

        Formula: WTP = -(V_attr(config) - V_attr(reference)) / β_cost

        Returns:
            WTP in currency units, or None when β_cost is 0
        """
        cost_weight = coefficients.cost_weight or 0.0
        if cost_weight == 0:
            return None

        current = self._utility.calculate_base_utility(config, coefficients)
        reference = self._utility.calculate_base_utility(reference_configuration(), coefficients)
        wtp = -(current - reference) / cost_weight

        if not math.isfinite(wtp):
            return None
        return wtp

    def calculate_wtp(self,
                      config: Configuration,
                      coefficients: CoefficientSet,
                      uptake_probability: Optional[float] = None) -> BenefitResult:
        """
        Scale per-participant WTP to group and programme totals.

        Formula:
            WTP_group = WTP × participants × periods
            WTP_total = WTP_group × groups
            WTP_eff   = WTP_total × P(uptake)
        """
        wtp = self.calculate_wtp_per_period(config, coefficients)
        if wtp is None:
            return BenefitResult()

        per_group = wtp * config.participants_per_group * config.duration_periods
        total = per_group * config.number_of_groups
        effective = total * uptake_probability if uptake_probability is not None else None

        return BenefitResult(
            wtp_per_participant_per_period=wtp,
            wtp_per_group=per_group,
            total_wtp_all_groups=total,
            effective_wtp_all_groups=effective,
        )

    def engaged_participants(self, uptake_probability: float, config: Configuration) -> float:
        """Expected number of participants taking up the programme."""
        return config.total_participants * uptake_probability

    def calculate_qaly_benefit(self,
                               uptake_probability: float,
                               config: Configuration,
                               scenario: str = 'moderate') -> BenefitResult:
        """
        QALY-based monetised benefit.

        Formula:
            N_eng  = N_base × P(uptake)
            QALYs  = N_eng × q(scenario)
            B_qaly = QALYs × value_per_QALY
        """
        gain = self.params.qaly_gain_for(scenario)
        participants = self.engaged_participants(uptake_probability, config)
        qalys = participants * gain

        return BenefitResult(
            qaly_scenario=scenario,
            engaged_participants=participants,
            qaly_gains_total=qalys,
            monetised_qaly_benefit=qalys * self.params.value_per_qaly,
        )

    def calculate_savings_benefit(self,
                                  uptake_probability: float,
                                  config: Configuration) -> BenefitResult:
        """
        Avoided health-service costs.

        Formula: B_sav = N_eng × savings_per_period × periods
        """
        participants = self.engaged_participants(uptake_probability, config)
        savings = participants * self.params.savings_per_participant_per_period * config.duration_periods

        return BenefitResult(engaged_participants=participants, savings_total=savings)

    def calculate_wtp_table(self, coefficients: CoefficientSet) -> pd.DataFrame:
        """
        WTP per attribute level relative to the reference level.

        Formula: WTP_level = β_level / |β_cost|
        """
        cost_weight = coefficients.cost_weight or 0.0

        rows = []
        for attribute, levels in ATTRIBUTE_LEVELS.items():
            for level in levels:
                weight = lookup_weight(coefficients, attribute, level)
                rows.append({
                    'attribute': attribute,
                    'level': level,
                    'reference': level == levels[0],
                    'utility': weight,
                    'wtp': weight / abs(cost_weight) if cost_weight else None,
                })

        return pd.DataFrame(rows)


def compute_wtp(config: Configuration,
                coefficients: CoefficientSet,
                uptake_probability: Optional[float] = None,
                params: Optional[ModelParameters] = None) -> BenefitResult:
    """WTP-based benefit for a configuration."""
    return BenefitModel(params).calculate_wtp(config, coefficients, uptake_probability)


def compute_qaly_benefit(uptake_probability: float,
                         config: Configuration,
                         qaly_scenario: str = 'moderate',
                         params: Optional[ModelParameters] = None) -> BenefitResult:
    """QALY-based benefit for a configuration."""
    return BenefitModel(params).calculate_qaly_benefit(uptake_probability, config, qaly_scenario)


def compute_savings_benefit(uptake_probability: float,
                            config: Configuration,
                            params: Optional[ModelParameters] = None) -> BenefitResult:
    """Savings-based benefit for a configuration."""
    return BenefitModel(params).calculate_savings_benefit(uptake_probability, config)


def wtp_table(coefficients: CoefficientSet, params: Optional[ModelParameters] = None) -> pd.DataFrame:
    """Per-level WTP table for display."""
    return BenefitModel(params).calculate_wtp_table(coefficients)
