from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np

from .coefficients import CoefficientSet, lookup_weight
from .configuration import ATTRIBUTES, Configuration
from .parameters import ModelParameters
from .regions import RegionAdjustment


@dataclass(frozen=True)
class ChoiceResult:
    """Utilities and choice probabilities for programme vs opt-out."""
    programme_utility: float
    opt_out_utility: float
    base_utility: float
    cost_term: float
    adjusted_cost: float
    uptake_probability: float
    opt_out_probability: float


class ChoiceProbabilityEngine:
    """
    Two-alternative logit model of programme uptake.

    Components:
    - Attribute utility (sum of level weights, reference levels = 0)
    - Cost disutility on the region-adjusted unit cost
    - Alternative-specific constants for programme and opt-out
    """

    def __init__(self,
                 params: Optional[ModelParameters] = None,
                 regions: Optional[RegionAdjustment] = None):
        """Initialize with model parameters and region table."""
        self.params = params or ModelParameters()
        self.regions = regions or RegionAdjustment()

    def calculate_base_utility(self, config: Configuration, coefficients: CoefficientSet) -> float:
        """
        Sum of attribute-level weights for the selected levels.

        Formula: V_attr = Σ_k β_k(level_k)
        """
        return sum(lookup_weight(coefficients, attribute, getattr(config, attribute, None))
                   for attribute in ATTRIBUTES)

    def calculate_adjusted_cost(self, config: Configuration) -> float:
        return self.regions.adjust_cost(config.unit_cost,
                                        config.region_code,
                                        config.apply_region_adjustment)

    def logit_probability(self, programme_utility: float, opt_out_utility: float) -> float:
        """
        Probability of choosing the programme.

        Formula: P = exp(U_prog) / (exp(U_prog) + exp(U_opt))
                   = 1 / (1 + exp(-(U_prog - U_opt)))

        The utility difference is clipped to ±exponent_limit.
        """
        limit = self.params.exponent_limit
        difference = np.clip(programme_utility - opt_out_utility, -limit, limit)
        return float(np.clip(1.0 / (1.0 + np.exp(-difference)), 0.0, 1.0))

    def calculate_choice(self, config: Configuration, coefficients: CoefficientSet) -> ChoiceResult:
        """
        Compute utilities and uptake for one configuration.

        Formula:
            U_prog = ASC_prog + V_attr + β_cost × cost_adj
            U_opt  = ASC_opt

        Returns:
            ChoiceResult
        """
        adjusted_cost = self.calculate_adjusted_cost(config)
        base_utility = self.calculate_base_utility(config, coefficients)

        asc_programme = coefficients.asc_programme or 0.0
        asc_opt_out = coefficients.asc_opt_out or 0.0
        cost_term = (coefficients.cost_weight or 0.0) * adjusted_cost

        programme_utility = asc_programme + base_utility + cost_term
        opt_out_utility = asc_opt_out

        uptake = self.logit_probability(programme_utility, opt_out_utility)

        return ChoiceResult(
            programme_utility=programme_utility,
            opt_out_utility=opt_out_utility,
            base_utility=base_utility,
            cost_term=cost_term,
            adjusted_cost=adjusted_cost,
            uptake_probability=uptake,
            opt_out_probability=1.0 - uptake,
        )

    def calculate_pooled_uptake(self,
                                config: Configuration,
                                segments: Mapping[str, CoefficientSet]) -> dict:
        """
        Per-segment uptake and their simple average ('pooled').

        The pooled figure is an unweighted mean of segment probabilities,
        reported as an indicative view only.

        Returns:
            Dictionary with 'segments' (key -> probability) and 'pooled'
        """
        by_segment = {key: self.calculate_choice(config, coefficients).uptake_probability
                      for key, coefficients in segments.items()}
        pooled = float(np.mean(list(by_segment.values()))) if by_segment else None
        return {'segments': by_segment, 'pooled': pooled}


def compute_choice(config: Configuration,
                   coefficients: CoefficientSet,
                   regions: Optional[RegionAdjustment] = None,
                   params: Optional[ModelParameters] = None) -> ChoiceResult:
    """Choice probabilities for a configuration under one coefficient set."""
    return ChoiceProbabilityEngine(params, regions).calculate_choice(config, coefficients)


def compute_pooled_choice(config: Configuration,
                          segments: Mapping[str, CoefficientSet],
                          regions: Optional[RegionAdjustment] = None,
                          params: Optional[ModelParameters] = None) -> dict:
    """Per-segment uptake plus the unweighted 'pooled' average."""
    return ChoiceProbabilityEngine(params, regions).calculate_pooled_uptake(config, segments)
