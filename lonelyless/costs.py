from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .configuration import Configuration
from .parameters import ModelParameters
from .regions import RegionAdjustment


@dataclass(frozen=True)
class CostResult:
    """Programme cost aggregates (currency units)."""
    adjusted_unit_cost: float
    direct_cost_per_group: float
    opportunity_cost_per_group: float
    total_cost_per_group: float
    total_cost_all_groups: float


class CostModel:
    """
    Economic cost of delivering a programme configuration.

    Opportunity cost is a flat share of direct cost, not a time-use
    valuation.
    """

    def __init__(self,
                 params: Optional[ModelParameters] = None,
                 regions: Optional[RegionAdjustment] = None):
        """Initialize with model parameters and region table."""
        self.params = params or ModelParameters()
        self.regions = regions or RegionAdjustment()

    def calculate_costs(self, config: Configuration) -> CostResult:
        """
        Calculate direct, opportunity and total costs.

        Formula:
            C_direct = cost_adj × participants × periods
            C_opp    = C_direct × r_opp   (if included, else 0)
            C_group  = C_direct + C_opp
            C_total  = C_group × groups

        Returns:
            CostResult
        """
        adjusted_unit_cost = self.regions.adjust_cost(config.unit_cost,
                                                      config.region_code,
                                                      config.apply_region_adjustment)

        direct = adjusted_unit_cost * config.participants_per_group * config.duration_periods
        opportunity = direct * self.params.opportunity_cost_rate if config.include_opportunity_cost else 0.0
        total_per_group = direct + opportunity

        return CostResult(
            adjusted_unit_cost=adjusted_unit_cost,
            direct_cost_per_group=direct,
            opportunity_cost_per_group=opportunity,
            total_cost_per_group=total_per_group,
            total_cost_all_groups=total_per_group * config.number_of_groups,
        )

    def calculate_cost_components(self, costs: CostResult, config: Configuration) -> pd.DataFrame:
        """
        Split direct cost per group into illustrative components.

        Returns:
            DataFrame with component, share, amount per group and amount
            per participant per period
        """
        periods = config.duration_periods
        participants = config.participants_per_group

        rows = []
        for component, share in self.params.cost_component_shares.items():
            amount = costs.direct_cost_per_group * share
            if periods > 0 and participants > 0:
                per_participant = amount / (periods * participants)
            else:
                per_participant = 0.0
            rows.append({
                'component': component,
                'share': share,
                'amount_per_group': amount,
                'per_participant_per_period': per_participant,
            })

        return pd.DataFrame(rows)


def compute_costs(config: Configuration,
                  params: Optional[ModelParameters] = None,
                  regions: Optional[RegionAdjustment] = None) -> CostResult:
    """Cost aggregates for a configuration."""
    return CostModel(params, regions).calculate_costs(config)


def cost_components(costs: CostResult,
                    config: Configuration,
                    params: Optional[ModelParameters] = None) -> pd.DataFrame:
    """Illustrative breakdown of direct cost per group."""
    return CostModel(params).calculate_cost_components(costs, config)
