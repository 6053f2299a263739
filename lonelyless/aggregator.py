from dataclasses import dataclass
from typing import Optional

from .costs import CostResult
from .parameters import ModelParameters


@dataclass(frozen=True)
class CostBenefitResult:
    """Net benefit and BCR for one benefit definition."""
    label: str
    total_benefit: Optional[float]
    total_cost: float
    net_benefit: Optional[float]
    benefit_cost_ratio: Optional[float]
    rating: str


class CostBenefitAggregator:
    """Combine costs with a benefit total into net benefit and BCR."""

    def __init__(self, params: Optional[ModelParameters] = None):
        """Initialize with model parameters."""
        self.params = params or ModelParameters()

    def rate_value_for_money(self, bcr: Optional[float]) -> str:
        """Classify a benefit-cost ratio into a value-for-money band."""
        p = self.params

        if bcr is None:
            return "Assessment pending"
        if bcr >= p.strong_bcr_threshold:
            return "Strong value for money"
        if bcr >= p.borderline_bcr_threshold:
            return "Borderline value for money"
        return "Costs likely exceed benefits"

    def aggregate(self,
                  costs: CostResult,
                  total_benefit: Optional[float],
                  label: str = 'wtp') -> CostBenefitResult:
        """
        Net benefit and benefit-cost ratio.

        Formula:
            NB  = B - C_total
            BCR = B / C_total   (undefined when C_total = 0)

        Returns:
            CostBenefitResult
        """
        total_cost = costs.total_cost_all_groups

        if total_benefit is None:
            net_benefit = None
            bcr = None
        else:
            net_benefit = total_benefit - total_cost
            bcr = total_benefit / total_cost if total_cost > 0 else None

        return CostBenefitResult(
            label=label,
            total_benefit=total_benefit,
            total_cost=total_cost,
            net_benefit=net_benefit,
            benefit_cost_ratio=bcr,
            rating=self.rate_value_for_money(bcr),
        )


def aggregate(costs: CostResult,
              total_benefit: Optional[float],
              label: str = 'wtp',
              params: Optional[ModelParameters] = None) -> CostBenefitResult:
    """Net benefit and BCR for one labelled benefit total."""
    return CostBenefitAggregator(params).aggregate(costs, total_benefit, label)
