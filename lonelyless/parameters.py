from dataclasses import dataclass, field
from typing import Dict


@dataclass
class ModelParameters:
    """
    Fixed assumptions for the cost-benefit calculations.

    Coefficients of the choice model live in coefficients.py; everything
    here is a costing or valuation assumption that a user may want to vary
    in sensitivity analysis. Values are placeholders until replaced with
    LonelyLess study estimates.
    """

    # ---------------------------------------------------------------------------
    # Programme horizon
    # Months over which costs and benefits accrue when no horizon is given
    # ---------------------------------------------------------------------------
    default_duration_periods: int = 12

    # ---------------------------------------------------------------------------
    # Opportunity cost
    # Flat share of direct programme cost (participant and volunteer time)
    # ---------------------------------------------------------------------------
    opportunity_cost_rate: float = 0.20

    # ---------------------------------------------------------------------------
    # QALY valuation
    # Source: commonly cited Australian willingness-to-pay threshold
    # ---------------------------------------------------------------------------
    value_per_qaly: float = 50_000.0
    qaly_per_participant: Dict[str, float] = field(default_factory=lambda: {
        'low': 0.02,
        'moderate': 0.05,
        'high': 0.10,
    })

    # ---------------------------------------------------------------------------
    # Health-service savings
    # Avoided GP and community health use per engaged participant per month
    # ---------------------------------------------------------------------------
    savings_per_participant_per_period: float = 35.0

    # ---------------------------------------------------------------------------
    # Illustrative split of direct programme cost
    # ---------------------------------------------------------------------------
    cost_component_shares: Dict[str, float] = field(default_factory=lambda: {
        'Facilitators and staff time': 0.45,
        'Venue and overheads': 0.25,
        'Materials and digital tools': 0.15,
        'Coordination and management': 0.15,
    })

    # ---------------------------------------------------------------------------
    # Value-for-money bands on the benefit-cost ratio
    # ---------------------------------------------------------------------------
    strong_bcr_threshold: float = 1.5
    borderline_bcr_threshold: float = 1.0

    # ---------------------------------------------------------------------------
    # Display
    # ---------------------------------------------------------------------------
    currency: str = 'AUD'
    aud_per_usd: float = 1.5  # display conversion only

    # Logit exponent arguments are clipped to +/- this value
    exponent_limit: float = 50.0

    def qaly_gain_for(self, scenario: str) -> float:
        """
        QALY gain per engaged participant for a named scenario.

        Raises:
            ValueError: if the scenario is not one of the configured keys
        """
        try:
            return self.qaly_per_participant[scenario]
        except KeyError:
            valid = ', '.join(sorted(self.qaly_per_participant))
            raise ValueError(f"Unknown QALY scenario '{scenario}' (expected one of: {valid})")
