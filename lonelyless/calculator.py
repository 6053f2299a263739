"""
Decision Aid Calculator
=======================
Single entry point from a programme configuration to a full set of
results, and the per-user session that keeps saved scenarios.

Flow:
    Configuration -> choice probability -> costs, benefits -> aggregates

Benefit definitions are strategies; each produces its own labelled
net benefit and BCR.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .aggregator import CostBenefitAggregator, CostBenefitResult
from .benefits import BenefitModel, BenefitResult
from .choice import ChoiceProbabilityEngine, ChoiceResult
from .coefficients import DEFAULT_SEGMENT, SEGMENTS, CoefficientSet, get_coefficients
from .configuration import Configuration
from .costs import CostModel, CostResult
from .parameters import ModelParameters
from .regions import RegionAdjustment


# ---------------------------------------------------------------------------
# Benefit definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WtpBenefit:
    """Preference-based benefit: total willingness to pay."""
    kind: str = field(default='wtp', init=False)

    @property
    def label(self) -> str:
        return 'wtp'

    def evaluate(self, model: BenefitModel, config: Configuration,
                 coefficients: CoefficientSet, choice: ChoiceResult) -> Tuple[BenefitResult, Optional[float]]:
        result = model.calculate_wtp(config, coefficients, choice.uptake_probability)
        return result, result.total_wtp_all_groups


@dataclass(frozen=True)
class QalyBenefit:
    """Health benefit: QALYs of engaged participants, monetised."""
    scenario: str = 'moderate'
    kind: str = field(default='qaly', init=False)

    @property
    def label(self) -> str:
        return f'qaly_{self.scenario}'

    def evaluate(self, model: BenefitModel, config: Configuration,
                 coefficients: CoefficientSet, choice: ChoiceResult) -> Tuple[BenefitResult, Optional[float]]:
        result = model.calculate_qaly_benefit(choice.uptake_probability, config, self.scenario)
        return result, result.monetised_qaly_benefit


@dataclass(frozen=True)
class SavingsBenefit:
    """Avoided health-service costs of engaged participants."""
    kind: str = field(default='savings', init=False)

    @property
    def label(self) -> str:
        return 'savings'

    def evaluate(self, model: BenefitModel, config: Configuration,
                 coefficients: CoefficientSet, choice: ChoiceResult) -> Tuple[BenefitResult, Optional[float]]:
        result = model.calculate_savings_benefit(choice.uptake_probability, config)
        return result, result.savings_total


DEFAULT_BENEFIT_DEFINITIONS = (WtpBenefit(),)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResultBundle:
    """Everything computed for one configuration."""
    config: Configuration
    model_label: str
    choice: ChoiceResult
    cost: CostResult
    benefit: BenefitResult
    aggregates: Mapping[str, CostBenefitResult]

    @property
    def total_participants(self) -> int:
        return self.config.total_participants

    @property
    def expected_participants(self) -> float:
        return self.total_participants * self.choice.uptake_probability

    def to_record(self) -> Dict:
        """Flat dictionary for tables and export."""
        cfg = self.config
        record = {
            'name': cfg.name,
            'model': self.model_label,
            **cfg.levels(),
            'unit_cost': cfg.unit_cost,
            'region': cfg.region_code if cfg.apply_region_adjustment else None,
            'participants_per_group': cfg.participants_per_group,
            'number_of_groups': cfg.number_of_groups,
            'duration_periods': cfg.duration_periods,
            'include_opportunity_cost': cfg.include_opportunity_cost,
            'uptake_probability': self.choice.uptake_probability,
            'opt_out_probability': self.choice.opt_out_probability,
            'total_participants': self.total_participants,
            'expected_participants': self.expected_participants,
            'direct_cost_per_group': self.cost.direct_cost_per_group,
            'opportunity_cost_per_group': self.cost.opportunity_cost_per_group,
            'total_cost_per_group': self.cost.total_cost_per_group,
            'total_cost_all_groups': self.cost.total_cost_all_groups,
            'wtp_per_participant_per_period': self.benefit.wtp_per_participant_per_period,
            'total_wtp_all_groups': self.benefit.total_wtp_all_groups,
            'effective_wtp_all_groups': self.benefit.effective_wtp_all_groups,
        }
        for label, agg in self.aggregates.items():
            record[f'{label}_benefit'] = agg.total_benefit
            record[f'{label}_net_benefit'] = agg.net_benefit
            record[f'{label}_bcr'] = agg.benefit_cost_ratio
        record['notes'] = cfg.notes
        return record


def compute_full_result(config: Configuration,
                        coefficients: CoefficientSet,
                        benefit_definitions: Sequence = DEFAULT_BENEFIT_DEFINITIONS,
                        params: Optional[ModelParameters] = None,
                        regions: Optional[RegionAdjustment] = None) -> ResultBundle:
    """
    Run choice, cost, benefit and aggregation for one configuration.

    Args:
        config: Programme configuration
        coefficients: Coefficient set of the chosen population segment
        benefit_definitions: WtpBenefit / QalyBenefit / SavingsBenefit instances
        params: Model parameters (defaults if None)
        regions: Region multiplier table (built-in table if None)

    Returns:
        ResultBundle with one aggregate per benefit definition
    """
    params = params or ModelParameters()
    regions = regions or RegionAdjustment()

    choice = ChoiceProbabilityEngine(params, regions).calculate_choice(config, coefficients)
    cost = CostModel(params, regions).calculate_costs(config)

    benefit_model = BenefitModel(params)
    aggregator = CostBenefitAggregator(params)

    benefit = BenefitResult()
    aggregates = {}
    for definition in benefit_definitions:
        result, total = definition.evaluate(benefit_model, config, coefficients, choice)
        benefit = benefit.merge(result)
        aggregates[definition.label] = aggregator.aggregate(cost, total, definition.label)

    return ResultBundle(
        config=config,
        model_label=coefficients.label,
        choice=choice,
        cost=cost,
        benefit=benefit,
        aggregates=aggregates,
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SavedScenario:
    name: str
    config: Configuration
    result: ResultBundle


class ScenarioSession:
    """
    Per-user calculator state.

    Holds the selected segment and an append-only list of saved
    scenarios. Coefficient, parameter and region tables are read-only and
    may be shared between sessions; scenario lists are not.
    """

    def __init__(self,
                 segment: str = DEFAULT_SEGMENT,
                 segments: Mapping[str, CoefficientSet] = SEGMENTS,
                 params: Optional[ModelParameters] = None,
                 regions: Optional[RegionAdjustment] = None,
                 benefit_definitions: Sequence = DEFAULT_BENEFIT_DEFINITIONS):
        """Initialize with a segment key and shared tables."""
        self.segments = segments
        self.segment = segment
        self.params = params or ModelParameters()
        self.regions = regions or RegionAdjustment()
        self.benefit_definitions = tuple(benefit_definitions)
        self.last_result: Optional[ResultBundle] = None
        self._scenarios: List[SavedScenario] = []

    @property
    def coefficients(self) -> CoefficientSet:
        return get_coefficients(self.segment, self.segments)

    @property
    def scenarios(self) -> Tuple[SavedScenario, ...]:
        return tuple(self._scenarios)

    def evaluate(self, config: Configuration, segment: Optional[str] = None) -> ResultBundle:
        """
        Compute results for a configuration and keep them as current.

        `segment` evaluates under another segment without changing the
        session's selected one.
        """
        coefficients = self.coefficients if segment is None else get_coefficients(segment, self.segments)
        self.last_result = compute_full_result(config,
                                               coefficients,
                                               self.benefit_definitions,
                                               self.params,
                                               self.regions)
        return self.last_result

    def pooled_uptake(self, config: Configuration) -> dict:
        """Indicative unweighted average uptake across all segments."""
        engine = ChoiceProbabilityEngine(self.params, self.regions)
        return engine.calculate_pooled_uptake(config, self.segments)

    def save_scenario(self, name: Optional[str] = None) -> SavedScenario:
        """
        Append the current result to the saved scenarios.

        Raises:
            ValueError: if no configuration has been evaluated yet
        """
        if self.last_result is None:
            raise ValueError("Evaluate a configuration before saving a scenario")

        config = self.last_result.config
        name = name or config.name or f"Scenario {len(self._scenarios) + 1}"
        scenario = SavedScenario(name=name, config=config, result=self.last_result)
        self._scenarios.append(scenario)
        return scenario

    def comparison_table(self, include_current: bool = True) -> pd.DataFrame:
        """
        Current configuration and saved scenarios side by side.

        Returns:
            DataFrame with one row per scenario (empty if nothing evaluated)
        """
        rows = []
        if include_current and self.last_result is not None:
            rows.append({**self.last_result.to_record(), 'scenario': 'Current configuration'})
        for scenario in self._scenarios:
            rows.append({**scenario.result.to_record(), 'scenario': scenario.name})

        if not rows:
            return pd.DataFrame()

        table = pd.DataFrame(rows)
        columns = ['scenario'] + [c for c in table.columns if c != 'scenario']
        return table[columns]
