from .parameters import ModelParameters
from .coefficients import CoefficientSet, SEGMENTS, get_coefficients, lookup_weight
from .regions import RegionAdjustment, load_region_multipliers
from .configuration import (
    ATTRIBUTE_LEVELS,
    Configuration,
    ConfigurationError,
    build_configuration,
    reference_configuration,
)
from .choice import ChoiceProbabilityEngine, ChoiceResult, compute_choice, compute_pooled_choice
from .costs import CostModel, CostResult, compute_costs, cost_components
from .benefits import (
    BenefitModel,
    BenefitResult,
    compute_qaly_benefit,
    compute_savings_benefit,
    compute_wtp,
    wtp_table,
)
from .aggregator import CostBenefitAggregator, CostBenefitResult, aggregate
from .calculator import (
    QalyBenefit,
    ResultBundle,
    SavingsBenefit,
    ScenarioSession,
    WtpBenefit,
    compute_full_result,
)
from .exporter import ResultsExporter
from .sensitivity import SensitivityAnalysis, run_sensitivity_analysis

__all__ = [
    'ModelParameters',
    'CoefficientSet',
    'SEGMENTS',
    'get_coefficients',
    'lookup_weight',
    'RegionAdjustment',
    'load_region_multipliers',
    'ATTRIBUTE_LEVELS',
    'Configuration',
    'ConfigurationError',
    'build_configuration',
    'reference_configuration',
    'ChoiceProbabilityEngine',
    'ChoiceResult',
    'compute_choice',
    'compute_pooled_choice',
    'CostModel',
    'CostResult',
    'compute_costs',
    'cost_components',
    'BenefitModel',
    'BenefitResult',
    'compute_wtp',
    'compute_qaly_benefit',
    'compute_savings_benefit',
    'wtp_table',
    'CostBenefitAggregator',
    'CostBenefitResult',
    'aggregate',
    'WtpBenefit',
    'QalyBenefit',
    'SavingsBenefit',
    'ResultBundle',
    'ScenarioSession',
    'compute_full_result',
    'ResultsExporter',
    'SensitivityAnalysis',
    'run_sensitivity_analysis'
]
