"""
Sensitivity Analysis Module
============================
Performs a sensitivity analysis of the decision aid results for a base
programme configuration.

Varies:
- Unit cost per participant per month [100, 250, 500]
- Population segment [average, supportive, conservative]
- Opportunity cost [excluded, included]

Outputs:
- sensitivity_full_grid.csv: All combinations
- sensitivity_main_effects.csv: One factor varied, others at baseline
- sensitivity_report.txt: Text summary report
"""

import itertools
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .calculator import DEFAULT_BENEFIT_DEFINITIONS, compute_full_result
from .coefficients import get_coefficients
from .configuration import Configuration
from .parameters import ModelParameters
from .regions import RegionAdjustment


@dataclass
class SensitivityConfig:
    """Configuration for sensitivity analysis."""

    # Factor values
    cost_values: List[float] = field(default_factory=lambda: [100.0, 250.0, 500.0])
    segment_values: List[str] = field(default_factory=lambda: ['average', 'supportive', 'conservative'])
    opportunity_cost_values: List[bool] = field(default_factory=lambda: [False, True])

    # Baseline values
    cost_baseline: float = 250.0
    segment_baseline: str = 'average'
    opportunity_cost_baseline: bool = True

    # BCR at or above which a scenario counts as worthwhile
    threshold: float = 1.0


class SensitivityAnalysis:
    """
    Sensitivity analysis over cost, segment and opportunity-cost policy.

    BCR and net benefit are reported for every benefit definition of the
    run; the threshold test uses the first definition.
    """

    def __init__(self,
                 base_config: Configuration,
                 config: Optional[SensitivityConfig] = None,
                 params: Optional[ModelParameters] = None,
                 regions: Optional[RegionAdjustment] = None,
                 benefit_definitions: Sequence = DEFAULT_BENEFIT_DEFINITIONS):
        """Initialize with a base configuration and optional custom config."""
        self.base_config = base_config
        self.config = config or SensitivityConfig()
        self.params = params or ModelParameters()
        self.regions = regions or RegionAdjustment()
        self.benefit_definitions = tuple(benefit_definitions)
        self.full_grid_results = None
        self.main_effects_results = None

    def run_single_scenario(self,
                            unit_cost: float,
                            segment: str,
                            include_opportunity_cost: bool) -> Dict:
        """
        Run the calculator for one factor combination.

        Args:
            unit_cost: Cost per participant per month
            segment: Population segment key
            include_opportunity_cost: Whether opportunity cost is counted

        Returns:
            Dictionary with scenario results
        """
        config = replace(self.base_config,
                         unit_cost=unit_cost,
                         include_opportunity_cost=include_opportunity_cost)
        bundle = compute_full_result(config,
                                     get_coefficients(segment),
                                     self.benefit_definitions,
                                     self.params,
                                     self.regions)

        result = {
            'unit_cost': unit_cost,
            'segment': segment,
            'include_opportunity_cost': include_opportunity_cost,
            'uptake_probability': round(bundle.choice.uptake_probability, 4),
            'total_cost': round(bundle.cost.total_cost_all_groups, 2),
        }

        primary = None
        for label, agg in bundle.aggregates.items():
            bcr = agg.benefit_cost_ratio
            result[f'{label}_bcr'] = round(bcr, 4) if bcr is not None else None
            result[f'{label}_net_benefit'] = round(agg.net_benefit, 2) if agg.net_benefit is not None else None
            if primary is None:
                primary = bcr

        result['threshold_met'] = primary is not None and primary >= self.config.threshold
        return result

    def run_full_grid(self) -> pd.DataFrame:
        """
        Run all factor combinations.

        Returns:
            DataFrame with one row per combination
        """
        combinations = list(itertools.product(
            self.config.cost_values,
            self.config.segment_values,
            self.config.opportunity_cost_values
        ))

        results = []
        for unit_cost, segment, include_opp in combinations:
            result = self.run_single_scenario(unit_cost, segment, include_opp)
            results.append(result)

        self.full_grid_results = pd.DataFrame(results)
        return self.full_grid_results

    def calculate_main_effects(self) -> pd.DataFrame:
        """
        Calculate main effects (vary one factor, hold others at baseline).
        """
        results = []
        cfg = self.config

        # Cost effect
        for value in cfg.cost_values:
            result = self.run_single_scenario(value, cfg.segment_baseline, cfg.opportunity_cost_baseline)
            results.append({'parameter': 'unit_cost', 'value': value, **result})

        # Segment effect
        for value in cfg.segment_values:
            result = self.run_single_scenario(cfg.cost_baseline, value, cfg.opportunity_cost_baseline)
            results.append({'parameter': 'segment', 'value': value, **result})

        # Opportunity cost effect
        for value in cfg.opportunity_cost_values:
            result = self.run_single_scenario(cfg.cost_baseline, cfg.segment_baseline, value)
            results.append({'parameter': 'opportunity_cost', 'value': value, **result})

        self.main_effects_results = pd.DataFrame(results)
        return self.main_effects_results

    def generate_report(self) -> str:
        """Generate text summary report."""
        if self.full_grid_results is None or self.main_effects_results is None:
            raise ValueError("Run analysis first")

        fg = self.full_grid_results
        me = self.main_effects_results
        cfg = self.config
        primary = f'{self.benefit_definitions[0].label}_bcr'

        def fmt(value, pattern):
            return '-' if value is None or pd.isna(value) else format(value, pattern)

        lines = []
        lines.append("=" * 75)
        lines.append("SENSITIVITY ANALYSIS REPORT")
        lines.append("Loneliness Programme Decision Aid - Robustness Check")
        lines.append("=" * 75)
        lines.append("")

        lines.append("PARAMETER CONFIGURATION")
        lines.append("-" * 40)
        lines.append(f"  Unit cost (per month):     {cfg.cost_values}")
        lines.append(f"  Segments:                  {cfg.segment_values}")
        lines.append(f"  Opportunity cost:          {cfg.opportunity_cost_values}")
        lines.append(f"  Baseline values:           cost={cfg.cost_baseline}, segment={cfg.segment_baseline}, "
                     f"opportunity_cost={cfg.opportunity_cost_baseline}")
        lines.append(f"  Total combinations:        {len(fg)}")
        lines.append("")

        lines.append("MAIN EFFECTS (one factor varies, others at baseline)")
        lines.append("-" * 75)
        lines.append(f"{'Factor':<18} {'Value':<14} {'Uptake':<10} {'Total cost':>14} {'BCR':>8} {'Threshold':>10}")
        lines.append("-" * 75)

        for _, row in me.iterrows():
            threshold_str = "PASS" if row['threshold_met'] else "FAIL"
            lines.append(f"{row['parameter']:<18} {str(row['value']):<14} {row['uptake_probability']:<10.1%} "
                         f"{row['total_cost']:>14,.0f} {fmt(row[primary], '>8.2f'):>8} {threshold_str:>10}")

        lines.append("-" * 75)
        lines.append("")

        lines.append("FULL GRID ANALYSIS")
        lines.append("-" * 40)
        lines.append(f"  Uptake range:       {fg['uptake_probability'].min():.1%} to {fg['uptake_probability'].max():.1%}")
        bcr = fg[primary].dropna()
        if not bcr.empty:
            lines.append(f"  BCR range:          {bcr.min():.2f} to {bcr.max():.2f}")
            lines.append(f"  BCR mean:           {bcr.mean():.2f}")
        else:
            lines.append("  BCR:                not applicable")
        lines.append("")
        lines.append(f"  Threshold test (BCR >= {cfg.threshold}):")
        lines.append(f"    PASS: {fg['threshold_met'].sum()}/{len(fg)} ({fg['threshold_met'].mean()*100:.0f}%)")
        lines.append("")

        lines.append("ROBUSTNESS CONCLUSION")
        lines.append("-" * 40)
        if fg['threshold_met'].all():
            lines.append(f"  [ROBUST] All {len(fg)} combinations meet the BCR threshold.")
        elif not fg['threshold_met'].any():
            lines.append("  [WEAK] No combination meets the BCR threshold.")
        else:
            n_fail = (~fg['threshold_met']).sum()
            lines.append(f"  [PARTIAL] {n_fail}/{len(fg)} combinations fall below threshold.")
            lines.append("  Value for money depends on cost and segment assumptions.")

        lines.append("")
        lines.append("=" * 75)

        return "\n".join(lines)

    def save_results(self, output_dir: str = "results"):
        """Save all results to files."""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        if self.full_grid_results is not None:
            self.full_grid_results.to_csv(output_path / 'sensitivity_full_grid.csv', index=False)

        if self.main_effects_results is not None:
            self.main_effects_results.to_csv(output_path / 'sensitivity_main_effects.csv', index=False)

        report = self.generate_report()
        with open(output_path / 'sensitivity_report.txt', 'w', encoding='utf-8') as f:
            f.write(report)


def run_sensitivity_analysis(base_config: Configuration,
                             output_dir: str = "results",
                             params: Optional[ModelParameters] = None,
                             regions: Optional[RegionAdjustment] = None,
                             benefit_definitions: Sequence = DEFAULT_BENEFIT_DEFINITIONS,
                             verbose: bool = True) -> pd.DataFrame:
    """
    Run complete sensitivity analysis.

    Args:
        base_config: Configuration whose cost and opportunity-cost settings are varied
        output_dir: Output directory for results
        params: Model parameters
        regions: Region multiplier table
        benefit_definitions: Benefit definitions to report
        verbose: Print progress

    Returns:
        DataFrame with main effects results
    """
    if verbose:
        print(f"\n{'='*70}")
        print("SENSITIVITY ANALYSIS")
        print(f"{'='*70}")

    analysis = SensitivityAnalysis(base_config, params=params, regions=regions,
                                   benefit_definitions=benefit_definitions)

    if verbose:
        print("\n  Running full grid analysis...")
    fg = analysis.run_full_grid()

    if verbose:
        print("  Calculating main effects...")
    analysis.calculate_main_effects()

    if verbose:
        print("  Saving results...")
    analysis.save_results(output_dir)

    if verbose:
        print(f"\n  Results:")
        print(f"    Uptake range: {fg['uptake_probability'].min():.1%} to {fg['uptake_probability'].max():.1%}")
        print(f"    Threshold pass: {fg['threshold_met'].sum()}/{len(fg)}")
        print(f"\n  Saved:")
        print(f"    - {output_dir}/sensitivity_full_grid.csv")
        print(f"    - {output_dir}/sensitivity_main_effects.csv")
        print(f"    - {output_dir}/sensitivity_report.txt")
        print(f"\n{'='*70}")
        print("SENSITIVITY ANALYSIS COMPLETE")
        print(f"{'='*70}")

    return analysis.main_effects_results
