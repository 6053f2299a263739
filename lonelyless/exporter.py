import math
from pathlib import Path
from typing import Optional

import pandas as pd

from .calculator import ResultBundle
from .parameters import ModelParameters


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return not math.isfinite(value)
    except TypeError:
        return True


def format_number(value, decimals: int = 0) -> str:
    """Thousands-separated number, '-' when not applicable."""
    if _is_missing(value):
        return '-'
    return f"{value:,.{decimals}f}"


def format_percent(value, decimals: int = 1) -> str:
    """Proportion as a percentage, '-' when not applicable."""
    if _is_missing(value):
        return '-'
    return f"{value * 100:.{decimals}f} %"


def format_currency(value_aud, currency: str = 'AUD', aud_per_usd: float = 1.5, decimals: int = 0) -> str:
    """
    Currency amount held in AUD, optionally shown in USD.

    USD amounts use one decimal place; the conversion is for display only.
    """
    if _is_missing(value_aud):
        return '-'
    if currency == 'USD':
        return f"USD {value_aud / aud_per_usd:,.1f}"
    return f"AUD {value_aud:,.{decimals}f}"


def format_ratio(value) -> str:
    return '-' if _is_missing(value) else f"{value:.2f}"


class ResultsExporter:
    """Export calculator results."""

    def __init__(self, output_dir: str = "results", params: Optional[ModelParameters] = None):
        """Initialize exporter."""
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.params = params or ModelParameters()

    def money(self, value) -> str:
        return format_currency(value, self.params.currency, self.params.aud_per_usd)

    def headline(self, bundle: ResultBundle, label: str = 'wtp') -> str:
        """Headline recommendation sentence for one benefit definition."""
        agg = bundle.aggregates.get(label)
        if agg is None or agg.benefit_cost_ratio is None:
            return ("Set a configuration to see whether the benefits of the programme are "
                    "likely to justify the costs under the current assumptions.")

        balance = "promising" if agg.benefit_cost_ratio >= 1 else "weaker"
        return (f"With an estimated uptake of {format_percent(bundle.choice.uptake_probability)}, "
                f"a benefit-cost ratio of {format_ratio(agg.benefit_cost_ratio)} and total costs of "
                f"{self.money(bundle.cost.total_cost_all_groups)}, this configuration offers a "
                f"{balance} balance between value and cost.")

    def build_summary_report(self, bundle: ResultBundle) -> str:
        """Text briefing for one evaluated configuration."""
        cfg = bundle.config
        choice = bundle.choice
        cost = bundle.cost
        benefit = bundle.benefit

        lines = []
        lines.append("=" * 80)
        lines.append("LONELINESS PROGRAMME DECISION AID")
        lines.append(f"SCENARIO SUMMARY{': ' + cfg.name if cfg.name else ''}")
        lines.append("=" * 80)
        lines.append("")

        lines.append("CONFIGURATION")
        lines.append("-" * 40)
        lines.append(f"  Design:                  {cfg.describe()}")
        lines.append(f"  Model:                   {bundle.model_label}")
        lines.append(f"  Cost per participant:    {self.money(cfg.unit_cost)} per month")
        if cfg.apply_region_adjustment and cfg.region_code:
            lines.append(f"  Region-adjusted cost:    {self.money(cost.adjusted_unit_cost)} ({cfg.region_code})")
        lines.append(f"  Participants per group:  {format_number(cfg.participants_per_group)}")
        lines.append(f"  Number of groups:        {format_number(cfg.number_of_groups)}")
        lines.append(f"  Duration:                {cfg.duration_periods} months")
        lines.append(f"  Opportunity cost:        {'included' if cfg.include_opportunity_cost else 'excluded'}")
        lines.append("")

        lines.append("UPTAKE")
        lines.append("-" * 40)
        lines.append(f"  Programme:               {format_percent(choice.uptake_probability)}")
        lines.append(f"  Opt out:                 {format_percent(choice.opt_out_probability)}")
        lines.append(f"  Participants reached:    {format_number(bundle.expected_participants)} "
                     f"of {format_number(bundle.total_participants)}")
        lines.append("")

        lines.append("COSTS")
        lines.append("-" * 40)
        lines.append(f"  Direct cost per group:       {self.money(cost.direct_cost_per_group)}")
        lines.append(f"  Opportunity cost per group:  {self.money(cost.opportunity_cost_per_group)}")
        lines.append(f"  Total cost per group:        {self.money(cost.total_cost_per_group)}")
        lines.append(f"  Total cost (all groups):     {self.money(cost.total_cost_all_groups)}")
        lines.append("")

        lines.append("BENEFITS")
        lines.append("-" * 40)
        lines.append(f"  WTP per participant/month:   {self.money(benefit.wtp_per_participant_per_period)}")
        lines.append(f"  Total WTP (all groups):      {self.money(benefit.total_wtp_all_groups)}")
        lines.append(f"  Uptake-weighted WTP:         {self.money(benefit.effective_wtp_all_groups)}")
        if benefit.qaly_gains_total is not None:
            lines.append(f"  QALY gains ({benefit.qaly_scenario}):       {format_number(benefit.qaly_gains_total, 1)}")
            lines.append(f"  Monetised QALY benefit:      {self.money(benefit.monetised_qaly_benefit)}")
        if benefit.savings_total is not None:
            lines.append(f"  Health-service savings:      {self.money(benefit.savings_total)}")
        lines.append("")

        lines.append("COST-BENEFIT (each benefit definition reported separately)")
        lines.append("-" * 80)
        lines.append(f"{'Definition':<16} {'Benefit':>18} {'Net benefit':>18} {'BCR':>8}  {'Assessment'}")
        lines.append("-" * 80)
        for label, agg in bundle.aggregates.items():
            lines.append(f"{label:<16} {self.money(agg.total_benefit):>18} {self.money(agg.net_benefit):>18} "
                         f"{format_ratio(agg.benefit_cost_ratio):>8}  {agg.rating}")
        lines.append("")

        first_label = next(iter(bundle.aggregates), 'wtp')
        lines.append(self.headline(bundle, first_label))
        lines.append("")
        lines.append("=" * 80)
        lines.append(f"Generated: {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("=" * 80)

        return "\n".join(lines)

    def export_summary_report(self, bundle: ResultBundle, filename: str = "scenario_summary.txt") -> Path:
        """Write the text briefing for one configuration."""
        filepath = self.output_dir / filename
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self.build_summary_report(bundle))

        print(f"  Exported: {filepath}")
        return filepath

    def export_scenarios(self, table: pd.DataFrame, filename: str = "scenarios.csv") -> Path:
        """Export a scenario comparison table to CSV."""
        filepath = self.output_dir / filename
        table.to_csv(filepath, index=False)
        print(f"  Exported: {filepath}")
        return filepath
