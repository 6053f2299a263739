"""
Decision Aid Calculator Pipeline
================================

Evaluates a loneliness programme configuration end to end:
- Uptake prediction from the choice model
- Programme costs (with optional regional and opportunity cost)
- WTP, QALY and savings benefits
- Net benefit and benefit-cost ratio per benefit definition
- Optional comparison across segments and sensitivity analysis

Usage:
    python run_calculator.py                                  # Default configuration
    python run_calculator.py --support community_engagement --frequency weekly
    python run_calculator.py --cost 300 --region NSW          # Region-adjusted cost
    python run_calculator.py --qaly high --savings            # Extra benefit definitions
    python run_calculator.py --compare-segments --sensitivity
"""

import argparse
from typing import Optional

from lonelyless import (
    ATTRIBUTE_LEVELS,
    SEGMENTS,
    ConfigurationError,
    ModelParameters,
    QalyBenefit,
    RegionAdjustment,
    ResultsExporter,
    SavingsBenefit,
    ScenarioSession,
    WtpBenefit,
    build_configuration,
    load_region_multipliers,
    run_sensitivity_analysis,
)
from lonelyless.exporter import format_percent, format_ratio


def run_calculator(args: argparse.Namespace) -> ScenarioSession:
    """
    Evaluate the configuration described by command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Session holding the evaluated (and saved) scenarios
    """
    print(f"\n{'='*70}")
    print("LONELINESS PROGRAMME DECISION AID")
    print(f"{'='*70}")

    params = ModelParameters(currency=args.currency)
    regions = load_region_multipliers(args.regions) if args.regions else RegionAdjustment()

    definitions = [WtpBenefit()]
    if args.qaly:
        definitions.append(QalyBenefit(args.qaly))
    if args.savings:
        definitions.append(SavingsBenefit())

    # Step 1: Configuration
    print("\n[1/3] Building configuration...")
    config = build_configuration(
        {
            'support_type': args.support,
            'delivery_mode': args.delivery,
            'frequency': args.frequency,
            'duration': args.duration,
            'accessibility': args.accessibility,
        },
        params=params,
        unit_cost=args.cost,
        region_code=args.region,
        apply_region_adjustment=args.region is not None,
        participants_per_group=args.participants,
        number_of_groups=args.groups,
        duration_periods=args.months if args.months is not None else params.default_duration_periods,
        include_opportunity_cost=not args.no_opportunity_cost,
        name=args.name,
    )
    print(f"  {config.describe()}")

    # Step 2: Evaluate
    print("\n[2/3] Evaluating...")
    session = ScenarioSession(args.segment, params=params, regions=regions,
                              benefit_definitions=definitions)
    bundle = session.evaluate(config)
    session.save_scenario()

    print(f"\n  Model: {bundle.model_label}")
    print(f"  Uptake: {format_percent(bundle.choice.uptake_probability)}")
    for label, agg in bundle.aggregates.items():
        print(f"  {label:<14} BCR = {format_ratio(agg.benefit_cost_ratio):>6}  ({agg.rating})")

    if args.pooled:
        pooled = session.pooled_uptake(config)
        print(f"\n  Pooled uptake (unweighted mean of segments, indicative only): "
              f"{format_percent(pooled['pooled'])}")

    if args.compare_segments:
        print("\n  Segment comparison:")
        for key in SEGMENTS:
            if key == args.segment:
                continue
            other = session.evaluate(config, segment=key)
            wtp = other.aggregates['wtp']
            print(f"    {key:<22} uptake {format_percent(other.choice.uptake_probability):>8}"
                  f"  BCR {format_ratio(wtp.benefit_cost_ratio):>6}")
            session.save_scenario(f"{config.name or 'Configuration'} ({key})")
        session.evaluate(config)

    # Step 3: Export
    print("\n[3/3] Exporting results...")
    exporter = ResultsExporter(args.output_dir, params)
    exporter.export_summary_report(bundle)
    exporter.export_scenarios(session.comparison_table(include_current=False))

    if args.sensitivity:
        run_sensitivity_analysis(config, output_dir=args.output_dir, params=params,
                                 regions=regions, benefit_definitions=definitions)

    print(f"\n{'='*70}")
    print("✓ COMPLETE")
    print(f"{'='*70}\n")

    return session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Evaluate a loneliness programme configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
            python run_calculator.py --support community_engagement --frequency weekly
            python run_calculator.py --cost 300 --region NSW
            python run_calculator.py --qaly high --savings --sensitivity
                    """
    )
    levels = ATTRIBUTE_LEVELS
    parser.add_argument("--segment", default="average", choices=list(SEGMENTS),
                        help="Population segment model (default: average)")
    parser.add_argument("--support", default=levels['support_type'][0], choices=levels['support_type'])
    parser.add_argument("--delivery", default=levels['delivery_mode'][0], choices=levels['delivery_mode'])
    parser.add_argument("--frequency", default=levels['frequency'][0], choices=levels['frequency'])
    parser.add_argument("--duration", default=levels['duration'][0], choices=levels['duration'])
    parser.add_argument("--accessibility", default=levels['accessibility'][0], choices=levels['accessibility'])
    parser.add_argument("--cost", type=float, default=250.0,
                        help="Cost per participant per month in AUD (default: 250)")
    parser.add_argument("--region", default=None,
                        help="Region code for cost-of-living adjustment (e.g. NSW)")
    parser.add_argument("--regions", default=None,
                        help="JSON file of region multipliers")
    parser.add_argument("--participants", type=int, default=20, help="Participants per group")
    parser.add_argument("--groups", type=int, default=10, help="Number of groups")
    parser.add_argument("--months", type=int, default=None, help="Programme duration in months")
    parser.add_argument("--no-opportunity-cost", action="store_true",
                        help="Exclude opportunity cost")
    parser.add_argument("--qaly", choices=["low", "moderate", "high"], default=None,
                        help="Add QALY-based benefit for a scenario")
    parser.add_argument("--savings", action="store_true", help="Add savings-based benefit")
    parser.add_argument("--currency", choices=["AUD", "USD"], default="AUD")
    parser.add_argument("--pooled", action="store_true",
                        help="Show unweighted pooled uptake across segments")
    parser.add_argument("--compare-segments", action="store_true",
                        help="Evaluate the configuration under every segment")
    parser.add_argument("--sensitivity", action="store_true", help="Run sensitivity analysis")
    parser.add_argument("--name", default="", help="Scenario name")
    parser.add_argument("--output-dir", default="results")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run_calculator(args)
    except ConfigurationError as e:
        print(f"\n  [ERROR] Invalid configuration: {e}")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
