import math

import pytest

from lonelyless import (
    Configuration,
    ModelParameters,
    QalyBenefit,
    ResultsExporter,
    ScenarioSession,
    WtpBenefit,
    compute_full_result,
    get_coefficients,
)
from lonelyless.exporter import format_currency, format_number, format_percent, format_ratio


@pytest.mark.parametrize("value", [None, math.nan, math.inf])
def test_not_applicable_values_render_as_dash(value):
    assert format_number(value) == '-'
    assert format_percent(value) == '-'
    assert format_currency(value) == '-'
    assert format_ratio(value) == '-'


def test_formats():
    assert format_number(1234567.891) == '1,234,568'
    assert format_percent(0.1234) == '12.3 %'
    assert format_currency(1500.0) == 'AUD 1,500'
    assert format_currency(1500.0, 'USD', 1.5) == 'USD 1,000.0'
    assert format_ratio(1.2345) == '1.23'


@pytest.fixture
def bundle():
    config = Configuration(support_type='community_engagement', unit_cost=200.0, participants_per_group=10,
                           number_of_groups=3, duration_periods=6, region_code='NSW',
                           apply_region_adjustment=True, name='Pilot')
    return compute_full_result(config, get_coefficients('average'), (WtpBenefit(), QalyBenefit('low')))


def test_summary_report(tmp_path, bundle):
    exporter = ResultsExporter(str(tmp_path))

    path = exporter.export_summary_report(bundle)
    text = path.read_text(encoding='utf-8')

    assert 'SCENARIO SUMMARY: Pilot' in text
    assert 'Region-adjusted cost' in text
    assert 'qaly_low' in text and 'wtp' in text
    assert 'Average preference model' in text


def test_headline_when_bcr_undefined(tmp_path):
    bundle = compute_full_result(Configuration(), get_coefficients('average'))

    headline = ResultsExporter(str(tmp_path)).headline(bundle)

    assert headline.startswith("Set a configuration")


def test_summary_in_usd(tmp_path, bundle):
    exporter = ResultsExporter(str(tmp_path), ModelParameters(currency='USD'))

    assert 'USD ' in exporter.build_summary_report(bundle)


def test_export_scenarios(tmp_path):
    session = ScenarioSession()
    session.evaluate(Configuration(unit_cost=100.0, participants_per_group=10, number_of_groups=2))
    session.save_scenario()

    path = ResultsExporter(str(tmp_path)).export_scenarios(session.comparison_table())

    lines = path.read_text().splitlines()
    assert lines[0].startswith('scenario,')
    assert len(lines) == 3
