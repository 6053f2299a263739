import math
from dataclasses import replace

import pytest

from lonelyless import (
    CoefficientSet,
    Configuration,
    ModelParameters,
    compute_qaly_benefit,
    compute_savings_benefit,
    compute_wtp,
    wtp_table,
)
from lonelyless.configuration import ATTRIBUTE_LEVELS, reference_configuration


def test_wtp_from_utility_difference(simple_coefficients, base_config):
    result = compute_wtp(base_config, simple_coefficients)

    # (0.4 + 0.3) / 0.001
    assert result.wtp_per_participant_per_period == pytest.approx(700.0)
    assert result.wtp_per_group == pytest.approx(700.0 * 100 * 12)
    assert result.total_wtp_all_groups == pytest.approx(700.0 * 100 * 12 * 5)
    assert result.effective_wtp_all_groups is None


def test_effective_wtp_weights_by_uptake(simple_coefficients, base_config):
    result = compute_wtp(base_config, simple_coefficients, uptake_probability=0.25)

    assert result.effective_wtp_all_groups == pytest.approx(result.total_wtp_all_groups * 0.25)


def test_reference_bundle_has_zero_wtp(simple_coefficients):
    result = compute_wtp(reference_configuration(participants_per_group=10, number_of_groups=2),
                         simple_coefficients)

    assert result.wtp_per_participant_per_period == 0
    assert result.total_wtp_all_groups == 0


def test_wtp_undefined_when_cost_weight_is_zero(base_config):
    coefficients = CoefficientSet(label="No cost", attribute_weights={'frequency': {'weekly': 1.0}})

    result = compute_wtp(base_config, coefficients)

    assert result.wtp_per_participant_per_period is None
    assert result.total_wtp_all_groups is None
    assert result.effective_wtp_all_groups is None


def test_qaly_benefit(base_config):
    result = compute_qaly_benefit(0.5, base_config, 'moderate')

    # 500 participants x 0.5 uptake x 0.05 QALYs x 50,000
    assert result.engaged_participants == pytest.approx(250.0)
    assert result.qaly_gains_total == pytest.approx(12.5)
    assert result.monetised_qaly_benefit == pytest.approx(625_000.0)
    assert result.total_wtp_all_groups is None


@pytest.mark.parametrize("scenario,gain", [("low", 0.02), ("moderate", 0.05), ("high", 0.10)])
def test_qaly_scenarios(base_config, scenario, gain):
    result = compute_qaly_benefit(1.0, base_config, scenario)

    assert result.qaly_gains_total == pytest.approx(500 * gain)


def test_unknown_qaly_scenario_is_rejected(base_config):
    with pytest.raises(ValueError, match="Unknown QALY scenario"):
        compute_qaly_benefit(0.5, base_config, 'extreme')


def test_savings_benefit(base_config):
    params = ModelParameters(savings_per_participant_per_period=10.0)

    result = compute_savings_benefit(0.4, base_config, params)

    assert result.savings_total == pytest.approx(500 * 0.4 * 10.0 * 12)


def test_wtp_table_lists_every_level(simple_coefficients):
    table = wtp_table(simple_coefficients)

    assert len(table) == sum(len(levels) for levels in ATTRIBUTE_LEVELS.values())
    weekly = table[(table['attribute'] == 'frequency') & (table['level'] == 'weekly')].iloc[0]
    assert weekly['wtp'] == pytest.approx(300.0)
    assert table[table['reference']]['utility'].eq(0).all()


def test_wtp_table_without_cost_weight():
    table = wtp_table(CoefficientSet(label="No cost"))

    assert table['wtp'].isna().all()
