from dataclasses import replace

import pytest

from lonelyless import (
    SEGMENTS,
    CoefficientSet,
    Configuration,
    QalyBenefit,
    SavingsBenefit,
    ScenarioSession,
    WtpBenefit,
    compute_full_result,
)


ALL_DEFINITIONS = (WtpBenefit(), QalyBenefit('high'), SavingsBenefit())


def test_full_result_has_one_aggregate_per_definition(simple_coefficients, base_config):
    bundle = compute_full_result(base_config, simple_coefficients, ALL_DEFINITIONS)

    assert list(bundle.aggregates) == ['wtp', 'qaly_high', 'savings']
    assert bundle.aggregates['wtp'].total_benefit == pytest.approx(bundle.benefit.total_wtp_all_groups)
    assert bundle.aggregates['qaly_high'].total_benefit == pytest.approx(bundle.benefit.monetised_qaly_benefit)
    assert bundle.aggregates['savings'].total_benefit == pytest.approx(bundle.benefit.savings_total)


def test_benefit_definitions_are_not_summed(simple_coefficients, base_config):
    bundle = compute_full_result(base_config, simple_coefficients, ALL_DEFINITIONS)

    totals = {label: agg.total_benefit for label, agg in bundle.aggregates.items()}
    assert len(set(totals.values())) == 3
    for agg in bundle.aggregates.values():
        assert agg.total_cost == bundle.cost.total_cost_all_groups


def test_several_qaly_scenarios_keep_separate_aggregates(simple_coefficients, base_config):
    definitions = (QalyBenefit('low'), QalyBenefit('high'))

    bundle = compute_full_result(base_config, simple_coefficients, definitions)

    low = bundle.aggregates['qaly_low'].total_benefit
    high = bundle.aggregates['qaly_high'].total_benefit
    assert high == pytest.approx(low * 0.10 / 0.02)
    assert bundle.benefit.qaly_scenario == 'high'
    assert bundle.benefit.monetised_qaly_benefit == pytest.approx(high)


def test_default_definition_is_wtp(simple_coefficients, base_config):
    bundle = compute_full_result(base_config, simple_coefficients)

    assert list(bundle.aggregates) == ['wtp']
    assert bundle.benefit.monetised_qaly_benefit is None


def test_zero_cost_configuration_has_no_bcr(simple_coefficients):
    config = Configuration(unit_cost=0.0, participants_per_group=0, number_of_groups=4)

    bundle = compute_full_result(config, simple_coefficients, ALL_DEFINITIONS)

    assert bundle.cost.direct_cost_per_group == 0
    assert bundle.cost.total_cost_all_groups == 0
    for agg in bundle.aggregates.values():
        assert agg.benefit_cost_ratio is None
        assert agg.net_benefit == agg.total_benefit


def test_zero_cost_weight_leaves_wtp_aggregate_undefined(base_config):
    coefficients = CoefficientSet(label="No cost", attribute_weights={'frequency': {'weekly': 0.5}})

    bundle = compute_full_result(base_config, coefficients, ALL_DEFINITIONS)

    assert bundle.aggregates['wtp'].net_benefit is None
    assert bundle.aggregates['wtp'].benefit_cost_ratio is None
    assert bundle.aggregates['qaly_high'].benefit_cost_ratio is not None


def test_reach(simple_coefficients, base_config):
    bundle = compute_full_result(base_config, simple_coefficients)

    assert bundle.total_participants == 500
    assert bundle.expected_participants == pytest.approx(500 * bundle.choice.uptake_probability)


def test_record_is_flat(simple_coefficients, base_config):
    record = compute_full_result(base_config, simple_coefficients, ALL_DEFINITIONS).to_record()

    assert record['frequency'] == 'weekly'
    assert record['total_cost_all_groups'] == 300_000
    assert 'qaly_high_bcr' in record and 'savings_net_benefit' in record
    assert all(not isinstance(value, dict) for value in record.values())


def test_session_requires_evaluation_before_saving():
    with pytest.raises(ValueError):
        ScenarioSession().save_scenario()


def test_session_saves_scenarios_in_order(base_config):
    session = ScenarioSession('supportive')

    session.evaluate(base_config)
    first = session.save_scenario()
    session.evaluate(replace(base_config, unit_cost=500.0, name="Premium"))
    second = session.save_scenario()

    assert first.name == "Scenario 1"
    assert second.name == "Premium"
    assert [s.name for s in session.scenarios] == ["Scenario 1", "Premium"]
    assert first.result.model_label == SEGMENTS['supportive'].label
    assert first.config.unit_cost == 50.0


def test_sessions_do_not_share_scenarios(base_config):
    a, b = ScenarioSession(), ScenarioSession()

    a.evaluate(base_config)
    a.save_scenario()

    assert len(a.scenarios) == 1
    assert b.scenarios == ()


def test_scenarios_tuple_cannot_modify_session(base_config):
    session = ScenarioSession()
    session.evaluate(base_config)
    session.save_scenario()

    assert isinstance(session.scenarios, tuple)
    assert len(session.scenarios) == 1


def test_evaluate_under_other_segment_keeps_selection(base_config):
    session = ScenarioSession('average')

    bundle = session.evaluate(base_config, segment='conservative')

    assert bundle.model_label == SEGMENTS['conservative'].label
    assert session.segment == 'average'


def test_unknown_segment_falls_back_to_average(base_config):
    session = ScenarioSession('nonexistent')

    assert session.evaluate(base_config).model_label == SEGMENTS['average'].label


def test_comparison_table(base_config):
    session = ScenarioSession(benefit_definitions=(WtpBenefit(), QalyBenefit('low')))
    session.evaluate(base_config)
    session.save_scenario("Base")
    session.evaluate(replace(base_config, number_of_groups=10))

    table = session.comparison_table()

    assert list(table['scenario']) == ['Current configuration', 'Base']
    assert table.columns[0] == 'scenario'
    assert table.loc[0, 'total_cost_all_groups'] == pytest.approx(2 * table.loc[1, 'total_cost_all_groups'])
    assert {'wtp_bcr', 'qaly_low_bcr'} <= set(table.columns)


def test_empty_comparison_table():
    assert ScenarioSession().comparison_table().empty


def test_pooled_uptake_is_labelled_separately(base_config):
    session = ScenarioSession()

    pooled = session.pooled_uptake(base_config)

    assert set(pooled) == {'segments', 'pooled'}
    assert min(pooled['segments'].values()) <= pooled['pooled'] <= max(pooled['segments'].values())
