import pytest

from lonelyless import Configuration, QalyBenefit, SensitivityAnalysis, WtpBenefit, run_sensitivity_analysis
from lonelyless.sensitivity import SensitivityConfig


@pytest.fixture
def analysis():
    config = Configuration(support_type='community_engagement', frequency='weekly', accessibility='at_home',
                           participants_per_group=12, number_of_groups=4, duration_periods=6)
    return SensitivityAnalysis(config, benefit_definitions=(WtpBenefit(), QalyBenefit('moderate')))


def test_full_grid_covers_all_combinations(analysis):
    grid = analysis.run_full_grid()

    assert len(grid) == 3 * 3 * 2
    assert {'uptake_probability', 'total_cost', 'wtp_bcr', 'qaly_moderate_bcr', 'threshold_met'} <= set(grid.columns)


def test_higher_cost_lowers_uptake(analysis):
    effects = analysis.calculate_main_effects()

    cost_rows = effects[effects['parameter'] == 'unit_cost'].sort_values('value')
    assert cost_rows['uptake_probability'].is_monotonic_decreasing
    assert cost_rows['total_cost'].is_monotonic_increasing


def test_main_effects_rows(analysis):
    effects = analysis.calculate_main_effects()

    assert list(effects['parameter'].value_counts().sort_index().items()) == [
        ('opportunity_cost', 2), ('segment', 3), ('unit_cost', 3)]


def test_report_requires_runs(analysis):
    with pytest.raises(ValueError, match="Run analysis first"):
        analysis.generate_report()


def test_report_and_files(analysis, tmp_path):
    analysis.run_full_grid()
    analysis.calculate_main_effects()

    report = analysis.generate_report()
    analysis.save_results(str(tmp_path))

    assert "SENSITIVITY ANALYSIS REPORT" in report
    assert "Total combinations:        18" in report
    for name in ('sensitivity_full_grid.csv', 'sensitivity_main_effects.csv', 'sensitivity_report.txt'):
        assert (tmp_path / name).exists()


def test_custom_grid():
    analysis = SensitivityAnalysis(Configuration(participants_per_group=5, number_of_groups=1),
                                   SensitivityConfig(cost_values=[10.0], segment_values=['average'],
                                                     opportunity_cost_values=[False]))

    assert len(analysis.run_full_grid()) == 1


def test_wrapper(tmp_path, capsys):
    effects = run_sensitivity_analysis(Configuration(participants_per_group=5, number_of_groups=2),
                                       output_dir=str(tmp_path), verbose=False)

    assert len(effects) == 8
    assert capsys.readouterr().out == ""
    assert (tmp_path / 'sensitivity_report.txt').exists()
