import run_calculator


def test_default_run(tmp_path, capsys):
    assert run_calculator.main(['--output-dir', str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert 'Uptake' in out
    assert (tmp_path / 'scenario_summary.txt').exists()
    assert (tmp_path / 'scenarios.csv').exists()


def test_all_options(tmp_path):
    argv = ['--output-dir', str(tmp_path), '--support', 'community_engagement', '--frequency', 'weekly',
            '--region', 'NSW', '--qaly', 'high', '--savings', '--pooled', '--compare-segments',
            '--sensitivity', '--currency', 'USD', '--name', 'Trial']

    assert run_calculator.main(argv) == 0
    assert (tmp_path / 'sensitivity_report.txt').exists()
    assert len((tmp_path / 'scenarios.csv').read_text().splitlines()) == 1 + 5


def test_invalid_configuration_exits_with_error(tmp_path, capsys):
    assert run_calculator.main(['--output-dir', str(tmp_path), '--groups', '-1']) == 2
    assert 'Invalid configuration' in capsys.readouterr().out


def test_zero_months_is_rejected(tmp_path, capsys):
    assert run_calculator.main(['--output-dir', str(tmp_path), '--months', '0']) == 2
    assert 'Invalid configuration' in capsys.readouterr().out
    assert not (tmp_path / 'scenario_summary.txt').exists()
