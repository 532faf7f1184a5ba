import os

import pandas as pd

from comparison.evaluate_systems import compare_systems, main, solve_candidates
from thermal_solver import SystemFamily


def test_candidates_are_solved_independently(base_core):
    solved = solve_candidates(base_core, ['on_demand', 'current'], current_heat_source_type='system')
    assert list(solved) == ['Combi Boiler', 'Current System Boiler']
    system, result = solved['Current System Boiler']
    assert system.family is SystemFamily.STORED_UNVENTED
    assert result.dhw_shortfall_kw.sum() == 0.0


def test_compare_systems_table(base_core):
    frame = compare_systems(base_core, verbose=False)
    assert list(frame['system']) == ['Combi Boiler', 'Stored (Unvented Cylinder)', 'Air Source Heat Pump']
    ashp = frame.set_index('family').loc['ashp']
    assert ashp['overall_efficiency'] > 1.0
    assert ashp['cycling_steps'] == 0
    assert (frame['total_cost_gbp'] > 0).all()


def test_compare_systems_saves_results(base_core, tmp_path):
    compare_systems(base_core, ['on_demand', 'ashp'], save_dir=str(tmp_path), verbose=False)
    assert (tmp_path / 'system_comparison.csv').exists()
    assert (tmp_path / 'system_comparison.png').exists()
    assert (tmp_path / 'temperature_overlay.png').exists()
    assert (tmp_path / 'combi_boiler_timeline.png').exists()

    runs = pd.read_csv(tmp_path / 'latest' / 'runs.csv')
    assert list(runs['system']) == ['combi_boiler', 'air_source_heat_pump']
    assert os.path.exists(tmp_path / 'latest' / 'config.json')


def test_command_line(tmp_path, capsys):
    main(['--peak-heat-loss', '6', '--tau', '20', '--systems', 'on_demand', 'stored_vented',
          '--supply-path', 'Electric', '--save-dir', str(tmp_path)])
    out = capsys.readouterr().out
    assert 'SYSTEM COMPARISON' in out
    assert 'Combi Boiler' in out
    assert (tmp_path / 'system_comparison.csv').exists()
