from analysis.data_logger import TimelineLogger
from analysis.metrics import calculate_timeline_metrics, compare_timelines
from analysis.visualization import plot_system_comparison, plot_temperature_overlay, plot_timeline
from comparison.scenarios import DEFAULT_EVENTS
from thermal_solver import solve_system_timeline


def test_timeline_plot_is_written(base_core, combi, tmp_path):
    result = solve_system_timeline(base_core, combi, DEFAULT_EVENTS)
    path = tmp_path / 'timeline.png'
    plot_timeline(result, title='Combi', setpoint_home_c=21.0, save_path=str(path))
    assert path.stat().st_size > 0


def test_comparison_plots_are_written(base_core, combi, tmp_path):
    results = {'combi': solve_system_timeline(base_core, combi, DEFAULT_EVENTS)}
    frame = compare_timelines(results)

    bars = tmp_path / 'bars.png'
    plot_system_comparison(frame, ['total_input_kwh', 'min_temperature', 'not_a_metric'], save_path=str(bars))
    overlay = tmp_path / 'overlay.png'
    plot_temperature_overlay(results, save_path=str(overlay))

    assert bars.exists()
    assert overlay.exists()


def test_logger_round_trip(base_core, combi, tmp_path):
    result = solve_system_timeline(base_core, combi, DEFAULT_EVENTS)
    run_logger = TimelineLogger(log_dir=str(tmp_path), experiment_name='run')
    run_logger.log_run('combi', result, calculate_timeline_metrics(result))
    run_logger.save_summary({'peak_input_kw': result.input_power_kw.max()})

    runs = run_logger.load_runs()
    assert len(runs) == 1
    assert runs.loc[0, 'system'] == 'combi'

    steps = run_logger.load_steps('combi')
    assert len(steps) == 96
    assert steps.index[-1] == 1425
    assert run_logger.load_steps('missing').empty
