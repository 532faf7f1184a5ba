import numpy as np
import pytest

from analysis.metrics import (
    calculate_running_cost,
    calculate_timeline_metrics,
    compare_timelines,
    occupied_mask,
)
from thermal_solver import TimelineResult, build_system_config, solve_system_timeline
from comparison.scenarios import DEFAULT_EVENTS


def _flat_result(temp=21.0, delivered=4.0, efficiency=0.85):
    result = TimelineResult.empty()
    result.room_temp_c[:] = temp
    result.heat_delivered_kw[:] = delivered
    result.heat_demand_kw[:] = delivered
    result.efficiency[:] = efficiency
    result.input_power_kw[:] = delivered / efficiency
    result.dhw_state[:] = 100.0
    return result


def test_occupied_window():
    mask = occupied_mask()
    assert mask.sum() == 68
    assert not mask[23]
    assert mask[24]
    assert not mask[92]


def test_energy_totals():
    metrics = calculate_timeline_metrics(_flat_result())
    assert metrics['total_delivered_kwh'] == pytest.approx(96.0)
    assert metrics['total_input_kwh'] == pytest.approx(96.0 / 0.85)
    assert metrics['overall_efficiency'] == pytest.approx(0.85)
    assert metrics['comfort_violations'] == 0
    assert metrics['dhw_unmet_kwh'] == 0.0


def test_cold_room_counts_only_occupied_steps():
    result = _flat_result(temp=19.0)
    metrics = calculate_timeline_metrics(result, setpoint_home_c=21.0)
    assert metrics['comfort_violations'] == 68
    assert metrics['hours_too_cold'] == pytest.approx(17.0)
    assert metrics['comfort_deficit_deg_hours'] == pytest.approx(34.0)


def test_cycling_and_shortfall_counts():
    result = _flat_result()
    result.efficiency[:10] = 0.78
    result.dhw_shortfall_kw[76:78] = 5.0
    metrics = calculate_timeline_metrics(result, base_eta=0.85)
    assert metrics['cycling_steps'] == 10
    assert metrics['dhw_unmet_kwh'] == pytest.approx(2.5)
    assert metrics['dhw_shortfall_steps'] == 2


def test_idle_day_has_zero_efficiency():
    metrics = calculate_timeline_metrics(TimelineResult.empty())
    assert metrics['total_input_kwh'] == 0.0
    assert metrics['overall_efficiency'] == 0.0
    assert 'cycling_steps' not in metrics


def test_running_cost():
    cost = calculate_running_cost(40.0, unit_price=0.07, standing_charge=0.3)
    assert cost['energy_cost_gbp'] == pytest.approx(2.8)
    assert cost['total_cost_gbp'] == pytest.approx(3.1)


def test_compare_timelines(base_core, combi):
    results = {
        'combi': solve_system_timeline(base_core, combi, DEFAULT_EVENTS),
        'ashp': solve_system_timeline(base_core, build_system_config('ashp', 8.0), DEFAULT_EVENTS),
    }
    frame = compare_timelines(results, metrics_to_compare=['total_input_kwh', 'dhw_unmet_kwh'])
    assert list(frame['system']) == ['combi', 'ashp']
    assert set(frame.columns) == {'system', 'total_input_kwh', 'dhw_unmet_kwh'}
    assert frame.loc[0, 'dhw_unmet_kwh'] > 0.0
    assert frame.loc[1, 'dhw_unmet_kwh'] == 0.0
    assert np.all(frame['total_input_kwh'] > 0.0)
