import pytest

from thermal_solver import SystemConfig, SystemFamily
from thermal_solver.dispatcher import HeatSourceDispatcher, OnDemandPolicy, StoredBoilerPolicy
from thermal_solver.flow_physics import dhw_kw_from_flow


def test_policy_selected_from_family(solver_config, combi):
    assert isinstance(HeatSourceDispatcher(combi, solver_config).policy, OnDemandPolicy)
    stored = SystemConfig('stored_vented', max_kw=18.0)
    assert isinstance(HeatSourceDispatcher(stored, solver_config).policy, StoredBoilerPolicy)


def test_missing_boiler_parameters_use_defaults(solver_config):
    dispatcher = HeatSourceDispatcher(SystemConfig('on_demand', max_kw=24.0), solver_config)
    assert dispatcher.system.base_eta == 0.85
    assert dispatcher.system.min_kw is None
    assert dispatcher.policy.boiler.modulation_floor_kw == pytest.approx(4.0)

    oversized = HeatSourceDispatcher(SystemConfig('on_demand', max_kw=36.0), solver_config)
    assert oversized.policy.boiler.modulation_floor_kw == pytest.approx(6.0)

    stated = HeatSourceDispatcher(SystemConfig('on_demand', max_kw=36.0, min_kw=4.0), solver_config)
    assert stated.policy.boiler.modulation_floor_kw == pytest.approx(4.0)


def test_unresolved_current_family_is_rejected(solver_config):
    with pytest.raises(ValueError):
        HeatSourceDispatcher(SystemConfig('current', max_kw=24.0), solver_config)


def test_on_demand_gives_draw_priority(solver_config, combi):
    dispatcher = HeatSourceDispatcher(combi, solver_config)
    state = dispatcher.initial_state(20.0)
    outcome = dispatcher.dispatch(8.0, 10.0, state, 5.0)
    assert outcome.delivered_kw == 10.0
    assert outcome.space_delivered_kw == 0.0
    assert outcome.shortfall_kw == 0.0
    assert outcome.dhw_state == 100.0
    assert outcome.input_kw == pytest.approx(10.0 / 0.85)


def test_on_demand_caps_at_capacity(solver_config, combi):
    dispatcher = HeatSourceDispatcher(combi, solver_config)
    outcome = dispatcher.dispatch(0.0, 30.0, dispatcher.initial_state(20.0), 5.0)
    assert outcome.delivered_kw == 24.0
    assert outcome.shortfall_kw == pytest.approx(6.0)
    assert outcome.dhw_state == pytest.approx(80.0)


def test_short_draw_checked_against_instantaneous_flow(solver_config, combi):
    dispatcher = HeatSourceDispatcher(combi, solver_config)
    bath_kw = dhw_kw_from_flow(12.0)

    # Ten-minute bath in a fifteen-minute step
    outcome = dispatcher.dispatch(8.0, bath_kw * 10 / 15, dispatcher.initial_state(20.0), 5.0,
                                  dhw_peak_kw=bath_kw, dhw_coverage=10 / 15)
    assert outcome.shortfall_kw == pytest.approx(bath_kw - 24.0)
    assert outcome.dhw_state == pytest.approx(100.0 * 24.0 / bath_kw)
    assert outcome.space_delivered_kw == pytest.approx(8.0 / 3)
    assert outcome.delivered_kw == pytest.approx(24.0 * 10 / 15 + 8.0 / 3)
    assert outcome.input_kw == pytest.approx(outcome.delivered_kw / 0.85)


def test_one_minute_draw_barely_pauses_space_heating(solver_config, combi):
    dispatcher = HeatSourceDispatcher(combi, solver_config)
    sink_kw = dhw_kw_from_flow(4.0)
    outcome = dispatcher.dispatch(8.0, sink_kw / 15, dispatcher.initial_state(20.0), 5.0,
                                  dhw_peak_kw=sink_kw, dhw_coverage=1 / 15)
    assert outcome.shortfall_kw == 0.0
    assert outcome.dhw_state == 100.0
    assert outcome.space_delivered_kw == pytest.approx(8.0 * 14 / 15)


def test_zero_capacity_delivers_nothing(solver_config):
    dispatcher = HeatSourceDispatcher(SystemConfig('on_demand', max_kw=0.0), solver_config)
    state = dispatcher.initial_state(20.0)

    outcome = dispatcher.dispatch(6.0, 9.0, state, 5.0)
    assert outcome.delivered_kw == 0.0
    assert outcome.input_kw == 0.0
    assert outcome.shortfall_kw == 9.0
    assert outcome.dhw_state == 0.0

    outcome = dispatcher.dispatch(6.0, 0.0, state, 5.0)
    assert outcome.delivered_kw == 0.0
    assert outcome.input_kw == 0.0


def test_cylinder_reheats_from_spare_capacity(solver_config):
    dispatcher = HeatSourceDispatcher(SystemConfig('stored_unvented', max_kw=30.0), solver_config)
    state = dispatcher.initial_state(20.0)
    assert state.cylinder_soc_pct == 100.0

    draw_kw = dhw_kw_from_flow(4.0)
    outcome = dispatcher.dispatch(5.0, draw_kw, state, 5.0)
    assert outcome.space_delivered_kw == 5.0
    assert outcome.delivered_kw == pytest.approx(5.0 + draw_kw)
    assert outcome.shortfall_kw == 0.0
    assert state.cylinder_soc_pct == pytest.approx(100.0)
    assert outcome.input_kw == pytest.approx((5.0 + draw_kw) / 0.85)


def test_cylinder_drains_without_spare_capacity(solver_config):
    dispatcher = HeatSourceDispatcher(SystemConfig('stored_vented', max_kw=5.0), solver_config)
    state = dispatcher.initial_state(20.0)
    outcome = dispatcher.dispatch(5.0, dhw_kw_from_flow(12.0), state, 5.0)
    assert outcome.delivered_kw == 5.0
    assert outcome.shortfall_kw == 0.0
    assert outcome.dhw_state == 0.0
    assert state.cylinder_soc_pct == 0.0


def test_heat_pump_efficiency_is_cop(solver_config):
    system = SystemConfig(SystemFamily.HEAT_PUMP, max_kw=8.8, design_flow_temp_band=35.0)
    dispatcher = HeatSourceDispatcher(system, solver_config)
    outcome = dispatcher.dispatch(4.0, 0.0, dispatcher.initial_state(21.0), 7.0)
    assert outcome.efficiency == pytest.approx(4.0)
    assert outcome.input_kw == pytest.approx(1.0)
