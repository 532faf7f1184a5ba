import math

import pytest

from thermal_solver import CoreInput
from thermal_solver.building_model import BuildingThermalModel


@pytest.fixture
def building(base_core, solver_config):
    return BuildingThermalModel(base_core, solver_config)


def test_lumped_parameters(building):
    constants = building.get_thermal_time_constants()
    assert constants['UA_kw_per_k'] == pytest.approx(0.5)
    assert constants['C_kwh_per_k'] == pytest.approx(17.5)
    assert constants['tau_steps'] == pytest.approx(140.0)


def test_occupancy_schedule(building):
    assert building.setpoint_for_step(0) == 17.0
    assert building.setpoint_for_step(23) == 17.0
    assert building.setpoint_for_step(24) == 21.0
    assert building.setpoint_for_step(91) == 21.0
    assert building.setpoint_for_step(92) == 17.0


def test_heat_loss_input_holds_temperature(building):
    assert building.next_temperature(20.0, building.heat_loss_kw(20.0)) == pytest.approx(20.0)


def test_free_cooling_is_exponential(building):
    T = building.next_temperature(21.0, 0.0)
    assert T == pytest.approx(5.0 + 16.0 * math.exp(-0.25 / 35.0))
    assert 5.0 < T < 21.0


def test_demand_recovers_below_setpoint(building):
    demand = building.space_heat_demand(18.0, 21.0)
    assert demand > building.heat_loss_kw(18.0)
    assert building.next_temperature(18.0, demand) <= 21.0 + 1e-9


def test_demand_never_overshoots_near_setpoint(building):
    demand = building.space_heat_demand(20.99, 21.0)
    assert 20.99 < building.next_temperature(20.99, demand) <= 21.0


def test_demand_lands_on_setpoint_when_room_is_warm(building):
    demand = building.space_heat_demand(21.05, 21.0)
    assert 0.0 < demand < building.heat_loss_kw(21.05)
    assert building.next_temperature(21.05, demand) == pytest.approx(21.0)


def test_demand_above_setpoint_lets_room_drift(building):
    demand = building.space_heat_demand(21.0, 17.0)
    assert demand < building.heat_loss_kw(21.0)
    assert demand >= 0.0


def test_zero_heat_loss_building_holds_and_demands_nothing(solver_config):
    building = BuildingThermalModel(CoreInput(peak_heat_loss_kw=0.0, tau_hours=35.0), solver_config)
    assert building.space_heat_demand(15.0, 21.0) == 0.0
    assert building.next_temperature(15.0, 5.0) == 15.0
