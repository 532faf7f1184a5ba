"""
Building Thermal Model - Single-Node RC Implementation

This module implements the lumped resistance-capacitance model used to
step the room temperature through the day. The whole dwelling is treated
as one thermal mass coupled to a fixed outdoor temperature.

Physics Model:
    UA = peak_heat_loss / ΔT_design          (kW/K)
    C  = UA × τ                              (kWh/K)

    C · dT/dt = Q_heat − UA · (T − T_outdoor)

    Over a step of length dt with constant Q_heat the solution is exact:
        T_eq  = T_outdoor + Q_heat / UA
        T(dt) = T_eq + (T − T_eq) · exp(−dt / τ)
"""

import numpy as np
from typing import Dict

from .schema import DT_HOURS, CoreInput
from .system_config import DELTA_T_DESIGN


class BuildingThermalModel:
    """
    Lumped RC thermal model of the building envelope.

    State is not held here: the timeline driver passes the current room
    temperature in and records what comes back.

    Inputs:
        - Q_heat: Space heat delivered to the room (kW)
        - T_outdoor: Outdoor air temperature (°C), fixed by CoreInput
    """

    def __init__(self, core: CoreInput, config: Dict, dt_hours: float = DT_HOURS):
        """
        Initialize building thermal model.

        Args:
            core: Building parameters (peak heat loss, τ, setpoints)
            config: Solver parameters (``schedule`` and ``building`` sections)
            dt_hours: Time step (hours)
        """
        self.T_outdoor = core.outdoor_temp_c
        self.setpoint_home = core.setpoint_home_c
        self.setpoint_away = core.setpoint_away_c
        self.tau = core.tau_hours
        self.dt = dt_hours

        # Thermal conductance (kW/K) and capacitance (kWh/K)
        self.UA = core.peak_heat_loss_kw / DELTA_T_DESIGN
        self.C = self.UA * self.tau

        self.recovery_factor = float(config['building']['recovery_urgency_factor'])
        self.home_start_hour = float(config['schedule']['home_start_hour'])
        self.home_end_hour = float(config['schedule']['home_end_hour'])

        # Fraction of the temperature gap to equilibrium left after one step
        self._decay = np.exp(-self.dt / self.tau)

    def setpoint_for_step(self, step: int) -> float:
        """Occupancy setpoint for the step starting at ``step × dt``."""
        hour = step * self.dt
        if self.home_start_hour <= hour < self.home_end_hour:
            return self.setpoint_home
        return self.setpoint_away

    def heat_loss_kw(self, T_indoor: float) -> float:
        """Fabric and ventilation loss to outside (kW); negative if colder inside."""
        return self.UA * (T_indoor - self.T_outdoor)

    def space_heat_demand(self, T_indoor: float, setpoint: float) -> float:
        """
        Space heat required this step to track ``setpoint``.

        Proportional part: hold the current temperature plus a recovery
        kick of ``recovery_factor × UA`` per kelvin below the setpoint.
        It is capped at the output that lands the room exactly on the
        setpoint at the end of the step, so the demand never overshoots.

        Args:
            T_indoor: Room temperature at the start of the step (°C)
            setpoint: Target temperature for this step (°C)

        Returns:
            Demand (kW), never negative
        """
        if self.UA <= 0:
            return 0.0

        Q_prop = self.heat_loss_kw(T_indoor) + self.recovery_factor * self.UA * max(0.0, setpoint - T_indoor)

        # Output whose equilibrium brings T to the setpoint in exactly one step
        T_eq_target = (setpoint - self._decay * T_indoor) / (1.0 - self._decay)
        Q_reach = self.UA * (T_eq_target - self.T_outdoor)

        return max(0.0, min(Q_prop, Q_reach))

    def next_temperature(self, T_indoor: float, Q_heat: float) -> float:
        """
        Advance the room temperature by one step.

        Args:
            T_indoor: Room temperature at the start of the step (°C)
            Q_heat: Space heat delivered over the step (kW)

        Returns:
            Room temperature at the end of the step (°C)
        """
        if self.UA <= 0:
            # No coupling to outside and no capacitance to heat
            return T_indoor

        T_eq = self.T_outdoor + Q_heat / self.UA
        return T_eq + (T_indoor - T_eq) * self._decay

    def get_thermal_time_constants(self) -> Dict[str, float]:
        """
        Characteristic figures of the building.

        Returns:
            Dictionary with UA, C and τ (hours and steps)
        """
        return {
            'UA_kw_per_k': self.UA,
            'C_kwh_per_k': self.C,
            'tau_hours': self.tau,
            'tau_steps': self.tau / self.dt,
        }
