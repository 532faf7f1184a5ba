"""
Heat Source Models - Heat Pump COP, Boiler Efficiency and DHW Cylinder

This module implements the performance models used by the dispatcher:
    - Heat pump COP from the design flow-temperature band, corrected for
      outdoor and indoor temperature
    - Boiler efficiency with a short-cycling penalty below the modulation floor
    - Stored hot-water cylinder with a state-of-charge reserve

The COP model captures the key physics: heat pumps are more efficient
when the temperature lift is smaller, both at the emitters (flow band)
and across the evaporator/condenser (outdoor vs indoor).
"""

import numpy as np
from typing import Dict, Optional, Tuple

from .flow_physics import DHW_DELTA_T_C, stored_energy_kwh


class HeatPumpModel:
    """
    Heat pump model with band- and temperature-dependent COP.

    The COP (Coefficient of Performance) determines how efficiently
    the heat pump converts electrical energy to thermal energy:
        Q_thermal = COP × P_electrical

    COP decreases when:
        - The design flow temperature is higher (hotter emitters)
        - Outdoor temperature is lower (harder to extract heat)
        - Indoor temperature is higher (larger temperature lift)
    """

    def __init__(self, config: Dict, design_flow_temp_band: float):
        """
        Initialize heat pump model.

        Args:
            config: ``heat_pump`` section of the solver parameters
            design_flow_temp_band: Design flow temperature (°C)
        """
        bands = sorted((float(band), float(cop)) for band, cop in config['cop_by_flow_band'].items())
        self.band_temps = np.array([band for band, _ in bands])
        self.band_cops = np.array([cop for _, cop in bands])
        self.design_flow_temp_band = float(design_flow_temp_band)

        # Temperature coefficients
        self.k1 = config['k1']  # Outdoor temp coefficient (positive)
        self.k2 = config['k2']  # Indoor temp coefficient (positive, subtracted)
        self.T_outdoor_ref = config['T_outdoor_ref']
        self.T_indoor_ref = config['T_indoor_ref']
        self.factor_min = config['factor_min']
        self.factor_max = config['factor_max']

    @property
    def nominal_cop(self) -> float:
        """COP at the reference conditions for the design flow band."""
        # np.interp holds the end values outside the tabulated range
        return float(np.interp(self.design_flow_temp_band, self.band_temps, self.band_cops))

    def calculate_cop(self, T_outdoor: float, T_indoor: float) -> float:
        """
        Calculate temperature-dependent COP.

        Only the part of the COP above 1 is scaled, so the result stays
        above 1 whatever the conditions:
            factor = clip(1 + k1*(T_out - T_out_ref) - k2*(T_in - T_in_ref))
            COP    = 1 + (COP_nom - 1) * factor

        Args:
            T_outdoor: Outdoor temperature (°C)
            T_indoor: Indoor temperature (°C)

        Returns:
            COP: Coefficient of performance (> 1)
        """
        dT_outdoor = T_outdoor - self.T_outdoor_ref
        dT_indoor = T_indoor - self.T_indoor_ref

        factor = 1.0 + self.k1 * dT_outdoor - self.k2 * dT_indoor
        factor = np.clip(factor, self.factor_min, self.factor_max)

        return float(1.0 + (self.nominal_cop - 1.0) * factor)


class BoilerModel:
    """
    Gas boiler with a modulation floor.

    Loads below the floor can only be met by firing on and off within the
    step, which costs efficiency. The smaller the load relative to the
    floor, the larger the penalty.
    """

    def __init__(self, max_kw: float, min_kw: Optional[float], base_eta: float, config: Dict):
        """
        Args:
            max_kw: Maximum output (kW)
            min_kw: Minimum stable output (kW); None derives it from the
                turndown ratio
            base_eta: Steady-state efficiency
            config: ``boiler`` section of the solver parameters
        """
        self.max_kw = max(0.0, max_kw)
        self.min_kw = None if min_kw is None else max(0.0, min_kw)
        self.base_eta = base_eta
        self.default_min_kw = float(config['min_kw'])
        self.turndown_ratio = float(config['turndown_ratio'])
        self.cycling_penalty = float(config['cycling_efficiency_penalty'])
        self.eta_floor = min(float(config['cycling_efficiency_floor']),
                             float(config['cycling_floor_fraction']) * base_eta)

    @property
    def modulation_floor_kw(self) -> float:
        """
        Lowest continuous output.

        A stated minimum output is taken as is. Without one, larger boilers
        turn down less far: the floor is max_kw / turndown_ratio, never
        below the default minimum.
        """
        if self.min_kw is not None:
            return self.min_kw
        if self.turndown_ratio <= 0:
            return self.default_min_kw
        return max(self.default_min_kw, self.max_kw / self.turndown_ratio)

    def is_cycling(self, load_kw: float) -> bool:
        return 0 < load_kw < self.modulation_floor_kw

    def calculate_efficiency(self, load_kw: float) -> Tuple[float, bool]:
        """
        Efficiency at a firing load.

        Args:
            load_kw: Heat output requested from the boiler (kW)

        Returns:
            (eta, cycling): Efficiency and whether the boiler short-cycles
        """
        floor = self.modulation_floor_kw
        if floor <= 0 or not self.is_cycling(load_kw):
            return self.base_eta, False

        # Half the penalty just under the floor, the full penalty near zero load
        severity = 0.5 + 0.5 * (1.0 - load_kw / floor)
        eta = self.base_eta - self.cycling_penalty * severity
        return max(self.eta_floor, eta), True


class CylinderStore:
    """
    Stored hot-water cylinder tracked as a state of charge (0-100 %).

    Draws are taken from the store first; the heat source then tops it up
    with whatever capacity is left after space heating.
    """

    def __init__(self, volume_l: float, soc_pct: float = 100.0,
                 delta_t_c: float = DHW_DELTA_T_C):
        self.volume_l = volume_l
        self.capacity_kwh = stored_energy_kwh(volume_l, delta_t_c)
        self.soc_pct = float(np.clip(soc_pct, 0.0, 100.0))

    @property
    def stored_kwh(self) -> float:
        return self.capacity_kwh * self.soc_pct / 100.0

    @property
    def deficit_kwh(self) -> float:
        return self.capacity_kwh - self.stored_kwh

    def _set_stored(self, kwh: float):
        if self.capacity_kwh <= 0:
            self.soc_pct = 0.0
            return
        self.soc_pct = float(np.clip(100.0 * kwh / self.capacity_kwh, 0.0, 100.0))

    def draw(self, energy_kwh: float) -> float:
        """
        Take a draw from the store.

        Returns:
            Energy actually supplied (kWh); the store never goes below empty
        """
        supplied = min(max(0.0, energy_kwh), self.stored_kwh)
        self._set_stored(self.stored_kwh - supplied)
        return supplied

    def reheat(self, available_kw: float, dt_hours: float) -> float:
        """
        Top the store up from spare heat-source capacity.

        Returns:
            Reheat power used over the step (kW)
        """
        if available_kw <= 0 or dt_hours <= 0:
            return 0.0
        reheat_kw = min(available_kw, self.deficit_kwh / dt_hours)
        self._set_stored(self.stored_kwh + reheat_kw * dt_hours)
        return reheat_kw
