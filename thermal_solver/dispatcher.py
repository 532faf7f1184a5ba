"""
Heat-source dispatch policies.

Implements one policy per system family:
1. OnDemandPolicy (combi boiler, DHW takes priority over space heating)
2. HeatPumpPolicy (space heating first, spare capacity reheats the cylinder)
3. StoredBoilerPolicy (as the heat pump, with boiler efficiency)

HeatSourceDispatcher picks the policy once from the system family and
applies it to every step of a run.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from .heat_source_model import BoilerModel, CylinderStore, HeatPumpModel
from .schema import DT_HOURS, SimulationState, SystemConfig, SystemFamily

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of one dispatch step."""
    delivered_kw: float
    space_delivered_kw: float
    input_kw: float
    efficiency: float
    dhw_state: float
    shortfall_kw: float = 0.0
    cylinder_soc_pct: Optional[float] = None
    cycling: bool = False


def _input_power(delivered_kw: float, efficiency: float) -> float:
    if delivered_kw <= 0 or efficiency <= 0:
        return 0.0
    return delivered_kw / efficiency


class DispatchPolicy:
    """Base class for all dispatch policies."""

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float):
        """
        Args:
            system: Concrete heat-source configuration
            config: Solver parameters
            dt_hours: Time step (hours)
        """
        self.system = system
        self.max_kw = max(0.0, system.max_kw)
        self.dt = dt_hours
        self.name = "Base"

    def initial_state(self, room_temp_c: float) -> SimulationState:
        return SimulationState(room_temp_c=room_temp_c)

    def dispatch(self, space_kw: float, dhw_kw: float,
                 state: SimulationState, T_outdoor: float,
                 dhw_peak_kw: Optional[float] = None,
                 dhw_coverage: float = 1.0) -> DispatchResult:
        """
        Split the heat source between space heating and DHW for one step.

        Args:
            space_kw: Space-heat demand (kW)
            dhw_kw: DHW thermal load of the active draws (kW)
            state: Run state at the start of the step (updated in place)
            T_outdoor: Outdoor temperature (°C)
            dhw_peak_kw: Largest concurrent DHW load within the step (kW);
                defaults to ``dhw_kw``
            dhw_coverage: Fraction of the step with a draw open

        Returns:
            DispatchResult for the step
        """
        raise NotImplementedError


class OnDemandPolicy(DispatchPolicy):
    """
    Combi boiler heating water as it is drawn.

    While a draw is open the whole output goes to DHW and space heating
    pauses for that part of the step. Capacity is judged against the
    instantaneous draw, so a short bath above the maximum output is still
    reported as shortfall even when its step average is not.
    """

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float):
        super().__init__(system, config, dt_hours)
        self.name = "OnDemand"
        self.boiler = BoilerModel(self.max_kw, system.min_kw, system.base_eta, config['boiler'])

    def dispatch(self, space_kw, dhw_kw, state, T_outdoor, dhw_peak_kw=None, dhw_coverage=1.0):
        space_kw = max(0.0, space_kw)
        if dhw_kw <= 0:
            delivered = min(self.max_kw, space_kw)
            eta, cycling = self.boiler.calculate_efficiency(delivered)
            return DispatchResult(
                delivered_kw=delivered,
                space_delivered_kw=delivered,
                input_kw=_input_power(delivered, eta),
                efficiency=eta,
                dhw_state=100.0,
                cycling=cycling,
            )

        # Capacity is checked against the concurrent flow, not the step average
        instantaneous_kw = dhw_peak_kw if dhw_peak_kw else dhw_kw
        dhw_firing = min(self.max_kw, instantaneous_kw)
        dhw_delivered = dhw_kw * dhw_firing / instantaneous_kw
        shortfall = max(0.0, instantaneous_kw - self.max_kw)
        service = 100.0 * dhw_firing / instantaneous_kw

        # Space heating only pauses while a draw is open
        space_firing = min(self.max_kw, space_kw)
        space_delivered = space_firing * (1.0 - float(np.clip(dhw_coverage, 0.0, 1.0)))

        dhw_eta, dhw_cycling = self.boiler.calculate_efficiency(dhw_firing)
        space_eta, space_cycling = self.boiler.calculate_efficiency(space_firing)
        input_kw = _input_power(dhw_delivered, dhw_eta) + _input_power(space_delivered, space_eta)
        delivered = dhw_delivered + space_delivered
        eta = delivered / input_kw if input_kw > 0 else dhw_eta

        return DispatchResult(
            delivered_kw=delivered,
            space_delivered_kw=space_delivered,
            input_kw=input_kw,
            efficiency=eta,
            dhw_state=service,
            shortfall_kw=shortfall,
            cycling=(dhw_delivered > 0 and dhw_cycling) or (space_delivered > 0 and space_cycling),
        )


class CylinderPolicy(DispatchPolicy):
    """
    Heat source backed by a stored cylinder.

    Draws come out of the cylinder, space heating is served first and the
    capacity left over reheats the store. DHW is never short; the reserve
    (state of charge) is reported instead.
    """

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float):
        super().__init__(system, config, dt_hours)
        dhw_cfg = config['dhw']
        self.initial_soc_pct = float(dhw_cfg['initial_soc_pct'])
        self.cylinder = CylinderStore(float(dhw_cfg['cylinder_volume_l']), self.initial_soc_pct)

    def initial_state(self, room_temp_c):
        return SimulationState(room_temp_c=room_temp_c, cylinder_soc_pct=self.initial_soc_pct)

    def efficiency(self, load_kw: float, state: SimulationState, T_outdoor: float):
        raise NotImplementedError

    def dispatch(self, space_kw, dhw_kw, state, T_outdoor, dhw_peak_kw=None, dhw_coverage=1.0):
        soc = state.cylinder_soc_pct if state.cylinder_soc_pct is not None else self.initial_soc_pct
        self.cylinder.soc_pct = float(np.clip(soc, 0.0, 100.0))

        space_delivered = min(self.max_kw, max(0.0, space_kw))
        self.cylinder.draw(max(0.0, dhw_kw) * self.dt)
        reheat = self.cylinder.reheat(self.max_kw - space_delivered, self.dt)

        delivered = space_delivered + reheat
        eta, cycling = self.efficiency(delivered, state, T_outdoor)
        state.cylinder_soc_pct = self.cylinder.soc_pct

        return DispatchResult(
            delivered_kw=delivered,
            space_delivered_kw=space_delivered,
            input_kw=_input_power(delivered, eta),
            efficiency=eta,
            dhw_state=self.cylinder.soc_pct,
            cylinder_soc_pct=self.cylinder.soc_pct,
            cycling=cycling,
        )


class HeatPumpPolicy(CylinderPolicy):
    """Air-source heat pump; efficiency is the COP at the current conditions."""

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float):
        super().__init__(system, config, dt_hours)
        self.name = "HeatPump"
        hp_cfg = config['heat_pump']
        band = system.design_flow_temp_band
        if band is None:
            band = hp_cfg['design_flow_temp_band']
        self.heat_pump = HeatPumpModel(hp_cfg, band)

    def efficiency(self, load_kw, state, T_outdoor):
        return self.heat_pump.calculate_cop(T_outdoor, state.room_temp_c), False


class StoredBoilerPolicy(CylinderPolicy):
    """System or regular boiler feeding a vented or unvented cylinder."""

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float):
        super().__init__(system, config, dt_hours)
        self.name = "StoredBoiler"
        self.boiler = BoilerModel(self.max_kw, system.min_kw, system.base_eta, config['boiler'])

    def efficiency(self, load_kw, state, T_outdoor):
        return self.boiler.calculate_efficiency(load_kw)


_POLICIES = {
    SystemFamily.ON_DEMAND: OnDemandPolicy,
    SystemFamily.HEAT_PUMP: HeatPumpPolicy,
    SystemFamily.STORED_VENTED: StoredBoilerPolicy,
    SystemFamily.STORED_UNVENTED: StoredBoilerPolicy,
}


class HeatSourceDispatcher:
    """
    Runs the dispatch policy matching a system family.

    A missing boiler efficiency is filled from the ``boiler`` defaults
    before the policy is built. A missing minimum output is left to the
    boiler model, which then derives its floor from the turndown ratio.
    """

    def __init__(self, system: SystemConfig, config: Dict, dt_hours: float = DT_HOURS):
        if system.family is SystemFamily.CURRENT:
            raise ValueError(
                "System family 'current' must be resolved with build_system_config "
                "before dispatch"
            )

        boiler_cfg = config['boiler']
        if system.family.is_boiler and system.base_eta is None:
            system = SystemConfig(
                family=system.family,
                max_kw=system.max_kw,
                min_kw=system.min_kw,
                base_eta=float(boiler_cfg['base_eta']),
                design_flow_temp_band=system.design_flow_temp_band,
            )

        self.system = system
        self.policy = _POLICIES[system.family](system, config, dt_hours)
        logger.debug("Dispatching %s with %s policy (max %.2f kW)",
                     system.family.value, self.policy.name, system.max_kw)

    def initial_state(self, room_temp_c: float) -> SimulationState:
        return self.policy.initial_state(room_temp_c)

    def dispatch(self, space_kw: float, dhw_kw: float,
                 state: SimulationState, T_outdoor: float,
                 dhw_peak_kw: Optional[float] = None,
                 dhw_coverage: float = 1.0) -> DispatchResult:
        return self.policy.dispatch(space_kw, dhw_kw, state, T_outdoor, dhw_peak_kw, dhw_coverage)
