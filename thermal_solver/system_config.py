"""
System Configuration Builder

Turns a system identifier plus the building's peak heat loss into a concrete
:class:`SystemConfig`. The ``"current"`` identifier is an alias for whatever
heat source the household already has; it is resolved here, once, so the
dispatcher only ever sees concrete families.
"""

import logging
from typing import Dict, Optional, Union

from .config import load_solver_config
from .schema import SystemConfig, SystemFamily

logger = logging.getLogger(__name__)

#: Design temperature difference (K): home setpoint − outdoor design = 21 − 5.
#: Exposed for sizing auxiliary equipment; the dispatcher does not use it.
DELTA_T_DESIGN = 16.0

# Declared existing heat source -> concrete family
_CURRENT_SOURCE_FAMILIES = {
    'combi': SystemFamily.ON_DEMAND,
    'ashp': SystemFamily.HEAT_PUMP,
    'heat_pump': SystemFamily.HEAT_PUMP,
    'system': SystemFamily.STORED_UNVENTED,
    'regular': SystemFamily.STORED_VENTED,
}


def resolve_current_family(current_heat_source_type: Optional[str]) -> SystemFamily:
    """Map the household's declared heat source onto a concrete family."""
    key = (current_heat_source_type or '').strip().lower()
    family = _CURRENT_SOURCE_FAMILIES.get(key)
    if family is None:
        logger.warning(
            "Unknown current heat source type %r, assuming an on-demand boiler",
            current_heat_source_type,
        )
        return SystemFamily.ON_DEMAND
    return family


def build_system_config(system_id: Union[str, SystemFamily],
                        peak_heat_loss_kw: float,
                        nominal_output_kw: Optional[float] = None,
                        base_eta: Optional[float] = None,
                        min_kw: Optional[float] = None,
                        design_flow_temp_band: Optional[float] = None,
                        current_heat_source_type: Optional[str] = None,
                        config: Optional[Dict] = None) -> SystemConfig:
    """
    Build the capacity/efficiency profile for one candidate system.

    Args:
        system_id: Family identifier or alias (``"current"`` allowed)
        peak_heat_loss_kw: Building heat loss at design conditions (kW)
        nominal_output_kw: Boiler output override (kW); ignored for heat pumps
        base_eta: Boiler steady-state efficiency override
        min_kw: Boiler minimum stable output override (kW)
        design_flow_temp_band: Heat-pump design flow temperature (°C)
        current_heat_source_type: Declared existing source, used for ``"current"``
        config: Solver parameters (packaged defaults when None)

    Returns:
        Concrete SystemConfig (never of the CURRENT family)
    """
    cfg = config if config is not None else load_solver_config()
    family = SystemFamily.from_value(system_id)

    if family is SystemFamily.CURRENT:
        family = resolve_current_family(current_heat_source_type)
        logger.debug("Resolved 'current' (%s) to %s", current_heat_source_type, family.value)

    if family is SystemFamily.HEAT_PUMP:
        hp_cfg = cfg['heat_pump']
        band = design_flow_temp_band if design_flow_temp_band is not None else hp_cfg['design_flow_temp_band']
        return SystemConfig(
            family=family,
            max_kw=peak_heat_loss_kw * hp_cfg['capacity_headroom'],
            design_flow_temp_band=float(band),
        )

    boiler_cfg = cfg['boiler']
    max_kw = nominal_output_kw if nominal_output_kw is not None else boiler_cfg['default_max_kw'][family.value]
    return SystemConfig(
        family=family,
        max_kw=float(max_kw),
        min_kw=float(min_kw) if min_kw is not None else None,
        base_eta=float(base_eta if base_eta is not None else boiler_cfg['base_eta']),
    )
