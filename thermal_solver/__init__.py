"""24-hour thermal and DHW dispatch solver."""

from .schema import (
    SOLVER_STEPS,
    STEP_MINUTES,
    CoreInput,
    DrawEvent,
    DrawKind,
    Intensity,
    SimulationState,
    SupplyPath,
    SystemConfig,
    SystemFamily,
    TimelineResult,
)
from .config import load_solver_config
from .flow_physics import dhw_kw_from_flow
from .system_config import DELTA_T_DESIGN, build_system_config
from .dhw_events import normalise_supply_path
from .timeline import solve_system_timeline

__all__ = [
    'SOLVER_STEPS', 'STEP_MINUTES', 'DELTA_T_DESIGN',
    'CoreInput', 'DrawEvent', 'DrawKind', 'Intensity', 'SimulationState',
    'SupplyPath', 'SystemConfig', 'SystemFamily', 'TimelineResult',
    'load_solver_config', 'dhw_kw_from_flow', 'build_system_config',
    'normalise_supply_path', 'solve_system_timeline',
]
