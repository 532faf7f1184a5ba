"""
Solver Data Model

Enumerations and records passed across the solver boundary: building
inputs, heat-source configuration, DHW draw events, the per-run simulation
state and the 96-step output timeline.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

#: Number of 15-minute timesteps in 24 hours.
SOLVER_STEPS = 96

#: Timestep duration (minutes).
STEP_MINUTES = 15

#: Timestep duration (hours).
DT_HOURS = STEP_MINUTES / 60.0

MINUTES_PER_DAY = SOLVER_STEPS * STEP_MINUTES

#: Upper bound on a gas boiler's steady-state efficiency (condensing).
MAX_COMBUSTION_ETA = 0.95


def fold_key(value: str) -> str:
    """Case-fold an identifier; spaces and hyphens become underscores."""
    return value.strip().lower().replace('-', '_').replace(' ', '_')


class _LookupEnum(Enum):
    """Enum with a case-insensitive ``from_value`` that also honours aliases."""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        key = fold_key(value)
        key = cls._aliases().get(key, key)
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown {cls.__name__}: {value!r}")


class SystemFamily(_LookupEnum):
    """Heat-source families the dispatcher knows how to run."""
    ON_DEMAND = 'on_demand'
    HEAT_PUMP = 'ashp'
    STORED_VENTED = 'stored_vented'
    STORED_UNVENTED = 'stored_unvented'
    CURRENT = 'current'  # resolved by build_system_config, never dispatched

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            'combi': 'on_demand',
            'heat_pump': 'ashp',
            'regular_vented': 'stored_vented',
            'system_unvented': 'stored_unvented',
        }

    @property
    def has_cylinder(self) -> bool:
        return self in (SystemFamily.HEAT_PUMP, SystemFamily.STORED_VENTED,
                        SystemFamily.STORED_UNVENTED)

    @property
    def is_boiler(self) -> bool:
        return self in (SystemFamily.ON_DEMAND, SystemFamily.STORED_VENTED,
                        SystemFamily.STORED_UNVENTED)


class SupplyPath(_LookupEnum):
    """How scheduled draws reach the simulated heat source."""
    HOT_WATER_SYSTEM = 'hot_water_system'
    COLD_ONLY = 'cold_only'
    MIXED = 'mixed'
    ELECTRIC_COLD_ONLY = 'electric_cold_only'


class DrawKind(_LookupEnum):
    SINK = 'sink'
    SHOWER = 'shower'
    BATH = 'bath'
    DISHWASHER = 'dishwasher'
    WASHING_MACHINE = 'washing_machine'

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {'tap': 'sink', 'basin': 'sink'}

    @property
    def is_cold_fill(self) -> bool:
        return self in (DrawKind.DISHWASHER, DrawKind.WASHING_MACHINE)


class Intensity(_LookupEnum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {'med': 'medium'}


@dataclass(frozen=True)
class CoreInput:
    """
    Building parameters shared by every candidate system.

    Attributes:
        peak_heat_loss_kw: Heat loss at the design outdoor temperature (kW)
        tau_hours: Thermal time constant of the lumped building mass (h)
        outdoor_temp_c: Outdoor temperature held for the whole day (°C)
        setpoint_home_c: Occupied setpoint (°C)
        setpoint_away_c: Unoccupied setpoint (°C)
    """
    peak_heat_loss_kw: float
    tau_hours: float
    outdoor_temp_c: float = 5.0
    setpoint_home_c: float = 21.0
    setpoint_away_c: float = 17.0

    def __post_init__(self):
        if not self.tau_hours > 0:
            raise ValueError(f"tau_hours must be positive, got {self.tau_hours}")
        if not self.peak_heat_loss_kw >= 0:
            raise ValueError(f"peak_heat_loss_kw must be >= 0, got {self.peak_heat_loss_kw}")


@dataclass(frozen=True)
class SystemConfig:
    """
    Capacity and efficiency profile of one heat source.

    ``min_kw`` and ``base_eta`` apply to boilers, ``design_flow_temp_band``
    to heat pumps. A missing efficiency is filled from the solver defaults;
    a missing minimum output is derived from the boiler turndown ratio.
    """
    family: SystemFamily
    max_kw: float
    min_kw: Optional[float] = None
    base_eta: Optional[float] = None
    design_flow_temp_band: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'family', SystemFamily.from_value(self.family))
        if self.base_eta is not None and not 0 < self.base_eta <= 1:
            raise ValueError(f"base_eta must be in (0, 1], got {self.base_eta}")
        if self.family.is_boiler and self.base_eta is not None and self.base_eta > MAX_COMBUSTION_ETA:
            raise ValueError(
                f"base_eta {self.base_eta} exceeds the {MAX_COMBUSTION_ETA} limit for a gas boiler"
            )


@dataclass(frozen=True)
class DrawEvent:
    """A scheduled hot/cold water draw between two minutes of the day."""
    start_min: int
    end_min: int
    kind: DrawKind
    intensity: Intensity = Intensity.MEDIUM

    def __post_init__(self):
        object.__setattr__(self, 'kind', DrawKind.from_value(self.kind))
        object.__setattr__(self, 'intensity', Intensity.from_value(self.intensity))
        if not 0 <= self.start_min < self.end_min <= MINUTES_PER_DAY:
            raise ValueError(
                f"Draw window must satisfy 0 <= start < end <= {MINUTES_PER_DAY}, "
                f"got {self.start_min}-{self.end_min}"
            )


@dataclass
class SimulationState:
    """Mutable state threaded through one run by the timeline driver."""
    room_temp_c: float
    cylinder_soc_pct: Optional[float] = None


@dataclass
class TimelineResult:
    """
    Parallel 96-point series (index 0 = 00:00, index 95 = 23:45).

    Attributes:
        room_temp_c: Room temperature at the end of each step (°C)
        heat_delivered_kw: Heat output of the source, space heat + DHW (kW)
        heat_demand_kw: Space-heat demand to track the setpoint (kW)
        efficiency: Boiler efficiency (≤ 1) or heat-pump COP (> 1)
        input_power_kw: Fuel or electrical input (kW)
        dhw_state: Service level (on-demand) or cylinder reserve (0-100)
        dhw_shortfall_kw: Unmet DHW load of an on-demand source (kW)
    """
    room_temp_c: np.ndarray
    heat_delivered_kw: np.ndarray
    heat_demand_kw: np.ndarray
    efficiency: np.ndarray
    input_power_kw: np.ndarray
    dhw_state: np.ndarray
    dhw_shortfall_kw: np.ndarray

    @classmethod
    def empty(cls) -> 'TimelineResult':
        return cls(**{f.name: np.zeros(SOLVER_STEPS) for f in fields(cls)})

    @staticmethod
    def time_minutes() -> np.ndarray:
        return np.arange(SOLVER_STEPS) * STEP_MINUTES

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame(self.as_dict())
        df.index = pd.Index(self.time_minutes(), name='minute')
        return df


EventLike = Union[DrawEvent, Dict]


def as_draw_event(event: EventLike) -> DrawEvent:
    """Accept a DrawEvent or a mapping with start/end minute, kind and intensity."""
    if isinstance(event, DrawEvent):
        return event
    try:
        return DrawEvent(
            start_min=event['start_min'],
            end_min=event['end_min'],
            kind=event['kind'],
            intensity=event.get('intensity', Intensity.MEDIUM),
        )
    except KeyError as exc:
        raise ValueError(f"Draw event is missing field {exc}") from exc
