"""
Household Day Scenarios

Draw schedules for a typical UK household day, built either from a fixed
template or from a short lifestyle profile, plus the labels used when
candidate systems are reported side by side.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from thermal_solver.schema import (
    SOLVER_STEPS,
    STEP_MINUTES,
    DrawEvent,
    DrawKind,
    EventLike,
    Intensity,
    as_draw_event,
)

# 07:00 sink, 19:00 bath, 20:00 dishwasher
DEFAULT_EVENTS = (
    DrawEvent(420, 435, DrawKind.SINK, Intensity.MEDIUM),
    DrawEvent(1140, 1170, DrawKind.BATH, Intensity.HIGH),
    DrawEvent(1200, 1245, DrawKind.DISHWASHER, Intensity.LOW),
)

# Cold-mains flow of cold-fill appliances (L/min)
COLD_FILL_FLOW_LPM = {
    DrawKind.DISHWASHER: 10.0,
    DrawKind.WASHING_MACHINE: 7.0,
}

SYSTEM_LABELS = {
    'current': 'Current System',
    'on_demand': 'Combi Boiler',
    'stored_vented': 'Stored (Vented Cylinder)',
    'stored_unvented': 'Stored (Unvented Cylinder)',
    'ashp': 'Air Source Heat Pump',
    'regular_vented': 'Regular Vented Boiler',
    'system_unvented': 'System Unvented Boiler',
}

CURRENT_SYSTEM_LABELS = {
    'combi': 'Current Combi Boiler',
    'system': 'Current System Boiler',
    'regular': 'Current Regular Boiler',
    'ashp': 'Current ASHP',
    'other': 'Current Heat Source',
}


@dataclass
class LifestyleProfile:
    """Answers that shape the household's hot-water day."""
    morning_peak: bool = True
    evening_peak: bool = True
    has_bath: bool = False
    two_simultaneous_bathrooms: bool = False
    has_dishwasher: bool = False
    has_washing_machine: bool = False


def generate_dhw_events_from_profile(profile: LifestyleProfile) -> List[DrawEvent]:
    """
    Build a deterministic draw schedule from a lifestyle profile.

    A second bathroom adds a sink draw overlapping the main peak draw, so
    both run at once. Cold-fill appliances are included; they load the
    cold mains but not the heat source.
    """
    events = []

    if profile.morning_peak:
        if profile.has_bath:
            events.append(DrawEvent(420, 450, DrawKind.BATH, Intensity.HIGH))
        else:
            events.append(DrawEvent(420, 435, DrawKind.SINK, Intensity.MEDIUM))
        if profile.two_simultaneous_bathrooms:
            events.append(DrawEvent(425, 445, DrawKind.SINK, Intensity.MEDIUM))

    if profile.evening_peak:
        if profile.has_bath:
            events.append(DrawEvent(1140, 1170, DrawKind.BATH, Intensity.HIGH))
        else:
            events.append(DrawEvent(1140, 1155, DrawKind.SINK, Intensity.MEDIUM))
        if profile.two_simultaneous_bathrooms:
            events.append(DrawEvent(1145, 1165, DrawKind.SINK, Intensity.MEDIUM))
        if profile.has_dishwasher:
            events.append(DrawEvent(1200, 1245, DrawKind.DISHWASHER, Intensity.LOW))
    elif profile.has_dishwasher:
        # Lunchtime run when nobody is home in the evening
        events.append(DrawEvent(780, 825, DrawKind.DISHWASHER, Intensity.LOW))

    if profile.has_washing_machine:
        # Two fill pulses
        events.append(DrawEvent(540, 550, DrawKind.WASHING_MACHINE, Intensity.LOW))
        events.append(DrawEvent(595, 605, DrawKind.WASHING_MACHINE, Intensity.LOW))

    return events


def generate_cold_flow_lpm(events: Sequence[EventLike]) -> np.ndarray:
    """
    96-point cold-mains flow (L/min) from cold-fill appliance events.

    A step carries the largest appliance flow whose window touches it.
    These are hydraulic loads only; they never add thermal demand.
    """
    cold_flow = np.zeros(SOLVER_STEPS)
    for event in map(as_draw_event, events):
        flow = COLD_FILL_FLOW_LPM.get(event.kind)
        if flow is None:
            continue
        start_idx = event.start_min // STEP_MINUTES
        end_idx = min(SOLVER_STEPS, -(-event.end_min // STEP_MINUTES))
        cold_flow[start_idx:end_idx] = np.maximum(cold_flow[start_idx:end_idx], flow)
    return cold_flow


def system_label(system_id: str, current_heat_source_type: Optional[str] = None) -> str:
    """Human-readable name for a system identifier."""
    if system_id == 'current' and current_heat_source_type:
        return CURRENT_SYSTEM_LABELS.get(current_heat_source_type, SYSTEM_LABELS['current'])
    return SYSTEM_LABELS.get(system_id, system_id)
