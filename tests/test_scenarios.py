import numpy as np

from comparison.scenarios import (
    DEFAULT_EVENTS,
    LifestyleProfile,
    generate_cold_flow_lpm,
    generate_dhw_events_from_profile,
    system_label,
)
from thermal_solver.schema import DrawKind, Intensity


def _windows(events):
    return [(e.start_min, e.end_min, e.kind) for e in events]


def test_default_day():
    assert _windows(DEFAULT_EVENTS) == [
        (420, 435, DrawKind.SINK),
        (1140, 1170, DrawKind.BATH),
        (1200, 1245, DrawKind.DISHWASHER),
    ]
    assert DEFAULT_EVENTS[1].intensity is Intensity.HIGH


def test_default_profile_gives_two_sink_draws():
    events = generate_dhw_events_from_profile(LifestyleProfile())
    assert _windows(events) == [(420, 435, DrawKind.SINK), (1140, 1155, DrawKind.SINK)]


def test_bath_household_with_two_bathrooms():
    profile = LifestyleProfile(has_bath=True, two_simultaneous_bathrooms=True, has_dishwasher=True)
    events = generate_dhw_events_from_profile(profile)
    assert _windows(events) == [
        (420, 450, DrawKind.BATH),
        (425, 445, DrawKind.SINK),
        (1140, 1170, DrawKind.BATH),
        (1145, 1165, DrawKind.SINK),
        (1200, 1245, DrawKind.DISHWASHER),
    ]


def test_dishwasher_moves_to_lunchtime_without_evening_peak():
    profile = LifestyleProfile(evening_peak=False, has_dishwasher=True, has_washing_machine=True)
    events = generate_dhw_events_from_profile(profile)
    assert (780, 825, DrawKind.DISHWASHER) in _windows(events)
    assert [e.start_min for e in events if e.kind is DrawKind.WASHING_MACHINE] == [540, 595]


def test_cold_flow_profile():
    profile = LifestyleProfile(has_dishwasher=True, has_washing_machine=True)
    flow = generate_cold_flow_lpm(generate_dhw_events_from_profile(profile))
    assert flow.shape == (96,)
    assert list(np.nonzero(flow)[0]) == [36, 39, 40, 80, 81, 82]
    assert flow[36] == 7.0
    assert flow[80] == 10.0


def test_cold_flow_ignores_hot_draws():
    flow = generate_cold_flow_lpm([{'start_min': 420, 'end_min': 435, 'kind': 'sink'}])
    assert not flow.any()


def test_system_labels():
    assert system_label('on_demand') == 'Combi Boiler'
    assert system_label('ashp') == 'Air Source Heat Pump'
    assert system_label('current') == 'Current System'
    assert system_label('current', 'combi') == 'Current Combi Boiler'
    assert system_label('current', 'unknown') == 'Current System'
    assert system_label('mystery') == 'mystery'
