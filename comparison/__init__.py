"""Household scenarios and side-by-side system comparison."""

from comparison.scenarios import (
    DEFAULT_EVENTS,
    LifestyleProfile,
    generate_cold_flow_lpm,
    generate_dhw_events_from_profile,
    system_label,
)
from comparison.evaluate_systems import compare_systems, solve_candidates

__all__ = [
    'DEFAULT_EVENTS', 'LifestyleProfile', 'generate_cold_flow_lpm',
    'generate_dhw_events_from_profile', 'system_label', 'compare_systems', 'solve_candidates',
]
