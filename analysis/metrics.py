"""
Performance Metrics and Evaluation

Functions for summarising and comparing 24-hour solver timelines.
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Optional

from thermal_solver.schema import DT_HOURS, TimelineResult


def occupied_mask(home_start_hour: float = 6.0,
                  home_end_hour: float = 23.0) -> np.ndarray:
    """Boolean mask of the steps that fall in the occupied window."""
    hours = TimelineResult.time_minutes() / 60.0
    return (hours >= home_start_hour) & (hours < home_end_hour)


def calculate_timeline_metrics(result: TimelineResult,
                               setpoint_home_c: float = 21.0,
                               comfort_tolerance_c: float = 0.5,
                               base_eta: Optional[float] = None,
                               home_start_hour: float = 6.0,
                               home_end_hour: float = 23.0,
                               dt_hours: float = DT_HOURS) -> Dict:
    """
    Calculate comprehensive metrics from one timeline.

    Args:
        result: Solver output for one system
        setpoint_home_c: Occupied setpoint the comfort metrics refer to
        comfort_tolerance_c: Allowed dip below the setpoint before a step
            counts as cold
        base_eta: Steady-state boiler efficiency; when given, firing steps
            below it are counted as short-cycling
        home_start_hour: Start of the occupied window
        home_end_hour: End of the occupied window
        dt_hours: Time step duration in hours

    Returns:
        Dictionary with calculated metrics
    """
    metrics = {}
    T = result.room_temp_c

    # Temperature metrics
    metrics['avg_temperature'] = float(np.mean(T))
    metrics['min_temperature'] = float(np.min(T))
    metrics['max_temperature'] = float(np.max(T))
    metrics['final_temperature'] = float(T[-1])
    metrics['std_temperature'] = float(np.std(T))

    # Comfort metrics (occupied hours only)
    home = occupied_mask(home_start_hour, home_end_hour)
    deficit = np.clip(setpoint_home_c - T, 0.0, None) * home
    too_cold = (deficit > comfort_tolerance_c).sum()
    metrics['comfort_violations'] = int(too_cold)
    metrics['hours_too_cold'] = float(too_cold * dt_hours)
    metrics['comfort_deficit_deg_hours'] = float(deficit.sum() * dt_hours)

    # Energy metrics
    metrics['total_demand_kwh'] = float(result.heat_demand_kw.sum() * dt_hours)
    metrics['total_delivered_kwh'] = float(result.heat_delivered_kw.sum() * dt_hours)
    metrics['total_input_kwh'] = float(result.input_power_kw.sum() * dt_hours)
    metrics['peak_input_kw'] = float(result.input_power_kw.max())

    # Delivered-weighted efficiency (seasonal COP for heat pumps)
    if metrics['total_input_kwh'] > 0:
        metrics['overall_efficiency'] = metrics['total_delivered_kwh'] / metrics['total_input_kwh']
    else:
        metrics['overall_efficiency'] = 0.0

    firing = result.heat_delivered_kw > 0
    metrics['firing_steps'] = int(firing.sum())
    if base_eta is not None:
        metrics['cycling_steps'] = int((firing & (result.efficiency < base_eta - 1e-9)).sum())

    # DHW metrics
    metrics['min_dhw_state'] = float(result.dhw_state.min())
    metrics['dhw_unmet_kwh'] = float(result.dhw_shortfall_kw.sum() * dt_hours)
    metrics['dhw_shortfall_steps'] = int((result.dhw_shortfall_kw > 0).sum())

    return metrics


def calculate_running_cost(input_kwh: float,
                           unit_price: float = 0.07,
                           standing_charge: float = 0.0) -> Dict:
    """
    Calculate the cost of a day's fuel or electricity.

    Args:
        input_kwh: Energy input over the day (kWh)
        unit_price: Price per kWh (£)
        standing_charge: Fixed daily charge (£)

    Returns:
        Dictionary with cost metrics
    """
    energy_cost = input_kwh * unit_price
    return {
        'energy_cost_gbp': energy_cost,
        'standing_charge_gbp': standing_charge,
        'total_cost_gbp': energy_cost + standing_charge,
    }


def compare_timelines(results: Dict[str, TimelineResult],
                      metrics_to_compare: Optional[List[str]] = None,
                      **metric_kwargs) -> pd.DataFrame:
    """
    Compare several systems solved for the same building and day.

    Args:
        results: Dictionary mapping system names to their timelines
        metrics_to_compare: Metric names to keep (all when None)
        **metric_kwargs: Forwarded to calculate_timeline_metrics

    Returns:
        DataFrame with one row per system
    """
    comparison = []

    for system_name, result in results.items():
        metrics = calculate_timeline_metrics(result, **metric_kwargs)
        if metrics_to_compare is not None:
            metrics = {k: v for k, v in metrics.items() if k in metrics_to_compare}
        comparison.append({'system': system_name, **metrics})

    return pd.DataFrame(comparison)
