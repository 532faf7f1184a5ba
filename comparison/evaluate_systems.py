"""
Evaluate and compare candidate heat sources for one building.

Runs each candidate system through the same 24-hour day (same building,
same draw schedule, same supply path) and compares comfort, energy and
hot-water performance.
"""

import argparse
import logging
import os
import re
from dataclasses import asdict
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from analysis.data_logger import TimelineLogger
from analysis.metrics import calculate_running_cost, calculate_timeline_metrics
from analysis.visualization import plot_system_comparison, plot_temperature_overlay, plot_timeline
from comparison.scenarios import DEFAULT_EVENTS, system_label
from thermal_solver.schema import EventLike
from thermal_solver import (
    CoreInput,
    SystemConfig,
    SystemFamily,
    TimelineResult,
    build_system_config,
    load_solver_config,
    solve_system_timeline,
)

logger = logging.getLogger(__name__)

DEFAULT_SYSTEMS = ('on_demand', 'stored_unvented', 'ashp')

COMPARISON_COLUMNS = {
    'min_temperature': 'Min Temp (°C)',
    'comfort_deficit_deg_hours': 'Comfort Deficit (K·h)',
    'total_delivered_kwh': 'Delivered (kWh)',
    'total_input_kwh': 'Input (kWh)',
    'overall_efficiency': 'Efficiency / COP',
    'cycling_steps': 'Cycling Steps',
    'min_dhw_state': 'Min DHW State (%)',
    'dhw_unmet_kwh': 'DHW Unmet (kWh)',
    'total_cost_gbp': 'Cost (£)',
}


def _slug(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", label.lower()).strip("_")


def solve_candidates(core: CoreInput,
                     system_ids: Sequence[str] = DEFAULT_SYSTEMS,
                     events: Sequence[EventLike] = DEFAULT_EVENTS,
                     supply_path: Optional[str] = None,
                     current_heat_source_type: Optional[str] = None,
                     config: Optional[Dict] = None) -> Dict[str, Tuple[SystemConfig, TimelineResult]]:
    """
    Solve every candidate independently.

    Args:
        core: Building parameters shared by every candidate
        system_ids: Family identifiers (``"current"`` allowed)
        events: Draw schedule
        supply_path: Supply-path setting for the draws
        current_heat_source_type: Declared existing heat source
        config: Solver parameters (packaged defaults when None)

    Returns:
        Dict of {label: (system, timeline)} in candidate order
    """
    cfg = load_solver_config(config)
    solved = {}

    for system_id in system_ids:
        system = build_system_config(
            system_id,
            core.peak_heat_loss_kw,
            current_heat_source_type=current_heat_source_type,
            config=cfg,
        )
        label = system_label(system_id, current_heat_source_type)
        logger.debug("Solving candidate %s (%s, %.2f kW)", label, system.family.value, system.max_kw)
        solved[label] = (system, solve_system_timeline(core, system, events, supply_path, cfg))

    return solved


def compare_systems(core: CoreInput,
                    system_ids: Sequence[str] = DEFAULT_SYSTEMS,
                    events: Sequence[EventLike] = DEFAULT_EVENTS,
                    supply_path: Optional[str] = None,
                    current_heat_source_type: Optional[str] = None,
                    config: Optional[Dict] = None,
                    gas_price: float = 0.07,
                    electricity_price: float = 0.25,
                    save_dir: Optional[str] = None,
                    verbose: bool = True) -> pd.DataFrame:
    """
    Compare candidate systems on the same building and day.

    Args:
        core: Building parameters
        system_ids: Candidate family identifiers
        events: Draw schedule
        supply_path: Supply-path setting for the draws
        current_heat_source_type: Declared existing heat source
        config: Solver parameters
        gas_price: Gas unit price (£/kWh) for boilers
        electricity_price: Electricity unit price (£/kWh) for heat pumps
        save_dir: Directory to save results (nothing is written when None)
        verbose: Print the comparison table

    Returns:
        DataFrame with one row per candidate
    """
    solved = solve_candidates(core, system_ids, events, supply_path, current_heat_source_type, config)

    rows = []
    for label, (system, result) in solved.items():
        metrics = calculate_timeline_metrics(
            result,
            setpoint_home_c=core.setpoint_home_c,
            base_eta=system.base_eta if system.family.is_boiler else None,
        )
        price = electricity_price if system.family is SystemFamily.HEAT_PUMP else gas_price
        metrics.update(calculate_running_cost(metrics['total_input_kwh'], price))
        metrics.setdefault('cycling_steps', 0)
        rows.append({'system': label, 'family': system.family.value, 'max_kw': system.max_kw, **metrics})

    comparison_df = pd.DataFrame(rows)

    if save_dir:
        os.makedirs(save_dir, exist_ok=True)
        run_logger = TimelineLogger(log_dir=save_dir, experiment_name='latest')
        run_logger.save_config({
            'core': asdict(core),
            'systems': list(system_ids),
            'supply_path': supply_path,
            'current_heat_source_type': current_heat_source_type,
        })
        for row, (label, (_, result)) in zip(rows, solved.items()):
            run_logger.log_run(_slug(label), result, row)
        run_logger.save_summary({'systems': rows})

        comparison_df.to_csv(os.path.join(save_dir, 'system_comparison.csv'), index=False)
        plot_system_comparison(
            comparison_df,
            ['total_input_kwh', 'overall_efficiency', 'min_temperature', 'dhw_unmet_kwh'],
            save_path=os.path.join(save_dir, 'system_comparison.png'),
        )
        plot_temperature_overlay(
            {label: result for label, (_, result) in solved.items()},
            save_path=os.path.join(save_dir, 'temperature_overlay.png'),
        )
        for label, (_, result) in solved.items():
            plot_timeline(
                result, title=label, setpoint_home_c=core.setpoint_home_c,
                save_path=os.path.join(save_dir, f"{_slug(label)}_timeline.png"),
            )

    if verbose:
        table = comparison_df[['system'] + list(COMPARISON_COLUMNS)].rename(columns=COMPARISON_COLUMNS)
        print("=" * 70)
        print("SYSTEM COMPARISON")
        print("=" * 70)
        print(table.to_string(index=False, float_format=lambda v: f"{v:.2f}"))
        print("=" * 70)

    return comparison_df


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='Compare heat sources over a 24-hour day')
    parser.add_argument('--peak-heat-loss', type=float, default=8.0,
                        help='Peak heat loss at design conditions (kW)')
    parser.add_argument('--tau', type=float, default=35.0,
                        help='Building thermal time constant (hours)')
    parser.add_argument('--outdoor-temp', type=float, default=5.0,
                        help='Outdoor temperature (°C)')
    parser.add_argument('--systems', type=str, nargs='+', default=list(DEFAULT_SYSTEMS),
                        help='Candidate system identifiers')
    parser.add_argument('--supply-path', type=str, default=None,
                        help='DHW supply path (hot_water_system, cold_only, mixed, electric)')
    parser.add_argument('--current-type', type=str, default=None,
                        help="Existing heat source, used for the 'current' system")
    parser.add_argument('--config', type=str, default=None,
                        help='Path to a solver config YAML file')
    parser.add_argument('--save-dir', type=str, default=None,
                        help='Directory to save results and plots')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    core = CoreInput(
        peak_heat_loss_kw=args.peak_heat_loss,
        tau_hours=args.tau,
        outdoor_temp_c=args.outdoor_temp,
    )
    compare_systems(
        core,
        system_ids=args.systems,
        supply_path=args.supply_path,
        current_heat_source_type=args.current_type,
        config=load_solver_config(args.config),
        save_dir=args.save_dir,
    )

    if args.save_dir:
        print(f"\n✓ Results saved to {args.save_dir}")


if __name__ == "__main__":
    main()
