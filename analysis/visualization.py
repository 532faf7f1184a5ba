"""
Visualization Utilities

Functions for plotting a single 24-hour timeline and for comparing
candidate systems side by side.
"""

import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd
import numpy as np
from typing import Dict, List, Optional

from thermal_solver.schema import TimelineResult


# Set style
sns.set_style("whitegrid")
plt.rcParams['figure.figsize'] = (12, 6)
plt.rcParams['font.size'] = 10


def _finish(save_path: Optional[str], description: str):
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"{description} plot saved to {save_path}")
    else:
        plt.show()

    plt.close()


def plot_timeline(result: TimelineResult,
                  title: str = '',
                  setpoint_home_c: Optional[float] = None,
                  save_path: Optional[str] = None):
    """
    Plot temperature, heat flows, efficiency and DHW state over the day.

    Args:
        result: Solver output for one system
        title: Figure title (usually the system label)
        setpoint_home_c: Draw the occupied setpoint as a reference line
        save_path: Path to save figure
    """
    fig, axes = plt.subplots(4, 1, figsize=(14, 12), sharex=True)
    hours = TimelineResult.time_minutes() / 60.0

    # Temperature plot
    ax = axes[0]
    ax.plot(hours, result.room_temp_c, label='Room', linewidth=2, color='red')
    if setpoint_home_c is not None:
        ax.axhline(setpoint_home_c, color='green', linestyle='--', alpha=0.5, label='Home setpoint')
    ax.set_ylabel('Temperature (°C)')
    ax.set_title(f'{title} Temperature Profile'.strip())
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    # Heat flows
    ax = axes[1]
    ax.plot(hours, result.heat_demand_kw, label='Space demand', color='orange', linewidth=1.5)
    ax.step(hours, result.heat_delivered_kw, where='post', label='Delivered', color='darkred', linewidth=1.5)
    ax.step(hours, result.input_power_kw, where='post', label='Input', color='gray', alpha=0.7)
    ax.set_ylabel('Power (kW)')
    ax.set_title('Heat Demand and Output')
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    # Efficiency / COP
    ax = axes[2]
    ax.plot(hours, result.efficiency, color='purple', linewidth=1.5)
    ax.set_ylabel('Efficiency / COP')
    ax.set_title('Conversion Efficiency')
    ax.grid(True, alpha=0.3)

    # DHW
    ax = axes[3]
    ax.plot(hours, result.dhw_state, label='DHW state (%)', color='steelblue', linewidth=1.5)
    ax.set_ylim(-5, 105)
    ax.set_ylabel('DHW state (%)')
    if np.any(result.dhw_shortfall_kw > 0):
        ax2 = ax.twinx()
        ax2.bar(hours, result.dhw_shortfall_kw, width=0.25, align='edge',
                color='crimson', alpha=0.4, label='Shortfall (kW)')
        ax2.set_ylabel('Shortfall (kW)')
    ax.set_xlabel('Hour of day')
    ax.set_xlim(0, 24)
    ax.set_title('Hot Water')
    ax.grid(True, alpha=0.3)

    _finish(save_path, 'Timeline')


def plot_system_comparison(comparison_df: pd.DataFrame,
                           metrics: List[str],
                           save_path: Optional[str] = None):
    """
    Plot metric bars for several systems.

    Args:
        comparison_df: Output of compare_timelines (one row per system)
        metrics: Metric columns to plot
        save_path: Path to save figure
    """
    n_metrics = len(metrics)
    n_cols = 2
    n_rows = (n_metrics + 1) // 2

    fig, axes = plt.subplots(n_rows, n_cols, figsize=(14, 4 * n_rows), squeeze=False)
    axes = axes.flatten()

    systems = comparison_df['system']
    colors = plt.cm.viridis(np.linspace(0.3, 0.9, len(systems)))

    for idx, metric in enumerate(metrics):
        ax = axes[idx]
        if metric not in comparison_df.columns:
            ax.set_visible(False)
            continue

        ax.bar(systems, comparison_df[metric], color=colors, alpha=0.8)
        ax.set_ylabel(metric.replace('_', ' ').title())
        ax.set_title(f'{metric.replace("_", " ").title()} Comparison')
        ax.grid(True, alpha=0.3, axis='y')

        if len(systems) > 3:
            ax.tick_params(axis='x', labelrotation=45)

    # Hide unused subplots
    for idx in range(n_metrics, len(axes)):
        axes[idx].set_visible(False)

    _finish(save_path, 'System comparison')


def plot_temperature_overlay(results: Dict[str, TimelineResult],
                             save_path: Optional[str] = None):
    """Overlay the room temperature of several systems on one axis."""
    fig, ax = plt.subplots(figsize=(12, 5))
    hours = TimelineResult.time_minutes() / 60.0
    palette = sns.color_palette('tab10', len(results))

    for (name, result), color in zip(results.items(), palette):
        ax.plot(hours, result.room_temp_c, label=name, color=color, linewidth=1.8)

    ax.set_xlabel('Hour of day')
    ax.set_ylabel('Temperature (°C)')
    ax.set_xlim(0, 24)
    ax.set_title('Room Temperature by System')
    ax.legend(loc='lower right')
    ax.grid(True, alpha=0.3)

    _finish(save_path, 'Temperature overlay')
