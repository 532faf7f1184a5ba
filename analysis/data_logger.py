"""
Data Logger for Solver Runs

Writes timelines and their summaries to disk so that comparisons can be
reloaded and plotted later.
"""

import os
import json
import logging
import pandas as pd
import numpy as np
from datetime import datetime
from typing import Dict, Optional, Any
import csv

from thermal_solver.schema import TimelineResult

logger = logging.getLogger(__name__)

RUN_LOG_COLUMNS = [
    'run',
    'system',
    'timestamp',
    'min_temperature',
    'final_temperature',
    'total_delivered_kwh',
    'total_input_kwh',
    'overall_efficiency',
    'min_dhw_state',
    'dhw_unmet_kwh',
]


def _to_json(value: Any) -> Any:
    """Make numpy and enum values JSON-serialisable."""
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if hasattr(value, 'value') and not isinstance(value, (int, float, str)):
        return value.value
    return value


class TimelineLogger:
    """
    Logger for solver runs.

    Logs:
        - Run-level metrics (one row per solved system) to ``runs.csv``
        - Step-level timelines (96 rows) to ``<system>_steps.csv``
        - Run configuration and summary as JSON
    """

    def __init__(self,
                 log_dir: str = "data/runs",
                 experiment_name: Optional[str] = None):
        """
        Initialize timeline logger.

        Args:
            log_dir: Base directory for logs
            experiment_name: Name of the comparison (auto-generated if None)
        """
        self.log_dir = log_dir

        if experiment_name is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            experiment_name = f"comparison_{timestamp}"

        self.experiment_name = experiment_name
        self.experiment_dir = os.path.join(log_dir, experiment_name)
        os.makedirs(self.experiment_dir, exist_ok=True)

        self.run_log_path = os.path.join(self.experiment_dir, "runs.csv")
        self.config_path = os.path.join(self.experiment_dir, "config.json")
        self.summary_path = os.path.join(self.experiment_dir, "summary.json")

        self._init_run_log()
        self.run_count = 0

        logger.info("TimelineLogger writing to %s", self.experiment_dir)

    def _init_run_log(self):
        if not os.path.exists(self.run_log_path):
            with open(self.run_log_path, 'w', newline='') as f:
                csv.writer(f).writerow(RUN_LOG_COLUMNS)

    def step_log_path(self, system_name: str) -> str:
        return os.path.join(self.experiment_dir, f"{system_name}_steps.csv")

    def log_run(self, system_name: str, result: TimelineResult, metrics: Dict[str, Any]):
        """
        Log one solved timeline.

        Args:
            system_name: Label of the system
            result: Solver output
            metrics: Output of calculate_timeline_metrics
        """
        result.to_dataframe().to_csv(self.step_log_path(system_name))

        with open(self.run_log_path, 'a', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(
                [self.run_count, system_name, datetime.now().isoformat()]
                + [metrics.get(col, 0) for col in RUN_LOG_COLUMNS[3:]]
            )

        self.run_count += 1

    def save_config(self, config: Dict[str, Any]):
        with open(self.config_path, 'w') as f:
            json.dump(_to_json(config), f, indent=2)

    def save_summary(self, summary: Dict[str, Any]):
        with open(self.summary_path, 'w') as f:
            json.dump(_to_json(summary), f, indent=2)

    def load_runs(self) -> pd.DataFrame:
        """
        Load run log as DataFrame.

        Returns:
            DataFrame with one row per logged run
        """
        if os.path.exists(self.run_log_path):
            return pd.read_csv(self.run_log_path)
        return pd.DataFrame()

    def load_steps(self, system_name: str) -> pd.DataFrame:
        """
        Load one system's timeline as DataFrame indexed by minute of day.
        """
        path = self.step_log_path(system_name)
        if os.path.exists(path):
            return pd.read_csv(path, index_col='minute')
        return pd.DataFrame()

    def get_experiment_dir(self) -> str:
        return self.experiment_dir
