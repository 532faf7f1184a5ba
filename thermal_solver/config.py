"""
Solver Configuration

Loads the model parameters (schedule, building, DHW, boiler and heat pump
sections) from the packaged YAML file. Callers can pass their own file or
a partial dictionary; anything they leave out falls back to the defaults.
"""

import copy
import logging
import os
from functools import lru_cache
from typing import Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'config', 'solver_config.yaml'
)

REQUIRED_SECTIONS = ('schedule', 'building', 'dhw', 'boiler', 'heat_pump')


def _read_yaml(config_path: str) -> Dict:
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except OSError as exc:
        raise ValueError(f"Cannot read solver config '{config_path}': {exc}") from exc

    if not isinstance(config, dict):
        raise ValueError(f"Solver config '{config_path}' must contain a mapping")
    return config


@lru_cache(maxsize=1)
def _packaged_defaults() -> Dict:
    return _read_yaml(DEFAULT_CONFIG_PATH)


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively overlay ``override`` on a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_solver_config(config: Optional[Union[str, Dict]] = None) -> Dict:
    """
    Load solver parameters.

    Args:
        config: None for the packaged defaults, a path to a YAML file, or a
            (possibly partial) dictionary of overrides.

    Returns:
        A fresh dictionary the caller is free to mutate.
    """
    defaults = _packaged_defaults()

    if config is None:
        return copy.deepcopy(defaults)

    if isinstance(config, str):
        logger.debug("Loading solver config from %s", config)
        config = _read_yaml(config)

    if not isinstance(config, dict):
        raise ValueError(f"Unsupported solver config type: {type(config).__name__}")

    merged = _merge(defaults, config)
    missing = [section for section in REQUIRED_SECTIONS if not isinstance(merged.get(section), dict)]
    if missing:
        raise ValueError(f"Solver config is missing sections: {', '.join(missing)}")
    return merged
