import matplotlib

matplotlib.use("Agg")

import pytest

from thermal_solver import CoreInput, SystemConfig, SystemFamily, load_solver_config


@pytest.fixture
def solver_config():
    return load_solver_config()


@pytest.fixture
def base_core():
    return CoreInput(peak_heat_loss_kw=8.0, tau_hours=35.0)


@pytest.fixture
def combi():
    return SystemConfig(SystemFamily.ON_DEMAND, max_kw=24.0, min_kw=4.0, base_eta=0.85)
