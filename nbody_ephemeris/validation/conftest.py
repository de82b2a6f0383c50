"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for all validation tests.
"""
import pytest
import numpy as np

from pathlib import Path

from nbody_ephemeris.model.dynamics import Acceleration, EphemerisEquationsOfMotion
from nbody_ephemeris.model.state    import Body, LibrationState, SimulationState, default_initial_state


def pytest_addoption(parser):
  parser.addoption(
    '--run-slow',
    action  = 'store_true',
    default = False,
    help    = 'Run long-running integration tests.',
  )


def pytest_collection_modifyitems(config, items):
  if config.getoption('--run-slow'):
    return
  skip_slow = pytest.mark.skip(reason="needs --run-slow option to run")
  for item in items:
    if 'slow' in item.keywords:
      item.add_marker(skip_slow)


@pytest.fixture(scope="session")
def project_root():
  """Return the project root directory."""
  return Path(__file__).parent.parent.parent


@pytest.fixture
def default_state():
  """DE118 initial state at JD 2440400.5."""
  return default_initial_state()


@pytest.fixture
def equations_of_motion(default_state):
  """Full-model equations of motion for the default state."""
  return EphemerisEquationsOfMotion(Acceleration(), default_state)


@pytest.fixture
def two_body_state():
  """Sun and a unit-distance planet on a circular orbit, no figure bodies."""
  mu_sun    = 2.959122082855911e-04
  mu_planet = 1.0e-9
  speed     = np.sqrt(mu_sun + mu_planet)
  return SimulationState(
    bodies = (
      Body('Sun',    mu_sun,    np.zeros(3),                np.zeros(3)),
      Body('Planet', mu_planet, np.array([1.0, 0.0, 0.0]),  np.array([0.0, speed, 0.0])),
    ),
    libration = LibrationState(0.0, 0.0, 0.4, 0.0, 0.0, 0.0),
    jd_epoch  = 2440400.5,
  )


@pytest.fixture
def output_folderpath(tmp_path, monkeypatch):
  """Redirect run outputs to a temporary folder."""
  output_folderpath = tmp_path / 'output'
  monkeypatch.setenv('NBODY_EPHEMERIS_OUTPUT', str(output_folderpath))
  return output_folderpath
