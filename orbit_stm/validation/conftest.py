"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for all validation tests.
"""
import pytest
import numpy as np

from orbit_stm.model.constants import CONVERTER, SOLARSYSTEMCONSTANTS
from orbit_stm.model.errors    import MissingEphemerisDataError


class FakeEphemeris:
  """
  In-memory ephemeris with fixed body positions, for tests that must not
  depend on SPICE kernels.
  """

  def __init__(self, positions=None, constants=None):
    self.positions = {name.upper(): np.asarray(pos, dtype=float) for name, pos in (positions or {}).items()}
    self.constants = constants or {}
    self.calls     = 0

  def position_of(self, body_name, epoch, reference_frame=None):
    self.calls += 1
    body_upper = body_name.upper()
    if body_upper not in self.positions:
      raise MissingEphemerisDataError(f"No position for {body_name} at ET {epoch}")
    return self.positions[body_upper].copy()

  def body_constant(self, body_name, constant_name):
    key = (body_name.upper(), constant_name.upper())
    if key not in self.constants:
      raise MissingEphemerisDataError(f"No constant {constant_name} for {body_name}")
    return self.constants[key]


def finite_difference_jacobian(func, vec, step):
  """
  Central-difference Jacobian of func at vec.
  """
  vec = np.asarray(vec, dtype=float)
  out = np.asarray(func(vec))
  jac = np.zeros((out.size, vec.size))
  for j in range(vec.size):
    delta    = np.zeros(vec.size)
    delta[j] = step
    jac[:, j] = (np.asarray(func(vec + delta)) - np.asarray(func(vec - delta))) / (2.0 * step)
  return jac


def assert_jacobian_close(jac_numerical, jac_analytic, rtol=1e-5):
  """
  Compare Jacobians entrywise, with an absolute floor scaled to the largest entry.
  """
  scale = max(np.max(np.abs(jac_analytic)), np.finfo(float).tiny)
  assert np.allclose(jac_numerical, jac_analytic, rtol=rtol, atol=rtol * scale), (
    f"Jacobian mismatch:\nnumerical=\n{jac_numerical}\nanalytic=\n{jac_analytic}"
  )


@pytest.fixture
def leo_initial_state():
  """Typical LEO initial state for testing."""
  return np.array([
    7000.0e3,    # x [m]
    0.0,         # y [m]
    0.0,         # z [m]
    0.0,         # vx [m/s]
    7.5e3,       # vy [m/s]
    0.0,         # vz [m/s]
  ])


@pytest.fixture
def inclined_leo_state():
  """Inclined, slightly eccentric LEO state (~400 km altitude, 51.6 deg)."""
  inc = 51.6 * CONVERTER.RAD_PER_DEG
  return np.array([
    6778.0e3,                 # x [m]
    150.0e3,                  # y [m]
    -80.0e3,                  # z [m]
    -40.0,                    # vx [m/s]
    7.70e3 * np.cos(inc),     # vy [m/s]
    7.70e3 * np.sin(inc),     # vz [m/s]
  ])


@pytest.fixture
def eccentric_initial_state():
  """Periapsis state of an orbit with a = 10000 km, e = 0.3."""
  gp  = SOLARSYSTEMCONSTANTS.EARTH.GP
  sma = 10000.0e3
  ecc = 0.3
  pos_peri = sma * (1.0 - ecc)
  vel_peri = np.sqrt(gp * (1.0 + ecc) / pos_peri)
  return np.array([pos_peri, 0.0, 0.0, 0.0, vel_peri, 0.0])


@pytest.fixture
def fake_ephemeris():
  """Sun and Moon at fixed geocentric positions [m]."""
  return FakeEphemeris(
    positions = {
      'SUN'  : np.array([1.0, 0.3, 0.1]) * CONVERTER.M_PER_AU / np.linalg.norm([1.0, 0.3, 0.1]),
      'MOON' : np.array([-2.0e8, 3.0e8, 1.0e8]),
    },
    constants = {
      ('EARTH', 'GM')    : SOLARSYSTEMCONSTANTS.EARTH.GP,
      ('EARTH', 'RADII') : SOLARSYSTEMCONSTANTS.EARTH.RADIUS.EQUATOR,
    },
  )
