"""
Integration Tests for Orbit Propagator
======================================

Tests for state and state transition matrix propagation.

Tests:
------
TestKeplerianPropagation
  - test_roundtrip_circular_orbit_period             : verify circular orbit returns to start after one period
  - test_physical_laws_energy_conservation           : verify energy conservation for Keplerian propagation
  - test_physical_laws_angular_momentum_conservation : verify angular momentum conservation for Keplerian propagation
  - test_sanity_check_dense_output_solution          : verify the continuous solution is returned only with dense_output

TestStmPropagation
  - test_sanity_check_stm_identity_at_start          : verify STM history starts at identity with shape (N, 6, 6)
  - test_known_solution_stm_matches_finite_difference : verify STM against perturbed trajectories
  - test_physical_laws_stm_determinant               : verify det(STM) = 1 for conservative two-body motion
  - test_sanity_check_unmodeled_jacobians_reported   : verify J2 is reported when propagating the STM

TestJ2Perturbation
  - test_known_solution_j2_raan_drift_rate           : verify secular RAAN regression rate for a prograde orbit

Usage:
------
  python -m pytest orbit_stm/validation/test_propagator.py -v
"""
import pytest
import numpy as np

from orbit_stm.input.configuration    import ForceModelConfig
from orbit_stm.model.constants        import CONVERTER, SOLARSYSTEMCONSTANTS
from orbit_stm.model.dynamics         import Acceleration, GeneralStateEquationsOfMotion
from orbit_stm.model.errors           import UnmodeledJacobianWarning
from orbit_stm.propagation.propagator import propagate_state_numerical_integration


GP = SOLARSYSTEMCONSTANTS.EARTH.GP


def two_body_equations_of_motion():
  return GeneralStateEquationsOfMotion(Acceleration(ForceModelConfig()))


class TestKeplerianPropagation:
  """
  Tests for Keplerian (two-body) propagation.
  """

  def test_roundtrip_circular_orbit_period(self):
    sma     = 7000e3
    vel_mag = np.sqrt(GP / sma)
    state_o = np.array([sma, 0.0, 0.0, 0.0, vel_mag, 0.0])
    period  = 2 * np.pi * np.sqrt(sma**3 / GP)

    result = propagate_state_numerical_integration(state_o, 0.0, period, two_body_equations_of_motion())

    assert result['success']
    assert np.allclose(result['state_f'][0:3], state_o[0:3], rtol=0, atol=1.0)
    assert np.allclose(result['state_f'][3:6], state_o[3:6], rtol=0, atol=1e-3)

  def test_physical_laws_energy_conservation(self, eccentric_initial_state):
    result = propagate_state_numerical_integration(
      eccentric_initial_state, 0.0, 20000.0, two_body_equations_of_motion(), num_points=50,
    )

    pos_mag = np.linalg.norm(result['state'][0:3, :], axis=0)
    vel_mag = np.linalg.norm(result['state'][3:6, :], axis=0)
    energy  = 0.5 * vel_mag**2 - GP / pos_mag

    assert np.allclose(energy, energy[0], rtol=1e-9, atol=0)

  def test_physical_laws_angular_momentum_conservation(self, eccentric_initial_state):
    result = propagate_state_numerical_integration(
      eccentric_initial_state, 0.0, 20000.0, two_body_equations_of_motion(), num_points=50,
    )

    ang_mom = np.cross(result['state'][0:3, :].T, result['state'][3:6, :].T)

    assert np.allclose(ang_mom, ang_mom[0], rtol=1e-9, atol=0)


  def test_sanity_check_dense_output_solution(self, leo_initial_state):
    eom = two_body_equations_of_motion()

    result = propagate_state_numerical_integration(leo_initial_state, 0.0, 1200.0, eom, dense_output=True)

    assert np.allclose(result['sol'](1200.0), result['state_f'], rtol=1e-12, atol=1e-6)
    assert propagate_state_numerical_integration(leo_initial_state, 0.0, 1200.0, eom)['sol'] is None

class TestStmPropagation:
  """
  Tests for state transition matrix propagation.
  """

  def test_sanity_check_stm_identity_at_start(self, leo_initial_state):
    result = propagate_state_numerical_integration(
      leo_initial_state, 0.0, 600.0, two_body_equations_of_motion(), include_stm=True, num_points=11,
    )

    assert result['stm'].shape == (11, 6, 6)
    assert np.allclose(result['stm'][0], np.eye(6), rtol=0, atol=1e-14)
    assert np.array_equal(result['stm_f'], result['stm'][-1])
    assert result['state'].shape == (6, 11)

  def test_known_solution_stm_matches_finite_difference(self, eccentric_initial_state):
    time_f = 3000.0
    steps  = np.array([10.0, 10.0, 10.0, 1.0e-2, 1.0e-2, 1.0e-2])

    result = propagate_state_numerical_integration(
      eccentric_initial_state, 0.0, time_f, two_body_equations_of_motion(), include_stm=True,
    )
    stm_f  = result['stm_f']

    stm_numerical = np.zeros((6, 6))
    for j in range(6):
      delta    = np.zeros(6)
      delta[j] = steps[j]
      state_plus  = propagate_state_numerical_integration(
        eccentric_initial_state + delta, 0.0, time_f, two_body_equations_of_motion(),
      )['state_f']
      state_minus = propagate_state_numerical_integration(
        eccentric_initial_state - delta, 0.0, time_f, two_body_equations_of_motion(),
      )['state_f']
      stm_numerical[:, j] = (state_plus - state_minus) / (2.0 * steps[j])

    for j in range(6):
      column_scale = np.max(np.abs(stm_f[:, j]))
      assert np.allclose(stm_numerical[:, j], stm_f[:, j], rtol=1e-5, atol=1e-5 * column_scale)

  def test_physical_laws_stm_determinant(self, leo_initial_state):
    result = propagate_state_numerical_integration(
      leo_initial_state, 0.0, 5000.0, two_body_equations_of_motion(), include_stm=True,
    )

    assert np.isclose(np.linalg.det(result['stm_f']), 1.0, rtol=0, atol=1e-6)

  def test_sanity_check_unmodeled_jacobians_reported(self, inclined_leo_state):
    eom = GeneralStateEquationsOfMotion(Acceleration(ForceModelConfig(j2=True)))

    with pytest.warns(UnmodeledJacobianWarning):
      result = propagate_state_numerical_integration(
        inclined_leo_state, 0.0, 60.0, eom, include_stm=True, rtol=1e-9, atol=1e-9,
      )

    assert result['unmodeled_jacobians'] == ['j2']
    assert result['skipped_counts'] == {}

    result = propagate_state_numerical_integration(inclined_leo_state, 0.0, 60.0, eom, rtol=1e-9, atol=1e-9)
    assert result['unmodeled_jacobians'] == []
    assert result['stm'] is None


class TestJ2Perturbation:
  """
  Tests for J2 effects on the orbit.
  """

  def test_known_solution_j2_raan_drift_rate(self):
    sma     = 7000e3
    inc     = 45.0 * CONVERTER.RAD_PER_DEG
    vel_mag = np.sqrt(GP / sma)
    state_o = np.array([sma, 0.0, 0.0, 0.0, vel_mag * np.cos(inc), vel_mag * np.sin(inc)])
    period  = 2 * np.pi * np.sqrt(sma**3 / GP)

    eom    = GeneralStateEquationsOfMotion(Acceleration(ForceModelConfig(j2=True)))
    result = propagate_state_numerical_integration(
      state_o, 0.0, 5 * period, eom, rtol=1e-10, atol=1e-6, get_coe_time_series=True,
    )

    raan_change = result['coe']['raan'][-1] - result['coe']['raan'][0]

    # Secular rate: -3/2 n J2 (R/p)^2 cos(i)
    mean_motion   = np.sqrt(GP / sma**3)
    j2            = SOLARSYSTEMCONSTANTS.EARTH.J2
    pos_ref       = SOLARSYSTEMCONSTANTS.EARTH.RADIUS.EQUATOR
    raan_expected = -1.5 * mean_motion * j2 * (pos_ref / sma)**2 * np.cos(inc) * 5 * period

    assert raan_change < 0
    assert np.isclose(raan_change, raan_expected, rtol=0.1)
