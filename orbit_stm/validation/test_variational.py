"""
Unit Tests for Variational Equations
====================================

Tests for STM packing and the system matrix.

Tests:
------
TestStmPacking
  - test_known_solution_row_major_layout   : verify flat[6*i + j] == STM[i, j] for a non-symmetric matrix
  - test_roundtrip_pack_unpack             : verify unpack(pack(STM)) returns the matrix
  - test_sanity_check_wrong_shape_raises   : verify wrong shapes raise ConfigurationError
  - test_known_solution_initial_augmented  : verify initial augmented state carries identity

TestSystemMatrix
  - test_known_solution_block_layout       : verify [[0, I], [dadr, dadv]] layout
  - test_known_solution_identity_derivative : verify d(STM)/dt = M at STM = I

Usage:
------
  python -m pytest orbit_stm/validation/test_variational.py -v
"""
import pytest
import numpy as np

from orbit_stm.model.errors      import ConfigurationError
from orbit_stm.model.variational import (
  build_system_matrix,
  initial_augmented_state,
  pack_stm,
  stm_time_derivative,
  unpack_stm,
)


class TestStmPacking:
  """
  Tests for the row-major STM flattening.
  """

  def test_known_solution_row_major_layout(self):
    stm_mat  = np.arange(36, dtype=float).reshape(6, 6) + 0.5 * np.arange(36).reshape(6, 6).T
    stm_flat = pack_stm(stm_mat)

    for i in range(6):
      for j in range(6):
        assert stm_flat[6 * i + j] == stm_mat[i, j]

  def test_roundtrip_pack_unpack(self):
    stm_mat = np.random.default_rng(7).normal(size=(6, 6))

    assert np.array_equal(unpack_stm(pack_stm(stm_mat)), stm_mat)

  def test_sanity_check_wrong_shape_raises(self):
    with pytest.raises(ConfigurationError):
      pack_stm(np.eye(5))
    with pytest.raises(ConfigurationError):
      unpack_stm(np.zeros(35))
    with pytest.raises(ConfigurationError):
      unpack_stm(np.zeros((6, 6)))

  def test_known_solution_initial_augmented(self, leo_initial_state):
    augmented_state = initial_augmented_state(leo_initial_state)

    assert augmented_state.shape == (42,)
    assert np.array_equal(augmented_state[0:6], leo_initial_state)
    assert np.array_equal(unpack_stm(augmented_state[6:]), np.eye(6))


class TestSystemMatrix:
  """
  Tests for the linearized dynamics matrix.
  """

  def test_known_solution_block_layout(self):
    dadr = np.arange(9, dtype=float).reshape(3, 3)
    dadv = -np.arange(9, dtype=float).reshape(3, 3).T

    system_mat = build_system_matrix(dadr, dadv)

    assert np.array_equal(system_mat[0:3, 0:3], np.zeros((3, 3)))
    assert np.array_equal(system_mat[0:3, 3:6], np.eye(3))
    assert np.array_equal(system_mat[3:6, 0:3], dadr)
    assert np.array_equal(system_mat[3:6, 3:6], dadv)

  def test_known_solution_identity_derivative(self):
    rng        = np.random.default_rng(3)
    system_mat = build_system_matrix(rng.normal(size=(3, 3)), rng.normal(size=(3, 3)))
    stm_mat    = rng.normal(size=(6, 6))

    assert np.array_equal(stm_time_derivative(system_mat, np.eye(6)), system_mat)
    assert np.allclose(stm_time_derivative(system_mat, stm_mat), system_mat @ stm_mat)
