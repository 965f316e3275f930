"""
Variational Equations
=====================

Assembly of the linearized dynamics that propagate the state transition matrix.

  system matrix  M = [[ 0,     I    ],
                      [ da/dr, da/dv]]
  STM derivative     d(STM)/dt = M @ STM

Packing convention:
-------------------
The STM travels through the integrator as the trailing 36 entries of the state
vector, flattened ROW-MAJOR: flat[6*i + j] = STM[i, j]. pack_stm and unpack_stm
are the only places that convert between the two layouts.
"""
import numpy as np

from orbit_stm.model.constants import STATESIZES
from orbit_stm.model.errors    import ConfigurationError


def pack_stm(
  stm_mat : np.ndarray,
) -> np.ndarray:
  """
  Flatten a 6x6 STM row-major.

  Input:
  ------
    stm_mat : np.ndarray
      State transition matrix, shape (6, 6).

  Output:
  -------
    stm_flat : np.ndarray
      Row-major flattening, shape (36,).
  """
  stm_mat = np.asarray(stm_mat, dtype=float)
  if stm_mat.shape != (STATESIZES.POSVEL, STATESIZES.POSVEL):
    raise ConfigurationError(f"STM must be 6x6, received shape {stm_mat.shape}")
  return stm_mat.reshape(STATESIZES.STM, order='C').copy()


def unpack_stm(
  stm_flat : np.ndarray,
) -> np.ndarray:
  """
  Rebuild a 6x6 STM from its row-major flattening.

  Input:
  ------
    stm_flat : np.ndarray
      Flattened STM, shape (36,).

  Output:
  -------
    stm_mat : np.ndarray
      State transition matrix, shape (6, 6).
  """
  stm_flat = np.asarray(stm_flat, dtype=float)
  if stm_flat.shape != (STATESIZES.STM,):
    raise ConfigurationError(f"Flattened STM must have 36 entries, received shape {stm_flat.shape}")
  return stm_flat.reshape((STATESIZES.POSVEL, STATESIZES.POSVEL), order='C').copy()


def initial_augmented_state(
  state_vec : np.ndarray,
) -> np.ndarray:
  """
  Append an identity STM to a 6-element state.

  Input:
  ------
    state_vec : np.ndarray
      State vector [pos, vel], shape (6,).

  Output:
  -------
    augmented_state_vec : np.ndarray
      [pos, vel, pack_stm(I)], shape (42,).
  """
  state_vec = np.asarray(state_vec, dtype=float).flatten()
  if state_vec.size != STATESIZES.POSVEL:
    raise ConfigurationError(f"Initial state must have 6 entries, received {state_vec.size}")
  return np.concatenate([state_vec, pack_stm(np.eye(STATESIZES.POSVEL))])


def build_system_matrix(
  dadr : np.ndarray,
  dadv : np.ndarray,
) -> np.ndarray:
  """
  Build the 6x6 system matrix of the linearized dynamics.

  Input:
  ------
    dadr : np.ndarray
      Total d(acc)/d(pos), shape (3, 3).
    dadv : np.ndarray
      Total d(acc)/d(vel), shape (3, 3).

  Output:
  -------
    system_mat : np.ndarray
      [[0, I], [dadr, dadv]], shape (6, 6).
  """
  system_mat           = np.zeros((STATESIZES.POSVEL, STATESIZES.POSVEL))
  system_mat[0:3, 3:6] = np.eye(3)
  system_mat[3:6, 0:3] = dadr
  system_mat[3:6, 3:6] = dadv
  return system_mat


def stm_time_derivative(
  system_mat : np.ndarray,
  stm_mat    : np.ndarray,
) -> np.ndarray:
  """
  Time derivative of the STM, M @ STM.
  """
  return system_mat @ stm_mat
