import numpy as np

from orbit_stm.model.errors import DegenerateGeometryError


# Smallest vector norm accepted before a direction is considered undefined
MIN_NORM = 1.0e-9

# Smallest |r x v| / (|r| |v|) accepted before the orbit plane is considered undefined
MIN_SINE = 1.0e-12


def unit_vector(
  vec  : np.ndarray,
  name : str = 'vector',
) -> np.ndarray:
  """
  Normalize a vector, refusing near-zero norms.

  Input:
  ------
    vec : np.ndarray
      Vector to normalize.
    name : str
      Label used in the error message.

  Output:
  -------
    vec_dir : np.ndarray
      Unit vector along vec.

  Raises:
  -------
    DegenerateGeometryError
      If |vec| < MIN_NORM.
  """
  vec_mag = np.linalg.norm(vec)
  if not vec_mag >= MIN_NORM:
    raise DegenerateGeometryError(f"Cannot normalize {name}: norm {vec_mag} below {MIN_NORM}")
  return vec / vec_mag


def orbit_normal(
  pos_vec : np.ndarray,
  vel_vec : np.ndarray,
) -> np.ndarray:
  """
  Unit angular momentum direction of a position/velocity pair.

  Input:
  ------
    pos_vec : np.ndarray
      Position vector.
    vel_vec : np.ndarray
      Velocity vector.

  Output:
  -------
    ang_mom_dir : np.ndarray
      Unit vector along r x v.

  Raises:
  -------
    DegenerateGeometryError
      If the position is near zero or the motion is (nearly) rectilinear.
  """
  pos_mag     = np.linalg.norm(pos_vec)
  vel_mag     = np.linalg.norm(vel_vec)
  ang_mom_vec = np.cross(pos_vec, vel_vec)
  ang_mom_mag = np.linalg.norm(ang_mom_vec)

  if not pos_mag >= MIN_NORM:
    raise DegenerateGeometryError(f"Position norm {pos_mag} below {MIN_NORM}")
  if not ang_mom_mag >= max(MIN_NORM, MIN_SINE * pos_mag * vel_mag):
    raise DegenerateGeometryError(f"Angular momentum norm {ang_mom_mag} too small to define an orbit plane")

  return ang_mom_vec / ang_mom_mag


class FrameConverter:
  """
  Rotations between the inertial frame and the orbit-attached RTN frame.

  RTN (Radial-Transverse-Normal) is the same triad as RIC (Radial-Intrack-Crosstrack):
    r_hat = r / |r|
    n_hat = (r x v) / |r x v|
    t_hat = n_hat x r_hat
  """

  @staticmethod
  def rtn_to_xyz(
    xyz_ref_pos_vec : np.ndarray,
    xyz_ref_vel_vec : np.ndarray,
  ) -> np.ndarray:
    """
    Calculate the rotation matrix from RTN to the inertial (XYZ) frame.

    Input:
    ------
      xyz_ref_pos_vec : np.ndarray
        Reference position vector in inertial frame.
      xyz_ref_vel_vec : np.ndarray
        Reference velocity vector in inertial frame.

    Output:
    -------
      rot_mat_rtn_to_xyz : np.ndarray
        3x3 matrix whose columns are r_hat, t_hat, n_hat in inertial
        coordinates, so that xyz_vec = rot_mat_rtn_to_xyz @ rtn_vec.

    Raises:
    -------
      DegenerateGeometryError
        If the position or angular momentum is near zero.

    Usage:
    ------
      rot_mat_rtn_to_xyz = FrameConverter.rtn_to_xyz(
        xyz_ref_pos_vec = xyz_ref_pos_vec,
        xyz_ref_vel_vec = xyz_ref_vel_vec,
      )
    """
    n_hat = orbit_normal(xyz_ref_pos_vec, xyz_ref_vel_vec)
    r_hat = unit_vector(xyz_ref_pos_vec, 'position')
    t_hat = np.cross(n_hat, r_hat)

    return np.column_stack((r_hat, t_hat, n_hat))

  @staticmethod
  def xyz_to_rtn(
    xyz_ref_pos_vec : np.ndarray,
    xyz_ref_vel_vec : np.ndarray,
  ) -> np.ndarray:
    """
    Calculate the rotation matrix from the inertial (XYZ) frame to RTN.

    Input:
    ------
      xyz_ref_pos_vec : np.ndarray
        Reference position vector in inertial frame.
      xyz_ref_vel_vec : np.ndarray
        Reference velocity vector in inertial frame.

    Output:
    -------
      rot_mat_xyz_to_rtn : np.ndarray
        3x3 rotation matrix, the transpose of rtn_to_xyz.
    """
    return FrameConverter.rtn_to_xyz(xyz_ref_pos_vec, xyz_ref_vel_vec).T
