import numpy as np

from orbit_stm.model.constants       import SOLARSYSTEMCONSTANTS
from orbit_stm.model.frame_converter import orbit_normal, unit_vector


class OrbitConverter:
  """
  Conversion from Cartesian position/velocity to classical orbital elements.
  """

  @staticmethod
  def pv_to_coe(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float = SOLARSYSTEMCONSTANTS.EARTH.GP,
  ) -> dict:
    """
    Convert Cartesian position and velocity vectors to classical orbital elements.

    Input:
    ------
      pos_vec : np.ndarray
        Position vector [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].
      gp : float
        Gravitational parameter [m³/s²].

    Output:
    -------
      coe : dict
        Dictionary containing orbital elements:
        - sma  : semi-major axis [m] (np.inf for parabolic orbits)
        - ecc  : eccentricity [-]
        - inc  : inclination [rad]
        - raan : right ascension of the ascending node [rad]
        - aop  : argument of periapsis [rad]
        - ta   : true anomaly [rad]
        - ma   : mean anomaly [rad] (None for parabolic)
        - ea   : eccentric anomaly [rad] (None unless elliptic)
        - ha   : hyperbolic anomaly [rad] (None unless hyperbolic)
        - pa   : parabolic anomaly [rad] (None unless parabolic)

    Raises:
    -------
      DegenerateGeometryError
        If the position is near zero or the motion is rectilinear, where the
        orbit plane (and so inc, raan, aop) is undefined.

    Notes:
    ------
      For the circular case the ascending node and argument of periapsis are
      ill-defined. The periapsis direction is set to the position direction, so
      aop carries the argument of latitude and ta is zero.

    Source:
    -------
      Modified from
      Analytical Mechanics of Space Systems, Fourth Edition
      Hanspeter Schaub and John L. Junkins
      DOI: https://doi.org/10.2514/4.105210
    """
    # Small number for numerical comparisons
    eps = 1e-12

    pos_vec = np.asarray(pos_vec, dtype=float).flatten()
    vel_vec = np.asarray(vel_vec, dtype=float).flatten()

    # Orbit radius and plane
    pos_mag     = np.linalg.norm(pos_vec)
    pos_dir     = unit_vector(pos_vec, 'position')
    ang_mom_dir = orbit_normal(pos_vec, vel_vec)
    ang_mom_vec = np.cross(pos_vec, vel_vec)

    # Eccentricity vector
    ecc_vec = np.cross(vel_vec, ang_mom_vec) / gp - pos_dir
    ecc_mag = np.linalg.norm(ecc_vec)

    # Semi-major axis
    sma_inv = 2.0 / pos_mag - np.dot(vel_vec, vel_vec) / gp
    if abs(sma_inv) > eps / pos_mag:
      sma = 1.0 / sma_inv
    else:
      sma     = np.inf
      ecc_mag = 1.0

    # Perifocal frame unit direction vectors
    if ecc_mag > eps:
      ecc_dir = ecc_vec / np.linalg.norm(ecc_vec)
    else:
      ecc_dir = pos_dir.copy()
    periapsis_dir = np.cross(ang_mom_dir, ecc_dir)

    # 3-1-3 orbit plane orientation angles
    raan = np.arctan2(ang_mom_dir[0], -ang_mom_dir[1])
    inc  = np.arccos(np.clip(ang_mom_dir[2], -1.0, 1.0))
    aop  = np.arctan2(ecc_dir[2], periapsis_dir[2])

    # True anomaly
    dum = np.cross(ecc_dir, pos_dir)
    ta  = np.arctan2(np.dot(dum, ang_mom_dir), np.dot(ecc_dir, pos_dir))

    ma = None
    ea = None
    ha = None
    pa = None
    if ecc_mag < 1.0 - eps:
      ea = 2 * np.arctan2(
        np.sqrt(1 - ecc_mag) * np.sin(ta / 2),
        np.sqrt(1 + ecc_mag) * np.cos(ta / 2),
      )
      ma = (ea - ecc_mag * np.sin(ea)) % (2 * np.pi)
    elif ecc_mag > 1.0 + eps:
      ha = 2 * np.arctanh(np.tan(ta / 2) * np.sqrt((ecc_mag - 1) / (ecc_mag + 1)))
      ma = ecc_mag * np.sinh(ha) - ha
    else:
      pa = np.tan(ta / 2)

    return {
      'sma'  : sma,
      'ecc'  : ecc_mag,
      'inc'  : inc,
      'raan' : raan,
      'aop'  : aop,
      'ta'   : ta,
      'ma'   : ma,
      'ea'   : ea,
      'ha'   : ha,
      'pa'   : pa,
    }

  @staticmethod
  def argument_of_latitude(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float = SOLARSYSTEMCONSTANTS.EARTH.GP,
  ) -> tuple[float, float]:
    """
    Inclination and argument of latitude u = aop + ta.

    Input:
    ------
      pos_vec : np.ndarray
        Position vector [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].
      gp : float
        Gravitational parameter [m³/s²].

    Output:
    -------
      inc : float
        Inclination [rad].
      u : float
        Argument of latitude [rad].
    """
    coe = OrbitConverter.pv_to_coe(pos_vec, vel_vec, gp)
    return coe['inc'], coe['aop'] + coe['ta']
