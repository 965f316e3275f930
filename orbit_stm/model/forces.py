"""
Force Models
============

Perturbing accelerations and their partial derivatives for variational
(state transition matrix) propagation.

Summary:
--------
Every force returns a ForceOutcome. On success it carries a ForceContribution:
the acceleration and its 3x3 Jacobians with respect to position and velocity,
all in the inertial frame centered on the central body.

Class Structure:
----------------
  CentralGravity            (always active)
  J2Oblateness              (optional, recoverable failure)
  AtmosphericDrag           (optional)
  SolarRadiationPressure    (optional)
  ThirdBodyGravity          (optional)

Closed Forms:
-------------
  Central gravity  : a = -gp r / |r|^3
                     da/dr = gp / |r|^5 (3 r r^T - |r|^2 I)
  J2 (RTN)         : f = -3 gp J2 R^2 / (2 |r|^4) [1 - 3 sin^2(i) sin^2(u),
                                                   sin^2(i) sin(2u),
                                                   sin(2i) sin(u)]
                     Jacobians not modeled (zero).
  Drag             : a = -1/2 rho Cd A/m |v_rel| v_rel,  v_rel = v - w x r
  SRP              : a = P(d) c_srp A/m r_hat,  r = Sun-to-object vector
  Third body       : a = gp_b (d / |d|^3 - r_b / |r_b|^3),  d = r_b - r

Units:
------
- Position     : meters [m]
- Velocity     : meters per second [m/s]
- Acceleration : meters per second squared [m/s²]
- Time         : ephemeris seconds past J2000 [s]

Sources:
--------
- Vallado, D. A. (2013). Fundamentals of Astrodynamics and Applications (4th ed.). Microcosm Press.
- Montenbruck, O., & Gill, E. (2000). Satellite Orbits: Models, Methods and Applications. Springer.
"""
import numpy as np

from dataclasses import dataclass, field
from typing      import Optional

from orbit_stm.model.constants       import CelestialBodyConstants
from orbit_stm.model.errors          import DegenerateGeometryError, MissingEphemerisDataError
from orbit_stm.model.frame_converter import FrameConverter, MIN_NORM
from orbit_stm.model.orbit_converter import OrbitConverter


# =============================================================================
# Outcome Types
# =============================================================================

@dataclass(frozen=True)
class ForceContribution:
  """
  Acceleration of one force and its partial derivatives.

  Attributes:
  -----------
    name : str
      Force name.
    acc_vec : np.ndarray
      Acceleration [m/s²], shape (3,).
    dadr : np.ndarray
      d(acc)/d(pos) [1/s²], shape (3, 3).
    dadv : np.ndarray
      d(acc)/d(vel) [1/s], shape (3, 3).
    jacobian_modeled : bool
      False when dadr/dadv are an approximation rather than the true partials.
  """
  name             : str
  acc_vec          : np.ndarray
  dadr             : np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
  dadv             : np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
  jacobian_modeled : bool       = True

  @classmethod
  def zero(
    cls,
    name : str,
  ) -> 'ForceContribution':
    return cls(name=name, acc_vec=np.zeros(3))


@dataclass(frozen=True)
class ForceOutcome:
  """
  Result of evaluating one force: a contribution, or the reason it failed.
  """
  name         : str
  contribution : Optional[ForceContribution] = None
  reason       : Optional[str]               = None

  @property
  def succeeded(self) -> bool:
    return self.contribution is not None

  @classmethod
  def success(
    cls,
    contribution : ForceContribution,
  ) -> 'ForceOutcome':
    return cls(name=contribution.name, contribution=contribution)

  @classmethod
  def failure(
    cls,
    name   : str,
    reason : str,
  ) -> 'ForceOutcome':
    return cls(name=name, reason=reason)


# =============================================================================
# Closed-Form Building Blocks
# =============================================================================

def point_mass_acceleration(
  gp      : float,
  pos_vec : np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
  """
  Point-mass gravity toward the origin and its position Jacobian.

  Input:
  ------
    gp : float
      Gravitational parameter [m³/s²].
    pos_vec : np.ndarray
      Position vector relative to the attracting mass [m].

  Output:
  -------
    acc_vec : np.ndarray
      Acceleration vector [m/s²].
    dadr : np.ndarray
      d(acc_vec)/d(pos_vec) [1/s²].

  Raises:
  -------
    DegenerateGeometryError
      If |pos_vec| is near zero.
  """
  pos_mag = np.linalg.norm(pos_vec)
  if not pos_mag >= MIN_NORM:
    raise DegenerateGeometryError(f"Point-mass gravity singular at |r| = {pos_mag}")

  pos_mag_pwr2 = pos_mag * pos_mag
  pos_mag_pwr3 = pos_mag_pwr2 * pos_mag
  pos_mag_pwr5 = pos_mag_pwr3 * pos_mag_pwr2

  acc_vec = -gp * pos_vec / pos_mag_pwr3
  dadr    = gp / pos_mag_pwr5 * (3.0 * np.outer(pos_vec, pos_vec) - pos_mag_pwr2 * np.eye(3))

  return acc_vec, dadr


def srp_acceleration(
  sun_to_obj_pos_vec : np.ndarray,
  area               : float,
  mass               : float,
  solar_pressure,
  c_srp              : float = 1.0,
) -> tuple[np.ndarray, np.ndarray]:
  """
  Solar radiation pressure for a fully illuminated object.

  Input:
  ------
    sun_to_obj_pos_vec : np.ndarray
      Vector from the Sun to the object [m].
    area : float
      Cross-sectional area [m²].
    mass : float
      Object mass [kg].
    solar_pressure : object
      Model with pressure(distance) and pressure_derivative(distance).
    c_srp : float
      Radiation pressure coefficient (absorption + reflection).

  Output:
  -------
    acc_vec : np.ndarray
      Acceleration vector [m/s²], directed away from the Sun.
    dadr : np.ndarray
      d(acc_vec)/d(sun_to_obj_pos_vec) [1/s²].

  Notes:
  ------
    With P(d) = P_ref (d_ref / d)^2 the Jacobian reduces to
      P_ref d_ref^2 c_srp A/m (I / d^3 - 3 r r^T / d^5).
  """
  dist    = np.linalg.norm(sun_to_obj_pos_vec)
  if not dist >= MIN_NORM:
    raise DegenerateGeometryError(f"SRP direction undefined at Sun distance {dist}")
  dir_vec = sun_to_obj_pos_vec / dist

  pressure   = solar_pressure.pressure(dist)
  d_pressure = solar_pressure.pressure_derivative(dist)
  factor     = c_srp * area / mass

  proj_mat = np.outer(dir_vec, dir_vec)
  acc_vec  = factor * pressure * dir_vec
  dadr     = factor * (pressure / dist * (np.eye(3) - proj_mat) + d_pressure * proj_mat)

  return acc_vec, dadr


def skew_matrix(
  vec : np.ndarray,
) -> np.ndarray:
  """
  Cross-product matrix such that skew_matrix(a) @ b == np.cross(a, b).
  """
  return np.array([
    [    0.0, -vec[2],  vec[1]],
    [ vec[2],     0.0, -vec[0]],
    [-vec[1],  vec[0],     0.0],
  ])


# =============================================================================
# Force Modules
# =============================================================================

class CentralGravity:
  """
  Two-body point mass gravity of the central body. Always active.
  """

  name             = 'central_gravity'
  optional         = False
  jacobian_modeled = True

  def __init__(
    self,
    central_body : CelestialBodyConstants,
  ):
    self.gp = central_body.gp

  def evaluate(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceOutcome:
    """
    Evaluate two-body gravity.

    Input:
    ------
      time_et : float
        Ephemeris time [s].
      pos_vec : np.ndarray
        Position vector [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].

    Output:
    -------
      outcome : ForceOutcome
        Contribution with dadv = 0.

    Raises:
    -------
      DegenerateGeometryError
        If the position is near the singularity.
    """
    acc_vec, dadr = point_mass_acceleration(self.gp, pos_vec)
    return ForceOutcome.success(ForceContribution(self.name, acc_vec, dadr))


class J2Oblateness:
  """
  Second zonal harmonic of the central body, evaluated in the RTN frame.

  The Jacobian of this term is not modeled: dadr and dadv are zero and the
  contribution is marked jacobian_modeled = False, so STM results carry a
  first-order bias whenever this term is active.
  """

  name             = 'j2'
  optional         = True
  jacobian_modeled = False

  def __init__(
    self,
    central_body : CelestialBodyConstants,
  ):
    """
    Initialize J2 model

    Input:
    ------
      central_body : CelestialBodyConstants
        Central body gp, equatorial radius and J2.

    Output:
    -------
      None
    """
    self.gp      = central_body.gp
    self.j2      = central_body.j2
    self.pos_ref = central_body.radius_equator

  def rtn_acceleration(
    self,
    pos_mag : float,
    inc     : float,
    u       : float,
  ) -> np.ndarray:
    """
    J2 acceleration components in the RTN frame.

    Input:
    ------
      pos_mag : float
        Orbit radius [m].
      inc : float
        Inclination [rad].
      u : float
        Argument of latitude [rad].

    Output:
    -------
      rtn_acc_vec : np.ndarray
        [radial, transverse, normal] acceleration [m/s²].
    """
    factor = -1.5 * self.gp * self.j2 * self.pos_ref**2 / pos_mag**4
    sin_i  = np.sin(inc)
    sin_u  = np.sin(u)

    return factor * np.array([
      1.0 - 3.0 * sin_i**2 * sin_u**2,
      sin_i**2 * np.sin(2.0 * u),
      np.sin(2.0 * inc) * sin_u,
    ])

  def evaluate(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceOutcome:
    """
    Evaluate the J2 perturbation.

    Input:
    ------
      time_et : float
        Ephemeris time [s].
      pos_vec : np.ndarray
        Position vector [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].

    Output:
    -------
      outcome : ForceOutcome
        Contribution with zero Jacobians, or a failure when the orbit
        geometry is degenerate or the result is not finite.
    """
    try:
      inc, u             = OrbitConverter.argument_of_latitude(pos_vec, vel_vec, self.gp)
      rot_mat_rtn_to_xyz = FrameConverter.rtn_to_xyz(pos_vec, vel_vec)
    except DegenerateGeometryError as e:
      return ForceOutcome.failure(self.name, str(e))

    rtn_acc_vec = self.rtn_acceleration(np.linalg.norm(pos_vec), inc, u)
    acc_vec     = rot_mat_rtn_to_xyz @ rtn_acc_vec

    if not np.all(np.isfinite(acc_vec)):
      return ForceOutcome.failure(self.name, f"non-finite J2 acceleration {acc_vec}")

    return ForceOutcome.success(ForceContribution(
      name             = self.name,
      acc_vec          = acc_vec,
      jacobian_modeled = False,
    ))


class AtmosphericDrag:
  """
  Atmospheric drag relative to an atmosphere co-rotating with the central body.
  """

  name             = 'drag'
  optional         = True
  jacobian_modeled = True

  def __init__(
    self,
    central_body : CelestialBodyConstants,
    atmosphere,
    area         : float,
    mass         : float,
    cd           : float = 2.2,
  ):
    """
    Initialize drag model

    Input:
    ------
      central_body : CelestialBodyConstants
        Central body; its spin rate sets the atmosphere rotation.
      atmosphere : object
        Density provider with density(pos_vec, epoch) and
        density_gradient(pos_vec, epoch).
      area : float
        Cross-sectional area [m²].
      mass : float
        Object mass [kg].
      cd : float
        Drag coefficient.

    Output:
    -------
      None
    """
    self.atmosphere = atmosphere
    self.area       = area
    self.mass       = mass
    self.cd         = cd
    self.omega_vec  = np.array([0.0, 0.0, central_body.omega])

  def evaluate(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceOutcome:
    """
    Evaluate drag.

    Input:
    ------
      time_et : float
        Ephemeris time [s].
      pos_vec : np.ndarray
        Position vector [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].

    Output:
    -------
      outcome : ForceOutcome
        Contribution opposing the atmosphere-relative velocity.
    """
    # Velocity relative to rotating atmosphere
    vel_rel_vec = vel_vec - np.cross(self.omega_vec, pos_vec)
    vel_rel_mag = np.linalg.norm(vel_rel_vec)

    if vel_rel_mag == 0.0:
      return ForceOutcome.success(ForceContribution.zero(self.name))

    rho       = self.atmosphere.density(pos_vec, time_et)
    drho_dpos = self.atmosphere.density_gradient(pos_vec, time_et)
    ballistic = 0.5 * self.cd * self.area / self.mass

    acc_vec = -ballistic * rho * vel_rel_mag * vel_rel_vec

    # d(acc)/d(vel_rel), equal to d(acc)/d(vel)
    dadv = -ballistic * rho * (vel_rel_mag * np.eye(3) + np.outer(vel_rel_vec, vel_rel_vec) / vel_rel_mag)

    # Density gradient plus the dependence of vel_rel on pos through w x r
    dadr = -ballistic * vel_rel_mag * np.outer(vel_rel_vec, drho_dpos) - dadv @ skew_matrix(self.omega_vec)

    return ForceOutcome.success(ForceContribution(self.name, acc_vec, dadr, dadv))


class SolarRadiationPressure:
  """
  Solar radiation pressure, no eclipse model: the object is always treated as
  fully illuminated.
  """

  name             = 'srp'
  optional         = True
  jacobian_modeled = True

  def __init__(
    self,
    ephemeris,
    solar_pressure,
    area           : float,
    mass           : float,
    c_srp          : float = 1.0,
    frame          : Optional[str] = None,
  ):
    """
    Initialize SRP model

    Input:
    ------
      ephemeris : object
        Provider of the Sun position relative to the central body.
      solar_pressure : object
        Model with pressure(distance) and pressure_derivative(distance).
      area : float
        Cross-sectional area [m²].
      mass : float
        Object mass [kg].
      c_srp : float
        Radiation pressure coefficient.
      frame : str, optional
        Reference frame passed to the ephemeris.

    Output:
    -------
      None
    """
    self.ephemeris      = ephemeris
    self.solar_pressure = solar_pressure
    self.area           = area
    self.mass           = mass
    self.c_srp          = c_srp
    self.frame          = frame

  def evaluate(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceOutcome:
    """
    Evaluate SRP.

    Input:
    ------
      time_et : float
        Ephemeris time [s].
      pos_vec : np.ndarray
        Position vector relative to the central body [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].

    Output:
    -------
      outcome : ForceOutcome
        Contribution directed from the Sun to the object.

    Raises:
    -------
      MissingEphemerisDataError
        If the Sun position is unavailable.
    """
    sun_pos_vec        = self.ephemeris.position_of('SUN', time_et, self.frame)
    sun_to_obj_pos_vec = pos_vec - sun_pos_vec

    acc_vec, dadr = srp_acceleration(
      sun_to_obj_pos_vec = sun_to_obj_pos_vec,
      area               = self.area,
      mass               = self.mass,
      solar_pressure     = self.solar_pressure,
      c_srp              = self.c_srp,
    )
    return ForceOutcome.success(ForceContribution(self.name, acc_vec, dadr))


class ThirdBodyGravity:
  """
  Point-mass perturbations of bodies other than the central body.
  """

  name             = 'third_body'
  optional         = True
  jacobian_modeled = True

  def __init__(
    self,
    ephemeris,
    bodies    : list,
    frame     : Optional[str] = None,
  ):
    """
    Initialize third-body gravity model.

    Input:
    ------
      ephemeris : object
        Provider of body positions relative to the central body.
      bodies : list of CelestialBodyConstants
        Perturbing bodies.
      frame : str, optional
        Reference frame passed to the ephemeris.

    Output:
    -------
      None
    """
    self.ephemeris = ephemeris
    self.bodies    = list(bodies)
    self.frame     = frame

  def evaluate(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceOutcome:
    """
    Evaluate the summed third-body perturbation.

    Input:
    ------
      time_et : float
        Ephemeris time [s].
      pos_vec : np.ndarray
        Satellite position relative to the central body [m].
      vel_vec : np.ndarray
        Velocity vector [m/s].

    Output:
    -------
      outcome : ForceOutcome
        Contribution summed over all bodies.

    Raises:
    -------
      MissingEphemerisDataError
        If any body position is unavailable or coincides with the central body.
    """
    acc_vec = np.zeros(3)
    dadr    = np.zeros((3, 3))

    for body in self.bodies:
      # Position of central body to perturbing body [m]
      pos_centbody_to_pertbody_vec = np.asarray(
        self.ephemeris.position_of(body.name, time_et, self.frame), dtype=float,
      )
      if not np.linalg.norm(pos_centbody_to_pertbody_vec) >= MIN_NORM:
        raise MissingEphemerisDataError(f"Ephemeris places {body.name} at the central body at ET {time_et}")

      # Position of satellite to perturbing body [m]
      pos_sat_to_pertbody_vec = pos_centbody_to_pertbody_vec - pos_vec

      # Pull toward the body on the satellite minus pull on the central body.
      # point_mass_acceleration(gp, -d) = gp d / |d|^3
      acc_sat, dadr_sat = point_mass_acceleration(body.gp, -pos_sat_to_pertbody_vec)
      acc_cent, _       = point_mass_acceleration(body.gp, -pos_centbody_to_pertbody_vec)

      acc_vec += acc_sat - acc_cent
      dadr    += dadr_sat

    return ForceOutcome.success(ForceContribution(self.name, acc_vec, dadr))
