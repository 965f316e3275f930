"""
Spacecraft Orbital Dynamics with Variational Equations
======================================================

Force composition and the state derivative consumed by a numerical integrator,
optionally augmented with the state transition matrix (STM).

Summary:
--------
Acceleration composes the force models selected by a ForceModelConfig and sums
their accelerations and Jacobians. GeneralStateEquationsOfMotion turns the sum
into the derivative of either a 6-element state [pos, vel] or a 42-element
state [pos, vel, STM], where the STM obeys d(STM)/dt = M @ STM.

Class Structure:
----------------
  GeneralStateEquationsOfMotion (ODE interface)
  └── Acceleration (force composer)
      ├── CentralGravity          (always)
      ├── AtmosphericDrag         (config.drag)
      ├── SolarRadiationPressure  (config.srp)
      ├── ThirdBodyGravity        (config.third_body)
      └── J2Oblateness            (config.j2, recoverable)

Usage Example:
--------------
  from orbit_stm.input.configuration import ForceModelConfig
  from orbit_stm.model.dynamics      import Acceleration, GeneralStateEquationsOfMotion
  from orbit_stm.model.variational   import initial_augmented_state

  config       = ForceModelConfig(j2=True)
  acceleration = Acceleration(config)
  eom          = GeneralStateEquationsOfMotion(acceleration, epoch_et=0.0)

  # Integrate (e.g., with scipy.integrate.solve_ivp)
  state_dot = eom.state_time_derivative(time, initial_augmented_state(state_vec))

Notes:
------
- All calculations are performed in the inertial frame of config.frame.
- A failed optional term is zero-filled and counted in Acceleration.diagnostics
  unless config.strict_optional is set, in which case OptionalModuleFailure is raised.
- The J2 Jacobian is not modeled. STM results with J2 active carry a first-order
  bias, reported through UnmodeledJacobianWarning.
"""
import logging
import warnings
import numpy as np

from dataclasses import dataclass
from typing      import Mapping, Optional, Sequence, Union

from orbit_stm.input.configuration import ForceModelConfig
from orbit_stm.model.atmosphere    import ExponentialAtmosphere
from orbit_stm.model.constants     import CelestialBodyConstants, STATESIZES
from orbit_stm.model.errors        import ConfigurationError, OptionalModuleFailure, UnmodeledJacobianWarning
from orbit_stm.model.forces        import (
  AtmosphericDrag,
  CentralGravity,
  ForceOutcome,
  J2Oblateness,
  SolarRadiationPressure,
  ThirdBodyGravity,
)
from orbit_stm.model.solar_pressure import InverseSquareSolarPressure
from orbit_stm.model.variational    import build_system_matrix, pack_stm, stm_time_derivative, unpack_stm


logger = logging.getLogger(__name__)


# =============================================================================
# Composer Results
# =============================================================================

@dataclass(frozen=True)
class ForceTotals:
  """
  Summed accelerations and Jacobians of one evaluation.

  Attributes:
  -----------
    acc_vec : np.ndarray
      Total acceleration [m/s²].
    dadr : np.ndarray
      Total d(acc)/d(pos) [1/s²].
    dadv : np.ndarray
      Total d(acc)/d(vel) [1/s].
    contributions : tuple of ForceContribution
      Individual contributions, central gravity first.
    skipped : tuple of ForceOutcome
      Optional terms that failed and were zero-filled.
  """
  acc_vec       : np.ndarray
  dadr          : np.ndarray
  dadv          : np.ndarray
  contributions : tuple = ()
  skipped       : tuple = ()

  @property
  def unmodeled_jacobians(self) -> tuple:
    return tuple(c.name for c in self.contributions if not c.jacobian_modeled)

  @property
  def system_matrix(self) -> np.ndarray:
    return build_system_matrix(self.dadr, self.dadv)


class ForceDiagnostics:
  """
  Running record of optional terms skipped by the composer.
  """

  def __init__(self):
    self.skipped_counts : dict = {}
    self.last_reason    : dict = {}
    self.last_time_et   : dict = {}

  @property
  def total_skipped(self) -> int:
    return sum(self.skipped_counts.values())

  def record_skip(
    self,
    outcome : ForceOutcome,
    time_et : float,
  ) -> None:
    """
    Count a failed outcome and log it.

    The first failure of each force is logged at WARNING, repeats at DEBUG.
    """
    count = self.skipped_counts.get(outcome.name, 0) + 1
    self.skipped_counts[outcome.name] = count
    self.last_reason[outcome.name]    = outcome.reason
    self.last_time_et[outcome.name]   = time_et

    level = logging.WARNING if count == 1 else logging.DEBUG
    logger.log(
      level,
      "Optional force '%s' skipped at ET %.3f (occurrence %d): %s",
      outcome.name, time_et, count, outcome.reason,
    )

  def reset(self) -> None:
    self.skipped_counts.clear()
    self.last_reason.clear()
    self.last_time_et.clear()


# =============================================================================
# Force Composer
# =============================================================================

class Acceleration:
  """
  Acceleration coordinator - orchestrates all force components

  Computes:
    total = central_gravity + drag + srp + third_body + j2

  where each enabled term contributes its acceleration and Jacobians and each
  disabled term contributes exactly zero.
  """

  def __init__(
    self,
    config               : ForceModelConfig,
    central_body         : Optional[CelestialBodyConstants]              = None,
    ephemeris            : Optional[object]                              = None,
    atmosphere           : Optional[object]                              = None,
    solar_pressure       : Optional[object]                              = None,
    third_body_constants : Optional[Mapping[str, CelestialBodyConstants]] = None,
  ):
    """
    Initialize acceleration coordinator

    Input:
    ------
      config : ForceModelConfig
        Enabled forces and their parameters. Validated here.
      central_body : CelestialBodyConstants, optional
        Central body constants (default: tabulated constants of config.central_body).
      ephemeris : object, optional
        Ephemeris provider. Required by srp and third_body.
      atmosphere : object, optional
        Density provider for drag (default: exponential Earth atmosphere when
        the central body is EARTH).
      solar_pressure : object, optional
        Pressure-at-distance model for srp (default: inverse square from 1 AU).
      third_body_constants : mapping, optional
        Body name to CelestialBodyConstants, overriding the tabulated values.

    Output:
    -------
      None

    Raises:
    -------
      ConfigurationError
        If the configuration is invalid or a required collaborator or
        constant is missing.
    """
    self.config       = config.validate()
    self.central_body = central_body or _tabulated_constants(config.central_body)
    self.diagnostics  = ForceDiagnostics()

    if self.central_body.name.upper() != config.central_body:
      raise ConfigurationError(
        f"Central body constants are for {self.central_body.name} but the configuration "
        f"names {config.central_body}; set ForceModelConfig.central_body to match"
      )

    frame = config.frame

    # Gravity (always)
    self.central_gravity = CentralGravity(self.central_body)

    # Optional forces, in configuration order
    self.optional_forces = []

    if config.drag:
      if atmosphere is None:
        if self.central_body.name != 'EARTH':
          raise ConfigurationError(f"drag enabled about {self.central_body.name} but no atmosphere model given")
        atmosphere = ExponentialAtmosphere(radius=self.central_body.radius_equator)
      self.optional_forces.append(AtmosphericDrag(
        central_body = self.central_body,
        atmosphere   = atmosphere,
        area         = config.area,
        mass         = config.mass,
        cd           = config.cd,
      ))

    if config.srp:
      if ephemeris is None:
        raise ConfigurationError("srp enabled but no ephemeris provider given for the Sun position")
      self.optional_forces.append(SolarRadiationPressure(
        ephemeris      = ephemeris,
        solar_pressure = solar_pressure or InverseSquareSolarPressure(),
        area           = config.area,
        mass           = config.mass,
        c_srp          = config.c_srp,
        frame          = frame,
      ))

    if config.third_body:
      if ephemeris is None:
        raise ConfigurationError("third_body enabled but no ephemeris provider given")
      overrides = {name.upper(): body for name, body in (third_body_constants or {}).items()}
      bodies    = [overrides.get(name) or _tabulated_constants(name) for name in config.third_bodies]
      self.optional_forces.append(ThirdBodyGravity(
        ephemeris = ephemeris,
        bodies    = bodies,
        frame     = frame,
      ))

    if config.j2:
      if self.central_body.j2 == 0.0 or not self.central_body.radius_equator > 0.0:
        raise ConfigurationError(
          f"j2 enabled but {self.central_body.name} has J2 = {self.central_body.j2} "
          f"and reference radius = {self.central_body.radius_equator}"
        )
      self.optional_forces.append(J2Oblateness(self.central_body))

  def compute(
    self,
    time_et : float,
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> ForceTotals:
    """
    Compute total acceleration and Jacobians from all components

    Input:
    ------
      time_et : float
        Current Ephemeris Time (ET) [s]
      pos_vec : np.ndarray
        Position vector [m]
      vel_vec : np.ndarray
        Velocity vector [m/s]

    Output:
    -------
      totals : ForceTotals
        Summed acceleration [m/s²] and Jacobians.

    Raises:
    -------
      DegenerateGeometryError, MissingEphemerisDataError
        From the force models; fatal for this call.
      OptionalModuleFailure
        If an optional term fails and config.strict_optional is set.
    """
    # Gravity (always)
    central = self.central_gravity.evaluate(time_et, pos_vec, vel_vec).contribution

    acc_vec = central.acc_vec.copy()
    dadr    = central.dadr.copy()
    dadv    = central.dadv.copy()

    contributions = [central]
    skipped       = []

    # Optional forces
    for force in self.optional_forces:
      outcome = force.evaluate(time_et, pos_vec, vel_vec)

      if not outcome.succeeded:
        if self.config.strict_optional:
          raise OptionalModuleFailure(outcome.name, outcome.reason)
        self.diagnostics.record_skip(outcome, time_et)
        skipped.append(outcome)
        continue

      contribution = outcome.contribution
      acc_vec     += contribution.acc_vec
      dadr        += contribution.dadr
      dadv        += contribution.dadv
      contributions.append(contribution)

    return ForceTotals(
      acc_vec       = acc_vec,
      dadr          = dadr,
      dadv          = dadv,
      contributions = tuple(contributions),
      skipped       = tuple(skipped),
    )


def _tabulated_constants(
  body_name : str,
) -> CelestialBodyConstants:
  try:
    return CelestialBodyConstants.from_solar_system_constants(body_name)
  except KeyError as e:
    raise ConfigurationError(f"No constants available for body {body_name}; pass them explicitly") from e


# =============================================================================
# Equations of Motion
# =============================================================================

def as_state_vector(
  state_vec : np.ndarray,
) -> np.ndarray:
  """
  Validate a state vector and return it as a flat float array.

  Input:
  ------
    state_vec : array_like
      [pos, vel] (6 entries) or [pos, vel, STM] (42 entries). A single row
      or single column 2-D array is flattened with a warning.

  Output:
  -------
    state_vec : np.ndarray
      Flat state vector.

  Raises:
  -------
    ConfigurationError
      If the shape or length is not an accepted layout.
  """
  state_arr = np.asarray(state_vec, dtype=float)

  if state_arr.ndim == 2 and 1 in state_arr.shape:
    warnings.warn(
      f"State vector of shape {state_arr.shape} flattened to 1-D; pass a 1-D array.",
      UserWarning,
      stacklevel=3,
    )
    state_arr = state_arr.reshape(-1)
  elif state_arr.ndim != 1:
    raise ConfigurationError(f"State vector must be 1-D, received shape {state_arr.shape}")

  if state_arr.size not in (STATESIZES.POSVEL, STATESIZES.POSVEL_STM):
    raise ConfigurationError(
      f"State vector must have {STATESIZES.POSVEL} or {STATESIZES.POSVEL_STM} entries, received {state_arr.size}"
    )

  return state_arr


class GeneralStateEquationsOfMotion:
  """
  General state equations of motion for orbit and STM propagation
  """

  def __init__(
    self,
    acceleration : Acceleration,
    epoch_et     : float = 0.0,
  ):
    """
    Initialize equations of motion

    Input:
    ------
      acceleration : Acceleration
        Acceleration coordinator instance
      epoch_et : float
        Ephemeris time of integrator time zero [s]

    Output:
    -------
      None
    """
    self.acceleration      = acceleration
    self.epoch_et          = float(epoch_et)
    self._warned_unmodeled = False

  def state_time_derivative(
    self,
    time      : float,
    state_vec : np.ndarray,
  ) -> np.ndarray:
    """
    Compute state time derivative for ODE integration

    Input:
    ------
      time : float
        Time since epoch_et [s]
      state_vec : np.ndarray
        [pos, vel] [m, m/s], or [pos, vel, STM] with the STM packed row-major

    Output:
    -------
      state_dot_vec : np.ndarray
        [vel, acc] or [vel, acc, d(STM)/dt], same length as state_vec

    Raises:
    -------
      ConfigurationError
        If state_vec is not 6 or 42 entries long.
    """
    state_vec = as_state_vector(state_vec)

    pos_vec = state_vec[0:3]
    vel_vec = state_vec[3:6]
    totals  = self.acceleration.compute(self.epoch_et + time, pos_vec, vel_vec)

    state_dot_vec      = np.zeros(state_vec.size)
    state_dot_vec[0:3] = vel_vec
    state_dot_vec[3:6] = totals.acc_vec

    if state_vec.size == STATESIZES.POSVEL_STM:
      self._warn_unmodeled(totals)
      stm_mat     = unpack_stm(state_vec[STATESIZES.POSVEL:])
      stm_dot_mat = stm_time_derivative(totals.system_matrix, stm_mat)
      state_dot_vec[STATESIZES.POSVEL:] = pack_stm(stm_dot_mat)

    return state_dot_vec

  def _warn_unmodeled(
    self,
    totals : ForceTotals,
  ) -> None:
    unmodeled = totals.unmodeled_jacobians
    if unmodeled and not self._warned_unmodeled:
      self._warned_unmodeled = True
      warnings.warn(
        f"Jacobian not modeled for {', '.join(unmodeled)}; the STM omits these partials.",
        UnmodeledJacobianWarning,
        stacklevel=3,
      )


def derivative(
  time                 : float,
  state_vec            : np.ndarray,
  epoch_et             : float,
  config               : Union[ForceModelConfig, Sequence[bool]],
  area                 : Optional[float]                               = None,
  mass                 : Optional[float]                               = None,
  bodies               : Sequence[str]                                 = (),
  central_body         : Optional[CelestialBodyConstants]              = None,
  ephemeris            : Optional[object]                              = None,
  atmosphere           : Optional[object]                              = None,
  solar_pressure       : Optional[object]                              = None,
  third_body_constants : Optional[Mapping[str, CelestialBodyConstants]] = None,
) -> np.ndarray:
  """
  Single-call state derivative.

  Input:
  ------
    time : float
      Time since epoch_et [s].
    state_vec : np.ndarray
      6- or 42-element state.
    epoch_et : float
      Ephemeris time of time zero [s].
    config : ForceModelConfig | sequence of bool
      Force selection. A [drag, srp, third_body, j2] flag array is accepted
      (deprecated) together with area, mass and bodies.
    area : float, optional
      Cross-sectional area [m²], used with a flag array.
    mass : float, optional
      Object mass [kg], used with a flag array.
    bodies : sequence of str
      Perturbing bodies, used with a flag array.
    central_body, ephemeris, atmosphere, solar_pressure, third_body_constants
      Collaborators, as for Acceleration.

  Output:
  -------
    state_dot_vec : np.ndarray
      Derivative, same length as state_vec.

  Notes:
  ------
    Builds the force model on every call. Integrators should hold a
    GeneralStateEquationsOfMotion instead.
  """
  state_vec = as_state_vector(state_vec)

  if not isinstance(config, ForceModelConfig):
    config = ForceModelConfig.from_flags(config, area=area, mass=mass, bodies=bodies)

  acceleration = Acceleration(
    config               = config,
    central_body         = central_body,
    ephemeris            = ephemeris,
    atmosphere           = atmosphere,
    solar_pressure       = solar_pressure,
    third_body_constants = third_body_constants,
  )
  return GeneralStateEquationsOfMotion(acceleration, epoch_et).state_time_derivative(time, state_vec)
