"""
Orbit Propagator
================

Numerical integration of the equations of motion, optionally with the state
transition matrix.
"""
import numpy as np

from scipy.integrate import solve_ivp
from typing          import Optional

from orbit_stm.model.constants       import STATESIZES
from orbit_stm.model.dynamics        import GeneralStateEquationsOfMotion
from orbit_stm.model.orbit_converter import OrbitConverter
from orbit_stm.model.variational     import initial_augmented_state, unpack_stm


def propagate_state_numerical_integration(
  initial_state       : np.ndarray,
  time_o              : float,
  time_f              : float,
  equations_of_motion : GeneralStateEquationsOfMotion,
  include_stm         : bool                 = False,
  method              : str                  = 'DOP853', # DOP853 RK45
  rtol                : float                = 1e-12,
  atol                : float                = 1e-12,
  dense_output        : bool                 = False,
  t_eval              : Optional[np.ndarray] = None,
  num_points          : Optional[int]        = None,
  get_coe_time_series : bool                 = False,
  gp                  : Optional[float]      = None,
) -> dict:
  """
  Propagate an orbit from an initial cartesian state using numerical integration.

  Input:
  ------
    initial_state : np.ndarray
      Initial state vector [pos, vel] in meters and m/s.
    time_o : float
      Initial time since the equations' epoch [s].
    time_f : float
      Final time since the equations' epoch [s].
    equations_of_motion : GeneralStateEquationsOfMotion
      Equations of motion holding the force model and epoch.
    include_stm : bool
      Also integrate the state transition matrix, starting from identity.
    method : str
      Integration method for scipy.solve_ivp (default: 'DOP853').
    rtol : float
      Relative tolerance for integration.
    atol : float
      Absolute tolerance for integration.
    dense_output : bool
      Enable dense output for interpolation.
    t_eval : np.ndarray, optional
      Times at which to store the solution.
    num_points : int, optional
      Number of uniformly spaced output points. Overrides t_eval.
    get_coe_time_series : bool
      If True, convert states to classical orbital elements.
    gp : float, optional
      Gravitational parameter for orbital element conversion [m³/s²]
      (default: the central body of the force model).

  Output:
  -------
    result : dict
      Dictionary containing:
      - success : bool - Integration success flag
      - message : str - Status message
      - time : np.ndarray - Time array [s]
      - state : np.ndarray - State history [6 x N]
      - state_f : np.ndarray - Final state vector
      - stm : np.ndarray - STM history [N x 6 x 6] (None unless include_stm)
      - stm_f : np.ndarray - Final STM (None unless include_stm)
      - coe : dict - Classical orbital elements time series (if requested)
      - sol : OdeSolution - Continuous solution (None unless dense_output)
      - skipped_counts : dict - Optional force failures zero-filled during the run
      - unmodeled_jacobians : list - Active forces whose Jacobian the STM omits
  """
  initial_state = np.asarray(initial_state, dtype=float).flatten()
  if include_stm:
    y0 = initial_augmented_state(initial_state)
  else:
    y0 = initial_state[0:STATESIZES.POSVEL].copy()

  if num_points is not None:
    t_eval = np.linspace(time_o, time_f, num_points)

  solution = solve_ivp(
    fun          = equations_of_motion.state_time_derivative,
    t_span       = (time_o, time_f),
    y0           = y0,
    method       = method,
    rtol         = rtol,
    atol         = atol,
    dense_output = dense_output,
    t_eval       = t_eval,
  )

  num_steps = solution.y.shape[1]
  state     = solution.y[0:STATESIZES.POSVEL, :]

  stm   = None
  stm_f = None
  if include_stm:
    stm   = np.array([unpack_stm(solution.y[STATESIZES.POSVEL:, i]) for i in range(num_steps)])
    stm_f = stm[-1] if num_steps > 0 else None

  coe_time_series = {
    'sma'  : np.zeros(num_steps),
    'ecc'  : np.zeros(num_steps),
    'inc'  : np.zeros(num_steps),
    'raan' : np.zeros(num_steps),
    'aop'  : np.zeros(num_steps),
    'ta'   : np.zeros(num_steps),
  }
  if get_coe_time_series:
    if gp is None:
      gp = equations_of_motion.acceleration.central_body.gp
    for i in range(num_steps):
      coe = OrbitConverter.pv_to_coe(state[0:3, i], state[3:6, i], gp)
      for key in coe_time_series.keys():
        coe_time_series[key][i] = coe[key]

  acceleration = equations_of_motion.acceleration
  unmodeled    = [force.name for force in acceleration.optional_forces if not force.jacobian_modeled]

  return {
    'success'             : solution.success,
    'message'             : solution.message,
    'time'                : solution.t,
    'state'               : state,
    'state_f'             : state[:, -1] if num_steps > 0 else None,
    'stm'                 : stm,
    'stm_f'               : stm_f,
    'coe'                 : coe_time_series,
    'sol'                 : solution.sol if dense_output else None,
    'skipped_counts'      : dict(acceleration.diagnostics.skipped_counts),
    'unmodeled_jacobians' : unmodeled if include_stm else [],
  }
