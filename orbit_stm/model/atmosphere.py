"""
Atmospheric Density Model
=========================

Default density provider for the drag force. Any object exposing the same two
methods can be handed to the force model instead:

  density(pos_vec, epoch)          -> float       [kg/m³]
  density_gradient(pos_vec, epoch) -> np.ndarray  [kg/m⁴], d(rho)/d(pos_vec)
"""
import numpy as np

from orbit_stm.model.constants       import SOLARSYSTEMCONSTANTS
from orbit_stm.model.frame_converter import unit_vector


class ExponentialAtmosphere:
  """
  Exponential atmosphere rho = rho_ref * exp(-(alt - alt_ref) / scale_height),
  with altitude measured above a spherical body of the given radius.
  """

  def __init__(
    self,
    rho_ref      : float = SOLARSYSTEMCONSTANTS.EARTH.RHO_0,
    alt_ref      : float = 0.0,
    scale_height : float = SOLARSYSTEMCONSTANTS.EARTH.H_0,
    radius       : float = SOLARSYSTEMCONSTANTS.EARTH.RADIUS.EQUATOR,
  ):
    """
    Initialize exponential atmosphere

    Input:
    ------
      rho_ref : float
        Density at the reference altitude [kg/m³].
      alt_ref : float
        Reference altitude [m].
      scale_height : float
        Scale height [m].
      radius : float
        Radius of the central body [m].

    Output:
    -------
      None
    """
    self.rho_ref      = rho_ref
    self.alt_ref      = alt_ref
    self.scale_height = scale_height
    self.radius       = radius

  def _altitude(
    self,
    pos_vec : np.ndarray,
  ) -> float:
    return float(np.linalg.norm(pos_vec)) - self.radius

  def density(
    self,
    pos_vec : np.ndarray,
    epoch   : float = 0.0,
  ) -> float:
    """
    Atmospheric density at a position

    Input:
    ------
      pos_vec : np.ndarray
        Position vector relative to the central body [m].
      epoch : float
        Ephemeris time [s]. Unused by this static model.

    Output:
    -------
      rho : float
        Density [kg/m³].
    """
    # Below the surface the density is held at its surface value
    alt = max(self._altitude(pos_vec), 0.0)
    return self.rho_ref * np.exp(-(alt - self.alt_ref) / self.scale_height)

  def density_gradient(
    self,
    pos_vec : np.ndarray,
    epoch   : float = 0.0,
  ) -> np.ndarray:
    """
    Gradient of the density with respect to position

    Input:
    ------
      pos_vec : np.ndarray
        Position vector relative to the central body [m].
      epoch : float
        Ephemeris time [s].

    Output:
    -------
      drho_dpos_vec : np.ndarray
        d(rho)/d(pos_vec) [kg/m⁴].
    """
    if self._altitude(pos_vec) <= 0.0:
      return np.zeros(3)

    pos_dir = unit_vector(pos_vec, 'position')
    return -self.density(pos_vec, epoch) / self.scale_height * pos_dir
