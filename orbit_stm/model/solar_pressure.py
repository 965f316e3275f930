from orbit_stm.model.constants import SOLARSYSTEMCONSTANTS, CONVERTER
from orbit_stm.model.errors    import DegenerateGeometryError


class InverseSquareSolarPressure:
  """
  Solar radiation pressure as a function of distance from the Sun,
  P(d) = P_ref * (d_ref / d)^2.

  Any object with pressure(distance) and pressure_derivative(distance) can be
  used by the SRP force in place of this model.
  """

  def __init__(
    self,
    pressure_ref : float = SOLARSYSTEMCONSTANTS.EARTH.PRESSURE_SRP,
    distance_ref : float = CONVERTER.M_PER_AU,
  ):
    """
    Initialize pressure model

    Input:
    ------
      pressure_ref : float
        Pressure at the reference distance [N/m²].
      distance_ref : float
        Reference distance [m] (default: 1 AU).

    Output:
    -------
      None
    """
    self.pressure_ref = pressure_ref
    self.distance_ref = distance_ref

  def _check(
    self,
    distance : float,
  ) -> None:
    if not distance > 0.0:
      raise DegenerateGeometryError(f"Solar pressure undefined at distance {distance}")

  def pressure(
    self,
    distance : float,
  ) -> float:
    """
    Pressure at a distance from the Sun [N/m²].
    """
    self._check(distance)
    return self.pressure_ref * (self.distance_ref / distance)**2

  def pressure_derivative(
    self,
    distance : float,
  ) -> float:
    """
    dP/dd at a distance from the Sun [N/m³].
    """
    return -2.0 * self.pressure(distance) / distance
