from dataclasses import dataclass


class CONVERTER:
  # Angle Conversions
  RAD_PER_DEG = 3.141592653589793 / 180.0  # [radian] per [degree]
  DEG_PER_RAD = 180.0 / 3.141592653589793  # [degree] per [radian]

  # Time Conversions
  SEC_PER_DAY  = 86400                     # [seconds] per [day]
  SEC_PER_HOUR = 3600                      # [seconds] per [hour]

  # Distance Conversions
  M_PER_KM = 1000.0                        # [meters] per [kilometer]
  KM_PER_M = 1.0 / 1000.0                  # [kilometers] per [meter]
  M_PER_AU = 149597870700.0                # [meters] per [astronomical unit]

  # Gravitational Parameter Conversions
  M3_PER_KM3 = 1.0e9                       # [meters³] per [kilometer³]


class PHYSICALCONSTANTS:
  speed_of_light = 299792458.0  # Speed of light in vacuum [m/s]


class STATESIZES:
  """
  Lengths of the state vector layouts accepted by the equations of motion.
  """
  POSVEL     = 6               # [pos, vel]
  STM        = 36              # flattened 6x6 state transition matrix
  POSVEL_STM = POSVEL + STM    # [pos, vel, stm]


class NAIFIDS:
  """
  NAIF ID codes for celestial bodies used by SPICE.
  Reference: https://naif.jpl.nasa.gov/pub/naif/toolkit_docs/C/req/naif_ids.html

  Notes:
  ------
  Outer planets map to their system barycenters, which is what DE440 carries and
  what a third-body point-mass term needs.
  """
  SUN     = 10
  MERCURY = 199
  VENUS   = 299
  EARTH   = 399
  MOON    = 301
  MARS    = 4
  JUPITER = 5
  SATURN  = 6
  URANUS  = 7
  NEPTUNE = 8
  PLUTO   = 9

  NAME_TO_ID = {
    'SUN'     : SUN,
    'MERCURY' : MERCURY,
    'VENUS'   : VENUS,
    'EARTH'   : EARTH,
    'MOON'    : MOON,
    'MARS'    : MARS,
    'JUPITER' : JUPITER,
    'SATURN'  : SATURN,
    'URANUS'  : URANUS,
    'NEPTUNE' : NEPTUNE,
    'PLUTO'   : PLUTO,
  }


class SOLARSYSTEMCONSTANTS:
  """
  Physical constants of the bodies that can act as central or perturbing bodies.
  """

  class SUN:
    class RADIUS:
      EQUATOR = 696340000.0                 # Sun's equatorial radius [m]
    GP = 1.32712440018e20                   # Sun's gravitational parameter [m³/s²]
    J2 = 0.0                                # Sun's J2 coefficient (negligible)

  class MERCURY:
    class RADIUS:
      EQUATOR = 2439700.0                   # Mercury's equatorial radius [m]
    GP = 2.2032e13                          # Mercury's gravitational parameter [m³/s²]
    J2 = 60.0e-6                            # Mercury's J2 coefficient

  class VENUS:
    class RADIUS:
      EQUATOR = 6051800.0                   # Venus's equatorial radius [m]
    GP = 3.2485859e14                       # Venus's gravitational parameter [m³/s²]
    J2 = 4.458e-6                           # Venus's J2 coefficient

  class EARTH:
    class RADIUS:
      EQUATOR = 6378137.0                   # Earth's WGS84 equatorial radius [m]
      POLAR   = 6356752.3                   # Earth's WGS84 polar radius [m]
    GP    = 3.986004418e14                  # Earth's gravitational parameter [m³/s²]
    J2    = 1.08263e-3                      # Earth's WGS84 J2 coefficient
    OMEGA = 7.2921150e-5                    # Earth's rotation rate [rad/s]

    # Reference atmosphere parameters (simplified exponential model)
    RHO_0 = 1.225                           # Earth's sea level density [kg/m³]
    H_0   = 8500.0                          # Earth's scale height [m]

    # Solar radiation pressure at Earth's distance
    G_SC         = 1361.0                                    # solar constant [W/m²] at 1 AU
    PRESSURE_SRP = G_SC / PHYSICALCONSTANTS.speed_of_light   # solar radiation pressure at 1 AU [N/m²]. approx 4.54e-6 N/m².

  class MOON:
    class RADIUS:
      EQUATOR = 1737400.0                   # Moon's equatorial radius [m]
    GP = 4.9048695e12                       # Moon's gravitational parameter [m³/s²]
    J2 = 2.032e-4                           # Moon's J2 coefficient

  class MARS:
    class RADIUS:
      EQUATOR = 3397200.0                   # Mars's equatorial radius [m]
    GP = 4.28283e13                         # Mars's gravitational parameter [m³/s²]
    J2 = 1960.45e-6                         # Mars's J2 coefficient

  class JUPITER:
    class RADIUS:
      EQUATOR = 71492000.0                  # Jupiter's equatorial radius [m]
    GP = 1.2671277e17                       # Jupiter's gravitational parameter [m³/s²]
    J2 = 14736.e-6                          # Jupiter's J2 coefficient

  class SATURN:
    class RADIUS:
      EQUATOR = 60268000.0                  # Saturn's equatorial radius [m]
    GP = 3.79406e16                         # Saturn's gravitational parameter [m³/s²]
    J2 = 16298.e-6                          # Saturn's J2 coefficient

  class URANUS:
    class RADIUS:
      EQUATOR = 25559000.0                  # Uranus's equatorial radius [m]
    GP = 5.79455e15                         # Uranus's gravitational parameter [m³/s²]
    J2 = 3343.43e-6                         # Uranus's J2 coefficient

  class NEPTUNE:
    class RADIUS:
      EQUATOR = 24746000.0                  # Neptune's equatorial radius [m]
    GP = 6.83653e15                         # Neptune's gravitational parameter [m³/s²]
    J2 = 3411.e-6                           # Neptune's J2 coefficient

  class PLUTO:
    class RADIUS:
      EQUATOR = 1137000.0                   # Pluto's equatorial radius [m]
    GP = 9.830e11                           # Pluto's gravitational parameter [m³/s²]
    J2 = 0.0                                # Pluto's J2 coefficient (unknown)


@dataclass(frozen=True)
class CelestialBodyConstants:
  """
  Constants of one celestial body, resolved once when a force model is built.

  Attributes:
  -----------
    name : str
      Upper-case body name (e.g. 'EARTH').
    gp : float
      Gravitational parameter [m³/s²].
    radius_equator : float
      Equatorial radius, the reference radius of the zonal harmonics [m].
    j2 : float
      Second zonal harmonic coefficient.
    omega : float
      Spin rate about the inertial +z axis [rad/s].
  """
  name           : str
  gp             : float
  radius_equator : float = 0.0
  j2             : float = 0.0
  omega          : float = 0.0

  @classmethod
  def from_solar_system_constants(
    cls,
    body_name : str,
  ) -> 'CelestialBodyConstants':
    """
    Build constants for a body from the SOLARSYSTEMCONSTANTS table.

    Input:
    ------
      body_name : str
        Body name, case-insensitive.

    Output:
    -------
      constants : CelestialBodyConstants
        Resolved constants.

    Raises:
    -------
      KeyError
        If the body is not in the table.
    """
    body_upper = body_name.upper()
    body       = getattr(SOLARSYSTEMCONSTANTS, body_upper, None)
    if body is None:
      raise KeyError(f"No constants tabulated for body: {body_name}")

    return cls(
      name           = body_upper,
      gp             = body.GP,
      radius_equator = body.RADIUS.EQUATOR,
      j2             = getattr(body, 'J2', 0.0),
      omega          = getattr(body, 'OMEGA', 0.0),
    )

  @classmethod
  def from_ephemeris(
    cls,
    body_name : str,
    ephemeris,
    j2        : float = 0.0,
    omega     : float = 0.0,
  ) -> 'CelestialBodyConstants':
    """
    Build constants for a body by querying an ephemeris provider once.

    Input:
    ------
      body_name : str
        Body name, case-insensitive.
      ephemeris : object
        Provider exposing body_constant(body_name, constant_name).
      j2 : float
        J2 coefficient. Planetary constants kernels do not carry zonal
        harmonics, so the value is supplied by the caller.
      omega : float
        Spin rate [rad/s].

    Output:
    -------
      constants : CelestialBodyConstants
        Resolved constants.
    """
    body_upper = body_name.upper()
    return cls(
      name           = body_upper,
      gp             = ephemeris.body_constant(body_upper, 'GM'),
      radius_equator = ephemeris.body_constant(body_upper, 'RADII'),
      j2             = j2,
      omega          = omega,
    )
