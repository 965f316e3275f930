"""
Ephemeris Providers
===================

Positions and constants of celestial bodies for the third-body and SRP forces.

A provider exposes:
  position_of(body_name, epoch, reference_frame=None) -> np.ndarray [m]
    Position of the body relative to the central body at ephemeris time epoch [s].
  body_constant(body_name, constant_name) -> float
    Body constant in SI units ('GM' [m³/s²], 'RADII' equatorial radius [m]).

SpiceEphemeris reads them from SPICE kernels through spiceypy. CachedEphemeris
memoizes position lookups so the repeated stage evaluations of one integrator
step do not query SPICE again for the same epoch.
"""
import logging
import functools
import numpy    as np
import spiceypy as spice

from datetime import datetime
from pathlib  import Path
from typing   import Optional

from spiceypy.utils.exceptions import SpiceyError

from orbit_stm.model.constants import CONVERTER, NAIFIDS
from orbit_stm.model.errors    import MissingEphemerisDataError


logger = logging.getLogger(__name__)


class SpiceEphemeris:
  """
  Ephemeris provider backed by SPICE kernels.
  """

  def __init__(
    self,
    central_body : str = 'EARTH',
    frame        : str = 'J2000',
  ):
    """
    Initialize SPICE ephemeris provider

    Input:
    ------
      central_body : str
        Observer body; positions are returned relative to it.
      frame : str
        Default reference frame for position queries.

    Output:
    -------
      None
    """
    self.central_body = central_body.upper()
    self.frame        = frame
    self._get_naif_id(self.central_body)

  @staticmethod
  def load_kernels(
    kernel_dir : Path,
  ) -> None:
    """
    Load the leap second, planetary ephemeris and planetary constants kernels.

    Download from: https://naif.jpl.nasa.gov/pub/naif/generic_kernels/

    Input:
    ------
      kernel_dir : Path
        Directory holding naif0012.tls, de*.bsp and pck00010.tpc.

    Output:
    -------
      None

    Raises:
    -------
      FileNotFoundError
        If the directory or a required kernel is missing.
    """
    kernel_dir = Path(kernel_dir)
    if not kernel_dir.exists():
      raise FileNotFoundError(
        f"SPICE kernel directory not found: {kernel_dir}\n"
        f"Required files:\n"
        f"  - lsk/naif0012.tls\n"
        f"  - spk/planets/de440.bsp (or de430.bsp)\n"
        f"  - pck/pck00010.tpc"
      )

    lsk_file = kernel_dir / 'naif0012.tls'
    if not lsk_file.exists():
      raise FileNotFoundError(f"LSK file not found: {lsk_file}")

    spk_files = sorted(kernel_dir.glob('de*.bsp'))
    if not spk_files:
      raise FileNotFoundError(f"No SPK files (de*.bsp) found in {kernel_dir}")

    pck_file = kernel_dir / 'pck00010.tpc'
    if not pck_file.exists():
      raise FileNotFoundError(f"PCK file not found: {pck_file}")

    for kernel_file in (lsk_file, spk_files[0], pck_file):
      spice.furnsh(str(kernel_file))

    logger.info("SPICE kernels loaded from: %s", kernel_dir)

  @staticmethod
  def _get_naif_id(
    body_name : str,
  ) -> int:
    body_upper = body_name.upper()
    if body_upper in NAIFIDS.NAME_TO_ID:
      return NAIFIDS.NAME_TO_ID[body_upper]

    raise MissingEphemerisDataError(f"Unknown body name for NAIF ID lookup: {body_name}")

  def position_of(
    self,
    body_name       : str,
    epoch           : float,
    reference_frame : Optional[str] = None,
  ) -> np.ndarray:
    """
    Position of a body relative to the central body.

    Input:
    ------
      body_name : str
        Body name (e.g. 'SUN', 'MOON').
      epoch : float
        Ephemeris time in seconds past J2000 epoch.
      reference_frame : str, optional
        Reference frame (default: the provider's frame).

    Output:
    -------
      pos_vec : np.ndarray
        Position vector [m].

    Raises:
    -------
      MissingEphemerisDataError
        If the body is unknown or SPICE has no data for it at this epoch.
    """
    frame = reference_frame or self.frame
    targ  = self._get_naif_id(body_name)
    obs   = self._get_naif_id(self.central_body)

    try:
      pos_vec_km, _ = spice.spkpos(str(targ), float(epoch), frame, 'NONE', str(obs))
    except SpiceyError as e:
      raise MissingEphemerisDataError(
        f"No ephemeris for {body_name} relative to {self.central_body} at ET {epoch}: {e}"
      ) from e

    return np.array(pos_vec_km, dtype=float) * CONVERTER.M_PER_KM

  def body_constant(
    self,
    body_name     : str,
    constant_name : str,
  ) -> float:
    """
    Body constant from the loaded planetary constants kernel, in SI units.

    Input:
    ------
      body_name : str
        Body name (e.g. 'EARTH').
      constant_name : str
        'GM' (returned in m³/s²) or 'RADII' (equatorial radius, m).

    Output:
    -------
      value : float
        Constant value.

    Raises:
    -------
      MissingEphemerisDataError
        If the kernel pool does not hold the constant.
    """
    item = constant_name.upper()
    try:
      _, values = spice.bodvrd(body_name.upper(), item, 3)
    except SpiceyError as e:
      raise MissingEphemerisDataError(f"No constant {item} for {body_name}: {e}") from e

    if item == 'GM':
      return float(values[0]) * CONVERTER.M3_PER_KM3
    if item == 'RADII':
      return float(values[0]) * CONVERTER.M_PER_KM
    return float(values[0])

  @staticmethod
  def utc_to_et(
    utc_dt : datetime,
  ) -> float:
    """
    Convert a UTC datetime to Ephemeris Time (seconds past J2000).

    Input:
    ------
      utc_dt : datetime
        The UTC datetime to convert.

    Output:
    -------
      et_float : float
        Ephemeris Time [s]. Requires the leap second kernel.
    """
    utc_str = utc_dt.strftime('%Y-%m-%dT%H:%M:%S.%f')
    try:
      return float(spice.str2et(utc_str))
    except SpiceyError as e:
      raise MissingEphemerisDataError(f"Cannot convert {utc_str} to ET: {e}") from e


class CachedEphemeris:
  """
  Memoizing wrapper around an ephemeris provider.

  Positions are cached per (body, epoch, frame); body constants are passed
  through unchanged.
  """

  def __init__(
    self,
    provider,
    maxsize  : int = 1024,
  ):
    """
    Initialize cache

    Input:
    ------
      provider : object
        Wrapped ephemeris provider.
      maxsize : int
        Maximum number of cached positions.

    Output:
    -------
      None
    """
    self.provider  = provider
    self._position = functools.lru_cache(maxsize=maxsize)(self._lookup)

  def _lookup(
    self,
    body_name       : str,
    epoch           : float,
    reference_frame : Optional[str],
  ) -> tuple:
    return tuple(self.provider.position_of(body_name, epoch, reference_frame))

  def position_of(
    self,
    body_name       : str,
    epoch           : float,
    reference_frame : Optional[str] = None,
  ) -> np.ndarray:
    return np.array(self._position(body_name.upper(), float(epoch), reference_frame))

  def body_constant(
    self,
    body_name     : str,
    constant_name : str,
  ) -> float:
    return self.provider.body_constant(body_name, constant_name)

  def cache_info(self):
    return self._position.cache_info()

  def cache_clear(self) -> None:
    self._position.cache_clear()
