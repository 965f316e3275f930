"""
Unit Tests for Ephemeris Providers
==================================

Tests that run without SPICE kernels: name lookup, error mapping and caching.

Tests:
------
TestSpiceEphemeris
  - test_sanity_check_unknown_body_raises        : verify unknown names raise MissingEphemerisDataError
  - test_sanity_check_no_kernels_raises          : verify SPICE errors map to MissingEphemerisDataError
  - test_sanity_check_utc_to_et_without_leap_seconds_raises : verify UTC conversion without a leap second kernel raises
  - test_sanity_check_missing_kernel_dir_raises  : verify load_kernels checks the directory and files

TestCachedEphemeris
  - test_sanity_check_repeated_lookup_cached     : verify repeated queries reach the provider once
  - test_sanity_check_distinct_epochs_not_shared : verify each epoch is looked up separately
  - test_sanity_check_body_constant_passthrough  : verify constants come from the wrapped provider

TestCelestialBodyConstants
  - test_known_solution_from_ephemeris           : verify constants read through an ephemeris provider
  - test_sanity_check_unknown_table_body_raises  : verify untabulated bodies raise KeyError

Usage:
------
  python -m pytest orbit_stm/validation/test_ephemeris.py -v
"""
import pytest
import numpy    as np
import spiceypy as spice

from datetime import datetime

from orbit_stm.model.constants     import SOLARSYSTEMCONSTANTS, CelestialBodyConstants
from orbit_stm.model.ephemeris     import CachedEphemeris, SpiceEphemeris
from orbit_stm.model.errors        import MissingEphemerisDataError
from orbit_stm.validation.conftest import FakeEphemeris


class TestSpiceEphemeris:
  """Tests for SpiceEphemeris."""

  def test_sanity_check_unknown_body_raises(self):
    ephemeris = SpiceEphemeris('EARTH')

    with pytest.raises(MissingEphemerisDataError, match="PHOBOS"):
      ephemeris.position_of('PHOBOS', 0.0)
    with pytest.raises(MissingEphemerisDataError):
      SpiceEphemeris('VULCAN')

  def test_sanity_check_no_kernels_raises(self):
    spice.kclear()
    ephemeris = SpiceEphemeris('EARTH')

    with pytest.raises(MissingEphemerisDataError, match="MOON"):
      ephemeris.position_of('MOON', 0.0)

  def test_sanity_check_utc_to_et_without_leap_seconds_raises(self):
    spice.kclear()

    with pytest.raises(MissingEphemerisDataError, match="2025-01-01T00:00:00"):
      SpiceEphemeris.utc_to_et(datetime(2025, 1, 1, 0, 0, 0))

  def test_sanity_check_missing_kernel_dir_raises(self, tmp_path):
    with pytest.raises(FileNotFoundError):
      SpiceEphemeris.load_kernels(tmp_path / "no_such_dir")
    with pytest.raises(FileNotFoundError, match="LSK"):
      SpiceEphemeris.load_kernels(tmp_path)


class TestCachedEphemeris:
  """Tests for CachedEphemeris."""

  def test_sanity_check_repeated_lookup_cached(self, fake_ephemeris):
    cached = CachedEphemeris(fake_ephemeris)

    first  = cached.position_of('MOON', 100.0, 'J2000')
    second = cached.position_of('moon', 100.0, 'J2000')

    assert fake_ephemeris.calls == 1
    assert np.array_equal(first, second)
    assert np.array_equal(first, fake_ephemeris.positions['MOON'])
    assert cached.cache_info().hits == 1

    # Callers may modify the returned array without corrupting the cache
    first[0] = 0.0
    assert np.array_equal(cached.position_of('MOON', 100.0, 'J2000'), second)

  def test_sanity_check_distinct_epochs_not_shared(self, fake_ephemeris):
    cached = CachedEphemeris(fake_ephemeris)

    cached.position_of('SUN', 0.0)
    cached.position_of('SUN', 1.0)
    cached.position_of('SUN', 0.0, 'ECLIPJ2000')

    assert fake_ephemeris.calls == 3

    cached.cache_clear()
    cached.position_of('SUN', 0.0)
    assert fake_ephemeris.calls == 4

  def test_sanity_check_body_constant_passthrough(self, fake_ephemeris):
    cached = CachedEphemeris(fake_ephemeris)

    assert cached.body_constant('EARTH', 'GM') == SOLARSYSTEMCONSTANTS.EARTH.GP
    with pytest.raises(MissingEphemerisDataError):
      cached.body_constant('EARTH', 'J2')


class TestCelestialBodyConstants:
  """Tests for CelestialBodyConstants construction."""

  def test_known_solution_from_ephemeris(self, fake_ephemeris):
    earth = CelestialBodyConstants.from_ephemeris(
      'earth', fake_ephemeris, j2=SOLARSYSTEMCONSTANTS.EARTH.J2, omega=SOLARSYSTEMCONSTANTS.EARTH.OMEGA,
    )

    assert earth == CelestialBodyConstants.from_solar_system_constants('EARTH')

  def test_sanity_check_unknown_table_body_raises(self):
    with pytest.raises(KeyError):
      CelestialBodyConstants.from_solar_system_constants('VULCAN')
