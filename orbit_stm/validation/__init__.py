"""
Validation Package
==================

Test suite for the force model and state transition matrix propagation.

Modules:
--------
- test_frame_converter : Tests for the RTN frame rotation
- test_orbit_converter : Tests for orbital element conversion
- test_forces          : Unit tests for individual forces and their Jacobians
- test_variational     : Tests for STM packing and the system matrix
- test_dynamics        : Tests for the force composer and equations of motion
- test_configuration   : Tests for configuration validation and YAML loading
- test_ephemeris       : Tests for ephemeris providers
- test_propagator      : Integration tests for state and STM propagation

Usage:
------
Run all tests:
  python -m pytest orbit_stm/validation/ -v

Run a specific test module:
  python -m pytest orbit_stm/validation/test_forces.py -v

Run a specific test class:
  python -m pytest orbit_stm/validation/test_forces.py::TestCentralGravity -v
"""
