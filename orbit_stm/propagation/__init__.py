"""
Orbit Propagation Package
=========================

Numerical integration of the orbit state, optionally with the state transition matrix.
"""

from .propagator import propagate_state_numerical_integration

__all__ = ['propagate_state_numerical_integration']
