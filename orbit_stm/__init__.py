"""
Orbit STM
=========

Perturbed orbit dynamics with analytic Jacobians for state transition matrix
(STM) propagation.

Subpackages:
------------
- model       : force models, composer and equations of motion
- input       : force model configuration
- propagation : numerical integration of the state and STM
- validation  : test suite
"""

from .input.configuration import ForceModelConfig, load_force_model_config
from .model.dynamics      import Acceleration, GeneralStateEquationsOfMotion, derivative
from .model.errors        import (
  ConfigurationError,
  DegenerateGeometryError,
  MissingEphemerisDataError,
  OptionalModuleFailure,
  UnmodeledJacobianWarning,
)

__all__ = [
  'ForceModelConfig',
  'load_force_model_config',
  'Acceleration',
  'GeneralStateEquationsOfMotion',
  'derivative',
  'ConfigurationError',
  'DegenerateGeometryError',
  'MissingEphemerisDataError',
  'OptionalModuleFailure',
  'UnmodeledJacobianWarning',
]
