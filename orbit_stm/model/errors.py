"""
Error Taxonomy
==============

Exceptions and warnings raised while evaluating the force model and its
variational equations.

Fatal for the current derivative call:
  - ConfigurationError        : bad state length/shape, missing parameter or collaborator
  - DegenerateGeometryError   : near-zero position or angular momentum
  - MissingEphemerisDataError : body position or constant lookup failed

Recoverable:
  - OptionalModuleFailure     : an optional term failed; raised only in strict mode,
                                otherwise recorded and zero-filled by the composer
"""


class OrbitDynamicsError(Exception):
  """
  Base class for all force model errors.
  """


class ConfigurationError(OrbitDynamicsError, ValueError):
  """
  Invalid configuration or input layout.
  """


class DegenerateGeometryError(OrbitDynamicsError, ArithmeticError):
  """
  A frame or element computation hit a near-zero norm.
  """


class MissingEphemerisDataError(OrbitDynamicsError, LookupError):
  """
  The ephemeris provider could not supply a position or constant.
  """


class OptionalModuleFailure(OrbitDynamicsError):
  """
  An optional force term failed and the composer runs in strict mode.
  """

  def __init__(
    self,
    name   : str,
    reason : str,
  ):
    super().__init__(f"Optional force '{name}' failed: {reason}")
    self.name   = name
    self.reason = reason


class UnmodeledJacobianWarning(UserWarning):
  """
  An active force contributes an approximate (zero) Jacobian to the STM.
  """
