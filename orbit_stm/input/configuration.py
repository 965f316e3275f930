"""
Force Model Configuration
=========================

Named flags and parameters selecting the perturbations of the force model,
validated as a unit before any force is evaluated.

Example YAML:
-------------
  force_model:
    drag         : true
    srp          : true
    third_body   : true
    j2           : false
    area         : 0.05      # [m²]
    mass         : 2.0       # [kg]
    cd           : 2.2
    c_srp        : 1.3
    third_bodies : [SUN, MOON]
"""
import numbers
import warnings
import yaml

from dataclasses import dataclass, fields
from pathlib     import Path
from typing      import Optional, Sequence, Union

from orbit_stm.model.errors import ConfigurationError


@dataclass(frozen=True)
class ForceModelConfig:
  """
  Selection of optional forces plus the parameters they need.

  Attributes:
  -----------
    drag : bool
      Include atmospheric drag.
    srp : bool
      Include solar radiation pressure.
    third_body : bool
      Include third-body gravity of third_bodies.
    j2 : bool
      Include central-body J2 oblateness.
    area : float, optional
      Cross-sectional area [m²]. Required by drag and srp.
    mass : float, optional
      Object mass [kg]. Required by drag and srp.
    cd : float
      Drag coefficient.
    c_srp : float
      Radiation pressure coefficient.
    third_bodies : tuple of str
      Perturbing body names. Required by third_body.
    central_body : str
      Central body name.
    frame : str
      Inertial reference frame of the state and ephemeris.
    strict_optional : bool
      Raise OptionalModuleFailure instead of zero-filling a failed optional term.
  """
  drag            : bool            = False
  srp             : bool            = False
  third_body      : bool            = False
  j2              : bool            = False
  area            : Optional[float] = None
  mass            : Optional[float] = None
  cd              : float           = 2.2
  c_srp           : float           = 1.0
  third_bodies    : tuple           = ()
  central_body    : str             = 'EARTH'
  frame           : str             = 'J2000'
  strict_optional : bool            = False

  def __post_init__(self):
    if isinstance(self.third_bodies, str):
      raise ConfigurationError(
        f"third_bodies must be a sequence of body names, received the string '{self.third_bodies}'"
      )
    if not all(isinstance(body, str) for body in self.third_bodies):
      raise ConfigurationError(f"third_bodies entries must be body names, received {self.third_bodies!r}")
    if not isinstance(self.central_body, str):
      raise ConfigurationError(f"central_body must be a body name, received {self.central_body!r}")

    # Normalize body names so lookups and comparisons are case-insensitive
    object.__setattr__(self, 'third_bodies', tuple(body.upper() for body in self.third_bodies))
    object.__setattr__(self, 'central_body', self.central_body.upper())

  @property
  def enabled_forces(self) -> tuple:
    """
    Names of the enabled optional forces.
    """
    flags = (
      ('drag',       self.drag),
      ('srp',        self.srp),
      ('third_body', self.third_body),
      ('j2',         self.j2),
    )
    return tuple(name for name, enabled in flags if enabled)

  def validate(self) -> 'ForceModelConfig':
    """
    Check flags and parameters together.

    Output:
    -------
      config : ForceModelConfig
        self, to allow chaining.

    Raises:
    -------
      ConfigurationError
        If an enabled force lacks a required parameter or a field has the wrong type.
    """
    for name in ('drag', 'srp', 'third_body', 'j2', 'strict_optional'):
      value = getattr(self, name)
      if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be true or false, received {value!r}")

    for name in ('area', 'mass', 'cd', 'c_srp'):
      value = getattr(self, name)
      if value is None and name in ('area', 'mass'):
        continue
      if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, received {value!r}")

    if self.drag or self.srp:
      needed_by = ' and '.join(name for name in ('drag', 'srp') if getattr(self, name))
      if self.area is None or not self.area > 0:
        raise ConfigurationError(f"{needed_by} enabled but area is {self.area}; a positive area [m²] is required")
      if self.mass is None or not self.mass > 0:
        raise ConfigurationError(f"{needed_by} enabled but mass is {self.mass}; a positive mass [kg] is required")

    if self.drag and not self.cd > 0:
      raise ConfigurationError(f"drag enabled but cd is {self.cd}; a positive drag coefficient is required")

    if self.srp and not self.c_srp >= 0:
      raise ConfigurationError(f"c_srp must be non-negative, received {self.c_srp}")

    if self.third_body:
      if not self.third_bodies:
        raise ConfigurationError("third_body enabled but third_bodies is empty")
      if self.central_body in self.third_bodies:
        raise ConfigurationError(f"Central body {self.central_body} cannot also be a third body")
      if len(set(self.third_bodies)) != len(self.third_bodies):
        raise ConfigurationError(f"Duplicate entries in third_bodies: {self.third_bodies}")

    return self

  @classmethod
  def from_flags(
    cls,
    flags  : Sequence[bool],
    area   : Optional[float]  = None,
    mass   : Optional[float]  = None,
    bodies : Sequence[str]    = (),
    **kwargs,
  ) -> 'ForceModelConfig':
    """
    Build a configuration from a positional flag array.

    Input:
    ------
      flags : sequence of bool
        [drag, srp, third_body, j2]. The 3-element form [drag, srp, third_body]
        is accepted with j2 disabled.
      area : float, optional
        Cross-sectional area [m²].
      mass : float, optional
        Object mass [kg].
      bodies : sequence of str
        Perturbing body names.
      **kwargs
        Remaining ForceModelConfig fields.

    Output:
    -------
      config : ForceModelConfig
        Validated configuration.
    """
    warnings.warn(
      "Positional flag arrays are deprecated; construct ForceModelConfig with named flags.",
      DeprecationWarning,
      stacklevel=2,
    )

    flags = [bool(flag) for flag in flags]
    if len(flags) == 3:
      warnings.warn(
        "Three-element flag array interpreted as [drag, srp, third_body] with j2 disabled.",
        UserWarning,
        stacklevel=2,
      )
      flags.append(False)
    elif len(flags) != 4:
      raise ConfigurationError(f"Flag array must have 4 entries [drag, srp, third_body, j2], received {len(flags)}")

    drag, srp, third_body, j2 = flags
    return cls(
      drag         = drag,
      srp          = srp,
      third_body   = third_body,
      j2           = j2,
      area         = area,
      mass         = mass,
      third_bodies = tuple(bodies),
      **kwargs,
    ).validate()


# Alternate spellings accepted in configuration files
_KEY_ALIASES = {
  'include_drag'       : 'drag',
  'include_srp'        : 'srp',
  'include_third_body' : 'third_body',
  'include_j2'         : 'j2',
}


def build_force_model_config(
  values : dict,
) -> ForceModelConfig:
  """
  Build and validate a configuration from a plain mapping.

  Input:
  ------
    values : dict
      Field names (or their include_* aliases) to values.

  Output:
  -------
    config : ForceModelConfig
      Validated configuration.

  Raises:
  -------
    ConfigurationError
      On unknown keys or invalid combinations.
  """
  if not isinstance(values, dict):
    raise ConfigurationError(f"force_model must be a mapping, received {type(values).__name__}")

  known  = {f.name for f in fields(ForceModelConfig)}
  kwargs = {}
  for key, value in values.items():
    name = _KEY_ALIASES.get(key, key)
    if name not in known:
      raise ConfigurationError(f"Unknown force_model key: {key}")
    if name in kwargs:
      raise ConfigurationError(f"force_model key given twice: {name}")
    kwargs[name] = value

  if 'third_bodies' in kwargs:
    bodies = kwargs['third_bodies'] or ()
    if isinstance(bodies, str):
      bodies = bodies.split()
    kwargs['third_bodies'] = tuple(bodies)

  return ForceModelConfig(**kwargs).validate()


def load_force_model_config(
  filepath : Union[str, Path],
) -> ForceModelConfig:
  """
  Load a force model configuration from a YAML file.

  Input:
  ------
    filepath : str | Path
      YAML file with a top-level 'force_model' mapping.

  Output:
  -------
    config : ForceModelConfig
      Validated configuration.

  Raises:
  -------
    FileNotFoundError
      If the file does not exist.
    ConfigurationError
      If the file lacks a force_model mapping or holds invalid values.
  """
  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"Configuration file not found: {filepath}")

  with open(filepath, 'r') as f:
    document = yaml.safe_load(f) or {}

  if not isinstance(document, dict) or 'force_model' not in document:
    raise ConfigurationError(f"No 'force_model' section in {filepath}")

  return build_force_model_config(document['force_model'])
