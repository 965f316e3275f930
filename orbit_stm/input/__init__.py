"""
Input Package
=============

Force model configuration, built in code or loaded from YAML.
"""

from .configuration import ForceModelConfig, build_force_model_config, load_force_model_config

__all__ = ['ForceModelConfig', 'build_force_model_config', 'load_force_model_config']
