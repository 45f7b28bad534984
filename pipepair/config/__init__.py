"""
Configuration package.

This module provides:
- Config class for loading YAML configuration files with env overrides
- Typed run settings (BasicSettings, PairsSettings, Pacing) read from a Config
"""

from .config import Config, find_config_file
from .constants import DEFAULT_CONFIG_FILENAME, DEFAULTS, ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .settings import NO_PACING, BasicSettings, Pacing, PairsSettings

__all__ = [
    "Config",
    "find_config_file",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULTS",
    "ENV_PREFIX",
    "MAX_CONFIG_SIZE_BYTES",
    "BasicSettings",
    "PairsSettings",
    "Pacing",
    "NO_PACING",
]
