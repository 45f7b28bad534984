"""
Configuration loading for pipepair.

Config extends DotDict with YAML loading on top of built-in defaults,
environment variable overrides and ${path} substitution.
"""

import copy
import os
import re
from pathlib import Path
from typing import Any

import yaml

from ..dot_dict import DotDict, DotDictPathNotFoundError
from ..exceptions import ConfigError
from .constants import DEFAULT_CONFIG_FILENAME, DEFAULTS, ENV_PREFIX, MAX_CONFIG_SIZE_BYTES


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base, recursing into nested dicts."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(fname_path: Path) -> dict[str, Any]:
    """Read one YAML mapping from disk."""
    try:
        file_size = os.path.getsize(fname_path)
    except OSError as e:
        raise ConfigError("cannot read config file", path=str(fname_path)) from e
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "config file too large", path=str(fname_path), size=file_size
        )

    with open(fname_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError("invalid YAML", path=str(fname_path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping", path=str(fname_path))
    return data


class Config(DotDict):
    """
    Configuration loaded from defaults, an optional YAML file and the environment.

    Precedence, lowest first: built-in defaults, the YAML file, environment
    variables. Values may reference other values with ${path} syntax.

    Environment Variable Override Format:
        PIPEPAIR_<SECTION>_<KEY>=value

    Examples:
        PIPEPAIR_LOGGING_LEVEL=debug
        PIPEPAIR_PAIRS_COUNT=4
        PIPEPAIR_BASIC_PACING_PRODUCER=0

    Example:
        config = Config("etc/pipepair.yaml")
        span = config.pairs.span
        delay = config.get("pairs.pacing.producer")
    """

    def __init__(
        self,
        fname: str | Path | None = None,
        enable_env_overrides: bool = True,
        env_prefix: str = ENV_PREFIX,
    ):
        """
        Initialize configuration.

        Args:
            fname: Path to a YAML configuration file, or None for defaults only
            enable_env_overrides: Whether to apply environment variable overrides
            env_prefix: Prefix for environment variables (default: 'PIPEPAIR_')

        Raises:
            ConfigError: If the file cannot be read or a reference is undefined
        """
        super().__init__()
        self._enable_env_overrides = enable_env_overrides
        self._env_prefix = env_prefix
        self._config_path: Path | None = Path(fname).resolve() if fname else None
        self._load()

    def source_file(self) -> Path | None:
        """The YAML file this config was loaded from, if any."""
        return self._config_path

    def _load(self) -> None:
        self.clear()
        config_data = copy.deepcopy(DEFAULTS)
        if self._config_path is not None:
            config_data = _deep_merge(config_data, _load_yaml(self._config_path))

        if self._enable_env_overrides:
            config_data = self._apply_env_overrides(config_data)

        self.set(**config_data)
        try:
            self.set(**self._resolve(self.to_dict()))
        except DotDictPathNotFoundError as e:
            raise ConfigError("undefined config reference", path=e.path) from e

    def reload(self) -> "Config":
        """Reload configuration from disk and the environment."""
        self._load()
        return self

    def _resolve(self, content: Any) -> Any:
        """
        Recursively resolve ${variable_name} references against this config.
        """
        if isinstance(content, dict):
            for k in list(content.keys()):
                content[k] = self._resolve(content[k])
        elif isinstance(content, list):
            return [self._resolve(v) for v in content]
        elif isinstance(content, str):
            return re.sub(r"\$\{([a-zA-Z0-9_.]+)\}", self._substitute_var, content)
        return content

    def _substitute_var(self, match: re.Match) -> str:
        var_name = match.group(1)
        if not self.has(var_name):
            raise DotDictPathNotFoundError(self, var_name)
        return str(self.get(var_name))

    def _apply_env_overrides(self, config_data: dict[str, Any]) -> dict[str, Any]:
        """
        Apply environment variable overrides to configuration data.

        PIPEPAIR_PAIRS_COUNT=4 sets config_data["pairs"]["count"] = 4.
        """
        for env_key, env_value in self._collect_env_vars().items():
            config_path = self._env_key_to_path(env_key)
            self._set_nested_value(config_data, config_path, env_value)
        return config_data

    def _collect_env_vars(self) -> dict[str, str]:
        """Collect all environment variables with the configured prefix."""
        return {k: v for k, v in os.environ.items() if k.startswith(self._env_prefix)}

    def _env_key_to_path(self, env_key: str) -> list[str]:
        """Convert 'PIPEPAIR_LOGGING_LEVEL' to ['logging', 'level']."""
        return env_key[len(self._env_prefix) :].lower().split("_")

    def _set_nested_value(self, data: dict, path: list[str], value: str) -> None:
        current = data
        for part in path[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[path[-1]] = self._convert_env_value(value)

    def _convert_env_value(
        self, value: str
    ) -> bool | int | float | str | list[Any] | None:
        """
        Convert environment variable string to appropriate type.

        Handles null/none, booleans, comma-separated lists, ints and floats;
        anything else stays a string.
        """
        if value.lower() in ("null", "none", ""):
            return None

        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        if "," in value:
            return [self._convert_env_value(v.strip()) for v in value.split(",")]

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def get_env_overrides(self) -> dict[str, Any]:
        """Environment overrides that apply, keyed by dotted path."""
        if not self._enable_env_overrides:
            return {}

        return {
            ".".join(self._env_key_to_path(k)): self._convert_env_value(v)
            for k, v in self._collect_env_vars().items()
        }


def find_config_file(etc_dir: str | Path | None = None, filename: str | None = None) -> Path | None:
    """
    Locate the configuration file.

    With etc_dir, looks only there. Otherwise looks for etc/<filename> in the
    current directory and its parents.

    Args:
        etc_dir: Directory holding the config file
        filename: Config filename (default: pipepair.yaml)

    Returns:
        Path to the file, or None if not found
    """
    filename = filename or DEFAULT_CONFIG_FILENAME
    if etc_dir is not None:
        candidate = Path(etc_dir) / filename
        return candidate if candidate.is_file() else None

    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / "etc" / filename
        if candidate.is_file():
            return candidate
    return None
