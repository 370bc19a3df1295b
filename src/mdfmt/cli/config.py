#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the mdfmt CLI.

This module handles automatic discovery of configuration files, loading
configs from TOML, YAML or JSON, reading ``MDFMT_*`` environment variables
and merging the layers with proper priority handling.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from mdfmt.constants import CONFIG_FILENAMES, ENV_PREFIX, PYPROJECT_SECTION
from mdfmt.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

ALLOWED_KEYS = ("width", "wrap", "ordered_list", "exclude", "default_excludes")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_key(key: str) -> str:
    """Normalize a config key to snake_case.

    Examples
    --------
        >>> normalize_key("ordered-list")
        'ordered_list'
        >>> normalize_key("orderedList")
        'ordered_list'

    """
    return _CAMEL_BOUNDARY.sub("_", key.strip()).replace("-", "_").lower()


def normalize_config(config: Mapping[str, Any], source: str = "config") -> Dict[str, Any]:
    """Normalize keys and reject anything mdfmt does not understand.

    Parameters
    ----------
    config : mapping
        Raw configuration dictionary
    source : str
        Description of where the mapping came from, used in error messages

    Returns
    -------
    dict
        Configuration with snake_case keys

    Raises
    ------
    ConfigError
        If a key is unknown

    """
    result: Dict[str, Any] = {}
    for raw_key, value in config.items():
        key = normalize_key(str(raw_key))
        if key not in ALLOWED_KEYS:
            raise ConfigError(
                f"Unknown configuration key {raw_key!r} in {source}. Expected one of: {', '.join(ALLOWED_KEYS)}",
                parameter_name=str(raw_key),
                parameter_value=value,
            )
        if key == "exclude":
            value = _coerce_exclude(value, source)
        result[key] = value
    return result


def _coerce_exclude(value: Any, source: str) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(part) for part in value]
    raise ConfigError(
        f"Invalid exclude in {source}: {value!r}. Expected a list of strings",
        parameter_name="exclude",
        parameter_value=value,
    )


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.mdfmt]`` table from pyproject.toml.

    Returns
    -------
    dict
        The table, or an empty dict when the file has none

    Raises
    ------
    ConfigError
        If the file cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading pyproject.toml {pyproject_path}: {e}", original_error=e) from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict) or PYPROJECT_SECTION not in tool:
        return {}

    config = tool[PYPROJECT_SECTION]
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_SECTION}] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Walks up the directory tree from ``start_dir`` to the filesystem root,
    checking each directory for, in order, ``.mdfmt.toml``, ``.mdfmt.yaml``,
    ``.mdfmt.yml``, ``.mdfmt.json`` and a ``pyproject.toml`` with a
    ``[tool.mdfmt]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First config file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                logger.debug("Ignoring unreadable %s: %s", pyproject_path, e.message)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Parent directories are searched first, then the user's home directory
    for the dedicated ``.mdfmt.*`` files.
    """
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load and normalize configuration from a TOML, YAML or JSON file.

    ``pyproject.toml`` contributes only its ``[tool.mdfmt]`` table.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Normalized configuration

    Raises
    ------
    ConfigError
        If the file is missing, unreadable, malformed or has unknown keys

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        raw = _load_pyproject_section(config_path)
    elif ext == ".toml":
        raw = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        raw = _load_yaml_config(config_path)
    elif ext == ".json":
        raw = _load_json_config(config_path)
    else:
        raise ConfigError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")

    logger.debug("Loaded configuration from %s", config_path)
    return normalize_config(raw, str(config_path))


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading TOML config {config_path}: {e}", original_error=e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading JSON config {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ConfigError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ConfigError(f"Error reading YAML config {config_path}: {e}", original_error=e) from e

    # An empty file is an empty config
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def load_env_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read ``MDFMT_WIDTH``, ``MDFMT_WRAP``, ``MDFMT_ORDERED_LIST`` and ``MDFMT_EXCLUDE``.

    Empty variables are ignored. ``MDFMT_EXCLUDE`` is comma separated.
    Values are returned as strings; validation happens when the options
    object is built.
    """
    env = os.environ if environ is None else environ
    config: Dict[str, Any] = {}
    for key in ("width", "wrap", "ordered_list"):
        value = env.get(f"{ENV_PREFIX}{key.upper()}", "").strip()
        if value:
            config[key] = value

    exclude = env.get(f"{ENV_PREFIX}EXCLUDE", "").strip()
    if exclude:
        config["exclude"] = _coerce_exclude(exclude, f"{ENV_PREFIX}EXCLUDE")
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries; ``override`` wins.

    Examples
    --------
        >>> merge_configs({"width": 80, "wrap": "never"}, {"width": 100})
        {'width': 100, 'wrap': 'never'}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None,
    env_var_path: Optional[str] = None,
    discover: bool = True,
) -> Dict[str, Any]:
    """Load the configuration file layer.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config``)
    2. ``MDFMT_CONFIG`` environment variable
    3. Auto-discovered config file, unless ``discover`` is False

    Returns
    -------
    dict
        Normalized configuration (empty when no file applies)

    Raises
    ------
    ConfigError
        If a selected config file cannot be loaded

    """
    if explicit_path:
        return load_config_file(explicit_path)

    if env_var_path:
        return load_config_file(env_var_path)

    if not discover:
        return {}

    discovered = discover_config_file()
    if discovered:
        return load_config_file(discovered)
    return {}
