"""Configuration loading utilities.

Supports YAML and JSON configuration files with schema validation. Values
given on the command line take precedence over the file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from container_probe.core.errors import ConfigurationError
from container_probe.core.schemas import ProbeConfig


def read_config_file(path: Path | str) -> dict[str, Any]:
    """Read a raw configuration mapping from a YAML or JSON file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def load_config(path: Path | str) -> ProbeConfig:
    """Load and validate a probe configuration file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        pydantic.ValidationError: If config is invalid
    """
    return ProbeConfig.model_validate(read_config_file(path))


def build_config(
    config_path: Path | None = None, overrides: dict[str, Any] | None = None
) -> ProbeConfig:
    """Merge an optional config file with CLI overrides and validate.

    Overrides whose value is None are ignored so that unset CLI options never
    mask values from the file.

    Raises:
        ConfigurationError: If the merged configuration is missing or invalid
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        try:
            data = read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(str(e)) from e

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    if not data.get("container"):
        raise ConfigurationError("--container is required")

    try:
        return ProbeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
