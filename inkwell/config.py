"""Project configuration for Inkwell.

Key functions:
- load_config: Loads configuration from inkwell.yaml with defaults applied.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .utils import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "inkwell.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": "content",
    "strict": False,
    "extensions": list(DEFAULT_EXTENSIONS),
    "default_menu": "main",
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from inkwell.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping, or holds
            a value of the wrong type.
    """
    config_path = project_root / CONFIG_FILENAME
    config = dict(DEFAULT_CONFIG)
    if not config_path.exists():
        logger.debug("No %s in %s, using defaults", CONFIG_FILENAME, project_root)
        return config
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(config_path, f"invalid YAML: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(config_path, "configuration must be a mapping")
    unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(unknown))
    config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
    _validate(config, config_path)
    return config


def _validate(config: dict[str, Any], config_path: Path) -> None:
    if not isinstance(config["strict"], bool):
        raise ConfigError(config_path, "'strict' must be true or false")
    extensions = config["extensions"]
    if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
        raise ConfigError(config_path, "'extensions' must be a list of strings")
    for key in ("content_dir", "default_menu"):
        if not isinstance(config[key], str):
            raise ConfigError(config_path, f"'{key}' must be a string")


def content_dir_for(project_root: Path, config: dict[str, Any]) -> Path:
    """Resolve the configured content directory against the project root.

    Args:
        project_root: Root directory of the project.
        config: Loaded configuration.

    Returns:
        Absolute path of the content directory.
    """
    return (project_root / str(config.get("content_dir", "content"))).resolve()
