"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def load_config(name: str) -> dict[str, Any]:
    """Load a YAML configuration file from the config directory.

    Args:
        name: Config file name without extension (e.g., 'yahoo')

    Returns:
        Parsed configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
    """
    return load_config_file(get_config_path(name))


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load a YAML configuration file from an explicit path."""
    if not config_path.exists():
        sample_path = CONFIG_DIR / f"{config_path.stem}.sample.yaml"
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please copy {sample_path} to {config_path} and adjust it."
        )

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_config_path(name: str) -> Path:
    """Get the path to a configuration file."""
    return CONFIG_DIR / f"{name}.yaml"
