"""
Configuration Loader

Loads YAML configuration files from the project's ``configs`` directory.
An environment-specific file (``<name>_<environment>.yaml``) takes
precedence over the default file (``<name>.yaml``).
"""

import os
import logging

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file is malformed or incomplete."""


def get_config_dir():
    """Return the default ``configs`` directory at the project root."""
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    return os.path.join(project_root, "configs")


def load_config(name, environment="development", config_dir=None):
    """
    Load configuration for `name` in the given environment.

    Args:
        name (str): Base name of the configuration file
        environment (str): Environment suffix ('development', 'test', 'production')
        config_dir (str, optional): Directory to search; defaults to ``configs/``

    Returns:
        dict: Parsed configuration, or an empty dict if no file exists

    Raises:
        ConfigError: If a file exists but cannot be parsed into a mapping
    """
    config_dir = config_dir or get_config_dir()

    candidate_paths = [
        os.path.join(config_dir, f"{name}_{environment}.yaml"),
        os.path.join(config_dir, f"{name}.yaml"),
    ]

    for config_path in candidate_paths:
        if not os.path.exists(config_path):
            continue

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config in {config_path} must be a mapping")

        logger.info(f"Loaded {name} config from {config_path}")
        return config

    logger.warning(f"No {name} configuration found", extra={
        "metrics": {"config_dir": config_dir, "environment": environment}
    })
    return {}
