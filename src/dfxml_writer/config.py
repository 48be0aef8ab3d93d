"""Configuration management for the DFXML recorder."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .constants import CONFIG_FILENAME, DEFAULT_DTD_ROOT, ENV_DTD_ROOT, ENV_TEMPFILE_TEMPLATE

DEFAULT_CONFIG: Dict[str, Any] = {
    "make_dtd": False,
    "tempfile_template": None,
    "dtd_root": DEFAULT_DTD_ROOT,
    "verbose": False,
}

_CONFIG_TYPES = {
    "make_dtd": (bool,),
    "tempfile_template": (str, type(None)),
    "dtd_root": (str,),
    "verbose": (bool,),
}


def validate_config(config: Dict) -> bool:
    """Basic structural check for configuration.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if every known key has a value of the right type, False otherwise
    """
    if not isinstance(config, dict):
        return False

    for key, allowed in _CONFIG_TYPES.items():
        if key in config and not isinstance(config[key], allowed):
            return False

    dtd_root = config.get("dtd_root")
    if isinstance(dtd_root, str) and (not dtd_root or " " in dtd_root):
        return False

    return True


def load_env_file(start_path: Path) -> None:
    """Load a .env file from the project directory if it exists."""
    env_file = start_path / ".env"
    if env_file.exists():
        load_dotenv(env_file)


def load_config(root_path: Path, logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """Load configuration from the project directory and the environment.

    Values come from DEFAULT_CONFIG, then the JSON config file, then the
    DFXML_* environment variables (a .env file in root_path is honoured).

    Args:
        root_path: Directory to look for config.
        logger: Optional logger instance.

    Returns:
        The merged configuration dictionary.
    """
    logger = logger or logging.getLogger(__name__)
    config_path = root_path / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)

            if not validate_config(loaded_config):
                logger.warning("Config file has invalid structure, using defaults")
            else:
                config.update(loaded_config)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read config: {e}")

    load_env_file(root_path)
    if os.getenv(ENV_TEMPFILE_TEMPLATE):
        config["tempfile_template"] = os.environ[ENV_TEMPFILE_TEMPLATE]
    if os.getenv(ENV_DTD_ROOT):
        config["dtd_root"] = os.environ[ENV_DTD_ROOT]

    return config
