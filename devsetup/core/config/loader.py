"""
Configuration loader — reads the optional settings file into a Settings model.

Resolution order:
    explicit path (--config)  >  DEVSETUP_CONFIG  >  ~/.config/devsetup/config.yml

When none of those exists the built-in defaults are used, which is the
normal case.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from devsetup.core.errors import ConfigError
from devsetup.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVSETUP_CONFIG"
DEFAULT_CONFIG_FILE = Path("~/.config/devsetup/config.yml")


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Pick the settings file to read, or None for built-in defaults.

    An explicit path or the env var is returned even if it does not
    exist, so that ``load_settings`` can report it. The default location
    is only used when present.
    """
    if explicit is not None:
        return explicit

    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()

    default = DEFAULT_CONFIG_FILE.expanduser()
    if default.is_file():
        return default

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Settings file to read. None means built-in defaults.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        logger.debug("No settings file, using defaults")
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
