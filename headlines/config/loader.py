"""YAML configuration loader.

Configuration is split by concern:

  config/config.yaml  -- static, repo-checked structure (extractor selectors)
  Settings            -- deployment values from ``.env`` and environment
                         variables (store URL, source URL, host, port)

``load_config`` only reads the YAML side; the file location itself comes
from ``Settings.config_path``.
"""

from pathlib import Path

import yaml

from headlines.config.settings import Settings
from headlines.utils.errors import ConfigurationError


def load_config(path: str | None = None, settings: Settings | None = None) -> dict:
    """Load the YAML configuration file.

    Args:
        path: Path to the YAML configuration file.  Defaults to
              ``settings.config_path``.
        settings: Settings instance supplying the default path.  A fresh
                  one is built if omitted.

    Returns:
        The parsed mapping, or an empty dict if the file does not exist.

    Raises:
        ConfigurationError: If the file cannot be parsed or is not a mapping.
    """
    if path is None:
        path = (settings or Settings()).config_path
    config_path = Path(path)
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Cannot parse {config_path}: {exc}",
            ) from exc
    if not isinstance(config, dict):
        raise ConfigurationError(
            message=f"{config_path} must contain a mapping, got {type(config).__name__}",
        )
    return config
