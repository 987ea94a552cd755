"""Configuration module -- exports Settings and load_config."""

from headlines.config.loader import load_config
from headlines.config.settings import Settings

__all__ = ["Settings", "load_config"]
