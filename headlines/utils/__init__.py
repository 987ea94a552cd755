"""Utility modules for Headlines.

- **errors** -- Exception hierarchy rooted at HeadlinesError; transport,
  store and configuration failures each raise their own subclass.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from headlines.utils.errors import (
    ConfigurationError,
    HeadlinesError,
    StoreError,
    TransportError,
)
from headlines.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "HeadlinesError",
    "StoreError",
    "TransportError",
    "configure_logging",
    "get_logger",
]
