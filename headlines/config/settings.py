"""Application settings loaded from environment variables via pydantic-settings.

Values come from (highest priority first):

  1. Environment variables, e.g. ``STORE_URL=mongodb://db:27017/mongoHeadlines``
  2. A ``.env`` file in the working directory
  3. The defaults declared below

Field names map to upper-cased environment variable names.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Headlines application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Document store ===
    # sqlite:///relative/path.db, sqlite:////absolute/path.db,
    # mongodb://host:port/database or mongodb+srv://...
    store_url: str = "sqlite:///data/headlines.db"

    # === Ingestion source ===
    source_url: str = "https://www.nytimes.com/"
    fetch_timeout: float = 10.0
    user_agent: str = "Mozilla/5.0 (compatible; headlines/0.1)"
    # When True, /api/fetch waits for every article write before responding.
    ingest_await_writes: bool = False

    # === App Config ===
    config_path: str = "config/config.yaml"
    app_host: str = "0.0.0.0"
    app_port: int = 4000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_store_scheme(self) -> str:
        """Return the scheme of ``store_url`` (``sqlite``, ``mongodb``, ...)."""
        scheme, _, _ = self.store_url.partition("://")
        return scheme.lower()
