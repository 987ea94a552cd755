"""Unit tests for settings, the YAML loader and store selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from headlines.config.loader import load_config
from headlines.config.settings import Settings
from headlines.main import build_components, build_store
from headlines.providers.store.mongo_document_store import MongoDocumentStore
from headlines.providers.store.sqlite_document_store import SQLiteDocumentStore
from headlines.services.record_extractor import ExtractorSelectors
from headlines.utils.errors import ConfigurationError


def _settings(**overrides) -> Settings:
    """Build a Settings instance that ignores any local .env file."""
    return Settings(_env_file=None, **overrides)


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("STORE_URL", "SOURCE_URL", "APP_PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = _settings()

        assert settings.store_url == "sqlite:///data/headlines.db"
        assert settings.app_port == 4000
        assert settings.ingest_await_writes is False

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORE_URL", "mongodb://db:27017/mongoHeadlines")
        monkeypatch.setenv("APP_PORT", "8080")

        settings = _settings()

        assert settings.store_url == "mongodb://db:27017/mongoHeadlines"
        assert settings.app_port == 8080
        assert settings.get_store_scheme() == "mongodb"


class TestLoadConfig:
    def test_returns_yaml_mapping_unchanged(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("extractor:\n  container: li.story\n", encoding="utf-8")

        config = load_config(str(path), settings=_settings(source_url="https://news.example.test/"))

        assert config == {"extractor": {"container": "li.story"}}

    def test_path_defaults_to_settings_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("extractor:\n  title: \":scope > h3\"\n", encoding="utf-8")

        config = load_config(settings=_settings(config_path=str(path)))

        assert config["extractor"]["title"] == ":scope > h3"

    def test_missing_file_yields_empty_config(self, tmp_path: Path) -> None:
        assert load_config(str(tmp_path / "absent.yaml"), settings=_settings()) == {}

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(path), settings=_settings())

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("extractor: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Cannot parse"):
            load_config(str(path), settings=_settings())

    def test_shipped_config_is_valid(self, project_root: Path) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=_settings())

        assert config["extractor"]["container"] == "article"


class TestBuildStore:
    def test_relative_sqlite_path(self) -> None:
        store = build_store(_settings(store_url="sqlite:///data/test.db"))

        assert isinstance(store, SQLiteDocumentStore)
        assert store._db_path == "data/test.db"

    def test_absolute_sqlite_path(self) -> None:
        store = build_store(_settings(store_url="sqlite:////var/lib/headlines.db"))

        assert store._db_path == "/var/lib/headlines.db"

    @pytest.mark.parametrize("url", ["mongodb://localhost:27017/mongoHeadlines", "mongodb+srv://cluster.example.test/db"])
    def test_mongo_urls(self, url: str) -> None:
        assert isinstance(build_store(_settings(store_url=url)), MongoDocumentStore)

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(ConfigurationError, match="postgres"):
            build_store(_settings(store_url="postgres://localhost/db"))

    def test_sqlite_without_path(self) -> None:
        with pytest.raises(ConfigurationError):
            build_store(_settings(store_url="sqlite:///"))


class TestBuildComponents:
    @pytest.mark.asyncio
    async def test_returns_expected_keys(self, mock_config) -> None:
        components = build_components(_settings(store_url="sqlite:///:memory:"), config=mock_config)
        try:
            assert set(components) == {
                "store",
                "fetcher",
                "extractor",
                "orchestrator",
                "article_service",
                "ingest_await_writes",
            }
            assert components["extractor"].selectors.container == "article"
        finally:
            await components["fetcher"].aclose()

    @pytest.mark.asyncio
    async def test_fetcher_owns_configured_client(self, mock_config) -> None:
        settings = _settings(
            store_url="sqlite:///:memory:",
            fetch_timeout=3.5,
            user_agent="headlines-test/1.0",
        )
        fetcher = build_components(settings, config=mock_config)["fetcher"]
        client = fetcher._client

        assert client.headers["User-Agent"] == "headlines-test/1.0"
        assert client.headers["Accept"].startswith("text/html")
        assert client.timeout.read == 3.5

        await fetcher.aclose()

        assert client.is_closed

    @pytest.mark.asyncio
    async def test_source_url_comes_from_settings_not_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("source:\n  url: https://yaml.example.test/\n", encoding="utf-8")
        settings = _settings(
            store_url="sqlite:///:memory:",
            source_url="https://env.example.test/",
            config_path=str(path),
        )

        components = build_components(settings)
        try:
            assert components["orchestrator"].source_url == "https://env.example.test/"
            assert components["extractor"].selectors == ExtractorSelectors()
        finally:
            await components["fetcher"].aclose()
