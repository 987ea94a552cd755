"""Unit tests for the headlines.cli.manage command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from headlines.cli.manage import _build_parser, main
from headlines.models.article import Article
from headlines.utils.errors import ConfigurationError, TransportError


def _components(**overrides) -> dict:
    """Build a mocked component dict shaped like ``build_components``."""
    store = MagicMock()
    store.connect = AsyncMock()
    store.close = AsyncMock()

    orchestrator = MagicMock()
    orchestrator.source_url = "https://news.example.test/"
    orchestrator.drain = AsyncMock()
    run = MagicMock(launched=2, articles=[MagicMock(), MagicMock()])
    orchestrator.run = AsyncMock(return_value=run)

    service = MagicMock()
    service.list_saved = AsyncMock(return_value=[Article(id="a1", title="Saved one", saved=True)])
    service.list_unsaved = AsyncMock(return_value=[])
    service.clear_all = AsyncMock(return_value=5)

    fetcher = MagicMock()
    fetcher.aclose = AsyncMock()

    components = {
        "store": store,
        "orchestrator": orchestrator,
        "article_service": service,
        "fetcher": fetcher,
    }
    components.update(overrides)
    return components


def _run_main(argv: list[str], components: dict) -> int:
    with patch("headlines.main.build_components", return_value=components):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
    return exc_info.value.code


class TestParser:
    def test_list_defaults_to_unsaved(self) -> None:
        args = _build_parser().parse_args(["list"])

        assert args.command == "list"
        assert args.saved is False

    def test_no_command_prints_help_and_exits_1(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "fetch" in capsys.readouterr().out


class TestCommands:
    def test_fetch_waits_for_writes(self, capsys) -> None:
        components = _components()

        code = _run_main(["fetch"], components)

        assert code == 0
        components["orchestrator"].run.assert_awaited_once_with(wait=True)
        components["store"].connect.assert_awaited_once()
        components["store"].close.assert_awaited_once()
        components["fetcher"].aclose.assert_awaited_once()
        assert "Articles stored: 2" in capsys.readouterr().out

    def test_fetch_failure_exits_1(self, capsys) -> None:
        components = _components()
        components["orchestrator"].run.side_effect = TransportError(
            message="HTTP 500 for https://news.example.test/",
            provider_name="http_fetcher",
        )

        code = _run_main(["fetch"], components)

        assert code == 1
        assert "[http_fetcher] HTTP 500" in capsys.readouterr().err
        components["store"].close.assert_awaited_once()

    def test_list_saved_prints_json(self, capsys) -> None:
        components = _components()

        code = _run_main(["list", "--saved"], components)

        assert code == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed == [
            {"_id": "a1", "title": "Saved one", "summary": "", "link": None, "saved": True, "note": None}
        ]
        components["article_service"].list_unsaved.assert_not_awaited()

    def test_clear_reports_count(self, capsys) -> None:
        code = _run_main(["clear"], _components())

        assert code == 0
        assert "Deleted 5 articles" in capsys.readouterr().out

    def test_clear_failure_exits_1(self) -> None:
        components = _components()
        components["article_service"].clear_all.return_value = None

        assert _run_main(["clear"], components) == 1

    def test_list_unsaved_flag(self) -> None:
        components = _components()

        assert _run_main(["list", "--unsaved"], components) == 0
        components["article_service"].list_unsaved.assert_awaited_once()

    def test_bad_store_url_exits_1(self, capsys) -> None:
        with patch("headlines.main.build_components", side_effect=ConfigurationError(message="Unsupported store URL scheme 'ftp'")):
            with pytest.raises(SystemExit) as exc_info:
                main(["list"])

        assert exc_info.value.code == 1
        assert "Unsupported store URL" in capsys.readouterr().err
