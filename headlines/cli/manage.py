# =============================================================================
# headlines/cli/manage.py -- Command-line management of the article store
# =============================================================================
#
# Runs the same services as the web app without starting a server:
#
#   fetch  -- one ingestion run; waits for every article write to finish
#   list   -- print saved or unsaved articles as JSON
#   clear  -- delete every article
#
# Configuration comes from the same Settings / config.yaml as the server,
# so STORE_URL and SOURCE_URL apply here too.
#
# Usage examples:
#   python -m headlines.cli fetch
#   python -m headlines.cli list --saved
#   STORE_URL=mongodb://localhost:27017/mongoHeadlines python -m headlines.cli clear
# =============================================================================

"""Standalone CLI for ingesting and inspecting articles.

Usage::

    python -m headlines.cli fetch
    python -m headlines.cli list [--saved | --unsaved]
    python -m headlines.cli clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from headlines.config.settings import Settings
from headlines.utils.errors import HeadlinesError

_Handler = Callable[[argparse.Namespace, dict[str, Any]], Awaitable[int]]


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_fetch(args: argparse.Namespace, components: dict[str, Any]) -> int:
    """Run one ingestion and wait for all of its writes."""
    orchestrator = components["orchestrator"]
    print(f"Fetching {orchestrator.source_url}")

    run = await orchestrator.run(wait=True)

    print("\nIngestion complete:")
    print(f"  Articles found:  {run.launched}")
    print(f"  Articles stored: {len(run.articles)}")
    return 0


async def _handle_list(args: argparse.Namespace, components: dict[str, Any]) -> int:
    """Print saved or unsaved articles as a JSON array."""
    service = components["article_service"]
    articles = await (service.list_saved() if args.saved else service.list_unsaved())
    print(json.dumps([a.model_dump(by_alias=True) for a in articles], indent=2))
    return 0


async def _handle_clear(args: argparse.Namespace, components: dict[str, Any]) -> int:
    """Delete every article."""
    removed = await components["article_service"].clear_all()
    if removed is None:
        print("Error: clearing articles failed (see log)", file=sys.stderr)
        return 1
    print(f"Deleted {removed} articles")
    return 0


_HANDLERS: dict[str, _Handler] = {
    "fetch": _handle_fetch,
    "list": _handle_list,
    "clear": _handle_clear,
}


async def _run(handler: _Handler, args: argparse.Namespace, app_settings: Settings) -> int:
    """Build components, connect the store, run *handler*, and clean up."""
    # Deferred: importing the app module configures logging.
    from headlines.main import build_components

    try:
        components = build_components(app_settings)
    except HeadlinesError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    store = components["store"]
    try:
        await store.connect()
        return await handler(args, components)
    except HeadlinesError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await components["orchestrator"].drain()
        await store.close()
        await components["fetcher"].aclose()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m headlines.cli",
        description="Ingest and manage scraped news articles.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("fetch", help="Scrape the source page and store its articles")

    list_parser = subparsers.add_parser("list", help="Print articles as JSON")
    which = list_parser.add_mutually_exclusive_group()
    which.add_argument(
        "--saved",
        action="store_true",
        help="List saved articles",
    )
    which.add_argument(
        "--unsaved",
        dest="saved",
        action="store_false",
        help="List unsaved articles (the default)",
    )
    list_parser.set_defaults(saved=False)

    subparsers.add_parser("clear", help="Delete every article")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse *argv*, dispatch, and exit with the handler's code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    exit_code = asyncio.run(_run(_HANDLERS[args.command], args, app_settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
