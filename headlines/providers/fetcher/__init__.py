"""Markup fetcher providers (HttpMarkupFetcher)."""

from headlines.providers.fetcher.http_fetcher import HttpMarkupFetcher

__all__ = ["HttpMarkupFetcher"]
