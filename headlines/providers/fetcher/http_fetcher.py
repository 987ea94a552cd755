"""HTTP markup fetcher using httpx.

Downloads the raw markup of the source page.  Every failure (timeout,
connection error, non-2xx status) is raised as ``TransportError`` and
ends the ingestion run; there is no retry.
"""

from __future__ import annotations

import httpx
import structlog

from headlines.interfaces.markup_fetcher import IMarkupFetcher
from headlines.utils.errors import TransportError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; headlines/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


class HttpMarkupFetcher(IMarkupFetcher):
    """Markup fetcher backed by a shared ``httpx.AsyncClient``.

    When no client is injected one is created (and owned) with a default
    timeout, browser-like headers and redirect following.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ) -> None:
        headers = dict(_DEFAULT_HEADERS)
        if user_agent:
            headers["User-Agent"] = user_agent
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> str:
        """GET *url* and return the body text."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise TransportError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
                url=url,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
                url=url,
            ) from exc

        logger.info(
            "markup_fetched",
            url=url,
            status=response.status_code,
            length=len(response.text),
        )
        return response.text

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def get_provider_name(self) -> str:
        return "http_fetcher"
