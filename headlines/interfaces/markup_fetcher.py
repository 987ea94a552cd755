"""Abstract base class for markup fetchers.

Defines the contract for retrieving the raw markup of the source page.
The concrete implementation is HttpMarkupFetcher
(headlines/providers/fetcher/http_fetcher.py).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IMarkupFetcher(ABC):
    """Contract for services that download a page's raw markup."""

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Return the full response body of *url* as text.

        Raises
        ------
        headlines.utils.errors.TransportError
            On any transport failure, timeout, or non-success status.
            No retry is attempted.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this fetcher."""

    async def aclose(self) -> None:
        """Release any connections held by the fetcher.  No-op by default."""
