"""Custom exception hierarchy for Headlines.

All application exceptions inherit from :class:`HeadlinesError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "sqlite_store", "mongo_store", "http_fetcher") caused
the failure.

    HeadlinesError  (base -- catch-all for any headlines error)
    +-- TransportError       (fetching the source page failed)
    +-- StoreError           (any document-store create/find/update/delete failure)
    +-- ConfigurationError   (startup / unsupported store URL)

Two outcomes are deliberately *not* exceptions:

- a field missing from the source markup resolves to ``""`` / ``None``
  on the extracted record;
- a lookup by id with no match returns ``None``.
"""

from __future__ import annotations


class HeadlinesError(Exception):
    """Base exception for all Headlines errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which adapter triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for log
    output, e.g. ``[sqlite_store] database is locked``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class TransportError(HeadlinesError):
    """Raised when the source page cannot be fetched.

    Covers connection failures, timeouts and non-success status codes.
    Fatal to the current ingestion run: nothing is persisted.
    """

    def __init__(
        self,
        message: str = "Failed to fetch source markup",
        provider_name: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.url = url
        self.status_code = status_code


class StoreError(HeadlinesError):
    """Raised when a document-store operation fails.

    The original driver exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Document store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(HeadlinesError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
