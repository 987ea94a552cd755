"""Record extractor -- turns source markup into candidate articles.

Every element matching the container selector becomes one
``ArticleCandidate``.  Within a container each field is read on its own:

  title    text of the heading element(s)
  summary  text of the summary element(s)
  link     ``href`` of the heading's anchor

A missing sub-element only blanks that field (``""`` for text, ``None``
for the link); the container is never dropped.  Text has newline runs
collapsed to a single space and surrounding whitespace stripped.

Selectors are CSS (soupsieve) evaluated relative to the container, so
``:scope > h2`` means "an h2 that is a direct child of the container".
They are configurable through the ``extractor`` section of
``config/config.yaml``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, fields
from typing import Any

import soupsieve
import structlog
from bs4 import BeautifulSoup, Tag

from headlines.models.article import ArticleCandidate
from headlines.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

_NEWLINE_RUN = re.compile(r"\s*\n\s*")


def normalize_text(text: str) -> str:
    """Collapse embedded newlines to single spaces and strip the ends."""
    return _NEWLINE_RUN.sub(" ", text).strip()


@dataclass(frozen=True)
class ExtractorSelectors:
    """CSS selectors locating containers and their sub-elements."""

    container: str = "article"
    title: str = ":scope > h2"
    summary: str = ":scope > .summary"
    link: str = ":scope > h2 > a"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ExtractorSelectors:
        """Build selectors from the ``extractor`` section of *config*.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        section = config.get("extractor") or {}
        known = {f.name for f in fields(cls)}
        return cls(**{key: str(value) for key, value in section.items() if key in known})


class RecordExtractor:
    """Parse markup into ``ArticleCandidate`` records using CSS selectors."""

    def __init__(self, selectors: ExtractorSelectors | None = None) -> None:
        self._selectors = selectors or ExtractorSelectors()
        for field in fields(self._selectors):
            selector = getattr(self._selectors, field.name)
            try:
                soupsieve.compile(selector)
            except soupsieve.SelectorSyntaxError as exc:
                raise ConfigurationError(
                    message=f"Invalid {field.name} selector {selector!r}: {exc}",
                ) from exc

    @property
    def selectors(self) -> ExtractorSelectors:
        return self._selectors

    def extract(self, markup: str) -> Iterator[ArticleCandidate]:
        """Yield one candidate per container, in document order.

        The returned generator is single-use.  Parsing happens on the
        first ``next()``.
        """
        soup = BeautifulSoup(markup, "html.parser")
        containers = soup.select(self._selectors.container)
        logger.debug("containers_found", count=len(containers), selector=self._selectors.container)
        for container in containers:
            yield self._read_container(container)

    def _read_container(self, container: Tag) -> ArticleCandidate:
        return ArticleCandidate(
            title=self._text_of(container, self._selectors.title),
            summary=self._text_of(container, self._selectors.summary),
            link=self._href_of(container, self._selectors.link),
        )

    @staticmethod
    def _text_of(container: Tag, selector: str) -> str:
        # Multiple matches are concatenated, mirroring a jQuery-style .text().
        return normalize_text("".join(el.get_text() for el in container.select(selector)))

    @staticmethod
    def _href_of(container: Tag, selector: str) -> str | None:
        anchor = container.select_one(selector)
        if anchor is None:
            return None
        href = anchor.get("href")
        if not isinstance(href, str):
            return None
        return href.strip() or None
