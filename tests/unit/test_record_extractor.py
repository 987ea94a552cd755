"""Unit tests for headlines.services.record_extractor."""

from __future__ import annotations

import pytest

from headlines.models.article import ArticleCandidate
from headlines.services.record_extractor import (
    ExtractorSelectors,
    RecordExtractor,
    normalize_text,
)
from headlines.utils.errors import ConfigurationError
from tests.conftest import EMPTY_MARKUP, SAMPLE_MARKUP, THREE_ARTICLE_MARKUP


class TestNormalizeText:
    def test_newline_becomes_single_space(self) -> None:
        assert normalize_text("Stocks rose\ntoday") == "Stocks rose today"

    def test_indented_newline_runs_collapse(self) -> None:
        assert normalize_text("\n   Markets\n\n      rally  \n") == "Markets rally"

    def test_inner_spaces_without_newline_are_kept(self) -> None:
        assert normalize_text("  a  b  ") == "a  b"

    def test_empty(self) -> None:
        assert normalize_text("") == ""


class TestExtract:
    def test_single_container(self) -> None:
        records = list(RecordExtractor().extract(SAMPLE_MARKUP))

        assert records == [
            ArticleCandidate(title="Markets rally", summary="Stocks rose today", link="/2024/markets"),
        ]

    def test_document_order_and_missing_fields(self) -> None:
        records = list(RecordExtractor().extract(THREE_ARTICLE_MARKUP))

        assert [r.title for r in records] == ["First story", "Second story without a link", "Third story"]
        assert records[1].link is None
        assert records[1].summary == "Second summary"
        assert records[2].summary == ""
        assert records[2].link == "/three"

    def test_zero_containers(self) -> None:
        assert list(RecordExtractor().extract(EMPTY_MARKUP)) == []

    def test_empty_container_keeps_record(self) -> None:
        records = list(RecordExtractor().extract("<article></article>"))

        assert records == [ArticleCandidate(title="", summary="", link=None)]

    def test_anchor_without_href(self) -> None:
        markup = "<article><h2><a>No target</a></h2></article>"

        [record] = RecordExtractor().extract(markup)

        assert record.title == "No target"
        assert record.link is None

    def test_blank_href_is_absent(self) -> None:
        markup = '<article><h2><a href="  ">Blank</a></h2></article>'

        [record] = RecordExtractor().extract(markup)

        assert record.link is None

    def test_nested_heading_is_not_the_container_heading(self) -> None:
        markup = (
            "<article><div><h2><a href='/inner'>Inner</a></h2></div>"
            "<p class='summary'>Outer summary</p></article>"
        )

        [record] = RecordExtractor().extract(markup)

        assert record.title == ""
        assert record.link is None
        assert record.summary == "Outer summary"

    def test_multiple_summary_elements_are_concatenated(self) -> None:
        markup = (
            "<article><h2>T</h2><p class='summary'>one</p>"
            "<p class='summary'>two</p></article>"
        )

        [record] = RecordExtractor().extract(markup)

        assert record.summary == "onetwo"

    def test_generator_is_single_use(self) -> None:
        records = RecordExtractor().extract(THREE_ARTICLE_MARKUP)

        assert len(list(records)) == 3
        assert list(records) == []


class TestSelectors:
    def test_custom_selectors(self) -> None:
        markup = (
            "<div class='story'><h3><a href='/x'>Custom</a></h3>"
            "<span class='dek'>Dek text</span></div>"
        )
        selectors = ExtractorSelectors(
            container="div.story",
            title=":scope > h3",
            summary=":scope > .dek",
            link=":scope > h3 > a",
        )

        [record] = RecordExtractor(selectors).extract(markup)

        assert record == ArticleCandidate(title="Custom", summary="Dek text", link="/x")

    def test_invalid_selector_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="container"):
            RecordExtractor(ExtractorSelectors(container="article[["))

    def test_from_config_overrides_known_keys(self, mock_config) -> None:
        mock_config["extractor"]["container"] = "li.story"
        mock_config["extractor"]["unknown"] = "ignored"

        selectors = ExtractorSelectors.from_config(mock_config)

        assert selectors.container == "li.story"
        assert selectors.title == ":scope > h2"

    def test_from_config_without_section_uses_defaults(self) -> None:
        assert ExtractorSelectors.from_config({}) == ExtractorSelectors()
