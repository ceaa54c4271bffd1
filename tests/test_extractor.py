"""Extraction strategies and their priority order."""

from __future__ import annotations

import base64

from bs4 import BeautifulSoup

from app.extractor import (
    STRATEGIES,
    extract_direct_link,
    from_script_payload,
    from_scrambled_url,
    is_direct_link,
    is_placeholder,
)
from app.models import PageContent

from .conftest import DIRECT_LINK, PAGE_URL, page_html


def _b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


def _content(html: str) -> PageContent:
    return PageContent(url=PAGE_URL, html=html)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestHelpers:
    def test_placeholders(self) -> None:
        for value in (None, "", "#", "javascript:void(0)", "JavaScript:void(0);", "javascript: void(0)"):
            assert is_placeholder(value) is True

    def test_real_href_is_not_placeholder(self) -> None:
        assert is_placeholder(DIRECT_LINK) is False

    def test_is_direct_link(self) -> None:
        assert is_direct_link("http://a.b/c") is True
        assert is_direct_link("https://a.b/c") is True
        assert is_direct_link("//a.b/c") is False
        assert is_direct_link("javascript:void(0)") is False
        assert is_direct_link("") is False

    def test_strategy_order(self) -> None:
        assert [name for name, _ in STRATEGIES] == ["download_button", "scrambled_url", "script_payload"]


class TestDownloadButton:
    def test_href_is_returned_unchanged(self) -> None:
        outcome = extract_direct_link(_content(page_html(href=DIRECT_LINK)))
        assert outcome.is_found
        assert outcome.link == DIRECT_LINK
        assert outcome.strategy == "download_button"

    def test_href_wins_over_other_sources(self) -> None:
        html = page_html(
            href=DIRECT_LINK,
            scrambled=_b64("https://other.example.com/b.zip"),
            script='var x = {"downloadUrl":"https://third.example.com/c.zip"};',
        )
        outcome = extract_direct_link(_content(html))
        assert outcome.link == DIRECT_LINK

    def test_missing_button_is_not_found(self) -> None:
        outcome = extract_direct_link(_content("<html><body><p>File deleted</p></body></html>"))
        assert outcome.kind == "not_found"
        assert outcome.link is None


class TestScrambledUrl:
    def test_decoded_when_href_is_placeholder(self) -> None:
        html = page_html(href="javascript:void(0)", scrambled=_b64("https://download1.mediafire.com/x/y.zip"))
        outcome = extract_direct_link(_content(html))
        assert outcome.link == "https://download1.mediafire.com/x/y.zip"
        assert outcome.strategy == "scrambled_url"

    def test_decoded_when_href_is_absent(self) -> None:
        html = page_html(scrambled=_b64(DIRECT_LINK))
        assert extract_direct_link(_content(html)).link == DIRECT_LINK

    def test_malformed_payload_is_soft_miss(self) -> None:
        html = page_html(href="#", scrambled="%%%not-base64%%%")
        assert from_scrambled_url(_soup(html), html) is None

    def test_malformed_payload_falls_through_to_script(self) -> None:
        html = page_html(
            href="#",
            scrambled="%%%not-base64%%%",
            script='window.x = {"downloadUrl":"https://download.mediafire.com/z.zip"};',
        )
        outcome = extract_direct_link(_content(html))
        assert outcome.link == "https://download.mediafire.com/z.zip"
        assert outcome.strategy == "script_payload"

    def test_decoded_placeholder_is_ignored(self) -> None:
        html = page_html(href="#", scrambled=_b64("javascript:void(0)"))
        assert from_scrambled_url(_soup(html), html) is None


class TestScriptPayload:
    def test_escaped_hyphens_are_unescaped(self) -> None:
        script = r'var data = {"downloadUrl":"https://example.com/a\u002db"};'
        html = page_html(href="#", script=script)
        outcome = extract_direct_link(_content(html))
        assert outcome.link == "https://example.com/a-b"

    def test_plain_payload(self) -> None:
        html = page_html(script='{"downloadUrl":"https://example.com/a-b"}')
        assert from_script_payload(_soup(html), html) == "https://example.com/a-b"

    def test_escaped_slashes(self) -> None:
        html = page_html(script=r'{"downloadUrl":"https:\/\/example.com\/file.zip"}')
        assert from_script_payload(_soup(html), html) == "https://example.com/file.zip"

    def test_non_http_payload_is_ignored(self) -> None:
        html = page_html(script='{"downloadUrl":"/relative/path.zip"}')
        assert from_script_payload(_soup(html), html) is None


class TestFinalValidation:
    def test_non_url_href_is_not_found(self) -> None:
        outcome = extract_direct_link(_content(page_html(href="/download/relative.zip")))
        assert outcome.kind == "not_found"
        assert outcome.link is None

    def test_non_url_scrambled_value_is_not_found(self) -> None:
        html = page_html(href="#", scrambled=_b64("ftp://files.example.com/a.zip"))
        assert extract_direct_link(_content(html)).kind == "not_found"

    def test_nothing_usable_is_not_found(self) -> None:
        outcome = extract_direct_link(_content(page_html(href="javascript:void(0)")))
        assert outcome.kind == "not_found"
