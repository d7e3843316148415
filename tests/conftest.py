"""Wspólne fixtures dla testów DomFacts."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from bs4 import BeautifulSoup

from html_parser.parser import static_dom


# =============================================================================
# Dokumenty
# =============================================================================


@pytest.fixture
def parse() -> Callable[[str], BeautifulSoup]:
    """Parser HTML używany przez testy (html.parser, bez zależności od lxml)."""
    return static_dom


@pytest.fixture
def div_doc() -> BeautifulSoup:
    """Jeden div z ośmioma znakami tekstu."""
    return static_dom("<div>Hooooooo</div>")


@pytest.fixture
def paragraph_doc() -> BeautifulSoup:
    """Jeden pusty akapit."""
    return static_dom("<p></p>")


@pytest.fixture
def anchors_doc() -> BeautifulSoup:
    """Akapit z dwoma linkami: dobrym i złym."""
    return static_dom("""
        <p>
            <a class="good" href="https://example.com/a">Good!</a>
            <a class="bad" href="https://example.com/b">Bad!</a>
        </p>
    """)


@pytest.fixture
def nested_doc() -> BeautifulSoup:
    """Div #root zawierający div #inner."""
    return static_dom("""
        <div id=root>some text
         <div id=inner>some more text</div>
        </div>
    """)


@pytest.fixture
def article_doc() -> BeautifulSoup:
    """Strona z nawigacją pełną linków i artykułem z kilkoma akapitami."""
    return static_dom("""
        <html><body>
          <nav>
            <p><a href="/1">Home</a> <a href="/2">About</a></p>
          </nav>
          <article>
            <p id="p1">The first paragraph of the article is fairly long and has no links at all.</p>
            <p id="p2">The second paragraph is also long, with <a href="/x">one link</a> inside.</p>
            <p id="p3">A third paragraph, rounding out the article body nicely.</p>
          </article>
        </body></html>
    """)
