"""html_parser/parser.py — wczytywanie dokumentu HTML do drzewa BeautifulSoup."""

from __future__ import annotations

import logging
import pathlib

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Tagi zawierające szum (nie treść)
NOISE_TAGS = frozenset({"script", "style", "noscript"})


def static_dom(html: str, parser: str = DEFAULT_PARSER, strip_noise: bool = False) -> BeautifulSoup:
    """
    Parsuje HTML do drzewa; skrypty nigdy nie są wykonywane.

    Args:
        parser:      builder BeautifulSoup ("html.parser", "lxml", "html5lib")
        strip_noise: usuwa script/style/noscript przed zwróceniem drzewa
    """
    soup = BeautifulSoup(html, parser)
    if strip_noise:
        for tag in soup.find_all(NOISE_TAGS):
            tag.decompose()
    return soup


def load_html_file(path: pathlib.Path | str, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    """Wczytuje plik HTML (UTF-8) z dysku."""
    path = pathlib.Path(path)
    logger.debug("Wczytywanie %s", path)
    return static_dom(path.read_text(encoding="utf-8"), parser)


def fetch_html(
    url:        str,
    timeout:    float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    parser:     str = DEFAULT_PARSER,
) -> BeautifulSoup:
    """
    Pobiera stronę HTML z podanego URL i parsuje ją do drzewa.

    Raises:
        requests.HTTPError: dla odpowiedzi 4xx/5xx.
    """
    logger.debug("GET %s (timeout=%ss)", url, timeout)
    resp = requests.get(url, timeout=timeout, headers={"User-Agent": user_agent})
    resp.raise_for_status()
    resp.encoding = resp.apparent_encoding or "utf-8"
    return static_dom(resp.text, parser)
