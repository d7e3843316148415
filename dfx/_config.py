"""Konfiguracja CLI przez zmienne środowiskowe i wspólne wczytywanie wejścia."""

from __future__ import annotations

import os
import pathlib
from typing import Any

from bs4 import BeautifulSoup
from rich.console import Console

from data_model.errors import RulesetError
from html_parser.parser import (
    DEFAULT_PARSER,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    fetch_html,
    load_html_file,
    static_dom,
)
from solver.loader import load_object, load_ruleset
from solver.ruleset import Ruleset


def html_parser() -> str:
    return os.getenv("DFX_HTML_PARSER", DEFAULT_PARSER)


def http_timeout() -> float:
    return float(os.getenv("DFX_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT)))


def user_agent() -> str:
    return os.getenv("DFX_USER_AGENT", DEFAULT_USER_AGENT)


def open_ruleset(console: Console, ref: str) -> Ruleset:
    """Ładuje zestaw reguł; przy błędzie wypisuje go na czerwono i kończy z kodem 1."""
    try:
        return load_ruleset(ref)
    except (ImportError, ValueError, RulesetError) as e:
        console.print(f"[red]Nie można załadować zestawu reguł {ref}:[/red] {e}")
        raise SystemExit(1)


def open_rules(console: Console, ref: str) -> Any:
    """Jak open_ruleset(), ale przyjmuje też zwykłą listę reguł (dla walidatora)."""
    try:
        return load_object(ref)
    except (ImportError, ValueError, RulesetError) as e:
        console.print(f"[red]Nie można załadować zestawu reguł {ref}:[/red] {e}")
        raise SystemExit(1)


def open_document(console: Console, html: str | None, url: str | None) -> BeautifulSoup:
    """
    Wczytuje dokument z pliku (--html) albo z sieci (--url).

    Bez żadnego z nich zwraca pusty dokument (wystarcza do planowania).
    """
    parser = html_parser()
    if html:
        path = pathlib.Path(html)
        if not path.exists():
            console.print(f"[red]Brak pliku HTML:[/red] {path}")
            raise SystemExit(1)
        return load_html_file(path, parser)
    if url:
        import requests
        try:
            return fetch_html(url, timeout=http_timeout(), user_agent=user_agent(), parser=parser)
        except requests.RequestException as e:
            console.print(f"[red]Błąd pobierania strony:[/red] {e}")
            raise SystemExit(1)
    return static_dom("", parser)
