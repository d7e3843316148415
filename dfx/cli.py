"""
dfx — narzędzie CLI dla DomFacts.

Użycie:
  dfx [--verbose] <komenda> [opcje]

Komendy:
  rules     Listuje reguły zestawu wraz z typami, które emitują i dodają.
  plan      Pokazuje reguły, które wykona zapytanie (bez ich wykonywania).
  query     Wykonuje zapytanie na dokumencie HTML i wypisuje wyniki.
  validate  Waliduje zestaw reguł (emitery, addery, cykle, klucze out).

RULESET to referencja 'pakiet.moduł:atrybut' wskazująca Ruleset
(albo funkcję, która go zwraca).

Zmienne środowiskowe:
  DFX_HTML_PARSER   builder BeautifulSoup (domyślnie html.parser)
  DFX_HTTP_TIMEOUT  limit czasu pobierania --url w sekundach (domyślnie 30)
  DFX_USER_AGENT    nagłówek User-Agent dla --url
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows: terminal może używać cp1252: wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.console import Console
from rich.logging import RichHandler

from dfx.commands import rules as cmd_rules
from dfx.commands import plan as cmd_plan
from dfx.commands import query as cmd_query
from dfx.commands import validate as cmd_validate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dfx",
        description="DomFacts — reguły nad drzewem HTML, narzędzie CLI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="dfx 0.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Loguj plany i wykonane reguły (poziom DEBUG) na stderr.",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_rules.add_parser(subparsers)
    cmd_plan.add_parser(subparsers)
    cmd_query.add_parser(subparsers)
    cmd_validate.add_parser(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
