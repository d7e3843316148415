"""Komenda: dfx validate — statyczna walidacja zestawu reguł."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dfx._config import open_rules
from solver.ruleset import Ruleset

console = Console(width=200)


def run(args: argparse.Namespace) -> None:
    rules = open_rules(console, args.ruleset)
    if not isinstance(rules, (Ruleset, list, tuple)):
        console.print(
            f"[red]{args.ruleset} nie wskazuje zestawu ani listy reguł[/red] "
            f"({type(rules).__name__})"
        )
        raise SystemExit(1)

    from validator import RulesetValidator

    report = RulesetValidator().validate(rules)

    # --- Wyjście JSON (opcjonalnie) --------------------------------------
    if args.json_output:
        out: dict = {
            "is_valid": report.is_valid,
            "rule_count": report.rule_count,
            "errors": [dataclasses.asdict(e) for e in report.errors],
            "warnings": report.warnings,
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))
        if not report.is_valid:
            sys.exit(1)
        return

    # --- Wynik na konsoli ------------------------------------------------
    if report.is_valid:
        console.print(
            f"[green]OK[/green]  Zestaw [bold]{args.ruleset}[/bold] "
            f"({report.rule_count} reguł) jest poprawny."
        )
    else:
        console.print(
            f"[red]BŁĄD[/red]  Zestaw [bold]{args.ruleset}[/bold] — "
            f"{len(report.errors)} błąd(ów)."
        )

        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("Kod",      style="yellow", no_wrap=True)
        table.add_column("Ścieżka", style="cyan",   no_wrap=True)
        table.add_column("Komunikat")
        table.add_column("Poprawka", style="dim")

        for e in report.errors:
            table.add_row(e.code, e.path, escape(e.message), escape(e.expected_fix))

        console.print(table)

    if report.warnings:
        console.print("[yellow]Ostrzeżenia:[/yellow]")
        for w in report.warnings:
            console.print(f"  [yellow]·[/yellow] {escape(w)}")

    if not report.is_valid:
        sys.exit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "validate",
        help="Waliduje zestaw reguł (typy, emitery, addery, cykle).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Waliduje zestaw reguł (etapy A–D):

  A  Budowa zestawu   (czy to reguły, ustalalny typ wyjściowy, unikalne klucze out)
  B  Fakty            (dom() bez typu, conserve_score() bez typu wejściowego)
  C  Wejścia          (brak emitera / addera typu)
  D  Cykle            (cykl zależności w całym zestawie)

RULESET może wskazywać Ruleset albo listę reguł (niepoprawną listę
da się zwalidować, choć nie da się z niej zbudować Ruleset).

Przykłady:
  dfx validate readability.rules:RULES
  dfx validate readability.rules:RULE_LIST --json-output
        """,
    )
    p.add_argument(
        "ruleset",
        metavar="RULESET",
        help="Referencja 'pakiet.moduł:atrybut' do zestawu albo listy reguł.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz raport walidacji jako JSON na stdout.",
    )
    p.set_defaults(func=run)
