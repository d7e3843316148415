"""Komenda: dfx plan — reguły, które wykonałoby zapytanie."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model.errors import RulesetError
from dfx._config import open_document, open_ruleset

console = Console(width=200)


def run(args: argparse.Namespace) -> None:
    ruleset = open_ruleset(console, args.ruleset)
    doc = open_document(console, args.html, args.url)
    facts = ruleset.against(doc)

    try:
        plan = facts.plan(args.query)
    except RulesetError as e:
        console.print(f"[red]Nie można zaplanować zapytania:[/red] {e}")
        raise SystemExit(1)

    is_out_key = ruleset.out_rule(args.query) is not None
    label = f"out({args.query!r})" if is_out_key else f"type({args.query!r})"
    console.print(f"\nZapytanie: [bold cyan]{label}[/bold cyan]")

    if not plan:
        console.print("  [yellow]Plan jest pusty — żadna reguła nie jest potrzebna.[/yellow]")
        return

    rules = ruleset.rules()
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("Krok",    style="dim", no_wrap=True, justify="right")
    table.add_column("Reguła #", style="dim", no_wrap=True, justify="right")
    table.add_column("Reguła",  style="cyan")
    table.add_column("Emituje", style="green")

    for step, rule in enumerate(plan, start=1):
        index = next(i for i, r in enumerate(rules) if r is rule)
        table.add_row(str(step), str(index), escape(str(rule)), ", ".join(rule.emitted_types))

    console.print(table)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "plan",
        help="Pokazuje reguły, które wykona zapytanie, w kolejności wykonania.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Pokazuje plan zapytania: reguły wewnętrzne w kolejności wykonania.
Żadna reguła nie jest uruchamiana.

ZAPYTANIE to klucz reguły out(...) albo nazwa typu.

Przykłady:
  dfx plan readability.rules:RULES content
  dfx plan readability.rules:RULES paragraphish --html strona.html
        """,
    )
    p.add_argument("ruleset", metavar="RULESET", help="Referencja 'pakiet.moduł:atrybut' do zestawu reguł.")
    p.add_argument("query", metavar="ZAPYTANIE", help="Klucz out(...) albo nazwa typu.")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--html", metavar="PLIK", default=None, help="Plik HTML do związania zestawu.")
    source.add_argument("--url", metavar="URL", default=None, help="Strona do pobrania i związania zestawu.")
    p.set_defaults(func=run)
