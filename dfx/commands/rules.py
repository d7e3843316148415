"""Komenda: dfx rules — listowanie reguł zestawu."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model.rules import InwardRule, OutwardRule
from dfx._config import open_ruleset

console = Console(width=200)


def _fmt_types(types: tuple[str, ...]) -> str:
    return ", ".join(types) if types else "[dim]—[/dim]"


def run(args: argparse.Namespace) -> None:
    ruleset = open_ruleset(console, args.ruleset)
    rules = ruleset.rules()

    if not rules:
        console.print("[yellow]Zestaw reguł jest pusty.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("#",            style="dim", no_wrap=True, justify="right")
    table.add_column("Lewa strona",  style="cyan")
    table.add_column("Prawa strona")
    table.add_column("Emituje",      style="green")
    table.add_column("Dodaje",       style="green")
    table.add_column("Klucz out",    style="yellow", no_wrap=True)

    for i, rule in enumerate(rules):
        match rule:
            case InwardRule():
                table.add_row(
                    str(i), escape(str(rule.lhs)), escape(str(rule.rhs)),
                    _fmt_types(rule.emitted_types), _fmt_types(rule.added_types), "",
                )
            case OutwardRule():
                table.add_row(str(i), escape(str(rule.lhs)), escape(str(rule.rhs)), "", "", escape(rule.key or ""))

    console.print(table)
    inward = sum(1 for r in rules if isinstance(r, InwardRule))
    console.print(
        f"[dim]{len(rules)} reguł: {inward} wewnętrznych, {len(rules) - inward} wyjściowych.[/dim]"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "rules",
        help="Listuje reguły zestawu wraz z emitowanymi i dodawanymi typami.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Listuje reguły zestawu w kolejności deklaracji.

Przykłady:
  dfx rules readability.rules:RULES
  dfx rules mysite.rules:build_ruleset
        """,
    )
    p.add_argument(
        "ruleset",
        metavar="RULESET",
        help="Referencja 'pakiet.moduł:atrybut' do zestawu reguł.",
    )
    p.set_defaults(func=run)
