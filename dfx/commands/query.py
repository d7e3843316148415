"""Komenda: dfx query — wykonuje zapytanie na dokumencie HTML."""

from __future__ import annotations

import argparse
import json
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model.errors import RulesetError
from data_model.sides import type_
from dfx._config import open_document, open_ruleset
from html_parser.dom import collapse_whitespace
from solver.fnode import Fnode

console = Console(width=200)


def _describe_element(element: Any, max_text: int = 60) -> str:
    name = getattr(element, "name", None) or type(element).__name__
    attrs = getattr(element, "attrs", {}) or {}
    parts = [name]
    if attrs.get("id"):
        parts.append(f"#{attrs['id']}")
    if attrs.get("class"):
        parts.append("." + ".".join(attrs["class"]))
    text = collapse_whitespace(element.get_text(" ", strip=True)) if hasattr(element, "get_text") else ""
    if len(text) > max_text:
        text = text[:max_text] + "…"
    return f"<{''.join(parts)}> {text}".rstrip()


def _row(result: Any, score_type: str | None) -> dict[str, Any]:
    if not isinstance(result, Fnode):
        return {"element": repr(result), "types": [], "score": None, "note": None}
    score = note = None
    if score_type is not None:
        score = result.score_for(score_type)
        note = result.note_for(score_type)
    return {
        "element": _describe_element(result.element),
        "types": result.types_so_far(),
        "score": score,
        "note": note,
    }


def run(args: argparse.Namespace) -> None:
    ruleset = open_ruleset(console, args.ruleset)
    doc = open_document(console, args.html, args.url)

    root = doc
    if args.within:
        root = doc.select_one(args.within)
        if root is None:
            console.print(f"[red]Selektor --within nie pasuje do żadnego elementu:[/red] {args.within}")
            raise SystemExit(1)

    out_rule = ruleset.out_rule(args.query)
    if out_rule is not None:
        if args.max:
            console.print("[red]--max działa tylko dla nazw typów, nie dla kluczy out().[/red]")
            raise SystemExit(1)
        query: Any = args.query
        score_type = out_rule.lhs.guaranteed_type
    else:
        query = type_(args.query).max() if args.max else type_(args.query)
        score_type = args.query

    facts = ruleset.against(root)
    try:
        results = facts.get(query)
        if args.limit is not None:
            results = results[:args.limit]
        rows = [_row(r, score_type) for r in results]
    except RulesetError as e:
        console.print(f"[red]Błąd wykonania zapytania:[/red] {e}")
        raise SystemExit(1)

    if args.json_output:
        print(json.dumps(rows, ensure_ascii=False, indent=2, default=str))
        return

    console.print(f"\nZapytanie: [bold cyan]{args.query}[/bold cyan]"
                  + (" [dim](max)[/dim]" if args.max else ""))
    if not rows:
        console.print("  [yellow]Brak wyników.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("#",        style="dim", no_wrap=True, justify="right")
    table.add_column("Element",  style="cyan")
    table.add_column("Typy",     style="green")
    table.add_column("Wynik",    justify="right", no_wrap=True)
    table.add_column("Notatka",  style="dim")

    for i, row in enumerate(rows, start=1):
        score = "—" if row["score"] is None else f"{row['score']:.4g}"
        note = "" if row["note"] is None else str(row["note"])
        table.add_row(str(i), escape(row["element"]), escape(", ".join(row["types"])), score, escape(note))

    console.print(table)
    console.print(f"[dim]{len(rows)} wyników; wykonano {len(facts.done_rules())} reguł.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "query",
        help="Wykonuje zapytanie (typ albo klucz out) na dokumencie HTML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Wiąże zestaw reguł z dokumentem i wykonuje zapytanie. Uruchamiane są
wyłącznie reguły potrzebne do odpowiedzi.

Przykłady:
  dfx query readability.rules:RULES content --html strona.html
  dfx query readability.rules:RULES paragraphish --url https://example.com --max
  dfx query readability.rules:RULES paragraphish --html strona.html --within article --json-output
        """,
    )
    p.add_argument("ruleset", metavar="RULESET", help="Referencja 'pakiet.moduł:atrybut' do zestawu reguł.")
    p.add_argument("query", metavar="ZAPYTANIE", help="Klucz out(...) albo nazwa typu.")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--html", metavar="PLIK", default=None, help="Plik HTML.")
    source.add_argument("--url", metavar="URL", default=None, help="Strona do pobrania.")
    p.add_argument(
        "--within",
        metavar="SELEKTOR",
        default=None,
        help="Wiąże zestaw reguł tylko z poddrzewem pierwszego pasującego elementu.",
    )
    p.add_argument(
        "--max",
        action="store_true",
        help="Zwraca tylko węzeł o najwyższym wyniku (type(T).max()).",
    )
    p.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        metavar="N",
        help="Wypisuje co najwyżej N wyników.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz wyniki jako JSON na stdout.",
    )
    p.set_defaults(func=run)
