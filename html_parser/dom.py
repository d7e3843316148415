"""
html_parser/dom.py — heurystyki DOM dla callbacków reguł.

Zwykłe funkcje na drzewie BeautifulSoup, bez logiki silnika; używane
wewnątrz callbacków score()/note()/props() i przez grupowanie klastrów.

Węzły tekstowe to NavigableString; komentarze, CDATA i doctype
(PreformattedString) nie są traktowane jako tekst.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from .parser import NOISE_TAGS

# Tagi blokowe domyślnie (niezależnie od stylów)
BLOCK_TAGS: frozenset[str] = frozenset({
    "address", "blockquote", "body", "center", "dir", "div", "dl",
    "fieldset", "form", "h1", "h2", "h3", "h4", "h5", "h6", "hr",
    "isindex", "menu", "noframes", "noscript", "ol", "p", "pre",
    "table", "ul", "dd", "dt", "frameset", "li", "tbody", "td",
    "tfoot", "th", "thead", "tr", "html",
})

_WHITESPACE_RUN = re.compile(r"\s{2,}")


def _always(_: Any) -> bool:
    return True


def is_dom_element(thing: Any) -> bool:
    """Czy thing jest elementem drzewa (Tag, także cały dokument)."""
    return isinstance(thing, Tag)


def is_text(node: Any) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_whitespace(node: Any) -> bool:
    """Czy węzeł jest tekstem złożonym wyłącznie z białych znaków."""
    return is_text(node) and not node.strip()


def is_block(element: Any) -> bool:
    return isinstance(element, Tag) and element.name in BLOCK_TAGS


def walk(
    element: PageElement,
    should_traverse: Callable[[PageElement], bool] = _always,
) -> Iterator[PageElement]:
    """
    Przechodzi drzewo w głąb; najpierw zwraca sam element.

    Args:
        should_traverse: dla dziecka mówi, czy uwzględnić je i jego poddrzewo
    """
    yield element
    if isinstance(element, Tag):
        for child in element.children:
            if should_traverse(child):
                yield from walk(child, should_traverse)


def inline_texts(
    element: Tag,
    should_traverse: Callable[[PageElement], bool] = _always,
) -> Iterator[str]:
    """Teksty węzła i jego dzieci, bez wchodzenia w bloki i script/style."""
    def traversable(node: PageElement) -> bool:
        if is_block(node):
            return False
        if isinstance(node, Tag) and node.name in NOISE_TAGS:
            return False
        return should_traverse(node)

    for node in walk(element, traversable):
        if is_text(node):
            yield str(node)


def collapse_whitespace(text: str) -> str:
    """Każdy ciąg co najmniej dwóch białych znaków zamienia na jedną spację."""
    return _WHITESPACE_RUN.sub(" ", text)


def inline_text_length(
    element: Tag,
    should_traverse: Callable[[PageElement], bool] = _always,
) -> int:
    """Łączna długość tekstu inline po zwinięciu białych znaków."""
    return sum(len(collapse_whitespace(t)) for t in inline_texts(element, should_traverse))


def link_density(fnode: Any, inline_length: int | None = None) -> float:
    """
    Udział tekstu linków w tekście inline elementu fnode'a.

    Args:
        inline_length: wcześniej policzona długość tekstu inline; None → liczona tutaj

    Element bez tekstu inline ma gęstość 0.
    """
    if inline_length is None:
        inline_length = inline_text_length(fnode.element)
    if not inline_length:
        return 0.0
    without_links = inline_text_length(
        fnode.element,
        lambda node: not (isinstance(node, Tag) and node.name == "a"),
    )
    return (inline_length - without_links) / inline_length


def root_element(element: PageElement) -> PageElement:
    """Najwyższy element drzewa (zwykle <html>), nie sam obiekt dokumentu."""
    while (parent := element.parent) is not None and not isinstance(parent, BeautifulSoup):
        element = parent
    return element


def number_of_matches(pattern: str | re.Pattern[str], haystack: str) -> int:
    """Liczba nienakładających się wystąpień wzorca w tekście."""
    return len(re.findall(pattern, haystack))


def page(scoring_function: Callable[[Any], dict[str, Any]]) -> Callable[[Any], dict[str, Any]]:
    """
    Opakowuje callback props(); gdy zwróci score, fakt trafia do korzenia strony.

    Służy do reguł klasyfikujących całe strony zamiast pojedynczych elementów.
    """
    def wrapper(fnode: Any) -> dict[str, Any]:
        result = dict(scoring_function(fnode))
        if result.get("score") is not None:
            result["element"] = root_element(fnode.element)
        return result

    wrapper.__name__ = getattr(scoring_function, "__name__", "page")
    return wrapper


def document_positions(root: Tag) -> dict[int, int]:
    """Pozycja każdego węzła w kolejności dokumentu, klucz = id(węzła)."""
    positions = {id(root): -1}
    for i, node in enumerate(root.descendants):
        positions[id(node)] = i
    return positions


def dom_sort(fnodes: Iterable[Any]) -> list[Any]:
    """Sortuje fnode'y według pozycji ich elementów w dokumencie."""
    fnodes = list(fnodes)
    if not fnodes:
        return []
    top = fnodes[0].element
    while top.parent is not None:
        top = top.parent
    positions = document_positions(top)
    return sorted(fnodes, key=lambda f: positions[id(f.element)])
