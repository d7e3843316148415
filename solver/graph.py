"""
solver/graph.py — odwrotne sortowanie topologiczne.

toposort(nodes, nodes_that_need) zwraca węzły tak, że każdy węzeł stoi
po wszystkich węzłach, które go potrzebują; kolejność wykonania to więc
reversed(toposort(...)). Przy remisie decyduje kolejność w `nodes`
(wynik jest deterministyczny dla ustalonej kolejności wejścia).
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable

from data_model.errors import CycleError


def toposort[T: Hashable](
    nodes: Iterable[T],
    nodes_that_need: Callable[[T], Iterable[T]],
) -> list[T]:
    """
    Odwrotne sortowanie topologiczne (DFS, post-order).

    Args:
        nodes:           węzły do posortowania (inne węzły zwracane przez
                         nodes_that_need są pomijane)
        nodes_that_need: dla węzła zwraca węzły, które od niego zależą

    Raises:
        CycleError: gdy graf ograniczony do `nodes` zawiera cykl.
    """
    ret: list[T] = []
    todo: dict[T, None] = dict.fromkeys(nodes)
    in_progress: set[T] = set()

    def visit(node: T) -> None:
        if node in in_progress:
            raise CycleError("The graph has a cycle.")
        if node in todo:
            in_progress.add(node)
            for needer in nodes_that_need(node):
                visit(needer)
            in_progress.discard(node)
            del todo[node]
            ret.append(node)

    while todo:
        visit(next(iter(todo)))
    return ret
