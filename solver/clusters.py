"""
solver/clusters.py — grupowanie węzłów według odległości topologicznej.

Używane przez type_(T).best_cluster(). Grupowanie aglomeracyjne
z pojedynczym wiązaniem (single linkage): dopóki dwa najbliższe klastry
są bliżej niż splitting_distance, łączymy je.

Odległość dwóch węzłów:
  - schodzimy równolegle od wspólnego przodka do obu węzłów; każdy poziom
    kosztuje same_tag_cost albo different_tag_cost (wg nazw tagów),
    a poziom obecny tylko po jednej stronie different_depth_cost
  - na każdym poziomie dokładamy stride_cost za każdy niepusty węzeł
    rodzeństwa leżący pomiędzy ścieżkami
  - węzeł zawierający drugi jest od niego nieskończenie daleko
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

from data_model.common import ClusterOptions
from html_parser.dom import is_dom_element, is_whitespace

from .utils import min_by

# Odległość węzłów, z których jeden zawiera drugi
UNREACHABLE = sys.float_info.max


def _element_of(thing: Any) -> Any:
    return thing if is_dom_element(thing) else thing.element


def _contains(outer: Any, inner: Any) -> bool:
    """Czy outer zawiera inner (węzeł zawiera sam siebie)."""
    return outer is inner or any(p is outer for p in inner.parents)


def _child_index(parent: Any, child: Any) -> int:
    # list.index() porównuje strukturalnie (Tag.__eq__), potrzebna tożsamość
    return next(i for i, c in enumerate(parent.contents) if c is child)


def _num_strides(left: Any, right: Any) -> int:
    """Liczba niepustych węzłów rodzeństwa pomiędzy left i right."""
    num = 0

    # Idziemy w prawo od lewego węzła, aż trafimy na prawy albo skończy się rodzeństwo
    sibling = left
    should_continue = sibling is not None and sibling is not right
    while should_continue:
        sibling = sibling.next_sibling
        should_continue = sibling is not None and sibling is not right
        if should_continue and not is_whitespace(sibling):
            num += 1

    if sibling is not right:
        # Nie są rodzeństwem: idziemy w lewo od prawego węzła
        sibling = right
        while sibling is not None:
            sibling = sibling.previous_sibling
            if sibling is not None and not is_whitespace(sibling):
                num += 1
    return num


def distance(a: Any, b: Any, options: ClusterOptions | None = None) -> float:
    """
    Odległość topologiczna dwóch węzłów (albo fnode'ów) w drzewie.

    Args:
        a, b:    elementy drzewa albo Fnode'y
        options: koszty; None → ClusterOptions()
    """
    if options is None:
        options = ClusterOptions()
    if a is b:
        return 0

    element_a = _element_of(a)
    element_b = _element_of(b)
    if element_a is element_b:
        return 0
    if _contains(element_a, element_b) or _contains(element_b, element_a):
        return UNREACHABLE

    # Stosy od węzła w górę do wspólnego przodka (włącznie)
    a_ancestors = [element_a]
    common = element_a
    while not _contains(common, element_b):
        common = common.parent
        a_ancestors.append(common)

    b_ancestors = [element_b]
    b_ancestor = element_b
    while b_ancestor is not common:
        b_ancestor = b_ancestor.parent
        b_ancestors.append(b_ancestor)

    # Lewy jest ten, którego gałąź stoi wcześniej wśród dzieci wspólnego przodka
    if _child_index(common, a_ancestors[-2]) < _child_index(common, b_ancestors[-2]):
        left, right = a_ancestors, b_ancestors
    else:
        left, right = b_ancestors, a_ancestors

    cost: float = 0
    while left or right:
        l = left.pop() if left else None
        r = right.pop() if right else None
        if l is None or r is None:
            cost += options.different_depth_cost
        else:
            cost += options.same_tag_cost if l.name == r.name else options.different_tag_cost
        if options.stride_cost:
            cost += _num_strides(l, r) * options.stride_cost

    return cost + options.additional_cost(a, b)


# ---------------------------------------------------------------------------
# Macierz odległości
# ---------------------------------------------------------------------------

class _Cluster:
    """Klaster o tożsamościowym hashu; members w kolejności łączenia."""

    __slots__ = ("members",)

    def __init__(self, members: list[Any]) -> None:
        self.members = members


class DistanceMatrix:
    """
    Rzadka macierz trójkątna odległości między klastrami.

    Każdy wiersz trzyma odległości tylko do klastrów dodanych wcześniej,
    więc usunięcie klastra nie wymaga przesuwania reszty macierzy.
    """

    def __init__(self, elements: Sequence[Any], get_distance: Callable[[Any, Any], float]) -> None:
        self._matrix: dict[_Cluster, dict[_Cluster, float]] = {}
        for element in elements:
            outer = _Cluster([element])
            self._matrix[outer] = {
                inner: get_distance(element, inner.members[0])
                for inner in self._matrix
            }

    def closest(self) -> tuple[float, _Cluster, _Cluster]:
        """(odległość, klaster_a, klaster_b) dwóch najbliższych klastrów; remis → pierwsza para."""
        if len(self._matrix) < 2:
            raise ValueError("There must be at least 2 clusters in order to return the closest() ones.")
        pairs = (
            (stored, outer, inner)
            for outer, row in self._matrix.items()
            for inner, stored in row.items()
        )
        return min_by(pairs, lambda pair: pair[0])

    def _cached_distance(self, a: _Cluster, b: _Cluster) -> float:
        row = self._matrix[a]
        return row[b] if b in row else self._matrix[b][a]

    def merge(self, a: _Cluster, b: _Cluster) -> None:
        """Łączy dwa klastry; odległość do pozostałych to minimum (single linkage)."""
        new_row = {
            other: min(self._cached_distance(a, other), self._cached_distance(b, other))
            for other in self._matrix
            if other is not a and other is not b
        }
        del self._matrix[a]
        del self._matrix[b]
        for row in self._matrix.values():
            row.pop(a, None)
            row.pop(b, None)
        self._matrix[_Cluster(a.members + b.members)] = new_row

    def num_clusters(self) -> int:
        return len(self._matrix)

    def clusters(self) -> list[list[Any]]:
        return [list(cluster.members) for cluster in self._matrix]


def clusters(
    elements: Sequence[Any],
    splitting_distance: float,
    get_distance: Callable[[Any, Any], float] = distance,
) -> list[list[Any]]:
    """
    Grupuje elementy (albo fnode'y) w klastry.

    Returns:
        Listę klastrów; każdy to lista elementów w kolejności łączenia.
    """
    matrix = DistanceMatrix(elements, get_distance)
    while matrix.num_clusters() > 1:
        nearest, a, b = matrix.closest()
        if nearest >= splitting_distance:
            break
        matrix.merge(a, b)
    return matrix.clusters()
