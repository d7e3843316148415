"""
solver/utils.py — redukcje best-of używane przez max() i best_cluster().

W max_by/min_by przy remisie wygrywa pierwszy element; maxes zwraca wszystkie
remisy.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from data_model.errors import EmptyInputError


def _identity(x: Any) -> Any:
    return x


def best[T](
    iterable: Iterable[T],
    by: Callable[[T], Any],
    is_better: Callable[[Any, Any], bool],
) -> T:
    """
    Zwraca najlepszy element według dowolnego komparatora.

    Args:
        by:        klucz porównania dla elementu
        is_better: czy pierwszy klucz jest lepszy od drugiego

    Raises:
        EmptyInputError: gdy iterable jest pusty.
    """
    best_so_far: T | None = None
    best_key: Any = None
    is_first = True
    for item in iterable:
        key = by(item)
        if is_first or is_better(key, best_key):
            best_so_far, best_key = item, key
            is_first = False
    if is_first:
        raise EmptyInputError("Tried to call best() on empty iterable")
    return best_so_far  # type: ignore[return-value]


def max_by[T](iterable: Iterable[T], by: Callable[[T], Any] = _identity) -> T:
    """Największy element według `by` (operator >)."""
    return best(iterable, by, lambda a, b: a > b)


def maxes[T](iterable: Iterable[T], by: Callable[[T], Any] = _identity) -> list[T]:
    """
    Wszystkie elementy z największym kluczem, w kolejności wejścia.

    Pusty iterable daje pustą listę (bez EmptyInputError).
    """
    bests: list[T] = []
    best_key: Any = None
    for item in iterable:
        key = by(item)
        if not bests or key > best_key:
            bests, best_key = [item], key
        elif key == best_key:
            bests.append(item)
    return bests


def min_by[T](iterable: Iterable[T], by: Callable[[T], Any] = _identity) -> T:
    """Najmniejszy element według `by` (operator <)."""
    return best(iterable, by, lambda a, b: a < b)
