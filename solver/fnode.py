"""
solver/fnode.py — rekord faktów dla jednego węzła drzewa.

Fnode należy do pamięci podręcznej BoundRuleset (jeden na węzeł, który
kiedykolwiek pasował do reguły). Przechowuje:
  - typy w kolejności nadania (kolejność wykonania reguł)
  - wynik per typ: iloczyn wkładów, domyślnie 1, nigdy nie resetowany
  - notatkę per typ: pierwsza zapisana wygrywa
  - typy docelowe, do których wynik źródłowy został już wmnożony
    przez conserve_score() (co najwyżej raz na typ)

Metody *_for(type) uruchamiają brakujące reguły; *_so_far_for(type) tylko czytają.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from data_model.common import TypeName

if TYPE_CHECKING:
    from .engine import BoundRuleset


@dataclass(slots=True)
class TypeRecord:
    """Wynik i notatka jednego typu na jednym węźle."""
    score: float = 1
    note: Any = None


_UNTOUCHED = TypeRecord()


class Fnode:
    """
    Zakumulowane fakty o jednym węźle drzewa.

    Hash i równość po tożsamości; element jest tylko referencją zwrotną.
    """

    __slots__ = ("element", "_bound", "_types", "_conserved")

    def __init__(self, element: Any, bound: BoundRuleset) -> None:
        if element is None:
            raise ValueError("Someone tried to make a fnode without specifying the element they're talking about.")
        self.element = element
        self._bound = bound
        self._types: dict[TypeName, TypeRecord] = {}
        self._conserved: set[TypeName] = set()

    def __repr__(self) -> str:
        name = getattr(self.element, "name", None) or type(self.element).__name__
        return f"<Fnode {name} types={list(self._types)}>"

    # ------------------------------------------------------------------
    # Odczyt (z uruchomieniem brakujących reguł)
    # ------------------------------------------------------------------

    def has_type(self, type_name: TypeName) -> bool:
        self._compute_type(type_name)
        return type_name in self._types

    def score_for(self, type_name: TypeName) -> float:
        self._compute_type(type_name)
        return self.score_so_far_for(type_name)

    def note_for(self, type_name: TypeName) -> Any:
        self._compute_type(type_name)
        return self.note_so_far_for(type_name)

    def has_note_for(self, type_name: TypeName) -> bool:
        return self.note_for(type_name) is not None

    # ------------------------------------------------------------------
    # Odczyt bez wykonywania reguł
    # ------------------------------------------------------------------

    def has_type_so_far(self, type_name: TypeName) -> bool:
        return type_name in self._types

    def score_so_far_for(self, type_name: TypeName) -> float:
        return self._types.get(type_name, _UNTOUCHED).score

    def note_so_far_for(self, type_name: TypeName) -> Any:
        return self._types.get(type_name, _UNTOUCHED).note

    def types_so_far(self) -> list[TypeName]:
        """Typy w kolejności, w jakiej reguły je nadały."""
        return list(self._types)

    # ------------------------------------------------------------------
    # Zapis: wywoływane wyłącznie przez wykonawcę reguł
    # ------------------------------------------------------------------

    def add_type(self, type_name: TypeName) -> bool:
        """Nadaje typ; zwraca True, gdy węzeł go wcześniej nie miał."""
        if type_name in self._types:
            return False
        self._types[type_name] = TypeRecord()
        return True

    def add_score_for(self, type_name: TypeName, factor: float) -> None:
        self.add_type(type_name)
        self._types[type_name].score *= factor

    def cap_score_for(self, type_name: TypeName, cap: float) -> None:
        record = self._types[type_name]
        record.score = min(record.score, cap)

    def set_note_for(self, type_name: TypeName, note: Any) -> None:
        """Zapisuje notatkę, o ile typ nie ma jeszcze żadnej (pierwsza wygrywa)."""
        self.add_type(type_name)
        record = self._types[type_name]
        if note is not None and record.note is None:
            record.note = note

    def conserve_score_from(self, source: Fnode, source_type: TypeName, type_name: TypeName) -> None:
        """
        Wmnaża wynik source_type z węzła źródłowego do type_name.

        Dzieje się to co najwyżej raz na (ten węzeł, type_name), niezależnie
        od tego, ile reguł prosi o zachowanie wyniku.
        """
        if type_name in self._conserved:
            return
        self._conserved.add(type_name)
        self.add_score_for(type_name, source.score_so_far_for(source_type))

    # ------------------------------------------------------------------

    def _compute_type(self, type_name: TypeName) -> None:
        self._bound.ensure_type(type_name)
