"""
data_model/rhs.py — prawa strona reguły (obliczenie produkujące fakty).

InwardRhs  — łańcuch wywołań props/type/note/score/conserve_score
             z ograniczeniami at_most i type_in; jego wynik wraca do grafu faktów
OutwardRhs — out(key): kieruje dopasowane węzły do nazwanego kubełka wyników

Semantyka InwardRhs.fact(): wywołania przeglądane są od prawej; z każdego
rodzaju liczy się tylko ostatnie (najbardziej prawe) wywołanie, a props()
może dostarczyć dowolny z podfaktów type/score/note/element.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .common import Fact, OutKey, TypeName
from .errors import FactError
from .lhs import describe_callable

# Podfakty, które może dostarczyć każdy rodzaj wywołania
_PROVIDES: dict[str, frozenset[str]] = {
    "props":          frozenset({"type", "score", "note", "element"}),
    "type":           frozenset({"type"}),
    "note":           frozenset({"note"}),
    "score":          frozenset({"score"}),
    "conserve_score": frozenset({"conserve_score"}),
}

# Klucze, które callback props() może zwrócić; pozostałe są ignorowane
PROPS_KEYS: frozenset[str] = _PROVIDES["props"]


# ---------------------------------------------------------------------------
# RhsCall: pojedyncze wywołanie w łańcuchu
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RhsCall:
    """
    Jedno wywołanie łańcucha prawej strony.

    - kind:  "props" | "type" | "note" | "score" | "conserve_score"
    - value: callback, nazwa typu lub liczba (zależnie od kind)
    """
    kind: str
    value: Any = None

    def subfacts(self, fnode: Any) -> Mapping[str, Any]:
        match self.kind:
            case "props":
                raw = self.value(fnode) or {}
                return {k: v for k, v in raw.items() if k in PROPS_KEYS}
            case "type":
                return {"type": self.value}
            case "note":
                return {"note": self.value(fnode)}
            case "score":
                value = self.value(fnode) if callable(self.value) else self.value
                return {"score": value}
            case "conserve_score":
                return {"conserve_score": True}
        raise FactError(f"Unknown right-hand-side call {self.kind!r}.")

    def __str__(self) -> str:
        match self.kind:
            case "type":
                return f"type({self.value!r})"
            case "conserve_score":
                return "conserve_score()"
            case "score" if not callable(self.value):
                return f"score({self.value!r})"
        return f"{self.kind}({describe_callable(self.value)})"


# ---------------------------------------------------------------------------
# InwardRhs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InwardRhs:
    """
    Prawa strona reguły wewnętrznej.

    - calls:     wywołania w kolejności zapisu
    - max_score: limit z at_most(); None → bez limitu
    - types:     dozwolone typy z type_in(); pusta krotka → bez ograniczenia
    """
    calls: tuple[RhsCall, ...] = ()
    max_score: float | None = None
    types: tuple[TypeName, ...] = ()

    # -- budowanie ---------------------------------------------------------

    def _with(self, call: RhsCall) -> InwardRhs:
        return InwardRhs(self.calls + (call,), self.max_score, self.types)

    def props(self, callback: Callable[[Any], Mapping[str, Any]]) -> InwardRhs:
        return self._with(RhsCall("props", callback))

    def type(self, type_name: TypeName) -> InwardRhs:
        return self._with(RhsCall("type", type_name))

    def note(self, callback: Callable[[Any], Any]) -> InwardRhs:
        return self._with(RhsCall("note", callback))

    def score(self, score_or_callback: float | Callable[[Any], float]) -> InwardRhs:
        return self._with(RhsCall("score", score_or_callback))

    def conserve_score(self) -> InwardRhs:
        return self._with(RhsCall("conserve_score"))

    def at_most(self, score: float) -> InwardRhs:
        return InwardRhs(self.calls, score, self.types)

    def type_in(self, *types: TypeName) -> InwardRhs:
        return InwardRhs(self.calls, self.max_score, tuple(types))

    # -- analiza statyczna -------------------------------------------------

    def possible_emissions(self) -> tuple[bool, tuple[TypeName, ...]]:
        """
        Zwraca (could_change_type, possible_types).

        Szukamy najciaśniejszego ograniczenia: type() na prawo od wszystkich
        props() daje jeden typ; w przeciwnym razie zostaje lista z type_in()
        (pusta, gdy nie da się jej ustalić).
        """
        could_change_type = False
        for call in reversed(self.calls):
            if call.kind == "props":
                could_change_type = True
                break
            if call.kind == "type":
                return True, (call.value,)
        return could_change_type, self.types

    @property
    def conserves_score(self) -> bool:
        return any(c.kind == "conserve_score" for c in self.calls)

    # -- wykonanie ---------------------------------------------------------

    def fact(self, fnode: Any, left_type: TypeName | None) -> Fact:
        """Wylicza fragment faktu dla jednego węzła dopasowanego po lewej stronie."""
        done_kinds: set[str] = set()
        have: set[str] = set()
        result: dict[str, Any] = {}
        for call in reversed(self.calls):
            if call.kind in done_kinds:
                continue
            done_kinds.add(call.kind)
            if not (_PROVIDES[call.kind] - have):
                continue
            for key, value in call.subfacts(fnode).items():
                result.setdefault(key, value)
                have.add(key)
        self._check_type_in(result.get("type"), left_type)
        return Fact(
            element=result.get("element"),
            type=result.get("type"),
            score=result.get("score"),
            note=result.get("note"),
            conserve_score=bool(result.get("conserve_score", False)),
        )

    def _check_type_in(self, emitted: TypeName | None, left_type: TypeName | None) -> None:
        if not self.types:
            return
        if emitted is None:
            if left_type not in self.types:
                raise FactError(
                    f"A right-hand side claimed, via type_in(...), to emit one of the types "
                    f"{list(self.types)} but actually inherited {left_type!r} from the left-hand side."
                )
        elif emitted not in self.types:
            raise FactError(
                f"A right-hand side claimed, via type_in(...), to emit one of the types "
                f"{list(self.types)} but actually emitted {emitted!r}."
            )

    def __str__(self) -> str:
        parts = [str(c) for c in self.calls]
        if self.types:
            parts.append(f"type_in({', '.join(map(repr, self.types))})")
        if self.max_score is not None:
            parts.append(f"at_most({self.max_score!r})")
        return ".".join(parts) or "(empty)"


# ---------------------------------------------------------------------------
# OutwardRhs
# ---------------------------------------------------------------------------

def _identity(x: Any) -> Any:
    return x


@dataclass(frozen=True, slots=True)
class OutwardRhs:
    """
    out(key) — prawa strona reguły wyjściowej.

    - key:         klucz kubełka wyników (None dla zapytań ad hoc)
    - through:     przekształcenie każdego fnode'a wyniku
    - all_through: przekształcenie całej listy wyników
    """
    key: OutKey | None
    through_callback: Callable[[Any], Any] = field(default=_identity)
    all_through_callback: Callable[[Iterable[Any]], Iterable[Any]] = field(default=_identity)

    def through(self, callback: Callable[[Any], Any]) -> OutwardRhs:
        return OutwardRhs(self.key, callback, self.all_through_callback)

    def all_through(self, callback: Callable[[Iterable[Any]], Iterable[Any]]) -> OutwardRhs:
        return OutwardRhs(self.key, self.through_callback, callback)

    def __str__(self) -> str:
        text = f"out({self.key!r})"
        if self.through_callback is not _identity:
            text += f".through({describe_callable(self.through_callback)})"
        if self.all_through_callback is not _identity:
            text += f".all_through({describe_callable(self.all_through_callback)})"
        return text


type Rhs = InwardRhs | OutwardRhs
