"""
Struktury danych dla reguł (rules).

Reguła = (Lhs, Rhs). Dwa rodzaje:
  InwardRule  — wynik wraca do grafu faktów (typy, wyniki, notatki)
  OutwardRule — out(key): wynik trafia do kubełka pod kluczem

Metadane statyczne wyliczane raz (cached_property):
  emitted_types   — typy wymienione jako możliwe wyjście (nadzbiór dodawanych)
  added_types     — typy, które reguła może nadać węzłowi, który ich nie miał
  types_finalized — typy, których wyniki/notatki muszą być kompletne, zanim
                    reguła się wykona
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from .common import OutKey, TypeName
from .errors import ConfigurationError
from .lhs import Lhs, TypeInLhs
from .rhs import InwardRhs, OutwardRhs


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Rule:
    """
    Reguła: lhs -> rhs.

    Równość i hash po tożsamości: dwie identycznie zapisane reguły są
    dwiema różnymi regułami (każda wykonuje się osobno).
    """
    lhs: Lhs
    rhs: InwardRhs | OutwardRhs

    def __str__(self) -> str:
        return f"{self.lhs} -> {self.rhs}"

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return self.lhs.types_mentioned

    def _aggregated_types(self) -> tuple[TypeName, ...]:
        aggregated = self.lhs.aggregated_type
        return () if aggregated is None else (aggregated,)


# ---------------------------------------------------------------------------
# InwardRule
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class InwardRule(Rule):
    """Reguła, której fakty wracają do bazy wiedzy dla kolejnych reguł."""
    rhs: InwardRhs

    @cached_property
    def emitted_types(self) -> tuple[TypeName, ...]:
        """
        Typy, które reguła może wyemitować (dodać albo pozostawić na węźle).

        Podnosi ConfigurationError, gdy props() bez type_in() uniemożliwia
        statyczne ustalenie typu.
        """
        could_change_type, possible = self.rhs.possible_emissions()
        left_type = self.lhs.guaranteed_type
        if not could_change_type and left_type is not None:
            # reguła typu A -> A
            return (left_type,)
        if possible:
            return tuple(possible)
        if not could_change_type and isinstance(self.lhs, TypeInLhs):
            # type_in(A, B) -> score(...) zostawia typ, który węzeł już miał
            return self.lhs.types
        raise ConfigurationError(
            f"Could not determine the emitted type of a rule because its right-hand side "
            f"calls props() without calling typeIn(). Rule: {self}"
        )

    @cached_property
    def added_types(self) -> tuple[TypeName, ...]:
        """Typy, które reguła może nadać węzłom, które ich jeszcze nie miały."""
        if not self.rhs.possible_emissions()[0]:
            # bez type()/props() reguła tylko zostawia typy, które węzeł już miał
            return ()
        left_type = self.lhs.guaranteed_type
        return tuple(t for t in self.emitted_types if t != left_type)

    @cached_property
    def types_finalized(self) -> tuple[TypeName, ...]:
        """
        Agregowany typ lewej strony oraz każdy czytany typ, którego reguła
        sama nie emituje.

        A -> B, type_in(A, B) -> C i and(A, B) -> C czekają, aż wyniki
        wejść będą kompletne (np. dla conserve_score() albo callbacków
        score()). A -> A i A -> type_in(A, B) nie czekają na A, bo same
        do niego dokładają.
        """
        finalized = dict.fromkeys(self._aggregated_types())
        for type_name in self.lhs.types_mentioned:
            if type_name not in self.emitted_types:
                finalized[type_name] = None
        return tuple(finalized)


# ---------------------------------------------------------------------------
# OutwardRule
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class OutwardRule(Rule):
    """Reguła out(key): kieruje dopasowane węzły do nazwanego kubełka wyników."""
    rhs: OutwardRhs

    @property
    def key(self) -> OutKey | None:
        return self.rhs.key

    @cached_property
    def types_finalized(self) -> tuple[TypeName, ...]:
        """Reguły wyjściowe finalizują wszystkie typy, które czyta lewa strona."""
        return tuple(dict.fromkeys(self._aggregated_types() + self.lhs.types_mentioned))
