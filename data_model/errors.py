"""
data_model/errors.py — hierarchia wyjątków silnika reguł.

Wszystkie błędy dziedziczą po RulesetError, więc wywołujący może złapać
jedną klasę. Błędy planowania (brak emitera/addera, cykl) zgłasza
BoundRuleset.get(), a nie konstruktor Ruleset, bo planowanie jest leniwe
i zależy od zapytania.

Treść komunikatów jest częścią kontraktu (testy porównują ją dosłownie).
"""

from __future__ import annotations


class RulesetError(Exception):
    """Bazowa klasa błędów zestawu reguł."""


class ConfigurationError(RulesetError):
    """Reguła lub zestaw reguł jest źle zbudowany (wykrywane statycznie)."""


class MissingInputError(RulesetError):
    """
    Reguła potrzebuje na wejściu typu, którego żadna reguła nie dostarcza.

    - type: nazwa brakującego typu
    """

    verb = "supplies"

    def __init__(self, type_name: str) -> None:
        self.type = type_name
        super().__init__(
            f'No rule {self.verb} the "{type_name}" type, '
            f"but another rule needs it as input."
        )


class MissingEmitterError(MissingInputError):
    """Żadna reguła nie wymienia typu w swojej prawej stronie."""

    verb = "emits"


class MissingAdderError(MissingInputError):
    """Typ jest emitowany, ale żadna reguła nie nadaje go nowym węzłom."""

    verb = "adds"


class CycleError(RulesetError):
    """Graf przekazany do toposort() zawiera cykl."""


class CyclicDependencyError(CycleError):
    """Reguły potrzebne do odpowiedzi na zapytanie tworzą cykl."""

    def __init__(self, message: str = "There is a cyclic dependency in the ruleset.") -> None:
        super().__init__(message)


class EmptyInputError(RulesetError, ValueError):
    """Redukcja typu best-of (max, best) dostała pusty zbiór kandydatów."""


class FactError(RulesetError):
    """Prawa strona reguły wyprodukowała niedozwolony fakt w czasie wykonania."""
