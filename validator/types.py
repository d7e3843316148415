"""
validator/types.py — kody błędów i struktury raportu walidacji.

ValidationError — pojedynczy błąd z kodem, ścieżką do reguły,
    komunikatem i mechaniczną instrukcją naprawy.
ValidationReport — wynik walidacji: is_valid, errors, warnings,
    liczba sprawdzonych reguł.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stałe kody błędów walidatora (etapy A–D)."""

    # A: budowa zestawu
    NOT_A_RULE               = "E_NOT_A_RULE"
    INDETERMINATE_TYPE       = "E_INDETERMINATE_TYPE"
    DUPLICATE_OUT_KEY        = "E_DUPLICATE_OUT_KEY"

    # B: fakty, które nie mogą się udać w czasie wykonania
    DOM_RULE_WITHOUT_TYPE    = "E_DOM_RULE_WITHOUT_TYPE"
    CONSERVE_WITHOUT_TYPE    = "E_CONSERVE_WITHOUT_TYPE"

    # C: wejścia reguł
    NO_EMITTER               = "E_NO_EMITTER"
    NO_ADDER                 = "E_NO_ADDER"

    # D: cykle
    CYCLE                    = "E_CYCLE"


@dataclass(slots=True)
class ValidationError:
    """
    Pojedynczy błąd walidacji.

    - code:         stały identyfikator klasy błędu (ErrorCode)
    - path:         wskazanie reguły, np. "/rules/3"; "/rules" dla całego zestawu
    - message:      czytelny opis błędu
    - expected_fix: krótka mechaniczna instrukcja naprawy
    - details:      opcjonalny słownik z dodatkowymi danymi (np. nazwa typu)
    """

    code: ErrorCode
    path: str
    message: str
    expected_fix: str
    details: dict[str, Any] | None = None


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik pełnej walidacji zestawu reguł.

    - is_valid:   True gdy brak błędów (warnings nie wpływają)
    - errors:     lista błędów (ValidationError)
    - warnings:   lista komunikatów ostrzegawczych (str)
    - rule_count: liczba sprawdzonych reguł
    """

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    rule_count: int = 0

    def codes(self) -> list[ErrorCode]:
        return [e.code for e in self.errors]
