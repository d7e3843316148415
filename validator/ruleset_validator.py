"""
validator/ruleset_validator.py — statyczna walidacja zestawu reguł.

RulesetValidator.validate(rules) -> ValidationReport

W przeciwieństwie do Ruleset i BoundRuleset walidator niczego nie podnosi:
zbiera wszystkie problemy naraz, a reguły odrzucone na wczesnym etapie
są pomijane w kolejnych.

Etapy:
  A — budowa zestawu      (czy to reguła, ustalalny typ, unikalne klucze out)
  B — fakty               (dom() bez typu, conserve_score() bez typu wejściowego)
  C — wejścia             (brak emitera / addera typu czytanego przez regułę)
  D — cykle               (w całym grafie zależności, nie tylko dla jednego zapytania)
Ostrzeżenia: reguły wewnętrzne, których nie potrzebuje żadna reguła out().
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from data_model.errors import ConfigurationError, CycleError, MissingAdderError, MissingInputError
from data_model.lhs import DomLhs, TypeInLhs
from data_model.rules import InwardRule, OutwardRule, Rule
from solver.graph import toposort
from solver.ruleset import Ruleset

from .types import ErrorCode, ValidationError, ValidationReport

# Limit błędów: po przekroczeniu przerywamy dalsze etapy
MAX_ERRORS = 50


def _path(index: int) -> str:
    return f"/rules/{index}"


class RulesetValidator:
    """
    Walidator zestawu reguł.

    Użycie::

        report = RulesetValidator().validate(rules)   # Ruleset albo lista reguł
        if not report.is_valid:
            for e in report.errors:
                print(e.code, e.path, e.message)
    """

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def validate(self, rules: Ruleset | Iterable[Any]) -> ValidationReport:
        items = rules.rules() if isinstance(rules, Ruleset) else list(rules)
        errors: list[ValidationError] = []
        warnings: list[str] = []

        # A: budowa zestawu
        accepted = self._stage_construction(items, errors)

        # B: fakty
        self._stage_facts(accepted, errors)

        ruleset = Ruleset(rule for _, rule in accepted)
        index_of = {rule: i for i, rule in accepted}

        # C: wejścia
        if len(errors) < MAX_ERRORS:
            self._stage_inputs(ruleset, index_of, errors, warnings)

        # D: cykle
        if len(errors) < MAX_ERRORS:
            self._stage_cycles(ruleset, index_of, errors)

        self._warn_unreachable(ruleset, index_of, warnings)

        return ValidationReport(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            rule_count=len(items),
        )

    # ------------------------------------------------------------------
    # Etap A: budowa zestawu
    # ------------------------------------------------------------------

    def _stage_construction(
        self,
        items: list[Any],
        errors: list[ValidationError],
    ) -> list[tuple[int, Rule]]:
        accepted: list[tuple[int, Rule]] = []
        out_keys: dict[str, int] = {}

        for i, item in enumerate(items):
            if not isinstance(item, Rule):
                errors.append(ValidationError(
                    code=ErrorCode.NOT_A_RULE,
                    path=_path(i),
                    message=f"Element zestawu nie jest regułą: {item!r}",
                    expected_fix="Zbuduj element funkcją rule(lhs, rhs).",
                ))
                continue

            if isinstance(item, InwardRule):
                try:
                    item.emitted_types
                except ConfigurationError as exc:
                    errors.append(ValidationError(
                        code=ErrorCode.INDETERMINATE_TYPE,
                        path=_path(i),
                        message=str(exc),
                        expected_fix="Dodaj type(...) albo type_in(...) do prawej strony reguły.",
                    ))
                    continue

            if isinstance(item, OutwardRule):
                first = out_keys.get(item.key)
                if first is not None:
                    errors.append(ValidationError(
                        code=ErrorCode.DUPLICATE_OUT_KEY,
                        path=_path(i),
                        message=f"Klucz out({item.key!r}) jest już użyty przez regułę {_path(first)}.",
                        expected_fix="Nadaj regule out() unikalny klucz.",
                        details={"key": item.key, "first": first},
                    ))
                    continue
                out_keys[item.key] = i

            accepted.append((i, item))
        return accepted

    # ------------------------------------------------------------------
    # Etap B: fakty
    # ------------------------------------------------------------------

    def _stage_facts(self, accepted: list[tuple[int, Rule]], errors: list[ValidationError]) -> None:
        for i, rule in accepted:
            if not isinstance(rule, InwardRule):
                continue
            could_change_type, _ = rule.rhs.possible_emissions()

            if isinstance(rule.lhs, DomLhs) and not could_change_type:
                errors.append(ValidationError(
                    code=ErrorCode.DOM_RULE_WITHOUT_TYPE,
                    path=_path(i),
                    message=f"Reguła {rule} zaczyna się od dom(), ale nie nadaje węzłom typu.",
                    expected_fix="Dodaj type(...) albo props(...) zwracające 'type' do prawej strony.",
                ))

            if (
                rule.rhs.conserves_score
                and rule.lhs.guaranteed_type is None
                and not isinstance(rule.lhs, TypeInLhs)
            ):
                errors.append(ValidationError(
                    code=ErrorCode.CONSERVE_WITHOUT_TYPE,
                    path=_path(i),
                    message=(
                        f"Reguła {rule} wywołuje conserve_score(), ale jej lewa strona "
                        "nie ma przewidywalnego typu."
                    ),
                    expected_fix="Usuń conserve_score() albo zacznij lewą stronę od type(...).",
                ))

    # ------------------------------------------------------------------
    # Etap C: wejścia
    # ------------------------------------------------------------------

    def _stage_inputs(
        self,
        ruleset: Ruleset,
        index_of: dict[Rule, int],
        errors: list[ValidationError],
        warnings: list[str],
    ) -> None:
        for rule, i in index_of.items():
            try:
                ruleset.prerequisites(rule, strict=True)
            except MissingInputError as exc:
                if isinstance(rule, OutwardRule):
                    # zapytanie o taki typ zwraca po prostu pustą listę
                    warnings.append(f"{_path(i)}: out({rule.key!r}) zawsze będzie pusty: {exc}")
                    continue
                if isinstance(exc, MissingAdderError):
                    errors.append(ValidationError(
                        code=ErrorCode.NO_ADDER,
                        path=_path(i),
                        message=str(exc),
                        expected_fix=f"Dodaj regułę, która nadaje typ {exc.type!r} nowym węzłom (np. dom(...) -> type({exc.type!r})).",
                        details={"type": exc.type},
                    ))
                    continue
                errors.append(ValidationError(
                    code=ErrorCode.NO_EMITTER,
                    path=_path(i),
                    message=str(exc),
                    expected_fix=f"Dodaj regułę, która emituje typ {exc.type!r}, albo usuń tę regułę.",
                    details={"type": exc.type},
                ))

    # ------------------------------------------------------------------
    # Etap D: cykle
    # ------------------------------------------------------------------

    def _stage_cycles(
        self,
        ruleset: Ruleset,
        index_of: dict[Rule, int],
        errors: list[ValidationError],
    ) -> None:
        needers: dict[Rule, list[Rule]] = {rule: [] for rule in index_of}
        for rule in index_of:
            for prereq in ruleset.prerequisites(rule, strict=False):
                needers[prereq].append(rule)

        try:
            toposort(index_of, lambda rule: needers[rule])
        except CycleError:
            on_cycle = [index_of[r] for r in index_of if _reaches_itself(r, needers)]
            errors.append(ValidationError(
                code=ErrorCode.CYCLE,
                path="/rules",
                message=f"Reguły {', '.join(_path(i) for i in on_cycle)} tworzą cykl zależności.",
                expected_fix="Rozbij cykl, np. zmieniając typ wyjściowy jednej z reguł.",
                details={"rules": on_cycle},
            ))

    # ------------------------------------------------------------------
    # Ostrzeżenia
    # ------------------------------------------------------------------

    def _warn_unreachable(self, ruleset: Ruleset, index_of: dict[Rule, int], warnings: list[str]) -> None:
        out_rules = [r for r in index_of if isinstance(r, OutwardRule)]
        if not out_rules:
            return
        reachable: set[Rule] = set()
        todo: list[Rule] = list(out_rules)
        while todo:
            rule = todo.pop()
            for prereq in ruleset.prerequisites(rule, strict=False):
                if prereq not in reachable:
                    reachable.add(prereq)
                    todo.append(prereq)
        for rule, i in index_of.items():
            if isinstance(rule, InwardRule) and rule not in reachable:
                warnings.append(f"{_path(i)}: reguła {rule} nie jest potrzebna żadnej regule out()")


def _reaches_itself(start: Rule, needers: dict[Rule, list[Rule]]) -> bool:
    seen: set[Rule] = set()
    todo = list(needers[start])
    while todo:
        rule = todo.pop()
        if rule is start:
            return True
        if rule not in seen:
            seen.add(rule)
            todo.extend(needers[rule])
    return False
