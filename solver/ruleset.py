"""
solver/ruleset.py — niezwiązany zestaw reguł (definicja, bez wykonania).

Ruleset przy konstrukcji:
  - odrzuca reguły o nieustalalnym typie wyjściowym (ConfigurationError)
  - odrzuca zduplikowane klucze out()
  - buduje indeksy typ -> reguły, które mogą go wyemitować / dodać;
    to z nich wynika graf zależności między regułami

Po zbudowaniu Ruleset jest niemutowalny i może być współdzielony przez
dowolną liczbę instancji BoundRuleset (każda ma własną pamięć faktów).
Cykli nie wykrywa: to, czy cykl jest osiągalny, zależy od zapytania.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from data_model.common import OutKey, TypeName
from data_model.errors import ConfigurationError, MissingAdderError, MissingEmitterError
from data_model.rules import InwardRule, OutwardRule, Rule


class Ruleset:
    """
    Zestaw reguł.

    Użycie::

        rules = ruleset(
            rule(dom("p"), type_("para").score(2)),
            rule(type_("para").max(), out("best")),
        )
        facts = rules.against(soup)
        facts.get("best")
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._in_rules: list[InwardRule] = []
        self._out_rules: dict[OutKey, OutwardRule] = {}
        self._could_emit: dict[TypeName, list[InwardRule]] = {}
        self._could_add: dict[TypeName, list[InwardRule]] = {}

        for rule in self._rules:
            match rule:
                case InwardRule():
                    self._in_rules.append(rule)
                    for type_name in rule.emitted_types:
                        self._could_emit.setdefault(type_name, []).append(rule)
                    for type_name in rule.added_types:
                        self._could_add.setdefault(type_name, []).append(rule)
                case OutwardRule():
                    if rule.key in self._out_rules:
                        raise ConfigurationError(
                            f'More than one out() rule has the key "{rule.key}".'
                        )
                    self._out_rules[rule.key] = rule
                case _:
                    raise TypeError(f"This element of ruleset()'s arguments wasn't a rule: {rule!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ruleset):
            return NotImplemented
        return self._rules == other._rules

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<Ruleset {len(self._in_rules)} inward, {len(self._out_rules)} outward>"

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def against(self, doc: Any):
        """Wiąże zestaw reguł z dokumentem lub poddrzewem; zwraca BoundRuleset."""
        from .engine import BoundRuleset
        return BoundRuleset(self, doc)

    def rules(self) -> list[Rule]:
        """Reguły dokładnie w kolejności, w jakiej zostały podane."""
        return list(self._rules)

    def inward_rules(self) -> list[InwardRule]:
        return list(self._in_rules)

    def out_rule(self, key: OutKey) -> OutwardRule | None:
        return self._out_rules.get(key)

    def out_keys(self) -> list[OutKey]:
        return list(self._out_rules)

    def inward_rules_that_could_emit(self, type_name: TypeName) -> list[InwardRule]:
        return list(self._could_emit.get(type_name, ()))

    def inward_rules_that_could_add(self, type_name: TypeName) -> list[InwardRule]:
        return list(self._could_add.get(type_name, ()))

    # ------------------------------------------------------------------
    # Graf zależności
    # ------------------------------------------------------------------

    def prerequisites(self, rule: Rule, strict: bool = True) -> list[InwardRule]:
        """
        Reguły, od których `rule` bezpośrednio zależy.

        Zależy od emiterów każdego typu, który finalizuje, i od adderów
        każdego typu, który czyta lewa strona:
          - A.max() -> *   zależy od wszystkiego, co emituje A
          - A -> A         zależy od wszystkiego, co dodaje A
          - A -> B         zależy od wszystkiego, co emituje A
          - A -> out       zależy od wszystkiego, co emituje A
          - and(A, B) -> C zależy od wszystkiego, co emituje A lub B
          - A -> type_in(A, B) zależy od wszystkiego, co dodaje A

        Args:
            strict: gdy True, brak emitera/addera podnosi MissingEmitterError /
                    MissingAdderError; gdy False, typ jest po prostu pomijany.
        """
        prereqs: dict[InwardRule, None] = {}
        for type_name in rule.types_finalized:
            emitters = self._could_emit.get(type_name)
            if emitters:
                prereqs.update(dict.fromkeys(emitters))
            elif strict:
                raise MissingEmitterError(type_name)
        for type_name in rule.types_mentioned:
            adders = self._could_add.get(type_name)
            if adders:
                prereqs.update(dict.fromkeys(adders))
            elif strict:
                raise MissingAdderError(type_name)
        return list(prereqs)

    def dependents(self, rule: InwardRule) -> list[Rule]:
        """Reguły, których lewa strona konsumuje to, co `rule` emituje."""
        return [
            other for other in self._rules
            if rule in self.prerequisites(other, strict=False)
        ]


def ruleset(*rules: Rule) -> Ruleset:
    """Buduje Ruleset z reguł podanych jako argumenty."""
    return Ruleset(rules)
