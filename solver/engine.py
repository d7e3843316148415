"""
solver/engine.py — BoundRuleset: leniwy planista i wykonawca reguł.

BoundRuleset wiąże niemutowalny Ruleset z drzewem (dokumentem albo
poddrzewem) i jest właścicielem całego stanu zapytań:
  - pamięci Fnode'ów (jeden na węzeł, klucz = tożsamość węzła)
  - indeksu typ -> Fnode'y (uzupełnianego w miarę wykonywania reguł)
  - pamięci planów (klucz = zbiory typów, od których plan zależy)
  - kubełków wyników reguł out(key)

Przebieg zapytania get(...):
  1. Zapytanie zamieniane jest na regułę wyjściową (out(key) albo
     syntetyczną regułę ad hoc dla type_(T) / wyrażenia lewej strony).
  2. Planista zbiera domknięcie wymaganych reguł (emitery typów
     finalizowanych, addery typów czytanych) i sortuje je topologicznie.
  3. Wykonawca uruchamia reguły jeszcze niewykonane; każda reguła
     wewnętrzna wykonuje się co najwyżej raz na cały BoundRuleset.
  4. Lewa strona reguły zapytania wybiera wynik.

Wykonanie jest synchroniczne i jednowątkowe; jeden BoundRuleset nie może
być współdzielony przez wątki piszące bez zewnętrznej blokady.
"""

from __future__ import annotations

import logging
from typing import Any

from data_model.common import ClusterOptions, Fact, TypeName
from data_model.errors import CycleError, CyclicDependencyError, FactError
from data_model.lhs import (
    LHS_TYPES,
    AndLhs,
    BestClusterLhs,
    DomLhs,
    Lhs,
    TypeInLhs,
    TypeLhs,
    TypeMaxLhs,
)
from data_model.rhs import OutwardRhs
from data_model.rules import InwardRule, OutwardRule, Rule
from data_model.sides import Side
from html_parser.dom import is_dom_element

from .clusters import clusters, distance
from .fnode import Fnode
from .graph import toposort
from .ruleset import Ruleset
from .utils import max_by

logger = logging.getLogger(__name__)

# Klucz planu: (typy finalizowane, typy czytane przez lewą stronę)
type PlanKey = tuple[frozenset[TypeName], frozenset[TypeName]]


class BoundRuleset:
    """
    Ruleset związany z konkretnym drzewem.

    Użycie::

        facts = rules.against(soup)
        facts.get("best")               # kubełek reguły out("best")
        facts.get(type_("para").max())  # wyrażenie lewej strony
        facts.get(soup.body).score_for("para")
    """

    def __init__(self, ruleset: Ruleset, doc: Any) -> None:
        self.ruleset = ruleset
        self.doc = doc
        self._fnodes: dict[int, Fnode] = {}
        self._type_index: dict[TypeName, dict[Fnode, None]] = {}
        self._plans: dict[PlanKey, list[InwardRule]] = {}
        self._done_rules: dict[InwardRule, None] = {}
        self._finalized: set[TypeName] = set()
        self._finalizing: set[TypeName] = set()
        self._out_buckets: dict[str, list[Any]] = {}

    def __repr__(self) -> str:
        return (
            f"<BoundRuleset fnodes={len(self._fnodes)} "
            f"done={len(self._done_rules)}/{len(self.ruleset.inward_rules())}>"
        )

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def get(self, thing: Any) -> Any:
        """
        Odpowiada na zapytanie, uruchamiając najpierw potrzebne reguły.

        Args:
            thing: jedno z
                   - klucz reguły out(key)         -> lista wyników reguły
                   - inna nazwa (str)              -> jak type_(nazwa)
                   - węzeł drzewa (bs4.Tag)        -> jego Fnode
                   - Side / Lhs, np. type_("a").max() -> lista Fnode'ów

        Raises:
            MissingEmitterError, MissingAdderError, CyclicDependencyError:
                gdy plan zapytania nie da się zbudować.
            TypeError: gdy thing nie jest żadnym z powyższych.
        """
        if is_dom_element(thing):
            return self._complete_fnode(thing)
        return self._execute(self._query_rule(thing))

    def plan(self, thing: Any) -> list[InwardRule]:
        """
        Reguły wewnętrzne, których potrzebuje zapytanie, w kolejności wykonania.

        Nic nie wykonuje; zwraca pełny plan, również reguły już wykonane.
        """
        return list(self._plan_for(self._query_rule(thing)))

    def done_rules(self) -> list[InwardRule]:
        """Reguły wewnętrzne, które już się wykonały, w kolejności wykonania."""
        return list(self._done_rules)

    def fnode_for_element(self, element: Any) -> Fnode:
        """Zwraca (tworząc w razie potrzeby) Fnode węzła; niczego nie wykonuje."""
        fnode = self._fnodes.get(id(element))
        if fnode is None:
            fnode = Fnode(element, self)
            self._fnodes[id(element)] = fnode
        return fnode

    def ensure_type(self, type_name: TypeName) -> None:
        """
        Uruchamia wszystkie reguły potrzebne do sfinalizowania typu.

        Typ w trakcie finalizacji jest pomijany: callback reguły A -> A,
        który czyta wynik A, widzi wynik cząstkowy zamiast wpaść w rekursję.
        """
        if type_name in self._finalized or type_name in self._finalizing:
            return
        self._run_prerequisites(_query_rule_for_lhs(TypeLhs(type_name)))

    def inward_rules_that_could_emit(self, type_name: TypeName) -> list[InwardRule]:
        return self.ruleset.inward_rules_that_could_emit(type_name)

    def inward_rules_that_could_add(self, type_name: TypeName) -> list[InwardRule]:
        return self.ruleset.inward_rules_that_could_add(type_name)

    # ------------------------------------------------------------------
    # Zapytania
    # ------------------------------------------------------------------

    def _query_rule(self, thing: Any) -> OutwardRule:
        match thing:
            case str():
                out_rule = self.ruleset.out_rule(thing)
                if out_rule is not None:
                    return out_rule
                return _query_rule_for_lhs(TypeLhs(thing))
            case Side():
                return _query_rule_for_lhs(thing.as_lhs())
            case _ if isinstance(thing, LHS_TYPES):
                return _query_rule_for_lhs(thing)
        raise TypeError(
            "get() expects a string, an expression like on the left-hand side "
            f"of a rule, or a tree node, not {thing!r}."
        )

    def _complete_fnode(self, element: Any) -> Fnode:
        """Fnode węzła po sfinalizowaniu wszystkich typów, które już ma (także nowo dodanych)."""
        fnode = self.fnode_for_element(element)
        ensured: set[TypeName] = set()
        while pending := [t for t in fnode.types_so_far() if t not in ensured]:
            for type_name in pending:
                ensured.add(type_name)
                self.ensure_type(type_name)
        return fnode

    def _execute(self, rule: OutwardRule) -> list[Any]:
        if rule.key is not None and rule.key in self._out_buckets:
            logger.debug("Wynik out(%r) z pamięci", rule.key)
            return list(self._out_buckets[rule.key])
        self._run_prerequisites(rule)
        fnodes = self._select(rule.lhs)
        rhs = rule.rhs
        results = list(rhs.all_through_callback([rhs.through_callback(f) for f in fnodes]))
        if rule.key is not None:
            self._out_buckets[rule.key] = results
        return list(results)

    # ------------------------------------------------------------------
    # Planista
    # ------------------------------------------------------------------

    def _plan_for(self, rule: Rule) -> list[InwardRule]:
        key: PlanKey = (frozenset(rule.types_finalized), frozenset(rule.types_mentioned))
        cached = self._plans.get(key)
        if cached is not None:
            logger.debug("Plan dla %s z pamięci (%d reguł)", rule.lhs, len(cached))
            return cached

        # Typ zapytania, którego nikt nie emituje, daje pusty wynik;
        # brak wejścia dla reguły pośredniej jest błędem.
        undone = self._prerequisites_to(rule, strict=False)
        try:
            ordered = toposort(undone, lambda prereq: undone[prereq])
        except CycleError:
            raise CyclicDependencyError() from None
        plan = list(reversed(ordered))

        self._plans[key] = plan
        logger.debug(
            "Plan dla %s: %s",
            rule.lhs,
            " | ".join(str(r) for r in plan) or "(pusty)",
        )
        return plan

    def _prerequisites_to(
        self,
        rule: Rule,
        undone: dict[InwardRule, list[Rule]] | None = None,
        strict: bool = True,
    ) -> dict[InwardRule, list[Rule]]:
        """
        Domknięcie wymagań reguły: prereq -> reguły, które go potrzebują.

        Kolejność kluczy to kolejność odkrycia (deterministyczna dla
        ustalonej kolejności reguł w Ruleset).
        """
        if undone is None:
            undone = {}
        for prereq in self.ruleset.prerequisites(rule, strict=strict):
            already_added = prereq in undone
            undone.setdefault(prereq, []).append(rule)
            if not already_added:
                self._prerequisites_to(prereq, undone)
        return undone

    # ------------------------------------------------------------------
    # Wykonawca
    # ------------------------------------------------------------------

    def _run_prerequisites(self, rule: Rule) -> None:
        plan = self._plan_for(rule)
        finalizing = [t for t in rule.types_finalized if t not in self._finalizing]
        self._finalizing.update(finalizing)
        try:
            for each in plan:
                if each not in self._done_rules:
                    self._run_inward(each)
        finally:
            self._finalizing.difference_update(finalizing)
        self._finalized.update(rule.types_finalized)

    def _run_inward(self, rule: InwardRule) -> None:
        # Zaznaczone przed wykonaniem: zapytanie zagnieżdżone w callbacku
        # nie uruchomi tej samej reguły drugi raz.
        self._done_rules[rule] = None
        fnodes = self._select(rule.lhs)
        logger.debug("Reguła %s: %d dopasowanych węzłów", rule, len(fnodes))
        for fnode in fnodes:
            left_type = _left_type(rule.lhs, fnode)
            fact = rule.rhs.fact(fnode, left_type)
            self._merge(rule, fnode, fact, left_type)

    def _merge(self, rule: InwardRule, fnode: Fnode, fact: Fact, left_type: TypeName | None) -> None:
        """Wpisuje fragment faktu do Fnode'a docelowego i indeksu typów."""
        target = fnode if fact.element is None else self.fnode_for_element(fact.element)
        right_type = fact.type or left_type
        if right_type is None:
            raise FactError(
                f"Rule {rule} didn't return a type for {fnode!r}, "
                f"and its left-hand side doesn't guarantee one."
            )
        if fact.conserve_score:
            if left_type is None:
                raise FactError(
                    "conserve_score() was called in a rule whose left-hand side is a dom() "
                    "selector and thus has no predictable type."
                )
            target.conserve_score_from(fnode, left_type, right_type)
        if fact.score is not None:
            target.add_score_for(right_type, fact.score)
        target.set_note_for(right_type, fact.note)
        if rule.rhs.max_score is not None:
            target.cap_score_for(right_type, rule.rhs.max_score)
        self._type_index.setdefault(right_type, {})[target] = None

    # ------------------------------------------------------------------
    # Dopasowanie lewej strony
    # ------------------------------------------------------------------

    def _select(self, lhs: Lhs) -> list[Fnode]:
        """Fnode'y wybrane przez lewą stronę (po when(), przed i po redukcji)."""
        match lhs:
            case DomLhs(selector=selector):
                candidates = [self.fnode_for_element(el) for el in self.doc.select(selector)]
            case TypeLhs(type=type_name) | TypeMaxLhs(type=type_name) | BestClusterLhs(type=type_name):
                candidates = self._fnodes_of_type(type_name)
            case TypeInLhs(types=types):
                seen: dict[Fnode, None] = {}
                for type_name in types:
                    seen.update(self._type_index.get(type_name, {}))
                candidates = list(seen)
            case AndLhs(operands=operands):
                first, *rest = operands
                candidates = [
                    f for f in self._fnodes_of_type(first.type)
                    if all(f.has_type_so_far(op.type) for op in rest)
                ]
            case _:
                raise TypeError(f"Unknown left-hand side: {lhs!r}")

        if lhs.when is not None:
            candidates = [f for f in candidates if lhs.when(f)]

        match lhs:
            case TypeMaxLhs(type=type_name):
                if not candidates:
                    return []
                return [max_by(candidates, lambda f: f.score_so_far_for(type_name))]
            case BestClusterLhs(type=type_name, options=options):
                return self._best_cluster(candidates, type_name, options)
        return candidates

    def _fnodes_of_type(self, type_name: TypeName) -> list[Fnode]:
        return list(self._type_index.get(type_name, {}))

    @staticmethod
    def _best_cluster(candidates: list[Fnode], type_name: TypeName, options: ClusterOptions) -> list[Fnode]:
        if not candidates:
            return []
        groups = clusters(
            candidates,
            options.splitting_distance,
            lambda a, b: distance(a, b, options),
        )
        return max_by(groups, lambda group: sum(f.score_so_far_for(type_name) for f in group))


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _query_rule_for_lhs(lhs: Lhs) -> OutwardRule:
    """Syntetyczna reguła ad hoc: lhs -> out(None)."""
    return OutwardRule(lhs, OutwardRhs(None))


def _left_type(lhs: Lhs, fnode: Fnode) -> TypeName | None:
    """
    Typ wejściowy dla jednego dopasowanego węzła.

    Dla type_in(A, B) jest to pierwszy z wymienionych typów, który węzeł ma.
    """
    if lhs.guaranteed_type is not None:
        return lhs.guaranteed_type
    if isinstance(lhs, TypeInLhs):
        return next((t for t in lhs.types if fnode.has_type_so_far(t)), None)
    return None
