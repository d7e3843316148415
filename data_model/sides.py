"""
data_model/sides.py — łańcuchy wywołań i ich kompilacja do Lhs/Rhs.

Side zapisuje kolejne wywołania jako krotki (metoda, argumenty). O tym, czy
łańcuch jest lewą czy prawą stroną, decyduje dopiero jego pozycja w rule():
  compile_lhs(calls) -> Lhs
  compile_rhs(calls) -> InwardRhs
Obie funkcje walidują łańcuch niezależnie, więc type_('a') może rozpoczynać
zarówno lewą, jak i prawą stronę.

Publiczne konstruktory:
  dom, type_, type_in, and_, props, score, at_most, note, conserve_score, out
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .common import ClusterOptions, OutKey, TypeName
from .errors import ConfigurationError
from .lhs import LHS_TYPES, AndLhs, DomLhs, Lhs, TypeInLhs, TypeLhs
from .rhs import InwardRhs, OutwardRhs
from .rules import InwardRule, OutwardRule, Rule


@dataclass(frozen=True, slots=True)
class Call:
    """Zapisane wywołanie: np. Call("dom", ("p.smoo",))."""
    method: str
    args: tuple[Any, ...] = ()


class Side:
    """
    Łańcuch wywołań, który da się skompilować do Lhs albo Rhs.

    Każda metoda zwraca nowy Side; istniejące łańcuchy są niemutowalne.
    """

    __slots__ = ("calls",)

    def __init__(self, *calls: Call) -> None:
        self.calls: tuple[Call, ...] = calls

    def _and(self, method: str, *args: Any) -> Side:
        return Side(*self.calls, Call(method, args))

    def max(self) -> Side:
        return self._and("max")

    def best_cluster(self, options: ClusterOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> Side:
        return self._and("best_cluster", ClusterOptions.coerce(options, **kwargs))

    def props(self, callback: Callable[[Any], Mapping[str, Any]]) -> Side:
        return self._and("props", callback)

    def type(self, type_name: TypeName) -> Side:
        return self._and("type", type_name)

    def type_in(self, *types: TypeName) -> Side:
        return self._and("type_in", *types)

    def note(self, callback: Callable[[Any], Any]) -> Side:
        return self._and("note", callback)

    def score(self, score_or_callback: float | Callable[[Any], float]) -> Side:
        return self._and("score", score_or_callback)

    def at_most(self, score: float) -> Side:
        return self._and("at_most", score)

    def conserve_score(self) -> Side:
        return self._and("conserve_score")

    def and_(self, *lhss: Side | Lhs) -> Side:
        return self._and("and", *lhss)

    def when(self, predicate: Callable[[Any], bool]) -> Side:
        return self._and("when", predicate)

    def as_lhs(self) -> Lhs:
        return compile_lhs(self.calls)

    def as_rhs(self) -> InwardRhs:
        return compile_rhs(self.calls)

    def __repr__(self) -> str:
        return "Side(" + ".".join(f"{c.method}{c.args!r}" for c in self.calls) + ")"


# ---------------------------------------------------------------------------
# Kompilacja
# ---------------------------------------------------------------------------

def _operand_to_type_lhs(operand: Side | Lhs) -> TypeLhs:
    lhs = as_lhs(operand)
    if type(lhs) is not TypeLhs:
        raise ConfigurationError("and() supports only simple type() calls as arguments for now.")
    return lhs


def compile_lhs(calls: Iterable[Call]) -> Lhs:
    """
    Kompiluje zapisany łańcuch do lewej strony.

    Pierwsze wywołanie musi być dom(), type(), type_in() albo and();
    kolejne mogą być tylko modyfikatorami max(), best_cluster() i when().
    """
    calls = tuple(calls)
    if not calls:
        raise ConfigurationError("An empty chain cannot be a left-hand side.")
    first, rest = calls[0], calls[1:]
    match first.method:
        case "dom":
            lhs: Lhs = DomLhs(*first.args)
        case "type":
            lhs = TypeLhs(*first.args)
        case "type_in":
            lhs = TypeInLhs(tuple(first.args))
        case "and":
            lhs = AndLhs(tuple(_operand_to_type_lhs(a) for a in first.args))
        case _:
            raise ConfigurationError(
                "The left-hand side of a rule() must start with dom(), type(), type_in() or and()."
            )
    for call in rest:
        match call.method:
            case "max":
                lhs = lhs.max()
            case "best_cluster":
                lhs = lhs.best_cluster(*call.args)
            case "when":
                lhs = lhs.filtered(*call.args)
            case "type" if isinstance(lhs, TypeLhs):
                # type('a').type('b') nadpisuje wcześniejszy typ
                lhs = TypeLhs(call.args[0], lhs.when)
            case _:
                raise ConfigurationError(
                    f"{call.method}() cannot be used on the left-hand side of a rule."
                )
    return lhs


def compile_rhs(calls: Iterable[Call]) -> InwardRhs:
    """Kompiluje zapisany łańcuch do prawej strony reguły wewnętrznej."""
    rhs = InwardRhs()
    for call in calls:
        match call.method:
            case "props":
                rhs = rhs.props(*call.args)
            case "type":
                rhs = rhs.type(*call.args)
            case "type_in":
                rhs = rhs.type_in(*call.args)
            case "note":
                rhs = rhs.note(*call.args)
            case "score":
                rhs = rhs.score(*call.args)
            case "at_most":
                rhs = rhs.at_most(*call.args)
            case "conserve_score":
                rhs = rhs.conserve_score()
            case _:
                raise ConfigurationError(
                    f"{call.method}() cannot be used on the right-hand side of a rule."
                )
    return rhs


def as_lhs(thing: Side | Lhs) -> Lhs:
    if isinstance(thing, Side):
        return thing.as_lhs()
    if isinstance(thing, LHS_TYPES):
        return thing
    raise ConfigurationError(f"Expected a left-hand-side expression, got {thing!r}.")


def as_rhs(thing: Side | InwardRhs | OutwardRhs) -> InwardRhs | OutwardRhs:
    if isinstance(thing, Side):
        return thing.as_rhs()
    if isinstance(thing, (InwardRhs, OutwardRhs)):
        return thing
    raise ConfigurationError(f"Expected a right-hand-side expression, got {thing!r}.")


# ---------------------------------------------------------------------------
# Konstruktory publiczne
# ---------------------------------------------------------------------------

def dom(selector: str) -> Side:
    """Dopasowuje węzły drzewa selektorem CSS."""
    return Side(Call("dom", (selector,)))


def type_(type_name: TypeName) -> Side:
    """Ogranicza do typu wejściowego po lewej stronie albo nadaje typ po prawej."""
    return Side(Call("type", (type_name,)))


def type_in(*types: TypeName) -> Side:
    return Side(Call("type_in", types))


def and_(*lhss: Side | Lhs) -> Side:
    """
    Eksperymentalne. Węzły spełniające kilka warunków jednocześnie.

    Na przykład: ``and_(type_('title'), type_('english'))``

    Zastrzeżenia: argumentami mogą być tylko proste type_(), a planista może
    uruchomić więcej reguł, niż jest ściśle potrzebne. ``or`` można wyrazić
    dwiema regułami o identycznych prawych stronach.
    """
    return Side(Call("and", lhss))


def props(callback: Callable[[Any], Mapping[str, Any]]) -> Side:
    return Side(Call("props", (callback,)))


def note(callback: Callable[[Any], Any]) -> Side:
    return Side(Call("note", (callback,)))


def score(score_or_callback: float | Callable[[Any], float]) -> Side:
    return Side(Call("score", (score_or_callback,)))


def at_most(score: float) -> Side:
    return Side(Call("at_most", (score,)))


def conserve_score() -> Side:
    return Side(Call("conserve_score"))


def out(key: OutKey) -> OutwardRhs:
    """Kieruje wyniki reguły do kubełka ``key`` zamiast do grafu faktów."""
    return OutwardRhs(key)


def rule(lhs: Side | Lhs, rhs: Side | InwardRhs | OutwardRhs) -> Rule:
    """Składa regułę z lewej i prawej strony."""
    compiled_lhs = as_lhs(lhs)
    compiled_rhs = as_rhs(rhs)
    if isinstance(compiled_rhs, OutwardRhs):
        return OutwardRule(compiled_lhs, compiled_rhs)
    return InwardRule(compiled_lhs, compiled_rhs)
