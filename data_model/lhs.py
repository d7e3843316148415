"""
data_model/lhs.py — warianty lewej strony reguły (warunek wejściowy).

Lewa strona jest niemutowalnym opisem; samo dopasowanie węzłów wykonuje
solver (BoundRuleset), który rozpoznaje warianty przez `match`.

Warianty:
  DomLhs         — dom(selector): węzły drzewa pasujące do selektora CSS
  TypeLhs        — type_(T): węzły, które mają już typ T
  TypeInLhs      — type_in(A, B, ...): węzły z dowolnym z typów
  AndLhs         — and_(type_(A), type_(B), ...): węzły z każdym z typów
  TypeMaxLhs     — type_(T).max(): jeden węzeł o najwyższym wyniku dla T
  BestClusterLhs — type_(T).best_cluster(): najlepszy klaster węzłów typu T

Metadane statyczne (używane przez planistę):
  guaranteed_type — jedyny typ, który na pewno mają wybrane węzły (albo None)
  aggregated_type — typ agregowany przez max()/best_cluster() (albo None)
  types_mentioned — typy, które lewa strona czyta
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .common import ClusterOptions, TypeName
from .errors import ConfigurationError

# Predykat when(): dostaje Fnode, zwraca bool
type Predicate = Callable[[Any], bool]


def describe_callable(fn: Any) -> str:
    """Krótka nazwa callbacku do komunikatów i tabel CLI."""
    return getattr(fn, "__name__", None) or repr(fn)


def _when_suffix(when: Predicate | None) -> str:
    return "" if when is None else f".when({describe_callable(when)})"


# ---------------------------------------------------------------------------
# Mixin: wspólne metody wariantów
# ---------------------------------------------------------------------------

class _LhsMethods:
    """Metody wspólne dla wszystkich wariantów (dataclassy frozen)."""

    __slots__ = ()

    guaranteed_type: TypeName | None = None
    aggregated_type: TypeName | None = None

    def filtered(self, predicate: Predicate):
        """Zwraca kopię lewej strony z filtrem when() na poziomie węzła."""
        return dataclasses.replace(self, when=predicate)

    def max(self):
        raise ConfigurationError(
            f"max() can follow only a plain type() call, not {self}."
        )

    def best_cluster(self, options: ClusterOptions | dict[str, Any] | None = None, **kwargs: Any):
        raise ConfigurationError(
            f"best_cluster() can follow only a plain type() call, not {self}."
        )

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return ()


# ---------------------------------------------------------------------------
# Warianty
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DomLhs(_LhsMethods):
    """dom(selector) — dopasowanie selektorem CSS w związanym poddrzewie."""
    selector: str
    when: Predicate | None = None

    def __post_init__(self) -> None:
        if not self.selector:
            raise ConfigurationError("A CSS selector is required as the argument to dom().")

    def __str__(self) -> str:
        return f"dom({self.selector!r}){_when_suffix(self.when)}"


@dataclass(frozen=True, slots=True)
class TypeLhs(_LhsMethods):
    """type_(T) — węzły, którym jakaś reguła nadała już typ T."""
    type: TypeName
    when: Predicate | None = None

    def __post_init__(self) -> None:
        if not self.type:
            raise ConfigurationError("A type name is required when calling type().")

    def max(self) -> TypeMaxLhs:
        return TypeMaxLhs(self.type, self.when)

    def best_cluster(self, options: ClusterOptions | dict[str, Any] | None = None, **kwargs: Any) -> BestClusterLhs:
        return BestClusterLhs(self.type, ClusterOptions.coerce(options, **kwargs), self.when)

    @property
    def guaranteed_type(self) -> TypeName:
        return self.type

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return (self.type,)

    def __str__(self) -> str:
        return f"type({self.type!r}){_when_suffix(self.when)}"


@dataclass(frozen=True, slots=True)
class TypeInLhs(_LhsMethods):
    """type_in(A, B, ...) — węzły z co najmniej jednym z typów."""
    types: tuple[TypeName, ...]
    when: Predicate | None = None

    def __post_init__(self) -> None:
        if not self.types:
            raise ConfigurationError("type_in() on a left-hand side needs at least one type.")

    @property
    def guaranteed_type(self) -> TypeName | None:
        return self.types[0] if len(self.types) == 1 else None

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return self.types

    def __str__(self) -> str:
        return f"type_in({', '.join(map(repr, self.types))}){_when_suffix(self.when)}"


@dataclass(frozen=True, slots=True)
class AndLhs(_LhsMethods):
    """
    and_(type_(A), type_(B), ...) — przecięcie po tożsamości węzła.

    Operandami mogą być wyłącznie proste type_(); planista może przy tym
    uruchomić więcej reguł, niż jest ściśle potrzebne.
    """
    operands: tuple[TypeLhs, ...]
    when: Predicate | None = None

    def __post_init__(self) -> None:
        if not self.operands:
            raise ConfigurationError("and() needs at least one type() argument.")
        for operand in self.operands:
            if type(operand) is not TypeLhs or operand.when is not None:
                raise ConfigurationError("and() supports only simple type() calls as arguments for now.")

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return tuple(dict.fromkeys(op.type for op in self.operands))

    def __str__(self) -> str:
        return f"and({', '.join(map(str, self.operands))}){_when_suffix(self.when)}"


@dataclass(frozen=True, slots=True)
class TypeMaxLhs(_LhsMethods):
    """type_(T).max() — jeden węzeł o najwyższym wyniku dla T (remis: pierwszy)."""
    type: TypeName
    when: Predicate | None = None

    @property
    def guaranteed_type(self) -> TypeName:
        return self.type

    @property
    def aggregated_type(self) -> TypeName:
        return self.type

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return (self.type,)

    def __str__(self) -> str:
        return f"type({self.type!r}){_when_suffix(self.when)}.max()"


@dataclass(frozen=True, slots=True)
class BestClusterLhs(_LhsMethods):
    """type_(T).best_cluster(options) — klaster węzłów T o największej sumie wyników."""
    type: TypeName
    options: ClusterOptions = ClusterOptions()
    when: Predicate | None = None

    @property
    def guaranteed_type(self) -> TypeName:
        return self.type

    @property
    def aggregated_type(self) -> TypeName:
        return self.type

    @property
    def types_mentioned(self) -> tuple[TypeName, ...]:
        return (self.type,)

    def __str__(self) -> str:
        return f"type({self.type!r}){_when_suffix(self.when)}.best_cluster()"


type Lhs = DomLhs | TypeLhs | TypeInLhs | AndLhs | TypeMaxLhs | BestClusterLhs

LHS_TYPES = (DomLhs, TypeLhs, TypeInLhs, AndLhs, TypeMaxLhs, BestClusterLhs)
