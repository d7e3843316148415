"""
Wspólne typy pierwotne używane przez lhs, rhs i rules.

Fact          — fragment faktu zwracany przez prawą stronę reguły
ClusterOptions — parametry grupowania dla type_(T).best_cluster()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# Nazwa typu faktu, np. "paragraphish"
type TypeName = str

# Klucz reguły wyjściowej out(key)
type OutKey = str


# ---------------------------------------------------------------------------
# Fact
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Fact:
    """
    Fragment faktu: wynik jednego wykonania prawej strony reguły dla węzła.

    - element:        węzeł docelowy; None → węzeł dopasowany przez lewą stronę
    - type:           typ nadawany węzłowi; None → dziedziczony z lewej strony
    - score:          mnożnik wyniku dla typu; None → bez zmiany wyniku
    - note:           notatka dla (element, typ); None → brak notatki
    - conserve_score: czy wmnożyć wynik typu wejściowego (conserve_score())
    """
    element: Any = None
    type: TypeName | None = None
    score: float | None = None
    note: Any = None
    conserve_score: bool = False


# ---------------------------------------------------------------------------
# ClusterOptions
# ---------------------------------------------------------------------------

def _no_additional_cost(a: Any, b: Any) -> float:
    return 0


@dataclass(frozen=True, slots=True)
class ClusterOptions:
    """
    Koszty odległości topologicznej i próg podziału klastrów.

    - splitting_distance:   najmniejsza odległość, przy której klastry nie są łączone
    - different_depth_cost: koszt każdego poziomu, o który jeden węzeł jest głębiej
    - different_tag_cost:   koszt poziomu poniżej wspólnego przodka o różnych tagach
    - same_tag_cost:        koszt poziomu poniżej wspólnego przodka o tych samych tagach
    - stride_cost:          koszt każdego węzła "kroku" leżącego pomiędzy węzłami
    - additional_cost:      dodatkowy koszt dla pary węzłów (lub fnode'ów)
    """
    splitting_distance: float = 3
    different_depth_cost: float = 2
    different_tag_cost: float = 2
    same_tag_cost: float = 1
    stride_cost: float = 1
    additional_cost: Callable[[Any, Any], float] = _no_additional_cost

    @classmethod
    def coerce(cls, options: ClusterOptions | dict[str, Any] | None = None, **kwargs: Any) -> ClusterOptions:
        """Buduje ClusterOptions z instancji, słownika i/lub argumentów nazwanych."""
        if isinstance(options, ClusterOptions):
            if not kwargs:
                return options
            options = {f: getattr(options, f) for f in cls.__dataclass_fields__}
        merged = dict(options or {})
        merged.update(kwargs)
        unknown = set(merged) - set(cls.__dataclass_fields__)
        if unknown:
            raise TypeError(f"Unknown best_cluster() options: {', '.join(sorted(unknown))}")
        return cls(**merged)
