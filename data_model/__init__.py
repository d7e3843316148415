"""
data_model — słownik reguł DomFacts (niemutowalny opis, bez wykonania).

Użycie:
  from data_model import rule, dom, type_, score, out

  r = rule(dom("p"), type_("para").score(2))

Moduły:
  common — Fact, ClusterOptions, aliasy TypeName/OutKey
  lhs    — DomLhs, TypeLhs, TypeInLhs, AndLhs, TypeMaxLhs, BestClusterLhs
  rhs    — InwardRhs, OutwardRhs, RhsCall
  rules  — Rule, InwardRule, OutwardRule
  sides  — Side, compile_lhs, compile_rhs i konstruktory łańcuchów
  errors — hierarchia wyjątków (RulesetError i pochodne)
"""

from .common import (
    TypeName,
    OutKey,
    Fact,
    ClusterOptions,
)
from .errors import (
    RulesetError,
    ConfigurationError,
    MissingInputError,
    MissingEmitterError,
    MissingAdderError,
    CycleError,
    CyclicDependencyError,
    EmptyInputError,
    FactError,
)
from .lhs import (
    Lhs,
    DomLhs,
    TypeLhs,
    TypeInLhs,
    AndLhs,
    TypeMaxLhs,
    BestClusterLhs,
)
from .rhs import (
    Rhs,
    RhsCall,
    InwardRhs,
    OutwardRhs,
)
from .rules import (
    Rule,
    InwardRule,
    OutwardRule,
)
from .sides import (
    Call,
    Side,
    compile_lhs,
    compile_rhs,
    as_lhs,
    as_rhs,
    dom,
    type_,
    type_in,
    and_,
    props,
    note,
    score,
    at_most,
    conserve_score,
    out,
    rule,
)

__all__ = [
    # common
    "TypeName",
    "OutKey",
    "Fact",
    "ClusterOptions",
    # errors
    "RulesetError",
    "ConfigurationError",
    "MissingInputError",
    "MissingEmitterError",
    "MissingAdderError",
    "CycleError",
    "CyclicDependencyError",
    "EmptyInputError",
    "FactError",
    # lhs
    "Lhs",
    "DomLhs",
    "TypeLhs",
    "TypeInLhs",
    "AndLhs",
    "TypeMaxLhs",
    "BestClusterLhs",
    # rhs
    "Rhs",
    "RhsCall",
    "InwardRhs",
    "OutwardRhs",
    # rules
    "Rule",
    "InwardRule",
    "OutwardRule",
    # sides
    "Call",
    "Side",
    "compile_lhs",
    "compile_rhs",
    "as_lhs",
    "as_rhs",
    "dom",
    "type_",
    "type_in",
    "and_",
    "props",
    "note",
    "score",
    "at_most",
    "conserve_score",
    "out",
    "rule",
]
