"""
solver — planista i wykonawca reguł DomFacts.

Publiczne API:
  Ruleset(rules), ruleset(*rules)   niezwiązany zestaw reguł
  BoundRuleset                      zestaw związany z drzewem (ruleset.against(doc))
  Fnode                             zakumulowane fakty o jednym węźle
  toposort(nodes, nodes_that_need)  odwrotne sortowanie topologiczne
  best, max_by, maxes, min_by       redukcje best-of
  distance, clusters                grupowanie węzłów dla best_cluster()
  load_ruleset(ref), load_object(ref) → Ruleset / atrybut z referencji "moduł:atrybut"
"""

from .clusters import DistanceMatrix, clusters, distance
from .engine   import BoundRuleset
from .fnode    import Fnode
from .graph    import toposort
from .loader   import load_object, load_ruleset, parse_reference
from .ruleset  import Ruleset, ruleset
from .utils    import best, max_by, maxes, min_by

__all__ = [
    "Ruleset",
    "ruleset",
    "BoundRuleset",
    "Fnode",
    "toposort",
    "best",
    "max_by",
    "maxes",
    "min_by",
    "distance",
    "clusters",
    "DistanceMatrix",
    "load_object",
    "load_ruleset",
    "parse_reference",
]
