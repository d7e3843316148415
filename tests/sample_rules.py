"""Przykładowe zestawy reguł ładowane przez testy CLI ('sample_rules:RULES')."""

from data_model import dom, out, rule, score, type_
from html_parser.dom import inline_text_length
from solver import ruleset


def text_length(fnode):
    return inline_text_length(fnode.element)


RULES = ruleset(
    rule(dom("p"), type_("paragraphish")),
    rule(type_("paragraphish"), score(text_length)),
    rule(type_("paragraphish").max(), out("best")),
    rule(type_("paragraphish"), out("all")),
)

# Reguła typu "b" czyta typ "c", którego żadna reguła nie emituje
BROKEN_RULES = [
    rule(type_("c"), type_("b")),
    rule(type_("b"), out("b")),
]


def build_ruleset():
    return RULES


NOT_RULES = 42

BROKEN = ruleset(*BROKEN_RULES)
