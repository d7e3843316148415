"""Testy rekordu faktów Fnode."""

from __future__ import annotations

import pytest

from data_model import dom, rule, type_
from solver import Fnode, ruleset


@pytest.fixture
def bound(paragraph_doc):
    """Pusty zestaw reguł związany z jednym akapitem."""
    return ruleset().against(paragraph_doc)


@pytest.fixture
def fnode(bound, paragraph_doc):
    return bound.fnode_for_element(paragraph_doc.find("p"))


class TestFnode:
    """Wyniki, notatki i typy jednego węzła."""

    def test_requires_element(self, bound):
        with pytest.raises(ValueError):
            Fnode(None, bound)

    def test_one_fnode_per_element(self, bound, paragraph_doc):
        p = paragraph_doc.find("p")
        assert bound.fnode_for_element(p) is bound.fnode_for_element(p)

    def test_fnodes_for_equal_elements_are_distinct(self, parse):
        """Dwa identycznie wyglądające węzły to dwa różne Fnode'y."""
        doc = parse("<p></p><p></p>")
        first, second = doc.find_all("p")
        assert first == second  # bs4 porównuje strukturalnie
        facts = ruleset().against(doc)
        assert facts.fnode_for_element(first) is not facts.fnode_for_element(second)

    def test_untouched_defaults(self, fnode):
        assert fnode.score_so_far_for("x") == 1
        assert fnode.note_so_far_for("x") is None
        assert not fnode.has_type_so_far("x")
        assert fnode.types_so_far() == []

    def test_scores_multiply(self, fnode):
        fnode.add_score_for("t", 2)
        fnode.add_score_for("t", 0.5)
        fnode.add_score_for("t", 3)
        assert fnode.score_so_far_for("t") == 3
        assert fnode.has_type_so_far("t")

    def test_cap(self, fnode):
        fnode.add_score_for("t", 8)
        fnode.cap_score_for("t", 5)
        assert fnode.score_so_far_for("t") == 5
        fnode.cap_score_for("t", 7)
        assert fnode.score_so_far_for("t") == 5

    def test_first_note_wins(self, fnode):
        fnode.set_note_for("t", None)
        fnode.set_note_for("t", {"first": True})
        fnode.set_note_for("t", {"second": True})
        assert fnode.note_so_far_for("t") == {"first": True}

    def test_types_in_order_added(self, fnode):
        fnode.add_type("b")
        fnode.add_type("a")
        assert fnode.add_type("b") is False
        assert fnode.types_so_far() == ["b", "a"]

    def test_conserve_once_per_type(self, parse):
        doc = parse("<p></p><div></div>")
        facts = ruleset().against(doc)
        source = facts.fnode_for_element(doc.find("p"))
        target = facts.fnode_for_element(doc.find("div"))
        source.add_score_for("src", 4)
        target.conserve_score_from(source, "src", "dst")
        target.conserve_score_from(source, "src", "dst")
        assert target.score_so_far_for("dst") == 4
        target.conserve_score_from(source, "src", "other")
        assert target.score_so_far_for("other") == 4

    def test_reads_run_rules(self, paragraph_doc):
        """score_for() i has_type() uruchamiają reguły; wersje *_so_far nie."""
        rules = ruleset(rule(dom("p"), type_("t").score(5)))
        facts = rules.against(paragraph_doc)
        p = facts.fnode_for_element(paragraph_doc.find("p"))
        assert p.score_so_far_for("t") == 1
        assert p.has_type("t")
        assert p.score_for("t") == 5

    def test_repr(self, fnode):
        fnode.add_type("para")
        assert repr(fnode) == "<Fnode p types=['para']>"
