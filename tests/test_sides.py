"""Testy języka reguł: łańcuchy Side, kompilacja stron i statyczne typy reguł."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from data_model import (
    AndLhs,
    BestClusterLhs,
    ClusterOptions,
    ConfigurationError,
    DomLhs,
    Fact,
    FactError,
    InwardRule,
    OutwardRhs,
    OutwardRule,
    TypeInLhs,
    TypeLhs,
    TypeMaxLhs,
    and_,
    at_most,
    conserve_score,
    dom,
    note,
    out,
    props,
    rule,
    score,
    type_,
    type_in,
)

FNODE = SimpleNamespace(element="<el>")


# =============================================================================
# Lewa strona
# =============================================================================


class TestLhsCompilation:
    """Łańcuch wywołań -> wariant lewej strony."""

    def test_dom(self):
        lhs = dom("p.smoo").as_lhs()
        assert lhs == DomLhs("p.smoo")
        assert lhs.guaranteed_type is None
        assert lhs.types_mentioned == ()

    def test_type_and_max(self):
        assert type_("a").as_lhs() == TypeLhs("a")
        lhs = type_("a").max().as_lhs()
        assert isinstance(lhs, TypeMaxLhs)
        assert lhs.aggregated_type == "a"
        assert lhs.guaranteed_type == "a"

    def test_later_type_overrides(self):
        assert type_("a").type("b").as_lhs() == TypeLhs("b")

    def test_when_keeps_predicate_through_max(self):
        def predicate(fnode):
            return True

        lhs = type_("a").when(predicate).max().as_lhs()
        assert lhs == TypeMaxLhs("a", predicate)
        assert str(lhs) == "type('a').when(predicate).max()"

    def test_type_in(self):
        lhs = type_in("a", "b").as_lhs()
        assert lhs == TypeInLhs(("a", "b"))
        assert lhs.guaranteed_type is None
        assert type_in("a").as_lhs().guaranteed_type == "a"

    def test_and(self):
        lhs = and_(type_("a"), type_("b")).as_lhs()
        assert isinstance(lhs, AndLhs)
        assert lhs.types_mentioned == ("a", "b")
        assert lhs.guaranteed_type is None

    def test_and_rejects_complex_operands(self):
        with pytest.raises(ConfigurationError, match="only simple type"):
            and_(type_("a").max(), type_("b")).as_lhs()
        with pytest.raises(ConfigurationError):
            and_(dom("p")).as_lhs()

    def test_max_only_after_type(self):
        with pytest.raises(ConfigurationError, match="max"):
            dom("p").max().as_lhs()

    def test_best_cluster_options(self):
        lhs = type_("a").best_cluster({"splitting_distance": 5}).as_lhs()
        assert isinstance(lhs, BestClusterLhs)
        assert lhs.options.splitting_distance == 5
        assert lhs.options.stride_cost == ClusterOptions().stride_cost

    def test_best_cluster_rejects_unknown_options(self):
        with pytest.raises(TypeError, match="bogus"):
            type_("a").best_cluster(bogus=1)

    def test_right_side_calls_rejected(self):
        with pytest.raises(ConfigurationError):
            type_("a").score(2).as_lhs()
        with pytest.raises(ConfigurationError):
            score(2).as_lhs()

    def test_empty_selector_and_type(self):
        with pytest.raises(ConfigurationError):
            dom("").as_lhs()
        with pytest.raises(ConfigurationError):
            type_("").as_lhs()


# =============================================================================
# Prawa strona
# =============================================================================


class TestRhsCompilation:
    """Łańcuch wywołań -> InwardRhs i wyliczanie faktu."""

    def test_order_independent_for_different_kinds(self):
        left = score(2).type("a").as_rhs().fact(FNODE, None)
        right = type_("a").score(2).as_rhs().fact(FNODE, None)
        assert left == right == Fact(type="a", score=2)

    def test_rightmost_of_a_kind_wins(self):
        assert type_("a").type("b").as_rhs().fact(FNODE, None).type == "b"
        assert score(2).score(3).as_rhs().fact(FNODE, None).score == 3

    def test_props_fills_what_later_calls_did_not(self):
        rhs = props(lambda fnode: {"type": "x", "score": 5, "note": "n"}).score(2).as_rhs()
        assert rhs.fact(FNODE, None) == Fact(type="x", score=2, note="n")

    def test_later_props_overrides_earlier_calls(self):
        rhs = type_("a").props(lambda fnode: {"type": "b"}).type_in("a", "b").as_rhs()
        assert rhs.fact(FNODE, None).type == "b"

    def test_score_callback_and_note(self):
        rhs = score(lambda fnode: 4).note(lambda fnode: fnode.element).as_rhs()
        assert rhs.fact(FNODE, "t") == Fact(score=4, note="<el>")

    def test_conserve_and_at_most(self):
        rhs = conserve_score().type("a").at_most(0.5).as_rhs()
        assert rhs.conserves_score
        assert rhs.max_score == 0.5
        assert rhs.fact(FNODE, "b").conserve_score

    def test_standalone_at_most(self):
        assert at_most(3).as_rhs().max_score == 3

    def test_type_in_violation(self):
        rhs = props(lambda fnode: {"type": "z"}).type_in("a").as_rhs()
        with pytest.raises(FactError, match="actually emitted 'z'"):
            rhs.fact(FNODE, None)

    def test_inherited_type_outside_type_in(self):
        rhs = note(lambda fnode: "n").type_in("a").as_rhs()
        with pytest.raises(FactError, match="inherited 'q'"):
            rhs.fact(FNODE, "q")

    def test_left_side_calls_rejected(self):
        with pytest.raises(ConfigurationError):
            dom("p").as_rhs()
        with pytest.raises(ConfigurationError):
            type_("a").max().as_rhs()


# =============================================================================
# rule() i typy statyczne
# =============================================================================


class TestRules:
    """Rodzaj reguły oraz typy emitowane, dodawane i finalizowane."""

    def test_out_makes_outward_rule(self):
        r = rule(type_("a"), out("k"))
        assert isinstance(r, OutwardRule)
        assert r.key == "k"
        assert r.types_finalized == ("a",)

    def test_inward_rule(self):
        r = rule(dom("p"), type_("a"))
        assert isinstance(r, InwardRule)
        assert r.emitted_types == ("a",)
        assert r.added_types == ("a",)
        assert r.types_finalized == ()

    def test_a_to_a_rule(self):
        r = rule(type_("a"), score(2))
        assert r.emitted_types == ("a",)
        assert r.added_types == ()
        assert r.types_finalized == ()

    def test_a_to_b_finalizes_a(self):
        r = rule(type_("a"), type_("b"))
        assert r.emitted_types == ("b",)
        assert r.added_types == ("b",)
        assert r.types_finalized == ("a",)

    def test_max_finalizes_aggregated_type(self):
        r = rule(type_("a").max(), score(2))
        assert r.emitted_types == ("a",)
        assert r.types_finalized == ("a",)

    def test_type_in_rhs(self):
        r = rule(dom("p"), props(lambda fnode: {}).type_in("x", "y"))
        assert r.emitted_types == ("x", "y")

    def test_type_in_lhs_keeps_types(self):
        r = rule(type_in("a", "b"), score(2))
        assert r.emitted_types == ("a", "b")
        assert r.added_types == ()
        assert r.types_finalized == ()

    def test_type_in_lhs_finalizes_its_inputs(self):
        r = rule(type_in("a", "b"), type_("c").conserve_score())
        assert r.types_finalized == ("a", "b")

    def test_and_finalizes_its_operands(self):
        r = rule(and_(type_("a"), type_("b")), type_("both"))
        assert r.types_finalized == ("a", "b")

    def test_type_in_rhs_with_input_type_does_not_finalize_it(self):
        r = rule(type_("a"), props(lambda fnode: {"type": "b"}).type_in("a", "b"))
        assert r.emitted_types == ("a", "b")
        assert r.added_types == ("b",)
        assert r.types_finalized == ()

    def test_indeterminate_type(self):
        r = rule(dom("p"), props(lambda fnode: {}))
        with pytest.raises(ConfigurationError, match="props"):
            r.emitted_types

    def test_out_rhs_through(self):
        rhs = out("k").through(str.upper).all_through(sorted)
        assert isinstance(rhs, OutwardRhs)
        assert rhs.key == "k"
        assert rhs.through_callback("a") == "A"
        assert rhs.all_through_callback(["b", "a"]) == ["a", "b"]

    def test_rejects_non_sides(self):
        with pytest.raises(ConfigurationError):
            rule("p", type_("a"))
        with pytest.raises(ConfigurationError):
            rule(dom("p"), "a")

    def test_str(self):
        assert str(rule(dom("p"), type_("a").score(2))) == "dom('p') -> type('a').score(2)"
