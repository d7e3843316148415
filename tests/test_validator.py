"""Testy statycznej walidacji zestawów reguł (RulesetValidator)."""

from __future__ import annotations

from data_model import dom, out, props, rule, score, type_, type_in
from solver import ruleset
from validator import ErrorCode, RulesetValidator


def _validate(rules):
    return RulesetValidator().validate(rules)


# =============================================================================
# Poprawne zestawy
# =============================================================================


class TestValidRulesets:
    """Zestawy bez błędów."""

    def test_valid_ruleset(self):
        rules = ruleset(
            rule(dom("p"), type_("para").score(2)),
            rule(type_("para"), score(3)),
            rule(type_("para").max(), out("best")),
        )
        report = _validate(rules)
        assert report.is_valid
        assert report.errors == []
        assert report.warnings == []
        assert report.rule_count == 3

    def test_accepts_plain_list(self):
        report = _validate([rule(dom("p"), type_("a")), rule(type_("a"), out("as"))])
        assert report.is_valid
        assert report.rule_count == 2

    def test_empty(self):
        report = _validate([])
        assert report.is_valid
        assert report.rule_count == 0


# =============================================================================
# Etap A: budowa zestawu
# =============================================================================


class TestConstruction:
    """Błędy, przez które nie dałoby się zbudować Ruleset."""

    def test_not_a_rule(self):
        report = _validate([rule(dom("p"), type_("a")), "nie reguła"])
        assert not report.is_valid
        assert report.codes() == [ErrorCode.NOT_A_RULE]
        assert report.errors[0].path == "/rules/1"

    def test_indeterminate_type(self):
        report = _validate([
            rule(dom("p"), type_("a")),
            rule(type_("a"), props(lambda fnode: {"score": 2})),
        ])
        assert report.codes() == [ErrorCode.INDETERMINATE_TYPE]
        assert "props()" in report.errors[0].message

    def test_duplicate_out_key(self):
        report = _validate([
            rule(dom("p"), type_("a")),
            rule(type_("a"), out("x")),
            rule(type_("a").max(), out("x")),
        ])
        assert report.codes() == [ErrorCode.DUPLICATE_OUT_KEY]
        error = report.errors[0]
        assert error.path == "/rules/2"
        assert error.details == {"key": "x", "first": 1}


# =============================================================================
# Etap B: fakty
# =============================================================================


class TestFacts:
    """Reguły, które na pewno zawiodą przy wykonaniu."""

    def test_dom_rule_without_type(self):
        report = _validate([rule(dom("p"), type_in("a").score(2))])
        assert ErrorCode.DOM_RULE_WITHOUT_TYPE in report.codes()

    def test_conserve_without_type(self):
        report = _validate([rule(dom("p"), type_("a").conserve_score())])
        assert report.codes() == [ErrorCode.CONSERVE_WITHOUT_TYPE]


# =============================================================================
# Etap C: wejścia
# =============================================================================


class TestInputs:
    """Brakujące emitery i addery."""

    def test_no_emitter(self):
        report = _validate([rule(type_("c"), type_("b")), rule(type_("b"), out("b"))])
        assert report.codes() == [ErrorCode.NO_EMITTER]
        assert report.errors[0].details == {"type": "c"}
        assert report.errors[0].path == "/rules/0"

    def test_no_adder(self):
        report = _validate([
            rule(type_("c"), score(2)),
            rule(type_("c"), type_("b")),
        ])
        assert ErrorCode.NO_ADDER in report.codes()
        assert all(e.details == {"type": "c"} for e in report.errors)

    def test_out_rule_without_emitter_is_a_warning(self):
        report = _validate([rule(type_("x"), out("x"))])
        assert report.is_valid
        assert len(report.warnings) == 1
        assert "out('x')" in report.warnings[0]

    def test_out_rule_without_adder_is_a_warning(self):
        """Zapytanie out() o typ, którego nikt nie dodaje, zwraca pustą listę, a nie błąd."""
        report = _validate([rule(type_("x"), score(2)), rule(type_("x"), out("x"))])
        assert [(e.code, e.path) for e in report.errors] == [(ErrorCode.NO_ADDER, "/rules/0")]
        assert any(w.startswith("/rules/1:") and "out('x')" in w for w in report.warnings)


# =============================================================================
# Etap D: cykle
# =============================================================================


class TestCycles:
    """Cykle w całym grafie zależności."""

    def test_cycle(self):
        report = _validate([
            rule(dom("p"), type_("a")),
            rule(type_("a"), type_("b")),
            rule(type_("b"), type_("a")),
        ])
        assert report.codes() == [ErrorCode.CYCLE]
        assert report.errors[0].details == {"rules": [1, 2]}

    def test_aggregate_self_cycle(self):
        report = _validate([
            rule(dom("p"), type_("a")),
            rule(type_("a").max(), score(2)),
        ])
        assert report.codes() == [ErrorCode.CYCLE]
        assert report.errors[0].details == {"rules": [1]}

    def test_a_to_a_is_not_a_cycle(self):
        report = _validate([rule(dom("p"), type_("a")), rule(type_("a"), score(2))])
        assert report.is_valid


# =============================================================================
# Ostrzeżenia
# =============================================================================


class TestWarnings:
    """Reguły, których nie potrzebuje żadna reguła out()."""

    def test_unreachable_rule(self):
        report = _validate([
            rule(dom("p"), type_("a")),
            rule(dom("p"), type_("b")),
            rule(type_("a"), out("a")),
        ])
        assert report.is_valid
        assert len(report.warnings) == 1
        assert report.warnings[0].startswith("/rules/1:")

    def test_no_warnings_without_out_rules(self):
        report = _validate([rule(dom("p"), type_("a"))])
        assert report.warnings == []
