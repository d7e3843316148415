"""Testy wczytywania HTML i heurystyk DOM."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests
from bs4 import Comment, NavigableString

from html_parser import dom as dom_utils
from html_parser import parser


# =============================================================================
# Wczytywanie dokumentów
# =============================================================================


class TestParser:
    """static_dom, load_html_file i fetch_html."""

    def test_static_dom_does_not_strip_by_default(self):
        soup = parser.static_dom("<p>a</p><script>alert(1)</script>")
        assert soup.find("script") is not None

    def test_strip_noise(self):
        soup = parser.static_dom("<p>a</p><script>x</script><style>y</style>", strip_noise=True)
        assert soup.find("script") is None
        assert soup.find("style") is None
        assert soup.find("p").get_text() == "a"

    def test_load_html_file(self, tmp_path):
        path = tmp_path / "strona.html"
        path.write_text("<p id=x>zażółć</p>", encoding="utf-8")
        soup = parser.load_html_file(path)
        assert soup.find(id="x").get_text() == "zażółć"

    def test_fetch_html(self, monkeypatch):
        calls = {}

        class FakeResponse:
            text = "<p>pobrane</p>"
            apparent_encoding = "utf-8"
            encoding = None

            def raise_for_status(self):
                pass

        def fake_get(url, timeout, headers):
            calls.update(url=url, timeout=timeout, headers=headers)
            return FakeResponse()

        monkeypatch.setattr(parser.requests, "get", fake_get)
        soup = parser.fetch_html("https://example.com", timeout=5, user_agent="test-agent")
        assert soup.find("p").get_text() == "pobrane"
        assert calls == {
            "url": "https://example.com",
            "timeout": 5,
            "headers": {"User-Agent": "test-agent"},
        }

    def test_fetch_html_http_error(self, monkeypatch):
        class FailingResponse:
            def raise_for_status(self):
                raise requests.HTTPError("404 Client Error")

        monkeypatch.setattr(parser.requests, "get", lambda url, timeout, headers: FailingResponse())
        with pytest.raises(requests.HTTPError):
            parser.fetch_html("https://example.com/missing")


# =============================================================================
# Predykaty węzłów
# =============================================================================


class TestPredicates:
    """Rozpoznawanie elementów, tekstu i bloków."""

    def test_is_dom_element(self, parse):
        doc = parse("<p>text</p>")
        assert dom_utils.is_dom_element(doc)
        assert dom_utils.is_dom_element(doc.find("p"))
        assert not dom_utils.is_dom_element(doc.find("p").string)
        assert not dom_utils.is_dom_element("p")

    def test_is_whitespace(self):
        assert dom_utils.is_whitespace(NavigableString("  \n\t"))
        assert not dom_utils.is_whitespace(NavigableString(" a "))
        assert not dom_utils.is_whitespace(Comment("   "))

    def test_is_block(self, parse):
        doc = parse("<div><span>x</span></div>")
        assert dom_utils.is_block(doc.find("div"))
        assert not dom_utils.is_block(doc.find("span"))
        assert not dom_utils.is_block(doc.find("span").string)


# =============================================================================
# Tekst inline
# =============================================================================


class TestInlineText:
    """Długość tekstu inline i gęstość linków."""

    def test_collapse_whitespace(self):
        assert dom_utils.collapse_whitespace("a   b\n\n c") == "a b c"
        assert dom_utils.collapse_whitespace("a b\nc") == "a b\nc"

    def test_walk_is_depth_first(self, parse):
        doc = parse("<div><p><b>x</b></p><i>y</i></div>")
        names = [n.name for n in dom_utils.walk(doc.find("div")) if n.name]
        assert names == ["div", "p", "b", "i"]

    def test_inline_text_skips_blocks(self, parse):
        doc = parse("<p>Hello <b>bold</b> <div>block</div></p>")
        assert dom_utils.inline_text_length(doc.find("p")) == 11

    def test_inline_text_skips_noise(self, parse):
        doc = parse("<p>abc<script>var x = 1;</script></p>")
        assert list(dom_utils.inline_texts(doc.find("p"))) == ["abc"]

    def test_inline_text_collapses_whitespace(self, parse):
        doc = parse("<p>a    b</p>")
        assert dom_utils.inline_text_length(doc.find("p")) == 3

    def test_link_density(self, parse):
        doc = parse("<p>abcd<a href='#'>efgh</a></p>")
        fnode = SimpleNamespace(element=doc.find("p"))
        assert dom_utils.link_density(fnode) == 0.5
        assert dom_utils.link_density(fnode, inline_length=16) == 0.75

    def test_link_density_of_empty_element(self, parse):
        fnode = SimpleNamespace(element=parse("<p></p>").find("p"))
        assert dom_utils.link_density(fnode) == 0.0


# =============================================================================
# Pozostałe pomocnicze
# =============================================================================


class TestHelpers:
    """root_element, page, number_of_matches i dom_sort."""

    def test_root_element(self, parse):
        doc = parse("<html><body><div><span>x</span></div></body></html>")
        assert dom_utils.root_element(doc.find("span")) is doc.find("html")

    def test_number_of_matches(self):
        assert dom_utils.number_of_matches(r"o", "foo boo") == 4
        assert dom_utils.number_of_matches(r"\d+", "no digits") == 0

    def test_page_redirects_scored_facts_to_root(self, parse):
        doc = parse("<html><body><span>x</span></body></html>")
        fnode = SimpleNamespace(element=doc.find("span"))

        def scored(fnode):
            return {"score": 2, "type": "page"}

        wrapped = dom_utils.page(scored)
        assert wrapped.__name__ == "scored"
        result = wrapped(fnode)
        assert result["element"] is doc.find("html")
        assert result["score"] == 2

    def test_page_leaves_unscored_facts_alone(self, parse):
        doc = parse("<span>x</span>")
        fnode = SimpleNamespace(element=doc.find("span"))
        assert dom_utils.page(lambda f: {"type": "page"})(fnode) == {"type": "page"}

    def test_dom_sort(self, parse):
        doc = parse("<div id=a><p id=b></p></div><p id=c></p>")
        fnodes = [SimpleNamespace(element=doc.find(id=i)) for i in ("c", "b", "a")]
        assert [f.element["id"] for f in dom_utils.dom_sort(fnodes)] == ["a", "b", "c"]
        assert dom_utils.dom_sort([]) == []

    def test_page_rule_scores_whole_document(self, parse):
        """Reguła z page() klasyfikuje całą stronę zamiast pojedynczego elementu."""
        from data_model import dom, out, props, rule, type_
        from solver import ruleset

        doc = parse("<html><body><p>login</p><p>password</p></body></html>")
        rules = ruleset(
            rule(dom("p"), props(dom_utils.page(lambda fnode: {"score": 2, "type": "login_page"})).type_in("login_page")),
            rule(type_("login_page"), out("pages")),
        )
        pages = rules.against(doc).get("pages")
        assert [f.element.name for f in pages] == ["html"]
        assert pages[0].score_for("login_page") == 4
