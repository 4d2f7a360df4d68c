import pytest

from carteiro_core.infrastructure.links.query_string_injector import (
    QueryStringInjector,
    inject,
    strip_query_string,
)
from carteiro_core.infrastructure.parsing.html_tree import HTMLDocument


def _hrefs(document: HTMLDocument) -> list[str | None]:
    return [node.get_attribute("href") for node in document.elements_by_tag("a")]


def test_strip_query_string_removes_leading_question_marks() -> None:
    assert strip_query_string("??utm_source=1234") == "utm_source=1234"
    assert strip_query_string("  ?utm_source=1234 ") == "utm_source=1234"
    assert strip_query_string(" ") == ""
    assert strip_query_string(None) == ""


def test_inject_strips_extra_question_marks() -> None:
    document = HTMLDocument.from_html("<a href='/test/?'>Link</a> <a href='/test/'>Link</a>")

    inject(document, "??utm_source=1234")

    assert _hrefs(document) == ["/test/?utm_source=1234", "/test/?utm_source=1234"]


def test_inject_appends_with_escaped_ampersand_by_default() -> None:
    document = HTMLDocument.from_html("<a href='/test/?123&456'>Link</a>")

    inject(document, "utm_source=1234")

    assert _hrefs(document) == ["/test/?123&456&amp;utm_source=1234"]


def test_inject_appends_with_plain_ampersand_when_unescaped() -> None:
    document = HTMLDocument.from_html("<a href='/test/?123&456'>Link</a><a href='/test/?q=query'>Link</a>")

    inject(document, "utm_source=1234", True)

    assert _hrefs(document) == ["/test/?123&456&utm_source=1234", "/test/?q=query&utm_source=1234"]


def test_inject_preserves_existing_absolute_links() -> None:
    document = HTMLDocument.from_html("<a href='http://example.com/index.php?pram1=one&pram2=two'>Link</a>")

    inject(document, "qs")

    assert _hrefs(document) == ["http://example.com/index.php?pram1=one&pram2=two&amp;qs"]


@pytest.mark.parametrize("query", ["", " ", "??", None])
def test_inject_with_empty_query_is_a_noop(query: str | None) -> None:
    html = "<a href='http://example.com/index.php?pram1=one&pram2=two'>Link</a>"
    document = HTMLDocument.from_html(html)
    injector = QueryStringInjector(query)

    report = injector.inject_with_report(document)

    assert injector.enabled is False
    assert report.rewrites == []
    assert _hrefs(document) == ["http://example.com/index.php?pram1=one&pram2=two"]


def test_inject_keeps_fragment_after_query() -> None:
    document = HTMLDocument.from_html("<a href='/page#top'>Link</a>")

    inject(document, "utm=1")

    assert _hrefs(document) == ["/page?utm=1#top"]


def test_inject_treats_question_mark_only_query_as_empty() -> None:
    document = HTMLDocument.from_html("<a href='/x??'>Link</a>")

    inject(document, "utm=1")

    assert _hrefs(document) == ["/x?utm=1"]


_NOT_APPENDABLE = [
    "%DONOTCONVERT%",
    "{DONOTCONVERT}",
    "[DONOTCONVERT]",
    "<DONOTCONVERT>",
    "{@msg-txturl}",
    "[[!unsubscribe]]",
    "#relative",
    "tel:5555551212",
    "http://example.net/",
    "mailto:premailer@example.com",
    "ftp://example.com",
    "gopher://gopher.floodgap.com/1/fun/twitpher",
]


def test_inject_skips_placeholders_foreign_hosts_and_schemes() -> None:
    html = "".join(f"<a href='{value}'>Link</a>" for value in _NOT_APPENDABLE)
    document = HTMLDocument.from_html(html)
    injector = QueryStringInjector("utm_source=1234", current_host="example.com")

    report = injector.inject_with_report(document)

    assert _hrefs(document) == _NOT_APPENDABLE
    reasons = {rewrite.original: rewrite.reason for rewrite in report.rewrites}
    assert reasons["#relative"] == "pattern"
    assert reasons["http://example.net/"] == "host"
    assert reasons["ftp://example.com"] == "scheme"
    assert reasons["tel:5555551212"] == "scheme"


def test_inject_accepts_links_on_current_host() -> None:
    document = HTMLDocument.from_html(
        "<a href='https://EXAMPLE.com/tester'>a</a><a href='images/'>b</a><a href='http://example.net/'>c</a>"
    )

    inject(document, "utm=1", current_host="example.com")

    assert _hrefs(document) == ["https://EXAMPLE.com/tester?utm=1", "images/?utm=1", "http://example.net/"]


def test_inject_skips_unparseable_links_and_continues() -> None:
    document = HTMLDocument.from_html("<a href='http://[broken/'>a</a><a href='/ok'>b</a><a>c</a><a href=' '>d</a>")
    injector = QueryStringInjector("utm=1")

    report = injector.inject_with_report(document)

    assert _hrefs(document) == ["http://[broken/", "/ok?utm=1", None, " "]
    assert report.counts() == {"rewritten": 1, "unchanged": 0, "skipped": 1, "invalid": 1}


def test_inject_only_touches_anchors() -> None:
    document = HTMLDocument.from_html("<link href='/style.css'><area href='/map'><a href='/x'>x</a>")

    inject(document, "utm=1")

    assert document.elements_by_tag("link")[0].get_attribute("href") == "/style.css"
    assert document.elements_by_tag("area")[0].get_attribute("href") == "/map"
    assert _hrefs(document) == ["/x?utm=1"]


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("HTTP://example.com/x", "HTTP://example.com/x?utm=1"),
        ("/a\tb", "/a\tb?utm=1"),
        ("/page#", "/page?utm=1#"),
        ("/page?a=1#sec?ao", "/page?a=1&amp;utm=1#sec?ao"),
    ],
)
def test_rewrite_href_only_inserts_the_query(href: str, expected: str) -> None:
    rewrite = QueryStringInjector("utm=1", current_host="example.com").rewrite_href(href)

    assert rewrite.status == "rewritten"
    assert rewrite.value == expected
