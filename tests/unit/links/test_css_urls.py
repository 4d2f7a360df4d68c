from carteiro_core.domain.errors import InvalidReference
from carteiro_core.infrastructure.links.css_urls import convert_css_urls

_BASE = "http://example.com/mail/"


def test_convert_css_urls_preserves_quoting_style() -> None:
    style = "background: url('img/bg.png') no-repeat; list-style: url(\"dot.gif\"); cursor: url(hand.cur)"

    result = convert_css_urls(style, _BASE)

    assert result == (
        "background: url('http://example.com/mail/img/bg.png') no-repeat; "
        "list-style: url(\"http://example.com/mail/dot.gif\"); "
        "cursor: url(http://example.com/mail/hand.cur)"
    )


def test_convert_css_urls_trims_whitespace_inside_parentheses() -> None:
    assert convert_css_urls("background: url( bg.png )", _BASE) == "background: url(http://example.com/mail/bg.png)"


def test_convert_css_urls_keeps_skippable_and_empty_tokens() -> None:
    style = "background: url(data:image/png;base64,AAAA); border-image: url(''); mask: url(#mask)"

    assert convert_css_urls(style, _BASE) == style


def test_convert_css_urls_is_stable_on_absolute_urls() -> None:
    once = convert_css_urls("background: url('../bg.png')", _BASE)

    assert once == "background: url('http://example.com/bg.png')"
    assert convert_css_urls(once, _BASE) == once


def test_convert_css_urls_reports_invalid_tokens() -> None:
    failures: list[tuple[str, InvalidReference]] = []
    style = "background: url(bad%zz.png); color: red; background-image: url(ok.png)"

    result = convert_css_urls(style, _BASE, on_invalid=lambda ref, exc: failures.append((ref, exc)))

    assert result == "background: url(bad%zz.png); color: red; background-image: url(http://example.com/mail/ok.png)"
    assert [ref for ref, _ in failures] == ["bad%zz.png"]
    assert isinstance(failures[0][1], InvalidReference)


def test_convert_css_urls_without_urls_returns_style() -> None:
    assert convert_css_urls("color: red", _BASE) == "color: red"


def test_convert_css_urls_keeps_function_name_casing() -> None:
    assert convert_css_urls("background: URL( a.png )", _BASE) == "background: URL(http://example.com/mail/a.png)"
