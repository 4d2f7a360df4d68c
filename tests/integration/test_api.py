import pytest

from carteiro_core.application.rewrite_usecase import RewriteLinksUseCase
from carteiro_core.domain.contracts import RewriteOptions
from carteiro_core.domain.errors import UnsupportedBase
from carteiro_core.infrastructure.parsing.selectolax_document import SelectolaxProvider
from carteiro_core.interfaces.api import build_rewrite_use_case, rewrite_html
from config.settings import DocumentSettings, LinkSettings, Settings
from tests.integration.doubles import FixedClock, RecordingLogger


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CARTEIRO_BASE_URL",
        "CARTEIRO_LINK_QUERY_STRING",
        "CARTEIRO_UNESCAPED_AMPERSAND",
        "CARTEIRO_ESCAPE_URL_ATTRIBUTES",
        "CARTEIRO_DOCUMENT_PROVIDER",
        "CARTEIRO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_build_rewrite_use_case_from_settings() -> None:
    settings = Settings(
        links=LinkSettings(base_url="http://example.com/", link_query_string="utm=1"),
        document=DocumentSettings(provider="selectolax"),
    )
    logger = RecordingLogger()

    use_case = build_rewrite_use_case(settings, logger=logger, clock=FixedClock())
    result = use_case.execute("<a href='x.html'>x</a>")

    assert isinstance(use_case, RewriteLinksUseCase)
    assert 'href="http://example.com/x.html?utm=1"' in result["html"]
    (start,) = logger.events("rewrite.start")
    assert start == {"at": "2024-01-01T10:30:00", "base": "http://example.com/", "query_string": "utm=1"}


def test_build_rewrite_use_case_prefers_explicit_options() -> None:
    settings = Settings(links=LinkSettings(base_url="http://ignored.example/"), document=DocumentSettings())

    use_case = build_rewrite_use_case(
        settings,
        options=RewriteOptions(base_url="https://example.org/"),
        logger=RecordingLogger(),
        clock=FixedClock(),
    )

    assert str(use_case.base) == "https://example.org/"


def test_build_rewrite_use_case_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTEIRO_DOCUMENT_PROVIDER", "selectolax")
    monkeypatch.setenv("CARTEIRO_BASE_URL", "mailto:premailer@example.com")

    with pytest.raises(UnsupportedBase):
        build_rewrite_use_case(logger=RecordingLogger(), clock=FixedClock())

    monkeypatch.setenv("CARTEIRO_BASE_URL", "http://example.com/")
    use_case = build_rewrite_use_case(logger=RecordingLogger(), clock=FixedClock())
    assert isinstance(use_case._provider, SelectolaxProvider)


def test_rewrite_html_applies_overrides() -> None:
    result = rewrite_html(
        "<a href='x.html'>x</a>",
        base_url="http://example.com/",
        link_query_string="utm=1",
    )

    assert result["html"] == '<a href="http://example.com/x.html?utm=1">x</a>'
    assert result["metrics"]["links"]["rewritten"] == 1


def test_rewrite_html_uses_remote_source_as_base() -> None:
    result = rewrite_html("<img src='logo.png'>", source="http://example.com/mail/index.html")

    assert result["html"] == '<img src="http://example.com/mail/logo.png">'
