"""Injeção de query string de rastreamento nos links ``<a href>``."""

from __future__ import annotations

from urllib.parse import urlsplit

from carteiro_core.domain.contracts import Document, LinkRewrite, RewriteReport
from carteiro_core.infrastructure.links.skip_patterns import is_query_skippable

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def strip_query_string(query: str | None) -> str:
    """Remove espaços e ``?`` iniciais da query configurada."""

    return (query or "").strip().lstrip("?").strip()


class QueryStringInjector:
    """Anexa ``query`` ao ``href`` de cada âncora elegível.

    Links de outros hosts (quando o host atual é conhecido) e de esquemas que
    não sejam http/https são preservados. Quando o link já possui query, o
    separador é ``&amp;`` ou ``&`` conforme ``unescaped_ampersand``.
    """

    def __init__(
        self,
        query: str | None,
        *,
        unescaped_ampersand: bool = False,
        current_host: str | None = None,
    ) -> None:
        self._query = strip_query_string(query)
        self._separator = "&" if unescaped_ampersand else "&amp;"
        self._current_host = current_host.lower() if current_host else None

    @property
    def query(self) -> str:
        return self._query

    @property
    def enabled(self) -> bool:
        return bool(self._query)

    def inject(self, document: Document) -> Document:
        self.inject_with_report(document)
        return document

    def inject_with_report(self, document: Document) -> RewriteReport:
        report = RewriteReport()
        if not self.enabled:
            return report

        for element in document.elements_by_tag("a"):
            value = element.get_attribute("href")
            if value is None:
                continue
            rewrite = report.add(self.rewrite_href(value, tag=element.tag))
            if rewrite.status != "rewritten":
                continue
            element.set_attribute("href", rewrite.value)
        return report

    def rewrite_href(self, value: str, *, tag: str = "a") -> LinkRewrite:
        """Calcula o novo ``href`` sem alterar o documento."""

        href = value.strip()
        if not href:
            return LinkRewrite(tag, "href", value, value, "skipped", "empty")
        if is_query_skippable(href):
            return LinkRewrite(tag, "href", value, value, "skipped", "pattern")

        try:
            parts = urlsplit(href)
            host = parts.hostname
            parts.port
        except ValueError as exc:
            return LinkRewrite(tag, "href", value, value, "invalid", str(exc))

        if self._current_host and host and host != self._current_host:
            return LinkRewrite(tag, "href", value, value, "skipped", "host")
        if parts.scheme and parts.scheme not in _ALLOWED_SCHEMES:
            return LinkRewrite(tag, "href", value, value, "skipped", "scheme")

        return LinkRewrite(tag, "href", value, self._append(href), "rewritten")

    def _append(self, href: str) -> str:
        # o texto original é preservado; a query entra antes do fragmento
        head, hash_mark, fragment = href.partition("#")
        path, question_mark, current = head.partition("?")
        # query formada apenas por ``?`` equivale a query vazia
        if question_mark and current.strip("?"):
            head = f"{head}{self._separator}{self._query}"
        else:
            head = f"{path}?{self._query}"
        return f"{head}{hash_mark}{fragment}"


def inject(
    document: Document,
    query: str | None,
    unescaped_ampersand: bool = False,
    *,
    current_host: str | None = None,
) -> Document:
    """Injeta ``query`` nas âncoras do documento, alterando-o no lugar."""

    injector = QueryStringInjector(
        query,
        unescaped_ampersand=unescaped_ampersand,
        current_host=current_host,
    )
    return injector.inject(document)


__all__ = ["QueryStringInjector", "inject", "strip_query_string"]
