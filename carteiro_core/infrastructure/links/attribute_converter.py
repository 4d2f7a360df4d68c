"""Conversão de links relativos em absolutos nos atributos do documento."""

from __future__ import annotations

import re
from urllib.parse import quote

from carteiro_core.domain.contracts import Base, Document, LinkRewrite, RewriteReport
from carteiro_core.domain.errors import InvalidReference
from carteiro_core.infrastructure.links.css_urls import convert_css_urls
from carteiro_core.infrastructure.links.link_resolver import resolve
from carteiro_core.infrastructure.links.skip_patterns import is_skippable
from carteiro_core.infrastructure.links.uri_canonicalizer import canonicalize

URL_ATTRIBUTES: tuple[str, ...] = ("href", "src", "background")

_RE_HTTP_PREFIX = re.compile(r"^http", re.IGNORECASE)
_ESCAPE_SAFE = "!#$&'()*+,/:;=?@[]~"


class AttributeLinkConverter:
    """Reescreve ``href``, ``src``, ``background`` e ``url()`` de estilos inline.

    A base é validada na construção: valores vazios ou com esquema não
    suportado levantam ``UnsupportedBase`` antes de qualquer elemento.
    """

    def __init__(self, base: Base | str, *, escape_url_attributes: bool = True) -> None:
        self._base = Base.from_value(base)
        self._escape_url_attributes = escape_url_attributes

    def convert(self, document: Document) -> Document:
        self.convert_with_report(document)
        return document

    def convert_with_report(self, document: Document) -> RewriteReport:
        report = RewriteReport()
        for attribute in URL_ATTRIBUTES:
            for element in document.elements_with_attribute(attribute):
                value = element.get_attribute(attribute)
                if value is None:
                    continue
                rewrite = report.add(self.rewrite_value(value, tag=element.tag, attribute=attribute))
                if rewrite.status != "rewritten":
                    continue
                element.set_attribute(attribute, rewrite.value)

        for element in document.elements_with_attribute("style"):
            style = element.get_attribute("style")
            if not style:
                continue
            rewrite = report.add(self._rewrite_style(style, tag=element.tag))
            if rewrite.status != "rewritten":
                continue
            element.set_attribute("style", rewrite.value)
        return report

    def rewrite_value(self, value: str, *, tag: str = "", attribute: str = "") -> LinkRewrite:
        """Decide como reescrever um único valor sem alterar o documento."""

        if is_skippable(value):
            return LinkRewrite(tag, attribute, value, value, "skipped", "pattern")

        try:
            if _RE_HTTP_PREFIX.match(value):
                resolved = canonicalize(value)
            else:
                resolved = self._resolve(value)
        except InvalidReference as exc:
            return LinkRewrite(tag, attribute, value, value, "invalid", str(exc))

        if resolved == value:
            return LinkRewrite(tag, attribute, value, value, "unchanged")
        return LinkRewrite(tag, attribute, value, resolved, "rewritten")

    def _resolve(self, value: str) -> str:
        try:
            return resolve(value, self._base)
        except InvalidReference:
            if not self._escape_url_attributes:
                raise
        return resolve(quote(value, safe=_ESCAPE_SAFE), self._base)

    def _rewrite_style(self, style: str, *, tag: str) -> LinkRewrite:
        failures: list[str] = []
        converted = convert_css_urls(
            style,
            self._base,
            on_invalid=lambda reference, exc: failures.append(f"{reference}: {exc}"),
        )
        if converted != style:
            return LinkRewrite(tag, "style", style, converted, "rewritten")
        if failures:
            return LinkRewrite(tag, "style", style, style, "invalid", "; ".join(failures))
        return LinkRewrite(tag, "style", style, style, "unchanged")


def convert(document: Document, base: Base | str, *, escape_url_attributes: bool = True) -> Document:
    """Converte os links do documento em absolutos, alterando-o no lugar."""

    converter = AttributeLinkConverter(base, escape_url_attributes=escape_url_attributes)
    return converter.convert(document)


__all__ = ["URL_ATTRIBUTES", "AttributeLinkConverter", "convert"]
