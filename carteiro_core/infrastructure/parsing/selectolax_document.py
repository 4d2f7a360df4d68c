"""Documento baseado em selectolax para reescrita de atributos."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from selectolax.lexbor import LexborHTMLParser

from carteiro_core.domain.contracts import DocumentProvider
from carteiro_core.domain.errors import DocumentError


class SelectolaxElement:
    """Adapta um ``LexborNode`` do selectolax ao contrato ``Element``."""

    __slots__ = ("_node",)

    def __init__(self, node: Any) -> None:
        self._node = node

    @property
    def tag(self) -> str:
        return str(self._node.tag).lower()

    def get_attribute(self, name: str) -> str | None:
        attributes = self._node.attributes
        if name not in attributes:
            return None
        return attributes[name] or ""

    def set_attribute(self, name: str, value: str) -> None:
        self._node.attrs[name] = value


class SelectolaxDocument:
    """Documento que delega buscas a seletores CSS do selectolax."""

    def __init__(self, tree: Any) -> None:
        self._tree = tree

    @classmethod
    def from_html(cls, html: str) -> SelectolaxDocument:
        try:
            tree = LexborHTMLParser(html or "")
        except Exception as exc:  # noqa: BLE001
            raise DocumentError(
                "Não foi possível inicializar o parser HTML", cause=exc
            ) from exc
        return cls(tree)

    def elements_with_attribute(self, name: str) -> list[SelectolaxElement]:
        return [SelectolaxElement(node) for node in self._tree.css(f"[{name}]")]

    def elements_by_tag(self, tag: str) -> list[SelectolaxElement]:
        return [SelectolaxElement(node) for node in self._tree.css(tag)]

    def __str__(self) -> str:
        return self._tree.html or ""


class SelectolaxProvider(DocumentProvider):
    """Provider que usa o selectolax para parsing e serialização."""

    def parse(self, html: str) -> SelectolaxDocument:
        return SelectolaxDocument.from_html(html)

    def serialize(self, document: SelectolaxDocument) -> str:
        if not isinstance(document, SelectolaxDocument):
            raise DocumentError(
                f"Documento incompatível com selectolax: {type(document).__name__}"
            )
        return str(document)


def build_selectolax_provider(options: Mapping[str, object] | None = None) -> SelectolaxProvider:
    """Factory compatível com opções em configurações."""

    return SelectolaxProvider()


__all__ = [
    "SelectolaxDocument",
    "SelectolaxElement",
    "SelectolaxProvider",
    "build_selectolax_provider",
]
