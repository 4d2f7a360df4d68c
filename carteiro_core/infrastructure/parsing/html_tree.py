"""Implementação simples de documento HTML baseada em ``html.parser``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from html import escape
from html.parser import HTMLParser
from typing import Iterable, Iterator

from carteiro_core.domain.contracts import DocumentProvider
from carteiro_core.domain.errors import DocumentError

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


class Markup(str):
    """Trecho já serializado (comentários, doctype) mantido sem escape."""


@dataclass(eq=False)
class HTMLNode:
    name: str
    attrs: dict[str, str | None] = field(default_factory=dict)
    parent: HTMLNode | None = None
    children: list[HTMLNode | str] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.name

    def append_child(self, child: HTMLNode | str) -> None:
        if isinstance(child, HTMLNode):
            child.parent = self
        self.children.append(child)

    def get_attribute(self, name: str) -> str | None:
        if name not in self.attrs:
            return None
        return self.attrs[name] or ""

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def find_all(self, tags: str | Iterable[str] | None = None) -> list[HTMLNode]:
        """Descendentes em ordem de documento; ``None`` retorna todos."""

        if tags is None:
            wanted = None
        elif isinstance(tags, str):
            wanted = {tags.lower()}
        else:
            wanted = {str(tag).lower() for tag in tags}
        return [
            node
            for node in self.iter_descendants(include_self=False)
            if wanted is None or node.name in wanted
        ]

    def iter_descendants(self, *, include_self: bool = True) -> Iterator[HTMLNode]:
        if include_self and self.name != "__root__":
            yield self
        for child in self.children:
            if isinstance(child, HTMLNode):
                yield from child.iter_descendants(include_self=True)

    def __str__(self) -> str:
        return _node_to_html(self)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = HTMLNode("__root__")
        self.stack: list[HTMLNode] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        node = HTMLNode(tag, dict(attrs))
        self.stack[-1].append_child(node)
        if tag not in VOID_ELEMENTS:
            self.stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.stack[-1].append_child(HTMLNode(tag, dict(attrs)))

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self.stack) - 1, 0, -1):
            if self.stack[index].name == tag:
                self.stack = self.stack[:index]
                break

    def handle_data(self, data: str) -> None:
        if not data:
            return
        self.stack[-1].append_child(data)

    def handle_comment(self, data: str) -> None:
        self.stack[-1].append_child(Markup(f"<!--{data}-->"))

    def handle_decl(self, decl: str) -> None:
        self.stack[-1].append_child(Markup(f"<!{decl}>"))

    def handle_pi(self, data: str) -> None:
        self.stack[-1].append_child(Markup(f"<?{data}>"))

    def unknown_decl(self, data: str) -> None:
        self.stack[-1].append_child(Markup(f"<![{data}]>"))


@dataclass
class HTMLDocument:
    root: HTMLNode

    @classmethod
    def from_html(cls, html: str) -> HTMLDocument:
        parser = _TreeBuilder()
        parser.feed(html or "")
        parser.close()
        return cls(parser.root)

    def find_all(self, tags: str | Iterable[str] | None = None) -> list[HTMLNode]:
        return self.root.find_all(tags)

    def elements_by_tag(self, tag: str) -> list[HTMLNode]:
        return self.root.find_all(tag)

    def elements_with_attribute(self, name: str) -> list[HTMLNode]:
        return [node for node in self.root.iter_descendants(include_self=False) if name in node.attrs]

    def __str__(self) -> str:
        return _node_children_to_html(self.root)


class HtmlTreeProvider(DocumentProvider):
    """Provider padrão, sem dependências externas."""

    def parse(self, html: str) -> HTMLDocument:
        return HTMLDocument.from_html(html)

    def serialize(self, document: HTMLDocument) -> str:
        if not isinstance(document, HTMLDocument):
            raise DocumentError(
                f"Documento incompatível com html_tree: {type(document).__name__}"
            )
        return str(document)


def build_html_tree_provider(options: Mapping[str, object] | None = None) -> HtmlTreeProvider:
    """Factory compatível com opções em configurações."""

    return HtmlTreeProvider()


def _node_to_html(node: HTMLNode) -> str:
    attrs = "".join(
        f" {key}" if value is None else f' {key}="{escape(value, quote=True)}"'
        for key, value in node.attrs.items()
    )
    if node.name in VOID_ELEMENTS:
        return f"<{node.name}{attrs}>"
    inner = _node_children_to_html(node)
    return f"<{node.name}{attrs}>{inner}</{node.name}>"


def _node_children_to_html(node: HTMLNode) -> str:
    parts: list[str] = []
    for child in node.children:
        if isinstance(child, HTMLNode):
            parts.append(_node_to_html(child))
        elif isinstance(child, Markup) or node.name in RAW_TEXT_ELEMENTS:
            parts.append(child)
        else:
            parts.append(escape(child, quote=False))
    return "".join(parts)


__all__ = [
    "HTMLDocument",
    "HTMLNode",
    "HtmlTreeProvider",
    "Markup",
    "build_html_tree_provider",
]
