"""Providers de documentos HTML consumidos pelo pipeline de links."""

from .html_tree import HTMLDocument, HTMLNode, HtmlTreeProvider, build_html_tree_provider
from .providers import DEFAULT_PROVIDER, PROVIDERS, build_document_provider
from .selectolax_document import (
    SelectolaxDocument,
    SelectolaxElement,
    SelectolaxProvider,
    build_selectolax_provider,
)

__all__ = [
    "DEFAULT_PROVIDER",
    "HTMLDocument",
    "HTMLNode",
    "HtmlTreeProvider",
    "PROVIDERS",
    "SelectolaxDocument",
    "SelectolaxElement",
    "SelectolaxProvider",
    "build_document_provider",
    "build_html_tree_provider",
    "build_selectolax_provider",
]
