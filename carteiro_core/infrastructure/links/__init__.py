"""Resolução de links e injeção de query string em documentos HTML."""

from .attribute_converter import URL_ATTRIBUTES, AttributeLinkConverter, convert
from .css_urls import convert_css_urls
from .link_resolver import resolve, resolve_local_path
from .query_string_injector import QueryStringInjector, inject, strip_query_string
from .skip_patterns import is_query_skippable, is_skippable
from .uri_canonicalizer import canonicalize

__all__ = [
    "AttributeLinkConverter",
    "QueryStringInjector",
    "URL_ATTRIBUTES",
    "canonicalize",
    "convert",
    "convert_css_urls",
    "inject",
    "is_query_skippable",
    "is_skippable",
    "resolve",
    "resolve_local_path",
    "strip_query_string",
]
