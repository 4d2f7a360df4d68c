"""Seleção explícita do provider de documentos HTML."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from carteiro_core.domain.contracts import DocumentProvider
from carteiro_core.infrastructure.parsing.html_tree import build_html_tree_provider
from carteiro_core.infrastructure.parsing.selectolax_document import build_selectolax_provider

DEFAULT_PROVIDER = "html_tree"

PROVIDERS: Mapping[str, Callable[[Mapping[str, object] | None], DocumentProvider]] = {
    "html_tree": build_html_tree_provider,
    "selectolax": build_selectolax_provider,
}


def build_document_provider(options: Mapping[str, object] | None = None) -> DocumentProvider:
    """Instancia o provider indicado em ``options["name"]``."""

    options = dict(options or {})
    name = str(options.pop("name", None) or DEFAULT_PROVIDER).strip().lower()
    try:
        factory = PROVIDERS[name]
    except KeyError as exc:
        raise ValueError(
            f"Provider de documentos desconhecido: '{name}' (disponíveis: {', '.join(sorted(PROVIDERS))})"
        ) from exc
    return factory(options)
