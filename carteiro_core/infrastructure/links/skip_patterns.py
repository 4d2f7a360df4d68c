"""Classificação de valores que nunca devem ser tratados como links."""

from __future__ import annotations

import re

# placeholders de merge tags, âncoras e esquemas que não são navegáveis
_CONVERTER_SKIP = re.compile(
    r"^(?:[%<{#\[]|data:|tel:|file:|sms:|callto:|facetime:|mailto:|ftp:|gopher:|cid:)",
    re.IGNORECASE,
)
_INJECTOR_SKIP = re.compile(r"^[#{\[<%]")


def is_skippable(value: str | None) -> bool:
    """Indica se o valor deve ser preservado pelo conversor de atributos."""

    return bool(_CONVERTER_SKIP.match(value or ""))


def is_query_skippable(value: str | None) -> bool:
    """Variante restrita usada pela injeção de query string."""

    return bool(_INJECTOR_SKIP.match(value or ""))


__all__ = ["is_query_skippable", "is_skippable"]
