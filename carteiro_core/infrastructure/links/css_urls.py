"""Reescrita de declarações ``url()`` em estilos inline."""

from __future__ import annotations

import re
from collections.abc import Callable

from carteiro_core.domain.contracts import Base
from carteiro_core.domain.errors import InvalidReference
from carteiro_core.infrastructure.links.link_resolver import resolve
from carteiro_core.infrastructure.links.skip_patterns import is_skippable

_RE_CSS_URL = re.compile(
    r"""url\(\s*(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)'|(?P<bare>[^'")]*?))\s*\)""",
    re.IGNORECASE,
)


def convert_css_urls(
    style: str,
    base: Base | str,
    *,
    on_invalid: Callable[[str, InvalidReference], None] | None = None,
) -> str:
    """Resolve cada ``url()`` de ``style`` contra ``base`` mantendo as aspas.

    Tokens vazios, ignoráveis ou que falham na resolução permanecem intactos.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("double") is not None:
            quote, reference = '"', match.group("double")
        elif match.group("single") is not None:
            quote, reference = "'", match.group("single")
        else:
            quote, reference = "", match.group("bare")

        reference = reference.strip()
        if not reference or is_skippable(reference):
            return match.group(0)
        try:
            resolved = resolve(reference, base)
        except InvalidReference as exc:
            if on_invalid is not None:
                on_invalid(reference, exc)
            return match.group(0)
        return f"{match.group(0)[:3]}({quote}{resolved}{quote})"

    return _RE_CSS_URL.sub(_replace, style)


__all__ = ["convert_css_urls"]
