"""Carregamento de configurações para o serviço Carteiro."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from carteiro_core.domain.contracts import RewriteOptions

_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "sim"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", "nao", "não"})


@dataclass(slots=True)
class LinkSettings:
    base_url: str | None = None
    link_query_string: str | None = None
    unescaped_ampersand: bool = False
    escape_url_attributes: bool = True


@dataclass(slots=True)
class DocumentSettings:
    provider: str = "html_tree"


@dataclass(slots=True)
class LogSettings:
    level: str = "INFO"


@dataclass(slots=True)
class Settings:
    links: LinkSettings
    document: DocumentSettings
    log: LogSettings = field(default_factory=LogSettings)

    def to_options(self) -> RewriteOptions:
        return RewriteOptions(
            base_url=self.links.base_url,
            link_query_string=self.links.link_query_string,
            unescaped_ampersand=self.links.unescaped_ampersand,
            escape_url_attributes=self.links.escape_url_attributes,
        )


def _load_bool(name: str, value: str | None, *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise RuntimeError(f"Variável de ambiente {name} inválida: {value!r}")


def _load_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def load_settings() -> Settings:
    """Carrega configurações a partir de variáveis de ambiente."""

    links = LinkSettings(
        base_url=_load_optional(os.environ.get("CARTEIRO_BASE_URL")),
        # string vazia é repassada: desabilita a injeção explicitamente
        link_query_string=os.environ.get("CARTEIRO_LINK_QUERY_STRING"),
        unescaped_ampersand=_load_bool(
            "CARTEIRO_UNESCAPED_AMPERSAND",
            os.environ.get("CARTEIRO_UNESCAPED_AMPERSAND"),
            default=False,
        ),
        escape_url_attributes=_load_bool(
            "CARTEIRO_ESCAPE_URL_ATTRIBUTES",
            os.environ.get("CARTEIRO_ESCAPE_URL_ATTRIBUTES"),
            default=True,
        ),
    )

    document = DocumentSettings(
        provider=os.environ.get("CARTEIRO_DOCUMENT_PROVIDER", "html_tree").strip() or "html_tree",
    )

    log = LogSettings(level=os.environ.get("CARTEIRO_LOG_LEVEL", "INFO").strip() or "INFO")

    return Settings(links=links, document=document, log=log)
