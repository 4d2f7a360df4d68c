"""Contratos e estruturas de dados compartilhadas no domínio do Carteiro."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Protocol
from urllib.parse import urlsplit

from carteiro_core.domain.errors import UnsupportedBase

ABSOLUTE_URI_PATTERN = re.compile(r"\A(?:https?|ftp|file)://", re.IGNORECASE)
REMOTE_URI_PATTERN = re.compile(r"\A(?:https?|ftp)://", re.IGNORECASE)
_SCHEME_PATTERN = re.compile(r"\A([a-z][a-z0-9+.\-]*):", re.IGNORECASE)

RewriteStatus = Literal["rewritten", "unchanged", "skipped", "invalid"]


def is_local_data(source: object) -> bool:
    """Indica se a origem do documento é local (arquivo, stream ou HTML cru)."""

    if isinstance(source, str) and REMOTE_URI_PATTERN.match(source):
        return False
    return True


@dataclass(frozen=True, slots=True)
class Base:
    """Referência usada para resolver links relativos durante uma execução.

    Exatamente um dos campos é preenchido: ``uri`` para bases absolutas
    (http, https, ftp ou file) e ``path`` para caminhos do sistema de arquivos.
    """

    uri: str | None = None
    path: str | None = None

    @classmethod
    def from_value(cls, value: Base | str | None) -> Base:
        if isinstance(value, Base):
            return value

        text = (value or "").strip()
        if not text:
            raise UnsupportedBase("Base não pode ser vazia")
        if any(char in text for char in ("\x00", "\r", "\n")):
            raise UnsupportedBase(f"Base contém caracteres inválidos: {text!r}")

        if ABSOLUTE_URI_PATTERN.match(text):
            try:
                parts = urlsplit(text)
                parts.port
            except ValueError as exc:
                raise UnsupportedBase(f"Base inválida: {text}", cause=exc) from exc
            if parts.scheme != "file" and not parts.hostname:
                raise UnsupportedBase(f"Base sem host: {text}")
            return cls(uri=text)

        scheme = _SCHEME_PATTERN.match(text)
        # letras únicas são unidades do Windows (C:\...)
        if scheme and len(scheme.group(1)) > 1:
            raise UnsupportedBase(f"Esquema de base não suportado: {scheme.group(1)}")
        return cls(path=text)

    @classmethod
    def for_source(cls, base_url: Base | str | None, source: object = None) -> Base | None:
        """Deriva a base da configuração ou, na falta dela, da origem remota."""

        if isinstance(base_url, Base):
            return base_url
        if base_url is not None and base_url.strip():
            return cls.from_value(base_url)
        if source is not None and not is_local_data(source):
            return cls.from_value(str(source))
        return None

    @property
    def is_uri(self) -> bool:
        return self.uri is not None

    @property
    def host(self) -> str | None:
        if self.uri is None:
            return None
        return urlsplit(self.uri).hostname

    def __str__(self) -> str:
        return self.uri if self.uri is not None else (self.path or "")


@dataclass(slots=True)
class RewriteOptions:
    """Opções de reescrita de links para um documento."""

    base_url: str | None = None
    link_query_string: str | None = None
    unescaped_ampersand: bool = False
    escape_url_attributes: bool = True


@dataclass(slots=True)
class LinkRewrite:
    """Decisão tomada para um único valor de atributo."""

    tag: str
    attribute: str
    original: str
    value: str
    status: RewriteStatus
    reason: str | None = None


@dataclass(slots=True)
class RewriteReport:
    """Resultado acumulado de uma passagem sobre o documento."""

    rewrites: list[LinkRewrite] = field(default_factory=list)

    def add(self, rewrite: LinkRewrite) -> LinkRewrite:
        self.rewrites.append(rewrite)
        return rewrite

    def counts(self) -> dict[str, int]:
        counter = Counter(rewrite.status for rewrite in self.rewrites)
        return {status: counter.get(status, 0) for status in ("rewritten", "unchanged", "skipped", "invalid")}

    @property
    def invalid(self) -> list[LinkRewrite]:
        return [rewrite for rewrite in self.rewrites if rewrite.status == "invalid"]


class Element(Protocol):
    """Elemento de um documento HTML mantido por um colaborador externo."""

    @property
    def tag(self) -> str:
        """Nome da tag em minúsculas."""

    def get_attribute(self, name: str) -> str | None:
        """Retorna o valor do atributo ou ``None`` quando ausente."""

    def set_attribute(self, name: str, value: str) -> None:
        """Grava o valor do atributo no próprio elemento."""


class Document(Protocol):
    """Documento HTML capaz de localizar elementos."""

    def elements_with_attribute(self, name: str) -> Sequence[Element]:
        """Elementos que possuem o atributo, em ordem de documento."""

    def elements_by_tag(self, tag: str) -> Sequence[Element]:
        """Elementos com a tag informada, em ordem de documento."""


class DocumentProvider(Protocol):
    """Interface para carregar e serializar documentos HTML."""

    def parse(self, html: str) -> Document:
        """Constrói um documento a partir de HTML."""

    def serialize(self, document: Document) -> str:
        """Converte o documento de volta para HTML."""


class Clock(Protocol):
    """Interface para abstrair o acesso ao relógio do sistema."""

    def now(self) -> datetime:
        """Retorna o instante atual."""


__all__ = (
    "ABSOLUTE_URI_PATTERN",
    "REMOTE_URI_PATTERN",
    "Base",
    "Clock",
    "Document",
    "DocumentProvider",
    "Element",
    "LinkRewrite",
    "RewriteOptions",
    "RewriteReport",
    "RewriteStatus",
    "is_local_data",
)
