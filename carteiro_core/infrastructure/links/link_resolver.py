"""Resolução de referências relativas em links absolutos."""

from __future__ import annotations

import os
from urllib.parse import urljoin, urlsplit, urlunsplit

from carteiro_core.domain.contracts import ABSOLUTE_URI_PATTERN, Base
from carteiro_core.domain.errors import InvalidReference
from carteiro_core.infrastructure.links.uri_canonicalizer import canonicalize


def resolve(reference: str, base: Base | str) -> str:
    """Resolve ``reference`` contra ``base`` retornando a forma canônica.

    Referências já absolutas (http, https, ftp ou file) ignoram a base. Bases
    que não são URIs são tratadas como caminhos locais: o resultado é o caminho
    absoluto da referência relativo ao diretório da base.
    """

    reference = (reference or "").strip()
    if ABSOLUTE_URI_PATTERN.match(reference):
        return canonicalize(reference)

    if isinstance(base, Base):
        if base.uri is not None:
            return _join_uri(base.uri, reference)
        return resolve_local_path(reference, base.path or "")

    if ABSOLUTE_URI_PATTERN.match(base):
        return _join_uri(base.strip(), reference)
    return resolve_local_path(reference, base)


def resolve_local_path(reference: str, base_path: str) -> str:
    """Equivalente a expandir ``reference`` a partir do diretório de ``base_path``."""

    directory = os.path.dirname(os.path.expanduser(base_path))
    return os.path.abspath(os.path.join(directory, os.path.expanduser(reference)))


def _join_uri(base_uri: str, reference: str) -> str:
    try:
        if not reference:
            # referência vazia aponta para a própria base, sem o fragmento
            parts = urlsplit(base_uri)
            joined = urlunsplit(parts._replace(fragment=""))
        else:
            joined = urljoin(base_uri, reference)
    except ValueError as exc:
        raise InvalidReference(f"Não foi possível resolver {reference!r}", cause=exc) from exc
    return canonicalize(joined)


__all__ = ["resolve", "resolve_local_path"]
