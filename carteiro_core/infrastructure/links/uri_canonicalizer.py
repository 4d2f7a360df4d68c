"""Normalização canônica de URIs (RFC 3986, seção 6.2.2)."""

from __future__ import annotations

import string
from urllib.parse import SplitResult, urlsplit

from carteiro_core.domain.errors import InvalidReference

_UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")
_SUB_DELIMS = frozenset("!$&'()*+,;=")
_PATH_SAFE = _UNRESERVED | _SUB_DELIMS | frozenset(":@/")
_QUERY_SAFE = _PATH_SAFE | frozenset("?")
_USERINFO_SAFE = _UNRESERVED | _SUB_DELIMS | frozenset(":")
_HEXDIGITS = frozenset(string.hexdigits)

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443, "ftp": 21}


def canonicalize(uri: SplitResult | str) -> str:
    """Retorna a forma canônica de ``uri``.

    Aceita tanto uma URI já decomposta por ``urlsplit`` quanto uma string.
    Levanta ``InvalidReference`` quando o valor não pode ser interpretado.
    """

    if isinstance(uri, SplitResult):
        parts = uri
        has_authority = bool(parts.netloc) or parts.scheme == "file"
    else:
        text = str(uri)
        try:
            parts = urlsplit(text)
        except ValueError as exc:
            raise InvalidReference(f"URI inválida: {text}", cause=exc) from exc
        rest = text.split(":", 1)[1] if parts.scheme else text
        has_authority = rest.startswith("//")

    scheme = parts.scheme.lower()
    netloc = _normalize_netloc(parts, scheme) if has_authority else ""
    path = normalize_percent_encoding(parts.path, _PATH_SAFE)
    if scheme:
        path = remove_dot_segments(path)
    if has_authority and not path and scheme in DEFAULT_PORTS:
        path = "/"
    query = normalize_percent_encoding(parts.query, _QUERY_SAFE)
    fragment = normalize_percent_encoding(parts.fragment, _QUERY_SAFE)

    result = f"{scheme}:" if scheme else ""
    if has_authority:
        result += f"//{netloc}"
    result += path
    if query:
        result += f"?{query}"
    if fragment:
        result += f"#{fragment}"
    return result


def normalize_percent_encoding(component: str, safe: frozenset[str]) -> str:
    """Decodifica escapes de caracteres não reservados e codifica o restante."""

    output: list[str] = []
    index = 0
    length = len(component)
    while index < length:
        char = component[index]
        if char == "%":
            escape = component[index + 1 : index + 3]
            if len(escape) != 2 or not all(digit in _HEXDIGITS for digit in escape):
                raise InvalidReference(f"Codificação percentual inválida: {component}")
            decoded = chr(int(escape, 16))
            output.append(decoded if decoded in _UNRESERVED else f"%{escape.upper()}")
            index += 3
            continue
        if char in safe:
            output.append(char)
        else:
            output.extend(f"%{byte:02X}" for byte in char.encode("utf-8"))
        index += 1
    return "".join(output)


def remove_dot_segments(path: str) -> str:
    """Remove segmentos ``.`` e ``..`` conforme RFC 3986, seção 5.2.4."""

    if "." not in path:
        return path
    output: list[str] = []
    remaining = path
    while remaining:
        if remaining.startswith("../"):
            remaining = remaining[3:]
        elif remaining.startswith("./"):
            remaining = remaining[2:]
        elif remaining.startswith("/./"):
            remaining = remaining[2:]
        elif remaining == "/.":
            remaining = "/"
        elif remaining.startswith("/../"):
            remaining = remaining[3:]
            if output:
                output.pop()
        elif remaining == "/..":
            remaining = "/"
            if output:
                output.pop()
        elif remaining in {".", ".."}:
            remaining = ""
        else:
            start = 1 if remaining.startswith("/") else 0
            end = remaining.find("/", start)
            if end == -1:
                end = len(remaining)
            output.append(remaining[:end])
            remaining = remaining[end:]
    return "".join(output)


def _normalize_netloc(parts: SplitResult, scheme: str) -> str:
    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidReference(f"Porta inválida em {parts.geturl()}", cause=exc) from exc

    netloc = parts.netloc
    userinfo = netloc.rpartition("@")[0]
    host = parts.hostname or ""
    if host and not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise InvalidReference(f"Host inválido: {host}", cause=exc) from exc
    if ":" in host:
        host = f"[{host}]"

    result = ""
    if "@" in netloc:
        result = normalize_percent_encoding(userinfo, _USERINFO_SAFE) + "@"
    result += host
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        result += f":{port}"
    return result


__all__ = ["DEFAULT_PORTS", "canonicalize", "normalize_percent_encoding", "remove_dot_segments"]
