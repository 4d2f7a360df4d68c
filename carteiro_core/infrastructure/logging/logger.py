"""Logging estruturado dos eventos ``rewrite.*`` do Carteiro."""

from __future__ import annotations

import json
import logging
from logging import Logger, LogRecord

_EVENT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s | extra=%(extra)s"


class StructuredFormatter(logging.Formatter):
    """Serializa o ``extra`` de cada evento como JSON com chaves ordenadas.

    Valores que o JSON não representa (``Base``, datas) viram texto. Um
    ``extra`` que não seja dicionário é embrulhado em ``{"value": ...}``.
    """

    def format(self, record: LogRecord) -> str:  # noqa: D401
        payload = getattr(record, "extra", None)
        if payload is None:
            payload = {}
        elif not isinstance(payload, dict):
            payload = {"value": payload}
        record.__dict__["extra"] = json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str)
        return super().format(record)


def resolve_level(level: int | str) -> int:
    """Aceita níveis numéricos ou nomes como ``"debug"``."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Nível de log desconhecido: {level!r}")
    return resolved


def configure_logger(name: str = "carteiro", *, level: int | str = logging.INFO) -> Logger:
    """Devolve o logger ``name`` com um único handler estruturado.

    Chamadas repetidas reaproveitam o handler e só ajustam o nível.
    """

    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(fmt=_EVENT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["StructuredFormatter", "configure_logger", "resolve_level"]
