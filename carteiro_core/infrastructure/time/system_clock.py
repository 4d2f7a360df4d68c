"""Relógio usado para carimbar e medir cada passagem de reescrita."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from carteiro_core.domain.contracts import Clock


class SystemClock(Clock):
    """Instantes do relógio do sistema, com fuso explícito (UTC por padrão)."""

    def __init__(self, tz: tzinfo = timezone.utc) -> None:
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


def elapsed_ms(started: datetime, finished: datetime) -> float:
    """Duração entre dois instantes, em milissegundos com três casas."""

    return round((finished - started).total_seconds() * 1000, 3)


__all__ = ["SystemClock", "elapsed_ms"]
