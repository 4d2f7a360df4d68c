"""Composition root programático para o caso de uso de reescrita."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from logging import Logger

from carteiro_core.application.rewrite_usecase import RewriteLinksUseCase
from carteiro_core.domain.contracts import Clock, RewriteOptions
from carteiro_core.infrastructure.logging.logger import configure_logger
from carteiro_core.infrastructure.parsing.providers import build_document_provider
from carteiro_core.infrastructure.time.system_clock import SystemClock
from config.settings import Settings, load_settings


def build_rewrite_use_case(
    settings: Settings | None = None,
    *,
    options: RewriteOptions | None = None,
    logger: Logger | None = None,
    clock: Clock | None = None,
) -> RewriteLinksUseCase:
    """Monta o caso de uso a partir das configurações de ambiente.

    ``options`` substitui as opções de links derivadas de ``settings``.
    """

    settings = settings or load_settings()
    provider = build_document_provider({"name": settings.document.provider})
    return RewriteLinksUseCase(
        provider,
        options=options or settings.to_options(),
        logger=logger or configure_logger(level=settings.log.level),
        clock=clock or SystemClock(),
    )


def rewrite_html(html: str, *, source: object = None, **overrides: object) -> Mapping[str, object]:
    """Atalho para reescrever ``html`` com opções pontuais.

    Chaves aceitas em ``overrides`` são os campos de ``RewriteOptions``.
    """

    settings = load_settings()
    options = replace(settings.to_options(), **overrides)
    use_case = build_rewrite_use_case(settings, options=options)
    return use_case.execute(html, source=source)
