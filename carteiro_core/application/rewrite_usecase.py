"""Caso de uso responsável pela reescrita de links de um documento HTML."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import Logger

from carteiro_core.domain.contracts import (
    Base,
    Clock,
    Document,
    DocumentProvider,
    RewriteOptions,
    RewriteReport,
)
from carteiro_core.domain.errors import CarteiroError, DocumentError
from carteiro_core.infrastructure.links.attribute_converter import AttributeLinkConverter
from carteiro_core.infrastructure.links.query_string_injector import QueryStringInjector
from carteiro_core.infrastructure.time.system_clock import elapsed_ms


@dataclass(slots=True)
class RewriteOutcome:
    """Documento processado e as decisões tomadas em cada etapa."""

    document: Document
    base: Base | None
    links: RewriteReport = field(default_factory=RewriteReport)
    query_string: RewriteReport = field(default_factory=RewriteReport)


class RewriteLinksUseCase:
    """Orquestra a conversão de links e a injeção de query string.

    A base configurada é validada na construção, antes de qualquer documento
    ser processado. Falhas em elementos individuais nunca interrompem a
    passagem: ficam registradas no relatório e nos logs.
    """

    def __init__(
        self,
        provider: DocumentProvider,
        *,
        options: RewriteOptions,
        logger: Logger,
        clock: Clock,
    ) -> None:
        self._provider = provider
        self._options = options
        self._logger = logger
        self._clock = clock
        self._base = Base.for_source(options.base_url)
        self._injector = QueryStringInjector(
            options.link_query_string,
            unescaped_ampersand=options.unescaped_ampersand,
        )

    @property
    def base(self) -> Base | None:
        return self._base

    def execute(self, html: str, *, source: object = None) -> Mapping[str, object]:
        """Processa ``html`` retornando o HTML reescrito e métricas."""

        base = self._resolve_base(source)
        started = self._clock.now()
        self._logger.info(
            "rewrite.start",
            extra={
                "extra": {
                    "at": started.isoformat(),
                    "base": str(base) if base else None,
                    "query_string": self._injector.query or None,
                }
            },
        )

        try:
            document = self._provider.parse(html)
        except CarteiroError:
            self._logger.exception("rewrite.parse_error", extra={"extra": {"source": _describe(source)}})
            raise
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("rewrite.parse_error", extra={"extra": {"source": _describe(source)}})
            raise DocumentError("Falha ao carregar o documento HTML", cause=exc) from exc

        outcome = self._run(document, base)

        try:
            output = self._provider.serialize(outcome.document)
        except CarteiroError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise DocumentError("Falha ao serializar o documento HTML", cause=exc) from exc

        metrics = {
            "base": str(base) if base else None,
            "links": outcome.links.counts(),
            "query_string": outcome.query_string.counts(),
        }
        finished = self._clock.now()
        self._logger.info(
            "rewrite.finish",
            extra={
                "extra": {
                    "at": finished.isoformat(),
                    "duration_ms": elapsed_ms(started, finished),
                    **metrics,
                }
            },
        )
        return {"html": output, "metrics": metrics}

    def process(self, document: Document, *, source: object = None) -> RewriteOutcome:
        """Executa o pipeline sobre um documento já carregado."""

        return self._run(document, self._resolve_base(source))

    def _run(self, document: Document, base: Base | None) -> RewriteOutcome:
        outcome = RewriteOutcome(document=document, base=base)

        if base is not None:
            converter = AttributeLinkConverter(
                base,
                escape_url_attributes=self._options.escape_url_attributes,
            )
            outcome.links = converter.convert_with_report(document)
            self._log_report("links", outcome.links)

        if not self._injector.enabled:
            if self._options.link_query_string is not None:
                self._logger.info("rewrite.query_disabled", extra={"extra": {"reason": "empty"}})
            return outcome

        injector = self._injector
        current_host = base.host if base is not None else None
        if current_host:
            injector = QueryStringInjector(
                self._options.link_query_string,
                unescaped_ampersand=self._options.unescaped_ampersand,
                current_host=current_host,
            )
        outcome.query_string = injector.inject_with_report(document)
        self._log_report("query_string", outcome.query_string)
        return outcome

    def _resolve_base(self, source: object) -> Base | None:
        if self._base is not None:
            return self._base
        return Base.for_source(None, source)

    def _log_report(self, stage: str, report: RewriteReport) -> None:
        for rewrite in report.rewrites:
            if rewrite.status == "invalid":
                self._logger.warning(
                    "rewrite.link_invalid",
                    extra={
                        "extra": {
                            "stage": stage,
                            "tag": rewrite.tag,
                            "attribute": rewrite.attribute,
                            "value": rewrite.original,
                            "reason": rewrite.reason,
                        }
                    },
                )
            elif rewrite.status == "skipped":
                self._logger.debug(
                    "rewrite.link_skipped",
                    extra={
                        "extra": {
                            "stage": stage,
                            "value": rewrite.original,
                            "reason": rewrite.reason,
                        }
                    },
                )


def _describe(source: object) -> str | None:
    if source is None or isinstance(source, str):
        return source
    return type(source).__name__


__all__ = ["RewriteLinksUseCase", "RewriteOutcome"]
