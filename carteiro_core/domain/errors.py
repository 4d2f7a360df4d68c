"""Definições de exceções para o domínio do Carteiro."""

from __future__ import annotations


class CarteiroError(Exception):
    """Exceção base para erros conhecidos da aplicação."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidReference(CarteiroError):
    """Valor que não pode ser interpretado como URI."""


class UnsupportedBase(CarteiroError):
    """Base configurada não é uma URI absoluta nem um caminho utilizável."""


class DocumentError(CarteiroError):
    """Erro ocorrido ao carregar ou serializar o documento HTML."""
