"""Filters de logging: contexto da request e redação de dados sensíveis.

Campos injetados em todo record:
- correlation_id: ID de rastreamento da request
- service: nome do serviço

Redação:
- atributos com nome de campo do formulário (name, email, phone...)
- token do bot em qualquer texto (a URL do sendMessage o contém)
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

# Campos do formulário e credenciais. "name" e "message" são atributos
# reservados do LogRecord e o logging já recusa esses nomes em extra.
SENSITIVE_FIELDS = frozenset(
    {
        "email",
        "phone",
        "phone_e164",
        "token",
        "bot_token",
        "rest_token",
        "authorization",
    }
)

# https://api.telegram.org/bot<id>:<secret>/sendMessage
BOT_TOKEN_PATTERN = re.compile(r"bot\d+:[A-Za-z0-9_-]+")


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Sem ela, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Enriquece o record; nunca descarta.

        correlation_id passado via ``extra`` tem precedência sobre o contexto.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveDataFilter(logging.Filter):
    """Mascara campos do formulário e o token do bot; nunca descarta o record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in SENSITIVE_FIELDS:
            if field in record.__dict__:
                setattr(record, field, REDACTED)

        if isinstance(record.msg, str):
            record.msg = BOT_TOKEN_PATTERN.sub(f"bot{REDACTED}", record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                BOT_TOKEN_PATTERN.sub(f"bot{REDACTED}", arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        for key in ("error", "url"):
            value = record.__dict__.get(key)
            if isinstance(value, str):
                setattr(record, key, BOT_TOKEN_PATTERN.sub(f"bot{REDACTED}", value))
        return True
