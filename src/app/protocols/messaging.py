"""Protocolo do transporte de mensagens (API de bot)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Resposta da API de mensagens para um envio.

    Attributes:
        ok: Entrega confirmada pela API
        status_code: Status HTTP
        payload: JSON devolvido (diagnóstico)
    """

    ok: bool
    status_code: int
    payload: dict[str, Any] = field(default_factory=dict)


class MessagingTransportProtocol(Protocol):
    """Contrato mínimo para enviar texto a um destino."""

    async def send_text(
        self,
        chat_id: str,
        text: str,
        parse_mode: str | None = None,
    ) -> TransportResponse: ...
