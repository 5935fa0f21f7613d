"""Entrega concorrente das notificações.

Cada destino recebe uma chamada à API de mensagens com timeout próprio.
Falhas são capturadas por destino e nunca cancelam os demais envios.
O relatório agregado considera apenas destinos marcados como obrigatórios.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from app.infra.http import HttpError
from app.observability import get_correlation_id, record_delivery
from app.protocols.messaging import MessagingTransportProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Destination:
    """Destino lógico de entrega."""

    name: str
    chat_id: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class Delivery:
    """Par destino + texto a enviar."""

    destination: Destination
    text: str


@dataclass(frozen=True, slots=True)
class DeliveryOutcome:
    """Resultado de uma entrega."""

    destination: Destination
    ok: bool
    status_code: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def to_details(self) -> dict[str, Any]:
        """Resumo seguro para devolver ao cliente em 502."""
        details: dict[str, Any] = {"ok": self.ok, "status": self.status_code}
        if self.error:
            details["error"] = self.error
        description = self.payload.get("description")
        if description:
            details["description"] = description
        return details


@dataclass(frozen=True, slots=True)
class DispatchReport:
    """Resultado agregado de um dispatch."""

    outcomes: tuple[DeliveryOutcome, ...]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes if o.destination.required)

    @property
    def failed_required(self) -> tuple[DeliveryOutcome, ...]:
        return tuple(o for o in self.outcomes if o.destination.required and not o.ok)

    @property
    def failed_optional(self) -> tuple[DeliveryOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.destination.required and not o.ok)

    def to_details(self) -> dict[str, Any]:
        return {o.destination.name: o.to_details() for o in self.outcomes}


class NotificationDispatcher:
    """Envia N mensagens em paralelo e agrega o resultado."""

    def __init__(
        self,
        transport: MessagingTransportProtocol,
        timeout_seconds: float = 5.0,
        parse_mode: str | None = "HTML",
    ) -> None:
        self._transport = transport
        self._timeout_seconds = timeout_seconds
        self._parse_mode = parse_mode

    async def dispatch(self, deliveries: Sequence[Delivery]) -> DispatchReport:
        """Entrega todas as mensagens concorrentemente."""
        outcomes = await asyncio.gather(*(self._deliver(d) for d in deliveries))
        report = DispatchReport(outcomes=tuple(outcomes))

        for outcome in report.failed_optional:
            logger.warning(
                "optional_delivery_failed",
                extra={
                    "destination": outcome.destination.name,
                    "status_code": outcome.status_code,
                    "error": outcome.error,
                },
            )
        return report

    async def notify(self, destination: Destination, text: str) -> bool:
        """Envio best-effort (alertas). Nunca levanta exceção."""
        outcome = await self._deliver(Delivery(destination=destination, text=text))
        return outcome.ok

    async def _deliver(self, delivery: Delivery) -> DeliveryOutcome:
        destination = delivery.destination
        try:
            response = await asyncio.wait_for(
                self._transport.send_text(
                    destination.chat_id,
                    delivery.text,
                    parse_mode=self._parse_mode,
                ),
                timeout=self._timeout_seconds,
            )
        except TimeoutError:
            outcome = DeliveryOutcome(destination=destination, ok=False, error="timeout")
        except HttpError as exc:
            outcome = DeliveryOutcome(
                destination=destination,
                ok=False,
                status_code=exc.status_code,
                error="timeout" if exc.is_timeout else str(exc),
            )
        except Exception as exc:
            logger.exception(
                "delivery_unexpected_error",
                extra={"destination": destination.name, "error_type": type(exc).__name__},
            )
            outcome = DeliveryOutcome(
                destination=destination,
                ok=False,
                error=type(exc).__name__,
            )
        else:
            outcome = DeliveryOutcome(
                destination=destination,
                ok=response.ok,
                status_code=response.status_code,
                payload=response.payload,
            )

        record_delivery(
            destination=destination.name,
            ok=outcome.ok,
            status_code=outcome.status_code,
            correlation_id=get_correlation_id(),
        )
        return outcome
