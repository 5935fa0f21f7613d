"""Métricas via structured logging.

As métricas são logs JSON com ``metric_type`` e podem ser agregadas no
coletor de logs da plataforma (Cloud Logging, Vercel, Datadog).

Métricas:
- latency: duração do pipeline por request
- delivery: resultado de cada entrega por destino
- rejection: submissões encerradas antes da entrega, por motivo
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "submit_form")
        operation: Nome da operação (ex: "execute")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery(
    destination: str,
    ok: bool,
    status_code: int | None = None,
    correlation_id: str | None = None,
) -> None:
    """Registra o resultado de uma entrega.

    Args:
        destination: Nome lógico do destino ("public", "internal")
        ok: Se a API de mensagens confirmou a entrega
        status_code: Status HTTP devolvido (None em timeout/erro de rede)
        correlation_id: ID de correlação
    """
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "component": "notification_dispatcher",
            "destination": destination,
            "ok": ok,
            "status_code": status_code,
            "correlation_id": correlation_id,
        },
    )


def record_rejection(
    reason: str,
    status_code: int,
    correlation_id: str | None = None,
) -> None:
    """Registra submissão encerrada sem entrega.

    Args:
        reason: Motivo (ex: "origin_denied", "honeypot", "rate_limited")
        status_code: Status HTTP devolvido ao cliente
        correlation_id: ID de correlação
    """
    logger.info(
        "metric_rejection",
        extra={
            "metric_type": "rejection",
            "component": "submit_form",
            "reason": reason,
            "status_code": status_code,
            "correlation_id": correlation_id,
        },
    )
