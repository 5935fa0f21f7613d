"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import get_submit_use_case
from app.use_cases.submit_form import SubmitFormUseCase
from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()

STORE_PING_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }
        if self.details:
            payload.update(self.details)
        return payload


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(
    use_case: SubmitFormUseCase = Depends(get_submit_use_case),
) -> JSONResponse:
    """Readiness: Telegram configurado e round-trip no store de contadores.

    O store só degrada a prontidão: o rate limiter admite requests quando
    ele está indisponível.
    """
    telegram_check = DependencyCheck(
        status="ok" if use_case.is_configured else "failed",
        error=None if use_case.is_configured else "not_configured",
    )
    store_check = await _check_counter_store(use_case.rate_limiter.store)
    ready = telegram_check.status == "ok"

    if store_check.status != "ok":
        logger.warning("readiness_counter_store_degraded", extra={"error": store_check.error})

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "telegram": telegram_check.as_dict(),
            "counter_store": store_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_counter_store(store: Any | None) -> DependencyCheck:
    if store is None:
        return DependencyCheck(
            status="degraded",
            error="disabled",
            details={"backend": "none"},
        )
    details: dict[str, Any] = {"backend": store.backend_name}
    masked_url = getattr(store, "masked_url", None)
    if masked_url:
        details["url"] = masked_url

    started_at = time.perf_counter()
    try:
        healthy = await asyncio.wait_for(store.ping(), timeout=STORE_PING_TIMEOUT_SECONDS)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout", details=details)
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__, details=details)
    latency_ms = round((time.perf_counter() - started_at) * 1000, 2)

    if not healthy:
        return DependencyCheck(status="failed", latency_ms=latency_ms, error="ping_failed", details=details)
    if store.backend_name == "memory":
        return DependencyCheck(
            status="degraded",
            latency_ms=latency_ms,
            error="single_instance",
            details=details,
        )
    return DependencyCheck(status="ok", latency_ms=latency_ms, details=details)
