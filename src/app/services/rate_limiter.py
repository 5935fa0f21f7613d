"""Rate limiter de janela fixa por identidade do cliente.

Algoritmo:
    count = INCR(key); se count == 1: EXPIRE(key, janela)
    admite se count <= limite

Rajadas na virada da janela são uma imprecisão aceita. Se o store
falhar ou demorar, a request é admitida (fail open): o limite é uma
defesa de melhor esforço e não pode derrubar tráfego legítimo.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from config.logging import log_fallback
from utils.errors import CounterStoreError

if TYPE_CHECKING:
    from app.domain.submission import RequestContext
    from app.protocols.counter_store import AsyncCounterStoreProtocol
    from config.settings import RateLimitKeyMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """Decisão do rate limiter para uma request.

    Attributes:
        allowed: Request admitida
        count: Contagem na janela atual (0 quando não medida)
        remaining: Cota restante na janela
        reset_seconds: Segundos até a janela reiniciar
        limit: Limite configurado
        degraded: Decisão tomada sem consultar o store (fail open)
    """

    allowed: bool
    count: int
    remaining: int
    reset_seconds: int
    limit: int
    degraded: bool = False

    def headers(self) -> dict[str, str]:
        """Headers X-RateLimit-* (e Retry-After quando negada)."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_seconds),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.reset_seconds)
        return headers


def build_identity_key(context: RequestContext, mode: RateLimitKeyMode = "ip") -> str:
    """Monta a chave da identidade do cliente, com hash (sem PII no store).

    Combinar IP com origem ou user-agent reduz falso-positivo de clientes
    atrás do mesmo NAT.
    """
    parts = [context.client_ip or "unknown"]
    if mode == "ip_origin":
        parts.append(context.origin or "-")
    elif mode == "ip_ua":
        parts.append(context.user_agent or "-")
    material = "|".join(parts)
    return hashlib.sha256(material.encode("utf-8")).hexdigest()[:32]


class RateLimiter:
    """Aplica o limite de janela fixa sobre um store de contadores.

    Args:
        store: Store de contadores; None desliga o limite
        limit: Requests por janela
        window_seconds: Duração da janela
        timeout_seconds: Tempo máximo de espera pelo store
    """

    def __init__(
        self,
        store: AsyncCounterStoreProtocol | None,
        limit: int,
        window_seconds: int,
        timeout_seconds: float = 2.0,
    ) -> None:
        self._store = store
        self._limit = limit
        self._window_seconds = window_seconds
        self._timeout_seconds = timeout_seconds

    @property
    def store(self) -> AsyncCounterStoreProtocol | None:
        """Store de contadores em uso (None se desligado)."""
        return self._store

    @property
    def backend_name(self) -> str:
        """Backend em uso ("none" se desligado)."""
        return self._store.backend_name if self._store is not None else "none"

    def _open_decision(self, degraded: bool = True) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=True,
            count=0,
            remaining=self._limit,
            reset_seconds=self._window_seconds,
            limit=self._limit,
            degraded=degraded,
        )

    async def check(self, identity_key: str) -> RateLimitDecision:
        """Conta a request e decide admissão.

        Args:
            identity_key: Chave opaca da identidade (build_identity_key)

        Returns:
            RateLimitDecision nova a cada chamada.
        """
        if self._store is None:
            return self._open_decision(degraded=False)

        started_at = time.perf_counter()
        try:
            snapshot = await asyncio.wait_for(
                self._store.increment(identity_key, self._window_seconds),
                timeout=self._timeout_seconds,
            )
        except TimeoutError:
            log_fallback(
                logger,
                "rate_limiter",
                reason="store_timeout",
                elapsed_ms=(time.perf_counter() - started_at) * 1000,
            )
            return self._open_decision()
        except CounterStoreError as exc:
            log_fallback(
                logger,
                "rate_limiter",
                reason=f"store_error:{type(exc.__cause__ or exc).__name__}",
                elapsed_ms=(time.perf_counter() - started_at) * 1000,
            )
            return self._open_decision()

        allowed = snapshot.count <= self._limit
        reset_seconds = snapshot.ttl_seconds if snapshot.ttl_seconds > 0 else self._window_seconds
        return RateLimitDecision(
            allowed=allowed,
            count=snapshot.count,
            remaining=max(0, self._limit - snapshot.count),
            reset_seconds=reset_seconds,
            limit=self._limit,
        )
