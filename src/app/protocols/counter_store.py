"""Protocolo do store de contadores usado pelo rate limiter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CounterSnapshot:
    """Estado do contador logo após o incremento.

    Attributes:
        count: Valor após o INCR
        ttl_seconds: Segundos até a janela expirar
    """

    count: int
    ttl_seconds: int


class AsyncCounterStoreProtocol(ABC):
    """Contrato de contador atômico com expiração.

    Semântica de janela fixa:
    - increment(key, window) faz INCR atômico
    - no primeiro incremento da janela (count == 1) aplica EXPIRE=window
    - se a chave existir sem expiração, reaplica EXPIRE (idempotente)

    Implementações levantam CounterStoreError em falha de I/O; quem decide
    o fallback é o rate limiter.
    """

    backend_name: str = "unknown"

    @abstractmethod
    async def increment(self, key: str, window_seconds: int) -> CounterSnapshot:
        """Incrementa o contador da chave e garante a expiração da janela.

        Args:
            key: Chave opaca (hash da identidade, nunca PII)
            window_seconds: Duração da janela

        Returns:
            CounterSnapshot com contagem e TTL restante.
        """

    @abstractmethod
    async def ping(self) -> bool:
        """Verifica se o store responde (readiness)."""
