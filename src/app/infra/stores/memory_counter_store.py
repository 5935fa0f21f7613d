"""Store de contadores em memória — degradação de instância única.

ATENÇÃO: os contadores vivem no processo. Em deploy com várias réplicas
(ou serverless com cold starts) cada instância conta sozinha e o limite
efetivo se multiplica. Serve para desenvolvimento, testes e como
caminho degradado quando nenhum store externo foi configurado; nunca
como mecanismo de correção.
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

from app.protocols.counter_store import AsyncCounterStoreProtocol, CounterSnapshot

if TYPE_CHECKING:
    from collections.abc import Callable

COUNTER_PREFIX = "ratelimit:"


class MemoryCounterStore(AsyncCounterStoreProtocol):
    """Contador de janela fixa em dict, com relógio injetável.

    Args:
        clock: Relógio monotônico em segundos (injetável em testes)
        max_keys: Teto de chaves. Acima dele, varre as expiradas e, se
            ainda faltar espaço, descarta as janelas menos recentes
    """

    backend_name = "memory"

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = 10_000,
    ) -> None:
        if max_keys < 1:
            raise ValueError("max_keys deve ser >= 1")
        self._clock = clock
        self._max_keys = max_keys
        self._store: dict[str, tuple[int, float]] = {}  # key -> (count, expires_at)

    def _cleanup_expired(self, now: float) -> None:
        """Remove janelas expiradas."""
        expired = [k for k, (_, expires_at) in self._store.items() if expires_at <= now]
        for k in expired:
            del self._store[k]

    async def increment(self, key: str, window_seconds: int) -> CounterSnapshot:
        """Incrementa o contador (sem await interno, logo atômico no event loop)."""
        now = self._clock()
        redis_key = f"{COUNTER_PREFIX}{key}"
        entry = self._store.get(redis_key)

        if entry is None or entry[1] <= now:
            count, expires_at = 1, now + window_seconds
        else:
            count, expires_at = entry[0] + 1, entry[1]

        # reinserir mantém o dict em ordem de atividade (mais recente no fim)
        self._store.pop(redis_key, None)
        self._store[redis_key] = (count, expires_at)
        if len(self._store) > self._max_keys:
            self._cleanup_expired(now)
        while len(self._store) > self._max_keys:
            del self._store[next(iter(self._store))]

        ttl = max(1, math.ceil(expires_at - now))
        return CounterSnapshot(count=count, ttl_seconds=ttl)

    async def ping(self) -> bool:
        """Sempre disponível."""
        return True

    def clear(self) -> None:
        """Zera todos os contadores."""
        self._store.clear()
