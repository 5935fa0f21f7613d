"""Redis Counter Store — janela fixa com INCR + EXPIRE no Redis nativo.

Para Redis acessível por TCP (REDIS_URL). Upstash por REST fica em
upstash_counter_store.py.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.stores.memory_counter_store import COUNTER_PREFIX
from app.protocols.counter_store import AsyncCounterStoreProtocol, CounterSnapshot
from utils.errors import CounterStoreError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


class RedisCounterStore(AsyncCounterStoreProtocol):
    """Store de contadores usando redis.asyncio.

    INCR e TTL vão na mesma transação (MULTI/EXEC). EXPIRE só é enviado
    no primeiro incremento da janela ou quando a chave ficou sem TTL;
    duas requests concorrentes que ambas aplicam EXPIRE produzem o mesmo
    resultado.

    Args:
        async_redis_client: Cliente Redis assíncrono
    """

    backend_name = "redis"

    def __init__(self, async_redis_client: AsyncRedis[bytes]) -> None:
        self._redis = async_redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{COUNTER_PREFIX}{key}"

    async def increment(self, key: str, window_seconds: int) -> CounterSnapshot:
        """Incrementa o contador e garante expiração da janela."""
        redis_key = self._key(key)
        try:
            pipeline = self._redis.pipeline(transaction=True)
            pipeline.incr(redis_key)
            pipeline.ttl(redis_key)
            count, ttl = await pipeline.execute()
            count, ttl = int(count), int(ttl)
            if count == 1 or ttl < 0:
                await self._redis.expire(redis_key, window_seconds)
                ttl = window_seconds
        except Exception as exc:
            raise CounterStoreError("Falha ao incrementar contador no Redis") from exc

        return CounterSnapshot(count=count, ttl_seconds=ttl)

    async def ping(self) -> bool:
        """PING no Redis."""
        try:
            return bool(await self._redis.ping())
        except Exception as exc:
            raise CounterStoreError("Falha no PING do Redis") from exc
