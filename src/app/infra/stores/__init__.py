"""Stores — implementações concretas do store de contadores.

Módulos disponíveis:
    - upstash_counter_store: Redis via REST (Upstash/Vercel KV)
    - redis_counter_store: Redis nativo (redis.asyncio)
    - memory_counter_store: em memória, instância única (dev/test/degradação)
"""

from __future__ import annotations

from app.infra.stores.memory_counter_store import MemoryCounterStore
from app.infra.stores.redis_counter_store import RedisCounterStore
from app.infra.stores.upstash_counter_store import UpstashCounterStore, mask_url

__all__ = [
    "MemoryCounterStore",
    "RedisCounterStore",
    "UpstashCounterStore",
    "mask_url",
]
