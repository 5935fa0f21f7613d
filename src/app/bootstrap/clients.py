"""Factories de clientes externos (Redis nativo e httpx compartilhado)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client(redis_url: str, timeout_seconds: float = 2.0) -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton por URL).

    Raises:
        ValueError: Se redis_url vazio
    """
    from redis.asyncio import Redis as AsyncRedis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=timeout_seconds,
        socket_connect_timeout=timeout_seconds,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("async_redis_client_created", extra={"host": host})
    return client


@lru_cache(maxsize=1)
def create_async_http_client() -> httpx.AsyncClient:
    """Cria o httpx.AsyncClient compartilhado (Telegram e store REST).

    Timeout fica a cargo de cada chamada do HttpClient.
    """
    import httpx

    client = httpx.AsyncClient()
    logger.info("async_http_client_created")
    return client


async def close_clients() -> None:
    """Fecha os clientes criados (httpx compartilhado e Redis)."""
    if create_async_http_client.cache_info().currsize:
        await create_async_http_client().aclose()
        create_async_http_client.cache_clear()
        logger.info("async_http_client_closed")

    if create_async_redis_client.cache_info().currsize == 0:
        return
    from config.settings import get_rate_limit_settings

    settings = get_rate_limit_settings()
    client = create_async_redis_client(settings.redis_url, settings.store_timeout_seconds)
    await client.aclose()
    create_async_redis_client.cache_clear()
    logger.info("async_redis_client_closed")
