"""Factories de dependências: conecta implementações concretas aos protocolos.

Cada factory recebe as settings explicitamente (testáveis sem env) e o
composition root em ``app.bootstrap`` passa as settings carregadas do
ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.telegram import create_telegram_http_client
from app.bootstrap.clients import create_async_http_client, create_async_redis_client
from app.infra.http import HttpClient, HttpClientConfig
from app.infra.stores import MemoryCounterStore, RedisCounterStore, UpstashCounterStore
from app.services.abuse_filter import AbuseFilter
from app.services.notification_dispatcher import Destination, NotificationDispatcher
from app.services.origin_authorizer import OriginAuthorizer
from app.services.rate_limiter import RateLimiter
from app.use_cases.submit_form import SubmitFormUseCase

if TYPE_CHECKING:
    import httpx

    from app.protocols.counter_store import AsyncCounterStoreProtocol
    from app.protocols.messaging import MessagingTransportProtocol
    from config.settings import (
        AbuseSettings,
        OriginSettings,
        RateLimitSettings,
        TelegramSettings,
    )

logger = logging.getLogger(__name__)


def create_counter_store(settings: RateLimitSettings) -> AsyncCounterStoreProtocol | None:
    """Cria o store de contadores conforme RATE_LIMIT_BACKEND.

    Returns:
        Store configurado, ou None quando o rate limit está desligado.
    """
    backend = settings.resolve_backend()

    if backend == "none":
        logger.warning("rate_limit_disabled")
        return None

    if backend == "upstash":
        http_client = HttpClient(
            HttpClientConfig(timeout_seconds=settings.store_timeout_seconds),
            client=create_async_http_client(),
        )
        store = UpstashCounterStore(
            settings.rest_url, settings.rest_token, http_client
        )
        logger.info(
            "counter_store_created",
            extra={"backend": backend, "url": store.masked_url, "url_var": settings.rest_url_var},
        )
        return store

    if backend == "redis":
        client = create_async_redis_client(settings.redis_url, settings.store_timeout_seconds)
        logger.info("counter_store_created", extra={"backend": backend})
        return RedisCounterStore(client)

    logger.warning(
        "counter_store_memory_fallback",
        extra={"backend": "memory", "note": "contadores por instância"},
    )
    return MemoryCounterStore()


def create_rate_limiter(
    settings: RateLimitSettings,
    store: AsyncCounterStoreProtocol | None = None,
) -> RateLimiter:
    """Cria o RateLimiter (store criado a partir das settings se omitido)."""
    if store is None:
        store = create_counter_store(settings)
    return RateLimiter(
        store=store,
        limit=settings.limit,
        window_seconds=settings.window_seconds,
        timeout_seconds=settings.store_timeout_seconds,
    )


def create_dispatcher(
    settings: TelegramSettings,
    transport: MessagingTransportProtocol | None = None,
    client: httpx.AsyncClient | None = None,
) -> NotificationDispatcher | None:
    """Cria o dispatcher; None se o token do bot não está configurado."""
    if transport is None:
        if not settings.bot_token:
            logger.error("telegram_not_configured", extra={"missing": "TELEGRAM_BOT_TOKEN"})
            return None
        transport = create_telegram_http_client(
            settings, client=client or create_async_http_client()
        )
    return NotificationDispatcher(
        transport=transport,
        timeout_seconds=settings.request_timeout_seconds,
        parse_mode=settings.parse_mode,
    )


def create_destinations(
    settings: TelegramSettings,
) -> tuple[Destination | None, Destination | None]:
    """Retorna (destino público obrigatório, destino interno opcional)."""
    public = (
        Destination(name="public", chat_id=settings.public_chat_id, required=True)
        if settings.public_chat_id
        else None
    )
    internal = (
        Destination(name="internal", chat_id=settings.admin_chat_id, required=False)
        if settings.has_admin_chat
        else None
    )
    return public, internal


def create_submit_use_case(
    origin_settings: OriginSettings,
    abuse_settings: AbuseSettings,
    rate_limit_settings: RateLimitSettings,
    telegram_settings: TelegramSettings,
    transport: MessagingTransportProtocol | None = None,
    store: AsyncCounterStoreProtocol | None = None,
) -> SubmitFormUseCase:
    """Monta o SubmitFormUseCase completo."""
    public, internal = create_destinations(telegram_settings)
    return SubmitFormUseCase(
        authorizer=OriginAuthorizer(
            allowed_origins=origin_settings.allowed_origins,
            empty_policy=origin_settings.empty_policy,
            expand_www=origin_settings.expand_www,
            max_age_seconds=origin_settings.max_age_seconds,
        ),
        abuse_filter=AbuseFilter(min_elapsed_ms=abuse_settings.min_elapsed_ms),
        rate_limiter=create_rate_limiter(rate_limit_settings, store),
        dispatcher=create_dispatcher(telegram_settings, transport),
        public_destination=public,
        admin_destination=internal,
        bot_rejection_mode=abuse_settings.bot_rejection_mode,
        require_consent=abuse_settings.require_consent,
        key_mode=rate_limit_settings.key_mode,
    )
