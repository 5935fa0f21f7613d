"""Agregador de settings do form-relay.

Re-exporta as settings de cada domínio. Cada módulo carrega do ambiente
uma única vez (lru_cache); testes limpam o cache com ``cache_clear()``.
"""

from __future__ import annotations

from config.settings.abuse import (
    AbuseSettings,
    BotRejectionMode,
    get_abuse_settings,
)
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
    parse_bool,
)
from config.settings.cors import (
    EmptyAllowlistPolicy,
    OriginSettings,
    get_origin_settings,
    parse_origin_list,
)
from config.settings.rate_limit import (
    COUNTER_STORE_TOKEN_VARS,
    COUNTER_STORE_URL_VARS,
    RateLimitBackend,
    RateLimitKeyMode,
    RateLimitSettings,
    get_rate_limit_settings,
)
from config.settings.telegram import (
    TELEGRAM_API_BASE_URL,
    TelegramSettings,
    get_telegram_settings,
)

__all__ = [
    "COUNTER_STORE_TOKEN_VARS",
    "COUNTER_STORE_URL_VARS",
    "TELEGRAM_API_BASE_URL",
    "AbuseSettings",
    "BaseSettings",
    "BotRejectionMode",
    "EmptyAllowlistPolicy",
    "Environment",
    "OriginSettings",
    "RateLimitBackend",
    "RateLimitKeyMode",
    "RateLimitSettings",
    "TelegramSettings",
    "get_abuse_settings",
    "get_base_settings",
    "get_origin_settings",
    "get_rate_limit_settings",
    "get_telegram_settings",
    "parse_bool",
    "parse_origin_list",
]
