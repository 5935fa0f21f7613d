"""Settings de rate limiting e do store de contadores.

O store preferido é um Redis acessado por REST (Upstash/Vercel KV) com
bearer token. As variáveis mudam de nome conforme a integração que
provisionou o banco, então várias são aceitas, na ordem abaixo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

RateLimitBackend = Literal["auto", "upstash", "redis", "memory", "none"]
RateLimitKeyMode = Literal["ip", "ip_origin", "ip_ua"]

COUNTER_STORE_URL_VARS: tuple[str, ...] = (
    "KV_REST_API_URL",
    "UPSTASH_KV_REST_URL",
    "UPSTASH_REDIS_REST_URL",
    "UPSTASH_REDIS_REST_KV_REST_API_URL",
)
COUNTER_STORE_TOKEN_VARS: tuple[str, ...] = (
    "KV_REST_API_TOKEN",
    "UPSTASH_KV_REST_TOKEN",
    "UPSTASH_REDIS_REST_TOKEN",
    "UPSTASH_REDIS_REST_KV_REST_API_TOKEN",
)

_VALID_BACKENDS = ("auto", "upstash", "redis", "memory", "none")
_VALID_KEY_MODES = ("ip", "ip_origin", "ip_ua")


@dataclass(frozen=True)
class RateLimitSettings:
    """Configurações do rate limiter (janela fixa).

    Attributes:
        backend: Store de contadores (auto|upstash|redis|memory|none)
        limit: Requests admitidas por janela e identidade
        window_seconds: Duração da janela
        key_mode: Composição da identidade (ip|ip_origin|ip_ua)
        rest_url: URL REST do store (Upstash/KV)
        rest_token: Bearer token do store REST
        rest_url_var: Nome da variável de onde rest_url veio
        redis_url: URL nativa do Redis (redis:// ou rediss://)
        store_timeout_seconds: Timeout de cada chamada ao store
    """

    backend: RateLimitBackend = "auto"
    limit: int = 20
    window_seconds: int = 300
    key_mode: RateLimitKeyMode = "ip"
    rest_url: str = ""
    rest_token: str = ""
    rest_url_var: str = ""
    redis_url: str = ""
    store_timeout_seconds: float = 2.0

    @property
    def has_rest_store(self) -> bool:
        """URL e token REST presentes."""
        return bool(self.rest_url and self.rest_token)

    def resolve_backend(self) -> RateLimitBackend:
        """Resolve "auto" para o backend efetivo."""
        if self.backend != "auto":
            return self.backend
        if self.has_rest_store:
            return "upstash"
        if self.redis_url:
            return "redis"
        return "memory"

    def validate(self) -> list[str]:
        """Valida configurações de rate limiting."""
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"RATE_LIMIT_BACKEND inválido: {self.backend}")

        if self.key_mode not in _VALID_KEY_MODES:
            errors.append(f"RATE_LIMIT_KEY_MODE inválido: {self.key_mode}")

        if self.limit < 1:
            errors.append("RATE_LIMIT_MAX deve ser >= 1")

        if self.window_seconds < 1:
            errors.append("RATE_LIMIT_WINDOW_SECONDS deve ser >= 1")

        if self.store_timeout_seconds <= 0:
            errors.append("COUNTER_STORE_TIMEOUT_SECONDS deve ser > 0")

        if self.backend == "upstash" and not self.has_rest_store:
            errors.append("RATE_LIMIT_BACKEND=upstash requer KV_REST_API_URL/KV_REST_API_TOKEN")

        if self.backend == "redis" and not self.redis_url:
            errors.append("RATE_LIMIT_BACKEND=redis requer REDIS_URL configurado")

        if self.resolve_backend() == "memory":
            errors.append(
                "Rate limit em memória: contadores por instância, sem garantia "
                "em deploy com múltiplas réplicas"
            )

        return errors


def _first_env(names: tuple[str, ...]) -> tuple[str, str]:
    """Retorna (nome, valor) da primeira variável preenchida."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return name, value
    return "", ""


def _load_from_env() -> RateLimitSettings:
    """Carrega RateLimitSettings de variáveis de ambiente."""
    backend_str = os.getenv("RATE_LIMIT_BACKEND", "auto").strip().lower()
    backend: RateLimitBackend = backend_str if backend_str in _VALID_BACKENDS else "auto"  # type: ignore[assignment]
    mode_str = os.getenv("RATE_LIMIT_KEY_MODE", "ip").strip().lower()
    key_mode: RateLimitKeyMode = mode_str if mode_str in _VALID_KEY_MODES else "ip"  # type: ignore[assignment]
    url_var, rest_url = _first_env(COUNTER_STORE_URL_VARS)
    _, rest_token = _first_env(COUNTER_STORE_TOKEN_VARS)
    return RateLimitSettings(
        backend=backend,
        limit=int(os.getenv("RATE_LIMIT_MAX", "20")),
        window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "300")),
        key_mode=key_mode,
        rest_url=rest_url.rstrip("/"),
        rest_token=rest_token,
        rest_url_var=url_var,
        redis_url=os.getenv("REDIS_URL", "").strip(),
        store_timeout_seconds=float(os.getenv("COUNTER_STORE_TIMEOUT_SECONDS", "2")),
    )


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """Retorna instância cacheada de RateLimitSettings."""
    return _load_from_env()
