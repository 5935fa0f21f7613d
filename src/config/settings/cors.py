"""Settings de origem (CORS) do endpoint de submissão."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from config.settings.base.core import parse_bool

EmptyAllowlistPolicy = Literal["deny", "allow"]


@dataclass(frozen=True)
class OriginSettings:
    """Configurações da allow-list de origens.

    Attributes:
        allowed_origins: Origens completas (https://site.com) ou hosts (site.com)
        empty_policy: Comportamento com allow-list vazia (deny|allow)
        expand_www: Aceita também a variante www./sem www. de cada entrada
        max_age_seconds: Access-Control-Max-Age do preflight
    """

    allowed_origins: tuple[str, ...] = ()
    empty_policy: EmptyAllowlistPolicy = "deny"
    expand_www: bool = False
    max_age_seconds: int = 600

    def validate(self) -> list[str]:
        """Valida configurações de origem."""
        errors: list[str] = []
        if self.empty_policy not in ("deny", "allow"):
            errors.append(f"CORS_EMPTY_ALLOWLIST_POLICY inválido: {self.empty_policy}")
        if not self.allowed_origins and self.empty_policy == "deny":
            errors.append("ALLOW_ORIGINS vazio: todas as origens serão negadas")
        if self.max_age_seconds < 0:
            errors.append("CORS_MAX_AGE_SECONDS deve ser >= 0")
        return errors


def parse_origin_list(raw: str) -> tuple[str, ...]:
    """Quebra lista separada por vírgula, descartando vazios."""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _load_from_env() -> OriginSettings:
    """Carrega OriginSettings de variáveis de ambiente."""
    raw = os.getenv("ALLOW_ORIGINS") or os.getenv("ALLOW_ORIGIN") or ""
    policy_str = os.getenv("CORS_EMPTY_ALLOWLIST_POLICY", "deny").strip().lower()
    policy: EmptyAllowlistPolicy = "allow" if policy_str == "allow" else "deny"
    return OriginSettings(
        allowed_origins=parse_origin_list(raw),
        empty_policy=policy,
        expand_www=parse_bool(os.getenv("CORS_EXPAND_WWW"), False),
        max_age_seconds=int(os.getenv("CORS_MAX_AGE_SECONDS", "600")),
    )


@lru_cache(maxsize=1)
def get_origin_settings() -> OriginSettings:
    """Retorna instância cacheada de OriginSettings."""
    return _load_from_env()
