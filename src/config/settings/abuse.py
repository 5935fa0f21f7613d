"""Settings de proteção contra bots e de validação do formulário."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from config.settings.base.core import parse_bool

BotRejectionMode = Literal["reject", "silent"]


@dataclass(frozen=True)
class AbuseSettings:
    """Configurações do filtro anti-bot.

    Attributes:
        min_elapsed_ms: Tempo mínimo plausível entre render e envio do form
        bot_rejection_mode: "reject" (400 genérico) ou "silent" (200 ok)
        require_consent: Exige o campo agree=true mesmo quando ausente
    """

    min_elapsed_ms: int = 400
    bot_rejection_mode: BotRejectionMode = "reject"
    require_consent: bool = False

    def validate(self) -> list[str]:
        """Valida configurações anti-bot."""
        errors: list[str] = []
        if self.min_elapsed_ms < 0:
            errors.append("ABUSE_MIN_ELAPSED_MS deve ser >= 0")
        if self.bot_rejection_mode not in ("reject", "silent"):
            errors.append(f"BOT_REJECTION_MODE inválido: {self.bot_rejection_mode}")
        return errors


def _load_from_env() -> AbuseSettings:
    """Carrega AbuseSettings de variáveis de ambiente."""
    mode_str = os.getenv("BOT_REJECTION_MODE", "reject").strip().lower()
    mode: BotRejectionMode = "silent" if mode_str == "silent" else "reject"
    return AbuseSettings(
        min_elapsed_ms=int(os.getenv("ABUSE_MIN_ELAPSED_MS", "400")),
        bot_rejection_mode=mode,
        require_consent=parse_bool(os.getenv("REQUIRE_CONSENT"), False),
    )


@lru_cache(maxsize=1)
def get_abuse_settings() -> AbuseSettings:
    """Retorna instância cacheada de AbuseSettings."""
    return _load_from_env()
