"""Settings do Telegram Bot API.

Destinos:
- TELEGRAM_CHAT_ID: chat público (cartão curto da submissão)
- ADMIN_CHAT_ID: chat interno (relatório completo, alertas de erro)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

TELEGRAM_API_BASE_URL = "https://api.telegram.org"


@dataclass(frozen=True)
class TelegramSettings:
    """Configurações do transporte Telegram.

    Attributes:
        bot_token: Token do bot (obtido via @BotFather)
        public_chat_id: Chat que recebe o cartão público
        admin_chat_id: Chat que recebe o relatório interno (opcional)
        api_base_url: URL base da API
        request_timeout_seconds: Timeout de cada sendMessage
        parse_mode: Formato do texto enviado
    """

    bot_token: str = ""
    public_chat_id: str = ""
    admin_chat_id: str = ""
    api_base_url: str = TELEGRAM_API_BASE_URL
    request_timeout_seconds: float = 5.0
    parse_mode: str = "HTML"

    @property
    def is_configured(self) -> bool:
        """Token e chat público presentes (mínimo para entregar)."""
        return bool(self.bot_token and self.public_chat_id)

    @property
    def has_admin_chat(self) -> bool:
        """Retorna True se o chat interno foi configurado."""
        return bool(self.admin_chat_id)

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Telegram."""
        errors: list[str] = []
        if not self.bot_token:
            errors.append("TELEGRAM_BOT_TOKEN não configurado")
        if not self.public_chat_id:
            errors.append("TELEGRAM_CHAT_ID não configurado")
        if self.request_timeout_seconds <= 0:
            errors.append("TELEGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_from_env() -> TelegramSettings:
    """Carrega TelegramSettings de variáveis de ambiente."""
    return TelegramSettings(
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", "").strip(),
        public_chat_id=os.getenv("TELEGRAM_CHAT_ID", "").strip(),
        admin_chat_id=os.getenv("ADMIN_CHAT_ID", "").strip(),
        api_base_url=os.getenv("TELEGRAM_API_BASE_URL", TELEGRAM_API_BASE_URL).rstrip("/"),
        request_timeout_seconds=float(os.getenv("TELEGRAM_REQUEST_TIMEOUT_SECONDS", "5")),
    )


@lru_cache(maxsize=1)
def get_telegram_settings() -> TelegramSettings:
    """Retorna instância cacheada de TelegramSettings."""
    return _load_from_env()
