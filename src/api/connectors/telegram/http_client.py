"""Cliente HTTP do Telegram Bot API.

Envia texto com sendMessage e devolve o resultado como TransportResponse.
Respostas HTTP de erro (400 chat not found, 401 token inválido, 429)
voltam como ok=False com o JSON para diagnóstico; só timeout e falha de
rede levantam HttpError.

O token faz parte da URL do Telegram: nunca logar a URL.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.http import HttpClient, HttpClientConfig, parse_json_body
from app.protocols.messaging import TransportResponse

if TYPE_CHECKING:
    import httpx

    from config.settings import TelegramSettings

logger: logging.Logger = logging.getLogger(__name__)


class TelegramHttpClient(HttpClient):
    """Cliente do Bot API sobre o HttpClient base.

    Args:
        bot_token: Token do bot
        api_base_url: URL base (https://api.telegram.org)
        config: Timeout/headers
        client: AsyncClient compartilhado (opcional)
    """

    def __init__(
        self,
        bot_token: str,
        api_base_url: str,
        config: HttpClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config, client)
        if not bot_token or not bot_token.strip():
            raise ValueError(
                "bot_token é obrigatório. Verifique se TELEGRAM_BOT_TOKEN está configurado."
            )
        self._bot_token = bot_token.strip()
        self._api_base_url = api_base_url.rstrip("/")

    def _method_url(self, method: str) -> str:
        return f"{self._api_base_url}/bot{self._bot_token}/{method}"

    async def send_text(
        self,
        chat_id: str,
        text: str,
        parse_mode: str | None = None,
    ) -> TransportResponse:
        """Envia texto para um chat.

        Args:
            chat_id: Destino (id numérico ou @canal)
            text: Corpo já escapado para o parse_mode
            parse_mode: "HTML", "MarkdownV2" ou None (texto puro)

        Returns:
            TransportResponse com ok, status e JSON devolvido.

        Raises:
            HttpError: Timeout ou falha de rede.
        """
        payload: dict[str, object] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode

        response = await self.post(self._method_url("sendMessage"), json=payload)
        body = parse_json_body(response)
        if not isinstance(body, dict):
            body = {}
        ok = response.is_success and body.get("ok") is True

        if ok:
            logger.debug("telegram_send_ok", extra={"status_code": response.status_code})
        else:
            logger.warning(
                "telegram_send_rejected",
                extra={
                    "status_code": response.status_code,
                    "error_code": body.get("error_code"),
                    "description": body.get("description"),
                },
            )
        return TransportResponse(ok=ok, status_code=response.status_code, payload=body)


def create_telegram_http_client(
    settings: TelegramSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> TelegramHttpClient:
    """Factory do cliente Telegram com config do ambiente.

    Raises:
        ValueError: Se TELEGRAM_BOT_TOKEN não estiver configurado.
    """
    from config.settings import get_telegram_settings

    telegram = settings or get_telegram_settings()
    config = HttpClientConfig(timeout_seconds=telegram.request_timeout_seconds)
    return TelegramHttpClient(
        bot_token=telegram.bot_token,
        api_base_url=telegram.api_base_url,
        config=config,
        client=client,
    )
