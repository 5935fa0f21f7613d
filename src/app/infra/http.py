"""Cliente HTTP base para chamadas externas (Telegram, store REST).

Sem retry: cada request do formulário faz no máximo uma tentativa por
chamada externa. Timeout sempre explícito.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 5.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis (URL com token fica fora)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_timeout: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_timeout = is_timeout


class HttpClient:
    """Cliente HTTP simples sobre httpx.AsyncClient.

    Args:
        config: Timeout e headers padrão.
        client: AsyncClient compartilhado. Sem ele, cada chamada abre e
            fecha o seu (suficiente para o volume de um formulário).
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._client = client

    @property
    def timeout_seconds(self) -> float:
        """Timeout aplicado a cada chamada."""
        return self._config.timeout_seconds

    async def post(
        self,
        url: str,
        json: Any,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST JSON com timeout.

        Raises:
            HttpError: Timeout ou falha de rede/protocolo. Respostas HTTP
                com qualquer status são devolvidas normalmente.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            if self._client is not None:
                return await self._client.post(
                    url,
                    json=json,
                    headers=merged_headers,
                    timeout=self._config.timeout_seconds,
                )
            async with httpx.AsyncClient(verify=self._config.verify_ssl) as client:
                return await client.post(
                    url,
                    json=json,
                    headers=merged_headers,
                    timeout=self._config.timeout_seconds,
                )
        except httpx.TimeoutException as exc:
            logger.warning("http_timeout", extra={"timeout_seconds": self._config.timeout_seconds})
            raise HttpError("http_timeout", is_timeout=True) from exc
        except httpx.HTTPError as exc:
            logger.warning("http_connection_error", extra={"error_type": type(exc).__name__})
            raise HttpError("http_connection_error") from exc


def parse_json_body(response: httpx.Response) -> Any:
    """Decodifica JSON da resposta; corpo inválido vira dict vazio."""
    try:
        return response.json()
    except ValueError:
        return {}
