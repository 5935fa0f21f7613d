"""Upstash Counter Store — Redis via REST com bearer token.

Protocolo (Upstash/Vercel KV):
    POST {url}             body ["INCR", "key"]            → {"result": 1}
    POST {url}/pipeline    body [["INCR","k"],["TTL","k"]] → [{"result": 1}, {"result": -1}]
    Erros chegam como {"error": "..."} por comando.

O token nunca é logado; a URL é logada mascarada.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from app.infra.http import HttpError, parse_json_body
from app.infra.stores.memory_counter_store import COUNTER_PREFIX
from app.protocols.counter_store import AsyncCounterStoreProtocol, CounterSnapshot
from utils.errors import CounterStoreError

if TYPE_CHECKING:
    from app.infra.http import HttpClient

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Mascara a URL do store para logs/readiness (só host e 1º segmento)."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "***"
    if not parts.scheme or not parts.netloc:
        return "***"
    first_segment = parts.path.strip("/").split("/")[0] if parts.path.strip("/") else ""
    suffix = f"/{first_segment}/..." if first_segment else "/..."
    return f"{parts.scheme}://{parts.netloc}{suffix}"


class UpstashCounterStore(AsyncCounterStoreProtocol):
    """Store de contadores via REST (Upstash Redis / Vercel KV).

    Args:
        base_url: URL REST do banco (sem barra final)
        token: Bearer token de escrita
        http_client: HttpClient com timeout configurado
    """

    backend_name = "upstash"

    def __init__(self, base_url: str, token: str, http_client: HttpClient) -> None:
        if not base_url or not token:
            raise ValueError("base_url e token são obrigatórios")
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._http = http_client

    @property
    def masked_url(self) -> str:
        """URL mascarada para diagnóstico."""
        return mask_url(self._base_url)

    def _key(self, key: str) -> str:
        return f"{COUNTER_PREFIX}{key}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def _post(self, path: str, body: list[Any]) -> Any:
        try:
            response = await self._http.post(
                f"{self._base_url}{path}", json=body, headers=self._headers()
            )
        except HttpError as exc:
            raise CounterStoreError(f"Store REST indisponível: {exc}") from exc

        if response.status_code != 200:
            logger.warning(
                "counter_store_http_status",
                extra={"status_code": response.status_code, "store": self.masked_url},
            )
            raise CounterStoreError(f"Store REST respondeu {response.status_code}")
        return parse_json_body(response)

    @staticmethod
    def _result(item: Any) -> Any:
        if not isinstance(item, dict):
            raise CounterStoreError("Resposta do store REST mal-formada")
        if "error" in item:
            raise CounterStoreError(f"Erro do store REST: {item['error']}")
        return item.get("result")

    async def _command(self, *args: str) -> Any:
        return self._result(await self._post("", list(args)))

    async def _pipeline(self, commands: list[list[str]]) -> list[Any]:
        data = await self._post("/pipeline", commands)
        if not isinstance(data, list) or len(data) != len(commands):
            raise CounterStoreError("Resposta de pipeline mal-formada")
        return [self._result(item) for item in data]

    async def increment(self, key: str, window_seconds: int) -> CounterSnapshot:
        """INCR + TTL em pipeline; EXPIRE na abertura da janela."""
        redis_key = self._key(key)
        count_raw, ttl_raw = await self._pipeline([["INCR", redis_key], ["TTL", redis_key]])
        try:
            count, ttl = int(count_raw), int(ttl_raw)
        except (TypeError, ValueError) as exc:
            raise CounterStoreError("Contador não numérico no store REST") from exc

        if count == 1 or ttl < 0:
            await self._command("EXPIRE", redis_key, str(window_seconds))
            ttl = window_seconds

        return CounterSnapshot(count=count, ttl_seconds=ttl)

    async def ping(self) -> bool:
        """PING via REST."""
        return await self._command("PING") == "PONG"
