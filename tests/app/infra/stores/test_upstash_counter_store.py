"""Testes do UpstashCounterStore com httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from app.infra.http import HttpClient, HttpClientConfig
from app.infra.stores import UpstashCounterStore, mask_url
from app.protocols.counter_store import CounterSnapshot
from utils.errors import CounterStoreError

BASE_URL = "https://eu1-fancy-cat-12345.upstash.io"


def _store(handler: Callable[[httpx.Request], httpx.Response]) -> UpstashCounterStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    http = HttpClient(HttpClientConfig(timeout_seconds=1.0), client=client)
    return UpstashCounterStore(BASE_URL, "secret-token", http)


class Recorder:
    """Handler que responde INCR/TTL/EXPIRE e registra as chamadas."""

    def __init__(self, count: int, ttl: int) -> None:
        self.count = count
        self.ttl = ttl
        self.requests: list[tuple[str, object]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append((request.url.path, body))
        assert request.headers["Authorization"] == "Bearer secret-token"
        if request.url.path == "/pipeline":
            return httpx.Response(200, json=[{"result": self.count}, {"result": self.ttl}])
        if body[0] == "EXPIRE":
            return httpx.Response(200, json={"result": 1})
        if body[0] == "PING":
            return httpx.Response(200, json={"result": "PONG"})
        return httpx.Response(400, json={"error": "unexpected"})


class TestIncrement:
    @pytest.mark.asyncio
    async def test_first_hit_pipelines_then_expires(self) -> None:
        recorder = Recorder(count=1, ttl=-1)
        store = _store(recorder)

        snapshot = await store.increment("abc", 300)

        assert snapshot == CounterSnapshot(count=1, ttl_seconds=300)
        assert recorder.requests == [
            ("/pipeline", [["INCR", "ratelimit:abc"], ["TTL", "ratelimit:abc"]]),
            ("/", ["EXPIRE", "ratelimit:abc", "300"]),
        ]

    @pytest.mark.asyncio
    async def test_existing_window_skips_expire(self) -> None:
        recorder = Recorder(count=3, ttl=42)
        store = _store(recorder)

        snapshot = await store.increment("abc", 300)

        assert snapshot == CounterSnapshot(count=3, ttl_seconds=42)
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_command_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"error": "WRONGTYPE"}, {"result": -1}])

        with pytest.raises(CounterStoreError, match="WRONGTYPE"):
            await _store(handler).increment("abc", 60)

    @pytest.mark.asyncio
    async def test_http_status_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Unauthorized"})

        with pytest.raises(CounterStoreError, match="401"):
            await _store(handler).increment("abc", 60)

    @pytest.mark.asyncio
    async def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CounterStoreError):
            await _store(handler).increment("abc", 60)

    @pytest.mark.asyncio
    async def test_malformed_pipeline_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"result": 1})

        with pytest.raises(CounterStoreError, match="pipeline"):
            await _store(handler).increment("abc", 60)


class TestPingAndMasking:
    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        assert await _store(Recorder(count=0, ttl=0)).ping() is True

    def test_masked_url_hides_path(self) -> None:
        store = _store(Recorder(count=0, ttl=0))
        assert store.masked_url == f"{BASE_URL}/..."
        assert mask_url("https://kv.example.com/db/secret/path") == "https://kv.example.com/db/..."
        assert mask_url("not a url") == "***"

    def test_requires_url_and_token(self) -> None:
        with pytest.raises(ValueError):
            UpstashCounterStore("", "token", HttpClient())
