"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from api.routes.health.router import health_check, readiness_check
from app.infra.http import HttpClient
from app.infra.stores import MemoryCounterStore, UpstashCounterStore
from utils.errors import CounterStoreError


def _use_case(configured: bool, store: object | None) -> MagicMock:
    use_case = MagicMock()
    use_case.is_configured = configured
    use_case.rate_limiter.store = store
    return use_case


@pytest.mark.asyncio
async def test_health_check_is_always_healthy() -> None:
    response = await health_check()

    assert response.status == "healthy"
    assert response.service


@pytest.mark.asyncio
async def test_readiness_not_ready_without_telegram() -> None:
    response = await readiness_check(_use_case(False, None))
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["telegram"]["error"] == "not_configured"
    assert payload["checks"]["counter_store"]["status"] == "degraded"
    assert payload["checks"]["counter_store"]["backend"] == "none"


@pytest.mark.asyncio
async def test_readiness_ready_with_memory_store_degraded() -> None:
    response = await readiness_check(_use_case(True, MemoryCounterStore()))
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["counter_store"]["status"] == "degraded"
    assert payload["checks"]["counter_store"]["error"] == "single_instance"


@pytest.mark.asyncio
async def test_readiness_reports_masked_store_url() -> None:
    store = UpstashCounterStore("https://kv.example.com/db/secret", "token", HttpClient())
    store.ping = AsyncMock(return_value=True)  # type: ignore[method-assign]

    response = await readiness_check(_use_case(True, store))
    payload = json.loads(response.body.decode("utf-8"))

    check = payload["checks"]["counter_store"]
    assert check["status"] == "ok"
    assert check["backend"] == "upstash"
    assert check["url"] == "https://kv.example.com/db/..."
    assert "token" not in json.dumps(payload)


@pytest.mark.asyncio
async def test_store_failure_only_degrades_readiness() -> None:
    store = MagicMock()
    store.backend_name = "redis"
    store.masked_url = None
    store.ping = AsyncMock(side_effect=CounterStoreError("down"))

    response = await readiness_check(_use_case(True, store))
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["counter_store"]["status"] == "failed"
    assert payload["checks"]["counter_store"]["error"] == "CounterStoreError"
