"""Testes do RateLimiter (janela fixa, fail open)."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.submission import RequestContext
from app.infra.stores import MemoryCounterStore
from app.protocols.counter_store import CounterSnapshot
from app.services.rate_limiter import RateLimitDecision, RateLimiter, build_identity_key
from utils.errors import CounterStoreError


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _context(**overrides: object) -> RequestContext:
    data: dict[str, object] = {
        "origin": "https://site.com",
        "client_ip": "203.0.113.7",
        "user_agent": "UA",
        "referer": "",
        "received_at": datetime(2026, 10, 19, tzinfo=UTC),
    }
    data.update(overrides)
    return RequestContext(**data)  # type: ignore[arg-type]


class TestIdentityKey:
    def test_key_is_hashed_and_stable(self) -> None:
        key = build_identity_key(_context())
        assert key == build_identity_key(_context())
        assert len(key) == 32
        assert "203.0.113.7" not in key

    def test_modes_change_the_key(self) -> None:
        ip_only = build_identity_key(_context(), "ip")
        assert build_identity_key(_context(origin="https://b.com"), "ip") == ip_only
        assert build_identity_key(_context(), "ip_origin") != ip_only
        assert build_identity_key(_context(), "ip_ua") != build_identity_key(
            _context(user_agent="Other"), "ip_ua"
        )


class TestFixedWindow:
    @pytest.mark.asyncio
    async def test_limit_admitted_limit_plus_one_denied(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(MemoryCounterStore(clock=clock), limit=3, window_seconds=60)

        decisions = [await limiter.check("id") for _ in range(4)]

        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert decisions[2].remaining == 0
        assert decisions[3].count == 4
        assert decisions[3].reset_seconds == 60

    @pytest.mark.asyncio
    async def test_fresh_window_admits_again(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(MemoryCounterStore(clock=clock), limit=1, window_seconds=60)

        assert (await limiter.check("id")).allowed is True
        clock.now += 30
        denied = await limiter.check("id")
        assert denied.allowed is False
        assert denied.reset_seconds == 30

        clock.now += 31
        assert (await limiter.check("id")).allowed is True

    @pytest.mark.asyncio
    async def test_identities_are_independent(self) -> None:
        limiter = RateLimiter(MemoryCounterStore(clock=FakeClock()), limit=1, window_seconds=60)
        assert (await limiter.check("a")).allowed is True
        assert (await limiter.check("b")).allowed is True
        assert (await limiter.check("a")).allowed is False

    def test_headers_include_retry_after_only_when_denied(self) -> None:
        allowed = RateLimitDecision(allowed=True, count=1, remaining=1, reset_seconds=60, limit=2)
        denied = RateLimitDecision(allowed=False, count=3, remaining=0, reset_seconds=42, limit=2)

        assert "Retry-After" not in allowed.headers()
        assert allowed.headers()["X-RateLimit-Limit"] == "2"
        assert denied.headers() == {
            "X-RateLimit-Limit": "2",
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": "42",
            "Retry-After": "42",
        }


class TestFailOpen:
    @pytest.mark.asyncio
    async def test_disabled_store_admits_without_degrading(self) -> None:
        limiter = RateLimiter(None, limit=1, window_seconds=60)
        decision = await limiter.check("id")
        assert decision.allowed is True
        assert decision.degraded is False
        assert limiter.backend_name == "none"

    @pytest.mark.asyncio
    async def test_store_error_admits_and_logs_fallback(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        store = MagicMock()
        store.increment = AsyncMock(side_effect=CounterStoreError("down"))
        limiter = RateLimiter(store, limit=1, window_seconds=60)

        with caplog.at_level(logging.WARNING, logger="app.services.rate_limiter"):
            decision = await limiter.check("id")

        assert decision.allowed is True
        assert decision.degraded is True
        fallback = [r for r in caplog.records if getattr(r, "fallback_used", False)]
        assert fallback
        assert fallback[0].component == "rate_limiter"

    @pytest.mark.asyncio
    async def test_slow_store_times_out_and_admits(self) -> None:
        async def _slow_increment(key: str, window_seconds: int) -> CounterSnapshot:
            await asyncio.sleep(1)
            return CounterSnapshot(count=99, ttl_seconds=60)

        store = MagicMock()
        store.increment = _slow_increment
        limiter = RateLimiter(store, limit=1, window_seconds=60, timeout_seconds=0.01)

        decision = await limiter.check("id")

        assert decision.allowed is True
        assert decision.degraded is True

    @pytest.mark.asyncio
    async def test_missing_ttl_falls_back_to_window(self) -> None:
        store = MagicMock()
        store.increment = AsyncMock(return_value=CounterSnapshot(count=5, ttl_seconds=-1))
        limiter = RateLimiter(store, limit=2, window_seconds=90)

        decision = await limiter.check("id")

        assert decision.allowed is False
        assert decision.headers()["Retry-After"] == "90"
