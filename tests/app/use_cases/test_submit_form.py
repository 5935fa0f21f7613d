"""Testes do SubmitFormUseCase (pipeline completo com transporte fake)."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.bootstrap.dependencies import create_submit_use_case
from app.domain.submission import RequestContext
from app.infra.stores import MemoryCounterStore
from app.services.abuse_filter import AbuseFilter
from app.services.notification_dispatcher import Destination, NotificationDispatcher
from app.services.origin_authorizer import OriginAuthorizer
from app.services.rate_limiter import RateLimiter
from app.use_cases.submit_form import SubmitFormUseCase
from config.settings import (
    AbuseSettings,
    OriginSettings,
    RateLimitSettings,
    TelegramSettings,
)
from tests.fakes.fake_messaging_transport import FakeMessagingTransport
from utils.errors import CounterStoreError

ORIGIN = "https://site.com"
PUBLIC_CHAT = "-100"
ADMIN_CHAT = "-200"

VALID_BODY: dict[str, Any] = {
    "name": "Ann",
    "email": "ann@x.com",
    "phone_e164": "+79991234567",
    "hp": "",
    "t": 1000,
}


def _body(**overrides: Any) -> bytes:
    return json.dumps({**VALID_BODY, **overrides}).encode()


def _context(origin: str | None = ORIGIN, client_ip: str = "203.0.113.7") -> RequestContext:
    return RequestContext(
        origin=origin,
        client_ip=client_ip,
        user_agent="UA",
        referer="",
        received_at=datetime(2026, 10, 19, 10, 30, tzinfo=UTC),
    )


def _use_case(
    transport: FakeMessagingTransport,
    *,
    telegram: TelegramSettings | None = None,
    abuse: AbuseSettings | None = None,
    rate_limit: RateLimitSettings | None = None,
    store: Any = None,
) -> SubmitFormUseCase:
    return create_submit_use_case(
        origin_settings=OriginSettings(allowed_origins=(ORIGIN,)),
        abuse_settings=abuse or AbuseSettings(),
        rate_limit_settings=rate_limit or RateLimitSettings(backend="none"),
        telegram_settings=telegram
        or TelegramSettings(
            bot_token="123:abc",
            public_chat_id=PUBLIC_CHAT,
            admin_chat_id=ADMIN_CHAT,
        ),
        transport=transport,
        store=store,
    )


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_valid_submission_is_delivered_twice(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(_body(), _context())

        assert response.status_code == 200
        assert response.body == {"ok": True}
        assert transport.call_count == 2
        assert len(transport.texts_for(PUBLIC_CHAT)) == 1
        assert "Solicitação completa" in transport.texts_for(ADMIN_CHAT)[0]
        assert response.headers["Access-Control-Allow-Origin"] == ORIGIN
        assert response.headers["X-RateLimit-Limit"] == "20"

    @pytest.mark.asyncio
    async def test_without_admin_chat_only_public_is_sent(self) -> None:
        transport = FakeMessagingTransport()
        use_case = _use_case(
            transport,
            telegram=TelegramSettings(bot_token="123:abc", public_chat_id=PUBLIC_CHAT),
        )

        response = await use_case.execute(_body(), _context())

        assert response.status_code == 200
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_internal_failure_does_not_fail_the_request(self) -> None:
        transport = FakeMessagingTransport()
        transport.fail_for(ADMIN_CHAT, status_code=403)

        response = await _use_case(transport).execute(_body(), _context())

        assert response.status_code == 200
        assert response.body == {"ok": True}


class TestOrigin:
    @pytest.mark.asyncio
    async def test_forbidden_origin_never_reaches_delivery(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(_body(), _context("https://evil.io"))

        assert response.status_code == 403
        assert response.body == {"ok": False, "error": "Forbidden origin"}
        assert "Access-Control-Allow-Origin" not in response.headers
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_origin_checked_before_body_parsing(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(b"{not json", _context(None))

        assert response.status_code == 403

    def test_preflight(self) -> None:
        use_case = _use_case(FakeMessagingTransport())

        allowed = use_case.preflight(_context())
        denied = use_case.preflight(_context("https://evil.io"))

        assert allowed.status_code == 204
        assert allowed.body is None
        assert allowed.headers["Access-Control-Allow-Origin"] == ORIGIN
        assert denied.status_code == 403
        assert "Access-Control-Allow-Origin" not in denied.headers
        assert denied.headers["Vary"] == "Origin"


class TestMalformedBody:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [b"", b"{oops", b"[1, 2]", b'"text"', b"\xff\xfe"])
    async def test_invalid_json_or_non_object(self, raw: bytes) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(raw, _context())

        assert response.status_code == 400
        assert response.body == {"ok": False, "error": "Invalid JSON body"}
        assert transport.call_count == 0


class TestAbuse:
    @pytest.mark.asyncio
    async def test_honeypot_rejected_without_delivery(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(_body(hp="trap"), _context())

        assert response.status_code == 400
        assert response.body == {"ok": False, "error": "Submission rejected"}
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_timer_rejection_has_same_public_outcome(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(_body(t=100), _context())

        assert response.status_code == 400
        assert response.body == {"ok": False, "error": "Submission rejected"}
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_silent_mode_pretends_success(self) -> None:
        transport = FakeMessagingTransport()
        use_case = _use_case(transport, abuse=AbuseSettings(bot_rejection_mode="silent"))

        response = await use_case.execute(_body(hp="trap"), _context())

        assert response.status_code == 200
        assert response.body == {"ok": True}
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_only_silent_mode_matches_real_success(self) -> None:
        real = await _use_case(FakeMessagingTransport()).execute(_body(), _context())
        silent = await _use_case(
            FakeMessagingTransport(), abuse=AbuseSettings(bot_rejection_mode="silent")
        ).execute(_body(t=100), _context())
        rejected = await _use_case(FakeMessagingTransport()).execute(_body(t=100), _context())

        assert (silent.status_code, silent.body) == (real.status_code, real.body)
        assert (rejected.status_code, rejected.body) != (real.status_code, real.body)


class TestValidation:
    @pytest.mark.asyncio
    async def test_phone_without_plus_is_reported(self) -> None:
        transport = FakeMessagingTransport()

        response = await _use_case(transport).execute(_body(phone_e164="12345"), _context())

        assert response.status_code == 400
        assert response.body is not None
        assert response.body["error"] == "Validation failed"
        assert "phone_e164" in response.body["fields"]
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_all_invalid_fields_reported(self) -> None:
        response = await _use_case(FakeMessagingTransport()).execute(
            _body(email="bad", phone_e164="12345"), _context()
        )

        assert response.body is not None
        assert response.body["fields"] == ["email", "phone_e164"]

    @pytest.mark.asyncio
    async def test_invalid_submissions_do_not_consume_quota(self) -> None:
        store = MemoryCounterStore()
        use_case = _use_case(
            FakeMessagingTransport(),
            rate_limit=RateLimitSettings(backend="memory", limit=1),
            store=store,
        )

        await use_case.execute(_body(email="bad"), _context())
        response = await use_case.execute(_body(), _context())

        assert response.status_code == 200


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_identity_at_limit_gets_429(self) -> None:
        transport = FakeMessagingTransport()
        use_case = _use_case(
            transport,
            rate_limit=RateLimitSettings(backend="memory", limit=1, window_seconds=300),
            store=MemoryCounterStore(),
        )
        first = await use_case.execute(_body(), _context())
        calls_after_first = transport.call_count

        second = await use_case.execute(_body(), _context())

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.body == {
            "ok": False,
            "error": "Too many requests",
            "details": {"retry_after": 300},
        }
        assert second.headers["Retry-After"] == "300"
        assert second.headers["X-RateLimit-Remaining"] == "0"
        assert transport.call_count == calls_after_first

    @pytest.mark.asyncio
    async def test_other_identity_is_not_limited(self) -> None:
        use_case = _use_case(
            FakeMessagingTransport(),
            rate_limit=RateLimitSettings(backend="memory", limit=1),
            store=MemoryCounterStore(),
        )
        await use_case.execute(_body(), _context(client_ip="198.51.100.1"))

        response = await use_case.execute(_body(), _context(client_ip="198.51.100.2"))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_store_failure_fails_open(self) -> None:
        store = MagicMock()
        store.backend_name = "upstash"
        store.increment = AsyncMock(side_effect=CounterStoreError("down"))
        transport = FakeMessagingTransport()

        response = await _use_case(
            transport,
            rate_limit=RateLimitSettings(backend="upstash", limit=1),
            store=store,
        ).execute(_body(), _context())

        assert response.status_code == 200
        assert transport.call_count == 2


class TestConfigurationAndTransport:
    @pytest.mark.asyncio
    async def test_missing_public_chat_is_server_not_configured(self) -> None:
        transport = FakeMessagingTransport()
        use_case = _use_case(transport, telegram=TelegramSettings(bot_token="123:abc"))

        response = await use_case.execute(_body(), _context())

        assert response.status_code == 500
        assert response.body == {"ok": False, "error": "Server not configured"}
        assert transport.call_count == 0
        assert use_case.is_configured is False

    @pytest.mark.asyncio
    async def test_missing_token_is_server_not_configured(self) -> None:
        use_case = create_submit_use_case(
            origin_settings=OriginSettings(allowed_origins=(ORIGIN,)),
            abuse_settings=AbuseSettings(),
            rate_limit_settings=RateLimitSettings(backend="none"),
            telegram_settings=TelegramSettings(public_chat_id=PUBLIC_CHAT),
        )

        response = await use_case.execute(_body(), _context())

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_public_failure_is_502_with_admin_alert(self) -> None:
        transport = FakeMessagingTransport()
        transport.fail_for(PUBLIC_CHAT, status_code=400, description="Bad Request: chat not found")

        response = await _use_case(transport).execute(_body(), _context())

        assert response.status_code == 502
        assert response.body == {
            "ok": False,
            "error": "Delivery failed",
            "details": {"ok": False, "status": 400, "description": "Bad Request: chat not found"},
        }
        admin_texts = transport.texts_for(ADMIN_CHAT)
        assert len(admin_texts) == 2
        assert "Falha na entrega" in admin_texts[1]
        assert "203.0.113.7" in admin_texts[1]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500_with_alert(self) -> None:
        transport = FakeMessagingTransport()

        def _broken_composer(submission: Any, context: Any) -> Any:
            raise RuntimeError("<secret detail>")

        use_case = SubmitFormUseCase(
            authorizer=OriginAuthorizer([ORIGIN]),
            abuse_filter=AbuseFilter(),
            rate_limiter=RateLimiter(None, limit=20, window_seconds=300),
            dispatcher=NotificationDispatcher(transport),
            public_destination=Destination("public", PUBLIC_CHAT),
            admin_destination=Destination("internal", ADMIN_CHAT, required=False),
            composer=_broken_composer,
        )

        response = await use_case.execute(_body(), _context())

        assert response.status_code == 500
        assert response.body == {"ok": False, "error": "Server error"}
        alerts = transport.texts_for(ADMIN_CHAT)
        assert len(alerts) == 1
        assert "5xx" in alerts[0]
        assert "&lt;secret detail&gt;" in alerts[0]
        assert transport.texts_for(PUBLIC_CHAT) == []
