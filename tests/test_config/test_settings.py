"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from config.settings import (
    COUNTER_STORE_TOKEN_VARS,
    COUNTER_STORE_URL_VARS,
    AbuseSettings,
    OriginSettings,
    RateLimitSettings,
    TelegramSettings,
    get_abuse_settings,
    get_base_settings,
    get_origin_settings,
    get_rate_limit_settings,
    get_telegram_settings,
    parse_bool,
    parse_origin_list,
)

_ALL_LOADERS = (
    get_abuse_settings,
    get_base_settings,
    get_origin_settings,
    get_rate_limit_settings,
    get_telegram_settings,
)

_ENV_VARS = (
    "ALLOW_ORIGINS",
    "ALLOW_ORIGIN",
    "CORS_EMPTY_ALLOWLIST_POLICY",
    "CORS_EXPAND_WWW",
    "BOT_REJECTION_MODE",
    "REQUIRE_CONSENT",
    "ABUSE_MIN_ELAPSED_MS",
    "RATE_LIMIT_BACKEND",
    "RATE_LIMIT_KEY_MODE",
    "RATE_LIMIT_MAX",
    "RATE_LIMIT_WINDOW_SECONDS",
    "REDIS_URL",
    "ENVIRONMENT",
    "SERVICE_NAME",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "ADMIN_CHAT_ID",
    "TELEGRAM_API_BASE_URL",
    "TELEGRAM_REQUEST_TIMEOUT_SECONDS",
    "COUNTER_STORE_TIMEOUT_SECONDS",
    "CORS_MAX_AGE_SECONDS",
    "TRUST_PROXY_HEADERS",
    "DEBUG",
    *COUNTER_STORE_URL_VARS,
    *COUNTER_STORE_TOKEN_VARS,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for loader in _ALL_LOADERS:
        loader.cache_clear()
    yield
    for loader in _ALL_LOADERS:
        loader.cache_clear()


class TestHelpers:
    @pytest.mark.parametrize("raw", ["true", "1", "YES", " on "])
    def test_parse_bool_truthy(self, raw: str) -> None:
        assert parse_bool(raw, False) is True

    def test_parse_bool_default_when_empty(self) -> None:
        assert parse_bool(None, True) is True
        assert parse_bool("  ", False) is False
        assert parse_bool("nope", True) is False

    def test_parse_origin_list_drops_blanks(self) -> None:
        assert parse_origin_list(" https://a.com, ,b.com,") == ("https://a.com", "b.com")


class TestOriginSettings:
    def test_defaults_deny_on_empty_list(self) -> None:
        settings = get_origin_settings()
        assert settings.allowed_origins == ()
        assert settings.empty_policy == "deny"
        assert any("ALLOW_ORIGINS vazio" in e for e in settings.validate())

    def test_allow_origin_singular_is_accepted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOW_ORIGIN", "https://site.com")
        assert get_origin_settings().allowed_origins == ("https://site.com",)

    def test_allow_origins_takes_precedence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOW_ORIGINS", "https://a.com,https://b.com")
        monkeypatch.setenv("ALLOW_ORIGIN", "https://ignored.com")
        monkeypatch.setenv("CORS_EXPAND_WWW", "true")
        settings = get_origin_settings()
        assert settings.allowed_origins == ("https://a.com", "https://b.com")
        assert settings.expand_www is True
        assert settings.validate() == []

    def test_unknown_policy_falls_back_to_deny(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_EMPTY_ALLOWLIST_POLICY", "maybe")
        assert get_origin_settings().empty_policy == "deny"

    def test_validate_rejects_negative_max_age(self) -> None:
        settings = OriginSettings(allowed_origins=("a.com",), max_age_seconds=-1)
        assert settings.validate() == ["CORS_MAX_AGE_SECONDS deve ser >= 0"]


class TestAbuseSettings:
    def test_defaults(self) -> None:
        settings = get_abuse_settings()
        assert settings == AbuseSettings(min_elapsed_ms=400, bot_rejection_mode="reject")
        assert settings.require_consent is False

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BOT_REJECTION_MODE", "SILENT")
        monkeypatch.setenv("REQUIRE_CONSENT", "1")
        monkeypatch.setenv("ABUSE_MIN_ELAPSED_MS", "1200")
        settings = get_abuse_settings()
        assert settings.bot_rejection_mode == "silent"
        assert settings.require_consent is True
        assert settings.min_elapsed_ms == 1200


class TestTelegramSettings:
    def test_unconfigured_reports_errors(self) -> None:
        settings = get_telegram_settings()
        assert settings.is_configured is False
        errors = settings.validate()
        assert "TELEGRAM_BOT_TOKEN não configurado" in errors
        assert "TELEGRAM_CHAT_ID não configurado" in errors

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", " 123:abc ")
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100")
        monkeypatch.setenv("TELEGRAM_API_BASE_URL", "http://tg.local/")
        settings = get_telegram_settings()
        assert settings.bot_token == "123:abc"
        assert settings.api_base_url == "http://tg.local"
        assert settings.is_configured is True
        assert settings.has_admin_chat is False
        assert settings.validate() == []

    def test_timeout_must_be_positive(self) -> None:
        settings = TelegramSettings(bot_token="t", public_chat_id="1", request_timeout_seconds=0)
        assert settings.validate() == ["TELEGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0"]


class TestRateLimitSettings:
    def test_defaults_resolve_to_memory(self) -> None:
        settings = get_rate_limit_settings()
        assert settings.limit == 20
        assert settings.window_seconds == 300
        assert settings.resolve_backend() == "memory"
        assert any("Rate limit em memória" in e for e in settings.validate())

    def test_first_candidate_url_var_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://kv.upstash.io/")
        monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "secret")
        settings = get_rate_limit_settings()
        assert settings.rest_url == "https://kv.upstash.io"
        assert settings.rest_url_var == "UPSTASH_REDIS_REST_URL"
        assert settings.resolve_backend() == "upstash"
        assert settings.validate() == []

    def test_auto_prefers_rest_over_redis(self) -> None:
        settings = RateLimitSettings(rest_url="https://kv", rest_token="t", redis_url="redis://x")
        assert settings.resolve_backend() == "upstash"
        assert RateLimitSettings(redis_url="redis://x").resolve_backend() == "redis"

    def test_rest_url_without_token_is_not_rest_store(self) -> None:
        settings = RateLimitSettings(rest_url="https://kv")
        assert settings.has_rest_store is False
        assert settings.resolve_backend() == "memory"

    def test_explicit_backend_requires_its_config(self) -> None:
        errors = RateLimitSettings(backend="redis").validate()
        assert "RATE_LIMIT_BACKEND=redis requer REDIS_URL configurado" in errors
        errors = RateLimitSettings(backend="upstash").validate()
        assert any(e.startswith("RATE_LIMIT_BACKEND=upstash") for e in errors)

    def test_invalid_env_values_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_BACKEND", "postgres")
        monkeypatch.setenv("RATE_LIMIT_KEY_MODE", "cookie")
        settings = get_rate_limit_settings()
        assert settings.backend == "auto"
        assert settings.key_mode == "ip"

    def test_none_backend_has_no_memory_warning(self) -> None:
        assert RateLimitSettings(backend="none").validate() == []

    def test_limit_bounds(self) -> None:
        errors = RateLimitSettings(backend="none", limit=0, window_seconds=0).validate()
        assert "RATE_LIMIT_MAX deve ser >= 1" in errors
        assert "RATE_LIMIT_WINDOW_SECONDS deve ser >= 1" in errors


class TestBaseSettings:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("preview", "staging"), ("whatever", "development")],
    )
    def test_environment_aliases(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)
        assert get_base_settings().environment == expected

    def test_defaults(self) -> None:
        settings = get_base_settings()
        assert settings.service_name == "form-relay"
        assert settings.trust_proxy_headers is True
        assert settings.is_development is True
        assert settings.validate() == []
