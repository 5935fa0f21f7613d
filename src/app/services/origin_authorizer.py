"""Autorização de origem (CORS) do endpoint de submissão.

Normalização:
- entrada com esquema ("https://site.com/") compara por esquema+host[:porta]
- entrada sem esquema ("site.com") compara só por host[:porta]

Casamento exato, sem curingas nem subdomínios. A única expansão é a
variante www./sem www., e só quando habilitada na configuração.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Iterable

    from config.settings import EmptyAllowlistPolicy

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


@dataclass(frozen=True, slots=True)
class OriginDecision:
    """Resultado da autorização.

    Attributes:
        allowed: Origem admitida
        allow_origin: Valor para Access-Control-Allow-Origin (None se negada)
    """

    allowed: bool
    allow_origin: str | None = None


def _split_origin(value: str) -> tuple[str, str] | None:
    """Retorna (esquema, host[:porta]) em minúsculas, ou None se inválido."""
    raw = value.strip()
    if not raw:
        return None
    has_scheme = "://" in raw
    try:
        parts = urlsplit(raw if has_scheme else f"//{raw}")
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not hostname:
        return None
    host = f"{hostname}:{port}" if port else hostname
    scheme = parts.scheme.lower() if has_scheme else ""
    return scheme, host.lower()


def _www_variant(host: str) -> str:
    return host[4:] if host.startswith("www.") else f"www.{host}"


class OriginAuthorizer:
    """Decide se a origem chamadora pode usar o endpoint.

    Args:
        allowed_origins: Origens completas ou hosts
        empty_policy: "deny" ou "allow" quando a lista está vazia
        expand_www: Aceita também a variante www./sem www.
        max_age_seconds: Access-Control-Max-Age do preflight
    """

    def __init__(
        self,
        allowed_origins: Iterable[str],
        empty_policy: EmptyAllowlistPolicy = "deny",
        expand_www: bool = False,
        max_age_seconds: int = 600,
    ) -> None:
        self._full: set[str] = set()
        self._hosts: set[str] = set()
        for entry in allowed_origins:
            split = _split_origin(entry)
            if split is None:
                logger.warning("origin_entry_ignored", extra={"entry": entry})
                continue
            scheme, host = split
            hosts = {host, _www_variant(host)} if expand_www else {host}
            if scheme:
                self._full.update(f"{scheme}://{h}" for h in hosts)
            else:
                self._hosts.update(hosts)
        self._empty_policy = empty_policy
        self._max_age_seconds = max_age_seconds

    @property
    def is_empty(self) -> bool:
        """Nenhuma entrada válida na allow-list."""
        return not self._full and not self._hosts

    def authorize(self, origin: str | None) -> OriginDecision:
        """Avalia a origem declarada na request."""
        if self.is_empty:
            if self._empty_policy == "allow":
                return OriginDecision(allowed=True, allow_origin=origin or "*")
            return OriginDecision(allowed=False)

        if not origin:
            return OriginDecision(allowed=False)

        split = _split_origin(origin)
        if split is None or not split[0]:
            return OriginDecision(allowed=False)

        scheme, host = split
        if f"{scheme}://{host}" in self._full or host in self._hosts:
            return OriginDecision(allowed=True, allow_origin=origin.strip())
        return OriginDecision(allowed=False)

    def cors_headers(self, decision: OriginDecision) -> dict[str, str]:
        """Headers CORS que refletem a decisão."""
        headers = {
            "Vary": "Origin",
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Access-Control-Max-Age": str(self._max_age_seconds),
        }
        if decision.allowed and decision.allow_origin:
            headers["Access-Control-Allow-Origin"] = decision.allow_origin
        return headers
