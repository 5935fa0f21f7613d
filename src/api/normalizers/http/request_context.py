"""Extrai o RequestContext dos headers da request HTTP.

Atrás de proxy (Vercel, Cloud Run, nginx) o IP real vem do primeiro item
de X-Forwarded-For; sem proxy confiável esses headers são forjáveis e o
endereço do socket é usado.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from app.domain.submission import RequestContext

UNKNOWN_IP = "unknown"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_host: str | None,
    trust_proxy_headers: bool = True,
) -> str:
    """Resolve o IP do cliente."""
    if trust_proxy_headers:
        forwarded = headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
        real_ip = headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip
    return peer_host or UNKNOWN_IP


def build_request_context(
    headers: Mapping[str, str],
    peer_host: str | None,
    trust_proxy_headers: bool = True,
    clock: Callable[[], datetime] = _utc_now,
) -> RequestContext:
    """Monta o RequestContext imutável da request.

    Args:
        headers: Headers da request (chaves em minúsculas, como Starlette)
        peer_host: Host do socket (request.client.host)
        trust_proxy_headers: Usa X-Forwarded-For/X-Real-IP
        clock: Relógio injetável (UTC)
    """
    origin = headers.get("origin", "").strip() or None
    return RequestContext(
        origin=origin,
        client_ip=resolve_client_ip(headers, peer_host, trust_proxy_headers),
        user_agent=headers.get("user-agent", ""),
        referer=headers.get("referer", ""),
        received_at=clock(),
    )
