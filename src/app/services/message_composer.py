"""Composição das notificações pública e interna.

Função pura de (Submission, RequestContext): o horário exibido vem de
``context.received_at``, então a mesma entrada gera sempre o mesmo texto.

Todo texto vindo do usuário passa por html.escape, pois as mensagens são
enviadas com parse_mode=HTML.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.services.country_lookup import resolve_country

if TYPE_CHECKING:
    from app.domain.submission import RequestContext, Submission

EMPTY = "-"
MAX_MESSAGE_CHARS = 1500
MAX_FIELD_CHARS = 300
# Limite do sendMessage. Contado no texto já escapado, que nunca é
# menor que o texto renderizado pelo Telegram.
MAX_TELEGRAM_CHARS = 4096


@dataclass(frozen=True, slots=True)
class ComposedMessage:
    """Corpos prontos para envio."""

    public_text: str
    internal_text: str


def _clip(value: str, limit: int) -> str:
    value = value.strip()
    return value if len(value) <= limit else value[: limit - 1] + "…"


def _esc(value: str, limit: int = MAX_FIELD_CHARS) -> str:
    """Escapa texto do usuário; vazio vira traço."""
    clipped = _clip(value, limit)
    return html.escape(clipped, quote=False) if clipped else EMPTY


def _fit(text: str, limit: int = MAX_TELEGRAM_CHARS) -> str:
    """Corta o corpo montado no limite do Telegram sem partir uma entidade HTML."""
    if len(text) <= limit:
        return text
    cut = text[: limit - 1]
    amp = cut.rfind("&")
    if amp != -1 and ";" not in cut[amp:]:
        cut = cut[:amp]
    return cut + "…"


def _yes_no(flag: bool) -> str:
    return "sim" if flag else "não"


def compose_messages(submission: Submission, context: RequestContext) -> ComposedMessage:
    """Monta a mensagem pública (curta) e a interna (diagnóstico)."""
    country = resolve_country(submission)
    page = submission.url or context.referer
    phone_display = submission.phone_e164 or submission.phone

    public_lines = [
        "📨 <b>Nova solicitação</b>",
        f"{country.flag} País: {_esc(country.name)}",
        f"📞 Telefone: {_esc(phone_display)}",
        f"👤 Nome: {_esc(submission.name)}",
        f"✉️ Email: {_esc(submission.email)}",
        f"🔔 Newsletter: {_yes_no(submission.subscribe)}",
        f"🔗 Página: {_esc(page)}",
    ]
    if submission.message.strip():
        public_lines.append(f"💬 Mensagem: {_esc(submission.message, MAX_MESSAGE_CHARS)}")

    received_at = context.received_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    user_agent = submission.ua or context.user_agent

    internal_lines = [
        "🧾 <b>Solicitação completa</b>",
        f"Recebida em: {received_at}",
        f"IP: {_esc(context.client_ip)}",
        f"Origin: {_esc(context.origin or '')}",
        f"Página: {_esc(page)}",
        f"UA: {_esc(user_agent)}",
        "",
        "Campos do formulário:",
        f"- Nome: {_esc(submission.name)}",
        f"- Email: {_esc(submission.email)}",
        f"- Telefone (digitado): {_esc(submission.phone)}",
        f"- Telefone (E.164): {_esc(submission.phone_e164)}",
        f"- Newsletter: {_yes_no(submission.subscribe)}",
        f"- Política: {_esc(submission.policy_version)}",
        "",
        "Geo:",
        f"- País: {country.flag} {_esc(country.name)} ({country.source})",
        f"- ISO2: {_esc(submission.country_iso or country.iso2)}",
        f"- DDI: {_esc(submission.country_dial)}",
        "",
        # por último: _fit corta pelo fim do corpo
        f"Mensagem: {_esc(submission.message, MAX_MESSAGE_CHARS)}",
    ]

    return ComposedMessage(
        public_text=_fit("\n".join(public_lines)),
        internal_text=_fit("\n".join(internal_lines)),
    )
