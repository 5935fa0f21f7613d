"""Taxonomia de erros do pipeline de submissão.

Cada erro carrega o status HTTP e o texto público da resposta. O
orquestrador é o único ponto que converte erro em resposta; detalhes
internos (motivo do bot, payload do Telegram completo) ficam nos logs.
"""

from __future__ import annotations

from typing import Any


class SubmissionError(Exception):
    """Base dos erros terminais do pipeline."""

    status_code: int = 500
    public_message: str = "Server error"
    reason: str = "server_error"

    def to_body(self) -> dict[str, Any]:
        """Corpo JSON público ({ok, error, ...})."""
        return {"ok": False, "error": self.public_message}


class ConfigurationError(SubmissionError):
    """Credencial ou destino ausente. Visível apenas ao operador."""

    status_code = 500
    public_message = "Server not configured"
    reason = "configuration"


class OriginDenied(SubmissionError):
    """Origem fora da allow-list."""

    status_code = 403
    public_message = "Forbidden origin"
    reason = "origin_denied"


class MalformedRequest(SubmissionError):
    """Corpo não é um objeto JSON válido."""

    status_code = 400
    public_message = "Invalid JSON body"
    reason = "malformed_json"


class BotSuspected(SubmissionError):
    """Honeypot preenchido ou envio rápido demais.

    O status público depende do modo configurado e nunca revela o motivo.
    """

    status_code = 400
    public_message = "Submission rejected"
    reason = "bot_suspected"

    def __init__(self, trigger: str) -> None:
        super().__init__(trigger)
        self.trigger = trigger


class ValidationFailed(SubmissionError):
    """Um ou mais campos inválidos."""

    status_code = 400
    public_message = "Validation failed"
    reason = "validation_failed"

    def __init__(self, fields: tuple[str, ...]) -> None:
        super().__init__(", ".join(fields))
        self.fields = fields

    def to_body(self) -> dict[str, Any]:
        return {"ok": False, "error": self.public_message, "fields": list(self.fields)}


class RateLimited(SubmissionError):
    """Limite de requests da identidade excedido na janela atual."""

    status_code = 429
    public_message = "Too many requests"
    reason = "rate_limited"

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(f"retry after {retry_after_seconds}s")
        self.retry_after_seconds = retry_after_seconds

    def to_body(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": self.public_message,
            "details": {"retry_after": self.retry_after_seconds},
        }


class TransportFailure(SubmissionError):
    """Entrega obrigatória recusada pela API de mensagens ou sem resposta."""

    status_code = 502
    public_message = "Delivery failed"
    reason = "transport_failure"

    def __init__(self, details: dict[str, Any]) -> None:
        super().__init__(str(details.get("status")))
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"ok": False, "error": self.public_message, "details": self.details}
