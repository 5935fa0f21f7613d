"""Use case de submissão do formulário.

Orquestra o pipeline:
    autorizar origem → parse JSON → triagem anti-bot → validação →
    checagem de configuração → rate limit → composição → entrega

Cada etapa avança a máquina de estados da request; qualquer rejeição
encerra a request em RESPONDED. Este é o único ponto em que erros do
domínio viram resposta HTTP.
"""

from __future__ import annotations

import asyncio
import html
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.errors import (
    BotSuspected,
    ConfigurationError,
    MalformedRequest,
    OriginDenied,
    RateLimited,
    SubmissionError,
    TransportFailure,
    ValidationFailed,
)
from app.domain.submission import RequestContext, Submission
from app.observability import get_correlation_id, record_latency, record_rejection
from app.services.field_validator import validate_submission
from app.services.message_composer import ComposedMessage, compose_messages
from app.services.notification_dispatcher import Delivery, Destination
from app.services.rate_limiter import build_identity_key
from fsm import RequestState, RequestStateMachine, create_request_fsm

if TYPE_CHECKING:
    from app.services.abuse_filter import AbuseFilter
    from app.services.notification_dispatcher import NotificationDispatcher
    from app.services.origin_authorizer import OriginAuthorizer
    from app.services.rate_limiter import RateLimiter
    from config.settings import BotRejectionMode, RateLimitKeyMode

logger = logging.getLogger(__name__)

SERVER_ERROR_BODY = {"ok": False, "error": "Server error"}

Composer = Callable[[Submission, RequestContext], ComposedMessage]


@dataclass(frozen=True, slots=True)
class SubmissionResponse:
    """Resposta pronta para o transporte HTTP.

    Attributes:
        status_code: Status HTTP
        body: Corpo JSON (None para preflight)
        headers: CORS, rate limit e afins
    """

    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)


class SubmitFormUseCase:
    """Orquestrador do endpoint de submissão.

    Args:
        authorizer: Autorização de origem/CORS
        abuse_filter: Triagem anti-bot
        rate_limiter: Limite por identidade
        dispatcher: Entrega das mensagens (None = credencial ausente)
        public_destination: Chat obrigatório (None = não configurado)
        admin_destination: Chat interno opcional
        bot_rejection_mode: "reject" (400) ou "silent" (200)
        require_consent: Exige agree=true mesmo quando ausente
        key_mode: Composição da chave de identidade do rate limit
        composer: Função de composição (injetável em testes)
    """

    def __init__(
        self,
        authorizer: OriginAuthorizer,
        abuse_filter: AbuseFilter,
        rate_limiter: RateLimiter,
        dispatcher: NotificationDispatcher | None,
        public_destination: Destination | None,
        admin_destination: Destination | None = None,
        bot_rejection_mode: BotRejectionMode = "reject",
        require_consent: bool = False,
        key_mode: RateLimitKeyMode = "ip",
        composer: Composer = compose_messages,
    ) -> None:
        self._authorizer = authorizer
        self._abuse_filter = abuse_filter
        self._rate_limiter = rate_limiter
        self._dispatcher = dispatcher
        self._public_destination = public_destination
        self._admin_destination = admin_destination
        self._bot_rejection_mode = bot_rejection_mode
        self._require_consent = require_consent
        self._key_mode = key_mode
        self._composer = composer

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def is_configured(self) -> bool:
        """Credencial do bot e destino público presentes."""
        return self._dispatcher is not None and self._public_destination is not None

    def preflight(self, context: RequestContext) -> SubmissionResponse:
        """Responde OPTIONS: 204 se a origem é admitida, 403 caso contrário."""
        decision = self._authorizer.authorize(context.origin)
        headers = self._authorizer.cors_headers(decision)
        if not decision.allowed:
            logger.info("preflight_denied", extra={"origin": context.origin})
            return SubmissionResponse(status_code=403, headers=headers)
        return SubmissionResponse(status_code=204, headers=headers)

    async def execute(self, raw_body: bytes, context: RequestContext) -> SubmissionResponse:
        """Processa um POST de submissão. Nunca levanta exceção."""
        correlation_id = get_correlation_id()
        fsm = create_request_fsm(correlation_id)
        started_at = time.perf_counter()

        decision = self._authorizer.authorize(context.origin)
        headers = self._authorizer.cors_headers(decision)

        try:
            if not decision.allowed:
                raise OriginDenied()
            self._advance(fsm, RequestState.AUTHORIZED, "origin_allowed")
            response = await self._run(fsm, raw_body, context, headers)
        except SubmissionError as exc:
            response = self._reject(fsm, exc, headers)
        except Exception as exc:
            logger.exception(
                "submission_unexpected_error",
                extra={"error_type": type(exc).__name__, "state": fsm.current_state.name},
            )
            fsm.respond("unexpected_error", {"error_type": type(exc).__name__})
            record_rejection("server_error", 500, correlation_id)
            await self._alert_admin(
                f"🔥 5xx em /api/submit\n{html.escape(type(exc).__name__)}: "
                f"{html.escape(str(exc)[:300])}"
            )
            response = SubmissionResponse(
                status_code=500,
                body=dict(SERVER_ERROR_BODY),
                headers=headers,
            )

        latency_ms = (time.perf_counter() - started_at) * 1000
        record_latency("submit_form", "execute", latency_ms, correlation_id)
        logger.info(
            "submission_finished",
            extra={
                "status_code": response.status_code,
                "fsm": fsm.get_state_summary(),
                "transitions": fsm.get_history_summary(),
            },
        )
        return response

    async def _run(
        self,
        fsm: RequestStateMachine,
        raw_body: bytes,
        context: RequestContext,
        headers: dict[str, str],
    ) -> SubmissionResponse:
        submission = self._parse(raw_body)
        logger.info(
            "submission_received",
            extra={"origin": context.origin, "elapsed_ms": submission.t},
        )

        screening = self._abuse_filter.screen(submission.hp, submission.t)
        if not screening.accepted:
            raise BotSuspected(screening.reason or "unknown")
        self._advance(fsm, RequestState.SCREENED, "screening_passed")

        validation = validate_submission(submission, require_consent=self._require_consent)
        if not validation.is_valid:
            raise ValidationFailed(validation.failed_fields)
        self._advance(fsm, RequestState.VALIDATED, "validation_passed")

        if self._dispatcher is None or self._public_destination is None:
            raise ConfigurationError()

        identity_key = build_identity_key(context, self._key_mode)
        limit = await self._rate_limiter.check(identity_key)
        headers.update(limit.headers())
        if not limit.allowed:
            raise RateLimited(limit.reset_seconds)
        self._advance(
            fsm,
            RequestState.ADMITTED,
            "rate_limit_passed",
            {"count": limit.count, "degraded": limit.degraded},
        )

        composed = self._composer(submission, context)
        self._advance(fsm, RequestState.COMPOSED, "messages_composed")

        deliveries = [Delivery(self._public_destination, composed.public_text)]
        if self._admin_destination is not None:
            deliveries.append(Delivery(self._admin_destination, composed.internal_text))

        # shield: cliente que desconecta não cancela entregas em andamento
        report = await asyncio.shield(self._dispatcher.dispatch(deliveries))
        self._advance(
            fsm,
            RequestState.DISPATCHED,
            "deliveries_finished",
            {"ok": report.ok, "deliveries": len(report.outcomes)},
        )

        if not report.ok:
            failed = report.failed_required[0]
            logger.error(
                "required_delivery_failed",
                extra={
                    "destination": failed.destination.name,
                    "status_code": failed.status_code,
                    "error": failed.error,
                },
            )
            await self._alert_admin(
                f"❗️ Falha na entrega da mensagem pública: {failed.status_code or failed.error}\n"
                f"IP: {html.escape(context.client_ip)}"
            )
            raise TransportFailure(failed.to_details())

        fsm.respond("delivered")
        logger.info("submission_delivered", extra={"deliveries": len(report.outcomes)})
        return SubmissionResponse(status_code=200, body={"ok": True}, headers=headers)

    @staticmethod
    def _parse(raw_body: bytes) -> Submission:
        try:
            payload = json.loads(raw_body)
        except ValueError as exc:
            raise MalformedRequest() from exc
        if not isinstance(payload, dict):
            raise MalformedRequest()
        try:
            return Submission.model_validate(payload)
        except ValidationError as exc:
            raise MalformedRequest() from exc

    def _reject(
        self,
        fsm: RequestStateMachine,
        exc: SubmissionError,
        headers: dict[str, str],
    ) -> SubmissionResponse:
        metadata: dict[str, Any] = {"reason": exc.reason}
        if isinstance(exc, BotSuspected):
            # motivo real só no log; o cliente vê sempre a mesma resposta
            metadata["trigger"] = exc.trigger
        if isinstance(exc, ValidationFailed):
            metadata["fields"] = list(exc.fields)
        fsm.respond(exc.reason, metadata)

        if isinstance(exc, BotSuspected) and self._bot_rejection_mode == "silent":
            status_code, body = 200, {"ok": True}
        else:
            status_code, body = exc.status_code, exc.to_body()

        log = logger.error if status_code >= 500 else logger.info
        log("submission_rejected", extra={**metadata, "status_code": status_code})
        record_rejection(exc.reason, status_code, get_correlation_id())
        return SubmissionResponse(status_code=status_code, body=body, headers=headers)

    @staticmethod
    def _advance(
        fsm: RequestStateMachine,
        target: RequestState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        result = fsm.transition(target, trigger, metadata)
        if not result.success:
            logger.warning(
                "fsm_transition_refused",
                extra={"target": target.name, "reason": result.error_reason},
            )

    async def _alert_admin(self, text: str) -> None:
        if self._dispatcher is None or self._admin_destination is None:
            return
        delivered = await self._dispatcher.notify(self._admin_destination, text)
        if not delivered:
            logger.warning("admin_alert_failed")
