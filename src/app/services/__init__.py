"""Serviços de aplicação.

Unidades reutilizáveis do pipeline de submissão (sem IO direto, exceto o
dispatcher e o rate limiter, que recebem transporte/store injetados).
Implementações concretas de IO ficam em app/infra/ e api/connectors/.
"""

from app.services.abuse_filter import AbuseFilter, ScreeningResult
from app.services.field_validator import ValidationResult, validate_submission
from app.services.message_composer import ComposedMessage, compose_messages
from app.services.notification_dispatcher import (
    Delivery,
    DeliveryOutcome,
    Destination,
    DispatchReport,
    NotificationDispatcher,
)
from app.services.origin_authorizer import OriginAuthorizer, OriginDecision
from app.services.rate_limiter import RateLimitDecision, RateLimiter, build_identity_key

__all__ = [
    "AbuseFilter",
    "ComposedMessage",
    "Delivery",
    "DeliveryOutcome",
    "Destination",
    "DispatchReport",
    "NotificationDispatcher",
    "OriginAuthorizer",
    "OriginDecision",
    "RateLimitDecision",
    "RateLimiter",
    "ScreeningResult",
    "ValidationResult",
    "build_identity_key",
    "compose_messages",
]
