"""Logging estruturado (JSON) do form-relay.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="form_relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("submission_received", extra={"origin_allowed": True})

Campos presentes em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime

Dados do formulário (nome, email, telefone) nunca vão para os logs.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import REDACTED, CorrelationIdFilter, SensitiveDataFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REDACTED",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveDataFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
