"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_submit_use_case

    # Na inicialização do serviço
    initialize_app()

    # Dependência FastAPI do endpoint de submissão
    use_case = get_submit_use_case()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_abuse_settings,
    get_base_settings,
    get_origin_settings,
    get_rate_limit_settings,
    get_telegram_settings,
)

if TYPE_CHECKING:
    from app.use_cases.submit_form import SubmitFormUseCase

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

# Avisos que não bloqueiam o boot mesmo em produção
_ADVISORY_PREFIXES = ("Rate limit em memória",)

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=get_base_settings().service_name,
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega os erros de validação de todas as settings."""
    errors: list[str] = []
    errors.extend(f"base: {e}" for e in get_base_settings().validate())
    errors.extend(f"telegram: {e}" for e in get_telegram_settings().validate())
    errors.extend(f"cors: {e}" for e in get_origin_settings().validate())
    errors.extend(f"abuse: {e}" for e in get_abuse_settings().validate())
    errors.extend(f"rate_limit: {e}" for e in get_rate_limit_settings().validate())
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    blocking = [e for e in errors if not e.split(": ", 1)[-1].startswith(_ADVISORY_PREFIXES)]
    if strict_mode and blocking:
        details = "\n".join(f"- {error}" for error in blocking)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


@lru_cache(maxsize=1)
def get_submit_use_case() -> SubmitFormUseCase:
    """Obtém o use case de submissão (singleton).

    Returns:
        SubmitFormUseCase configurado conforme env
    """
    from app.bootstrap.dependencies import create_submit_use_case

    return create_submit_use_case(
        origin_settings=get_origin_settings(),
        abuse_settings=get_abuse_settings(),
        rate_limit_settings=get_rate_limit_settings(),
        telegram_settings=get_telegram_settings(),
    )
