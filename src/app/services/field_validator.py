"""Validação de campos da submissão.

Todas as regras rodam sempre, para o cliente receber a lista completa de
campos inválidos em uma única resposta.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.submission import Submission

# Sempre com fullmatch: "$" aceitaria um "\n" no final do valor
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
E164_PATTERN = re.compile(r"\+[0-9]{8,15}")
MIN_NAME_LENGTH = 2


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Campos que falharam (vazio = válido), na ordem do formulário."""

    failed_fields: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.failed_fields


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(value))


def is_valid_e164(value: str) -> bool:
    return bool(E164_PATTERN.fullmatch(value))


def validate_submission(
    submission: Submission,
    require_consent: bool = False,
) -> ValidationResult:
    """Valida a submissão sem I/O.

    Args:
        submission: Submissão já parseada
        require_consent: Trata ``agree`` ausente como recusa

    Returns:
        ValidationResult com todos os campos inválidos.
    """
    failed: list[str] = []

    if len(submission.name.strip()) < MIN_NAME_LENGTH:
        failed.append("name")
    if not is_valid_email(submission.email):
        failed.append("email")
    if not is_valid_e164(submission.phone_e164):
        failed.append("phone_e164")

    consent = submission.agree
    if consent is False or (consent is None and require_consent):
        failed.append("agree")

    return ValidationResult(failed_fields=tuple(failed))
