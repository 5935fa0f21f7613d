"""Submission e RequestContext — entradas do pipeline de formulário.

Submission é o corpo JSON enviado pela página; RequestContext reúne o que
vem do transporte HTTP (origem, IP, user-agent, horário de chegada).

O parsing é tolerante: campos ausentes ou nulos viram string vazia e
tipos errados são coeridos. Quem decide se o conteúdo é aceitável é o
validador, que reporta todos os campos inválidos de uma vez.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_TRUTHY = frozenset({"true", "1", "yes", "on", "sim"})

_TEXT_FIELDS = (
    "name",
    "email",
    "phone",
    "phone_e164",
    "message",
    "policy_version",
    "url",
    "ua",
    "hp",
    "country_name",
    "country_iso",
    "country_dial",
)


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


class Submission(BaseModel):
    """Corpo da submissão enviado pelo formulário."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = ""
    email: str = ""
    phone: str = Field("", description="Telefone como digitado pelo usuário")
    phone_e164: str = Field("", description="Telefone canônico (+ e 8-15 dígitos)")
    subscribe: bool = False
    agree: bool | None = Field(None, description="Consentimento com a política")
    message: str = ""
    policy_version: str = ""
    url: str = Field("", description="Página onde o formulário foi enviado")
    ua: str = Field("", description="User-agent reportado pelo navegador")
    hp: str = Field("", description="Honeypot; humanos deixam vazio")
    t: int = Field(0, description="Milissegundos entre render e envio")
    country_name: str = ""
    country_iso: str = Field("", validation_alias=AliasChoices("country_iso", "country_iso2"))
    country_dial: str = Field("", validation_alias=AliasChoices("country_dial", "dial_code"))

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else ""
        if isinstance(value, (int, float)):
            return str(value)
        # listas/objetos não são texto de formulário
        return ""

    @field_validator("subscribe", mode="before")
    @classmethod
    def _coerce_subscribe(cls, value: Any) -> bool:
        return _coerce_flag(value)

    @field_validator("agree", mode="before")
    @classmethod
    def _coerce_agree(cls, value: Any) -> bool | None:
        if value is None:
            return None
        return _coerce_flag(value)

    @field_validator("t", mode="before")
    @classmethod
    def _coerce_elapsed(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Dados da request HTTP derivados pelo transporte.

    Attributes:
        origin: Header Origin (None quando ausente)
        client_ip: IP do cliente (X-Forwarded-For/X-Real-IP/socket)
        user_agent: Header User-Agent
        referer: Header Referer
        received_at: Momento de chegada (UTC, relógio injetável)
    """

    origin: str | None
    client_ip: str
    user_agent: str
    referer: str
    received_at: datetime
