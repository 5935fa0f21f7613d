"""Resolução de país da submissão.

Ordem: nome enviado pelo formulário → ISO2 enviado → maior prefixo do
telefone E.164 na tabela de DDI. Sem casamento, o país fica marcado
como desconhecido; nunca é chutado.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from app.constants.dial_codes import DIAL_CODES, MAX_PREFIX_LENGTH
from app.services.field_validator import is_valid_e164

if TYPE_CHECKING:
    from app.domain.submission import Submission

UNKNOWN_COUNTRY = "Desconhecido"
UNKNOWN_FLAG = "🏳️"

CountrySource = Literal["form", "phone", "unknown"]


@dataclass(frozen=True, slots=True)
class CountryInfo:
    """País resolvido para exibição."""

    name: str
    iso2: str
    source: CountrySource

    @property
    def flag(self) -> str:
        return flag_from_iso2(self.iso2)


def flag_from_iso2(iso2: str) -> str:
    """Converte ISO2 em emoji de bandeira (regional indicators)."""
    code = iso2.strip().upper()
    if len(code) != 2 or not code.isascii() or not code.isalpha():
        return UNKNOWN_FLAG
    return "".join(chr(0x1F1E6 + ord(ch) - ord("A")) for ch in code)


def lookup_dial_code(e164: str) -> tuple[str, str] | None:
    """Busca (ISO2, nome) pelo maior prefixo do telefone canônico.

    Só telefone E.164 válido é consultado; qualquer outro valor dá None.
    """
    if not is_valid_e164(e164):
        return None
    digits = e164[1:]
    for length in range(min(MAX_PREFIX_LENGTH, len(digits)), 0, -1):
        match = DIAL_CODES.get(digits[:length])
        if match is not None:
            return match
    return None


def resolve_country(submission: Submission) -> CountryInfo:
    """Resolve o país da submissão."""
    name = submission.country_name.strip()
    iso2 = submission.country_iso.strip().upper()
    if name or iso2:
        return CountryInfo(name=name or iso2, iso2=iso2, source="form")

    match = lookup_dial_code(submission.phone_e164)
    if match is not None:
        iso2, name = match
        return CountryInfo(name=name, iso2=iso2, source="phone")

    return CountryInfo(name=UNKNOWN_COUNTRY, iso2="", source="unknown")
