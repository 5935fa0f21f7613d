"""Filtro anti-bot: honeypot e tempo mínimo de preenchimento.

Heurísticas baratas e sem estado; rodam antes de qualquer I/O para que
bots não consumam cota do rate limiter nem mensagens do bot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ScreeningReason = Literal["honeypot", "too_fast"]


@dataclass(frozen=True, slots=True)
class ScreeningResult:
    """Resultado da triagem anti-bot."""

    accepted: bool
    reason: ScreeningReason | None = None


class AbuseFilter:
    """Aplica as regras anti-bot.

    Args:
        min_elapsed_ms: Abaixo disso o envio é rápido demais para um humano
    """

    def __init__(self, min_elapsed_ms: int = 400) -> None:
        self._min_elapsed_ms = min_elapsed_ms

    def screen(self, honeypot: str, elapsed_ms: int) -> ScreeningResult:
        """Rejeita honeypot preenchido ou envio abaixo do tempo mínimo."""
        if honeypot.strip():
            return ScreeningResult(accepted=False, reason="honeypot")
        if elapsed_ms < self._min_elapsed_ms:
            return ScreeningResult(accepted=False, reason="too_fast")
        return ScreeningResult(accepted=True)
