"""
Guards aplicados antes de cada transição de estado.

O grafo (transitions/rules.py) diz quais arestas existem; os guards
são checagens independentes dele, avaliadas em sequência, e podem ser
substituídos por request (ex: em testes).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from fsm.states.request import PIPELINE_ORDER, TERMINAL_STATES, RequestState


@dataclass(frozen=True, slots=True)
class GuardResult:
    """Decisão de um guard (reason só quando allowed=False)."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> GuardResult:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> GuardResult:
        return cls(allowed=False, reason=reason)


Guard = Callable[[RequestState, RequestState], GuardResult]


def guard_terminal_state(from_state: RequestState, to_state: RequestState) -> GuardResult:
    """Request já respondida não muda mais de estado."""
    del to_state
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(f"{from_state.name} é terminal")
    return GuardResult.allow()


def guard_forward_only(from_state: RequestState, to_state: RequestState) -> GuardResult:
    """Só avança no pipeline: sem repetir etapa e sem voltar."""
    if PIPELINE_ORDER.index(to_state) <= PIPELINE_ORDER.index(from_state):
        return GuardResult.deny(f"{to_state.name} não está à frente de {from_state.name}")
    return GuardResult.allow()


DEFAULT_GUARDS: tuple[Guard, ...] = (guard_terminal_state, guard_forward_only)


def evaluate_guards(
    from_state: RequestState,
    to_state: RequestState,
    guards: Sequence[Guard] | None = None,
) -> GuardResult:
    """Retorna o primeiro deny, ou allow() se todos os guards aprovarem."""
    for guard in DEFAULT_GUARDS if guards is None else guards:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result
    return GuardResult.allow()
