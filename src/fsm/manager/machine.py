"""
Máquina de estados de uma request de submissão.

Uma instância por request, descartada ao final. O histórico (com o
instante relativo de cada etapa) vai inteiro para o log de auditoria
emitido pelo orquestrador.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.request import DEFAULT_INITIAL_STATE, RequestState, is_terminal
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class RequestStateMachine:
    """
    Máquina de estados do pipeline.

    Args:
        initial_state: Estado inicial (DEFAULT_INITIAL_STATE se None)
        request_id: correlation_id da request, para os logs
        clock: Relógio monotônico em segundos (injetável em testes)
    """

    __slots__ = ("_clock", "_current_state", "_history", "_request_id", "_started_at")

    def __init__(
        self,
        initial_state: RequestState | None = None,
        request_id: str = "",
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._request_id = request_id
        self._clock = clock
        self._started_at = clock()

    @property
    def current_state(self) -> RequestState:
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Cópia do histórico."""
        return list(self._history)

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    @property
    def elapsed_ms(self) -> float:
        """Milissegundos desde a criação da máquina."""
        return max(0.0, (self._clock() - self._started_at) * 1000)

    def get_valid_targets(self) -> frozenset[RequestState]:
        return get_valid_targets(self._current_state)

    def can_transition_to(self, target: RequestState) -> bool:
        return self._refusal(target) is None

    def transition(
        self,
        target: RequestState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta avançar para ``target``.

        Uma transição recusada não altera o estado nem o histórico.

        Args:
            target: Estado de destino
            trigger: Gatilho (ex: 'origin_allowed', 'validation_failed')
            metadata: Dados de auditoria (nunca PII)
        """
        refusal = self._refusal(target)
        if refusal is not None:
            return TransitionResult.refused(refusal)

        record = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
            elapsed_ms=self.elapsed_ms,
        )
        self._current_state = target
        self._history.append(record)
        return TransitionResult.applied(record)

    def respond(
        self,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """Encerra a request (entrega ou rejeição) a partir de qualquer estado."""
        return self.transition(RequestState.RESPONDED, trigger, metadata)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo para o log ``submission_finished``."""
        return {
            "request_id": self._request_id,
            "state": self._current_state.name,
            "terminal": self.is_terminal,
            "path": [record.to_state.name for record in self._history],
            "elapsed_ms": round(self.elapsed_ms, 2),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [record.to_log_dict() for record in self._history]

    def _refusal(self, target: RequestState) -> str | None:
        if not is_transition_valid(self._current_state, target):
            return f"Transição inválida: {self._current_state.name} → {target.name}"
        guard = evaluate_guards(self._current_state, target)
        if not guard.allowed:
            return guard.reason or "guard"
        return None


def create_request_fsm(
    request_id: str,
    initial_state: RequestState | None = None,
) -> RequestStateMachine:
    """Factory usada pelo orquestrador (uma máquina por request)."""
    return RequestStateMachine(initial_state=initial_state, request_id=request_id)
