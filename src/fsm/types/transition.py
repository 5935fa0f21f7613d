"""
Registros de transição do pipeline de submissão.

Os registros vão para o log ``submission_finished``, então metadata nunca
pode conter dados do formulário. O instante de cada transição é relativo
ao início da request (ms), o que já dá o tempo gasto por etapa.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fsm.states.request import RequestState


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Mudança de estado aplicada.

    Attributes:
        from_state: Estado de origem
        to_state: Estado de destino
        trigger: Gatilho (ex: "origin_allowed", "rate_limited")
        metadata: Dados de auditoria sem PII
        elapsed_ms: Milissegundos desde a criação da máquina
    """

    from_state: RequestState
    to_state: RequestState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")
        if self.elapsed_ms < 0:
            raise ValueError("elapsed_ms não pode ser negativo")

    def to_log_dict(self) -> dict[str, Any]:
        """Representação compacta para o log de auditoria."""
        entry: dict[str, Any] = {
            "from": self.from_state.name,
            "to": self.to_state.name,
            "trigger": self.trigger,
            "at_ms": round(self.elapsed_ms, 2),
        }
        if self.metadata:
            entry["metadata"] = self.metadata
        return entry


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Resultado de ``RequestStateMachine.transition``.

    Use ``applied()``/``refused()``; a combinação success sem transição
    (ou falha sem motivo) é rejeitada na construção.
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição aplicada deve incluir transition")
        if not self.success and not self.error_reason:
            raise ValueError("Transição recusada deve incluir error_reason")

    @classmethod
    def applied(cls, transition: StateTransition) -> TransitionResult:
        return cls(success=True, transition=transition)

    @classmethod
    def refused(cls, reason: str) -> TransitionResult:
        return cls(success=False, error_reason=reason)
