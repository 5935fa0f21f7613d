"""
Módulo FSM — estados do pipeline de uma submissão de formulário.

Estrutura:
    - states/: RequestState e ordem do pipeline
    - transitions/: grafo de transições (VALID_TRANSITIONS)
    - rules/: guards
    - manager/: RequestStateMachine
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import (
    RequestStateMachine,
    create_request_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    PIPELINE_ORDER,
    TERMINAL_STATES,
    RequestState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "PIPELINE_ORDER",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "GuardResult",
    "RequestState",
    "RequestStateMachine",
    "StateTransition",
    "TransitionResult",
    "create_request_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
