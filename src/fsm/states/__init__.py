"""
Exports públicos do módulo fsm/states.
"""

from fsm.states.request import (
    DEFAULT_INITIAL_STATE,
    PIPELINE_ORDER,
    TERMINAL_STATES,
    RequestState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "PIPELINE_ORDER",
    "TERMINAL_STATES",
    "RequestState",
    "is_terminal",
    "is_valid_state",
]
