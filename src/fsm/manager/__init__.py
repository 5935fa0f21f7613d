"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import (
    RequestStateMachine,
    create_request_fsm,
)

__all__ = [
    "RequestStateMachine",
    "create_request_fsm",
]
