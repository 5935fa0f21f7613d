"""
Grafo de transições válidas do pipeline de submissão.

Cada estado avança apenas para o próximo da sequência ou sai direto
para RESPONDED (rejeição antecipada). Não há volta nem repetição:
cada request é processada uma única vez.
"""

from fsm.states.request import PIPELINE_ORDER, TERMINAL_STATES, RequestState

TransitionMap = dict[RequestState, frozenset[RequestState]]


def _build_transition_map() -> TransitionMap:
    transitions: TransitionMap = {}
    for index, state in enumerate(PIPELINE_ORDER):
        if state in TERMINAL_STATES:
            transitions[state] = frozenset()
            continue
        next_state = PIPELINE_ORDER[index + 1]
        transitions[state] = frozenset({next_state, RequestState.RESPONDED})
    return transitions


VALID_TRANSITIONS: TransitionMap = _build_transition_map()


def get_valid_targets(from_state: RequestState) -> frozenset[RequestState]:
    """
    Retorna os destinos válidos a partir de um estado.

    Args:
        from_state: Estado de origem

    Returns:
        Conjunto de destinos (vazio para estados terminais)
    """
    return VALID_TRANSITIONS.get(from_state, frozenset())


def is_transition_valid(
    from_state: RequestState,
    to_state: RequestState,
) -> bool:
    """
    Verifica se a transição faz parte do grafo.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida
    """
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais não têm saída
    - Todo estado não-terminal alcança RESPONDED

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in RequestState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        if from_state in TERMINAL_STATES:
            continue
        if RequestState.RESPONDED not in targets:
            errors.append(f"Estado {from_state.name} não tem saída para RESPONDED")

    return errors
