"""
Estados do pipeline de uma submissão de formulário.

Cada request percorre os estados em ordem e termina sempre em
RESPONDED, seja com sucesso ou com rejeição antecipada.
"""

from enum import StrEnum


class RequestState(StrEnum):
    """
    Estados canônicos de uma request de submissão.

    Estados não-terminais (em ordem):
        - RECEIVED: Request recebida, nada avaliado
        - AUTHORIZED: Origem aprovada e corpo JSON lido
        - SCREENED: Passou pelo filtro anti-bot
        - VALIDATED: Campos obrigatórios e formatos OK
        - ADMITTED: Dentro do limite de requests da identidade
        - COMPOSED: Mensagens pública e interna montadas
        - DISPATCHED: Entregas concluídas (com ou sem falha parcial)

    Estado terminal:
        - RESPONDED: Resposta HTTP definida
    """

    RECEIVED = "RECEIVED"
    AUTHORIZED = "AUTHORIZED"
    SCREENED = "SCREENED"
    VALIDATED = "VALIDATED"
    ADMITTED = "ADMITTED"
    COMPOSED = "COMPOSED"
    DISPATCHED = "DISPATCHED"
    RESPONDED = "RESPONDED"

    def __str__(self) -> str:
        return self.value


# Ordem do caminho feliz; usada para montar o grafo de transições
PIPELINE_ORDER: tuple[RequestState, ...] = (
    RequestState.RECEIVED,
    RequestState.AUTHORIZED,
    RequestState.SCREENED,
    RequestState.VALIDATED,
    RequestState.ADMITTED,
    RequestState.COMPOSED,
    RequestState.DISPATCHED,
    RequestState.RESPONDED,
)

TERMINAL_STATES: frozenset[RequestState] = frozenset({RequestState.RESPONDED})

DEFAULT_INITIAL_STATE: RequestState = RequestState.RECEIVED


def is_terminal(state: RequestState) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    """Verifica se o valor é um RequestState."""
    return isinstance(state, RequestState)
