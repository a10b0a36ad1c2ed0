"""
Exceções do motor de transições.

Hierarquia única (FSMError) para que o caller consiga distinguir falhas
do grafo, falhas de guard e erros de uso da API.

Resultados esperados de uma transição (NotAllowed, GuardRejected, Vetoed)
NÃO são exceções: são retornados em TransitionResult.reason.
"""

from __future__ import annotations


class FSMError(Exception):
    """Base para todos os erros do motor de transições."""


class GraphError(FSMError):
    """Grafo de estados inválido. Fatal: o motor não é construído."""


class UnknownStateError(FSMError, KeyError):
    """Estado não declarado no registro."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Estado desconhecido: {name!r}")
        self.name = name

    def __str__(self) -> str:
        # KeyError.__str__ aplicaria repr() sobre a mensagem
        return str(self.args[0])


class GuardError(FSMError):
    """Um guard levantou exceção durante a avaliação (transição bloqueada)."""

    def __init__(self, guard_name: str, from_state: str, to_state: str) -> None:
        super().__init__(
            f"Guard {guard_name} falhou na transição {from_state} → {to_state}"
        )
        self.guard_name = guard_name
        self.from_state = from_state
        self.to_state = to_state


class IndexOutOfRange(FSMError, IndexError):
    """Índice de histórico fora do intervalo registrado."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(
            f"Índice de histórico inválido: {index} (válidos: 0..{length - 1})"
        )
        self.index = index
        self.length = length


class StaleSnapshotError(FSMError):
    """Snapshot persistido incompatível com o grafo atual.

    O motor volta para o estado inicial antes de propagar este erro.
    """


class ReentrancyError(FSMError):
    """Operação chamada de dentro de uma transição em andamento."""
