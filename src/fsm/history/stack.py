"""
Histórico linear de estados visitados com cursor (undo/redo).

O histórico começa com apenas o estado inicial no índice 0. Cada
transição efetivada acrescenta uma entrada; back/forward movem apenas
o cursor. Uma transição feita depois de voltar no histórico descarta
todas as entradas após o cursor antes de acrescentar (sem ramificações).

Invariante: 0 <= cursor < len(entries) após qualquer operação.
"""

from __future__ import annotations

from collections.abc import Sequence

from fsm.types.errors import IndexOutOfRange
from fsm.types.transition import TransitionRecord


class HistoryStack:
    """
    Sequência de estados visitados e os registros de transição.

    ``records[i - 1]`` é a transição que levou a ``entries[i]``.

    Args:
        initial: Nome do estado inicial (entrada de índice 0)
    """

    __slots__ = ("_cursor", "_entries", "_records")

    def __init__(self, initial: str) -> None:
        self._entries: list[str] = [initial]
        self._records: list[TransitionRecord] = []
        self._cursor = 0

    @classmethod
    def from_snapshot(cls, entries: Sequence[str], cursor: int) -> HistoryStack:
        """
        Reconstrói o histórico a partir de um snapshot persistido.

        Os registros são derivados das entradas consecutivas, sem timestamp.

        Raises:
            ValueError: Se a sequência for vazia
            IndexOutOfRange: Se o cursor estiver fora da sequência
        """
        if not entries:
            raise ValueError("Histórico persistido não pode ser vazio")
        stack = cls(entries[0])
        stack._entries = list(entries)
        stack._records = [
            TransitionRecord(from_state=prev, to_state=nxt, timestamp=None)
            for prev, nxt in zip(entries, entries[1:])
        ]
        stack._check_index(cursor)
        stack._cursor = cursor
        return stack

    @property
    def cursor(self) -> int:
        """Índice da entrada atual."""
        return self._cursor

    @property
    def current(self) -> str:
        """Estado na posição do cursor."""
        return self._entries[self._cursor]

    @property
    def entries(self) -> tuple[str, ...]:
        """Cópia da sequência de estados."""
        return tuple(self._entries)

    @property
    def records(self) -> tuple[TransitionRecord, ...]:
        """Cópia dos registros de transição."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._entries)

    def can_go_back(self) -> bool:
        return self._cursor > 0

    def can_go_forward(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def push(self, record: TransitionRecord) -> None:
        """
        Registra uma transição efetivada a partir da posição do cursor.

        Entradas após o cursor são descartadas antes de acrescentar.
        """
        del self._entries[self._cursor + 1:]
        del self._records[self._cursor:]
        self._entries.append(record.to_state)
        self._records.append(record)
        self._cursor += 1

    def back(self) -> bool:
        """Move o cursor uma posição para trás. False se já no índice 0."""
        if not self.can_go_back():
            return False
        self._cursor -= 1
        return True

    def forward(self) -> bool:
        """Move o cursor uma posição para frente. False se já no fim."""
        if not self.can_go_forward():
            return False
        self._cursor += 1
        return True

    def go_to(self, index: int) -> bool:
        """
        Move o cursor para qualquer índice registrado.

        Returns:
            True (índice válido, mesmo que igual ao cursor atual)

        Raises:
            IndexOutOfRange: Se o índice não existir (negativos inclusos)
        """
        self._check_index(index)
        self._cursor = index
        return True

    def reset(self, initial: str) -> None:
        """Descarta todo o histórico e recomeça do estado inicial."""
        self._entries = [initial]
        self._records = []
        self._cursor = 0

    def _check_index(self, index: int) -> None:
        if (
            isinstance(index, bool)
            or not isinstance(index, int)
            or not 0 <= index < len(self._entries)
        ):
            raise IndexOutOfRange(index, len(self._entries))
