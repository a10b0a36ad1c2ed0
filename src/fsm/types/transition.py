"""
Tipos e estruturas de dados para transições de estado.

Este módulo define os tipos usados para representar o resultado de uma
tentativa de transição e o registro imutável de cada transição efetivada.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class RejectionReason(StrEnum):
    """
    Motivos esperados para uma transição não efetivada.

    São fluxo normal de controle (não exceções):
        - NOT_ALLOWED: não existe aresta origem → destino
        - GUARD_REJECTED: algum guard do destino negou
        - VETOED: algum before-hook vetou
    """

    NOT_ALLOWED = "NotAllowed"
    GUARD_REJECTED = "GuardRejected"
    VETOED = "Vetoed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TransitionRecord:
    """
    Registro imutável de uma transição efetivada.

    Pertence exclusivamente ao HistoryStack; callers recebem cópias.

    Attributes:
        from_state: Estado de origem
        to_state: Estado de destino
        timestamp: Momento da transição (UTC). None para registros
            reconstruídos a partir de um snapshot persistido.
    """

    from_state: str
    to_state: str
    timestamp: datetime | None = field(default_factory=lambda: datetime.now(UTC))

    def to_log_dict(self) -> dict[str, Any]:
        """
        Retorna representação segura para logs.

        Returns:
            Dict com dados para logging estruturado
        """
        return {
            "from_state": self.from_state,
            "to_state": self.to_state,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        committed: Se a transição foi efetivada
        reason: Motivo da rejeição (se committed=False)
        transition: Registro da transição (se committed=True)
        detail: Texto livre explicando a rejeição (guard/hook que negou)
    """

    committed: bool
    reason: RejectionReason | None = None
    transition: TransitionRecord | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.committed and self.transition is None:
            raise ValueError("Transição efetivada deve incluir transition")
        if self.committed and self.reason is not None:
            raise ValueError("Transição efetivada não pode ter reason")
        if not self.committed and self.reason is None:
            raise ValueError("Transição rejeitada deve incluir reason")

    def __bool__(self) -> bool:
        return self.committed

    @classmethod
    def ok(cls, transition: TransitionRecord) -> "TransitionResult":
        """Cria resultado de transição efetivada."""
        return cls(committed=True, transition=transition)

    @classmethod
    def rejected(
        cls,
        reason: RejectionReason,
        detail: str | None = None,
    ) -> "TransitionResult":
        """Cria resultado de transição rejeitada."""
        return cls(committed=False, reason=reason, detail=detail)
