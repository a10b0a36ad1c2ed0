"""
Hooks executados ao redor de uma transição.

Before-hooks participam da autorização: retornar False (ou levantar
exceção) veta a transição e interrompe o despacho. After-hooks são
observadores: rodam só depois do commit e suas falhas nunca desfazem
a transição.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from fsm.types.errors import ReentrancyError

logger = logging.getLogger(__name__)

Hook = Callable[[str, str], bool | None]


def hook_name(hook: Hook) -> str:
    return getattr(hook, "__name__", None) or repr(hook)


@dataclass(frozen=True, slots=True)
class VetoResult:
    """
    Resultado do despacho dos before-hooks.

    Attributes:
        vetoed: Se algum hook vetou
        hook: Nome do hook que vetou
        error: Exceção levantada pelo hook (quando o veto foi por falha)
    """

    vetoed: bool
    hook: str | None = None
    error: Exception | None = None

    @property
    def detail(self) -> str | None:
        if not self.vetoed:
            return None
        if self.error is not None:
            return f"Hook {self.hook} falhou: {self.error}"
        return f"Hook {self.hook} vetou a transição"


_NO_VETO = VetoResult(vetoed=False)


class HookDispatcher:
    """Listas ordenadas de before-hooks e after-hooks."""

    __slots__ = ("_after", "_before")

    def __init__(self) -> None:
        self._before: list[Hook] = []
        self._after: list[Hook] = []

    def before_transition(self, hook: Hook) -> Callable[[], None]:
        """Registra before-hook. Retorna função que remove o registro."""
        return self._register(self._before, hook)

    def after_transition(self, hook: Hook) -> Callable[[], None]:
        """Registra after-hook. Retorna função que remove o registro."""
        return self._register(self._after, hook)

    def run_before(self, from_state: str, to_state: str) -> VetoResult:
        """
        Executa before-hooks em ordem até o primeiro veto.

        Raises:
            ReentrancyError: Se um hook tentou reentrar no motor
        """
        for hook in list(self._before):
            try:
                outcome = hook(from_state, to_state)
            except ReentrancyError:
                raise
            except Exception as exc:
                name = hook_name(hook)
                logger.warning(
                    "before_hook_failed",
                    extra={"hook": name, "from_state": from_state,
                           "to_state": to_state, "error": str(exc)},
                )
                return VetoResult(vetoed=True, hook=name, error=exc)
            if outcome is False:
                return VetoResult(vetoed=True, hook=hook_name(hook))
        return _NO_VETO

    def run_after(
        self,
        from_state: str,
        to_state: str,
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> int:
        """
        Executa todos os after-hooks; falhas são registradas e ignoradas.

        Args:
            on_error: Callback (nome do hook, exceção) chamado a cada falha

        Returns:
            Quantidade de hooks que falharam
        """
        failures = 0
        for hook in list(self._after):
            try:
                hook(from_state, to_state)
            except Exception as exc:
                failures += 1
                name = hook_name(hook)
                logger.warning(
                    "after_hook_failed",
                    extra={"hook": name, "from_state": from_state,
                           "to_state": to_state, "error": str(exc)},
                )
                if on_error is not None:
                    on_error(name, exc)
        return failures

    @property
    def before_count(self) -> int:
        return len(self._before)

    @property
    def after_count(self) -> int:
        return len(self._after)

    @staticmethod
    def _register(hooks: list[Hook], hook: Hook) -> Callable[[], None]:
        if not callable(hook):
            raise TypeError("hook deve ser chamável")
        hooks.append(hook)

        def remove() -> None:
            try:
                hooks.remove(hook)
            except ValueError:
                pass

        return remove
