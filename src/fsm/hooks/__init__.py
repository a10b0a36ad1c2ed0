"""
Exports públicos do módulo fsm/hooks.

Despacho de hooks antes/depois das transições.
"""

from fsm.hooks.dispatcher import Hook, HookDispatcher, VetoResult, hook_name

__all__ = [
    "Hook",
    "HookDispatcher",
    "VetoResult",
    "hook_name",
]
