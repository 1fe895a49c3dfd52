"""
Action registry.

Built once from a collection of actions and injected into the network
adapters, which only ever look handlers up by name.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Optional

from onebot_bridge.application.actions.base import ActionHandler


class ActionMap(Mapping[str, ActionHandler]):
    """Read-only mapping from action name to handler."""

    def __init__(self, actions: Iterable[ActionHandler] = ()):
        handlers: dict[str, ActionHandler] = {}
        for action in actions:
            if not action.action_name:
                raise ValueError(f"{type(action).__name__} has no action_name")
            if action.action_name in handlers:
                raise ValueError(f"Duplicate action name: {action.action_name}")
            handlers[action.action_name] = action
        self._handlers = handlers

    def __getitem__(self, name: str) -> ActionHandler:
        return self._handlers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def get(self, name: str, default: Optional[ActionHandler] = None) -> Optional[ActionHandler]:
        return self._handlers.get(name, default)


def create_action_map(extra: Iterable[ActionHandler] = ()) -> ActionMap:
    """Registry of the built-in actions plus externally supplied handlers."""
    # Deferred: the system actions import this package
    from onebot_bridge.application.actions.system import builtin_actions

    return ActionMap([*builtin_actions(), *extra])
