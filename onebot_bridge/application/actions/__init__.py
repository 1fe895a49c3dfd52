"""
OneBot actions - named request handlers reachable over the network adapters.
"""

from onebot_bridge.application.actions.base import ActionHandler, OneBotAction
from onebot_bridge.application.actions.registry import ActionMap, create_action_map
from onebot_bridge.application.actions.router import ActionName

__all__ = [
    "ActionHandler",
    "OneBotAction",
    "ActionMap",
    "create_action_map",
    "ActionName",
]
