"""
Network adapters - transports that expose the action registry.
"""

from onebot_bridge.network.base import AdapterState, NetworkAdapter, NetworkReloadType
from onebot_bridge.network.passive_http import PassiveHttpAdapter
from onebot_bridge.network.manager import NetworkManager

__all__ = [
    "AdapterState",
    "NetworkAdapter",
    "NetworkReloadType",
    "PassiveHttpAdapter",
    "NetworkManager",
]
