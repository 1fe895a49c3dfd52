"""Base Network Adapter - Abstract base class for all transport adapters."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from onebot_bridge.application.actions import ActionMap


class AdapterState(str, Enum):
    STOPPED = "stopped"
    LISTENING = "listening"


class NetworkReloadType(str, Enum):
    """What a reload did to the adapter's listener."""

    OPENED = "open"
    CLOSED = "close"
    RELOADED = "reload"
    UNCHANGED = "normal"


class NetworkAdapter(ABC):
    """Abstract base for all network adapters."""

    def __init__(self, name: str, config: Any, actions: ActionMap):
        self.name = name
        self.config = config
        self.actions = actions
        self.state = AdapterState.STOPPED

    @property
    def is_listening(self) -> bool:
        return self.state is AdapterState.LISTENING

    @abstractmethod
    async def open(self) -> None:
        """Start listening. Failures are logged, never raised."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Stop listening. Safe to call when already stopped."""
        ...

    @abstractmethod
    async def reload(self, new_config: Any) -> NetworkReloadType:
        """Swap in a new config, restarting the listener if needed."""
        ...

    @abstractmethod
    async def wait_closed(self) -> None:
        """Wait for work accepted before close() to finish."""
        ...
