"""
Network Manager - owns every network adapter of the bridge.

Reconciles the running adapters against a NetworkConfig: adapters whose name
is still configured are reloaded, new names get a fresh adapter, names that
disappeared are closed and dropped.
"""

import logging
from typing import Optional

from onebot_bridge.application.actions import ActionMap
from onebot_bridge.config.network_config import HttpServerConfig, NetworkConfig
from onebot_bridge.network.base import NetworkAdapter, NetworkReloadType
from onebot_bridge.network.passive_http import PassiveHttpAdapter

logger = logging.getLogger(__name__)


class NetworkManager:
    def __init__(self, actions: ActionMap):
        self.actions = actions
        self._adapters: dict[str, NetworkAdapter] = {}
        # Removed adapters, kept until their connections have drained
        self._retired: list[NetworkAdapter] = []

    @property
    def adapters(self) -> list[NetworkAdapter]:
        return list(self._adapters.values())

    def register_adapter(self, adapter: NetworkAdapter) -> None:
        if adapter.name in self._adapters:
            raise ValueError(f"Adapter already registered: {adapter.name}")
        self._adapters[adapter.name] = adapter

    def get_adapter(self, name: str) -> Optional[NetworkAdapter]:
        return self._adapters.get(name)

    async def open_all(self) -> None:
        for adapter in self.adapters:
            if adapter.config.enable:
                await adapter.open()

    async def close_all(self) -> None:
        for adapter in self.adapters:
            await adapter.close()
        for adapter in self.adapters + self._retired:
            await adapter.wait_closed()
        self._retired.clear()

    async def reload_adapter(
        self, name: str, config: HttpServerConfig
    ) -> NetworkReloadType:
        adapter = self._adapters.get(name)
        if adapter is None:
            raise KeyError(f"Unknown adapter: {name}")
        return await adapter.reload(config)

    async def apply_config(
        self, network_config: NetworkConfig
    ) -> dict[str, NetworkReloadType]:
        """
        Bring the running adapters in line with network_config.

        Returns:
            Outcome per adapter name
        """
        outcomes: dict[str, NetworkReloadType] = {}
        wanted = {server.name: server for server in network_config.http_servers}

        for name in [name for name in self._adapters if name not in wanted]:
            adapter = self._adapters.pop(name)
            await adapter.close()
            self._retired.append(adapter)
            outcomes[name] = NetworkReloadType.CLOSED
            logger.info(f"Adapter {name} removed from config, closed")

        for name, server_config in wanted.items():
            if name in self._adapters:
                outcomes[name] = await self.reload_adapter(name, server_config)
                continue

            adapter = PassiveHttpAdapter(name, server_config, self.actions)
            self.register_adapter(adapter)
            if server_config.enable:
                await adapter.open()
                outcomes[name] = NetworkReloadType.OPENED
            else:
                outcomes[name] = NetworkReloadType.UNCHANGED
            logger.info(f"Adapter {name} created ({outcomes[name].value})")

        return outcomes
