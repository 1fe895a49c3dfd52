"""
Dishka DI Container Setup.

Registers the process-wide objects of the bridge:
- ActionMap: built-in actions plus any handlers supplied by the host
- NetworkConfig: loaded from Config.NETWORK_CONFIG_PATH
- NetworkManager: owns the adapters; closing the container closes them

Flow:
  Container → provides → ActionMap → to → NetworkManager → creates → PassiveHttpAdapter
"""

from collections.abc import AsyncIterable, Iterable

from dishka import Provider, Scope, make_async_container, provide, AsyncContainer

from onebot_bridge.application.actions import ActionHandler, ActionMap, create_action_map
from onebot_bridge.config.network_config import NetworkConfig, load_network_config
from onebot_bridge.config.settings import Config
from onebot_bridge.network.manager import NetworkManager


class AppProvider(Provider):
    """
    Application dependency provider.

    All dependencies are app-scoped: one registry and one manager per process.
    """

    def __init__(self, extra_actions: Iterable[ActionHandler] = ()):
        super().__init__()
        self._extra_actions = list(extra_actions)

    @provide(scope=Scope.APP)
    def get_action_map(self) -> ActionMap:
        return create_action_map(self._extra_actions)

    @provide(scope=Scope.APP)
    def get_network_config(self) -> NetworkConfig:
        return load_network_config(Config.NETWORK_CONFIG_PATH)

    @provide(scope=Scope.APP)
    async def get_network_manager(self, actions: ActionMap) -> AsyncIterable[NetworkManager]:
        """
        Provide the NetworkManager.

        - Finalized when the container closes: every adapter is closed
        """
        manager = NetworkManager(actions)
        yield manager
        await manager.close_all()


def create_container(extra_actions: Iterable[ActionHandler] = ()) -> AsyncContainer:
    return make_async_container(AppProvider(extra_actions))
