"""
Tests for the DI container wiring.

Run with: pytest tests/test_container.py -v
"""

import json

import pytest

from onebot_bridge.application.actions import ActionMap, ActionName
from onebot_bridge.config.network_config import NetworkConfig
from onebot_bridge.config.settings import Config
from onebot_bridge.network.manager import NetworkManager
from onebot_bridge.setup.ioc.container import create_container
from tests.conftest import EchoAction


@pytest.mark.anyio
class TestContainer:
    async def test_provides_action_map_with_extra_actions(self):
        container = create_container([EchoAction()])
        try:
            actions = await container.get(ActionMap)

            assert ActionName.GetVersionInfo in actions
            assert "echo" in actions
        finally:
            await container.close()

    async def test_manager_shares_action_map(self):
        container = create_container()
        try:
            manager = await container.get(NetworkManager)
            assert manager.actions is await container.get(ActionMap)
        finally:
            await container.close()

    async def test_network_config_from_settings_path(self, tmp_path, monkeypatch):
        path = tmp_path / "onebot.json"
        path.write_text(json.dumps({"httpServers": [{"name": "x", "port": 3100}]}))
        monkeypatch.setattr(Config, "NETWORK_CONFIG_PATH", str(path))

        container = create_container()
        try:
            network_config = await container.get(NetworkConfig)
            assert network_config.http_servers[0].port == 3100
        finally:
            await container.close()

    async def test_closing_container_closes_adapters(self):
        container = create_container()
        manager = await container.get(NetworkManager)
        await manager.apply_config(
            NetworkConfig(httpServers=[{"name": "x", "enable": True, "host": "127.0.0.1", "port": 0}])
        )
        adapter = manager.get_adapter("x")
        assert adapter.is_listening

        await container.close()

        assert not adapter.is_listening
