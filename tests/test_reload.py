"""
Tests for the reload decision table and live adapter reloads.

Run with: pytest tests/test_reload.py -v
"""

import httpx
import pytest

from onebot_bridge.config.network_config import HttpServerConfig
from onebot_bridge.network.base import AdapterState, NetworkReloadType
from onebot_bridge.network.reload import ReloadPlan, plan_reload


def _config(**kwargs) -> HttpServerConfig:
    return HttpServerConfig(name="http-test", host="127.0.0.1", **kwargs)


class TestPlanReload:
    def test_newly_enabled_opens(self):
        plan = plan_reload(False, _config(enable=False), _config(enable=True, port=8080))
        assert plan == ReloadPlan(NetworkReloadType.OPENED, open=True)

    def test_newly_disabled_closes(self):
        plan = plan_reload(True, _config(enable=True, port=8080), _config(enable=False, port=8080))
        assert plan == ReloadPlan(NetworkReloadType.CLOSED, close=True)

    def test_port_change_recreates(self):
        plan = plan_reload(True, _config(enable=True, port=8080), _config(enable=True, port=9090))
        assert plan == ReloadPlan(NetworkReloadType.RELOADED, close=True, open=True)

    def test_host_change_recreates(self):
        old = _config(enable=True, port=8080)
        new = HttpServerConfig(name="http-test", host="0.0.0.0", enable=True, port=8080)
        assert plan_reload(True, old, new).outcome is NetworkReloadType.RELOADED

    def test_port_change_while_stopped_and_disabled_does_not_open(self):
        plan = plan_reload(False, _config(enable=False, port=8080), _config(enable=False, port=9090))
        assert plan == ReloadPlan(NetworkReloadType.RELOADED, close=True, open=False)

    def test_token_change_is_unchanged(self):
        plan = plan_reload(True, _config(enable=True, port=8080), _config(enable=True, port=8080, token="x"))
        assert plan == ReloadPlan(NetworkReloadType.UNCHANGED)

    def test_enabled_but_not_listening_reopens(self):
        """A failed boot leaves the adapter stopped; reloading retries it."""
        plan = plan_reload(False, _config(enable=True, port=8080), _config(enable=True, port=8080))
        assert plan.outcome is NetworkReloadType.OPENED


@pytest.mark.anyio
class TestAdapterReload:
    async def test_reload_opens(self, make_adapter, free_port):
        adapter = make_adapter(enable=False)
        port = free_port()
        try:
            outcome = await adapter.reload(_config(enable=True, port=port))

            assert outcome is NetworkReloadType.OPENED
            assert adapter.state is AdapterState.LISTENING
            assert adapter.bound_port == port
        finally:
            await adapter.close()

    async def test_reload_closes(self, make_adapter, free_port):
        port = free_port()
        adapter = make_adapter(enable=True, port=port)
        await adapter.open()

        outcome = await adapter.reload(_config(enable=False, port=port))

        assert outcome is NetworkReloadType.CLOSED
        assert adapter.state is AdapterState.STOPPED
        assert adapter.bound_port is None

    async def test_reload_rebinds_on_port_change(self, make_adapter, free_port):
        old_port, new_port = free_port(), free_port()
        adapter = make_adapter(enable=True, port=old_port)
        await adapter.open()
        try:
            outcome = await adapter.reload(_config(enable=True, port=new_port))

            assert outcome is NetworkReloadType.RELOADED
            assert adapter.state is AdapterState.LISTENING
            assert adapter.bound_port == new_port

            async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{new_port}", trust_env=False) as client:
                res = await client.post("/echo", json={"a": 1})
            assert res.json()["data"] == {"a": 1}
        finally:
            await adapter.close()

    async def test_token_change_applies_without_restart(self, make_adapter, free_port):
        port = free_port()
        adapter = make_adapter(enable=True, port=port)
        await adapter.open()
        try:
            outcome = await adapter.reload(_config(enable=True, port=port, token="x"))
            assert outcome is NetworkReloadType.UNCHANGED
            assert adapter.bound_port == port

            async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{port}", trust_env=False) as client:
                denied = await client.post("/echo", json={})
                admitted = await client.post(
                    "/echo", json={}, headers={"Authorization": "Bearer x"}
                )
            assert denied.status_code == 403
            assert admitted.status_code == 200
            assert admitted.json()["status"] == "ok"
        finally:
            await adapter.close()

    async def test_reload_copies_config(self, make_adapter):
        adapter = make_adapter(enable=False)
        new_config = {"name": "http-test", "enable": False, "port": 1234, "token": "a"}

        await adapter.reload(new_config)
        new_config["token"] = "mutated"

        assert adapter.config.token == "a"
        assert adapter.config.port == 1234
