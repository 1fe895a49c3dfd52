import asyncio
import socket
from typing import Any

import pytest
from pydantic import BaseModel

from onebot_bridge.application.actions import OneBotAction, create_action_map
from onebot_bridge.config.network_config import HttpServerConfig
from onebot_bridge.domain.exceptions import ActionFailedError
from onebot_bridge.network.passive_http import PassiveHttpAdapter


class EchoAction(OneBotAction[dict]):
    action_name = "echo"

    async def _handle(self, payload: dict[str, Any]) -> dict:
        return payload


class BoomAction(OneBotAction[None]):
    action_name = "boom"

    async def _handle(self, payload: dict[str, Any]) -> None:
        raise RuntimeError("boom")


class RejectAction(OneBotAction[None]):
    action_name = "reject"

    async def _handle(self, payload: dict[str, Any]) -> None:
        raise ActionFailedError("group not found", retcode=1404)


class SendGroupMsgPayload(BaseModel):
    group_id: int
    message: str


class SendGroupMsg(OneBotAction[dict]):
    action_name = "send_group_msg"
    payload_schema = SendGroupMsgPayload

    async def _handle(self, payload: dict[str, Any]) -> dict:
        return {"message_id": 1}


class SlowAction(OneBotAction[dict]):
    action_name = "slow"

    async def _handle(self, payload: dict[str, Any]) -> dict:
        await asyncio.sleep(float(payload.get("delay", 0.3)))
        return payload


class RawHandler:
    """Handler that only follows the protocol and lets exceptions escape."""

    action_name = "raw"

    async def handle(self, payload, adapter_name):
        raise ValueError("boom from raw handler")


class EnvelopeHandler:
    """Handler that builds its own envelope."""

    action_name = "custom_envelope"

    async def handle(self, payload, adapter_name):
        return {"status": "ok", "retcode": 0, "data": {"adapter": adapter_name}, "message": ""}


class NoEnvelopeHandler:
    """Handler that forgets to return anything."""

    action_name = "no_envelope"

    async def handle(self, payload, adapter_name):
        return None


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def actions():
    """Built-in actions plus the test handlers."""
    return create_action_map(
        [
            EchoAction(),
            BoomAction(),
            RejectAction(),
            SlowAction(),
            SendGroupMsg(),
            RawHandler(),
            EnvelopeHandler(),
            NoEnvelopeHandler(),
        ]
    )


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture()
def free_port():
    return _free_port


@pytest.fixture()
def make_adapter(actions):
    """Factory for adapters bound to localhost."""

    def _make(name="http-test", **overrides):
        config = HttpServerConfig(name=name, host="127.0.0.1", **overrides)
        return PassiveHttpAdapter(name, config, actions)

    return _make
