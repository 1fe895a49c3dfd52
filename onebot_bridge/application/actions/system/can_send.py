"""Capability probes. The bridge forwards images and records unchanged."""

from typing import Any

from onebot_bridge.application.actions.base import OneBotAction
from onebot_bridge.application.actions.router import ActionName


class CanSendImage(OneBotAction[dict]):
    action_name = ActionName.CanSendImage

    async def _handle(self, payload: dict[str, Any]) -> dict:
        return {"yes": True}


class CanSendRecord(OneBotAction[dict]):
    action_name = ActionName.CanSendRecord

    async def _handle(self, payload: dict[str, Any]) -> dict:
        return {"yes": True}
