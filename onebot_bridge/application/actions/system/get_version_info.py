from typing import Any

from onebot_bridge import __version__
from onebot_bridge.application.actions.base import OneBotAction
from onebot_bridge.application.actions.router import ActionName


class GetVersionInfo(OneBotAction[dict]):
    action_name = ActionName.GetVersionInfo

    async def _handle(self, payload: dict[str, Any]) -> dict:
        return {
            "app_name": "OneBot.Bridge",
            "protocol_version": "v11",
            "app_version": __version__,
        }
