from onebot_bridge.application.actions.system.get_version_info import GetVersionInfo
from onebot_bridge.application.actions.system.can_send import CanSendImage, CanSendRecord


def builtin_actions():
    return [GetVersionInfo(), CanSendImage(), CanSendRecord()]


__all__ = ["GetVersionInfo", "CanSendImage", "CanSendRecord", "builtin_actions"]
