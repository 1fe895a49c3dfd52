"""
Reload decision table.

Evaluated in order against the state captured before the new config is
stored:

    1. stopped and now enabled          -> open                OPENED
    2. listening and now disabled       -> close               CLOSED
    3. bind address (host/port) changed -> close, open if on   RELOADED
    4. anything else                    -> nothing             UNCHANGED

The config itself is replaced in every case, so a new token applies to the
next request even when the listener is untouched.
"""

from dataclasses import dataclass

from onebot_bridge.config.network_config import HttpServerConfig
from onebot_bridge.network.base import NetworkReloadType


@dataclass(frozen=True)
class ReloadPlan:
    outcome: NetworkReloadType
    close: bool = False
    open: bool = False


def plan_reload(
    was_listening: bool, old_config: HttpServerConfig, new_config: HttpServerConfig
) -> ReloadPlan:
    if new_config.enable and not was_listening:
        return ReloadPlan(NetworkReloadType.OPENED, open=True)
    if not new_config.enable and was_listening:
        return ReloadPlan(NetworkReloadType.CLOSED, close=True)

    if (old_config.host, old_config.port) != (new_config.host, new_config.port):
        return ReloadPlan(NetworkReloadType.RELOADED, close=True, open=new_config.enable)

    return ReloadPlan(NetworkReloadType.UNCHANGED)
