"""
Base interfaces for actions.

Usage:
    class GetGroupInfoPayload(BaseModel):
        group_id: int

    class GetGroupInfo(OneBotAction[dict]):
        action_name = "get_group_info"
        payload_schema = GetGroupInfoPayload

        async def _handle(self, payload: dict) -> dict:
            return await self.client.get_group_info(payload["group_id"])

The network adapters only rely on the ActionHandler protocol; OneBotAction is
the convenience base that validates payloads and turns exceptions into Err
results so nothing escapes to the transport.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Protocol, TypeVar, Union, runtime_checkable

from pydantic import BaseModel, ValidationError

from onebot_bridge.domain.exceptions import ActionFailedError
from onebot_bridge.domain.response import ActionResult, Err, ErrorKind, Ok, error_detail

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class ActionHandler(Protocol):
    """What the adapters need from a registered action."""

    action_name: str

    async def handle(
        self, payload: dict[str, Any], adapter_name: str
    ) -> Union[ActionResult, dict[str, Any]]: ...


class OneBotAction(ABC, Generic[T]):
    action_name: str = ""
    payload_schema: Optional[type[BaseModel]] = None

    async def handle(self, payload: dict[str, Any], adapter_name: str) -> ActionResult:
        if self.payload_schema is not None:
            try:
                self.payload_schema.model_validate(payload)
            except ValidationError as e:
                return Err(ErrorKind.INVALID_PAYLOAD, str(e), retcode=400)

        try:
            data = await self._handle(payload)
        except ActionFailedError as e:
            return Err(ErrorKind.HANDLER_FAILURE, e.message, retcode=e.retcode)
        except Exception as e:
            logger.exception(f"Action {self.action_name} failed (adapter={adapter_name})")
            return Err(ErrorKind.HANDLER_FAILURE, error_detail(e))
        return Ok(data)

    @abstractmethod
    async def _handle(self, payload: dict[str, Any]) -> T:
        """Execute the action and return its data"""
        ...
