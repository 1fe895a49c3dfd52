"""
Response envelope and action result types.

Every dispatched call produces exactly one envelope:

    {"status": "ok" | "failed", "retcode": int, "data": any,
     "message": str, "wording": str}

Failures are signalled inside the envelope; the HTTP status stays 200.

Actions report their outcome as an explicit result instead of raising:
    Ok(data)                       -> status "ok", retcode 0
    Err(kind, detail, retcode)     -> status "failed", message = detail
"""

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class OB11Response:
    """Builds the uniform success/error envelope."""

    @staticmethod
    def res(data: Any, status: str, retcode: int, message: str = "") -> dict[str, Any]:
        return {
            "status": status,
            "retcode": retcode,
            "data": data,
            "message": message,
            "wording": message,
        }

    @staticmethod
    def ok(data: Any = None) -> dict[str, Any]:
        return OB11Response.res(data, "ok", 0)

    @staticmethod
    def error(message: str, retcode: int) -> dict[str, Any]:
        return OB11Response.res(None, "failed", retcode, message)


class ErrorKind(str, Enum):
    """Why a dispatched call failed."""

    UNKNOWN_ACTION = "unknown_action"
    HANDLER_FAILURE = "handler_failure"
    SERVER_CLOSED = "server_closed"
    INVALID_PAYLOAD = "invalid_payload"


@dataclass(frozen=True)
class Ok:
    data: Any = None


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str
    retcode: int = 200


ActionResult = Union[Ok, Err]


def to_envelope(result: ActionResult) -> dict[str, Any]:
    """Render an action result into the response envelope."""
    if isinstance(result, Ok):
        return OB11Response.ok(result.data)
    return OB11Response.error(result.detail, result.retcode)


def error_detail(exc: BaseException) -> str:
    """Best-effort diagnostic text: traceback, then message, then a fixed fallback."""
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return stack.strip() or str(exc) or "Error Handle"
