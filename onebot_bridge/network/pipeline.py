"""
Request pipeline stages for the passive HTTP adapter.

Flow:
  raw body ──► parse_body ──► authorize ──► normalize_payload ──► dispatch_action
                  │               │                                     │
                  ▼               ▼                                     ▼
              400 text        403 json                          envelope (HTTP 200)

Each stage is a plain function so it can be exercised without a listener.
"""

import json
import logging
from typing import Any, Mapping, Optional

from onebot_bridge.application.actions import ActionMap
from onebot_bridge.domain.exceptions import MalformedPayloadError
from onebot_bridge.domain.response import Err, ErrorKind, Ok, error_detail, to_envelope

logger = logging.getLogger(__name__)

READ_METHODS = frozenset({"GET", "HEAD"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# ==================== BODY PARSING ====================


def is_form_body(content_type: Optional[str]) -> bool:
    """True for url-encoded form bodies; the transport decodes those itself."""
    if not content_type:
        return False
    return content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE


def check_body_size(raw: bytes, limit: int) -> None:
    if len(raw) > limit:
        raise MalformedPayloadError()


def parse_body(raw: bytes, limit: int) -> dict[str, Any]:
    """
    Parse a JSON request body into an object.

    Used for every non-form body whatever the declared content type, so
    clients may omit it.

    Raises:
        MalformedPayloadError: body too large, invalid JSON or not an object
    """
    check_body_size(raw, limit)
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedPayloadError() from e
    if not isinstance(body, dict):
        raise MalformedPayloadError()
    return body


# ==================== AUTHORIZATION ====================


def extract_client_token(query_token: Optional[str], authorization: Optional[str]) -> str:
    """Query ``access_token`` wins when present and non-empty, else the bearer header."""
    if isinstance(query_token, str) and query_token != "":
        return query_token
    if not authorization:
        return ""
    return authorization.split("Bearer ")[-1].strip()


def authorize(token: Optional[str], query_token: Optional[str], authorization: Optional[str]) -> bool:
    # No secret configured: every request is admitted
    if not token:
        return True
    return extract_client_token(query_token, authorization) == token


# ==================== NORMALIZATION ====================


def normalize_payload(
    method: str, query: Mapping[str, Any], body: Mapping[str, Any]
) -> dict[str, Any]:
    """Read-style calls use the query only; others merge body over query."""
    if method.upper() in READ_METHODS:
        return dict(query)
    return {**query, **body}


def action_name_from_path(path: str) -> str:
    segments = path.split("/")
    return segments[1] if len(segments) > 1 else ""


# ==================== DISPATCH ====================


async def dispatch_action(
    actions: ActionMap, action_name: str, payload: dict[str, Any], adapter_name: str
) -> dict[str, Any]:
    """
    Run the named action and always return one envelope.

    Handlers normally return Ok/Err; a plain dict is taken as a finished
    envelope. Anything a handler raises is converted here, and so is a
    result that is neither.
    """
    action = actions.get(action_name)
    if action is None:
        return to_envelope(Err(ErrorKind.UNKNOWN_ACTION, f"unsupported api {action_name}"))

    try:
        result = await action.handle(payload, adapter_name)
    except Exception as e:
        logger.exception(f"Unhandled error in action {action_name}")
        return to_envelope(Err(ErrorKind.HANDLER_FAILURE, error_detail(e)))

    if isinstance(result, (Ok, Err)):
        return to_envelope(result)
    if isinstance(result, Mapping):
        return dict(result)

    logger.error(
        f"Action {action_name} returned {type(result).__name__} instead of an envelope"
    )
    return to_envelope(
        Err(ErrorKind.HANDLER_FAILURE, f"action {action_name} returned no envelope")
    )


def server_closed_envelope() -> dict[str, Any]:
    return to_envelope(Err(ErrorKind.SERVER_CLOSED, "Server is closed"))
