"""
DOMAIN EXCEPTIONS - Request and action failures

These exceptions are raised by the pipeline stages and by action
implementations, and converted by the network layer into either an HTTP
status (malformed body) or a failed envelope (action failures).
"""

from onebot_bridge.domain.exceptions.malformed_payload import MalformedPayloadError
from onebot_bridge.domain.exceptions.action_failed import ActionFailedError

__all__ = [
    "MalformedPayloadError",
    "ActionFailedError",
]
