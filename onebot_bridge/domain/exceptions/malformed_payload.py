"""
MalformedPayloadError - Raised when a request body cannot be parsed.
Maps to: HTTP 400 with a plain-text body
"""


class MalformedPayloadError(Exception):
    """Raised when the request body is not a valid object or is too large."""

    def __init__(self, message: str = "Invalid JSON"):
        super().__init__(message)
        self.message = message
