"""
ActionFailedError - Raised by an action to fail with a specific retcode.
Maps to: HTTP 200 with a failed envelope
"""


class ActionFailedError(Exception):
    """Exception raised by action implementations for expected failures."""

    def __init__(self, message: str, retcode: int = 200):
        super().__init__(message)
        self.message = message
        self.retcode = retcode
