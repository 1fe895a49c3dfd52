"""
OneBot HTTP bridge.

Exposes a bot client's actions as a request/response API over HTTP adapters.
"""

__version__ = "1.0.0"
