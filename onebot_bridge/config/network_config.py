"""
Network adapter configuration.

Each HTTP server adapter is configured by one HttpServerConfig entry inside
the ``httpServers`` list of the network config file:

    {
        "httpServers": [
            {"name": "http-main", "enable": true, "port": 3000, "token": "secret"}
        ]
    }

Snapshots are frozen: an adapter never mutates its config, a reload swaps the
whole object.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class HttpServerConfig(BaseModel):
    """Config of a passive HTTP server adapter."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = "http-server"
    enable: bool = False
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)
    # Empty token = every request is admitted
    token: str = ""

    @field_validator("token", mode="before")
    @classmethod
    def _none_token_is_empty(cls, value):
        return "" if value is None else value


class NetworkConfig(BaseModel):
    """All network adapters of the bridge."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    http_servers: list[HttpServerConfig] = Field(
        default_factory=list, alias="httpServers"
    )

    @field_validator("http_servers")
    @classmethod
    def _unique_names(cls, servers: list[HttpServerConfig]) -> list[HttpServerConfig]:
        seen = set()
        for server in servers:
            if server.name in seen:
                raise ValueError(f"Duplicate adapter name: {server.name}")
            seen.add(server.name)
        return servers


def load_network_config(path: str | Path) -> NetworkConfig:
    """
    Load the network config file.

    Returns an empty NetworkConfig when the file does not exist.
    Raises pydantic.ValidationError for invalid content.
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Network config {config_path} not found, no adapters configured")
        return NetworkConfig()

    return NetworkConfig.model_validate_json(config_path.read_text(encoding="utf-8"))
