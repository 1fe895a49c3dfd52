"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    TESTING = os.getenv("TESTING", "false").lower() in _TRUTHY
    DEBUG = os.getenv("DEBUG", "false").lower() in _TRUTHY

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] [%(adapter)s] %(name)s: %(message)s",
    )

    # Network adapters (httpServers list, see config/network_config.py)
    NETWORK_CONFIG_PATH = os.getenv("NETWORK_CONFIG_PATH", "config/onebot.json")

    # Request bodies are parsed leniently; anything above this is rejected as malformed
    MAX_BODY_MB = float(os.getenv("MAX_BODY_MB", "5000"))
    MAX_BODY_BYTES = int(MAX_BODY_MB * 1024 * 1024)

    # Seconds to wait for in-flight requests on close (unset = wait until they finish)
    GRACEFUL_SHUTDOWN_TIMEOUT = (
        float(os.getenv("GRACEFUL_SHUTDOWN_TIMEOUT"))
        if os.getenv("GRACEFUL_SHUTDOWN_TIMEOUT")
        else None
    )

    # Prometheus exporter (0 = disabled)
    METRICS_PORT = int(os.getenv("METRICS_PORT", "0"))


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("ONEBOT_ENV", "development")
    return config.get(env, config["default"])
