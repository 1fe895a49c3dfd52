"""
Main entry point for the OneBot HTTP bridge.

Usage:
    python run_bridge.py

Adapters come from the network config file (NETWORK_CONFIG_PATH). Send
SIGHUP to re-read it; changed adapters are reloaded in place.
"""

import asyncio
import logging
import signal

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from onebot_bridge.config.logging_config import setup_logging
from onebot_bridge.config.network_config import NetworkConfig, load_network_config
from onebot_bridge.config.settings import get_config
from onebot_bridge.network.manager import NetworkManager
from onebot_bridge.observability.metrics import start_metrics_server
from onebot_bridge.setup.ioc.container import create_container

logger = logging.getLogger("onebot_bridge.run")


async def main() -> None:
    settings = get_config()
    setup_logging(settings.LOG_LEVEL, settings.LOG_PATH)

    if settings.METRICS_PORT:
        start_metrics_server(settings.METRICS_PORT)
        logger.info(f"Metrics available on port {settings.METRICS_PORT}")

    container = create_container()
    try:
        manager = await container.get(NetworkManager)
        outcomes = await manager.apply_config(await container.get(NetworkConfig))
        logger.info(f"Adapters started: {outcomes}")

        loop = asyncio.get_running_loop()
        stop = asyncio.Event()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        if hasattr(signal, "SIGHUP"):
            def _schedule_reload():
                loop.create_task(_reload(manager, settings.NETWORK_CONFIG_PATH))

            loop.add_signal_handler(signal.SIGHUP, _schedule_reload)

        await stop.wait()
        logger.info("Shutting down")
    finally:
        await container.close()


async def _reload(manager: NetworkManager, path: str) -> None:
    try:
        network_config = load_network_config(path)
    except ValueError as e:
        logger.error(f"Invalid network config, keeping current adapters: {e}")
        return
    outcomes = await manager.apply_config(network_config)
    logger.info(f"Network config reloaded: {outcomes}")


if __name__ == "__main__":
    asyncio.run(main())
