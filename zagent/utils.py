"""
Utility functions for the zagent library
"""
import asyncio
import sys
from typing import Any, Awaitable, Callable, TypeVar

import yaml

from .api import ZabbixAgent
from .exceptions import ZagentConfigurationError

T = TypeVar("T")


def run_with_keyboard_interrupt(main_func: Callable[[], Any]) -> None:
    """
    Run an async main function with graceful KeyboardInterrupt handling.

    This function wraps asyncio.run() to catch KeyboardInterrupt (Ctrl+C) and
    provide a clean shutdown experience.

    Args:
        main_func: The async main function to run
    """
    try:
        asyncio.run(main_func())
    except KeyboardInterrupt:
        print("\nInterrupted by user (Ctrl+C)")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def run_sync(aw: Awaitable[T]) -> T:
    """
    Run a single query from synchronous code.

    Example:
        version = run_sync(ZabbixAgent("192.0.2.10").version(timeout=5))
    """
    async def _main() -> T:
        return await aw
    return asyncio.run(_main())


def load_agents(path: str, section: str = "zabbix") -> list[ZabbixAgent]:
    """
    Load agents from a YAML config file.

    The file holds a top-level list of agent entries:

        zabbix:
          - host: 192.0.2.10
          - host: 192.0.2.11
            port: 10050
            timeout: 5
    """
    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ZagentConfigurationError(f"{path}: expected a mapping at the top level")
    entries = config.get(section)
    if not isinstance(entries, list):
        raise ZagentConfigurationError(f"{path}: '{section}' must be a list of agents")
    return [ZabbixAgent.from_dict(entry) for entry in entries]
