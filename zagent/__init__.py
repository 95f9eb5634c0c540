"""
Zagent Python Library

A Python library for querying Zabbix agents over the network.

This library provides two layers of abstraction:

1. **zagent.io**: Wire-level protocol implementation (TCP exchange, message framing)
2. **zagent.api**: Agent queries using zagent.io (get, ping, hostname, version)

Example usage:
    import zagent

    agent = zagent.ZabbixAgent("192.168.1.100")
    if await agent.ping(timeout=5):
        print(await agent.hostname())

    try:
        load = (await agent.get("system.cpu.load[all,avg1]")).data_as_float64()
    except zagent.ZagentNotSupportedError as e:
        print(f"{e.key} is not supported by {agent.host_port()}")
"""

import logging

# Agent queries (recommended for most users)
from .api import ZabbixAgent, Response, AgentKey, Const

# Low-level wire components (for advanced users)
from .io import AgentConnection, CodecConst

# Exceptions
from .exceptions import (
    ZagentError,
    ZagentFramingError,
    ZagentHeaderError,
    DataLengthBufferTooSmall,
    DataLengthOverflow,
    ZagentNotSupportedError,
    ZagentConfigurationError,
)

# Utilities
from .utils import run_with_keyboard_interrupt, run_sync, load_agents

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.0.0"

# Public API - these are the main classes users should import
__all__ = [
    # Agent queries (recommended)
    "ZabbixAgent",
    "Response",
    "AgentKey",
    "Const",

    # Low-level (for advanced users)
    "AgentConnection",
    "CodecConst",

    # Exceptions
    "ZagentError",
    "ZagentFramingError",
    "ZagentHeaderError",
    "DataLengthBufferTooSmall",
    "DataLengthOverflow",
    "ZagentNotSupportedError",
    "ZagentConfigurationError",

    # Utilities
    "run_with_keyboard_interrupt",
    "run_sync",
    "load_agents",
]
