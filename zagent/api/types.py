"""
API-level type definitions.

This module contains types and constants that belong to the API layer:
- Well-known agent keys
- Defaults used when talking to an agent
"""

from enum import StrEnum

from ..io import CodecConst


class AgentKey(StrEnum):
    PING = "agent.ping"
    HOSTNAME = "agent.hostname"
    VERSION = "agent.version"


class Const:
    DEFAULT_PORT = 10050
    DEFAULT_TIMEOUT = 30.0  # seconds
    MIN_PORT = 1
    MAX_PORT = 65535
    NOT_SUPPORTED = CodecConst.NOT_SUPPORTED
    PING_OK = "1"
