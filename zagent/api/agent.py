import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Self
from colorama import Fore, Style

from ..io import AgentConnection, encode_request, join_host_port
from .models import Response
from .types import AgentKey, Const
from ..exceptions import ZagentNotSupportedError, ZagentConfigurationError

"""
===================================================================================
This module implements queries against a Zabbix agent using zagent.io.
===================================================================================
"""


@dataclass(frozen=True)
class ZabbixAgent:
    """
    A remote Zabbix agent.

    The agent holds no connection. Every query dials, writes the key, reads
    the response to EOF and closes, so one instance can be shared freely
    between tasks.

    Example usage:
        agent = ZabbixAgent("192.0.2.10")
        if await agent.ping(timeout=5):
            print(await agent.version())
    """
    host: str
    port: int = Const.DEFAULT_PORT
    timeout: float = Const.DEFAULT_TIMEOUT
    print_traffic: bool = field(default=False, compare=False)
    logger: Optional[logging.Logger] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.host, str) or not self.host:
            raise ZagentConfigurationError("Agent host must be a non-empty string")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not Const.MIN_PORT <= self.port <= Const.MAX_PORT:
            raise ZagentConfigurationError(f"Agent port must be between {Const.MIN_PORT} and {Const.MAX_PORT}, got {self.port!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or not self.timeout > 0:
            raise ZagentConfigurationError(f"Agent timeout must be positive, got {self.timeout!r}")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any], **kwargs) -> Self:
        """Build an agent from a config entry such as {'host': ..., 'port': ..., 'timeout': ...}"""
        if not isinstance(config, Mapping) or "host" not in config:
            raise ZagentConfigurationError(f"Agent config must be a mapping with a 'host', got {config!r}")
        unknown = set(config) - {"host", "port", "timeout"}
        if unknown:
            raise ZagentConfigurationError(f"Unknown agent config keys: {', '.join(sorted(unknown))}")
        return cls(**config, **kwargs)

    def host_port(self) -> str:
        return join_host_port(self.host, self.port)

    def _logger(self) -> logging.Logger:
        return self.logger or logging.getLogger(__name__)

    # ============================
    # QUERIES
    # ============================

    async def get(self, key: str, timeout: Optional[float] = None) -> Response:
        """
        Run the check (key) against the agent.

        The timeout (default: the agent's timeout) bounds the whole exchange.
        Transport errors and TimeoutError are raised unchanged, framing errors
        raise a ZagentFramingError subclass. If the agent answers
        ZBX_NOTSUPPORTED, ZagentNotSupportedError is raised with the
        complete response attached.
        """
        if timeout is None: timeout = self.timeout
        if not timeout > 0: raise ValueError(f"Timeout must be positive, got {timeout!r}")
        if not isinstance(key, str): raise TypeError(f"Key must be a str, got {type(key).__name__}")
        key = str(key)
        logger = self._logger()

        conn = await AgentConnection.create(self.host, self.port, timeout, logger=logger)
        async with conn:
            await conn.send(encode_request(key))
            header = await conn.receive_header()
            data_length = await conn.receive_length()
            data = await conn.receive_payload()

        response = Response(header=header, data_length=data_length, data=data, key=key, raw_rcvd=bytes(conn.raw_rcvd))

        if len(data) != data_length:
            logger.warning(f"{self.host_port()} announced {data_length} bytes for {key} but sent {len(data)}")

        if self.print_traffic:
            rtt_ms = (response.timestamp - conn.timestamp) * 1000
            print(Fore.MAGENTA + f"REQUEST: {key} [{', '.join(f'0x{b:02X}' for b in conn.raw_sent or b'')}]  "
                + Fore.WHITE + Style.DIM + f"RTT: {rtt_ms:.0f}ms".ljust(10)
                + Style.BRIGHT + Fore.CYAN + f"  RESPONSE: [{', '.join(f'0x{b:02X}' for b in response.raw_rcvd)}]"
                + Style.RESET_ALL)

        if not response.supported():
            raise ZagentNotSupportedError(key, response)

        return response

    async def ping(self, timeout: Optional[float] = None) -> bool:
        """
        Call agent.ping on the agent. Returns True if it gets the correct
        response ("1"). Errors are raised, not swallowed.
        """
        response = await self.get(AgentKey.PING, timeout)
        return response.supported() and response.data_as_string() == Const.PING_OK

    async def hostname(self, timeout: Optional[float] = None) -> str:
        """Call agent.hostname on the agent and return the hostname"""
        response = await self.get(AgentKey.HOSTNAME, timeout)
        return response.data_as_string()

    async def version(self, timeout: Optional[float] = None) -> str:
        """Call agent.version on the agent and return the version"""
        response = await self.get(AgentKey.VERSION, timeout)
        return response.data_as_string()
