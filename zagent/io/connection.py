"""
Zabbix agent wire-level connection.

This module implements a single request/response exchange with an agent
using asyncio streams. One AgentConnection is opened per query and closed
straight after; connections are never reused.

Every phase (dial, write, each read) is bounded by what is left of a single
timeout budget fixed when the connection is created. Running out of budget
raises TimeoutError. Transport errors are raised unchanged.

Example usage:
async def main():
    conn = await AgentConnection.create("192.0.2.10", 10050, timeout=5.0)
    async with conn:
        await conn.send(encode_request("agent.version"))
        header = await conn.receive_header()
        length = await conn.receive_length()
        payload = await conn.receive_payload()
        print(header, length, payload)

asyncio.run(main())
"""

import asyncio
import logging
import time
from typing import Awaitable, Optional, Self, TypeVar

from .codec import decode_header, decode_length, decode_payload

T = TypeVar("T")


def join_host_port(host: str, port: int) -> str:
    """host:port, with IPv6 literals bracketed"""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class AgentConnection:

    def __init__(self, host: str, port: int, timeout: float, logger: Optional[logging.Logger] = None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.raw_sent: Optional[bytes] = None
        self.raw_rcvd = bytearray()
        self.timestamp: float = time.time()
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._deadline: float = 0.0

    @classmethod
    async def create(cls, host: str, port: int, timeout: float, logger: Optional[logging.Logger] = None) -> Self:
        self = cls(host, port, timeout, logger)
        await self.open()
        return self

    def host_port(self) -> str:
        return join_host_port(self.host, self.port)

    def _remaining(self) -> float:
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    async def _bounded(self, aw: Awaitable[T], phase: str) -> T:
        try:
            return await asyncio.wait_for(aw, timeout=self._remaining())
        except TimeoutError as e:
            # ETIMEDOUT from the socket passes through unchanged
            if e.errno is not None:
                raise
            raise TimeoutError(f"Timed out {phase} {self.host_port()} after {self.timeout}s") from None

    async def open(self):
        """Dial the agent, starting the timeout budget"""
        self.timestamp = time.time()
        self._deadline = asyncio.get_running_loop().time() + self.timeout
        self._reader, self._writer = await self._bounded(
            asyncio.open_connection(self.host, self.port), "connecting to")
        self.logger.debug(f"Connected to Zabbix agent at {self.host_port()}")

    async def send(self, data: bytes):
        if self._writer is None: raise RuntimeError("Connection is not open")
        self.raw_sent = data
        self._writer.write(data)
        await self._bounded(self._writer.drain(), "writing to")
        self.logger.debug(f"Sent {len(data)} bytes to {self.host_port()}")

    async def receive_header(self) -> bytes:
        if self._reader is None: raise RuntimeError("Connection is not open")
        header = await self._bounded(decode_header(self._reader), "reading header from")
        self.raw_rcvd += header
        return header

    async def receive_length(self) -> int:
        if self._reader is None: raise RuntimeError("Connection is not open")
        length, field = await self._bounded(decode_length(self._reader), "reading data length from")
        self.raw_rcvd += field
        return length

    async def receive_payload(self) -> bytes:
        if self._reader is None: raise RuntimeError("Connection is not open")
        payload = await self._bounded(decode_payload(self._reader), "reading payload from")
        self.raw_rcvd += payload
        self.logger.debug(f"Received {len(self.raw_rcvd)} bytes from {self.host_port()}")
        return payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def is_connected(self) -> bool:
        """Check if connection is open"""
        return self._writer is not None and not self._writer.is_closing()

    async def close(self):
        """Close the connection"""
        if self._writer is None:
            return
        writer, self._writer, self._reader = self._writer, None, None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            # The agent may already have reset the connection
            self.logger.debug(f"Error while closing connection to {self.host_port()}: {e}")
