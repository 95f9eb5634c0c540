import asyncio
from typing import Optional

import pytest_asyncio

from zagent import CodecConst
from zagent.io import encode_uvarint


def frame(payload: bytes, length: Optional[int] = None) -> bytes:
    """Build a well-formed agent response around payload"""
    if length is None:
        length = len(payload)
    field = encode_uvarint(length).ljust(CodecConst.LENGTH_SIZE, b"\x00")
    return CodecConst.MAGIC + field + payload


class FakeAgent:
    """
    A loopback TCP server speaking the agent side of the protocol.

    Each connection reads one request key, records it, writes the raw reply
    configured for that key (or the default) and closes.
    """

    def __init__(self):
        self.replies: dict[str, bytes] = {}
        self.default_reply: bytes = frame(b"1")
        self.requests: list[str] = []
        self.silent = False
        self.server: Optional[asyncio.AbstractServer] = None
        self.port: int = 0
        self._release = asyncio.Event()

    async def start(self):
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]

    async def stop(self):
        self._release.set()
        if self.server:
            self.server.close()
            await self.server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        try:
            # Loopback delivers the short unframed key in one segment
            data = await reader.read(1024)
            self.requests.append(data.decode("utf-8"))
            if self.silent:
                await self._release.wait()
            else:
                writer.write(self.replies.get(data.decode("utf-8"), self.default_reply))
                await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()


@pytest_asyncio.fixture
async def fake_agent():
    agent = FakeAgent()
    await agent.start()
    yield agent
    await agent.stop()
