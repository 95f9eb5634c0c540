"""
Zabbix agent wire codec.

This module implements the byte-level framing of the legacy Zabbix agent
protocol. It performs no network or timing work of its own; the async
decoders read from an asyncio.StreamReader owned by the caller.

Wire format:
- Request  = the raw key bytes, no length prefix and no terminator
- Response = [header(5), length(8), payload...]
  - header is always b"ZBXD\\x01"
  - length is an unsigned little-endian base-128 varint
  - payload runs until the agent closes the connection

Example usage:
async def main():
    reader, writer = await asyncio.open_connection("192.0.2.10", 10050)
    writer.write(encode_request("agent.ping"))
    await writer.drain()
    header = await decode_header(reader)
    length, _ = await decode_length(reader)
    payload = await decode_payload(reader)
    print(header, length, payload, classify_supported(payload))

asyncio.run(main())
"""

import asyncio

from ..exceptions import ZagentHeaderError, DataLengthBufferTooSmall, DataLengthOverflow


# Constants
class CodecConst:
    """Constants for the wire codec"""
    MAGIC = b"ZBXD\x01"
    HEADER_SIZE = 5
    LENGTH_SIZE = 8
    MAX_VARINT_LEN64 = 10
    MAX_UINT64 = (1 << 64) - 1
    NOT_SUPPORTED = "ZBX_NOTSUPPORTED"


# ============================
# VARINT
# ============================

def encode_uvarint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a base-128 varint"""
    if not 0 <= value <= CodecConst.MAX_UINT64:
        raise ValueError(f"Value must be between 0 and {CodecConst.MAX_UINT64}, got {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_uvarint(buf: bytes) -> tuple[int, int]:
    """
    Decode a base-128 varint from the start of buf.

    Returns (value, bytes_consumed). Raises DataLengthBufferTooSmall when buf
    ends before a terminating byte, and DataLengthOverflow when the encoded
    value does not fit in 64 bits.
    """
    x = 0
    s = 0
    for i, b in enumerate(buf):
        if i == CodecConst.MAX_VARINT_LEN64:
            raise DataLengthOverflow()
        if b < 0x80:
            # The tenth byte may only carry the single remaining bit
            if i == CodecConst.MAX_VARINT_LEN64 - 1 and b > 1:
                raise DataLengthOverflow()
            return x | (b << s), i + 1
        x |= (b & 0x7F) << s
        s += 7
    raise DataLengthBufferTooSmall()


# ============================
# REQUEST
# ============================

def encode_request(key: str) -> bytes:
    """Convert a request key to wire format (the key itself, unframed)"""
    return key.encode("utf-8")


# ============================
# RESPONSE
# ============================

def parse_header(buf: bytes) -> bytes:
    """Validate a received header and return it"""
    if len(buf) < CodecConst.HEADER_SIZE:
        raise ZagentHeaderError(f"Short header: received {len(buf)} of {CodecConst.HEADER_SIZE} bytes {buf!r}")
    if buf != CodecConst.MAGIC:
        raise ZagentHeaderError(f"Bad magic: expected {CodecConst.MAGIC!r}, received {buf!r}")
    return buf


def parse_length(buf: bytes) -> tuple[int, int]:
    """
    Decode the length field of a response.

    A field that was cut short by the peer raises DataLengthBufferTooSmall.
    A complete field that never terminates cannot describe a valid length,
    so it raises DataLengthOverflow.
    """
    field = buf[:CodecConst.LENGTH_SIZE]
    try:
        return decode_uvarint(field)
    except DataLengthBufferTooSmall:
        if len(field) == CodecConst.LENGTH_SIZE:
            raise DataLengthOverflow() from None
        raise


def classify_supported(payload: bytes) -> bool:
    """False only when the agent answered ZBX_NOTSUPPORTED"""
    return payload != CodecConst.NOT_SUPPORTED.encode("ascii")


async def read_up_to(reader: asyncio.StreamReader, n: int) -> bytes:
    """Read n bytes, or fewer if the stream ends first"""
    try:
        return await reader.readexactly(n)
    except asyncio.IncompleteReadError as e:
        return e.partial


async def decode_header(reader: asyncio.StreamReader) -> bytes:
    return parse_header(await read_up_to(reader, CodecConst.HEADER_SIZE))


async def decode_length(reader: asyncio.StreamReader) -> tuple[int, bytes]:
    """Read the length field and return (length, raw field bytes)"""
    field = await read_up_to(reader, CodecConst.LENGTH_SIZE)
    length, _ = parse_length(field)
    return length, field


async def decode_payload(reader: asyncio.StreamReader) -> bytes:
    # EOF marks the end of the payload
    return await reader.read()
