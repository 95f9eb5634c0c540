"""
Wire-level protocol implementation.

This module contains the lowest-level communication components:
- AgentConnection - Raw TCP exchange with a Zabbix agent
- Message framing and parsing (header, varint length, payload)
- Connection lifetime and timeout budget
"""

from .codec import (
    CodecConst,
    encode_request,
    encode_uvarint,
    decode_uvarint,
    parse_header,
    parse_length,
    classify_supported,
    decode_header,
    decode_length,
    decode_payload,
)
from .connection import AgentConnection, join_host_port

__all__ = [
    "AgentConnection",
    "CodecConst",
    "encode_request",
    "encode_uvarint",
    "decode_uvarint",
    "parse_header",
    "parse_length",
    "classify_supported",
    "decode_header",
    "decode_length",
    "decode_payload",
    "join_host_port",
]
