"""
Zagent API-level models.

This module contains models that belong to the API layer:
- Response, the decoded answer to a single query
"""

import math
import re
import time
from dataclasses import dataclass, field
from typing import Optional

from ..io import CodecConst, classify_supported

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INF_RE = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _parse_int(text: str, pattern: re.Pattern, low: int, high: int, type_name: str) -> int:
    if not pattern.fullmatch(text):
        raise ValueError(f"invalid literal for {type_name}: {text!r}")
    value = int(text)
    if not low <= value <= high:
        raise ValueError(f"value out of range for {type_name}: {text!r}")
    return value


@dataclass
class Response:
    """
    The response from a Zabbix agent.

    data is generally what most people care about. header is always
    b"ZBXD\\x01" and data_length is the size announced by the agent,
    which is not guaranteed to match len(data).
    """
    header: bytes = bytes(CodecConst.HEADER_SIZE)
    data_length: int = 0
    data: bytes = b""
    key: Optional[str] = None
    raw_rcvd: Optional[bytes] = None
    timestamp: float = field(default_factory=time.time)

    def supported(self) -> bool:
        """
        Returns True if the key is supported, False if it wasn't.
        Most of the time you shouldn't need to call this as ZabbixAgent.get()
        raises ZagentNotSupportedError if the key is unsupported.
        """
        return classify_supported(self.data)

    def data_as_string(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def data_as_int(self) -> int:
        return _parse_int(self.data_as_string(), _INT_RE, _INT64_MIN, _INT64_MAX, "int")

    def data_as_int64(self) -> int:
        return _parse_int(self.data_as_string(), _INT_RE, _INT64_MIN, _INT64_MAX, "int64")

    def data_as_uint64(self) -> int:
        return _parse_int(self.data_as_string(), _UINT_RE, 0, CodecConst.MAX_UINT64, "uint64")

    def data_as_float64(self) -> float:
        text = self.data_as_string()
        # float() tolerates surrounding whitespace and digit separators, agents never send either
        if not text or text != text.strip() or "_" in text:
            raise ValueError(f"invalid literal for float64: {text!r}")
        value = float(text)
        if math.isinf(value) and not _INF_RE.fullmatch(text):
            raise ValueError(f"value out of range for float64: {text!r}")
        return value
