"""
API-level models and agent queries.

This module contains models and types that belong to the API layer:
- ZabbixAgent (agent identity and queries)
- Response (decoded answer to a query)
- AgentKey, Const (well-known keys and defaults)
"""

from .models import Response
from .agent import ZabbixAgent
from .types import AgentKey, Const

__all__ = [
    "ZabbixAgent",
    "Response",
    "AgentKey",
    "Const",
]
