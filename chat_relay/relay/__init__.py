"""
Server side of the chat relay: the HTTP endpoint and the gateway client.
"""

from __future__ import annotations

from .app import CORS_HEADERS, create_app
from .gateway import GatewayClient, build_http_client

__all__ = [
    "CORS_HEADERS",
    "GatewayClient",
    "build_http_client",
    "create_app",
]
