"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from mediaproxy.services import MediaProxyServer


def get_server(request: Request) -> "MediaProxyServer":
    """Server object created by the application lifespan."""
    return request.app.state.server
