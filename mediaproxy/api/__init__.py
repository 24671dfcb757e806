"""FastAPI integration for mediaproxy."""

from mediaproxy.api.routes import create_router

__all__ = ["create_router"]
