"""mediaproxy - Uniform JSON proxy for media search and generation APIs."""

from mediaproxy.config import Settings
from mediaproxy.server import create_app
from mediaproxy.services import MediaProxyServer

__version__ = "0.1.0"
__all__ = ["MediaProxyServer", "Settings", "create_app"]
