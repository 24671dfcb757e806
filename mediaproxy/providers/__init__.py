"""Search providers.

Each provider module holds an endpoint descriptor and the pure functions that
normalize its responses; ``APIProvider`` executes any descriptor.
"""

from mediaproxy.providers.base import (
    APIProvider,
    MediaKind,
    MediaResult,
    ProviderAuthType,
    ProviderConfig,
    SearchResult,
    VideoFile,
    VideoResult,
    VideoUser,
)
from mediaproxy.providers.registry import PROVIDER_CONFIGS, ProviderRegistry

__all__ = [
    # Base classes
    "APIProvider",
    "MediaKind",
    "ProviderAuthType",
    "ProviderConfig",
    # Results
    "MediaResult",
    "SearchResult",
    "VideoFile",
    "VideoResult",
    "VideoUser",
    # Registry
    "PROVIDER_CONFIGS",
    "ProviderRegistry",
]
