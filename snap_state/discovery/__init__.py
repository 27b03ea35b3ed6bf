"""DID discovery request/response contract."""

from .schemas import (
    DidDiscoverMatch,
    DidDiscovery,
    DidDiscoveryProviderResult,
    DiscoverDidArgs,
    DiscoverDidResult,
)

__all__ = [
    "DidDiscoverMatch",
    "DidDiscovery",
    "DidDiscoveryProviderResult",
    "DiscoverDidArgs",
    "DiscoverDidResult",
]
