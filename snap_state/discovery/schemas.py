"""
DID discovery contract.

Request/response shapes of the discovery aggregation an agent runtime
exposes. A discovery fans a query out to several providers; a provider that
fails contributes an entry to ``errors`` instead of failing the whole result.
"""

from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


class DiscoverDidArgs(BaseModel):
    """Parameters of a DID discovery request."""

    query: str = Field(..., description="Search string")
    options: Optional[Dict[str, Any]] = Field(None, description="Provider specific options")


class DidDiscoverMatch(BaseModel):
    """A single discovery match."""

    model_config = ConfigDict(populate_by_name=True)

    did: str = Field(..., description="Matched DID")
    meta_data: Dict[str, Any] = Field(
        default_factory=dict, alias="metaData", description="Provider specific metadata"
    )


class DidDiscoveryProviderResult(BaseModel):
    """Discovery results from one provider."""

    provider: str = Field(..., description="Provider name")
    matches: List[DidDiscoverMatch] = Field(default_factory=list)


class DiscoverDidResult(BaseModel):
    """Aggregated discovery results."""

    query: Optional[str] = None
    options: Optional[Dict[str, Any]] = None
    results: List[DidDiscoveryProviderResult] = Field(default_factory=list)
    errors: Optional[Dict[str, str]] = Field(None, description="Provider name → error message")

    def add_error(self, provider: str, message: str) -> None:
        """Record a provider failure without dropping other results."""
        if self.errors is None:
            self.errors = {}
        self.errors[provider] = message

    def to_wire(self) -> Dict[str, Any]:
        """Dump with wire field names, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DidDiscovery(Protocol):
    """Discovery method exposed by an agent plugin."""

    async def discover_did(self, args: DiscoverDidArgs, context: Any) -> DiscoverDidResult:
        ...
