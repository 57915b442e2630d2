"""Public interface for the remote control-plane API adapters."""

from __future__ import annotations

from .adapters import (
    ConsumerAdapter,
    ConsumerGroupAdapter,
    ControlPlaneAdapter,
    KonnectEntityAdapter,
    RouteAdapter,
    ServiceAdapter,
    build_konnect_adapters,
)
from .client import KonnectAPIError, KonnectClient
from .schema import EntityResponse, ErrorResponse

__all__ = [
    "ConsumerAdapter",
    "ConsumerGroupAdapter",
    "ControlPlaneAdapter",
    "EntityResponse",
    "ErrorResponse",
    "KonnectAPIError",
    "KonnectClient",
    "KonnectEntityAdapter",
    "RouteAdapter",
    "ServiceAdapter",
    "build_konnect_adapters",
]
