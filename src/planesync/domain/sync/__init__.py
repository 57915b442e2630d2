"""Remote-entity synchronization core.

Flow per call:
1) resolve the adapter bound to the entity kind
2) check the remote-identity precondition (update, delete)
3) consult the staleness gate (update)
4) dispatch to the adapter inside operation telemetry
5) normalize adapter failures into ``RemoteOperationFailedError``
"""

from __future__ import annotations

from .dispatcher import Dispatcher, UpdateResult
from .errors import (
    MissingRemoteIdentityError,
    RemoteOperationFailedError,
    SyncError,
    UnsupportedKindError,
)
from .staleness import Freshness, check_freshness
from .telemetry import OperationHook, OperationRecord, Outcome, track_operation

__all__ = [
    "Dispatcher",
    "Freshness",
    "MissingRemoteIdentityError",
    "OperationHook",
    "OperationRecord",
    "Outcome",
    "RemoteOperationFailedError",
    "SyncError",
    "UnsupportedKindError",
    "UpdateResult",
    "check_freshness",
    "track_operation",
]
