"""davgate data models — all Pydantic v2, all frozen (immutable)."""

from davgate.models.commands import (
    COMMAND_TYPE_MAP,
    DEFAULT_CONTENT_TYPE,
    CopyRequest,
    DavCommand,
    DavRequest,
    DeleteRequest,
    GetRequest,
    MkcolRequest,
    MoveRequest,
    PropfindRequest,
    PutRequest,
)
from davgate.models.envelopes import ErrorEnvelope
from davgate.models.target import AccountContext, AllowedDomainSet, RemoteTarget

__all__ = [
    # commands
    "DavCommand",
    "DavRequest",
    "GetRequest",
    "PutRequest",
    "PropfindRequest",
    "DeleteRequest",
    "MkcolRequest",
    "CopyRequest",
    "MoveRequest",
    "COMMAND_TYPE_MAP",
    "DEFAULT_CONTENT_TYPE",
    # envelopes
    "ErrorEnvelope",
    # accounts
    "AccountContext",
    "AllowedDomainSet",
    "RemoteTarget",
]
