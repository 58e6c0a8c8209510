"""DAV command models — one frozen request variant per verb.

Each variant declares its parameters as pydantic fields whose alias is the
wire parameter name.  Required fields are the command's mandatory
parameters; fields with defaults are optional.  Unknown parameters are
ignored, and aliased fields bind only under their wire name.  The resolver derives its validation from these definitions, so
the parameter contract lives in exactly one place.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from davgate.bridge.connector import DavConnector

DEFAULT_CONTENT_TYPE = "text/xml,charset=UTF-8"


class DavCommand(str, Enum):
    """The seven DAV verbs the gateway can proxy."""

    GET = "GET"
    PUT = "PUT"
    PROPFIND = "PROPFIND"
    DELETE = "DELETE"
    MKCOL = "MKCOL"
    COPY = "COPY"
    MOVE = "MOVE"


class DavRequest(BaseModel):
    """Base for the per-verb request variants."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    command: ClassVar[DavCommand]
    mutating: ClassVar[bool] = True

    @classmethod
    def mandatory_parameters(cls) -> list[str]:
        """Wire names of the required parameters, in declaration order."""
        return [
            field.alias or name
            for name, field in cls.model_fields.items()
            if field.is_required()
        ]

    @classmethod
    def optional_parameters(cls) -> dict[str, Any]:
        """Wire names of the optional parameters mapped to their defaults."""
        return {
            field.alias or name: field.default
            for name, field in cls.model_fields.items()
            if not field.is_required()
        }

    def invoke(self, connector: DavConnector) -> Any:
        """Run this request against *connector* and return its raw result."""
        raise NotImplementedError


class GetRequest(DavRequest):
    """Fetch the body of the resource at ``path``."""

    command: ClassVar[DavCommand] = DavCommand.GET
    mutating: ClassVar[bool] = False

    path: str = "/"

    def invoke(self, connector: DavConnector) -> Any:
        return connector.get(self.path)


class PutRequest(DavRequest):
    """Store ``data`` at ``path``."""

    command: ClassVar[DavCommand] = DavCommand.PUT

    path: str
    data: str
    content_type: str = Field(default=DEFAULT_CONTENT_TYPE, alias="contentType")

    def invoke(self, connector: DavConnector) -> Any:
        return connector.put(self.path, self.data.encode("utf-8"), self.content_type)


class PropfindRequest(DavRequest):
    """List the properties of ``path`` down to ``depth`` levels."""

    command: ClassVar[DavCommand] = DavCommand.PROPFIND
    mutating: ClassVar[bool] = False

    path: str = "/"
    depth: int = 1

    @field_validator("depth", mode="before")
    @classmethod
    def _parse_depth(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("depth must be a non-negative integer")
        if isinstance(value, int):
            if value < 0:
                raise ValueError("depth must be a non-negative integer")
            return value
        if isinstance(value, str) and value.isascii() and value.isdigit():
            return int(value)
        raise ValueError("depth must be a non-negative integer")

    def invoke(self, connector: DavConnector) -> Any:
        return connector.propfind(self.path, self.depth)


class DeleteRequest(DavRequest):
    """Remove the resource at ``path``."""

    command: ClassVar[DavCommand] = DavCommand.DELETE

    path: str

    def invoke(self, connector: DavConnector) -> Any:
        return connector.delete(self.path)


class MkcolRequest(DavRequest):
    """Create a collection at ``path``."""

    command: ClassVar[DavCommand] = DavCommand.MKCOL

    path: str

    def invoke(self, connector: DavConnector) -> Any:
        return connector.mkcol(self.path)


class _TransferRequest(DavRequest):
    """Shared shape of COPY and MOVE: source, destination, overwrite flag."""

    path: str
    dest_path: str = Field(alias="destPath")
    overwrite: bool = False

    @field_validator("overwrite", mode="before")
    @classmethod
    def _parse_overwrite(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ValueError("overwrite must be 'true' or 'false'")


class CopyRequest(_TransferRequest):
    """Copy ``path`` to ``destPath``."""

    command: ClassVar[DavCommand] = DavCommand.COPY

    def invoke(self, connector: DavConnector) -> Any:
        return connector.copy(self.path, self.dest_path, self.overwrite)


class MoveRequest(_TransferRequest):
    """Move ``path`` to ``destPath``."""

    command: ClassVar[DavCommand] = DavCommand.MOVE

    def invoke(self, connector: DavConnector) -> Any:
        return connector.move(self.path, self.dest_path, self.overwrite)


COMMAND_TYPE_MAP: dict[DavCommand, type[DavRequest]] = {
    DavCommand.GET: GetRequest,
    DavCommand.PUT: PutRequest,
    DavCommand.PROPFIND: PropfindRequest,
    DavCommand.DELETE: DeleteRequest,
    DavCommand.MKCOL: MkcolRequest,
    DavCommand.COPY: CopyRequest,
    DavCommand.MOVE: MoveRequest,
}
