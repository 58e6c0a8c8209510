"""Account-side models: who is calling, where they proxy to, and which
remote hosts they may reach."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

_PATTERN_SEPARATOR = re.compile(r"[\s,]+")


class AccountContext(BaseModel):
    """The authenticated account a request runs on behalf of."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    name: str


class RemoteTarget(BaseModel):
    """The account's configured DAV server, as stored in the directory.

    Values stay raw strings; completeness is checked by the dispatcher
    before any of them is interpreted.
    """

    model_config = ConfigDict(frozen=True)

    server_address: str | None = None
    port: str | None = None
    base_path: str | None = None
    username: str | None = None
    password: str | None = None

    def missing_fields(self) -> list[str]:
        """Names of unset fields, in declaration order."""
        return [
            name for name in type(self).model_fields if getattr(self, name) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    @property
    def port_number(self) -> int:
        """The port as an integer.

        Raises
        ------
        ValueError
            If the port is unset, not a base-10 integer, or outside 1..65535.
        """
        raw = (self.port or "").strip()
        if not (raw.isascii() and raw.isdigit()):
            raise ValueError(f"port {self.port!r} is not an integer")
        number = int(raw)
        if not 1 <= number <= 65535:
            raise ValueError(f"port {number} is out of range")
        return number


class AllowedDomainSet(BaseModel):
    """Domain patterns an account may proxy to.

    Each pattern is ``*`` (any host), ``*suffix`` (hosts ending with
    *suffix*) or a bare string, which is also matched as a suffix.
    Stored order is kept; it has no meaning beyond first-match.
    """

    model_config = ConfigDict(frozen=True)

    patterns: tuple[str, ...] = ()

    @classmethod
    def from_property(cls, value: str | list[str] | tuple[str, ...] | None) -> AllowedDomainSet:
        """Build from a directory value: a list or a comma/space separated string."""
        if value is None:
            return cls()
        items = _PATTERN_SEPARATOR.split(value) if isinstance(value, str) else value
        return cls(patterns=tuple(p.strip() for p in items if p and p.strip()))

