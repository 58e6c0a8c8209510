"""Recursive error envelope returned to callers under the ``error`` key."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorEnvelope(BaseModel):
    """A failure, its stack trace, and the failure that caused it.

    ``cause`` nests another ``ErrorEnvelope``; the chain ends where the
    underlying exception chain ends.
    """

    model_config = ConfigDict(frozen=True)

    message: str | None = None
    trace: list[str] = []
    cause: ErrorEnvelope | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serializable form with absent ``message``/``cause`` keys omitted."""
        return self.model_dump(exclude_none=True)
