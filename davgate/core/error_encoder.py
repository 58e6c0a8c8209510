"""Encode an exception and its cause chain into an ``ErrorEnvelope``."""

from __future__ import annotations

import traceback

from davgate.models.envelopes import ErrorEnvelope


def format_frame(frame: traceback.FrameSummary) -> str:
    return f"{frame.filename}:{frame.lineno} in {frame.name}"


def underlying_cause(error: BaseException) -> BaseException | None:
    """The explicit ``__cause__``, else the implicit context unless suppressed."""
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def encode_error(
    error: BaseException,
    _seen: frozenset[int] = frozenset(),
) -> ErrorEnvelope:
    """Build an ``ErrorEnvelope`` for *error*, recursing through its causes.

    ``trace`` holds one entry per traceback frame, the raising frame first; it is
    empty for an exception that was never raised.
    """
    seen = _seen | {id(error)}
    cause = underlying_cause(error)
    return ErrorEnvelope(
        message=str(error) or None,
        trace=[
            format_frame(f) for f in reversed(traceback.extract_tb(error.__traceback__))
        ],
        cause=(
            encode_error(cause, seen)
            if cause is not None and id(cause) not in seen
            else None
        ),
    )
