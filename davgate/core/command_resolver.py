"""CommandResolver — maps an action name to a DAV command and binds the
request parameters to that command's request variant.

Validation is derived from the variant definitions in
``davgate.models.commands``: required fields are mandatory parameters,
field validators decide what counts as malformed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from davgate.core.errors import MalformedParameter, MissingParameter, UnknownCommand
from davgate.models.commands import COMMAND_TYPE_MAP, DavCommand, DavRequest

logger = logging.getLogger(__name__)


class CommandResolver:
    """Resolves action names and validates per-command parameters.

    Usage
    -----
    >>> resolver = CommandResolver()
    >>> command = resolver.resolve("COPY")
    >>> request = resolver.bind(command, {"path": "/a", "destPath": "/b"})
    >>> request.overwrite
    False
    """

    def __init__(
        self,
        command_types: Mapping[DavCommand, type[DavRequest]] | None = None,
    ) -> None:
        self._types = dict(command_types or COMMAND_TYPE_MAP)

    def resolve(self, action_name: str) -> DavCommand:
        """Return the command whose name is exactly *action_name*.

        Raises
        ------
        UnknownCommand
            If *action_name* is not one of the supported verbs.  Matching is
            case-sensitive.
        """
        for command in self._types:
            if command.value == action_name:
                return command
        raise UnknownCommand(action_name)

    def bind(self, command: DavCommand, parameters: Mapping[str, Any]) -> DavRequest:
        """Validate *parameters* for *command* and build its request variant.

        Raises
        ------
        MissingParameter
            For the first absent mandatory parameter, in declaration order.
        MalformedParameter
            If a supplied parameter fails to parse.
        """
        request_type = self._types[command]
        for name in request_type.mandatory_parameters():
            if parameters.get(name) is None:
                raise MissingParameter(command.value, name)

        supplied = {key: value for key, value in parameters.items() if value is not None}
        try:
            request = request_type.model_validate(supplied)
        except ValidationError as exc:
            first = exc.errors()[0]
            parameter = str(first["loc"][0]) if first["loc"] else "?"
            raise MalformedParameter(
                command.value, parameter, first.get("input")
            ) from exc

        logger.debug("Bound %s request: %s", command.value, _safe_repr(request))
        return request

    def describe(self) -> dict[DavCommand, dict[str, Any]]:
        """Parameter contract of every command, for listings and help text."""
        return {
            command: {
                "mandatory": request_type.mandatory_parameters(),
                "optional": request_type.optional_parameters(),
                "mutating": request_type.mutating,
            }
            for command, request_type in self._types.items()
        }


def _safe_repr(request: DavRequest) -> str:
    # Request bodies can be large; log only their size.
    fields = request.model_dump(by_alias=True)
    if "data" in fields:
        fields["data"] = f"<{len(fields['data'])} chars>"
    return repr(fields)
