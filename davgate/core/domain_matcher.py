"""Allow-list gate — decides whether an account may proxy to a remote host.

Patterns are matched as plain string suffixes of the lowercased host.
The match is not dot-boundary aware: ``*example.com`` also admits
``evilexample.com``.  Existing allow-lists rely on this behaviour, so it
is kept as is.
"""

from __future__ import annotations

from collections.abc import Iterable

from davgate.models.target import AllowedDomainSet

WILDCARD = "*"


def is_allowed(target_host: str, allow_list: AllowedDomainSet | Iterable[str]) -> bool:
    """Return ``True`` if *target_host* matches any pattern in *allow_list*.

    Parameters
    ----------
    target_host:
        Host name of the remote DAV server.  Compared in lowercase.
    allow_list:
        The account's allowed domain patterns, checked in stored order.
        The first match wins.  A bare string is rejected rather than
        iterated character by character.

    Raises
    ------
    TypeError
        If *allow_list* is a ``str``.
    """
    if isinstance(allow_list, str):
        raise TypeError("allow_list must be a collection of patterns, not a str")
    host = target_host.lower()
    patterns = allow_list.patterns if isinstance(allow_list, AllowedDomainSet) else allow_list
    for pattern in patterns:
        if pattern == WILDCARD:
            return True
        suffix = pattern[1:] if pattern.startswith(WILDCARD) else pattern
        if suffix and host.endswith(suffix):
            return True
    return False

