"""DAV connector protocol and an in-memory backend.

The gateway consumes the WebDAV client as an opaque capability with one
method per verb.  Any object satisfying ``DavConnector`` can be plugged
in through the dispatcher's ``connector_factory``.  A connector signals
remote failures by raising ``OSError`` (normally ``ConnectorIOFailure``).

``InMemoryDavConnector`` keeps a DAV tree in a dict.  It backs the CLI's
dry-run mode and the test suite; it is not a network client.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from typing import Any, Protocol, runtime_checkable
from xml.sax.saxutils import escape

from davgate.core.errors import ConnectorIOFailure
from davgate.models.target import RemoteTarget

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class DavConnector(Protocol):
    """Protocol for WebDAV client backends.

    Every method either returns normally or raises ``OSError``.
    """

    def get(self, path: str) -> Any:
        """Return the body of the resource at *path*."""
        ...

    def put(self, path: str, data: bytes, content_type: str) -> Any:
        """Store *data* at *path*."""
        ...

    def propfind(self, path: str, depth: int) -> Any:
        """Return the property listing document for *path*."""
        ...

    def delete(self, path: str) -> Any:
        ...

    def mkcol(self, path: str) -> Any:
        ...

    def copy(self, source: str, destination: str, overwrite: bool) -> Any:
        ...

    def move(self, source: str, destination: str, overwrite: bool) -> Any:
        ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


def normalize_path(path: str) -> str:
    """Absolute, slash-collapsed path without a trailing slash (except root)."""
    return posixpath.normpath("/" + path.strip("/"))


class InMemoryDavConnector:
    """Dict-backed DAV tree.

    Parameters
    ----------
    target:
        The remote target this connector is bound to.  Kept for
        introspection only; nothing is contacted.
    """

    def __init__(self, target: RemoteTarget | None = None) -> None:
        self.target = target
        self._lock = threading.Lock()
        self._collections: set[str] = {"/"}
        self._resources: dict[str, tuple[bytes, str]] = {}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        key = normalize_path(path)
        return key in self._collections or key in self._resources

    def is_collection(self, path: str) -> bool:
        return normalize_path(path) in self._collections

    def content_type(self, path: str) -> str:
        """Content type a resource was stored with."""
        return self._require_resource(normalize_path(path))[1]

    def _require_resource(self, key: str) -> tuple[bytes, str]:
        try:
            return self._resources[key]
        except KeyError:
            if key in self._collections:
                raise ConnectorIOFailure(f"405 Method Not Allowed: '{key}' is a collection") from None
            raise ConnectorIOFailure(f"404 Not Found: '{key}'") from None

    def _require_parent(self, key: str) -> None:
        parent = posixpath.dirname(key)
        if parent not in self._collections:
            raise ConnectorIOFailure(f"409 Conflict: parent collection '{parent}' does not exist")

    def _subtree(self, key: str) -> tuple[list[str], list[str]]:
        prefix = key.rstrip("/") + "/"
        collections = [c for c in self._collections if c == key or c.startswith(prefix)]
        resources = [r for r in self._resources if r == key or r.startswith(prefix)]
        return collections, resources

    def _remove(self, key: str) -> None:
        collections, resources = self._subtree(key)
        for name in collections:
            self._collections.discard(name)
        for name in resources:
            del self._resources[name]

    def _transfer(self, source: str, destination: str, overwrite: bool, *, keep_source: bool) -> bool:
        src = normalize_path(source)
        dst = normalize_path(destination)
        with self._lock:
            if src not in self._collections and src not in self._resources:
                raise ConnectorIOFailure(f"404 Not Found: '{src}'")
            if dst == "/" or src == dst or dst.startswith(src.rstrip("/") + "/"):
                raise ConnectorIOFailure(f"403 Forbidden: cannot transfer '{src}' onto '{dst}'")
            self._require_parent(dst)
            if dst in self._collections or dst in self._resources:
                if not overwrite:
                    raise ConnectorIOFailure(f"412 Precondition Failed: '{dst}' exists")
                self._remove(dst)

            collections, resources = self._subtree(src)
            for name in collections:
                self._collections.add(dst + name[len(src):])
            for name in resources:
                self._resources[dst + name[len(src):]] = self._resources[name]
            if not keep_source:
                self._remove(src)
        logger.debug("%s %s -> %s", "COPY" if keep_source else "MOVE", src, dst)
        return True

    # ------------------------------------------------------------------
    # DAV verbs
    # ------------------------------------------------------------------

    def get(self, path: str) -> bytes:
        with self._lock:
            return self._require_resource(normalize_path(path))[0]

    def put(self, path: str, data: bytes, content_type: str) -> bool:
        key = normalize_path(path)
        with self._lock:
            if key in self._collections:
                raise ConnectorIOFailure(f"405 Method Not Allowed: '{key}' is a collection")
            self._require_parent(key)
            self._resources[key] = (bytes(data), content_type)
        return True

    def propfind(self, path: str, depth: int) -> str:
        """Minimal ``multistatus`` document listing *path* to *depth* levels."""
        key = normalize_path(path)
        with self._lock:
            if key not in self._collections and key not in self._resources:
                raise ConnectorIOFailure(f"404 Not Found: '{key}'")
            collections, resources = self._subtree(key)
            base_level = 0 if key == "/" else key.count("/")
            entries = sorted(
                [(name, True) for name in collections]
                + [(name, False) for name in resources]
            )
            responses = []
            for name, is_collection in entries:
                level = (0 if name == "/" else name.count("/")) - base_level
                if level > depth:
                    continue
                resourcetype = "<D:collection/>" if is_collection else ""
                length = "" if is_collection else (
                    f"<D:getcontentlength>{len(self._resources[name][0])}</D:getcontentlength>"
                )
                responses.append(
                    f"<D:response><D:href>{escape(name)}</D:href>"
                    f"<D:propstat><D:prop><D:resourcetype>{resourcetype}</D:resourcetype>"
                    f"{length}</D:prop>"
                    "<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>"
                )
        return (
            '<?xml version="1.0" encoding="utf-8"?>'
            '<D:multistatus xmlns:D="DAV:">' + "".join(responses) + "</D:multistatus>"
        )

    def delete(self, path: str) -> bool:
        key = normalize_path(path)
        with self._lock:
            if key == "/":
                raise ConnectorIOFailure("403 Forbidden: cannot delete the root collection")
            if key not in self._collections and key not in self._resources:
                raise ConnectorIOFailure(f"404 Not Found: '{key}'")
            self._remove(key)
        return True

    def mkcol(self, path: str) -> bool:
        key = normalize_path(path)
        with self._lock:
            if key in self._collections or key in self._resources:
                raise ConnectorIOFailure(f"405 Method Not Allowed: '{key}' already exists")
            self._require_parent(key)
            self._collections.add(key)
        return True

    def copy(self, source: str, destination: str, overwrite: bool) -> bool:
        return self._transfer(source, destination, overwrite, keep_source=True)

    def move(self, source: str, destination: str, overwrite: bool) -> bool:
        return self._transfer(source, destination, overwrite, keep_source=False)
