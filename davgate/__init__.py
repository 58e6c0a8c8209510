"""davgate: WebDAV gateway for mail-server zimlet actions.

Exposes a WebDAV client as request/response operations behind the host
mail server's extension action protocol:
  - Per-verb command contracts (GET, PUT, PROPFIND, DELETE, MKCOL, COPY, MOVE)
  - Per-account proxy allow-list on the remote DAV host
  - Recursive error envelopes carrying the full cause chain
"""

__version__ = "0.1.0"
__description__ = "WebDAV gateway for mail-server zimlet actions"

from davgate.core.dispatcher import RequestDispatcher
from davgate.cli.app import app as cli

__all__ = ["RequestDispatcher", "cli", "__version__"]
