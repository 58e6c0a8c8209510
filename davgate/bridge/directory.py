"""Account directory protocol and a static, file-backed implementation.

The dispatcher reads two things per request from the directory: the
account's remote DAV target and its proxy allow-list.  Both come from the
host's account store; ``StaticAccountDirectory`` stands in for it with a
JSON file shaped like the host attributes::

    {
      "acc-1": {
        "name": "alice@example.com",
        "zimlet_user_properties": [
          "tk_barrydegraaff_owncloud_zimlet:owncloud_zimlet_server_name:https://dav.example.com",
          "tk_barrydegraaff_owncloud_zimlet:owncloud_zimlet_server_port:443",
          ...
        ],
        "proxy_allowed_domains": ["*example.com"]
      }
    }

Zimlet user properties are ``<zimlet>:<key>:<value>`` strings; only those
of the configured zimlet are read.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from davgate.config import DEFAULT_ZIMLET_NAME
from davgate.models.target import AccountContext, AllowedDomainSet, RemoteTarget

logger = logging.getLogger(__name__)

# Zimlet user property keys holding the DAV connection settings.
DAV_SERVER_NAME = "owncloud_zimlet_server_name"
DAV_SERVER_PORT = "owncloud_zimlet_server_port"
DAV_SERVER_PATH = "owncloud_zimlet_server_path"
DAV_USER_USERNAME = "owncloud_zimlet_username"
DAV_USER_PASSWORD = "owncloud_zimlet_password"


@runtime_checkable
class AccountDirectory(Protocol):
    """Protocol for per-account DAV configuration lookups."""

    def get_remote_target(self, account: AccountContext) -> RemoteTarget:
        """Return the account's DAV target; unset fields are ``None``."""
        ...

    def get_allowed_domains(self, account: AccountContext) -> AllowedDomainSet:
        """Return the domain patterns the account may proxy to."""
        ...


def extract_zimlet_properties(values: Iterable[str], zimlet_name: str) -> dict[str, str]:
    """Pick ``key -> value`` pairs belonging to *zimlet_name*.

    The value part may itself contain colons (URLs do).  Malformed entries
    are skipped.
    """
    properties: dict[str, str] = {}
    for raw in values:
        parts = raw.split(":", 2)
        if len(parts) != 3 or parts[0] != zimlet_name:
            continue
        properties[parts[1]] = parts[2]
    return properties


class AccountRecord(BaseModel):
    """One account as stored in the accounts file."""

    model_config = ConfigDict(frozen=True)

    name: str
    zimlet_user_properties: list[str] = []
    proxy_allowed_domains: list[str] | str = []


class StaticAccountDirectory:
    """Read-only directory over a fixed set of account records.

    Parameters
    ----------
    records:
        Account records keyed by account id.
    zimlet_name:
        Only zimlet user properties of this zimlet are read.
    """

    def __init__(
        self,
        records: Mapping[str, AccountRecord],
        zimlet_name: str = DEFAULT_ZIMLET_NAME,
    ) -> None:
        self._records = dict(records)
        self._zimlet_name = zimlet_name

    @classmethod
    def from_file(cls, path: Path, zimlet_name: str = DEFAULT_ZIMLET_NAME) -> StaticAccountDirectory:
        """Load account records from a JSON file."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        records = {
            account_id: AccountRecord.model_validate(data)
            for account_id, data in raw.items()
        }
        logger.info("Loaded %d account(s) from %s.", len(records), path)
        return cls(records, zimlet_name=zimlet_name)

    # -- Lookups ------------------------------------------------------------

    def record(self, account_id: str) -> AccountRecord:
        """Return the record for *account_id*.

        Raises
        ------
        KeyError
            If the account is unknown.
        """
        try:
            return self._records[account_id]
        except KeyError:
            raise KeyError(f"no such account: '{account_id}'") from None

    def account_context(self, account_id: str) -> AccountContext:
        """Build the ``AccountContext`` for a known account id."""
        return AccountContext(account_id=account_id, name=self.record(account_id).name)

    def get_remote_target(self, account: AccountContext) -> RemoteTarget:
        properties = extract_zimlet_properties(
            self.record(account.account_id).zimlet_user_properties, self._zimlet_name
        )
        return RemoteTarget(
            server_address=properties.get(DAV_SERVER_NAME),
            port=properties.get(DAV_SERVER_PORT),
            base_path=properties.get(DAV_SERVER_PATH),
            username=properties.get(DAV_USER_USERNAME),
            password=properties.get(DAV_USER_PASSWORD),
        )

    def get_allowed_domains(self, account: AccountContext) -> AllowedDomainSet:
        return AllowedDomainSet.from_property(
            self.record(account.account_id).proxy_allowed_domains
        )
