"""Gateway configuration — env-driven via pydantic-settings.

Reads from a .env file and DAVGATE_* environment variables.  Only the CLI
consumes the module-level ``settings`` instance; the dispatcher is always
handed its collaborators explicitly.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ZIMLET_NAME = "tk_barrydegraaff_owncloud_zimlet"


class GatewaySettings(BaseSettings):
    """Gateway configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DAVGATE_LOG_LEVEL=DEBUG
        export DAVGATE_ACCOUNTS_PATH=/etc/davgate/accounts.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DAVGATE_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Account directory
    zimlet_name: str = DEFAULT_ZIMLET_NAME
    accounts_path: Path = Path("accounts.json")


settings = GatewaySettings()
