"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration for local development.  In
a production deployment override these via environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Skill Events API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    # Separate audit log of wallet changes; disabled when empty.
    ledger_log_file: str = os.getenv("LEDGER_LOG_FILE", "")

    # Static bearer token for administrative routes (event CRUD, credit
    # grants, participant lists).  When empty, admin routes are open,
    # which is only suitable for local development.
    admin_token: str = os.getenv("ADMIN_TOKEN", "")

    # Capacity assigned to events created without an explicit value.
    default_capacity: int = int(os.getenv("DEFAULT_CAPACITY", "100"))

    # Credit history paging: default page size and hard upper bound.
    history_default_limit: int = int(os.getenv("HISTORY_DEFAULT_LIMIT", "100"))
    history_max_limit: int = int(os.getenv("HISTORY_MAX_LIMIT", "200"))

    # Maximum time a request waits for a wallet or event lock before
    # giving up with 503.
    lock_timeout_seconds: float = float(os.getenv("LOCK_TIMEOUT_SECONDS", "5.0"))

    # Player type used when a joining user has no profile tag.
    default_player_tag: str = os.getenv("DEFAULT_PLAYER_TAG", "adult")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
