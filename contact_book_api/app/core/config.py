"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so that the service can
start with an empty environment (a local SQLite file and a development
secret).  In a production deployment you should override at least
``SECRET_KEY`` and ``DATABASE_URL``.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Contact Book API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to console output.
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Comma‑separated ``token:principal`` pairs for service accounts.  A
    # client presenting one of these tokens is identified as the paired
    # principal without JWT decoding.  Example:
    # STATIC_TOKENS="s3cr3t:importer,0th3r:backup".
    static_tokens: str = os.getenv("STATIC_TOKENS", "")

    # Path of the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "contact_book.db")

    # Policy for listing all contacts: ``all`` returns every record,
    # ``owner`` only the records owned by the caller.
    contact_list_scope: str = os.getenv("CONTACT_LIST_SCOPE", "all")

    # When enabled, single-field updates reject empty values and
    # non-owner callers, like full updates do.
    strict_field_updates: bool = _env_flag("STRICT_FIELD_UPDATES")

    # Size limits of the record store, in bytes.  Values are measured on
    # the compact JSON encoding of a contact.
    max_key_size: int = int(os.getenv("MAX_KEY_SIZE", "44"))
    max_value_size: int = int(os.getenv("MAX_VALUE_SIZE", "1024"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
