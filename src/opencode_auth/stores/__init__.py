"""
Storage module for the OpenCode auth store.
Provides read, write and per-provider removal over the auth file.
"""

from .base import (
    BaseStore,
    StoreError,
    StoreEnvironmentError,
    StoreIOError,
    StoreParseError,
    StoreSchemaError,
    StoreValidationError,
)
from .auth_file_store import (
    AuthFileStore,
    AuthPaths,
    read_auth,
    remove_provider_auth,
    resolve_paths,
    write_auth,
)

__all__ = [
    "BaseStore",
    "StoreError",
    "StoreEnvironmentError",
    "StoreIOError",
    "StoreParseError",
    "StoreSchemaError",
    "StoreValidationError",
    "AuthFileStore",
    "AuthPaths",
    "read_auth",
    "remove_provider_auth",
    "resolve_paths",
    "write_auth",
]
