"""
OpenCode auth store.
Manages the per-user auth.json credential file shared with OpenCode.
"""

from .config import AuthStoreConfig, load_config, get_config
from .stores import (
    AuthFileStore,
    StoreError,
    read_auth,
    remove_provider_auth,
    write_auth,
)

__version__ = "1.0.0"

__all__ = [
    "AuthStoreConfig",
    "AuthFileStore",
    "StoreError",
    "load_config",
    "get_config",
    "read_auth",
    "remove_provider_auth",
    "write_auth",
]
