"""
File-based auth store implementation.
Keeps every provider credential in one JSON object on disk, with a single
backup copy refreshed before each overwrite.
"""

import json
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import aiofiles
import aiofiles.os
import structlog

from .base import (
    BaseStore,
    StoreEnvironmentError,
    StoreIOError,
    StoreParseError,
    StoreValidationError,
)
from ..config import AuthStoreConfig, get_config

logger = structlog.get_logger(__name__)

DEFAULT_DATA_SUBPATH = Path(".local") / "share" / "opencode"


@dataclass(frozen=True)
class AuthPaths:
    """Resolved locations of the auth file and its backup."""
    data_dir: Path
    auth_file: Path
    backup_file: Path


def _home_dir() -> Path:
    home = os.path.expanduser("~")
    if not home or home == "~":
        raise StoreEnvironmentError("Cannot determine home directory")
    return Path(home)


def resolve_paths(config: AuthStoreConfig) -> AuthPaths:
    """
    Compute the auth file locations for a configuration.

    No filesystem access happens here. Without an explicit ``data_dir`` the
    per-user default under the home directory is used.

    Raises:
        StoreEnvironmentError: If the home directory cannot be determined
    """
    if config.data_dir:
        data_dir = Path(config.data_dir)
    else:
        data_dir = _home_dir() / DEFAULT_DATA_SUBPATH

    auth_file = data_dir / config.auth_file_name
    backup_file = auth_file.with_name(f"{auth_file.name}{config.backup_suffix}")
    return AuthPaths(data_dir=data_dir, auth_file=auth_file, backup_file=backup_file)


class AuthFileStore(BaseStore):
    """Auth store backed by a single JSON file."""

    def __init__(self, config: AuthStoreConfig):
        """
        Initialize file store.

        Args:
            config: Application configuration

        Raises:
            StoreEnvironmentError: If the data directory cannot be located
        """
        self.config = config
        self.paths = resolve_paths(config)
        self.indent = config.json_indent

    @property
    def auth_file(self) -> Path:
        return self.paths.auth_file

    @property
    def backup_file(self) -> Path:
        return self.paths.backup_file

    async def read_auth(self) -> Any:
        """
        Read auth file.

        Returns:
            Parsed JSON value, or an empty dict if the file is missing or blank

        Raises:
            StoreParseError: If the file content is not valid JSON
            StoreIOError: If the file exists but cannot be read
        """
        if not await aiofiles.os.path.exists(self.auth_file):
            logger.debug("Auth file not found, using empty store", path=str(self.auth_file))
            return {}

        try:
            async with aiofiles.open(self.auth_file, "r", encoding="utf-8") as f:
                content = await f.read()
        except UnicodeDecodeError as e:
            raise StoreParseError(f"Failed to parse auth file: {e}") from e
        except OSError as e:
            raise StoreIOError(f"Failed to read auth file {self.auth_file}: {e}") from e

        content = content.strip()
        if not content:
            return {}

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise StoreParseError(f"Failed to parse auth file: {e}") from e

    async def write_auth(self, auth: Any) -> None:
        """
        Write auth file, backing up the previous version first.

        Args:
            auth: JSON value to persist

        Raises:
            StoreValidationError: If the value cannot be serialized to JSON
            StoreIOError: If creating the directory, the backup or the file fails
        """
        try:
            content = json.dumps(auth, indent=self.indent, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise StoreValidationError(f"Auth value is not JSON serializable: {e}") from e

        try:
            await aiofiles.os.makedirs(self.paths.data_dir, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Failed to create data directory {self.paths.data_dir}: {e}") from e

        if await aiofiles.os.path.exists(self.auth_file):
            await self._backup()

        try:
            async with aiofiles.open(self.auth_file, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise StoreIOError(f"Failed to write auth file {self.auth_file}: {e}") from e

        logger.info("Successfully wrote auth file", path=str(self.auth_file))

    async def remove_provider_auth(self, provider_id: str) -> bool:
        """
        Remove provider auth entry from the auth file.

        Nothing is written when the provider has no entry.

        Args:
            provider_id: Provider identifier

        Returns:
            True if the entry was removed, False if not found

        Raises:
            StoreValidationError: If provider_id is empty
            StoreSchemaError: If the stored value is not a JSON object
        """
        self._check_provider_id(provider_id)

        auth = self._as_object(await self.read_auth())

        if provider_id not in auth:
            logger.info("Provider not found in auth file, nothing to remove", provider_id=provider_id)
            return False

        del auth[provider_id]
        await self.write_auth(auth)
        logger.info("Removed provider auth", provider_id=provider_id)
        return True

    async def _backup(self) -> None:
        """Copy the current auth file byte for byte, with its permission bits, to the backup path."""
        try:
            async with aiofiles.open(self.auth_file, "rb") as src_file:
                content = await src_file.read()
            async with aiofiles.open(self.backup_file, "wb") as dst_file:
                await dst_file.write(content)
            await aiofiles.os.wrap(shutil.copymode)(self.auth_file, self.backup_file)
        except OSError as e:
            raise StoreIOError(f"Failed to create auth backup {self.backup_file}: {e}") from e

        logger.info("Created auth backup", path=str(self.backup_file))


def _default_store(config: Optional[AuthStoreConfig] = None) -> AuthFileStore:
    return AuthFileStore(config or get_config())


async def read_auth(config: Optional[AuthStoreConfig] = None) -> Any:
    """Read the auth store using the global configuration."""
    return await _default_store(config).read_auth()


async def write_auth(auth: Any, config: Optional[AuthStoreConfig] = None) -> None:
    """Write the auth store using the global configuration."""
    await _default_store(config).write_auth(auth)


async def remove_provider_auth(provider_id: str, config: Optional[AuthStoreConfig] = None) -> bool:
    """Remove a provider entry using the global configuration."""
    return await _default_store(config).remove_provider_auth(provider_id)
