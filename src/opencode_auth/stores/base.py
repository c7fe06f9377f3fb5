"""
Base storage interface for the provider auth store.
"""

import abc
from typing import Any, Dict, List, Optional


class StoreError(Exception):
    """Base exception for store errors."""
    pass


class StoreEnvironmentError(StoreError):
    """The environment cannot host the store (e.g. no home directory)."""
    pass


class StoreParseError(StoreError):
    """Auth file content is not valid JSON."""
    pass


class StoreSchemaError(StoreError):
    """Auth file top-level value is not a JSON object."""
    pass


class StoreValidationError(StoreError):
    """Caller supplied an invalid argument."""
    pass


class StoreIOError(StoreError):
    """Filesystem operation on the auth file failed."""
    pass


class BaseStore(abc.ABC):
    """Base class for auth store implementations."""

    @abc.abstractmethod
    async def read_auth(self) -> Any:
        """
        Read the whole auth store.

        Returns:
            Parsed JSON value; an empty dict when nothing is stored
        """
        pass

    @abc.abstractmethod
    async def write_auth(self, auth: Any) -> None:
        """
        Replace the whole auth store.

        Args:
            auth: JSON-serializable value to persist
        """
        pass

    @abc.abstractmethod
    async def remove_provider_auth(self, provider_id: str) -> bool:
        """
        Remove one provider entry.

        Args:
            provider_id: Provider identifier (e.g., "anthropic")

        Returns:
            True if the entry was removed, False if it was not present
        """
        pass

    async def get_provider_auth(self, provider_id: str) -> Optional[Any]:
        """
        Get one provider entry.

        Returns:
            The stored payload, or None if the provider has no entry
        """
        self._check_provider_id(provider_id)
        auth = self._as_object(await self.read_auth())
        return auth.get(provider_id)

    async def list_providers(self) -> List[str]:
        """List provider identifiers present in the store, sorted."""
        auth = self._as_object(await self.read_auth())
        return sorted(auth.keys())

    def _check_provider_id(self, provider_id: str) -> None:
        if not provider_id:
            raise StoreValidationError("Provider ID is required")

    def _as_object(self, auth: Any) -> Dict[str, Any]:
        if not isinstance(auth, dict):
            raise StoreSchemaError("Auth file is not a valid JSON object")
        return auth
