"""
API routes for the OpenCode auth store.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from ..stores.base import BaseStore

router = APIRouter()


# Dependency injection functions
async def get_store(request: Request) -> BaseStore:
    """Get auth store from app state."""
    return request.app.state.store


# Health check endpoint
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "opencode-auth"}


@router.get("/auth")
async def read_auth(store: BaseStore = Depends(get_store)):
    """Return the whole auth store."""
    return await store.read_auth()


@router.put("/auth")
async def write_auth(
    auth: Any = Body(...),
    store: BaseStore = Depends(get_store),
) -> Dict[str, bool]:
    """Replace the whole auth store with the request body."""
    await store.write_auth(auth)
    return {"success": True}


@router.get("/providers")
async def list_providers(store: BaseStore = Depends(get_store)):
    """List provider identifiers with stored credentials."""
    return {"providers": await store.list_providers()}


@router.get("/auth/{provider_id}")
async def get_provider_auth(provider_id: str, store: BaseStore = Depends(get_store)):
    """Return one provider entry."""
    entry = await store.get_provider_auth(provider_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Provider not found: {provider_id}")
    return entry


@router.delete("/auth/{provider_id}")
async def remove_provider_auth(
    provider_id: str,
    store: BaseStore = Depends(get_store),
) -> Dict[str, bool]:
    """Remove one provider entry."""
    removed = await store.remove_provider_auth(provider_id)
    return {"removed": removed}
