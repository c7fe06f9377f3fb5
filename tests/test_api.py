"""Tests for the HTTP surface over the auth store."""

import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from opencode_auth.main import create_app


OPENAI = {"type": "api", "key": "sk-test"}
ANTHROPIC = {"type": "oauth", "access": "tok_a", "refresh": "ref_a", "expires": 1700000000}


@pytest.fixture
def app(config):
    return create_app(config)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "service": "opencode-auth"}


@pytest.mark.asyncio
async def test_read_empty_store(client):
    resp = await client.get("/auth")
    assert resp.status_code == 200
    assert resp.json() == {}


@pytest.mark.asyncio
async def test_write_then_read(client, store):
    data = {"openai": OPENAI, "anthropic": ANTHROPIC}
    resp = await client.put("/auth", json=data)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    resp = await client.get("/auth")
    assert resp.json() == data
    assert json.loads(store.auth_file.read_text(encoding="utf-8")) == data


@pytest.mark.asyncio
async def test_list_and_get_providers(client):
    await client.put("/auth", json={"openai": OPENAI, "anthropic": ANTHROPIC})

    resp = await client.get("/providers")
    assert resp.json() == {"providers": ["anthropic", "openai"]}

    resp = await client.get("/auth/openai")
    assert resp.status_code == 200
    assert resp.json() == OPENAI

    resp = await client.get("/auth/google")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_provider_named_providers_is_reachable(client):
    await client.put("/auth", json={"providers": OPENAI})

    resp = await client.get("/auth/providers")
    assert resp.status_code == 200
    assert resp.json() == OPENAI

    resp = await client.delete("/auth/providers")
    assert resp.json() == {"removed": True}


@pytest.mark.asyncio
async def test_remove_provider(client):
    await client.put("/auth", json={"x": ANTHROPIC, "y": OPENAI})

    resp = await client.delete("/auth/x")
    assert resp.status_code == 200
    assert resp.json() == {"removed": True}

    resp = await client.delete("/auth/x")
    assert resp.json() == {"removed": False}

    resp = await client.get("/auth")
    assert resp.json() == {"y": OPENAI}


@pytest.mark.asyncio
async def test_parse_error_maps_to_422(client, store):
    store.paths.data_dir.mkdir(parents=True)
    store.auth_file.write_text("{bad json", encoding="utf-8")

    resp = await client.get("/auth")
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["type"] == "parse_error"
    assert "Failed to parse auth file" in error["message"]


@pytest.mark.asyncio
async def test_schema_error_maps_to_422(client):
    await client.put("/auth", json=[1, 2])

    resp = await client.delete("/auth/x")
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "schema_error"


@pytest.mark.asyncio
async def test_io_error_maps_to_500(client, store):
    store.auth_file.mkdir(parents=True)

    resp = await client.get("/auth")
    assert resp.status_code == 500
    assert resp.json()["error"]["type"] == "store_error"


def test_configure_logging_sets_level_and_handler():
    import logging

    import structlog

    from opencode_auth.main import configure_logging

    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    try:
        configure_logging(debug=True)
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

        configure_logging(debug=False)
        assert root_logger.level == logging.INFO
    finally:
        root_logger.handlers = saved_handlers
        root_logger.setLevel(saved_level)
        structlog.reset_defaults()
