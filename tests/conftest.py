"""Shared fixtures: every store lives under a temporary data directory."""

import pytest

from opencode_auth.config import AuthStoreConfig
from opencode_auth.stores.auth_file_store import AuthFileStore


@pytest.fixture
def config(tmp_path):
    return AuthStoreConfig(data_dir=str(tmp_path / "opencode"))


@pytest.fixture
def store(config):
    return AuthFileStore(config)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "opencode"
