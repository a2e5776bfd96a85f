"""
tests/conftest.py -- Shared test fixtures for LocalAuth.

This module provides:
  - store: a fresh file-backed KeyValueStore per test (tmp_path)
  - repository: AuthRepository over that store
  - service: AuthService over that repository
  - run: helper that drives a coroutine to completion with asyncio.run

Design: file-backed SQLite (not sqlite:///:memory:) because the repository
calls the store from asyncio.to_thread worker threads. A plain :memory:
database is per-connection and each worker thread would see a blank schema.

Settings are isolated per test: LOCALAUTH_* variables are cleared and the
get_settings() cache is reset so no developer .env leaks into assertions.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from auth.repository import AuthRepository
from auth.service import AuthService
from core.config import get_settings
from storage.store import KeyValueStore


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path: Path) -> Generator[None, None, None]:
    for name in list(os.environ):
        if name.startswith("LOCALAUTH_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOCALAUTH_DB_URL", f"sqlite:///{tmp_path / 'default.db'}")
    # Keep pydantic-settings from reading a .env in the working directory.
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'auth.db'}"


@pytest.fixture
def store(db_url: str) -> Generator[KeyValueStore, None, None]:
    s = KeyValueStore(db_url)
    yield s
    s.close()


@pytest.fixture
def repository(store: KeyValueStore) -> AuthRepository:
    return AuthRepository(store)


@pytest.fixture
def service(repository: AuthRepository) -> AuthService:
    return AuthService(repository)


@pytest.fixture
def run():
    """Run a coroutine to completion and return its result."""
    return asyncio.run
