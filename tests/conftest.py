"""Test bootstrap.

Puts the project root on the path and provides app/store fixtures backed by
an in-memory database or an in-memory key-value storage.
"""

from __future__ import annotations

import itertools
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def storage():
    from patterns.storage_port import InMemoryStorage

    return InMemoryStorage()


@pytest.fixture
def ticking_clock():
    """Clock returning strictly increasing ISO timestamps, one second apart."""
    counter = itertools.count()

    def _clock():
        n = next(counter)
        return f"2026-10-19T12:{n // 60:02d}:{n % 60:02d}.000Z"

    return _clock


@pytest.fixture
def store(storage, ticking_clock):
    from models.vault_store import VaultStore

    return VaultStore(storage, namespace="test-vault", clock=ticking_clock)


@pytest.fixture
def app():
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "VAULT_NAMESPACE": "test-vault",
        "VAULT_LOG_LEVEL": "WARNING",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
