"""Shared fixtures for the reflection portal tests.

Provides:
- fake_db: patches supabase_client with an in-memory fake
- client: FastAPI TestClient wired to the app, signed out
- signed_in: the same client after a successful login
- data factories for curriculum items, work items and suggestions
"""

import os
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

import pytest

# Set env vars before any portal imports
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "fake-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")


# ---------------------------------------------------------------------------
# In-memory fake Supabase
# ---------------------------------------------------------------------------

class FakeQueryResult:
    def __init__(self, data=None):
        self.data = data or []


class FakeQueryBuilder:
    """Mimics the part of the supabase-py query builder chain the portal uses."""

    def __init__(self, store, table_name):
        self._store = store
        self._table = table_name
        self._filters = []
        self._limit_val = None
        self._update_data = None
        self._delete_mode = False
        self._insert_data = None

    def select(self, columns="*"):
        return self

    def insert(self, data):
        self._insert_data = data
        return self

    def update(self, data):
        self._update_data = data
        return self

    def delete(self):
        self._delete_mode = True
        return self

    def eq(self, col, val):
        self._filters.append((col, val))
        return self

    def limit(self, n):
        self._limit_val = n
        return self

    def _match(self, row):
        return all(row.get(col) == val for col, val in self._filters)

    def execute(self):
        table = self._store[self._table]

        if self._insert_data is not None:
            row = dict(self._insert_data)
            if "id" not in row:
                row["id"] = str(uuid.uuid4())
            table.append(row)
            return FakeQueryResult(data=[dict(row)])

        if self._update_data is not None:
            updated = []
            for row in table:
                if self._match(row):
                    row.update(self._update_data)
                    updated.append(dict(row))
            return FakeQueryResult(data=updated)

        if self._delete_mode:
            removed = [r for r in table if self._match(r)]
            remaining = [r for r in table if not self._match(r)]
            table.clear()
            table.extend(remaining)
            return FakeQueryResult(data=removed)

        # SELECT: insertion order, like an unordered store
        rows = [dict(r) for r in table if self._match(r)]
        if self._limit_val is not None:
            rows = rows[:self._limit_val]
        return FakeQueryResult(data=rows)


class FakeDB:
    """In-memory store keyed by table name."""

    def __init__(self):
        self.store = defaultdict(list)

    def table(self, name):
        return FakeQueryBuilder(self.store, name)

    def rows(self, name):
        return self.store[name]


@pytest.fixture
def fake_db():
    """Provides a clean in-memory DB and patches supabase_client._table."""
    db = FakeDB()

    def fake_table(name):
        return FakeQueryBuilder(db.store, name)

    with patch("reflection_portal.supabase_client._table", side_effect=fake_table):
        with patch("reflection_portal.supabase_client.get_client", return_value=MagicMock()):
            yield db


@pytest.fixture
def client(fake_db):
    """Sync test client for the FastAPI app with the mocked DB."""
    from fastapi.testclient import TestClient

    from reflection_portal.app import create_app

    @asynccontextmanager
    async def noop_lifespan(app):
        yield

    app = create_app()
    app.router.lifespan_context = noop_lifespan

    with TestClient(app) as c:
        yield c


@pytest.fixture
def signed_in(client):
    """Client signed in as owner 1234."""
    resp = client.post(
        "/login", data={"phone_suffix": "1234", "password": "pw"}, follow_redirects=False,
    )
    assert resp.status_code == 303
    return client


@pytest.fixture
def owner():
    from reflection_portal.owner import OwnerContext
    return OwnerContext(owner_id="1234")


@pytest.fixture
def other_owner():
    from reflection_portal.owner import OwnerContext
    return OwnerContext(owner_id="9876")


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

def make_curriculum_item(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "activity": "Reading week",
        "importance": 3.0,
        "satisfaction": 2.0,
        "proposer": "",
        "grade": "",
        "memo": "",
        "owner_id": "1234",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_work_item(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "month": "March",
        "department": "",
        "title": "Opening ceremony",
        "goal": "",
        "lesson_learned": "",
        "status": "",
        "why": "",
        "plan": "",
        "owner_id": "1234",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_suggestion(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "category": "general",
        "title": "Longer lunch break",
        "goal": "",
        "lesson_learned": "",
        "status": "",
        "why": "",
        "plan": "",
        "owner_id": "1234",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults
