# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

The `store` fixture seeds one construction site:

    object 10 (owner: actor 1, OWNER)
      ├── assigned: actor 2 as DESIGNER, actor 3 as BUILDER
      ├── project 100 → stage 200
      ├── photo 300 (visible), 301 (hidden), 302 (no flag)
      │     └── comment 400 (author 2)
      ├── bim_model 500 (uploader 2) → model_comment 600 (author 3)
      ├── document 700 (via project 100 only)
      └── folder 800
    object 20 (owner: actor 6, OWNER)
      └── document 701 (object_id 20, project_id 100)

Actor 4 is ADMIN; actor 5 is an unassigned BUILDER; actor 7 is an
unassigned DESIGNER.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from core.authorization import AccessPolicy
from core.registry import AssignmentRegistry
from dependencies.access import get_store
from dependencies.auth import get_current_actor
from main import create_app
from models.enums import ScopedRole
from tests.fakes import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()

    s.add_actor(1, "OWNER")
    s.add_actor(2, "DESIGNER")
    s.add_actor(3, "BUILDER")
    s.add_actor(4, "ADMIN")
    s.add_actor(5, "BUILDER")
    s.add_actor(6, "CUSTOMER")
    s.add_actor(7, "DESIGNER")

    s.add_object(10, owner_actor_id=1)
    s.add_object(20, owner_actor_id=6)
    s.upsert_assignment(2, 10, ScopedRole.designer)
    s.upsert_assignment(3, 10, ScopedRole.builder)

    s.add("projects", id=100, object_id=10, title="Renovation")
    s.add("project_stages", id=200, project_id=100, title="Foundations", status="PLANNED")

    s.add("photos", id=300, object_id=10, uploaded_by=3, visible_to_owner=True)
    s.add("photos", id=301, object_id=10, uploaded_by=3, visible_to_owner=False)
    s.add("photos", id=302, object_id=10, uploaded_by=3)
    s.add("photo_comments", id=400, photo_id=300, author_id=2, content="Crack here", visible_to_owner=True)

    s.add("bim_models", id=500, object_id=10, uploaded_by=2, visible_to_owner=True)
    s.add("model_comments", id=600, model_id=500, author_id=3, content="Check beam", visible_to_owner=False)

    s.add("documents", id=700, object_id=None, project_id=100, uploaded_by=2, visible_to_owner=True)
    s.add("documents", id=701, object_id=20, project_id=100, uploaded_by=6, visible_to_owner=True)

    s.add("photo_folders", id=800, object_id=10, name="Week 1")
    return s


@pytest.fixture
def actors(store):
    """Actors by nickname."""
    return {
        "owner": store.actors[1],
        "designer": store.actors[2],
        "builder": store.actors[3],
        "admin": store.actors[4],
        "stranger_builder": store.actors[5],
        "other_owner": store.actors[6],
        "stranger_designer": store.actors[7],
    }


@pytest.fixture
def policy(store) -> AccessPolicy:
    return AccessPolicy(store)


@pytest.fixture
def registry(store) -> AssignmentRegistry:
    return AssignmentRegistry(store)


@pytest.fixture(scope="function")
def app(store):
    """Test FastAPI application wired to the in-memory store."""
    application = create_app()
    application.dependency_overrides[get_store] = lambda: store
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(app):
    """Pretend auth already succeeded as the given actor."""
    def _login(actor):
        app.dependency_overrides[get_current_actor] = lambda: actor
    return _login


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client whose query chains return themselves."""
    mock_client = Mock()
    mock_query = Mock()
    for method in ("select", "eq", "limit", "order", "insert", "update", "delete", "upsert"):
        getattr(mock_query, method).return_value = mock_query
    mock_query.execute.return_value = Mock(data=[])
    mock_client.table.return_value = mock_query
    return mock_client
