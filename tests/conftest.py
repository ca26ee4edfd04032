"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for the reference backend
- TestClient setup for the HTTP surface
- Fixtures for identities, organizations and memberships
- Controllable fakes for ordering tests of the session core and views
"""

import asyncio
import os
import uuid
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing application modules
os.environ["CONTACERTA_ENVIRONMENT"] = "testing"
os.environ["CONTACERTA_JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ["CONTACERTA_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CONTACERTA_SEARCH_DEBOUNCE_MS"] = "10"

from contacerta.api.main import create_app
from contacerta.backend.base import Backend, Query, Row
from contacerta.backend.sql import SqlBackend
from contacerta.core.config import Settings, reset_settings
from contacerta.core.result import ServiceResult
from contacerta.core.security import create_access_token
from contacerta.db.base import Base
from contacerta.db.session import build_session_factory, enable_sqlite_foreign_keys
from contacerta.models import Membership, Organization, Role
from contacerta.schemas.identity import Identity
from contacerta.services import ServiceRegistry
from contacerta.session.identity import SessionStore


# =====================================
# Database Configuration
# =====================================

# StaticPool keeps the same in-memory connection across sessions and threads
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)

TestingSessionLocal = build_session_factory(engine)


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Re-read settings from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(search_debounce_ms=10, revalidate_active_org=True)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.

    Yields:
        SQLAlchemy Session object
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session: Session):
    return TestingSessionLocal


# =====================================
# Identity Fixtures
# =====================================

@pytest.fixture
def identity() -> Identity:
    return Identity(id=uuid.uuid4(), email="tesouraria@igrejacentral.org")


@pytest.fixture
def other_identity() -> Identity:
    return Identity(id=uuid.uuid4(), email="secretaria@igrejanova.org")


@pytest.fixture
def auth_headers(identity: Identity) -> Dict[str, str]:
    token = create_access_token(identity.id, identity.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_identity: Identity) -> Dict[str, str]:
    token = create_access_token(other_identity.id, other_identity.email)
    return {"Authorization": f"Bearer {token}"}


# =====================================
# Organization Fixtures
# =====================================

def _create_organization(db_session: Session, name: str) -> Organization:
    org = Organization(id=uuid.uuid4(), name=name)
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def sample_organization(db_session: Session) -> Organization:
    return _create_organization(db_session, "Igreja Central")


@pytest.fixture
def second_organization(db_session: Session) -> Organization:
    return _create_organization(db_session, "Igreja Nova Vida")


@pytest.fixture
def add_membership(db_session: Session) -> Callable[..., Membership]:
    """Factory fixture: add_membership(organization, identity, role)."""

    def _add(organization: Organization, identity: Identity, role: Role = Role.OWNER) -> Membership:
        membership = Membership(
            organization_id=organization.id,
            identity_id=identity.id,
            role=role,
        )
        db_session.add(membership)
        db_session.commit()
        return membership

    return _add


@pytest.fixture
def owner_membership(add_membership, sample_organization: Organization, identity: Identity) -> Membership:
    return add_membership(sample_organization, identity, Role.OWNER)


# =====================================
# Backend Fixtures
# =====================================

@pytest.fixture
def backend(session_factory, identity: Identity) -> SqlBackend:
    """Reference backend acting for ``identity``."""
    return SqlBackend(session_factory, lambda: identity)


@pytest.fixture
def other_backend(session_factory, other_identity: Identity) -> SqlBackend:
    return SqlBackend(session_factory, lambda: other_identity)


@pytest.fixture
def services(backend: SqlBackend) -> ServiceRegistry:
    """Services acting for ``identity``."""
    return ServiceRegistry(backend)


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def session_backend(session_factory, session_store: SessionStore) -> SqlBackend:
    """Reference backend following whoever is signed in to ``session_store``."""
    return SqlBackend(session_factory, lambda: session_store.identity)


# =====================================
# HTTP Fixtures
# =====================================

@pytest.fixture(scope="function")
def client(session_factory) -> Generator[TestClient, None, None]:
    """
    Create a TestClient serving the test database.

    Yields:
        TestClient instance
    """
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


# =====================================
# Controllable Fakes
# =====================================

class GatedMembershipsBackend(Backend):
    """
    Backend whose list_memberships() waits until released.

    Only the directory call is implemented; it counts calls and returns
    ``rows`` (or raises ``error``) once ``release()`` is called.
    """

    def __init__(self, rows: Optional[List[Row]] = None):
        self.rows = rows or []
        self.error: Optional[Exception] = None
        self.calls = 0
        self.gate = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def list_memberships(self) -> List[Row]:
        self.calls += 1
        await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.rows)

    async def select(self, query: Query) -> List[Row]:
        return []

    async def get(self, table, record_id, organization_id=None):
        return None

    async def insert(self, table, values):
        raise NotImplementedError

    async def insert_many(self, table, rows):
        raise NotImplementedError

    async def update(self, table, record_id, organization_id, values):
        raise NotImplementedError

    async def delete(self, table, organization_id, filters):
        return 0

    async def rpc(self, name, params):
        raise NotImplementedError


def membership_row(organization_id: uuid.UUID, name: str, role: Role = Role.OWNER) -> Row:
    return {
        "organization_id": str(organization_id),
        "role": role.value,
        "organization": {"id": str(organization_id), "name": name},
    }


class ControlledListService:
    """
    Service fake whose list() calls resolve in the order the test chooses.

    Every list() call registers a pending future keyed by organization id;
    ``resolve(organization_id, items)`` completes the oldest pending call
    for that organization, or the newest one with ``newest=True``.
    """

    def __init__(self):
        self.list_calls: List[Dict[str, Any]] = []
        self._pending: List[Dict[str, Any]] = []
        self.create_result: Optional[ServiceResult] = None
        self.update_result: Optional[ServiceResult] = None
        self.delete_result: ServiceResult = ServiceResult.success(None)
        self.delete_calls: List[uuid.UUID] = []
        self.auto_items: Optional[Dict[uuid.UUID, list]] = None

    async def list(self, organization_id, search: str = ""):
        call = {"organization_id": organization_id, "search": search}
        self.list_calls.append(call)
        if self.auto_items is not None:
            return ServiceResult.success(list(self.auto_items.get(organization_id, [])))
        future = asyncio.get_running_loop().create_future()
        self._pending.append({"organization_id": organization_id, "future": future})
        return await future

    def resolve(self, organization_id, items=None, error: Optional[str] = None, newest: bool = False) -> None:
        order = reversed(list(enumerate(self._pending))) if newest else enumerate(self._pending)
        for index, pending in order:
            if pending["organization_id"] == organization_id:
                self._pending.pop(index)
                result = ServiceResult.failure(error) if error else ServiceResult.success(list(items or []))
                pending["future"].set_result(result)
                return
        raise AssertionError(f"no pending list() call for {organization_id}")

    def fail(self, organization_id, error: Exception) -> None:
        """Make the oldest pending list() call for the organization raise."""
        for index, pending in enumerate(self._pending):
            if pending["organization_id"] == organization_id:
                self._pending.pop(index)
                pending["future"].set_exception(error)
                return
        raise AssertionError(f"no pending list() call for {organization_id}")

    async def create(self, data):
        return self.create_result

    async def update(self, organization_id, record_id, data):
        return self.update_result

    async def delete(self, organization_id, record_id):
        self.delete_calls.append(record_id)
        return self.delete_result


@pytest.fixture
def gated_backend() -> GatedMembershipsBackend:
    return GatedMembershipsBackend()


@pytest.fixture
def list_service() -> ControlledListService:
    return ControlledListService()


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def make_membership_row():
    return membership_row


@pytest.fixture
def settle_tasks():
    return settle
