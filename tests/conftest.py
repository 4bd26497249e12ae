"""
Shared pytest fixtures for the Branch Connect test suite.

Provides:
    - db: Session on an in-memory SQLite database, schema recreated per test
    - client: FastAPI TestClient with get_db / get_current_user overridden
    - acting: Mutable holder for the profile the client acts as
    - make_profile / make_branch / make_visit / assign: seed helpers
"""
import os

# Must be set before any branch_connect import reads the config
os.environ["DISABLE_AUTH"] = "true"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_SERVICE_ROLE_KEY", None)

import uuid  # noqa: E402
from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import branch_connect.models  # noqa: E402,F401
from branch_connect.core.dependencies import get_current_user  # noqa: E402
from branch_connect.db.base import Base  # noqa: E402
from branch_connect.db.session import get_db  # noqa: E402
from branch_connect.main import app  # noqa: E402
from branch_connect.models import (  # noqa: E402
    Branch,
    BranchAssignment,
    BranchCategory,
    BranchVisit,
    Profile,
    UserRole,
    VisitStatus,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ── DB fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def db():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# ── Seed helpers ─────────────────────────────────────────────────────────


@pytest.fixture()
def make_profile(db):
    def _make(role=UserRole.BH, full_name=None, e_code=None, location="North"):
        suffix = uuid.uuid4().hex[:6]
        profile = Profile(
            id=uuid.uuid4(),
            full_name=full_name or f"User {suffix}",
            e_code=e_code or f"E{suffix}",
            role=role,
            location=location,
        )
        db.add(profile)
        db.commit()
        return profile
    return _make


@pytest.fixture()
def make_branch(db):
    def _make(category=BranchCategory.GOLD, name=None, location="North"):
        branch = Branch(
            id=uuid.uuid4(),
            name=name or f"Branch {uuid.uuid4().hex[:6]}",
            location=location,
            category=category,
        )
        db.add(branch)
        db.commit()
        return branch
    return _make


@pytest.fixture()
def make_visit(db):
    def _make(user, branch, visit_date=None, status=VisitStatus.SUBMITTED, **fields):
        visit = BranchVisit(
            id=uuid.uuid4(),
            user_id=user.id,
            branch_id=branch.id,
            visit_date=visit_date or date.today(),
            branch_category=branch.category,
            status=status,
            **fields,
        )
        db.add(visit)
        db.commit()
        return visit
    return _make


@pytest.fixture()
def assign(db):
    def _assign(user, branch):
        assignment = BranchAssignment(id=uuid.uuid4(), user_id=user.id, branch_id=branch.id)
        db.add(assignment)
        db.commit()
        return assignment
    return _assign


# ── API fixtures ─────────────────────────────────────────────────────────


@pytest.fixture()
def admin(make_profile):
    return make_profile(role=UserRole.ADMIN, full_name="Channel Admin", e_code="ADM001")


@pytest.fixture()
def acting(admin):
    """Set acting["user"] to switch who the client calls as."""
    return {"user": admin}


@pytest.fixture()
def client(db, acting):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: acting["user"]
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
