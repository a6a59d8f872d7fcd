from __future__ import annotations

import pytest
from sqlalchemy.pool import StaticPool

from physiosim.db import Base, User, UserRole, create_db_engine, get_session
from physiosim.services.password import hash_password


@pytest.fixture
def engine():
    # One shared in-memory connection per test.
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = get_session(engine)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def clinician_hash():
    return hash_password("correcthorse1")


@pytest.fixture
def clinician(session, clinician_hash):
    user = User(
        username="dr_kim",
        email="kim@example.org",
        password_hash=clinician_hash,
        role=UserRole.CLINICIAN,
        clinician_no="C-1001",
    )
    session.add(user)
    session.commit()
    return user
