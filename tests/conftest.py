"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seeded companies and jobs
- FastAPI test client
- Bearer tokens for an admin and a regular user
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db, init_db
from jobly.core.security import create_access_token
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine, "before_cursor_execute", retval=True)
def _ilike_to_like(conn, cursor, statement, parameters, context, executemany):
    # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
    return statement.replace(" ILIKE ", " LIKE "), parameters


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    init_db(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db_session):
    """
    Session over three companies and four jobs:

    c1 (1 employee):  Paper Boy (20000, 0.005), Paper Woman (10000, no equity recorded)
    c2 (2 employees): Paper Girl (30000, 0.1)
    c3 (3 employees): Paper Man (10000, 0)
    """
    db_session.execute(text("""
        INSERT INTO companies (handle, name, num_employees, description, logo_url)
        VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
               ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
               ('c3', 'C3', 3, 'Desc3', 'http://c3.img')"""))
    db_session.execute(text("""
        INSERT INTO jobs (title, salary, equity, company_handle)
        VALUES ('Paper Boy', 20000, 0.005, 'c1'),
               ('Paper Girl', 30000, 0.1, 'c2'),
               ('Paper Man', 10000, 0, 'c3'),
               ('Paper Woman', 10000, NULL, 'c1')"""))
    db_session.commit()
    return db_session


@pytest.fixture
def job_ids(seeded_db):
    """Seeded job ids keyed by title"""
    rows = seeded_db.execute(text("SELECT id, title FROM jobs")).all()
    return {title: job_id for job_id, title in rows}


@pytest.fixture
def client(seeded_db):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield seeded_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    # Not entered as a context manager: startup would initialize the Postgres engine
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin', is_admin=True)}"}


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {create_access_token('u1')}"}
