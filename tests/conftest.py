# /tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert, select

from codelab_store.db.connection import ConnectionManager, get_db
from codelab_store.db.models.course_models import Course
from codelab_store.db.models.user_models import User, user_courses
from codelab_store.services.database_service import DatabaseService
from codelab_store.main import app


@pytest.fixture
def manager(tmp_path):
    """
    A connection manager backed by a fresh SQLite file for EACH test.
    """
    mgr = ConnectionManager(f"sqlite:///{tmp_path / 'codelab_test.db'}")
    yield mgr
    mgr.close()


@pytest.fixture
def db_session(manager):
    session = manager.get_session()
    yield session
    session.close()


@pytest.fixture
def seeded(db_session):
    """
    Seeds three users and two courses.

    alice (u1) and bob (u2) share group 3; carol (u3) is in group 4.
    bob is already a member of course c1. alice still has a legacy
    plaintext password.
    """
    db_session.add_all([
        User(id="u1", username="alice", group_number=3, role="student", password="legacy-secret"),
        User(id="u2", username="bob", group_number=3, role="student"),
        User(id="u3", username="carol", group_number=4, role="tutor"),
        Course(id="c1", name="Intro to Programming", assignments=[{"name": "hw1"}, {"name": "hw2"}]),
        Course(id="c2", name="Networks", assignments=[]),
    ])
    db_session.commit()
    db_session.execute(insert(user_courses).values(user_id="u2", course_id="c1"))
    db_session.commit()
    return db_session


@pytest.fixture
def db_service(seeded):
    return DatabaseService(db_session=seeded)


@pytest.fixture
def course_ids(db_session):
    """Returns a helper that reads a user's course set straight from the association table."""
    def _course_ids(user_id):
        rows = db_session.execute(
            select(user_courses.c.course_id).where(user_courses.c.user_id == user_id)
        )
        return sorted(rows.scalars().all())
    return _course_ids


@pytest.fixture
def client(manager, seeded):
    """A TestClient whose requests use the per-test database."""
    def _get_db():
        db = manager.get_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def store_outage(manager, db_session, tmp_path):
    """
    Returns a helper that takes the database away after it has been connected:
    pooled connections are dropped and the database file is replaced by a
    directory, so every new connection attempt fails.
    """
    def _take_down():
        db_session.close()
        manager.get_engine().dispose()
        db_file = tmp_path / "codelab_test.db"
        db_file.unlink()
        db_file.mkdir()
    return _take_down
