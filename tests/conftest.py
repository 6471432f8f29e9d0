import os

TEST_DB_FILE = "test_submissions.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# point startup hooks at the test database before the app is imported
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.core.deps import get_blob_store, get_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models.assignment import Assignment  # noqa: E402
from app.models.submission import Submission  # noqa: E402
from app.storage.blob_store import LocalBlobStore  # noqa: E402

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed a clean minimal dataset for each test."""
    db = TestingSessionLocal()
    try:
        db.query(Submission).delete()
        db.query(Assignment).delete()
        db.commit()

        db.add_all(
            [
                Assignment(id="A1", title="Lab report"),
                Assignment(id="A2", title="Reading notes"),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads")


@pytest.fixture()
def client(blob_store):
    """Test client that uses the test DB session and a temp upload dir."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_token(sub=None, role=None, name=None, email=None) -> str:
    claims = {}
    if sub is not None:
        claims["sub"] = sub
    if role is not None:
        claims["role"] = role
    if name is not None:
        claims["name"] = name
    if email is not None:
        claims["email"] = email
    return create_access_token(data=claims)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for():
    """Build Authorization headers for an arbitrary identity."""

    def _build(sub=None, role=None, name=None, email=None) -> dict:
        return auth_header(make_token(sub=sub, role=role, name=name, email=email))

    return _build


@pytest.fixture()
def student1(headers_for):
    return headers_for("S1", "student", "Student One", "s1@example.com")


@pytest.fixture()
def student2(headers_for):
    return headers_for("S2", "student", "Student Two", "s2@example.com")


@pytest.fixture()
def teacher(headers_for):
    return headers_for("T1", "teacher", "Teacher One", "t1@example.com")
