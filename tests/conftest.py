import os
import tempfile

# must be set before photoshare.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="photoshare-uploads-")
for key in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
    os.environ.pop(key, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from photoshare.core.blob_store import LocalBlobStore, get_blob_store
from photoshare.crud import user as user_crud
from photoshare.db.base import Base
from photoshare.db.session import build_engine, get_db

PASSWORD = "password123"


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def make_user(db):
    def _make_user(username):
        return user_crud.register(db, email=f"{username}@example.com", username=username, password=PASSWORD)
    return _make_user


@pytest.fixture()
def upload_dir(tmp_path):
    return str(tmp_path / "uploads")


@pytest.fixture()
def client(session_factory, upload_dir):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    blob_store = LocalBlobStore(upload_dir)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client):
    """Register a user through the API and return bearer headers for it."""
    def _auth_headers(username):
        response = client.post("/api/auth/register", json={
            "email": f"{username}@example.com",
            "username": username,
            "password": PASSWORD,
        })
        assert response.status_code == 201, response.text
        response = client.post("/api/auth/login", data={
            "username": f"{username}@example.com",
            "password": PASSWORD,
        })
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _auth_headers
