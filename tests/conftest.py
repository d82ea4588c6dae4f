import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models
from app.main import app


@pytest.fixture
def engine():
    """Create an in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.create_db_and_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    """HTTP client whose requests run against the in-memory database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[models.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_artist(client):
    def _create(name="Daft Punk", **fields):
        response = client.post("/api/artists", json={"name": name, **fields})
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_album(client):
    def _create(artist_id, title="Discovery", **fields):
        response = client.post("/api/albums", json={"title": title, "artist_id": artist_id, **fields})
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_song(client):
    def _create(album_id, title="One More Time", **fields):
        response = client.post("/api/songs", json={"title": title, "album_id": album_id, **fields})
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
