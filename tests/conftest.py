import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from movies_api.config import Settings
from movies_api.main import create_app


ARRIVAL = {
    "title": "Arrival",
    "director": "Villeneuve",
    "releaseYear": 2016,
    "genre": "Sci-Fi",
}


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "log.txt"


@pytest.fixture
def database():
    return AsyncMongoMockClient()["moviesDB_test"]


@pytest.fixture
def app(log_file, database):
    return create_app(Settings(log_file=str(log_file)), database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def arrival():
    return dict(ARRIVAL)
