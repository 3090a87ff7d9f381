import os
import pytest

# Keep the real database out of unit tests
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB", "devevents_test")
os.environ.setdefault("FLASK_ENV", "testing")

import mongomock  # noqa: E402
import requests  # noqa: E402

import devevents.config as cfg  # noqa: E402
from devevents import create_app  # noqa: E402
from devevents.db.mongo import ConnectionManager, use_connection  # noqa: E402


class _DummyResp:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def mock_client_factory(uri, **kwargs):
    return mongomock.MongoClient()


@pytest.fixture
def connection():
    mgr = ConnectionManager(
        uri="mongodb://localhost:27017",
        db_name="devevents_test",
        client_factory=mock_client_factory,
        verify=False,
    )
    use_connection(mgr)
    yield mgr
    use_connection(None)
    mgr.close()


@pytest.fixture
def mock_db(connection):
    return connection.get_db()


@pytest.fixture(autouse=True)
def _patch_cfg(monkeypatch):
    monkeypatch.setattr(cfg, "FLASK_ENV", "testing", raising=False)
    monkeypatch.setattr(cfg, "MONGO_DB", "devevents_test", raising=False)
    monkeypatch.setattr(cfg, "API_SECRET_KEY", None, raising=False)
    monkeypatch.setattr(cfg, "CLOUDINARY_URL", None, raising=False)
    monkeypatch.setattr(cfg, "CLOUDINARY_CLOUD_NAME", "demo", raising=False)
    monkeypatch.setattr(cfg, "CLOUDINARY_API_KEY", "123456", raising=False)
    monkeypatch.setattr(cfg, "CLOUDINARY_API_SECRET", "shh", raising=False)
    monkeypatch.setattr(cfg, "CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1", raising=False)
    yield


@pytest.fixture
def app_client(connection):
    app = create_app(connection=connection, testing=True)
    with app.test_client() as c:
        yield c


@pytest.fixture
def fake_requests(monkeypatch):
    calls = []

    def install(mapper):
        def _post(url, data=None, files=None, headers=None, timeout=None):
            calls.append({"url": url, "data": data, "files": files})
            if callable(mapper):
                payload, status = mapper(url, data, files)
            else:
                payload, status = mapper.get(url, ({}, 200))
            return _DummyResp(status_code=status, payload=payload)

        monkeypatch.setattr("requests.post", _post, raising=True)
        return calls

    return install
