import os
import pytest
import mongomock

# Keep a real MongoDB out of unit tests; every provider below is mongomock-backed
os.environ.setdefault("MONGODB_URI", "")
os.environ.setdefault("MONGO_DB", "eventhub_test")
os.environ.setdefault("FLASK_ENV", "testing")

from eventhub import create_app  # noqa: E402
from eventhub.db.mongo import MongoProvider  # noqa: E402


@pytest.fixture()
def mock_client():
    return mongomock.MongoClient()


@pytest.fixture()
def provider(mock_client):
    return MongoProvider(
        "mongodb://mongomock.test:27017",
        db_name="eventhub_test",
        client_factory=lambda uri, **kwargs: mock_client,
    )


@pytest.fixture()
def db(provider):
    return provider.get_db()


@pytest.fixture()
def app(provider):
    flask_app = create_app(provider)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def app_client(app):
    with app.test_client() as c:
        yield c
