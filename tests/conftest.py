import pytest
import yaml

from logquery.app import create_app
from logquery.config import Config
from logquery.store import RecordStore
from logquery.validator import LogValidator


@pytest.fixture
def sample_valid_log():
    return {
        "level": "error",
        "message": "Failed to connect to DB",
        "resourceId": "server-1234",
        "timestamp": "2024-01-15T08:00:00Z",
        "traceId": "abc-xyz-123",
        "spanId": "span-456",
        "commit": "5e5342f",
        "metadata": {"parentResourceId": "server-0987"},
    }


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "data" / "logs.json")


@pytest.fixture
def store(store_path):
    return RecordStore(store_path)


@pytest.fixture
def validator():
    return LogValidator()


@pytest.fixture
def config(tmp_path, store_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"storage": {"path": store_path}}))
    return Config(str(path))


@pytest.fixture
def app(config):
    """Create a Flask test app backed by a temporary store."""
    application = create_app(config)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
