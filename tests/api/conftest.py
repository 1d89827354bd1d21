from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from api.main import app
from llm.media import get_media_client
from models.database import get_db
from services.student_store import InMemoryStudentStore, get_student_store


@pytest.fixture
def student_store():
    return InMemoryStudentStore()


@pytest.fixture
def client(session_factory, student_store):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_student_store] = lambda: student_store
    app.dependency_overrides[get_media_client] = lambda: MagicMock()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def offline_redis():
    """The features endpoint pings redis; keep tests off the network"""
    redis = MagicMock()
    redis.ping.side_effect = RedisConnectionError("Connection refused")
    with patch("api.queue.get_redis", return_value=redis):
        yield redis
