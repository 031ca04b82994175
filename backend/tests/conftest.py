from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from dotenv import load_dotenv

# Load the test environment FIRST, before any memora import reads settings.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env.test")

from memora.main import app  # noqa: E402
from memora.config.settings import settings  # noqa: E402
from memora.models.conversation import AssistantContext  # noqa: E402
from memora.services.domain_service import DomainGateway  # noqa: E402
from memora.services.history_service import HistoryService  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the history store makes."""

    def __init__(self):
        self.data = {}
        self.lists = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += int(self.data.pop(key, None) is not None) + int(self.lists.pop(key, None) is not None)
        return removed

    @staticmethod
    def _bounds(length, start, end):
        start = start if start >= 0 else max(length + start, 0)
        end = end if end >= 0 else length + end
        return start, end + 1

    async def rpush(self, key, *values):
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    async def ltrim(self, key, start, end):
        items = self.lists.get(key, [])
        lo, hi = self._bounds(len(items), start, end)
        self.lists[key] = items[lo:hi]
        return True

    async def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        lo, hi = self._bounds(len(items), start, end)
        return items[lo:hi]

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


class RecordingGateway(DomainGateway):
    """Domain gateway double that remembers every write request."""

    def __init__(self, tasks=None):
        self.performed = []
        self.tasks = tasks or []

    async def list_tasks(self, context, status=None):
        return self.tasks

    async def perform(self, action, payload, context):
        self.performed.append((action, dict(payload)))
        return {"status": "accepted"}


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def history(fake_redis):
    return HistoryService(settings.redis_url, client=fake_redis)


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def context():
    return AssistantContext(
        current_page="/hub/g1/tasks",
        current_group_id="g1",
        current_group_name="Equipe Produit",
        current_user_id="u1",
        current_user_name="Alice",
        current_user_role="Owner",
    )


@pytest.fixture(scope="function")
def test_client(mocker, fake_redis):
    """
    Provides a TestClient for API integration tests.
    The shared history store is pointed at the in-memory Redis double.
    """
    mocker.patch("memora.services.history_service.history_service.redis", fake_redis)

    # The app's lifespan (startup/shutdown events) is managed by the TestClient
    with TestClient(app) as client:
        yield client
