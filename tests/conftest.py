import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the repo's YAML and any local .env out of the test settings
os.environ["EDUSTUDIO_CONFIG"] = os.path.join(os.path.dirname(__file__), "missing-settings.yaml")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from flows import agents  # noqa: E402
from llm.base import get_model  # noqa: E402
from llm.media import get_media_client  # noqa: E402
from models.database_models import Base  # noqa: E402
from services.student_store import get_student_store  # noqa: E402
from utils.config_loader import get_settings  # noqa: E402

AGENT_FACTORIES = [
    agents.quiz_agent,
    agents.teaching_methods_agent,
    agents.weekly_plan_agent,
    agents.lesson_synthesis_agent,
    agents.video_summary_agent,
    agents.research_agent,
    agents.student_evaluation_agent,
    agents.story_analyzer_agent,
    agents.assistant_router_agent,
    agents.assistant_summary_agent,
]


def clear_cached_clients():
    for factory in [get_settings, get_model, get_media_client, get_student_store, *AGENT_FACTORIES]:
        factory.cache_clear()


@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Every test starts from env-only settings with a dummy API key"""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    for name in ("POLL_INTERVAL_SECONDS", "POLL_TIMEOUT_SECONDS", "MAX_POLLS", "STUDENT_STORE", "WORKFLOW_WEBHOOK_URL"):
        monkeypatch.delenv(name, raising=False)
    clear_cached_clients()
    yield
    clear_cached_clients()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    clear_cached_clients()


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
