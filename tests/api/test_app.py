from unittest.mock import AsyncMock, patch

from flows.errors import (
    AssistantError, MissingOutputError, OperationTimeoutError, SceneGenerationError
)
from models.assistant_models import AssistantResponse
from models.flow_models import ConceptVideo, Quiz, QuizQuestion


def test_root_lists_endpoints(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "flows" in response.json()["endpoints"]


def test_health(client):
    response = client.get("/health")

    assert response.json() == {"status": "healthy", "gemini_api_configured": True}


def test_features_reflect_configuration(client, monkeypatch):
    monkeypatch.setenv("WORKFLOW_WEBHOOK_URL", "https://n8n.example.com/webhook/gmail")
    from utils.config_loader import get_settings
    get_settings.cache_clear()

    features = client.get("/api/features").json()

    assert features["generation"] is True
    assert features["video"] is True
    assert features["workflow_tools"] is True
    assert features["database"] is False


def test_background_jobs_follow_redis_reachability(client, offline_redis):
    assert client.get("/api/features").json()["background_jobs"] is False

    offline_redis.ping.side_effect = None
    offline_redis.ping.return_value = True
    assert client.get("/api/features").json()["background_jobs"] is True


def test_features_without_api_key(client, no_api_key):
    features = client.get("/api/features").json()

    assert features["generation"] is False
    assert features["live"] is False


def test_quiz_endpoint_returns_quiz(client):
    quiz = Quiz(questions=[QuizQuestion(question="H2O is?", options=["Water", "Salt"], answer="Water")])
    with patch("api.routes.flows.generate_quiz", new_callable=AsyncMock, return_value=quiz) as mock_quiz:
        response = client.post("/api/flows/quiz", json={"topic": "Water Cycle", "number_of_questions": 1})

    assert response.status_code == 200
    assert response.json()["questions"][0]["answer"] == "Water"
    assert mock_quiz.await_args.args[0].number_of_questions == 1


def test_invalid_request_is_rejected_before_any_model_call(client):
    with patch("api.routes.flows.generate_quiz", new_callable=AsyncMock) as mock_quiz:
        response = client.post("/api/flows/quiz", json={"topic": "short"})

    assert response.status_code == 422
    assert response.headers["access-control-allow-origin"] == "*"
    mock_quiz.assert_not_awaited()


def test_missing_api_key_is_503(client, no_api_key):
    response = client.post("/api/flows/quiz", json={"topic": "Water Cycle"})

    assert response.status_code == 503
    assert "GEMINI_API_KEY" in response.json()["detail"]


def test_missing_output_is_502(client):
    with patch("api.routes.flows.run_research", new_callable=AsyncMock,
               side_effect=MissingOutputError("The research agent failed to generate a report.")):
        response = client.post("/api/flows/research", json={"topic": "Volcanoes"})

    assert response.status_code == 502
    assert response.json()["detail"] == "The research agent failed to generate a report."


def test_video_timeout_is_504(client):
    with patch("api.routes.flows.generate_concept_video", new_callable=AsyncMock,
               side_effect=OperationTimeoutError("concept video did not finish within 600 seconds")):
        response = client.post(
            "/api/flows/concept-video",
            json={"prompt": "How volcanoes erupt", "grade": "Grade 6", "subject": "Science"},
        )

    assert response.status_code == 504


def test_concept_video_endpoint(client):
    video = ConceptVideo(title="Volcanoes", description="Magma rises.", video_url="data:video/mp4;base64,AA==")
    with patch("api.routes.flows.generate_concept_video", new_callable=AsyncMock, return_value=video):
        response = client.post(
            "/api/flows/concept-video",
            json={"prompt": "How volcanoes erupt", "grade": "Grade 6", "subject": "Science", "duration": 8},
        )

    assert response.status_code == 200
    assert response.json()["video_url"].startswith("data:video/mp4;base64,")


def test_storybook_scene_failure_is_502_naming_scene(client):
    from api.main import app
    from api.routes.storybook import get_pipeline

    pipeline = AsyncMock()
    pipeline.run.side_effect = SceneGenerationError("video", 2, "quota exceeded")
    app.dependency_overrides[get_pipeline] = lambda: pipeline

    response = client.post("/api/storybook", json={"story": "A fox found a shiny key in the woods.", "grade": "1"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Video generation failed for scene 3: quota exceeded"


def test_assistant_endpoint(client):
    from api.main import app
    from api.routes.assistant import get_assistant_router

    router = AsyncMock()
    router.run.return_value = AssistantResponse(
        response="Your note is saved.", tool_used="add_keep_note", tool_output="Successfully created a new note"
    )
    app.dependency_overrides[get_assistant_router] = lambda: router

    response = client.post("/api/assistant", json={"query": "Note: buy chalk"})

    assert response.status_code == 200
    assert response.json()["tool_used"] == "add_keep_note"


def test_assistant_error_is_502(client):
    from api.main import app
    from api.routes.assistant import get_assistant_router

    router = AsyncMock()
    router.run.side_effect = AssistantError()
    app.dependency_overrides[get_assistant_router] = lambda: router

    response = client.post("/api/assistant", json={"query": "hello"})

    assert response.status_code == 502
    assert response.json()["detail"] == "The assistant encountered an error. Please try again."
