from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from flows.errors import MissingOutputError, OperationTimeoutError
from llm.media import GenAIMediaClient
from utils.config_loader import Settings
from utils.media_uri import parse_data_uri


def inline_response(data: bytes, mime_type: str):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def text_response(text: str):
    part = SimpleNamespace(inline_data=None, text=text)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def video_operation(done=True, video_bytes=b"mp4-bytes", error=None):
    video = SimpleNamespace(video_bytes=video_bytes, mime_type="video/mp4")
    response = SimpleNamespace(generated_videos=[SimpleNamespace(video=video)])
    return SimpleNamespace(done=done, error=error, response=response if done else None)


@pytest.fixture
def genai_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_videos = AsyncMock()
    client.aio.operations.get = AsyncMock()
    client.aio.files.download = AsyncMock()
    return client


@pytest.fixture
def media(genai_client):
    settings = Settings(gemini_api_key="test-key", poll_interval_seconds=0, max_polls=3)
    return GenAIMediaClient(settings=settings, client=genai_client)


@pytest.mark.asyncio
async def test_generate_image_returns_data_uri(media, genai_client):
    genai_client.aio.models.generate_content.return_value = inline_response(b"png", "image/png")

    uri = await media.generate_image("a water cycle diagram")

    assert parse_data_uri(uri) == ("image/png", b"png")
    config = genai_client.aio.models.generate_content.await_args.kwargs["config"]
    assert config.response_modalities == ["TEXT", "IMAGE"]


@pytest.mark.asyncio
async def test_generate_image_text_only_is_none(media, genai_client):
    genai_client.aio.models.generate_content.return_value = text_response("I can't draw that")

    assert await media.generate_image("anything") is None


@pytest.mark.asyncio
async def test_synthesize_speech_wraps_pcm_as_wav(media, genai_client):
    genai_client.aio.models.generate_content.return_value = inline_response(
        b"\x00\x00" * 100, "audio/L16;codec=pcm;rate=24000"
    )

    uri = await media.synthesize_speech("Once upon a time")

    mime, data = parse_data_uri(uri)
    assert mime == "audio/wav"
    assert data[:4] == b"RIFF"


@pytest.mark.asyncio
async def test_synthesize_speech_without_audio_raises(media, genai_client):
    genai_client.aio.models.generate_content.return_value = SimpleNamespace(candidates=[])

    with pytest.raises(MissingOutputError):
        await media.synthesize_speech("Once upon a time")


@pytest.mark.asyncio
async def test_submit_video_sends_config_only_for_veo2(media, genai_client):
    await media.submit_video("a volcano", duration_seconds=6, aspect_ratio="9:16", model="veo-2.0-generate-001")
    config = genai_client.aio.models.generate_videos.await_args.kwargs["config"]
    assert config.duration_seconds == 6
    assert config.aspect_ratio == "9:16"

    await media.submit_video("a volcano", duration_seconds=6, aspect_ratio="9:16", model="veo-3.0-generate-preview")
    assert genai_client.aio.models.generate_videos.await_args.kwargs["config"] is None


@pytest.mark.asyncio
async def test_submit_video_passes_seed_image(media, genai_client):
    await media.submit_video("a volcano", image="data:image/png;base64,aGVsbG8=")

    image = genai_client.aio.models.generate_videos.await_args.kwargs["image"]
    assert image.image_bytes == b"hello"
    assert image.mime_type == "image/png"


@pytest.mark.asyncio
async def test_generate_video_polls_then_downloads(media, genai_client):
    genai_client.aio.models.generate_videos.return_value = video_operation(done=False)
    genai_client.aio.operations.get.side_effect = [video_operation(done=False), video_operation(done=True)]

    uri = await media.generate_video("a volcano")

    assert parse_data_uri(uri) == ("video/mp4", b"mp4-bytes")
    assert genai_client.aio.operations.get.await_count == 2


@pytest.mark.asyncio
async def test_generate_video_downloads_file_when_bytes_missing(media, genai_client):
    genai_client.aio.models.generate_videos.return_value = video_operation(video_bytes=None)
    genai_client.aio.files.download.return_value = b"downloaded"

    uri = await media.generate_video("a volcano")

    assert parse_data_uri(uri)[1] == b"downloaded"


@pytest.mark.asyncio
async def test_generate_video_without_videos_raises(media, genai_client):
    genai_client.aio.models.generate_videos.return_value = SimpleNamespace(
        done=True, error=None, response=SimpleNamespace(generated_videos=[])
    )

    with pytest.raises(MissingOutputError, match="Failed to find the generated video"):
        await media.generate_video("a volcano")


@pytest.mark.asyncio
async def test_generate_video_respects_max_polls(media, genai_client):
    genai_client.aio.models.generate_videos.return_value = video_operation(done=False)
    genai_client.aio.operations.get.return_value = video_operation(done=False)

    with pytest.raises(OperationTimeoutError):
        await media.generate_video("a volcano")

    assert genai_client.aio.operations.get.await_count == 3
