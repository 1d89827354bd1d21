import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic_ai.models.test import TestModel

from data.prompts.storybook_prompts import STORY_ANALYZER_PROMPT
from flows.errors import MissingOutputError, OperationFailedError, SceneGenerationError
from flows.storybook import StorybookPipeline, analyze_story
from llm.base import AgentClient
from models.storybook_models import StoryAnalysis, StorybookRequest

STORY = "Leo the lion lost his roar. He searched the savanna and found it with a friendly bird."


def scene(n: int) -> dict:
    return {
        "scene_description": f"Scene {n} action",
        "characters": ["Leo"],
        "setting": "savanna",
        "mood": "hopeful",
        "narration_text": f"Narration {n}",
        "illustration_prompt": f"Leo in scene {n}",
    }


def analysis(num_scenes: int = 3) -> dict:
    return {
        "title": "Leo Finds His Roar",
        "main_character": "Leo",
        "character_sheet_prompt": "Leo the lion character sheet",
        "scenes": [scene(n) for n in range(1, num_scenes + 1)],
    }


def analyzer(output: dict):
    model = TestModel(custom_output_args=output)
    return AgentClient(system_prompt=STORY_ANALYZER_PROMPT, tools=[], model=model).create_agent(result_type=StoryAnalysis)


def fake_media():
    media = MagicMock()
    media.generate_image = AsyncMock(return_value="data:image/png;base64,cmVm")

    async def speak(text, voice=None):
        return f"data:audio/wav;base64,{text}"

    async def animate(prompt, **kwargs):
        return f"data:video/mp4;base64,{prompt}"

    media.synthesize_speech = AsyncMock(side_effect=speak)
    media.generate_video = AsyncMock(side_effect=animate)
    return media


def request() -> StorybookRequest:
    return StorybookRequest(story=STORY, grade="Grade 2")


@pytest.mark.asyncio
async def test_scene_results_match_analysis_length_and_order():
    media = fake_media()
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(3)))

    storybook = await pipeline.run(request())

    assert storybook.title == "Leo Finds His Roar"
    assert [s.index for s in storybook.scenes] == [0, 1, 2]
    assert [s.narration_text for s in storybook.scenes] == ["Narration 1", "Narration 2", "Narration 3"]
    assert storybook.scenes[1].narration_audio.endswith("Narration 2")
    assert "Leo in scene 2" in storybook.scenes[1].video_url


@pytest.mark.asyncio
async def test_videos_are_generated_in_scene_order_with_reference_image():
    media = fake_media()
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(2)))

    await pipeline.run(request())

    prompts = [c.args[0] for c in media.generate_video.await_args_list]
    assert "Leo in scene 1" in prompts[0]
    assert "Leo in scene 2" in prompts[1]
    assert "Ken Burns" in prompts[0]
    for call in media.generate_video.await_args_list:
        assert call.kwargs["image"] == "data:image/png;base64,cmVm"
        assert call.kwargs["duration_seconds"] == 8
        assert call.kwargs["aspect_ratio"] == "16:9"


@pytest.mark.asyncio
@pytest.mark.parametrize("failure", [RuntimeError("image model down"), None])
async def test_reference_image_failure_does_not_abort(failure):
    media = fake_media()
    if failure is None:
        media.generate_image = AsyncMock(return_value=None)
    else:
        media.generate_image = AsyncMock(side_effect=failure)
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(2)))

    storybook = await pipeline.run(request())

    assert len(storybook.scenes) == 2
    for call in media.generate_video.await_args_list:
        assert call.kwargs["image"] is None


@pytest.mark.asyncio
async def test_audio_failure_names_lowest_failing_scene():
    media = fake_media()

    async def speak(text, voice=None):
        if text in ("Narration 2", "Narration 3"):
            raise RuntimeError("tts quota")
        return "data:audio/wav;base64,AA=="

    media.synthesize_speech = AsyncMock(side_effect=speak)
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(3)))

    with pytest.raises(SceneGenerationError) as exc_info:
        await pipeline.run(request())

    assert exc_info.value.stage == "audio"
    assert exc_info.value.scene_index == 1
    assert exc_info.value.message == "Audio generation failed for scene 2: tts quota"
    media.generate_video.assert_not_awaited()


@pytest.mark.asyncio
async def test_video_failure_stops_pipeline_without_partial_result():
    media = fake_media()
    media.generate_video = AsyncMock(side_effect=[
        "data:video/mp4;base64,AA==",
        OperationFailedError("video job failed: safety filter"),
        "data:video/mp4;base64,AA==",
    ])
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(3)))

    with pytest.raises(SceneGenerationError) as exc_info:
        await pipeline.run(request())

    assert exc_info.value.stage == "video"
    assert exc_info.value.scene_index == 1
    assert "Video generation failed for scene 2" in exc_info.value.message
    assert "safety filter" in exc_info.value.message
    # later scenes are never submitted
    assert media.generate_video.await_count == 2


@pytest.mark.asyncio
async def test_progress_is_reported_in_order():
    updates = []
    pipeline = StorybookPipeline(media=fake_media(), analyzer=analyzer(analysis(2)))

    await pipeline.run(request(), on_progress=lambda p, m: updates.append((p, m)))

    fractions = [p for p, _ in updates]
    assert fractions == sorted(fractions)
    assert fractions[-1] == 1.0
    assert all(0 <= p <= 1 for p in fractions)


@pytest.mark.asyncio
async def test_analysis_without_scenes_fails():
    empty = dict(analysis(1), scenes=[])

    with pytest.raises(MissingOutputError, match="Failed to analyze the story."):
        await analyze_story(request(), agent=analyzer(empty))


@pytest.mark.asyncio
async def test_analyze_story_returns_structured_scenes():
    result = await analyze_story(request(), agent=analyzer(analysis(2)))

    assert result.main_character == "Leo"
    assert len(result.scenes) == 2


@pytest.mark.asyncio
async def test_narration_runs_concurrently_and_videos_one_at_a_time():
    media = fake_media()
    in_flight = {"audio": 0, "video": 0}
    peak = {"audio": 0, "video": 0}
    all_speaking = asyncio.Event()

    async def speak(text, voice=None):
        in_flight["audio"] += 1
        peak["audio"] = max(peak["audio"], in_flight["audio"])
        if in_flight["audio"] == 3:
            all_speaking.set()
        # each clip waits until every scene's narration has started
        await all_speaking.wait()
        in_flight["audio"] -= 1
        return f"data:audio/wav;base64,{text}"

    async def animate(prompt, **kwargs):
        in_flight["video"] += 1
        peak["video"] = max(peak["video"], in_flight["video"])
        await asyncio.sleep(0)
        in_flight["video"] -= 1
        return f"data:video/mp4;base64,{prompt}"

    media.synthesize_speech = AsyncMock(side_effect=speak)
    media.generate_video = AsyncMock(side_effect=animate)
    pipeline = StorybookPipeline(media=media, analyzer=analyzer(analysis(3)))

    storybook = await asyncio.wait_for(pipeline.run(request()), timeout=5)

    assert peak["audio"] == 3
    assert peak["video"] == 1
    assert [s.narration_audio for s in storybook.scenes] == [
        f"data:audio/wav;base64,Narration {n}" for n in (1, 2, 3)
    ]
