from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic_ai.messages import ModelResponse, TextPart
from pydantic_ai.models.function import FunctionModel
from pydantic_ai.models.test import TestModel

from data.prompts.flow_prompts import VIDEO_SUMMARY_PROMPT
from flows.concept_images import generate_concept_images
from flows.concept_video import generate_concept_video
from flows.errors import OperationTimeoutError
from llm.base import AgentClient
from models.flow_models import ConceptImageRequest, ConceptVideoRequest, VideoSummary


def summary_agent(model):
    return AgentClient(system_prompt=VIDEO_SUMMARY_PROMPT, tools=[], model=model).create_agent(result_type=VideoSummary)


def video_media(result="data:video/mp4;base64,AA=="):
    media = MagicMock()
    media.generate_video = AsyncMock(return_value=result)
    return media


def video_request(**overrides) -> ConceptVideoRequest:
    fields = dict(prompt="How volcanoes erupt", grade="Grade 6", subject="Science")
    fields.update(overrides)
    return ConceptVideoRequest(**fields)


@pytest.mark.asyncio
async def test_concept_video_uses_generated_title():
    media = video_media()
    agent = summary_agent(TestModel(custom_output_args={"title": "Volcano Power", "description": "Magma rises."}))

    video = await generate_concept_video(video_request(duration=6, aspect_ratio="9:16"), agent=agent, media=media)

    assert video.title == "Volcano Power"
    assert video.description == "Magma rises."
    assert video.video_url == "data:video/mp4;base64,AA=="
    kwargs = media.generate_video.await_args.kwargs
    assert kwargs["duration_seconds"] == 6
    assert kwargs["aspect_ratio"] == "9:16"
    assert kwargs["image"] is None
    assert "How volcanoes erupt" in media.generate_video.await_args.args[0]


@pytest.mark.asyncio
async def test_concept_video_title_falls_back_to_prompt():
    def text_only(messages, info):
        return ModelResponse(parts=[TextPart(content="Sure, here is a title!")])

    video = await generate_concept_video(
        video_request(), agent=summary_agent(FunctionModel(text_only)), media=video_media()
    )

    assert video.title == "How volcanoes erupt"
    assert video.description == "An educational video."


@pytest.mark.asyncio
async def test_concept_video_forwards_seed_image():
    media = video_media()
    agent = summary_agent(TestModel(custom_output_args={"title": "t", "description": "d"}))

    await generate_concept_video(video_request(image="data:image/png;base64,aGVsbG8="), agent=agent, media=media)

    assert media.generate_video.await_args.kwargs["image"] == "data:image/png;base64,aGVsbG8="


@pytest.mark.asyncio
async def test_concept_video_timeout_propagates():
    media = MagicMock()
    media.generate_video = AsyncMock(side_effect=OperationTimeoutError("concept video did not finish"))
    agent = summary_agent(TestModel(custom_output_args={"title": "t", "description": "d"}))

    with pytest.raises(OperationTimeoutError):
        await generate_concept_video(video_request(), agent=agent, media=media)


@pytest.mark.asyncio
async def test_concept_images_skip_missing_steps():
    media = MagicMock()
    media.generate_image = AsyncMock(side_effect=["data:image/png;base64,MQ==", None, "data:image/png;base64,Mw=="])

    result = await generate_concept_images(ConceptImageRequest(concept_description="photosynthesis"), media=media)

    assert [s.step_description for s in result.steps] == [
        "Step 1: Briefly explain this part of the concept.",
        "Step 3: Briefly explain this part of the concept.",
    ]
    assert media.generate_image.await_count == 3
    assert "photosynthesis" in media.generate_image.await_args_list[0].args[0]
