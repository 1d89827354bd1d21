"""
Concept video flow
Title the video with a text model, then run one long-running Veo job.
"""
from typing import Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import run_agent, video_summary_agent
from flows.errors import MissingOutputError
from llm.media import GenAIMediaClient, get_media_client
from models.flow_models import ConceptVideo, ConceptVideoRequest, VideoSummary


def build_video_prompt(request: ConceptVideoRequest) -> str:
    return (
        f"A short, engaging, and educational video for a {request.grade} student studying {request.subject}. "
        f'The video should visually represent this concept: "{request.prompt}". '
        "Style: vibrant, simple, and easy-to-understand for educational purposes."
    )


async def summarize_video(request: ConceptVideoRequest, agent: Optional[Agent] = None) -> VideoSummary:
    """Title and description; falls back to the prompt itself when the model gives nothing usable"""
    prompt = (
        f'Create a concise title and a one-sentence description for an educational video about '
        f'"{request.prompt}" for a {request.grade} {request.subject} student.'
    )
    try:
        return await run_agent(agent or video_summary_agent(), prompt, "Failed to title the video.")
    except MissingOutputError:
        logger.warning("Video summary missing, using the prompt as title")
        return VideoSummary(title=request.prompt, description="An educational video.")


async def generate_concept_video(
    request: ConceptVideoRequest,
    agent: Optional[Agent] = None,
    media: Optional[GenAIMediaClient] = None,
) -> ConceptVideo:
    media = media or get_media_client()
    summary = await summarize_video(request, agent)

    logger.info(f"Generating concept video: {summary.title}")
    video_url = await media.generate_video(
        build_video_prompt(request),
        image=request.image,
        duration_seconds=request.duration,
        aspect_ratio=request.aspect_ratio,
        model=request.model,
        label="concept video",
    )
    return ConceptVideo(title=summary.title, description=summary.description, video_url=video_url)
