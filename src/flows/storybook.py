"""
Animated storybook pipeline
Story analysis, character reference image, parallel narration audio, then one
polled video job per scene. Scene order is preserved from analysis to result.
"""
import asyncio
from typing import Callable, List, Optional

from loguru import logger
from pydantic_ai import Agent

from data.prompts.storybook_prompts import ART_STYLE, SCENE_ANIMATION_TEMPLATE
from flows.agents import run_agent, story_analyzer_agent
from flows.errors import FlowError, MissingOutputError, SceneGenerationError
from llm.media import GenAIMediaClient, get_media_client
from models.storybook_models import SceneDescriptor, SceneResult, StoryAnalysis, Storybook, StorybookRequest

ProgressCallback = Callable[[float, str], None]


def _reason(error: BaseException) -> str:
    if isinstance(error, FlowError):
        return error.message
    return str(error) or error.__class__.__name__


def build_analysis_prompt(request: StorybookRequest) -> str:
    return (
        f'Story: "{request.story}"\n\n'
        f"Grade Level: {request.grade}\n"
        f"Art Style: {ART_STYLE}\n\n"
        "Produce a structured analysis based on the above."
    )


async def analyze_story(request: StorybookRequest, agent: Optional[Agent] = None) -> StoryAnalysis:
    analysis: StoryAnalysis = await run_agent(
        agent or story_analyzer_agent(), build_analysis_prompt(request), "Failed to analyze the story."
    )
    if not analysis.scenes:
        raise MissingOutputError("Failed to analyze the story.")
    logger.info(f"Story analyzed: '{analysis.title}' with {len(analysis.scenes)} scenes")
    return analysis


class StorybookPipeline:
    """
    Runs the storybook stages in order.

    Only the reference image stage is optional. Any audio or video failure ends
    the run with a SceneGenerationError naming the scene; partial storybooks are
    never returned.
    """

    def __init__(self, media: Optional[GenAIMediaClient] = None, analyzer: Optional[Agent] = None):
        self.media = media or get_media_client()
        self.analyzer = analyzer

    async def generate_reference_image(self, analysis: StoryAnalysis) -> Optional[str]:
        try:
            image = await self.media.generate_image(analysis.character_sheet_prompt)
        except Exception as e:
            logger.warning(f"Character sheet generation failed, continuing without it: {e}")
            return None
        if not image:
            logger.warning("Character sheet generation returned no image, continuing without it")
        return image

    async def generate_narration(self, scenes: List[SceneDescriptor]) -> List[str]:
        results = await asyncio.gather(
            *(self.media.synthesize_speech(scene.narration_text) for scene in scenes),
            return_exceptions=True,
        )
        # gather keeps input order, so results[i] belongs to scene i
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.error(f"Audio generation failed for scene {index + 1}: {result}")
                raise SceneGenerationError("audio", index, _reason(result)) from result
        return list(results)  # type: ignore[arg-type]

    async def generate_scene_video(
        self, index: int, scene: SceneDescriptor, request: StorybookRequest, reference_image: Optional[str]
    ) -> str:
        try:
            return await self.media.generate_video(
                SCENE_ANIMATION_TEMPLATE.format(illustration_prompt=scene.illustration_prompt),
                image=reference_image,
                duration_seconds=request.scene_duration,
                aspect_ratio=request.aspect_ratio,
                label=f"scene {index + 1} video",
            )
        except Exception as e:
            logger.error(f"Video generation failed for scene {index + 1}: {e}")
            raise SceneGenerationError("video", index, _reason(e)) from e

    async def run(self, request: StorybookRequest, on_progress: Optional[ProgressCallback] = None) -> Storybook:
        def report(progress: float, message: str) -> None:
            logger.info(f"[storybook {progress:.0%}] {message}")
            if on_progress:
                on_progress(progress, message)

        report(0.05, "Analyzing story")
        analysis = await analyze_story(request, self.analyzer)
        scene_count = len(analysis.scenes)
        report(0.2, f"Story analyzed into {scene_count} scenes")

        reference_image = await self.generate_reference_image(analysis)
        report(0.3, "Character sheet ready" if reference_image else "Continuing without character sheet")

        narration = await self.generate_narration(analysis.scenes)
        report(0.5, "Narration audio ready")

        # Sequential to stay within the video model's rate limits
        scenes: List[SceneResult] = []
        for index, scene in enumerate(analysis.scenes):
            video_url = await self.generate_scene_video(index, scene, request, reference_image)
            scenes.append(SceneResult(
                index=index,
                narration_text=scene.narration_text,
                narration_audio=narration[index],
                video_url=video_url,
            ))
            report(0.5 + 0.5 * (index + 1) / scene_count, f"Scene {index + 1}/{scene_count} animated")

        report(1.0, "Storybook ready")
        return Storybook(title=analysis.title, scenes=scenes)
