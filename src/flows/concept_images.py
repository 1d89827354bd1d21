"""
Concept image flow
Breaks a concept into numbered steps with one generated illustration each.
"""
from typing import Optional

from loguru import logger

from llm.media import GenAIMediaClient, get_media_client
from models.flow_models import ConceptImageRequest, ConceptImages, ConceptStep


def build_step_prompt(request: ConceptImageRequest, step_description: str) -> str:
    prompt = f"Generate an image that illustrates {step_description} for the concept: {request.concept_description}."
    audience = " ".join(p for p in (request.grade, request.subject) if p)
    if audience:
        prompt += f" The audience is a {audience} class."
    return prompt


async def generate_concept_images(
    request: ConceptImageRequest, media: Optional[GenAIMediaClient] = None
) -> ConceptImages:
    media = media or get_media_client()
    steps = []
    for i in range(1, request.number_of_steps + 1):
        step_description = f"Step {i}: Briefly explain this part of the concept."
        image_url = await media.generate_image(build_step_prompt(request, step_description))
        if not image_url:
            logger.warning(f"No image returned for step {i}, skipping")
            continue
        steps.append(ConceptStep(step_description=step_description, image_url=image_url))

    logger.info(f"Generated {len(steps)}/{request.number_of_steps} concept images")
    return ConceptImages(steps=steps)
