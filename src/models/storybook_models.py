"""
Pydantic models for the animated storybook pipeline
"""
from typing import List

from pydantic import BaseModel, Field

from models.flow_models import AspectRatio


class StorybookRequest(BaseModel):
    story: str = Field(min_length=20, description="The full text of the story to be animated")
    grade: str = Field(description="Grade level of the target audience")
    aspect_ratio: AspectRatio = "16:9"
    scene_duration: int = Field(default=8, ge=5, le=8, description="Seconds of video per scene")


class SceneDescriptor(BaseModel):
    """One scene of the analyzed story"""
    scene_description: str = Field(description="A concise summary of the action in this scene")
    characters: List[str] = Field(default_factory=list, description="The characters present in this scene")
    setting: str = Field(description="The location or setting of the scene")
    mood: str = Field(description="The mood or emotion of the scene")
    narration_text: str = Field(
        description="The exact narration text for this scene, including dialogue attributed to speakers (e.g., 'Leo said: ...')"
    )
    illustration_prompt: str = Field(
        description="A detailed prompt for an image generation model to create a consistent illustration for this scene"
    )


class StoryAnalysis(BaseModel):
    title: str = Field(description="A creative title for the story")
    main_character: str = Field(description="The name of the main character")
    character_sheet_prompt: str = Field(
        description="A detailed prompt to generate a consistent character reference sheet for the main character"
    )
    scenes: List[SceneDescriptor] = Field(description="The scenes that make up the story, in order")


class SceneResult(BaseModel):
    index: int
    narration_text: str
    narration_audio: str = Field(description="Data URI of the narrated audio for the scene")
    video_url: str = Field(description="Data URI of the generated video for the scene")


class Storybook(BaseModel):
    title: str
    scenes: List[SceneResult]
