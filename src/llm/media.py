"""
Media generation client
Image, speech and video calls against the Gemini / Veo APIs via google-genai.
All results are returned as data URIs.
"""
from functools import lru_cache
from typing import Any, List, Optional

from google import genai
from google.genai import types
from loguru import logger

from flows.errors import MissingOutputError
from llm.base import require_api_key
from llm.operations import wait_for_operation
from utils.config_loader import Settings, get_settings
from utils.media_uri import parse_data_uri, pcm_rate_from_mime, pcm_to_wav, to_data_uri

# Only these models accept duration/aspect ratio in GenerateVideosConfig
MODELS_WITH_VIDEO_CONFIG = {"veo-2.0-generate-001"}


def _inline_parts(response: Any) -> List[Any]:
    parts = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            if getattr(part, "inline_data", None) is not None and part.inline_data.data:
                parts.append(part)
    return parts


class GenAIMediaClient:
    def __init__(self, settings: Optional[Settings] = None, client: Optional[genai.Client] = None):
        self.settings = settings or get_settings()
        self.client = client or genai.Client(api_key=require_api_key())

    async def generate_image(self, prompt: str) -> Optional[str]:
        """Generate one image; None when the model answers with text only."""
        response = await self.client.aio.models.generate_content(
            model=self.settings.image_model,
            contents=prompt,
            # The image model needs both modalities, IMAGE alone is rejected
            config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
        )
        for part in _inline_parts(response):
            mime_type = part.inline_data.mime_type or "image/png"
            if mime_type.startswith("image/"):
                return to_data_uri(part.inline_data.data, mime_type)
        return None

    async def synthesize_speech(self, text: str, voice: Optional[str] = None) -> str:
        """Narrate text and return a WAV data URI"""
        response = await self.client.aio.models.generate_content(
            model=self.settings.tts_model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=voice or self.settings.tts_voice,
                        )
                    )
                ),
            ),
        )
        parts = _inline_parts(response)
        if not parts:
            raise MissingOutputError("Speech model returned no audio")
        blob = parts[0].inline_data
        wav = pcm_to_wav(blob.data, rate=pcm_rate_from_mime(blob.mime_type))
        return to_data_uri(wav, "audio/wav")

    async def submit_video(
        self,
        prompt: str,
        image: Optional[str] = None,
        duration_seconds: Optional[int] = None,
        aspect_ratio: Optional[str] = None,
        model: Optional[str] = None,
    ) -> types.GenerateVideosOperation:
        model = model or self.settings.video_model
        config = None
        if model in MODELS_WITH_VIDEO_CONFIG:
            config = types.GenerateVideosConfig(
                duration_seconds=duration_seconds,
                aspect_ratio=aspect_ratio,
                number_of_videos=1,
            )
        seed = None
        if image:
            mime_type, image_bytes = parse_data_uri(image)
            seed = types.Image(image_bytes=image_bytes, mime_type=mime_type)

        logger.info(f"Submitting video job to {model}")
        return await self.client.aio.models.generate_videos(
            model=model,
            prompt=prompt,
            image=seed,
            config=config,
        )

    async def refresh_operation(self, operation: types.GenerateVideosOperation) -> types.GenerateVideosOperation:
        return await self.client.aio.operations.get(operation)

    async def wait_for_video(self, operation: types.GenerateVideosOperation, label: str = "video generation"):
        return await wait_for_operation(
            operation,
            self.refresh_operation,
            interval=self.settings.poll_interval_seconds,
            timeout=self.settings.poll_timeout_seconds,
            max_polls=self.settings.max_polls,
            label=label,
        )

    async def download_video(self, operation: types.GenerateVideosOperation) -> str:
        """Fetch the first generated video of a finished job as an mp4 data URI"""
        response = getattr(operation, "response", None) or getattr(operation, "result", None)
        generated_videos = getattr(response, "generated_videos", None) if response else None
        if not generated_videos:
            raise MissingOutputError("Failed to find the generated video.")

        video = getattr(generated_videos[0], "video", None)
        if video is None:
            raise MissingOutputError("Missing video reference in response")

        video_bytes = getattr(video, "video_bytes", None)
        if not video_bytes:
            video_bytes = await self.client.aio.files.download(file=video)
        return to_data_uri(video_bytes, getattr(video, "mime_type", None) or "video/mp4")

    async def generate_video(
        self,
        prompt: str,
        image: Optional[str] = None,
        duration_seconds: Optional[int] = None,
        aspect_ratio: Optional[str] = None,
        model: Optional[str] = None,
        label: str = "video generation",
    ) -> str:
        """Submit, poll and download in one call"""
        operation = await self.submit_video(prompt, image, duration_seconds, aspect_ratio, model)
        if operation is None:
            raise MissingOutputError("Failed to start video generation operation.")
        operation = await self.wait_for_video(operation, label=label)
        return await self.download_video(operation)


@lru_cache
def get_media_client() -> GenAIMediaClient:
    return GenAIMediaClient()
