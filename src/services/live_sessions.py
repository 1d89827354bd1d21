"""
Realtime voice bridge
Relays browser audio to a Gemini Live session and streams model turns back as
JSON frames. Sessions are tracked per WebSocket connection.
"""
import base64
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from google import genai
from google.genai import types
from loguru import logger

from llm.base import require_api_key
from utils.config_loader import Settings, get_settings

CLIENT_AUDIO_MIME = "audio/webm"


def translate_server_message(message: Any) -> List[Dict[str, str]]:
    """Map one LiveServerMessage to the frames the browser understands"""
    frames: List[Dict[str, str]] = []
    content = getattr(message, "server_content", None)
    if content is None:
        return frames

    model_turn = getattr(content, "model_turn", None)
    for part in getattr(model_turn, "parts", None) or []:
        if getattr(part, "text", None):
            frames.append({"type": "botText", "text": part.text})
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            frames.append({"type": "botAudio", "audio": base64.b64encode(inline_data.data).decode("ascii")})

    transcription = getattr(content, "output_transcription", None)
    if transcription is not None and getattr(transcription, "text", None):
        frames.append({"type": "botText", "text": transcription.text})

    if getattr(content, "turn_complete", False):
        frames.append({"type": "turnComplete"})
    return frames


def is_user_turn_end(text: str) -> bool:
    try:
        payload = json.loads(text)
    except ValueError:
        return False
    return isinstance(payload, dict) and payload.get("type") == "userTurnEnd"


class LiveSessionRegistry:
    """Open live sessions keyed by connection id"""

    def __init__(self):
        self._sessions: Dict[str, Any] = {}

    def register(self, connection_id: str, session: Any) -> None:
        self._sessions[connection_id] = session
        logger.info(f"Live session opened: {connection_id} ({len(self._sessions)} active)")

    def remove(self, connection_id: str) -> None:
        if self._sessions.pop(connection_id, None) is not None:
            logger.info(f"Live session closed: {connection_id} ({len(self._sessions)} active)")

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


live_sessions = LiveSessionRegistry()


@asynccontextmanager
async def open_live_session(settings: Optional[Settings] = None) -> AsyncIterator[Any]:
    """Connect to the Live API; raises FeatureUnavailableError without an API key"""
    settings = settings or get_settings()
    client = genai.Client(api_key=require_api_key())
    config = types.LiveConnectConfig(
        response_modalities=["AUDIO"],
        speech_config=types.SpeechConfig(language_code="en-US"),
        output_audio_transcription=types.AudioTranscriptionConfig(),
    )
    async with client.aio.live.connect(model=settings.live_model, config=config) as session:
        yield session


async def forward_audio(session: Any, data: bytes) -> None:
    await session.send_realtime_input(audio=types.Blob(data=data, mime_type=CLIENT_AUDIO_MIME))


async def end_user_turn(session: Any) -> None:
    await session.send_realtime_input(audio_stream_end=True)


async def pump_server_messages(session: Any, send_json) -> None:
    """Forward model output to the browser until the session ends"""
    while True:
        # receive() yields the messages of a single turn; an empty turn means the session closed
        received = 0
        async for message in session.receive():
            received += 1
            for frame in translate_server_message(message):
                await send_json(frame)
        if not received:
            logger.info("Live session stream ended")
            return
