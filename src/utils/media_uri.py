"""
Data URI helpers
Media travels through the API as 'data:<mimetype>;base64,<encoded_data>'.
"""
import base64
import binascii
import io
import re
import wave
from typing import Tuple

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+(?:;[\w.+-]+=[\w.+-]+)*);base64,(?P<data>.*)$", re.DOTALL)


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI"""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """
    Split a data URI into its MIME type and decoded payload.

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    match = DATA_URI_PATTERN.match(uri.strip())
    if not match:
        raise ValueError("Expected a data URI in the form 'data:<mimetype>;base64,<encoded_data>'")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}")
    return match.group("mime"), payload


def pcm_to_wav(pcm: bytes, channels: int = 1, rate: int = 24000, sample_width: int = 2) -> bytes:
    """Wrap raw PCM from the TTS model in a WAV container"""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


def pcm_rate_from_mime(mime_type: str, default: int = 24000) -> int:
    # e.g. audio/L16;codec=pcm;rate=24000
    match = re.search(r"rate=(\d+)", mime_type or "")
    return int(match.group(1)) if match else default
