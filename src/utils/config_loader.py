from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Optional

import yaml
from pydantic import BaseModel

BASE_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = BASE_DIR / "config" / "settings.yaml"


def load_config(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with config_path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        return {}
    return data


def get_config_value(config: Dict[str, Any], keys: Iterable[str], default: Any = None) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


def resolve_value(arg_value: Any, config: Dict[str, Any], keys: Iterable[str], default: Any) -> Any:
    if arg_value is not None:
        return arg_value
    cfg_value = get_config_value(config, keys, default=None)
    return default if cfg_value is None else cfg_value


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return float(raw)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return int(raw)


class Settings(BaseModel):
    """Runtime settings, resolved from environment first and YAML second."""

    gemini_api_key: Optional[str] = None

    text_model: str = "gemini-2.0-flash"
    image_model: str = "gemini-2.0-flash-preview-image-generation"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    tts_voice: str = "Kore"
    video_model: str = "veo-2.0-generate-001"
    live_model: str = "gemini-2.0-flash-live-001"

    poll_interval_seconds: float = 5.0
    poll_timeout_seconds: Optional[float] = 600.0
    max_polls: Optional[int] = 120

    student_store: Literal["memory", "database"] = "memory"
    database_url: Optional[str] = None
    redis_url: str = "redis://redis:6379/0"
    workflow_webhook_url: Optional[str] = None

    @property
    def generation_enabled(self) -> bool:
        return bool(self.gemini_api_key)


def build_settings(config: Dict[str, Any]) -> Settings:
    """Merge environment variables over a parsed YAML config."""
    defaults = Settings()

    def bound(env_value: Any, keys: Iterable[str], default: Any) -> Any:
        # An explicit null in YAML disables the bound.
        if env_value is not None:
            return env_value
        keys = list(keys)
        parent = get_config_value(config, keys[:-1], default={})
        if isinstance(parent, dict) and keys[-1] in parent:
            return parent[keys[-1]]
        return default

    return Settings(
        gemini_api_key=resolve_value(os.getenv("GEMINI_API_KEY") or None, config, ["gemini", "api_key"], None),
        text_model=resolve_value(os.getenv("TEXT_MODEL"), config, ["models", "text"], defaults.text_model),
        image_model=resolve_value(os.getenv("IMAGE_MODEL"), config, ["models", "image"], defaults.image_model),
        tts_model=resolve_value(os.getenv("TTS_MODEL"), config, ["models", "tts"], defaults.tts_model),
        tts_voice=resolve_value(os.getenv("TTS_VOICE"), config, ["models", "tts_voice"], defaults.tts_voice),
        video_model=resolve_value(os.getenv("VIDEO_MODEL"), config, ["models", "video"], defaults.video_model),
        live_model=resolve_value(os.getenv("LIVE_MODEL"), config, ["models", "live"], defaults.live_model),
        poll_interval_seconds=resolve_value(
            _env_float("POLL_INTERVAL_SECONDS"), config, ["polling", "interval_seconds"], defaults.poll_interval_seconds
        ),
        poll_timeout_seconds=bound(
            _env_float("POLL_TIMEOUT_SECONDS"), ["polling", "timeout_seconds"], defaults.poll_timeout_seconds
        ),
        max_polls=bound(_env_int("MAX_POLLS"), ["polling", "max_polls"], defaults.max_polls),
        student_store=resolve_value(os.getenv("STUDENT_STORE"), config, ["storage", "student_store"], defaults.student_store),
        database_url=resolve_value(os.getenv("DATABASE_URL"), config, ["storage", "database_url"], None),
        redis_url=resolve_value(os.getenv("REDIS_URL"), config, ["jobs", "redis_url"], defaults.redis_url),
        workflow_webhook_url=resolve_value(
            os.getenv("WORKFLOW_WEBHOOK_URL"), config, ["assistant", "workflow_webhook_url"], None
        ),
    )


@lru_cache
def get_settings() -> Settings:
    path = os.getenv("EDUSTUDIO_CONFIG", str(DEFAULT_CONFIG_PATH))
    return build_settings(load_config(path))
