"""
Workflow Tools
Forwards mailbox requests to an external automation workflow (n8n webhook).
"""
import asyncio
from typing import Optional

import requests
from loguru import logger

from flows.errors import FeatureUnavailableError
from utils.config_loader import get_settings

WEBHOOK_TIMEOUT_SECONDS = 60


def call_workflow_webhook(instruction: str, webhook_url: Optional[str] = None) -> str:
    """
    POST an instruction to the workflow webhook and return its text reply.

    Raises:
        FeatureUnavailableError: No webhook URL is configured
        requests.HTTPError: The workflow answered with an error status
    """
    if not webhook_url:
        webhook_url = get_settings().workflow_webhook_url
        if not webhook_url:
            raise FeatureUnavailableError(
                "Workflow webhook not configured. Please set WORKFLOW_WEBHOOK_URL environment variable."
            )

    logger.info(f"Calling workflow webhook with instruction: {instruction[:80]}")
    response = requests.post(
        webhook_url,
        json={"instruction": instruction},
        timeout=WEBHOOK_TIMEOUT_SECONDS,
    )
    response.raise_for_status()

    if "application/json" in response.headers.get("Content-Type", ""):
        data = response.json()
        if isinstance(data, dict):
            for key in ("output", "text", "message", "result"):
                if data.get(key):
                    return str(data[key])
        return str(data)
    return response.text


async def run_workflow(instruction: str) -> str:
    return await asyncio.to_thread(call_workflow_webhook, instruction)
