from functools import lru_cache
from typing import Callable, List, Optional, Type, TypeVar

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from flows.errors import FeatureUnavailableError
from utils.config_loader import get_settings

T = TypeVar('T')


def require_api_key() -> str:
    """Return the Gemini API key or raise when generation is disabled."""
    api_key = get_settings().gemini_api_key
    if not api_key:
        raise FeatureUnavailableError(
            "Gemini API key not found. Please set GEMINI_API_KEY environment variable."
        )
    return api_key


@lru_cache
def get_model() -> GoogleModel:
    settings = get_settings()
    provider = GoogleProvider(api_key=require_api_key())
    return GoogleModel(settings.text_model, provider=provider)


class AgentClient:
    def __init__(
        self, system_prompt: str, tools: List[Callable], model: Optional[Model] = None
    ):
        self.model = model or get_model()
        self.system_prompt = system_prompt
        self.tools = tools

    def create_agent(self, result_type: Optional[Type[T]] = None):
        """Creates and returns a PydanticAI Agent instance."""
        if result_type:
            agent: Agent[None, T] = Agent(
                model=self.model,
                system_prompt=self.system_prompt,
                tools=self.tools,
                output_type=result_type  # type: ignore
            )
            return agent
        return Agent(model=self.model, system_prompt=self.system_prompt, tools=self.tools)
