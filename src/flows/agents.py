"""
Agent factories
Agents are created on first use; a missing API key raises FeatureUnavailableError
from the first request that needs a model.
"""
from functools import lru_cache

from loguru import logger
from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior

from data.prompts.assistant_prompts import ASSISTANT_ROUTER_PROMPT, ASSISTANT_SUMMARY_PROMPT
from data.prompts.flow_prompts import (
    LESSON_PLAN_SYNTHESIZER_PROMPT, QUIZ_GENERATOR_PROMPT, RESEARCH_AGENT_PROMPT,
    STUDENT_EVALUATOR_PROMPT, TEACHING_METHOD_EXPLAINER_PROMPT, VIDEO_SUMMARY_PROMPT,
    WEEKLY_PLANNER_PROMPT
)
from data.prompts.storybook_prompts import STORY_ANALYZER_PROMPT
from flows.errors import MissingOutputError
from llm.base import AgentClient
from models.assistant_models import AssistantDecision
from models.flow_models import (
    Quiz, ResearchReport, StudentEvaluation, TeachingMethods, VideoSummary, WeeklyPlan
)
from models.storybook_models import StoryAnalysis
from utils.basetools.web_search import web_search


@lru_cache
def quiz_agent() -> Agent:
    return AgentClient(system_prompt=QUIZ_GENERATOR_PROMPT, tools=[]).create_agent(result_type=Quiz)


@lru_cache
def teaching_methods_agent() -> Agent:
    return AgentClient(system_prompt=TEACHING_METHOD_EXPLAINER_PROMPT, tools=[]).create_agent(result_type=TeachingMethods)


@lru_cache
def weekly_plan_agent() -> Agent:
    return AgentClient(system_prompt=WEEKLY_PLANNER_PROMPT, tools=[]).create_agent(result_type=WeeklyPlan)


@lru_cache
def lesson_synthesis_agent() -> Agent:
    # Plain text output
    return AgentClient(system_prompt=LESSON_PLAN_SYNTHESIZER_PROMPT, tools=[]).create_agent()


@lru_cache
def video_summary_agent() -> Agent:
    return AgentClient(system_prompt=VIDEO_SUMMARY_PROMPT, tools=[]).create_agent(result_type=VideoSummary)


@lru_cache
def research_agent() -> Agent:
    return AgentClient(system_prompt=RESEARCH_AGENT_PROMPT, tools=[web_search]).create_agent(result_type=ResearchReport)


@lru_cache
def student_evaluation_agent() -> Agent:
    return AgentClient(system_prompt=STUDENT_EVALUATOR_PROMPT, tools=[]).create_agent(result_type=StudentEvaluation)


@lru_cache
def story_analyzer_agent() -> Agent:
    return AgentClient(system_prompt=STORY_ANALYZER_PROMPT, tools=[]).create_agent(result_type=StoryAnalysis)


@lru_cache
def assistant_router_agent() -> Agent:
    return AgentClient(system_prompt=ASSISTANT_ROUTER_PROMPT, tools=[]).create_agent(result_type=AssistantDecision)


@lru_cache
def assistant_summary_agent() -> Agent:
    return AgentClient(system_prompt=ASSISTANT_SUMMARY_PROMPT, tools=[]).create_agent()


async def run_agent(agent: Agent, prompt, failure_message: str, **kwargs):
    """
    Run an agent and return its output.

    Raises:
        MissingOutputError: The model produced no output or output that failed validation
    """
    try:
        result = await agent.run(prompt, **kwargs)
    except UnexpectedModelBehavior as e:
        logger.error(f"{failure_message} ({e})")
        raise MissingOutputError(failure_message) from e
    if result.output is None:
        raise MissingOutputError(failure_message)
    return result.output
