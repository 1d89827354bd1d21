"""
Teaching method explainer and weekly planner flows
"""
from typing import Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import run_agent, teaching_methods_agent, weekly_plan_agent
from models.flow_models import TeachingMethods, TeachingMethodsRequest, WeeklyPlan, WeeklyPlanRequest


async def explain_teaching_methods(
    request: TeachingMethodsRequest, agent: Optional[Agent] = None
) -> TeachingMethods:
    agent = agent or teaching_methods_agent()
    prompt = (
        f"Lesson Content: {request.content}\n"
        f"Class Grade: {request.grade}\n"
        f"Subject: {request.subject}"
    )
    logger.info(f"Suggesting teaching methods for {request.grade} {request.subject}")
    return await run_agent(agent, prompt, "Failed to suggest teaching methods.")


async def plan_week(request: WeeklyPlanRequest, agent: Optional[Agent] = None) -> WeeklyPlan:
    agent = agent or weekly_plan_agent()
    prompt = (
        f"Teaching Goals: {request.teaching_goals}\n"
        f"Constraints: {request.constraints}\n"
        f"Language: {request.language}"
    )
    logger.info(f"Creating weekly plan in {request.language}")
    return await run_agent(agent, prompt, "Failed to create weekly plan.")
