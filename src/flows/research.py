"""
Research agent flow
"""
from typing import Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import research_agent, run_agent
from models.flow_models import ResearchReport, ResearchRequest


async def run_research(request: ResearchRequest, agent: Optional[Agent] = None) -> ResearchReport:
    prompt = (
        f'Please provide a detailed research report on the topic: "{request.topic}".\n'
        "Use the web search tool, then synthesize the results into a Markdown report "
        "and list the sources you used."
    )
    logger.info(f"Researching topic: {request.topic}")
    report: ResearchReport = await run_agent(
        agent or research_agent(), prompt, "The research agent failed to generate a report."
    )
    logger.info(f"Research report ready with {len(report.sources)} sources")
    return report
