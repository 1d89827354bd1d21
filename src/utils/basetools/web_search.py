"""
Web Search Tool
Mock search backend for the research agent and the assistant.
Returns three canned results built from the query.
"""
import re
from typing import Dict, List

from loguru import logger


def _slug(query: str, sep: str) -> str:
    return re.sub(r"\s+", sep, query.strip())


def web_search(query: str) -> List[Dict[str, str]]:
    """
    Performs a web search for the given query and returns a list of results.

    Args:
        query: The search query

    Returns:
        List of results, each with title, url and snippet
    """
    logger.info(f"Performing mock search for: {query}")
    slug = _slug(query.lower(), "-")
    return [
        {
            "title": f"The Ultimate Guide to {query}",
            "url": f"https://example.com/guide-to-{slug}",
            "snippet": f"An in-depth article covering all aspects of {query}, from its history to its modern applications. A must-read for anyone interested in the topic.",
        },
        {
            "title": f"A Beginner's Introduction to {query}",
            "url": f"https://example.com/intro-to-{slug}",
            "snippet": f"New to {query}? This article breaks down the basics in an easy-to-understand way, with helpful examples and illustrations.",
        },
        {
            "title": f"{query} - Wikipedia",
            "url": f"https://en.wikipedia.org/wiki/{_slug(query, '_')}",
            "snippet": f"The official Wikipedia entry for {query}, providing a comprehensive overview, historical context, and links to related subjects.",
        },
    ]
