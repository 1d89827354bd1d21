"""
Base tools package for EduStudio.

Plain functions handed to agents as tools or dispatched by the assistant router:

- Mock web search for the research agent
- Simulated workspace actions (calendar, email, Keep)
- External automation workflow webhook

Usage:
    from utils.basetools import web_search, add_calendar_event

    results = web_search("photosynthesis")
"""

from .web_search import (
    web_search,
)

from .workspace_tools import (
    add_calendar_event,
    send_email,
    add_keep_note,
)

from .workflow_tools import (
    call_workflow_webhook,
    run_workflow,
)
__author__ = "Anonymous"
__description__ = "Agent tools for EduStudio"
