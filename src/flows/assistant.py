"""
Tool-calling assistant
A routing pass picks at most one action, the action runs, and a summary pass
turns the raw action output into the reply.
"""
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart, UserPromptPart

from flows.agents import assistant_router_agent, assistant_summary_agent, run_agent
from flows.errors import AssistantError, FeatureUnavailableError
from models.assistant_models import (
    AssistantDecision, AssistantRequest, AssistantResponse, CalendarEventCall, HistoryMessage,
    KeepNoteCall, SendEmailCall, WebSearchCall, WorkflowCall
)
from utils.basetools.web_search import web_search
from utils.basetools.workflow_tools import run_workflow
from utils.basetools.workspace_tools import add_calendar_event, add_keep_note, send_email
from utils.media_uri import parse_data_uri

ToolHandler = Callable[[Any], Awaitable[str]]


async def handle_calendar_event(call: CalendarEventCall) -> str:
    return add_calendar_event(call)


async def handle_send_email(call: SendEmailCall) -> str:
    return send_email(call)


async def handle_keep_note(call: KeepNoteCall) -> str:
    return add_keep_note(call)


async def handle_web_search(call: WebSearchCall) -> str:
    return json.dumps(web_search(call.query), indent=2)


async def handle_workflow(call: WorkflowCall) -> str:
    return await run_workflow(call.instruction)


TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "add_calendar_event": handle_calendar_event,
    "send_email": handle_send_email,
    "add_keep_note": handle_keep_note,
    "web_search": handle_web_search,
    "run_workflow": handle_workflow,
}


def to_model_history(history: List[HistoryMessage]) -> List[ModelMessage]:
    messages: List[ModelMessage] = []
    for item in history:
        if item.role == "user":
            messages.append(ModelRequest(parts=[UserPromptPart(content=item.text)]))
        else:
            messages.append(ModelResponse(parts=[TextPart(content=item.text)]))
    return messages


def build_user_prompt(request: AssistantRequest) -> Union[str, List[Any]]:
    query = request.query.strip() or "Describe this image."
    if not request.image:
        return query
    mime_type, data = parse_data_uri(request.image)
    return [query, BinaryContent(data=data, media_type=mime_type)]


def build_summary_prompt(tool_name: str, tool_output: str) -> str:
    return (
        f"The action `{tool_name}` was run and returned:\n\n{tool_output}\n\n"
        "Summarize the result of the action for the teacher."
    )


class AssistantRouter:
    def __init__(
        self,
        router_agent: Optional[Agent] = None,
        summary_agent: Optional[Agent] = None,
        handlers: Optional[Dict[str, ToolHandler]] = None,
    ):
        self._router_agent = router_agent
        self._summary_agent = summary_agent
        self.handlers = handlers if handlers is not None else TOOL_HANDLERS

    @property
    def router_agent(self) -> Agent:
        return self._router_agent or assistant_router_agent()

    @property
    def summary_agent(self) -> Agent:
        return self._summary_agent or assistant_summary_agent()

    async def run(self, request: AssistantRequest) -> AssistantResponse:
        try:
            return await self._run(request)
        except (AssistantError, FeatureUnavailableError):
            raise
        except Exception as e:
            logger.exception(f"Assistant failed: {e}")
            raise AssistantError() from e

    async def _run(self, request: AssistantRequest) -> AssistantResponse:
        result = await self.router_agent.run(
            build_user_prompt(request), message_history=to_model_history(request.history) or None
        )
        decision: AssistantDecision = result.output
        if decision is None:
            raise AssistantError()

        if decision.tool_call is None:
            logger.info("Assistant answered without a tool")
            return AssistantResponse(response=decision.reply)

        tool_name = decision.tool_call.tool
        handler = self.handlers.get(tool_name)
        if handler is None:
            raise AssistantError(f"No handler registered for tool '{tool_name}'")

        logger.info(f"Assistant invoking tool: {tool_name}")
        tool_output = await handler(decision.tool_call)

        summary = await run_agent(
            self.summary_agent,
            build_summary_prompt(tool_name, tool_output),
            "Failed to summarize the action result.",
            message_history=result.all_messages(),
        )
        return AssistantResponse(response=summary, tool_used=tool_name, tool_output=tool_output)
