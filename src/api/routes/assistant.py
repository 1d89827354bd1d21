"""
Assistant routes
"""
from fastapi import APIRouter, Depends

from flows.assistant import AssistantRouter
from models.assistant_models import AssistantRequest, AssistantResponse

router = APIRouter(prefix="/api/assistant", tags=["Assistant"])


def get_assistant_router() -> AssistantRouter:
    return AssistantRouter()


@router.post("", response_model=AssistantResponse)
async def assistant_endpoint(
    request: AssistantRequest,
    assistant: AssistantRouter = Depends(get_assistant_router)
):
    """
    Ask the assistant

    The assistant may run one action (calendar, email, Keep note, web search or
    mailbox workflow) and reports which one in `tool_used`.
    """
    return await assistant.run(request)
