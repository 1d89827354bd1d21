"""
Pydantic models for the tool-calling assistant
Each tool is one variant of a closed union discriminated on `tool`.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from models.flow_models import validate_data_uri


# ============= CONVERSATION MODELS =============

class HistoryMessage(BaseModel):
    role: Literal["user", "model"]
    text: str


class AssistantRequest(BaseModel):
    query: str = ""
    image: Optional[str] = Field(default=None, description="Optional image as a data URI")
    history: List[HistoryMessage] = Field(default_factory=list)

    @field_validator('image')
    @classmethod
    def validate_image(cls, v):
        return validate_data_uri(v)

    @model_validator(mode="after")
    def require_query_or_image(self):
        if not self.query.strip() and not self.image:
            raise ValueError("A query or an image is required")
        return self


class AssistantResponse(BaseModel):
    response: str
    tool_used: Optional[str] = None
    tool_output: Optional[str] = None


# ============= TOOL CALL VARIANTS =============

class CalendarEventCall(BaseModel):
    """Create a new event in the teacher's calendar"""
    tool: Literal["add_calendar_event"] = "add_calendar_event"
    title: str = Field(description="The title of the calendar event")
    description: Optional[str] = Field(default=None, description="A brief description of the event")
    date: str = Field(description="The date of the event (YYYY-MM-DD)")
    time: Optional[str] = Field(default=None, description="The time of the event (HH:MM)")
    duration_minutes: Optional[int] = Field(default=None, ge=1, description="The duration of the event in minutes")


class SendEmailCall(BaseModel):
    """Send an email to a recipient"""
    tool: Literal["send_email"] = "send_email"
    recipient: str = Field(description="The email address of the recipient")
    subject: str = Field(description="The subject line of the email")
    body: str = Field(description="The content of the email")

    @field_validator('recipient')
    @classmethod
    def validate_recipient(cls, v):
        if '@' not in v:
            raise ValueError('Invalid email format')
        return v


class KeepNoteCall(BaseModel):
    """Create a note in Google Keep"""
    tool: Literal["add_keep_note"] = "add_keep_note"
    title: str = Field(description="The title of the note")
    content: str = Field(description="The body content of the note")


class WebSearchCall(BaseModel):
    """Search the web for a query"""
    tool: Literal["web_search"] = "web_search"
    query: str


class WorkflowCall(BaseModel):
    """Hand a mailbox request (summaries, drafts, replies) to the external automation workflow"""
    tool: Literal["run_workflow"] = "run_workflow"
    instruction: str = Field(description="What the workflow should do, in plain language")


ToolCall = Annotated[
    Union[CalendarEventCall, SendEmailCall, KeepNoteCall, WebSearchCall, WorkflowCall],
    Field(discriminator="tool"),
]


class AssistantDecision(BaseModel):
    """Routing decision of the first model pass"""
    reply: str = Field(description="Answer to the user when no tool is needed, otherwise a short note on the action")
    tool_call: Optional[ToolCall] = Field(default=None, description="The single tool to run, if any")
