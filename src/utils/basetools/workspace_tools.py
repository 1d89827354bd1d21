"""
Workspace Tools
Calendar, email and Keep actions for the assistant.
These are simulated: the action is logged and a confirmation string is returned.
"""
from loguru import logger

from models.assistant_models import CalendarEventCall, KeepNoteCall, SendEmailCall


def add_calendar_event(call: CalendarEventCall) -> str:
    """Creates a new event in the user's calendar."""
    logger.info(f"SIMULATING: Adding calendar event {call.model_dump(exclude={'tool'})}")
    when = f"{call.date} at {call.time}" if call.time else call.date
    return f'Successfully scheduled the event: "{call.title}" on {when}.'


def send_email(call: SendEmailCall) -> str:
    """Sends an email to a specified recipient."""
    logger.info(f"SIMULATING: Sending email to {call.recipient}")
    return f'Successfully sent an email to {call.recipient} with the subject "{call.subject}".'


def add_keep_note(call: KeepNoteCall) -> str:
    """Creates a new note in Google Keep."""
    logger.info(f"SIMULATING: Adding Keep note '{call.title}'")
    return f'Successfully created a new note in Google Keep with the title "{call.title}".'
