"""
Shared dependencies for API routes
"""
from fastapi import Depends
from typing import Annotated
from sqlalchemy.orm import Session

from llm.media import GenAIMediaClient, get_media_client
from models.database import get_db
from services.student_store import StudentStore, get_student_store

# Dependency shortcuts
DBSession = Annotated[Session, Depends(get_db)]
Students = Annotated[StudentStore, Depends(get_student_store)]
MediaClient = Annotated[GenAIMediaClient, Depends(get_media_client)]
