"""
Services module for the interview coach backend.
"""

from interview_coach.services.ai_client import (
    AIClient,
    AIClientError,
    GeminiClient,
    OpenAIChatClient,
    create_ai_client,
)
from interview_coach.services.coach_service import CoachService
from interview_coach.services.document_processor import (
    extract_text_from_pdf,
    DocumentProcessingError,
)
from interview_coach.services.session_store import (
    InterviewSessionRecord,
    SessionStore,
)

__all__ = [
    # AI client
    "AIClient",
    "AIClientError",
    "GeminiClient",
    "OpenAIChatClient",
    "create_ai_client",
    # Request operations
    "CoachService",
    # Document Processing
    "extract_text_from_pdf",
    "DocumentProcessingError",
    # Persistence
    "InterviewSessionRecord",
    "SessionStore",
]
