"""
Practice client: API wrapper, speech capture, countdown timer and terminal views.
"""

from interview_coach.client.api import CoachAPIClient, CoachAPIError
from interview_coach.client.speech import (
    ListeningState,
    RecognitionResult,
    Recognizer,
    SpeechCapture,
    TypedRecognizer,
)
from interview_coach.client.timer import CountdownTimer, format_time
from interview_coach.client.views import PracticeView, ResumeUploaderView, SessionHistoryView

__all__ = [
    # API
    "CoachAPIClient",
    "CoachAPIError",
    # Speech
    "ListeningState",
    "RecognitionResult",
    "Recognizer",
    "SpeechCapture",
    "TypedRecognizer",
    # Timer
    "CountdownTimer",
    "format_time",
    # Views
    "PracticeView",
    "ResumeUploaderView",
    "SessionHistoryView",
]
