"""
Terminal views for the practice client.

Each view holds the state of one screen and renders it as plain text.
Errors are banner strings that stay until dismissed or replaced.
"""

import logging
import mimetypes
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from interview_coach.client.api import CoachAPIClient, CoachAPIError
from interview_coach.client.speech import SpeechCapture
from interview_coach.client.timer import CountdownTimer
from interview_coach.core.constants import DEFAULT_ANSWER_SECONDS, MAX_SCORE, PDF_MIME_TYPE

logger = logging.getLogger(__name__)


def _banner(message: str) -> str:
    return f"[!] {message}"


class PracticeView:
    """
    Topic form, answer recording, evaluation and follow-up.

    The answer is the speech transcript, trimmed.
    """

    def __init__(
        self,
        api: CoachAPIClient,
        speech: SpeechCapture,
        timer: Optional[CountdownTimer] = None,
        duration: int = DEFAULT_ANSWER_SECONDS
    ):
        self.api = api
        self.speech = speech
        self.duration = duration
        self.timer = timer or CountdownTimer(duration)
        self.topic = ""
        self.question = ""
        self.error = ""
        self.evaluation: Optional[Dict[str, Any]] = None
        self.evaluation_error = ""
        self.is_loading = False
        self.is_evaluating = False
        self.is_generating_follow_up = False

    @property
    def answer(self) -> str:
        return self.speech.transcript.strip()

    @property
    def can_record(self) -> bool:
        return bool(self.question) and (self.speech.is_listening or self.timer.time > 0)

    def set_question(self, question: str) -> None:
        """Load a question picked elsewhere and start a clean attempt."""
        self.question = question
        self.evaluation = None
        self.evaluation_error = ""
        self.speech.reset_transcript()
        self.timer.reset(self.duration)

    def set_duration(self, seconds: int) -> None:
        """Change the answer time; ignored while recording."""
        if self.speech.is_listening or self.timer.is_active:
            return
        self.duration = seconds
        self.timer.reset(seconds)

    async def generate_question(self, topic: str) -> bool:
        if not topic.strip():
            self.error = "Please enter a topic"
            return False

        self.topic = topic.strip()
        self.is_loading = True
        self.error = ""
        try:
            self.question = await self.api.generate_question(self.topic)
        except CoachAPIError as e:
            self.error = e.message or "Failed to generate question. Please try again."
            return False
        finally:
            self.is_loading = False

        self.evaluation = None
        self.timer.reset(self.duration)
        self.timer.start()
        return True

    def toggle_recording(self) -> bool:
        """
        Start or stop answering.

        Returns:
            True if recording after the call
        """
        if self.speech.is_listening:
            self.speech.stop_listening()
            self.timer.stop()
            return False

        self.speech.reset_transcript()
        self.error = ""
        if self.speech.start_listening():
            self.timer.reset(self.duration)
            self.timer.start()
            return True
        return False

    async def evaluate_answer(self) -> bool:
        answer = self.answer
        if not answer:
            return False

        self.is_evaluating = True
        self.evaluation_error = ""
        try:
            self.evaluation = await self.api.evaluate_answer(self.question, answer)
        except CoachAPIError as e:
            logger.error(f"Error evaluating answer: {e}")
            self.evaluation_error = "Failed to evaluate answer. Please try again."
            return False
        finally:
            self.is_evaluating = False

        if self.speech.is_listening:
            self.speech.stop_listening()
        self.timer.stop()
        return True

    async def generate_follow_up(self) -> bool:
        answer = self.answer
        if not answer:
            return False

        self.is_generating_follow_up = True
        try:
            self.question = await self.api.generate_follow_up(self.question, answer)
        except CoachAPIError as e:
            logger.error(f"Error generating follow-up question: {e}")
            self.error = "Failed to generate follow-up question. Please try again."
            return False
        finally:
            self.is_generating_follow_up = False

        self.speech.reset_transcript()
        self.evaluation = None
        self.timer.reset(self.duration)
        self.timer.start()
        return True

    def dismiss_error(self) -> None:
        self.error = ""
        self.evaluation_error = ""
        self.speech.error = None

    def render(self) -> str:
        lines = ["AI Interview Question Generator", ""]
        for message in (self.error, self.speech.error, self.evaluation_error):
            if message:
                lines.append(_banner(message))

        if self.question:
            lines += ["Question:", f"  {self.question}", ""]
            state = "Recording" if self.speech.is_listening else "Not recording"
            lines.append(f"Time left: {self.timer.formatted_time}  ({state})")

        if self.answer:
            lines += ["", "Your answer:", f"  {self.answer}"]

        if self.evaluation:
            lines += [
                "",
                f"Score: {self.evaluation['score']}/{MAX_SCORE}",
                f"Feedback: {self.evaluation['feedback']}",
            ]
        return "\n".join(lines)

    def close(self) -> None:
        self.speech.close()
        self.timer.close()


class ResumeUploaderView:
    """Pick a PDF resume, generate questions, choose one to practice."""

    def __init__(self, api: CoachAPIClient):
        self.api = api
        self.file: Optional[Path] = None
        self.questions: List[str] = []
        self.error = ""
        self.is_loading = False

    def select_file(self, path) -> bool:
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        if path.is_file() and mime_type == PDF_MIME_TYPE:
            self.file = path
            self.error = ""
            return True

        self.error = "Please upload a valid PDF file"
        self.file = None
        return False

    async def submit(self) -> bool:
        if self.file is None:
            self.error = "Please select a PDF file first"
            return False

        self.is_loading = True
        self.error = ""
        try:
            content = self.file.read_bytes()
            self.questions = await self.api.generate_from_resume(content, self.file.name)
        except OSError as e:
            logger.error(f"Could not read {self.file}: {e}")
            self.error = "Failed to process resume. Please try again."
            return False
        except CoachAPIError as e:
            logger.error(f"Error uploading resume: {e}")
            self.error = e.message or "Failed to process resume. Please try again."
            return False
        finally:
            self.is_loading = False
        return True

    def pick(self, index: int) -> str:
        """Question at 1-based `index`."""
        if not 1 <= index <= len(self.questions):
            raise IndexError(f"Choose a question between 1 and {len(self.questions)}")
        return self.questions[index - 1]

    def dismiss_error(self) -> None:
        self.error = ""

    def render(self) -> str:
        lines = ["Generate Interview Questions from Your Resume", ""]
        if self.error:
            lines.append(_banner(self.error))
        if self.file:
            lines.append(f"Selected: {self.file.name}")
        if self.questions:
            lines += ["", "Generated Questions:"]
            lines += [f"  {i}. {question}" for i, question in enumerate(self.questions, 1)]
        return "\n".join(lines)


def format_session_date(value) -> str:
    """Render an ISO timestamp like 'March 05, 2025 02:30 PM'."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime("%B %d, %Y %I:%M %p")


class SessionHistoryView:
    """Past evaluations, newest first."""

    def __init__(self, api: CoachAPIClient):
        self.api = api
        self.sessions: List[Dict[str, Any]] = []
        self.error = ""
        self.is_loading = False

    async def load(self) -> bool:
        self.is_loading = True
        try:
            self.sessions = await self.api.list_sessions()
        except CoachAPIError as e:
            logger.error(f"Error fetching sessions: {e}")
            self.error = "Failed to load session history. Please try again later."
            return False
        finally:
            self.is_loading = False
        return True

    def dismiss_error(self) -> None:
        self.error = ""

    def render(self) -> str:
        lines = ["Session History", ""]
        if self.error:
            lines.append(_banner(self.error))
            return "\n".join(lines)

        if not self.sessions:
            lines.append("No practice sessions yet. Start practicing now!")
            return "\n".join(lines)

        for session in self.sessions:
            lines += [
                f"{format_session_date(session['createdAt'])}  Score: {session['score']}/{MAX_SCORE}",
                f"  Q: {session['question']}",
                f"  A: {session['answer']}",
                f"  Feedback: {session['feedback']}",
                "",
            ]
        return "\n".join(lines).rstrip()
