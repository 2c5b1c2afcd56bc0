"""
HTTP client for the interview coach API, used by the practice views.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from interview_coach.core.constants import PDF_MIME_TYPE, RESUME_FIELD_NAME

logger = logging.getLogger(__name__)


class CoachAPIError(Exception):
    """
    A failed API call.

    Attributes:
        message: Server-provided `error` text, or a generic description
        status_code: HTTP status, None when the server was unreachable
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CoachAPIClient:
    """Async wrapper around the five API endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def __aenter__(self) -> "CoachAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise CoachAPIError(f"Could not reach the interview coach server: {e}") from e

        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.reason_phrase or f"HTTP {response.status_code}"
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise CoachAPIError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned a non-JSON body ({response.status_code})")
            raise CoachAPIError("Invalid response from server", status_code=response.status_code) from e

    async def generate_question(self, topic: str) -> str:
        data = await self._request("POST", "/api/generate-question", json={"topic": topic})
        return data["question"]

    async def evaluate_answer(self, question: str, answer: str) -> Dict[str, Any]:
        """Returns `{"score": int, "feedback": str}`."""
        return await self._request(
            "POST",
            "/api/evaluate-answer",
            json={"question": question, "answer": answer}
        )

    async def generate_follow_up(self, original_question: str, previous_answer: str) -> str:
        data = await self._request(
            "POST",
            "/api/generate-follow-up",
            json={"originalQuestion": original_question, "previousAnswer": previous_answer}
        )
        return data["followUpQuestion"]

    async def generate_from_resume(self, content: bytes, filename: str = "resume.pdf") -> List[str]:
        files = {RESUME_FIELD_NAME: (filename, content, PDF_MIME_TYPE)}
        data = await self._request("POST", "/api/generate-from-resume", files=files)
        return list(data.get("questions", []))

    async def list_sessions(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/sessions")
