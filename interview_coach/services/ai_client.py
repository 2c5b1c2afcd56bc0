"""
AI Client Adapter
Wraps a single external text-generation endpoint behind `generate(prompt) -> str`.

Backends:
- GeminiClient: Google Gemini via LangChain's ChatGoogleGenerativeAI
- OpenAIChatClient: any OpenAI-compatible chat-completion endpoint

Every failure (network, auth, rate limit, timeout, empty reply) is surfaced
as AIClientError. There is no retry: the caller turns the error into a 500.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from langchain_google_genai import ChatGoogleGenerativeAI
from openai import AsyncOpenAI

from interview_coach.config import Settings
from interview_coach.utils.logging_config import log_llm_call
from interview_coach.utils.metrics import track_llm_call

logger = logging.getLogger(__name__)


class AIClientError(Exception):
    """
    Single error type for any failed model call.

    Attributes:
        reason: Coarse classification (rate_limited, timeout, connection, error),
            used for logs and metrics only
    """

    def __init__(self, message: str, reason: str = "error"):
        super().__init__(message)
        self.reason = reason


def classify_llm_error(error: Exception) -> str:
    """Map an SDK exception onto a coarse failure reason."""
    error_msg = str(error).lower()
    error_type = type(error).__name__.lower()

    if "429" in error_msg or "rate limit" in error_msg or "ratelimit" in error_type \
            or "resource exhausted" in error_msg or "resourceexhausted" in error_type:
        return "rate_limited"
    if "timeout" in error_msg or "timeout" in error_type or "timed out" in error_msg:
        return "timeout"
    if any(keyword in error_msg for keyword in ("connection", "network", "unavailable")) \
            or "connection" in error_type:
        return "connection"
    return "error"


def _message_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of parts) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class AIClient(ABC):
    """
    Abstract text-generation client.
    Implementations: GeminiClient, OpenAIChatClient
    """

    model_name: str = "unknown"

    async def generate(self, prompt: str, purpose: str = "generate", **options) -> str:
        """
        Send `prompt` to the model and return its raw text reply.

        Args:
            prompt: Full instruction text
            purpose: Call label for logs and metrics (question, evaluation, ...)
            **options: max_tokens / temperature overrides

        Raises:
            AIClientError: On any failure, including an empty reply
        """
        start_time = time.perf_counter()
        try:
            with track_llm_call(purpose):
                try:
                    text = await self._complete(prompt, **options)
                except AIClientError:
                    raise
                except Exception as e:
                    reason = classify_llm_error(e)
                    raise AIClientError(f"AI request failed: {e}", reason=reason) from e

                if not text or not text.strip():
                    raise AIClientError("AI returned an empty response", reason="error")
        except AIClientError as e:
            log_llm_call(
                logger,
                purpose=purpose,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                model=self.model_name,
                success=False,
                reason=e.reason,
                error=str(e)
            )
            raise

        log_llm_call(
            logger,
            purpose=purpose,
            latency_ms=(time.perf_counter() - start_time) * 1000,
            model=self.model_name,
            response_chars=len(text)
        )
        return text

    @abstractmethod
    async def _complete(self, prompt: str, **options) -> str:
        """Backend-specific call; may raise any SDK exception."""
        pass

    async def close(self) -> None:
        """Release network resources held by the backend."""
        pass


class GeminiClient(AIClient):
    """Hosted Gemini model through langchain-google-genai."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
        llm: Optional[ChatGoogleGenerativeAI] = None
    ):
        self.model_name = model_name
        self.llm = llm or ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        logger.info(f"Initialized GeminiClient (model={model_name})")

    def _with_options(self, max_tokens: Optional[int] = None, temperature: Optional[float] = None):
        update: Dict[str, Any] = {}
        if max_tokens is not None:
            update["max_output_tokens"] = max_tokens
        if temperature is not None:
            update["temperature"] = temperature
        if not update:
            return self.llm
        return self.llm.model_copy(update=update)

    async def _complete(self, prompt: str, **options) -> str:
        llm = self._with_options(**options)
        message = await llm.ainvoke(prompt)
        return _message_text(message.content)


class OpenAIChatClient(AIClient):
    """Chat-completion endpoint through the openai SDK."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 1024,
        client: Optional[AsyncOpenAI] = None
    ):
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.client = client or AsyncOpenAI(base_url=base_url, api_key=api_key or "not-needed")
        logger.info(f"Initialized OpenAIChatClient (model={model_name})")

    async def _complete(self, prompt: str, max_tokens: Optional[int] = None,
                        temperature: Optional[float] = None) -> str:
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens or self.max_output_tokens,
            temperature=self.temperature if temperature is None else temperature,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()


def create_ai_client(settings: Settings) -> AIClient:
    """
    Build the AI client selected by `settings.ai_backend`.

    Raises:
        ValueError: On an unknown backend name
    """
    backend = settings.ai_backend.lower()

    if backend == "gemini":
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; AI calls will fail")
        return GeminiClient(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            temperature=settings.ai_temperature,
            max_output_tokens=settings.ai_max_output_tokens,
        )

    if backend == "openai":
        return OpenAIChatClient(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            base_url=settings.openai_base_url,
            temperature=settings.ai_temperature,
            max_output_tokens=settings.ai_max_output_tokens,
        )

    raise ValueError(f"Unknown AI backend: {settings.ai_backend}. Must be 'gemini' or 'openai'")
