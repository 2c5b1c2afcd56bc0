"""
Coach Service
The operations behind each HTTP endpoint: format a prompt, call the model,
parse its reply and, on the evaluation path, persist the exchange.

One instance is built per application and injected into the request
handlers; it holds the AI client and the session store and nothing else.
"""

import logging
from typing import List

from interview_coach.core.constants import (
    EVALUATION_MAX_TOKENS,
    FOLLOW_UP_MAX_TOKENS,
    QUESTION_MAX_TOKENS,
    RESUME_MAX_TOKENS,
)
from interview_coach.prompts import (
    Evaluation,
    evaluation_prompt,
    follow_up_prompt,
    parse_evaluation,
    parse_follow_up,
    parse_question,
    parse_resume_questions,
    question_prompt,
    resume_prompt,
)
from interview_coach.services.ai_client import AIClient
from interview_coach.services.document_processor import extract_text_from_pdf
from interview_coach.services.session_store import InterviewSessionRecord, SessionStore
from interview_coach.utils.logging_config import log_session_event

logger = logging.getLogger(__name__)


class CoachService:
    """
    Stateless request operations over a shared AI client and store.

    AIClientError and ParseError propagate to the caller; store write
    failures on the evaluation path do not.
    """

    def __init__(self, ai_client: AIClient, store: SessionStore):
        self.ai_client = ai_client
        self.store = store

    async def generate_question(self, topic: str) -> str:
        raw = await self.ai_client.generate(
            question_prompt(topic),
            purpose="question",
            max_tokens=QUESTION_MAX_TOKENS
        )
        question = parse_question(raw)
        log_session_event(logger, "question_generated", topic=topic, question_chars=len(question))
        return question

    async def evaluate_answer(self, question: str, answer: str) -> Evaluation:
        """
        Score an answer and persist the exchange.

        The record is written only after the model reply parses; a failed
        write is logged by the store and the evaluation is still returned.

        Raises:
            AIClientError: If the model call fails
            ParseError: If the reply holds no usable `{score, feedback}` object
        """
        raw = await self.ai_client.generate(
            evaluation_prompt(question, answer),
            purpose="evaluation",
            max_tokens=EVALUATION_MAX_TOKENS
        )
        evaluation = parse_evaluation(raw)
        log_session_event(logger, "answer_evaluated", score=evaluation.score)

        record = await self.store.create(
            question=question,
            answer=answer,
            score=evaluation.score,
            feedback=evaluation.feedback,
        )
        if record is None:
            log_session_event(logger, "session_save_failed")
        else:
            log_session_event(logger, "session_saved", session_id=record.id)

        return evaluation

    async def generate_follow_up(self, original_question: str, previous_answer: str) -> str:
        raw = await self.ai_client.generate(
            follow_up_prompt(original_question, previous_answer),
            purpose="follow_up",
            max_tokens=FOLLOW_UP_MAX_TOKENS
        )
        follow_up = parse_follow_up(raw)
        log_session_event(logger, "follow_up_generated", question_chars=len(follow_up))
        return follow_up

    async def generate_from_resume(self, pdf_bytes: bytes) -> List[str]:
        """
        Extract resume text and ask for questions about it.

        Raises:
            DocumentProcessingError: If no text can be extracted
            AIClientError: If the model call fails
        """
        resume_text = extract_text_from_pdf(pdf_bytes)
        raw = await self.ai_client.generate(
            resume_prompt(resume_text),
            purpose="resume",
            max_tokens=RESUME_MAX_TOKENS
        )
        questions = parse_resume_questions(raw)
        log_session_event(
            logger,
            "resume_questions_generated",
            resume_chars=len(resume_text),
            question_count=len(questions)
        )
        return questions

    async def list_sessions(self) -> List[InterviewSessionRecord]:
        return await self.store.list_all()

    async def close(self) -> None:
        await self.ai_client.close()
        await self.store.close()

