"""
Data Models Module
Pydantic models for API request/response schemas.

Request fields are optional at the schema level so that missing or empty
values reach the handlers and are rejected there with a 400, matching the
rest of the API's error contract.
"""

from typing import List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerateQuestionRequest(BaseModel):
    """Request model for generating a question on a topic."""
    topic: Optional[str] = Field(None, description="Topic to ask about")


class GenerateQuestionResponse(BaseModel):
    """Response model for a generated question."""
    question: str


class EvaluateAnswerRequest(BaseModel):
    """Request model for evaluating an answer."""
    question: Optional[str] = Field(None, description="Question that was asked")
    answer: Optional[str] = Field(None, description="Transcript of the user's answer")


class EvaluateAnswerResponse(BaseModel):
    """Response model for an answer evaluation."""
    score: int = Field(..., description="Score from 1 to 10")
    feedback: str = Field(..., description="Short constructive feedback")


class FollowUpRequest(BaseModel):
    """Request model for generating a follow-up question."""
    model_config = ConfigDict(populate_by_name=True)

    original_question: Optional[str] = Field(None, alias="originalQuestion")
    previous_answer: Optional[str] = Field(None, alias="previousAnswer")


class FollowUpResponse(BaseModel):
    """Response model for a follow-up question."""
    model_config = ConfigDict(populate_by_name=True)

    follow_up_question: str = Field(..., alias="followUpQuestion")


class ResumeQuestionsResponse(BaseModel):
    """Response model for resume-based questions."""
    questions: List[str] = Field(default_factory=list)


class InterviewSessionOut(BaseModel):
    """A persisted question/answer/score/feedback record."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: Optional[int] = None
    question: str
    answer: str
    score: int
    feedback: str
    created_at: datetime = Field(..., alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands stored timestamps back without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    details: Optional[str] = None
