"""
Pydantic Schemas for Structured LLM Outputs
Ensures type-safe results from parsed model replies.
"""

import logging
import math

from pydantic import BaseModel, Field, field_validator

from interview_coach.core.constants import MIN_SCORE, MAX_SCORE

logger = logging.getLogger(__name__)


class Evaluation(BaseModel):
    """Score and feedback for one answer."""

    score: int = Field(
        description=f"Score from {MIN_SCORE} to {MAX_SCORE}, where {MAX_SCORE} is excellent"
    )

    feedback: str = Field(
        description="Brief constructive paragraph (2-3 sentences)",
        min_length=1
    )

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v):
        """Accept 7.5 or "8" style scores and clamp into range."""
        if isinstance(v, bool):
            raise ValueError("score must be a number")
        if isinstance(v, str):
            v = float(v.strip())
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("score must be finite")
            v = int(round(v))
        if isinstance(v, int):
            if v < MIN_SCORE:
                logger.warning(f"score {v} below minimum {MIN_SCORE}, clamping")
                return MIN_SCORE
            if v > MAX_SCORE:
                logger.warning(f"score {v} above maximum {MAX_SCORE}, clamping")
                return MAX_SCORE
        return v

    @field_validator("feedback")
    @classmethod
    def strip_feedback(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("feedback must not be blank")
        return v
