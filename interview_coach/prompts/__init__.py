"""
Prompts Module
LLM prompt templates and the parsers that read the model's replies.

Provides:
- Prompt builders for question, evaluation, follow-up and resume calls
- Best-effort parsers that tolerate markdown fences and stray prose
- Pydantic schema for the evaluation result
"""

# Prompt templates
from .templates import (
    question_prompt,
    evaluation_prompt,
    follow_up_prompt,
    resume_prompt
)

# Response parsers
from .parsers import (
    ParseError,
    extract_json_object,
    extract_json_array,
    split_question_lines,
    parse_question,
    parse_evaluation,
    parse_follow_up,
    parse_resume_questions
)

from .schemas import Evaluation


__all__ = [
    # Prompts
    'question_prompt',
    'evaluation_prompt',
    'follow_up_prompt',
    'resume_prompt',

    # Parsers
    'ParseError',
    'extract_json_object',
    'extract_json_array',
    'split_question_lines',
    'parse_question',
    'parse_evaluation',
    'parse_follow_up',
    'parse_resume_questions',

    # Schemas
    'Evaluation',
]
