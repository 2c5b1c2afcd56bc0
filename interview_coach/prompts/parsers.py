"""
Response Parsers
Turn raw model text into structured values.

Model replies routinely arrive wrapped in markdown fences or stray prose, so
extraction is best-effort. The extraction strategies (JSON object span, first
decodable JSON array, question-line split) are separate functions; the public
parse_* functions compose them, so callers never depend on a particular strategy.
"""

import json
import logging
import re
from typing import Any, List

from pydantic import ValidationError

from interview_coach.prompts.schemas import Evaluation

logger = logging.getLogger(__name__)

# Greedy on purpose: first "{" to last "}" spans nested objects.
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_DECODER = json.JSONDecoder()

_SURROUNDING_QUOTE_RE = re.compile(r"^[\"']|[\"']$")
_LEADING_PUNCT_RE = re.compile(r"^[^\w\s\"']+")
_TRAILING_PUNCT_RE = re.compile(r"[^\w\s\"']+$")
_ENDS_WITH_QUESTION_RE = re.compile(r"[?？]$")
_TRAILING_SEPARATOR_RE = re.compile(r"[.,;:]$")

# "1.", "2)", "3 -", "- ", "* ", "• "
_ENUMERATION_PREFIX_RE = re.compile(r"^\s*(?:\d+\s*[.)\-:]|[-*•])\s*")


class ParseError(ValueError):
    """Raised when model output does not have the expected shape."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


# ============================================================================
# EXTRACTION STRATEGIES
# ============================================================================

def extract_json_object(text: str) -> dict:
    """
    Decode the first `{...}` span in `text`.

    Raises:
        ParseError: If no span exists, it is not valid JSON, or it is not an object
    """
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise ParseError("No JSON object found in model response", raw_text=text)

    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed JSON object: {e}", raw_text=text) from e

    if not isinstance(value, dict):
        raise ParseError("JSON value is not an object", raw_text=text)
    return value


def extract_json_array(text: str) -> List[Any]:
    """
    Decode the first well-formed JSON array in `text`.

    Each "[" is tried as a starting point in turn, so bracketed prose after
    the array ("based on [Project X]") does not spoil the decode.

    Raises:
        ParseError: If there is no "[" or no position decodes to a list
    """
    text = text or ""
    start = text.find("[")
    if start < 0:
        raise ParseError("No JSON array found in model response", raw_text=text)

    last_error = None
    while start >= 0:
        try:
            value, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError as e:
            last_error = e
        else:
            if isinstance(value, list):
                return value
        start = text.find("[", start + 1)

    raise ParseError(f"Malformed JSON array: {last_error}", raw_text=text)


def split_question_lines(text: str) -> List[str]:
    """
    Keep lines that end in "?", with enumeration or bullet prefixes removed.

    Lines of a broken JSON list ('"Q1?",') count too once their brackets and
    commas are stripped.
    """
    questions = []
    for line in (text or "").splitlines():
        line = _ENUMERATION_PREFIX_RE.sub("", line.strip(), count=1).strip()
        line = line.strip("[],").strip().strip("\"'").strip()
        if line.endswith("?"):
            questions.append(line)
    return questions


# ============================================================================
# PUBLIC PARSERS
# ============================================================================

def parse_question(text: str) -> str:
    """Trim and strip one leading and one trailing double quote."""
    question = (text or "").strip()
    if question.startswith('"'):
        question = question[1:]
    if question.endswith('"'):
        question = question[:-1]
    return question.strip()


def parse_evaluation(text: str) -> Evaluation:
    """
    Parse a `{score, feedback}` object out of the model reply.

    Raises:
        ParseError: If no valid evaluation object can be extracted
    """
    data = extract_json_object(text)
    try:
        return Evaluation.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Evaluation object has the wrong shape: {e}", raw_text=text) from e


def parse_follow_up(text: str) -> str:
    """
    Clean a follow-up question and make sure it ends with a question mark.

    Example:
        >>> parse_follow_up('"what was your biggest challenge"')
        'what was your biggest challenge?'
    """
    question = (text or "").strip()
    question = _SURROUNDING_QUOTE_RE.sub("", question)
    question = question.strip()
    question = _LEADING_PUNCT_RE.sub("", question)
    question = _TRAILING_PUNCT_RE.sub("", question).strip()

    if not _ENDS_WITH_QUESTION_RE.search(question):
        question = _TRAILING_SEPARATOR_RE.sub("", question) + "?"
    return question


def parse_resume_questions(text: str) -> List[str]:
    """
    Parse a list of questions; never raises.

    Tries the JSON array first and falls back to picking question lines out
    of free text. The result may be empty.
    """
    try:
        items = extract_json_array(text)
    except ParseError as e:
        logger.warning(f"Resume questions not returned as JSON, falling back to line split: {e}")
        return split_question_lines(text)

    questions = [item.strip() for item in items if isinstance(item, str) and item.strip()]
    if len(questions) != len(items):
        logger.warning(f"Dropped {len(items) - len(questions)} non-string resume question entries")
    return questions
