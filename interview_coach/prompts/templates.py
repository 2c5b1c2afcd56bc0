"""
Prompt Templates
The four instructions sent to the AI model.

Each builder is a pure function that interpolates caller text verbatim into a
fixed LangChain PromptTemplate. Literal braces in the example outputs are
doubled; braces inside interpolated text are left untouched by formatting.
"""

from langchain_core.prompts import PromptTemplate

from interview_coach.core.constants import RESUME_QUESTION_COUNT


# ============================================================================
# QUESTION GENERATION
# ============================================================================

QUESTION_TEMPLATE = (
    "Generate one single, concise interview question about {topic}. "
    "Do not add any preamble or explanation."
)


def question_prompt(topic: str) -> str:
    """Prompt asking for exactly one concise question on `topic`."""
    return PromptTemplate.from_template(QUESTION_TEMPLATE).format(topic=topic)


# ============================================================================
# ANSWER EVALUATION
# ============================================================================

EVALUATION_TEMPLATE = """As an expert interview coach, please evaluate the following interview response.
The question asked was: "{question}"
The user's answer was: "{answer}"

Provide your feedback in a JSON object with these exact keys:
1. "score": A numerical score from 1 to 10, where 10 is excellent.
2. "feedback": A brief, constructive paragraph (2-3 sentences) explaining the score and offering one tip for improvement.

Your entire response must be only the JSON object, with no other text or explanation.
{{
  "score": 8,
  "feedback": "Your answer was clear and relevant, but could benefit from more specific examples to strengthen your response."
}}"""


def evaluation_prompt(question: str, answer: str) -> str:
    """
    Prompt asking for a `{score, feedback}` JSON object.

    An example object is appended to steer the model's formatting.
    """
    return PromptTemplate.from_template(EVALUATION_TEMPLATE).format(
        question=question,
        answer=answer
    )


# ============================================================================
# FOLLOW-UP QUESTION
# ============================================================================

FOLLOW_UP_TEMPLATE = """You are an expert interviewer. The user was just asked the following question:
"{question}"

The user gave this answer:
"{answer}"
Based on their answer, ask one single, concise, and relevant follow-up question to dig deeper into their response.
Do not add any preamble, explanation, or quotation marks. Just provide the follow-up question itself."""


def follow_up_prompt(question: str, answer: str) -> str:
    """Prompt asking for exactly one follow-up question, no preamble or quotes."""
    return PromptTemplate.from_template(FOLLOW_UP_TEMPLATE).format(
        question=question,
        answer=answer
    )


# ============================================================================
# RESUME-BASED QUESTIONS
# ============================================================================

RESUME_TEMPLATE = """Based on the following resume text, generate {count} relevant and insightful interview questions that an interviewer might ask this candidate. Focus on their listed skills, projects, and work experience. Return the questions as a JSON array of strings.

Resume Text:
---
{resume_text}
---

Example JSON output: ["Can you tell me more about your role in Project X?", "How did you use Python at Company Y to achieve Z?"]"""


def resume_prompt(resume_text: str) -> str:
    """
    Prompt asking for a JSON array of interview questions drawn from a resume.

    Args:
        resume_text: Plain text extracted from the uploaded PDF

    Returns:
        Prompt string with an example array appended
    """
    return PromptTemplate.from_template(RESUME_TEMPLATE).format(
        count=RESUME_QUESTION_COUNT,
        resume_text=resume_text
    )
