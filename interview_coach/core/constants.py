"""
Core Application Constants
Defines upload limits, generation budgets and client defaults.
"""

APP_NAME = "AI Interview Coach"
APP_VERSION = "1.0.0"

# Resume upload
MAX_RESUME_BYTES = 5 * 1024 * 1024  # 5MB
RESUME_FIELD_NAME = "resume"
PDF_MIME_TYPE = "application/pdf"
# Multipart boundaries and part headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024
RESUME_QUESTION_COUNT = 5

# Score range for answer evaluations
MIN_SCORE = 1
MAX_SCORE = 10

# Output token budgets per call purpose
QUESTION_MAX_TOKENS = 256
EVALUATION_MAX_TOKENS = 512
FOLLOW_UP_MAX_TOKENS = 256
RESUME_MAX_TOKENS = 1024

# Practice client
DEFAULT_ANSWER_SECONDS = 120  # 2 minutes per answer
NO_SPEECH_TIMEOUT_SECONDS = 5.0
TRANSCRIPT_PARAGRAPH_BREAK = "\n\n"
