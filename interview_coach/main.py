"""
FastAPI Main Application
Backend server for the AI interview coach.

Endpoints:
- GET  /api/sessions             past evaluations, newest first
- POST /api/generate-question    one question on a topic
- POST /api/evaluate-answer      score + feedback, persisted best-effort
- POST /api/generate-follow-up   one follow-up question
- POST /api/generate-from-resume questions drawn from an uploaded PDF
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from interview_coach.config import Settings
from interview_coach.core.constants import APP_NAME, APP_VERSION, MULTIPART_OVERHEAD_BYTES, PDF_MIME_TYPE
from interview_coach.core.models import (
    EvaluateAnswerRequest,
    EvaluateAnswerResponse,
    FollowUpRequest,
    FollowUpResponse,
    GenerateQuestionRequest,
    GenerateQuestionResponse,
    ErrorResponse,
    InterviewSessionOut,
    ResumeQuestionsResponse,
)
from interview_coach.prompts import ParseError
from interview_coach.services.ai_client import AIClient, AIClientError, create_ai_client
from interview_coach.services.coach_service import CoachService
from interview_coach.services.document_processor import DocumentProcessingError
from interview_coach.services.session_store import SessionStore
from interview_coach.utils.metrics import record_http_request

logger = logging.getLogger(__name__)

router = APIRouter()

RESUME_UPLOAD_PATH = "/api/generate-from-resume"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": ErrorResponse, "description": "AI, parsing or storage failure"},
}


def api_error(status_code: int, error: str, details: Optional[str] = None) -> HTTPException:
    """Build an HTTPException whose body is `{"error": ..., "details": ...}`."""
    content = {"error": error}
    if details:
        content["details"] = details
    return HTTPException(status_code=status_code, detail=content)


def get_coach_service(request: Request) -> CoachService:
    service = getattr(request.app.state, "coach_service", None)
    if service is None:
        raise api_error(status.HTTP_503_SERVICE_UNAVAILABLE, "Service not initialized")
    return service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def resume_too_large(max_bytes: int) -> str:
    return f"Resume file exceeds the {max_bytes // (1024 * 1024)}MB limit"


async def read_resume_upload(
    resume: Optional[UploadFile] = File(None, description="Resume file (PDF, max 5MB)"),
    settings: Settings = Depends(get_settings),
) -> bytes:
    """
    Validate the `resume` multipart field and return its bytes.

    Runs as a dependency so that wrong types and oversize files are rejected
    before the handler, and therefore before any AI call. Uploads whose
    Content-Length is already over the limit never get this far; see
    `limit_resume_upload` in create_app.
    """
    if resume is None or not resume.filename:
        raise api_error(status.HTTP_400_BAD_REQUEST, "No resume file uploaded.")

    if resume.content_type != PDF_MIME_TYPE:
        logger.warning(f"Rejected resume upload {resume.filename!r} with type {resume.content_type}")
        raise api_error(status.HTTP_400_BAD_REQUEST, "Only PDF files are allowed")

    content = await resume.read(settings.max_resume_bytes + 1)
    if len(content) > settings.max_resume_bytes:
        logger.warning(f"Rejected resume upload {resume.filename!r}: larger than {settings.max_resume_bytes} bytes")
        raise api_error(status.HTTP_400_BAD_REQUEST, resume_too_large(settings.max_resume_bytes))

    logger.info(f"Received resume upload {resume.filename!r} ({len(content)} bytes)")
    return content


# ============================================================================
# ROUTES
# ============================================================================

@router.get("/")
async def root():
    """Root endpoint - simple API info."""
    return {
        "message": f"{APP_NAME} Backend is running!",
        "status": "operational",
        "version": APP_VERSION
    }


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns:
        Health status with component checks; 503 when degraded
    """
    service: Optional[CoachService] = getattr(request.app.state, "coach_service", None)
    components = {
        "ai_client": service is not None,
        "session_store": False,
    }
    stored_sessions = None

    if service is not None:
        try:
            stored_sessions = await service.store.count()
            components["session_store"] = True
        except Exception as e:
            logger.error(f"Session store health check failed: {e}")

    health_status = {
        "status": "healthy" if all(components.values()) else "degraded",
        "version": APP_VERSION,
        "timestamp": time.time(),
        "components": components,
        "metrics": {"stored_sessions": stored_sessions},
    }

    if health_status["status"] != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health_status
        )
    return health_status


@router.get("/metrics")
async def metrics():
    """Prometheus-compatible metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/api/sessions", response_model=List[InterviewSessionOut], responses=ERROR_RESPONSES)
async def list_sessions(service: CoachService = Depends(get_coach_service)):
    """All saved interview sessions, most recent first."""
    try:
        records = await service.list_sessions()
    except Exception as e:
        logger.error(f"Error fetching sessions: {e}", exc_info=True)
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch interview sessions",
            details=str(e)
        )
    return [InterviewSessionOut.model_validate(record) for record in records]


@router.post("/api/generate-question", response_model=GenerateQuestionResponse, responses=ERROR_RESPONSES)
async def generate_question(
    body: GenerateQuestionRequest,
    service: CoachService = Depends(get_coach_service)
):
    """Generate one interview question about `topic`."""
    if not body.topic or not body.topic.strip():
        raise api_error(status.HTTP_400_BAD_REQUEST, "A topic is required.")

    try:
        question = await service.generate_question(body.topic)
    except AIClientError as e:
        logger.error(f"Error calling AI for question generation: {e}")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate question from AI.")

    return GenerateQuestionResponse(question=question)


@router.post("/api/evaluate-answer", response_model=EvaluateAnswerResponse, responses=ERROR_RESPONSES)
async def evaluate_answer(
    body: EvaluateAnswerRequest,
    service: CoachService = Depends(get_coach_service)
):
    """
    Score an answer from 1 to 10 with short feedback.

    The exchange is saved on success; a failed save does not fail the request.
    """
    if not body.question or not body.answer:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Question and answer are required")

    try:
        evaluation = await service.evaluate_answer(body.question, body.answer)
    except ParseError as e:
        logger.error(f"Error parsing AI evaluation response: {e} | raw={e.raw_text!r}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error parsing evaluation response",
            details=str(e)
        )
    except AIClientError as e:
        logger.error(f"Error in evaluation: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error evaluating answer",
            details=str(e)
        )

    return EvaluateAnswerResponse(score=evaluation.score, feedback=evaluation.feedback)


@router.post("/api/generate-follow-up", response_model=FollowUpResponse, responses=ERROR_RESPONSES)
async def generate_follow_up(
    body: FollowUpRequest,
    service: CoachService = Depends(get_coach_service)
):
    """Ask one follow-up question that digs into the previous answer."""
    if not body.original_question or not body.previous_answer:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Both originalQuestion and previousAnswer are required."
        )

    try:
        follow_up = await service.generate_follow_up(body.original_question, body.previous_answer)
    except AIClientError as e:
        logger.error(f"Error generating follow-up question: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to generate follow-up question",
            details=str(e)
        )

    return FollowUpResponse(follow_up_question=follow_up)


@router.post(RESUME_UPLOAD_PATH, response_model=ResumeQuestionsResponse, responses=ERROR_RESPONSES)
async def generate_from_resume(
    pdf_bytes: bytes = Depends(read_resume_upload),
    service: CoachService = Depends(get_coach_service)
):
    """Generate interview questions from an uploaded resume PDF."""
    try:
        questions = await service.generate_from_resume(pdf_bytes)
    except (DocumentProcessingError, AIClientError) as e:
        logger.error(f"Error processing resume: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to process resume and generate questions.",
            details=str(e)
        )

    return ResumeQuestionsResponse(questions=questions)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    ai_client: Optional[AIClient] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The AI client and store are created in the lifespan from `settings`
    unless they are passed in.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the coach service on startup and release it on shutdown."""
        try:
            client = ai_client or create_ai_client(settings)
            session_store = store or SessionStore(settings.database_url)
            await session_store.init()
            app.state.coach_service = CoachService(client, session_store)
            logger.info(f"✓ Coach service initialized (backend={settings.ai_backend})")
        except Exception as e:
            logger.error(f"Failed to initialize application: {e}")
            raise

        yield

        logger.info("Shutting down application...")
        try:
            await app.state.coach_service.close()
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
        app.state.coach_service = None
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=f"{APP_NAME} API",
        description="Generates interview questions, scores spoken answers and keeps a practice history",
        version=APP_VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.coach_service = None

    # Registered before CORSMiddleware so its rejections still get CORS headers
    @app.middleware("http")
    async def limit_resume_upload(request: Request, call_next):
        """Refuse resume uploads by declared size, before the multipart body is buffered."""
        if request.method == "POST" and request.url.path == RESUME_UPLOAD_PATH:
            declared = request.headers.get("content-length", "")
            max_bytes = request.app.state.settings.max_resume_bytes
            if declared.isdigit() and int(declared) > max_bytes + MULTIPART_OVERHEAD_BYTES:
                logger.warning(f"Rejected resume upload with Content-Length {declared}")
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": resume_too_large(max_bytes)}
                )
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def http_metrics(request: Request, call_next):
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route = request.scope.get("route")
            endpoint = getattr(route, "path", "unmatched")
            record_http_request(request.method, endpoint, status_code, time.perf_counter() - start_time)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Render HTTP errors as `{"error": ...}` bodies."""
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Malformed request bodies are client errors (400), not 422."""
        logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Catch-all for unexpected exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from interview_coach.utils.logging_config import setup_logging

    settings = app.state.settings
    setup_logging(level=settings.log_level, json_format=settings.json_logging, log_file=settings.log_file)
    uvicorn.run(app, host=settings.host, port=settings.port)
