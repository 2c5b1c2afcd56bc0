from interview_coach.core.constants import (
    EVALUATION_MAX_TOKENS,
    QUESTION_MAX_TOKENS,
    RESUME_QUESTION_COUNT,
)


def test_root(api_client):
    """Root endpoint should report the service as operational."""
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_health_reports_components(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["components"] == {"ai_client": True, "session_store": True}
    assert body["metrics"]["stored_sessions"] == 0


def test_metrics_endpoint(api_client):
    api_client.get("/")
    response = api_client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


# ----------------------------------------------------------------------------
# /api/generate-question
# ----------------------------------------------------------------------------

def test_generate_question_strips_quotes(api_client, fake_ai):
    """The returned question is trimmed with surrounding double quotes removed."""
    fake_ai.replies = ['  "Explain closures in Python."  \n']
    response = api_client.post("/api/generate-question", json={"topic": "Python"})
    assert response.status_code == 200
    assert response.json() == {"question": "Explain closures in Python."}
    assert "about Python" in fake_ai.prompts[0]
    assert fake_ai.options[0]["max_tokens"] == QUESTION_MAX_TOKENS


def test_generate_question_requires_topic(api_client, fake_ai):
    for body in ({}, {"topic": ""}, {"topic": "   "}):
        response = api_client.post("/api/generate-question", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "A topic is required."}
    assert fake_ai.prompts == []


def test_generate_question_ai_failure(api_client, fake_ai):
    fake_ai.error = RuntimeError("connection reset")
    response = api_client.post("/api/generate-question", json={"topic": "SQL"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate question from AI."}


def test_generate_question_empty_reply_is_failure(api_client, fake_ai):
    fake_ai.replies = ["   "]
    response = api_client.post("/api/generate-question", json={"topic": "SQL"})
    assert response.status_code == 500


def test_malformed_json_body_is_bad_request(api_client):
    response = api_client.post(
        "/api/generate-question",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


# ----------------------------------------------------------------------------
# /api/evaluate-answer and /api/sessions
# ----------------------------------------------------------------------------

def test_evaluate_answer_parses_fenced_json_and_saves(api_client, fake_ai):
    """A fenced JSON reply is parsed and exactly one matching record is stored."""
    fake_ai.replies = [
        'Sure! Here is my evaluation:\n```json\n'
        '{"score": 8, "feedback": "Clear answer. Add a concrete example."}\n```'
    ]
    response = api_client.post(
        "/api/evaluate-answer",
        json={"question": "What is a closure?", "answer": "A function that captures variables."},
    )
    assert response.status_code == 200
    assert response.json() == {"score": 8, "feedback": "Clear answer. Add a concrete example."}
    assert fake_ai.options[0]["max_tokens"] == EVALUATION_MAX_TOKENS

    sessions = api_client.get("/api/sessions").json()
    assert len(sessions) == 1
    session = sessions[0]
    assert session["question"] == "What is a closure?"
    assert session["answer"] == "A function that captures variables."
    assert session["score"] == 8
    assert session["feedback"] == "Clear answer. Add a concrete example."
    assert "createdAt" in session
    assert "id" in session


def test_evaluate_answer_survives_unstorable_answer(api_client, fake_ai):
    """A lone surrogate is valid JSON but cannot be written; the score still comes back."""
    fake_ai.replies = ['{"score": 7, "feedback": "Good."}']
    response = api_client.post(
        "/api/evaluate-answer",
        content=b'{"question": "Q", "answer": "bad \\ud800 text"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert response.json() == {"score": 7, "feedback": "Good."}
    assert api_client.get("/api/sessions").json() == []


def test_session_timestamp_carries_utc_offset(api_client, fake_ai):
    fake_ai.replies = ['{"score": 6, "feedback": "Fine."}']
    api_client.post("/api/evaluate-answer", json={"question": "Q", "answer": "A"})
    created_at = api_client.get("/api/sessions").json()[0]["createdAt"]
    assert created_at.endswith("Z") or created_at.endswith("+00:00")


def test_evaluate_answer_without_json_is_parse_error(api_client, fake_ai):
    """A reply with no {...} gives the parsing error and stores nothing."""
    fake_ai.replies = ["I would rate this answer quite highly."]
    response = api_client.post(
        "/api/evaluate-answer",
        json={"question": "What is a closure?", "answer": "No idea."},
    )
    assert response.status_code == 500
    assert response.json()["error"] == "Error parsing evaluation response"
    assert "details" in response.json()
    assert api_client.get("/api/sessions").json() == []


def test_evaluate_answer_ai_failure(api_client, fake_ai):
    fake_ai.error = TimeoutError("request timed out")
    response = api_client.post(
        "/api/evaluate-answer",
        json={"question": "Q", "answer": "A"},
    )
    assert response.status_code == 500
    assert response.json()["error"] == "Error evaluating answer"
    assert api_client.get("/api/sessions").json() == []


def test_evaluate_answer_requires_both_fields(api_client, fake_ai):
    for body in ({"question": "Q"}, {"answer": "A"}, {"question": "", "answer": "A"}):
        response = api_client.post("/api/evaluate-answer", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Question and answer are required"}
    assert fake_ai.prompts == []


def test_sessions_are_listed_newest_first(api_client, fake_ai):
    fake_ai.replies = [
        f'{{"score": {score}, "feedback": "Feedback {score}"}}' for score in (5, 6, 7)
    ]
    for n in range(3):
        response = api_client.post(
            "/api/evaluate-answer",
            json={"question": f"Question {n}", "answer": f"Answer {n}"},
        )
        assert response.status_code == 200

    sessions = api_client.get("/api/sessions").json()
    assert [s["question"] for s in sessions] == ["Question 2", "Question 1", "Question 0"]
    assert [s["score"] for s in sessions] == [7, 6, 5]
    assert api_client.get("/health").json()["metrics"]["stored_sessions"] == 3


# ----------------------------------------------------------------------------
# /api/generate-follow-up
# ----------------------------------------------------------------------------

def test_follow_up_appends_question_mark(api_client, fake_ai):
    fake_ai.replies = ['"what was your biggest challenge"']
    response = api_client.post(
        "/api/generate-follow-up",
        json={"originalQuestion": "Tell me about a project.", "previousAnswer": "I built a CLI."},
    )
    assert response.status_code == 200
    assert response.json() == {"followUpQuestion": "what was your biggest challenge?"}
    assert "I built a CLI." in fake_ai.prompts[0]


def test_follow_up_requires_both_fields(api_client):
    response = api_client.post("/api/generate-follow-up", json={"originalQuestion": "Q"})
    assert response.status_code == 400
    assert response.json() == {"error": "Both originalQuestion and previousAnswer are required."}


def test_follow_up_ai_failure(api_client, fake_ai):
    fake_ai.error = ConnectionError("network unreachable")
    response = api_client.post(
        "/api/generate-follow-up",
        json={"originalQuestion": "Q", "previousAnswer": "A"},
    )
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate follow-up question"


# ----------------------------------------------------------------------------
# /api/generate-from-resume
# ----------------------------------------------------------------------------

def test_resume_questions_from_pdf(api_client, fake_ai, resume_pdf):
    fake_ai.replies = [
        '```json\n["How did you use FastAPI?", "Why PostgreSQL?"]\n```'
    ]
    response = api_client.post(
        "/api/generate-from-resume",
        files={"resume": ("resume.pdf", resume_pdf, "application/pdf")},
    )
    assert response.status_code == 200
    assert response.json() == {"questions": ["How did you use FastAPI?", "Why PostgreSQL?"]}
    assert f"generate {RESUME_QUESTION_COUNT} relevant" in fake_ai.prompts[0]


def test_resume_non_pdf_rejected_before_ai_call(api_client, fake_ai):
    response = api_client.post(
        "/api/generate-from-resume",
        files={"resume": ("notes.txt", b"just some notes", "text/plain")},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF files are allowed"}
    assert fake_ai.prompts == []


def test_resume_missing_file(api_client, fake_ai):
    response = api_client.post("/api/generate-from-resume")
    assert response.status_code == 400
    assert response.json() == {"error": "No resume file uploaded."}
    assert fake_ai.prompts == []


def test_resume_too_large(settings, fake_ai):
    from fastapi.testclient import TestClient
    from interview_coach.main import create_app

    settings.max_resume_bytes = 1024 * 1024
    with TestClient(create_app(settings, ai_client=fake_ai)) as client:
        response = client.post(
            "/api/generate-from-resume",
            files={"resume": ("big.pdf", b"0" * (1024 * 1024 + 1), "application/pdf")},
        )
    assert response.status_code == 400
    assert response.json() == {"error": "Resume file exceeds the 1MB limit"}
    assert fake_ai.prompts == []


def test_resume_declared_size_rejected_before_body_is_parsed(settings, fake_ai):
    """An oversize Content-Length is refused before the form is read, so even the type check never runs."""
    from fastapi.testclient import TestClient
    from interview_coach.main import create_app

    settings.max_resume_bytes = 1024 * 1024
    with TestClient(create_app(settings, ai_client=fake_ai)) as client:
        response = client.post(
            "/api/generate-from-resume",
            files={"resume": ("big.txt", b"0" * (2 * 1024 * 1024), "text/plain")},
            headers={"Origin": settings.cors_origin},
        )
    assert response.status_code == 400
    assert response.json() == {"error": "Resume file exceeds the 1MB limit"}
    assert response.headers["access-control-allow-origin"] == settings.cors_origin
    assert fake_ai.prompts == []


def test_resume_unreadable_pdf(api_client, fake_ai):
    response = api_client.post(
        "/api/generate-from-resume",
        files={"resume": ("broken.pdf", b"this is not a pdf", "application/pdf")},
    )
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to process resume and generate questions."
    assert fake_ai.prompts == []


def test_lifespan_closes_ai_client(settings, fake_ai):
    from fastapi.testclient import TestClient
    from interview_coach.main import create_app

    app = create_app(settings, ai_client=fake_ai)
    with TestClient(app):
        assert app.state.coach_service is not None
    assert fake_ai.closed is True
    assert app.state.coach_service is None


def test_openapi_documents_error_body(api_client):
    schema = api_client.get("/openapi.json").json()
    responses = schema["paths"]["/api/evaluate-answer"]["post"]["responses"]
    assert "400" in responses and "500" in responses
    assert "ErrorResponse" in schema["components"]["schemas"]
