import json

import httpx
import pytest

from interview_coach.client.api import CoachAPIClient, CoachAPIError


def _client(handler):
    transport = httpx.MockTransport(handler)
    http = httpx.AsyncClient(base_url="http://coach.test", transport=transport)
    return CoachAPIClient("http://coach.test", client=http)


@pytest.mark.asyncio
async def test_generate_question():
    def handler(request):
        assert request.url.path == "/api/generate-question"
        assert json.loads(request.content) == {"topic": "Go"}
        return httpx.Response(200, json={"question": "What is a goroutine?"})

    async with _client(handler) as api:
        assert await api.generate_question("Go") == "What is a goroutine?"


@pytest.mark.asyncio
async def test_follow_up_uses_camel_case_fields():
    def handler(request):
        assert json.loads(request.content) == {"originalQuestion": "Q", "previousAnswer": "A"}
        return httpx.Response(200, json={"followUpQuestion": "Why?"})

    async with _client(handler) as api:
        assert await api.generate_follow_up("Q", "A") == "Why?"


@pytest.mark.asyncio
async def test_resume_upload_sends_multipart_field():
    def handler(request):
        assert b'name="resume"' in request.content
        assert b"application/pdf" in request.content
        return httpx.Response(200, json={"questions": ["One?", "Two?"]})

    async with _client(handler) as api:
        assert await api.generate_from_resume(b"%PDF-1.4", "cv.pdf") == ["One?", "Two?"]


@pytest.mark.asyncio
async def test_server_error_message_is_surfaced():
    def handler(request):
        return httpx.Response(400, json={"error": "A topic is required."})

    async with _client(handler) as api:
        with pytest.raises(CoachAPIError) as exc_info:
            await api.generate_question("")
    assert exc_info.value.message == "A topic is required."
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_non_json_error_body():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    async with _client(handler) as api:
        with pytest.raises(CoachAPIError) as exc_info:
            await api.list_sessions()
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_non_json_success_body():
    """A 200 HTML page from a proxy is a client error, not a decode crash."""
    def handler(request):
        return httpx.Response(200, text="<html>proxy</html>")

    async with _client(handler) as api:
        with pytest.raises(CoachAPIError) as exc_info:
            await api.list_sessions()
    assert exc_info.value.status_code == 200
    assert exc_info.value.message == "Invalid response from server"


@pytest.mark.asyncio
async def test_unreachable_server():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as api:
        with pytest.raises(CoachAPIError) as exc_info:
            await api.list_sessions()
    assert exc_info.value.status_code is None
