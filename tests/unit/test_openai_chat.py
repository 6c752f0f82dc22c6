"""Unit tests for the chat completion client."""

import asyncio
from unittest.mock import patch

import aiohttp
import pytest

from fakes import FakeResponse, FakeSession, completion_body
from recipe_generator.clients.openai_chat import OpenAIChatClient
from recipe_generator.prompts.prompts import SYSTEM_INSTRUCTION
from recipe_generator.utils.config import Config
from recipe_generator.utils.errors import (
    UpstreamError,
    UpstreamHttpError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


def make_client(session: FakeSession, api_key: str = "sk-test", **kwargs) -> OpenAIChatClient:
    return OpenAIChatClient(api_key=api_key, session=session, **kwargs)


class TestBuildPayload:
    """Test request body construction."""

    def test_payload_shape(self):
        client = OpenAIChatClient(api_key="sk-test")
        payload = client.build_payload("make soup")

        assert payload == {
            "model": "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": "make soup"},
            ],
            "max_tokens": 1500,
            "temperature": 0.8,
        }

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
        monkeypatch.setenv("MAX_TOKENS", "900")
        monkeypatch.setenv("TEMPERATURE", "0.5")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "12")
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:9999/v1/")

        client = OpenAIChatClient.from_config(Config())

        assert client.api_key == "sk-env"
        assert client.model == "gpt-test"
        assert client.max_tokens == 900
        assert client.temperature == 0.5
        assert client.timeout_seconds == 12
        assert client.base_url == "http://localhost:9999/v1"


class TestGenerate:
    """Test generate() success and failure paths."""

    @pytest.mark.asyncio
    async def test_returns_first_choice_content(self):
        session = FakeSession(FakeResponse(200, completion_body('{"title": "Soup"}')))
        client = make_client(session)

        assert await client.generate("make soup") == '{"title": "Soup"}'

    @pytest.mark.asyncio
    async def test_request_details(self):
        session = FakeSession(FakeResponse(200, completion_body("ok")))
        client = make_client(session, base_url="https://api.example.com/v1", timeout_seconds=30)

        await client.generate("make soup")

        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url == "https://api.example.com/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["json"]["messages"][1] == {"role": "user", "content": "make soup"}
        assert kwargs["timeout"].total == 30

    @pytest.mark.asyncio
    async def test_missing_key_fails_without_calling(self):
        session = FakeSession(FakeResponse(200, completion_body("ok")))
        client = make_client(session, api_key="")

        with pytest.raises(UpstreamUnavailableError):
            await client.generate("make soup")
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_http_error_keeps_status_and_body(self):
        body = '{"error": {"message": "Rate limit reached"}}'
        client = make_client(FakeSession(FakeResponse(429, body)))

        with pytest.raises(UpstreamHttpError) as exc:
            await client.generate("make soup")

        assert exc.value.status == 429
        assert exc.value.body == body

    @pytest.mark.asyncio
    async def test_unexpected_body_shape(self):
        client = make_client(FakeSession(FakeResponse(200, '{"choices": []}')))

        with pytest.raises(UpstreamHttpError, match="unexpected response"):
            await client.generate("make soup")

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        client = make_client(FakeSession(FakeResponse(200, "<html>gateway</html>")))

        with pytest.raises(UpstreamHttpError):
            await client.generate("make soup")

    @pytest.mark.asyncio
    async def test_null_content(self):
        client = make_client(FakeSession(FakeResponse(200, completion_body(None))))

        with pytest.raises(UpstreamHttpError, match="no text content"):
            await client.generate("make soup")

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = make_client(FakeSession(error=asyncio.TimeoutError()), timeout_seconds=30)

        with pytest.raises(UpstreamTimeoutError) as exc:
            await client.generate("make soup")

        assert exc.value.timeout_seconds == 30
        assert isinstance(exc.value, UpstreamError)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        client = make_client(FakeSession(error=aiohttp.ClientConnectionError("refused")))

        with pytest.raises(UpstreamUnavailableError):
            await client.generate("make soup")

    @pytest.mark.asyncio
    async def test_key_never_logged(self):
        """The bearer credential does not appear in any log call."""
        client = make_client(FakeSession(FakeResponse(500, "boom")), api_key="sk-secret-123")

        with patch("recipe_generator.clients.openai_chat.logger") as mock_logger:
            with pytest.raises(UpstreamHttpError):
                await client.generate("make soup")

        logged = " ".join(str(call) for call in mock_logger.mock_calls)
        assert "sk-secret-123" not in logged

    @pytest.mark.asyncio
    async def test_opens_own_session_when_none_given(self):
        fake = FakeSession(FakeResponse(200, completion_body("ok")))

        class FakeClientSession:
            async def __aenter__(self):
                return fake

            async def __aexit__(self, *exc_info):
                return False

        with patch("recipe_generator.clients.openai_chat.aiohttp.ClientSession", FakeClientSession):
            client = OpenAIChatClient(api_key="sk-test")
            assert await client.generate("make soup") == "ok"

        assert len(fake.calls) == 1
