"""
Tests for the LLM client layer.

Covers:
- call_llm_chat: text extraction, task routing, error wrapping
- One client per event loop, exercised against a local HTTP endpoint
- Client construction with timeout and retry limits
- Model router task configs
- Prompt logger output
"""

import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from saddleup.errors import ModelError, SaddleUpError

MESSAGES = [
    {"role": "system", "content": "You are a horse trainer."},
    {"role": "user", "content": "How do I pick up a hoof?"},
]


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _make_chat_completion(content: str | None) -> MagicMock:
    """Build a mock ChatCompletion response."""
    choice = MagicMock()
    choice.message.content = content
    resp = MagicMock()
    resp.choices = [choice]
    return resp


def _status_error(status_code: int, text: str) -> openai.APIStatusError:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=None)


# ---------------------------------------------------------------------------
# call_llm_chat
# ---------------------------------------------------------------------------

class TestCallLlmChat:
    """Tests for call_llm_chat."""

    def test_returns_text(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.return_value = _make_chat_completion(
            "Run your hand down the leg and lean gently."
        )

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            result = _run(call_llm_chat(messages=MESSAGES))

        assert result == "Run your hand down the leg and lean gently."
        mock_client.chat.completions.create.assert_called_once()

    def test_sends_messages_and_task_config(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.return_value = _make_chat_completion("{}")

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            _run(call_llm_chat(messages=MESSAGES, task="plan"))

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "sonar-pro"
        assert kwargs["messages"] == MESSAGES
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 8192

    def test_logs_response(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.return_value = _make_chat_completion("ok")

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt") as mock_log:
            from saddleup.llm.client import call_llm_chat

            _run(call_llm_chat(messages=MESSAGES))

        mock_log.assert_called_once()
        assert mock_log.call_args.kwargs["response"] == "ok"
        assert mock_log.call_args.kwargs["task"] == "chat"

    def test_http_error_keeps_status_and_body(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.side_effect = _status_error(502, "bad gateway")

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt") as mock_log:
            from saddleup.llm.client import call_llm_chat

            with pytest.raises(ModelError) as exc_info:
                _run(call_llm_chat(messages=MESSAGES))

        assert exc_info.value.status_code == 502
        assert exc_info.value.body == "bad gateway"
        assert isinstance(exc_info.value.__cause__, openai.APIStatusError)
        assert "error" in mock_log.call_args.kwargs

    def test_connection_error_wrapped(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(request=MagicMock())

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            with pytest.raises(ModelError) as exc_info:
                _run(call_llm_chat(messages=MESSAGES))

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value, SaddleUpError)

    def test_missing_choices(self):
        mock_client = AsyncMock()
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            with pytest.raises(ModelError, match="no choices"):
                _run(call_llm_chat(messages=MESSAGES))

    def test_missing_message_content(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.return_value = _make_chat_completion(None)

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            with pytest.raises(ModelError, match="missing message"):
                _run(call_llm_chat(messages=MESSAGES))

    def test_unexpected_transport_error_wrapped(self):
        mock_client = AsyncMock()
        mock_client.chat.completions.create.side_effect = RuntimeError("Event loop is closed")

        with patch("saddleup.llm.client.get_raw_async_client", return_value=mock_client), \
             patch("saddleup.llm.client.log_prompt"):
            from saddleup.llm.client import call_llm_chat

            with pytest.raises(ModelError, match="Event loop is closed") as exc_info:
                _run(call_llm_chat(messages=MESSAGES))

        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestRawClient:
    """Client construction carries the transport limits."""

    def test_timeout_and_retries(self):
        from saddleup.llm.client import get_raw_async_client, reset_client

        reset_client()
        try:
            with patch("saddleup.llm.client.AsyncOpenAI") as mock_cls:
                first = get_raw_async_client()
                second = get_raw_async_client()

            assert first is second
            kwargs = mock_cls.call_args.kwargs
            assert kwargs["api_key"] == "test-key"
            assert kwargs["base_url"] == "https://api.perplexity.ai"
            assert kwargs["timeout"] == 60.0
            assert kwargs["max_retries"] == 2
            mock_cls.assert_called_once()
        finally:
            reset_client()

    def test_new_event_loop_gets_new_client(self):
        from saddleup.llm.client import get_raw_async_client, reset_client

        async def fetch_twice():
            return get_raw_async_client(), get_raw_async_client()

        reset_client()
        try:
            with patch("saddleup.llm.client.AsyncOpenAI", side_effect=lambda **_: MagicMock()) as mock_cls:
                first_a, first_b = _run(fetch_twice())
                second_a, _ = _run(fetch_twice())

            assert first_a is first_b
            assert second_a is not first_a
            assert mock_cls.call_count == 2
        finally:
            reset_client()


# ---------------------------------------------------------------------------
# Against a local HTTP endpoint
# ---------------------------------------------------------------------------

class _CompletionHandler(BaseHTTPRequestHandler):
    """Keep-alive OpenAI-compatible endpoint that always answers "hello"."""

    protocol_version = "HTTP/1.1"

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        body = json.dumps({
            "id": "cmpl-1",
            "object": "chat.completion",
            "created": 0,
            "model": "sonar-pro",
            "choices": [{
                "index": 0,
                "message": {"role": "assistant", "content": "hello"},
                "finish_reason": "stop",
            }],
        }).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_endpoint():
    """Run the completion handler on a free local port for one test."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CompletionHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


class TestSeparateEventLoops:
    """One asyncio.run per call, as the interactive CLI does per turn."""

    def test_every_run_gets_a_reply(self, local_endpoint):
        from saddleup.llm.client import call_llm_chat, reset_client

        endpoint_settings = SimpleNamespace(
            llm_api_key="test-key",
            llm_base_url=local_endpoint,
            llm_timeout_seconds=5.0,
            llm_max_retries=0,
        )

        reset_client()
        try:
            with patch("saddleup.llm.client.settings", endpoint_settings), \
                 patch("saddleup.llm.client.log_prompt"):
                replies = [_run(call_llm_chat(messages=MESSAGES)) for _ in range(3)]
        finally:
            reset_client()

        assert replies == ["hello", "hello", "hello"]


# ---------------------------------------------------------------------------
# Model router
# ---------------------------------------------------------------------------

class TestModelRouter:

    def test_chat_config(self):
        from saddleup.llm.model_router import get_task_config

        config = get_task_config("chat")

        assert config == {"model": "sonar-pro", "temperature": 0.6}

    def test_plan_config(self):
        from saddleup.llm.model_router import get_task_config

        config = get_task_config("plan")

        assert config["temperature"] == 0.3
        assert config["max_tokens"] == 8192

    def test_unknown_task_uses_chat_model(self):
        from saddleup.llm.model_router import get_task_config

        assert get_task_config("summary") == {"model": "sonar-pro"}

    def test_returns_fresh_dict(self):
        from saddleup.llm.model_router import get_task_config

        get_task_config("chat").pop("model")

        assert "model" in get_task_config("chat")


# ---------------------------------------------------------------------------
# Prompt logger
# ---------------------------------------------------------------------------

class TestPromptLogger:

    def test_disabled_writes_nothing(self, tmp_path):
        from saddleup.llm import prompt_logger

        with patch.object(prompt_logger, "LOG_PROMPTS", False), \
             patch.object(prompt_logger, "LOG_DIR", tmp_path):
            result = prompt_logger.log_prompt(task="chat", model="sonar-pro", messages=MESSAGES)

        assert result is None
        assert list(tmp_path.iterdir()) == []

    def test_writes_markdown(self, tmp_path):
        from saddleup.llm import prompt_logger

        prompt_logger.reset_session()
        try:
            with patch.object(prompt_logger, "LOG_PROMPTS", True), \
                 patch.object(prompt_logger, "LOG_DIR", tmp_path):
                path = prompt_logger.log_prompt(
                    task="plan", model="sonar-pro", messages=MESSAGES, response='{"phases": []}'
                )
                error_path = prompt_logger.log_prompt(
                    task="chat", model="sonar-pro", messages=MESSAGES, error="timeout"
                )
        finally:
            prompt_logger.reset_session()

        assert path.name == "01_plan.md"
        assert error_path.name == "02_chat.md"
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# plan call")
        assert "## system" in text
        assert "How do I pick up a hoof?" in text
        assert "## error\n\ntimeout" in error_path.read_text(encoding="utf-8")
