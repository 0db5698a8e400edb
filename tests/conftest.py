# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides test settings, in-memory images, canned model responses and a
mock transport. No network access; all I/O is mocked.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from io import BytesIO
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from imganalyzer.config.settings import Settings
from imganalyzer.logging.context import clear_context


def chat_body(content: str) -> str:
    """Minimal chat-completion response body with one choice."""
    return json.dumps({
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "gpt-test",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    })


# === FIXTURES: Response bodies ===


@pytest.fixture
def make_chat_body() -> Callable[[str], str]:
    return chat_body


# === FIXTURES: Settings ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        openai_model="gpt-test",
        openai_base_url="https://api.test",
        openai_system_prompt="You are the configured default persona.",
        request_timeout_seconds=5.0,
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


# === FIXTURES: Images ===


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory producing encoded image bytes.

    noise=True fills the image with random pixels so PNG compression cannot
    shrink it, which is how tests get uploads over the 1 MiB threshold.
    """

    def _make(
        width: int,
        height: int,
        fmt: str = "PNG",
        mode: str = "RGB",
        noise: bool = False,
    ) -> bytes:
        if noise:
            channels = len(mode)
            img = Image.frombytes(mode, (width, height), os.urandom(width * height * channels))
        else:
            img = Image.new(mode, (width, height))
        buf = BytesIO()
        img.save(buf, fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def small_png(make_image) -> bytes:
    return make_image(64, 48)


# === FIXTURES: Transport ===


@pytest.fixture
def mock_transport() -> AsyncMock:
    """Mock ChatTransport answering 'a cat'."""
    transport = AsyncMock()
    transport.send = AsyncMock(return_value=chat_body("a cat"))
    return transport
