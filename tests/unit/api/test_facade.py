# tests/unit/api/test_facade.py — v1
"""Tests for api/facade.py — end-to-end pipeline with a mocked transport."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from PIL import Image

from imganalyzer.api.facade import analyze
from imganalyzer.api.models import AnalysisInput
from imganalyzer.core.errors import TransportError
from imganalyzer.core.models import Answer, ChatRequest, ErrorKind, Failure
from imganalyzer.logging.context import get_context
from imganalyzer.prompts.personas import KIDS_PERSONA


def _sent_request(transport: AsyncMock) -> ChatRequest:
    transport.send.assert_awaited_once()
    return transport.send.await_args.args[0]


class TestAnalyzeSuccess:
    @pytest.mark.asyncio
    async def test_answer(self, settings, small_png, mock_transport):
        result = await analyze(
            AnalysisInput(image=small_png, prompt="what is this"), settings, mock_transport
        )
        assert result.ok is True
        assert result.outcome == Answer(text="a cat")
        assert result.answer == "a cat"
        assert result.error is None
        assert result.request_id.startswith("req_")
        assert result.json_mode is False
        assert result.image_resized is False

    @pytest.mark.asyncio
    async def test_request_uses_settings_and_default_persona(self, settings, small_png, mock_transport):
        await analyze(AnalysisInput(image=small_png, prompt="q"), settings, mock_transport)
        request = _sent_request(mock_transport)
        assert request.model == "gpt-test"
        assert request.messages[0].content.startswith("You are the configured default persona.")
        assert request.messages[1].content[1].image_url.url.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_web_system_prompt_overrides_default(self, settings, small_png, mock_transport):
        submission = AnalysisInput(image=small_png, prompt="q", system_prompt="Answer in French.")
        await analyze(submission, settings, mock_transport)
        assert _sent_request(mock_transport).messages[0].content.startswith("Answer in French.")

    @pytest.mark.asyncio
    async def test_kids_style(self, settings, small_png, mock_transport):
        submission = AnalysisInput(image=small_png, prompt="what is this", style="kids")
        await analyze(submission, settings, mock_transport)
        system_text = _sent_request(mock_transport).messages[0].content
        assert system_text.startswith(KIDS_PERSONA)
        assert system_text.endswith("what is this")

    @pytest.mark.asyncio
    async def test_education_report_json_mode(self, settings, small_png, mock_transport):
        submission = AnalysisInput(image=small_png, prompt="q", style="education_report")
        result = await analyze(submission, settings, mock_transport)
        assert result.json_mode is True
        assert _sent_request(mock_transport).to_wire()["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_large_image_resized(self, settings, make_image, mock_transport):
        submission = AnalysisInput(image=make_image(2000, 1000), prompt="q")
        result = await analyze(submission, settings, mock_transport)
        assert result.image_resized is True
        url = _sent_request(mock_transport).messages[1].content[1].image_url.url
        assert url.startswith("data:image/jpeg;base64,")

    @pytest.mark.asyncio
    async def test_non_image_upload_still_sent(self, settings, mock_transport):
        result = await analyze(AnalysisInput(image=b"plain text", prompt="q"), settings, mock_transport)
        assert result.ok is True
        url = _sent_request(mock_transport).messages[1].content[1].image_url.url
        assert url == "data:image/png;base64,cGxhaW4gdGV4dA=="

    @pytest.mark.asyncio
    async def test_request_id_bound_to_log_context(self, settings, small_png, mock_transport):
        result = await analyze(AnalysisInput(image=small_png, prompt="q"), settings, mock_transport)
        assert get_context().request_id == result.request_id


class TestAnalyzeFailure:
    @pytest.mark.asyncio
    async def test_transport_error(self, settings, small_png, mock_transport):
        mock_transport.send = AsyncMock(side_effect=TransportError("timed out"))
        result = await analyze(AnalysisInput(image=small_png, prompt="q"), settings, mock_transport)
        assert result.ok is False
        assert result.outcome == Failure(error=ErrorKind.TRANSPORT, detail="timed out")
        assert result.error == ErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_response_parse_error(self, settings, small_png, mock_transport):
        mock_transport.send = AsyncMock(return_value="{}")
        result = await analyze(AnalysisInput(image=small_png, prompt="q"), settings, mock_transport)
        assert result.error == ErrorKind.RESPONSE_PARSE

    @pytest.mark.asyncio
    async def test_image_processing_error_aborts(self, settings, make_image, mock_transport, monkeypatch):
        raw = make_image(2000, 1000)

        def boom(self, *args, **kwargs):
            raise OSError("corrupted")

        monkeypatch.setattr(Image.Image, "resize", boom)
        result = await analyze(AnalysisInput(image=raw, prompt="q"), settings, mock_transport)

        assert result.error == ErrorKind.IMAGE_PROCESSING
        assert "corrupted" in result.outcome.detail
        mock_transport.send.assert_not_awaited()
