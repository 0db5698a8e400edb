# src/api/facade.py — v1
"""Public API facade — single entry point for one image question.

Usage:
    from imganalyzer.api.facade import analyze
    result = await analyze(AnalysisInput(image=data, prompt="what is this"))

The pipeline is strictly sequential:
  1. Normalize the image (decode, maybe resize, data URL)
  2. Compose the system prompt for the requested style
  3. Build the chat request
  4. Send it (the only blocking step; never retried here)
  5. Extract the answer

Failures are returned as Failure outcomes, never raised, so the boundary
layer decides how to present them.
"""

from __future__ import annotations

import logging
import time
import uuid

from imganalyzer.api.models import AnalysisInput, AnalysisResult
from imganalyzer.config.settings import Settings
from imganalyzer.core.errors import ImageProcessingError, TransportError
from imganalyzer.core.models import ErrorKind, Failure
from imganalyzer.imaging.preprocessor import normalize
from imganalyzer.llm.request_builder import build_chat_request
from imganalyzer.llm.response_extractor import extract
from imganalyzer.llm.transport import ChatTransport
from imganalyzer.logging.context import set_request_context, set_step
from imganalyzer.prompts.composer import compose

logger = logging.getLogger(__name__)


async def analyze(
    submission: AnalysisInput,
    settings: Settings | None = None,
    transport: ChatTransport | None = None,
) -> AnalysisResult:
    """Answer a question about an uploaded image.

    Args:
        submission: Image bytes, question and presentation options.
        settings: Global settings. Loaded from .env if None.
        transport: Chat transport. A temporary one is built from settings if None.

    Returns:
        AnalysisResult whose outcome is an Answer or a Failure.
    """
    settings = settings or Settings()
    request_id = _generate_request_id()
    set_request_context(request_id, submission.style.value)
    t0 = time.monotonic()

    logger.info(
        "Starting analysis: style=%s, need_style=%s, need_emotion=%s, image_bytes=%d",
        submission.style.value, submission.need_style, submission.need_emotion,
        len(submission.image),
    )

    # --- Image ---
    set_step("normalize")
    try:
        image = normalize(
            submission.image,
            max_dimension=settings.image_max_dimension,
            passthrough_max_bytes=settings.image_passthrough_max_bytes,
            jpeg_quality=settings.image_jpeg_quality,
        )
    except ImageProcessingError as exc:
        logger.error("Image processing failed: %s", exc)
        return _failure(request_id, ErrorKind.IMAGE_PROCESSING, str(exc), t0)

    # --- Prompt + request ---
    set_step("compose")
    prompt_spec = compose(
        submission.style,
        submission.flags,
        submission.prompt,
        submission.system_prompt,
        settings.openai_system_prompt,
    )
    chat_request = build_chat_request(
        prompt_spec, image.data_url, submission.prompt, settings.openai_model
    )

    # --- Remote call ---
    set_step("transport")
    try:
        if transport is None:
            async with ChatTransport.from_settings(settings) as owned:
                body = await owned.send(chat_request)
        else:
            body = await transport.send(chat_request)
    except TransportError as exc:
        logger.error("Model call failed: %s", exc)
        return _failure(
            request_id, ErrorKind.TRANSPORT, str(exc), t0,
            json_mode=prompt_spec.json_mode, image_resized=image.resized,
        )

    # --- Answer ---
    set_step("extract")
    outcome = extract(body)
    set_step(None)

    result = AnalysisResult(
        request_id=request_id,
        outcome=outcome,
        json_mode=prompt_spec.json_mode,
        image_resized=image.resized,
        latency_ms=_elapsed_ms(t0),
    )
    logger.info(
        "Analysis complete: ok=%s, json_mode=%s, latency_ms=%d",
        result.ok, result.json_mode, result.latency_ms,
    )
    return result


def _failure(
    request_id: str,
    kind: ErrorKind,
    detail: str,
    t0: float,
    json_mode: bool = False,
    image_resized: bool = False,
) -> AnalysisResult:
    set_step(None)
    return AnalysisResult(
        request_id=request_id,
        outcome=Failure(error=kind, detail=detail),
        json_mode=json_mode,
        image_resized=image_resized,
        latency_ms=_elapsed_ms(t0),
    )


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


def _generate_request_id() -> str:
    """Generate a short request ID: req_{uuid4_short}."""
    return f"req_{uuid.uuid4().hex[:12]}"
