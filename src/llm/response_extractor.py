# src/llm/response_extractor.py — v1
"""Extract the answer text from a chat-completion response body.

Never raises: malformed bodies become Failure(RESPONSE_PARSE) so callers can
tell "reached the model but got garbage" apart from transport failures.
Does not validate JSON-mode answers against any schema.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from imganalyzer.core.models import Answer, ChatResponse, ErrorKind, Failure

logger = logging.getLogger(__name__)

_SNIPPET_LIMIT = 200


def _snippet(body: str) -> str:
    if len(body) <= _SNIPPET_LIMIT:
        return body
    return body[:_SNIPPET_LIMIT] + "..."


def _parse_failure(reason: str, body: str) -> Failure:
    logger.warning("Unparseable model response: %s", reason)
    return Failure(
        error=ErrorKind.RESPONSE_PARSE,
        detail=f"{reason} (body: {_snippet(body)!r})",
    )


def extract(raw_body: str | bytes) -> ChatResponse:
    """Return Answer(choices[0].message.content) or a parse Failure."""
    body = raw_body.decode("utf-8", errors="replace") if isinstance(raw_body, bytes) else raw_body

    try:
        root: Any = json.loads(body)
    except json.JSONDecodeError as exc:
        return _parse_failure(f"Response is not valid JSON: {exc.msg}", body)

    if not isinstance(root, dict):
        return _parse_failure("Response is not a JSON object", body)

    choices = root.get("choices")
    if not isinstance(choices, list) or not choices:
        return _parse_failure("Response has no choices", body)

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return _parse_failure("choices[0] has no message", body)

    content = message.get("content")
    if not isinstance(content, str):
        return _parse_failure("choices[0].message.content is missing or not text", body)

    return Answer(text=content)
