# src/llm/request_builder.py — v1
"""Assemble the chat-completion request from a prompt and an image data URL."""

from __future__ import annotations

from imganalyzer.core.models import (
    ChatMessage,
    ChatRequest,
    ImageUrl,
    ImageUrlPart,
    PromptSpec,
    ResponseFormat,
    TextPart,
)


def build_chat_request(
    prompt_spec: PromptSpec,
    data_url: str,
    raw_user_prompt: str,
    model: str,
) -> ChatRequest:
    """Build a system + user message pair.

    The user content is always [text, image] in that order. response_format
    is only set in JSON mode.
    """
    system_message = ChatMessage(role="system", content=prompt_spec.system_text)
    user_message = ChatMessage(
        role="user",
        content=(
            TextPart(text=raw_user_prompt),
            ImageUrlPart(image_url=ImageUrl(url=data_url)),
        ),
    )
    return ChatRequest(
        model=model,
        messages=(system_message, user_message),
        response_format=ResponseFormat() if prompt_spec.json_mode else None,
    )
