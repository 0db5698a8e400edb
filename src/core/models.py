# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Every model is frozen: a request's values are built once and never mutated.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# === IMAGE ===


class ImageAsset(_Frozen):
    """Decoded upload. Resizing produces a new asset, never an in-place edit."""

    data: bytes
    width: int
    height: int
    declared_mime: str

    @property
    def longest_side(self) -> int:
        return max(self.width, self.height)


class NormalizedImage(_Frozen):
    """Image ready to embed in a chat request as a data URL."""

    data_url: str
    mime_type: Literal["image/png", "image/jpeg"]
    width: int | None = None  # None when the bytes could not be decoded
    height: int | None = None
    resized: bool = False


# === PROMPT ===


class StylePreset(str, Enum):
    """Named persona template selecting the system prompt strategy."""

    DEFAULT = "default"
    DETAILED = "detailed"
    KIDS = "kids"
    EDUCATION_REPORT = "education_report"

    @classmethod
    def from_tag(cls, tag: str | StylePreset | None) -> StylePreset:
        """Map a raw form value to a preset; blank or unknown tags are DEFAULT."""
        if isinstance(tag, StylePreset):
            return tag
        if not tag or not tag.strip():
            return cls.DEFAULT
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.DEFAULT


class FeatureFlags(_Frozen):
    """Additive prompt sections, independent of the style preset."""

    need_style_analysis: bool = False
    need_emotion_analysis: bool = False

    @property
    def any_enabled(self) -> bool:
        return self.need_style_analysis or self.need_emotion_analysis


class PromptSpec(_Frozen):
    """Fully resolved system instruction."""

    system_text: str
    json_mode: bool = False


# === CHAT REQUEST ===


class ImageUrl(_Frozen):
    url: str


class TextPart(_Frozen):
    type: Literal["text"] = "text"
    text: str


class ImageUrlPart(_Frozen):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Annotated[Union[TextPart, ImageUrlPart], Field(discriminator="type")]


class ChatMessage(_Frozen):
    """Single message; system content is plain text, user content is parts."""

    role: Literal["system", "user"]
    content: str | tuple[ContentPart, ...]


class ResponseFormat(_Frozen):
    type: Literal["json_object"] = "json_object"


class ChatRequest(_Frozen):
    """Wire-level chat-completion request."""

    model: str
    messages: tuple[ChatMessage, ...]
    response_format: ResponseFormat | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON body. `response_format` is absent, not null, when unset."""
        return self.model_dump(mode="json", exclude_none=True)


# === CHAT RESPONSE ===


class ErrorKind(str, Enum):
    """Failure categories the boundary layer can map to a status code."""

    IMAGE_PROCESSING = "image_processing_error"
    TRANSPORT = "transport_error"
    RESPONSE_PARSE = "response_parse_error"


class Answer(_Frozen):
    kind: Literal["answer"] = "answer"
    text: str


class Failure(_Frozen):
    kind: Literal["failure"] = "failure"
    error: ErrorKind
    detail: str


ChatResponse = Annotated[Union[Answer, Failure], Field(discriminator="kind")]


# === EDUCATION REPORT ===


class EducationReport(BaseModel):
    """Four-field assessment returned in education_report mode.

    The pipeline never validates answers against this schema; callers that
    need the structure use parse_education_report().
    """

    content_description: str
    stylistic_features: str | list[str]
    interest_tags: list[str]
    interest_interpretation: str


def parse_education_report(answer: str) -> EducationReport | None:
    """Parse a json-mode answer. Returns None if it does not match the schema."""
    try:
        payload = json.loads(answer)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return EducationReport.model_validate(payload)
    except ValidationError:
        return None
