# src/api/models.py — v1
"""API-level models: AnalysisInput, AnalysisResult."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from imganalyzer.core.models import (
    Answer,
    ChatResponse,
    ErrorKind,
    Failure,
    FeatureFlags,
    StylePreset,
)


class AnalysisInput(BaseModel):
    """One upload as received from the HTTP layer or the CLI."""

    model_config = ConfigDict(frozen=True)

    image: bytes
    prompt: str
    system_prompt: str | None = None
    style: StylePreset = StylePreset.DEFAULT
    need_style: bool = False
    need_emotion: bool = False

    @field_validator("style", mode="before")
    @classmethod
    def coerce_style(cls, v: object) -> StylePreset:
        """Unknown or blank style tags fall back to DEFAULT instead of failing."""
        return StylePreset.from_tag(v if isinstance(v, (str, StylePreset)) else None)

    @property
    def flags(self) -> FeatureFlags | None:
        if not (self.need_style or self.need_emotion):
            return None
        return FeatureFlags(
            need_style_analysis=self.need_style,
            need_emotion_analysis=self.need_emotion,
        )


class AnalysisResult(BaseModel):
    """Return value of facade.analyze()."""

    request_id: str
    outcome: ChatResponse
    json_mode: bool = False
    image_resized: bool = False
    latency_ms: int = Field(default=0, ge=0)

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Answer)

    @property
    def answer(self) -> str | None:
        return self.outcome.text if isinstance(self.outcome, Answer) else None

    @property
    def error(self) -> ErrorKind | None:
        return self.outcome.error if isinstance(self.outcome, Failure) else None
