# tests/unit/core/test_unit_core_models.py — v1
"""Tests for core/models.py — presets, immutability, wire dump, report parsing."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from imganalyzer.core.models import (
    ChatMessage,
    ChatRequest,
    FeatureFlags,
    ImageAsset,
    PromptSpec,
    ResponseFormat,
    StylePreset,
    TextPart,
    parse_education_report,
)


class TestStylePreset:
    def test_values(self):
        assert {s.value for s in StylePreset} == {"default", "detailed", "kids", "education_report"}

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("detailed", StylePreset.DETAILED),
            (" Kids ", StylePreset.KIDS),
            ("education_report", StylePreset.EDUCATION_REPORT),
            (StylePreset.KIDS, StylePreset.KIDS),
            (None, StylePreset.DEFAULT),
            ("", StylePreset.DEFAULT),
            ("poetic", StylePreset.DEFAULT),
        ],
    )
    def test_from_tag(self, tag, expected):
        assert StylePreset.from_tag(tag) is expected


class TestImmutability:
    def test_prompt_spec_frozen(self):
        spec = PromptSpec(system_text="x")
        with pytest.raises(ValidationError):
            spec.json_mode = True

    def test_image_asset_frozen(self):
        asset = ImageAsset(data=b"abc", width=1, height=2, declared_mime="image/png")
        assert asset.longest_side == 2
        with pytest.raises(ValidationError):
            asset.data = b"xyz"

    def test_flags_frozen(self):
        flags = FeatureFlags()
        assert flags.any_enabled is False
        with pytest.raises(ValidationError):
            flags.need_style_analysis = True


class TestChatRequestWire:
    def test_omits_absent_response_format(self):
        req = ChatRequest(model="m", messages=(ChatMessage(role="system", content="s"),))
        assert req.to_wire() == {"model": "m", "messages": [{"role": "system", "content": "s"}]}

    def test_includes_response_format(self):
        req = ChatRequest(
            model="m",
            messages=(ChatMessage(role="user", content=(TextPart(text="t"),)),),
            response_format=ResponseFormat(),
        )
        wire = req.to_wire()
        assert wire["response_format"] == {"type": "json_object"}
        assert wire["messages"][0]["content"] == [{"type": "text", "text": "t"}]

    def test_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="assistant", content="x")


class TestParseEducationReport:
    def test_valid(self):
        answer = json.dumps({
            "content_description": "A house under a sun",
            "stylistic_features": "bright colors, geometric shapes",
            "interest_tags": ["architecture", "nature", "geometry"],
            "interest_interpretation": "Possible interest in spatial reasoning.",
        })
        report = parse_education_report(answer)
        assert report is not None
        assert report.interest_tags == ["architecture", "nature", "geometry"]

    def test_missing_field(self):
        assert parse_education_report('{"content_description": "x"}') is None

    def test_not_json(self):
        assert parse_education_report("```json\n{}\n```") is None

    def test_not_object(self):
        assert parse_education_report("[]") is None
