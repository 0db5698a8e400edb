# src/prompts/composer.py — v1
"""Prompt composition: style preset + feature flags → PromptSpec.

Resolution order:
  1. Fixed persona for DETAILED, KIDS and EDUCATION_REPORT
  2. DEFAULT: web-supplied system prompt, then configured default, then fallback
  3. Feature-flag sections (style, then emotion), skipped in JSON mode
  4. The user's question, repeated as the final instruction

Pure function of its inputs; no state survives a call.
"""

from __future__ import annotations

import logging

from imganalyzer.core.models import FeatureFlags, PromptSpec, StylePreset
from imganalyzer.prompts.personas import (
    DETAILED_PERSONA,
    EDUCATION_REPORT_PERSONA,
    EMOTION_ANALYSIS_SECTION,
    FALLBACK_PERSONA,
    KIDS_PERSONA,
    QUESTION_LINE_TEMPLATE,
    STYLE_ANALYSIS_SECTION,
)

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"

# DEFAULT has no fixed persona; it is resolved from the caller's prompts.
_FIXED_PERSONAS: dict[StylePreset, str] = {
    StylePreset.DETAILED: DETAILED_PERSONA,
    StylePreset.KIDS: KIDS_PERSONA,
    StylePreset.EDUCATION_REPORT: EDUCATION_REPORT_PERSONA,
}

_JSON_MODE_STYLES = frozenset({StylePreset.EDUCATION_REPORT})


def _non_blank(value: str | None) -> bool:
    return value is not None and bool(value.strip())


def resolve_persona(
    style: StylePreset,
    web_system_prompt: str | None = None,
    default_system_prompt: str | None = None,
) -> str:
    """Return the base persona text for a style."""
    if style in _FIXED_PERSONAS:
        return _FIXED_PERSONAS[style]
    if _non_blank(web_system_prompt):
        return web_system_prompt  # type: ignore[return-value]
    if _non_blank(default_system_prompt):
        return default_system_prompt  # type: ignore[return-value]
    return FALLBACK_PERSONA


def flag_sections(flags: FeatureFlags | None) -> list[str]:
    """Extra instruction blocks in fixed order: style analysis, then emotion."""
    if flags is None:
        return []
    sections: list[str] = []
    if flags.need_style_analysis:
        sections.append(STYLE_ANALYSIS_SECTION)
    if flags.need_emotion_analysis:
        sections.append(EMOTION_ANALYSIS_SECTION)
    return sections


def compose(
    style: StylePreset | str | None,
    flags: FeatureFlags | None,
    raw_user_prompt: str,
    web_system_prompt: str | None = None,
    default_system_prompt: str | None = None,
) -> PromptSpec:
    """Build the system instruction for one request.

    Args:
        style: Preset or raw form tag (unknown tags fall back to DEFAULT).
        flags: Optional feature flags. Ignored for JSON-mode styles.
        raw_user_prompt: The user's literal question.
        web_system_prompt: System prompt supplied with the upload, if any.
        default_system_prompt: Configured default persona.

    Returns:
        PromptSpec with the finished system text and JSON-mode marker.
    """
    preset = StylePreset.from_tag(style)
    json_mode = preset in _JSON_MODE_STYLES

    sections = [resolve_persona(preset, web_system_prompt, default_system_prompt)]
    if json_mode:
        if flags is not None and flags.any_enabled:
            logger.debug("Feature flags ignored for JSON-mode style %s", preset.value)
    else:
        sections.extend(flag_sections(flags))
    sections.append(QUESTION_LINE_TEMPLATE.format(question=raw_user_prompt))

    return PromptSpec(system_text=SECTION_SEPARATOR.join(sections), json_mode=json_mode)
