"""Translatable-text matchers for component markup and scripts."""

from __future__ import annotations

from .base import ExtractionContext, MarkupStage
from .markup import (
    DEFAULT_STAGES,
    DirectiveLiteralStage,
    InterpolationLiteralStage,
    MarkupMatcher,
    MixedContentStage,
    PlainAttributeStage,
    TemplateAttributeStage,
    TextStage,
)
from .patterns import contains_cjk
from .script import ScriptMatcher

__all__ = [
    "DEFAULT_STAGES",
    "DirectiveLiteralStage",
    "ExtractionContext",
    "InterpolationLiteralStage",
    "MarkupMatcher",
    "MarkupStage",
    "MixedContentStage",
    "PlainAttributeStage",
    "ScriptMatcher",
    "TemplateAttributeStage",
    "TextStage",
    "contains_cjk",
]
