"""
Data models for the coaching pipeline.

Provides Pydantic records for utterances, question classifications,
session statistics, follow-up suggestions and cultural context.
"""

from interview_coach.models.entities import (
    AntiPattern,
    FollowUpCategory,
    FollowUpSuggestion,
    Methodology,
    QuestionClassification,
    QuestionStats,
    QuestionType,
    Speaker,
    Utterance,
)
from interview_coach.models.cultural import (
    CulturalContext,
    CulturalPreset,
    DEFAULT_CULTURAL_CONTEXT,
    FormalityLevel,
)

__all__ = [
    "AntiPattern",
    "FollowUpCategory",
    "FollowUpSuggestion",
    "Methodology",
    "QuestionClassification",
    "QuestionStats",
    "QuestionType",
    "Speaker",
    "Utterance",
    "CulturalContext",
    "CulturalPreset",
    "DEFAULT_CULTURAL_CONTEXT",
    "FormalityLevel",
]
