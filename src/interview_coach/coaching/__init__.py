"""
Coaching decision pipeline.

Provides the rules-based question classifier, the template-driven
follow-up suggester, the coaching threshold model with its presets and
cultural adjustment, and the silence-first prompt gate.
"""

from interview_coach.coaching.question_classifier import QuestionClassifier
from interview_coach.coaching.follow_up import FollowUpSuggester
from interview_coach.coaching.thresholds import (
    CoachingLevel,
    CoachingThresholds,
    adjust_for_culture,
    create_thresholds,
    effective_confidence_threshold,
    effective_cooldown,
    thresholds_for_level,
)
from interview_coach.coaching.gate import GateDecision, GateReason, GateState, evaluate_prompt

__all__ = [
    "QuestionClassifier",
    "FollowUpSuggester",
    "CoachingLevel",
    "CoachingThresholds",
    "adjust_for_culture",
    "create_thresholds",
    "effective_confidence_threshold",
    "effective_cooldown",
    "thresholds_for_level",
    "GateDecision",
    "GateReason",
    "GateState",
    "evaluate_prompt",
]
