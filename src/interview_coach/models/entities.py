"""
Pydantic data models for utterances, question classifications and suggestions.

Defines the records that flow through the coaching pipeline: transcribed
utterances coming in from the transcript source, question classifications
and session statistics produced by the classifier, and follow-up
suggestions produced by the suggester. Display metadata on the enums is
presentation only and carries no behaviour.
"""

import uuid
from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Return a fresh random identifier string."""
    return str(uuid.uuid4())


class Speaker(str, Enum):
    """Speaker role enumeration."""
    INTERVIEWER = "interviewer"
    PARTICIPANT = "participant"
    UNKNOWN = "unknown"


class QuestionType(str, Enum):
    """Classification types for interviewer questions."""
    OPEN_ENDED = "open_ended"
    CLOSED = "closed"
    LEADING = "leading"
    DOUBLE_BARRELED = "double_barreled"
    PROBING = "probing"
    CLARIFYING = "clarifying"
    HYPOTHETICAL = "hypothetical"
    NOT_A_QUESTION = "not_a_question"

    @property
    def display_name(self) -> str:
        return QUESTION_TYPE_DISPLAY_NAMES[self]

    @property
    def color(self) -> str:
        return QUESTION_TYPE_COLORS[self]

    @property
    def is_desirable(self) -> bool:
        """Whether this type is generally good practice in research interviews."""
        return self in DESIRABLE_QUESTION_TYPES


QUESTION_TYPE_DISPLAY_NAMES: Dict[QuestionType, str] = {
    QuestionType.OPEN_ENDED: "Open-Ended",
    QuestionType.CLOSED: "Closed",
    QuestionType.LEADING: "Leading",
    QuestionType.DOUBLE_BARRELED: "Double-Barreled",
    QuestionType.PROBING: "Probing",
    QuestionType.CLARIFYING: "Clarifying",
    QuestionType.HYPOTHETICAL: "Hypothetical",
    QuestionType.NOT_A_QUESTION: "Not a Question",
}

QUESTION_TYPE_COLORS: Dict[QuestionType, str] = {
    QuestionType.OPEN_ENDED: "green",
    QuestionType.CLOSED: "blue",
    QuestionType.LEADING: "red",
    QuestionType.DOUBLE_BARRELED: "orange",
    QuestionType.PROBING: "purple",
    QuestionType.CLARIFYING: "cyan",
    QuestionType.HYPOTHETICAL: "indigo",
    QuestionType.NOT_A_QUESTION: "gray",
}

DESIRABLE_QUESTION_TYPES = frozenset({
    QuestionType.OPEN_ENDED,
    QuestionType.PROBING,
    QuestionType.CLARIFYING,
    QuestionType.HYPOTHETICAL,
})


class AntiPattern(str, Enum):
    """Recognised poor-practice patterns in interviewer phrasing."""
    LEADING_QUESTION = "leading_question"
    DOUBLE_BARRELED_QUESTION = "double_barreled_question"
    CLOSED_QUESTION_RUN = "closed_question_run"
    ASSUMPTIVE_LANGUAGE = "assumptive_language"

    @property
    def severity(self) -> int:
        """Fixed severity, used only for ordering."""
        return ANTI_PATTERN_SEVERITY[self]

    @property
    def display_name(self) -> str:
        return ANTI_PATTERN_DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return ANTI_PATTERN_DESCRIPTIONS[self]


ANTI_PATTERN_SEVERITY: Dict[AntiPattern, int] = {
    AntiPattern.LEADING_QUESTION: 3,
    AntiPattern.DOUBLE_BARRELED_QUESTION: 2,
    AntiPattern.CLOSED_QUESTION_RUN: 1,
    AntiPattern.ASSUMPTIVE_LANGUAGE: 2,
}

ANTI_PATTERN_DISPLAY_NAMES: Dict[AntiPattern, str] = {
    AntiPattern.LEADING_QUESTION: "Leading Question",
    AntiPattern.DOUBLE_BARRELED_QUESTION: "Double-Barreled",
    AntiPattern.CLOSED_QUESTION_RUN: "Closed Run",
    AntiPattern.ASSUMPTIVE_LANGUAGE: "Assumptive Language",
}

ANTI_PATTERN_DESCRIPTIONS: Dict[AntiPattern, str] = {
    AntiPattern.LEADING_QUESTION: (
        "This question may guide the participant toward a particular answer. "
        "Try rephrasing neutrally."
    ),
    AntiPattern.DOUBLE_BARRELED_QUESTION: (
        "This asks about multiple things at once. "
        "Split into separate questions for clearer data."
    ),
    AntiPattern.CLOSED_QUESTION_RUN: (
        "Multiple closed questions in a row. Consider an open-ended question "
        "to let the participant share freely."
    ),
    AntiPattern.ASSUMPTIVE_LANGUAGE: (
        "This language assumes something about the participant. "
        "Consider a more neutral framing."
    ),
}


class FollowUpCategory(str, Enum):
    """Categories of follow-up suggestions."""
    DEEP_DIVE = "deep_dive"
    CLARIFICATION = "clarification"
    EMOTIONAL = "emotional"
    PROCESS = "process"
    COMPARISON = "comparison"
    IMPACT = "impact"


class Methodology(str, Enum):
    """Research-framework lens selecting extra follow-up template sets."""
    GENERAL = "general"
    JTBD = "jtbd"
    USABILITY = "usability"
    DISCOVERY = "discovery"


class Utterance(BaseModel):
    """
    One transcribed turn of speech.

    Supplied by the transcript source in arrival order and never
    modified once observed.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    speaker: Speaker = Speaker.UNKNOWN
    text: str = ""
    timestamp_seconds: float = Field(default=0.0, ge=0.0)


class QuestionClassification(BaseModel):
    """
    Result of classifying one interviewer question.

    Created once per qualifying utterance and appended to the session
    log; never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    utterance_id: str
    type: QuestionType
    confidence: float = Field(ge=0.0, le=1.0)
    text: str
    timestamp: float = Field(default=0.0, ge=0.0)
    anti_patterns: Tuple[AntiPattern, ...] = ()


class QuestionStats(BaseModel):
    """
    Aggregate statistics over a session's classification log.

    The default instance is the empty-session value: all counts,
    percentages and the quality score are zero.
    """
    model_config = ConfigDict(frozen=True)

    total_questions: int = 0
    open_ended_count: int = 0
    closed_count: int = 0
    leading_count: int = 0
    double_barreled_count: int = 0
    probing_count: int = 0
    clarifying_count: int = 0
    hypothetical_count: int = 0
    open_ended_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    type_counts: Dict[QuestionType, int] = Field(default_factory=dict)


class FollowUpSuggestion(BaseModel):
    """A candidate follow-up question for the interviewer."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    text: str
    reason: str = ""
    relevance: float = Field(ge=0.0, le=1.0)
    category: FollowUpCategory = FollowUpCategory.DEEP_DIVE
