"""
Rules-based interviewer question classification.

Classifies each interviewer utterance into a question type, detects
interviewing anti-patterns (leading, assumptive, double-barreled and
closed-question runs), and keeps running statistics for the session:

- Primary type: first matching rule of an ordered rule table
  (hypothetical, clarifying, probing, open-ended, closed)
- Overlays: leading, assumptive and double-barreled language can force
  the type and raise the confidence floor, never lower it
- Closed runs: N consecutive closed questions (default 3)
- Quality score: share of desirable questions minus a penalty for
  leading and double-barreled ones, clamped to 0-100

The classifier is session-scoped state. Create one per interview session
(or call ``reset()`` between sessions); it must not be shared.

Example:
    >>> classifier = QuestionClassifier()
    >>> result = classifier.classify(utterance)
    >>> if result is not None:
    ...     print(result.type, result.anti_patterns)
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from interview_coach.models.entities import (
    AntiPattern,
    QuestionClassification,
    QuestionStats,
    QuestionType,
    Speaker,
    Utterance,
)

logger = logging.getLogger(__name__)

PREFIX = "prefix"
CONTAINS = "contains"

DEFAULT_CLOSED_RUN_THRESHOLD = 3
ANTI_PATTERN_WINDOW = 5

LEADING_CONFIDENCE_FLOOR = 0.85
ASSUMPTIVE_CONFIDENCE_FLOOR = 0.75
DOUBLE_BARRELED_CONFIDENCE_FLOOR = 0.80
QUALITY_PENALTY_WEIGHT = 30.0


# ---------------------------------------------------------------------------
#  Phrase tables
# ---------------------------------------------------------------------------

INTERROGATIVE_OPENERS = [
    "how ", "what ", "when ", "where ", "why ", "who ", "which ",
    "do ", "did ", "is ", "are ", "have ", "has ", "can ", "could ",
    "was ", "were ", "will ", "would ", "should ", "shall ",
    "does ", "tell me", "describe ", "explain ",
]

HYPOTHETICAL_PHRASES = [
    "what if ", "what would ", "imagine ",
    "suppose ", "let's say ", "lets say ",
    "hypothetically", "if you could ", "if you were ",
    "in an ideal world", "if there were no constraints",
]

CLARIFYING_PHRASES = [
    "what do you mean", "what does that mean",
    "could you explain", "can you explain",
    "what does that", "what did you mean",
    "clarify", "help me understand what",
    "when you say", "by that do you mean",
    "i want to make sure i understand",
]

PROBING_PHRASES = [
    "why ", "why do ", "why did ", "why is ", "why was ",
    "tell me more", "can you elaborate", "could you elaborate",
    "what else", "how so", "in what way",
    "what makes you", "what led you", "what prompted",
    "can you give me an example", "could you give me an example",
    "what do you mean when you say",
]

OPEN_ENDED_OPENERS = [
    "how ", "how do ", "how did ", "how would ", "how does ",
    "what ", "what do ", "what did ", "what was ", "what is ", "what are ",
    "tell me about", "tell me ", "describe ", "explain ",
    "walk me through", "share with me", "help me understand",
    "in what ways", "what has been", "what were",
]

CLOSED_OPENERS = [
    "do you ", "did you ", "is it ", "is that ", "is there ",
    "are you ", "are there ", "have you ", "has it ",
    "can you ", "could you ", "was it ", "was that ",
    "will you ", "would you ", "were you ", "should ",
    "does it ", "does that ", "doesn't ", "isn't ",
]

LEADING_PHRASES = [
    "don't you think", "wouldn't you agree", "wouldn't you say",
    "isn't it true", "isn't it obvious", "isn't it clear",
    "surely ", "obviously ", "clearly ",
    "you would agree", "you must think", "you must feel",
    "most people think", "everyone knows",
    "it's obvious that", "it's clear that",
    "right?", "correct?", "isn't it?", "don't you?",
]

ASSUMPTIVE_PHRASES = [
    "you must have felt", "you probably think",
    "i'm sure you", "i assume you", "i bet you",
    "you obviously", "you clearly", "you definitely",
    "of course you", "naturally you",
]

DOUBLE_BARREL_CONJUNCTIONS = [
    " and do you ", " and how ", " and what ", " and why ",
    " and did you ", " and are you ", " and is it ",
    " or do you ", " or would you ", " as well as ",
]

# Matched as plain substrings of each " and " half.
INTERROGATIVE_WORDS = [
    "how", "what", "when", "where", "why", "who", "which",
    "do ", "did ", "is ", "are ", "have ", "can ", "could ",
    "would ", "should ",
]


# ---------------------------------------------------------------------------
#  Rule tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhraseRule:
    """
    A set of phrases matched against lower-cased question text.

    Attributes:
        phrases: Candidate phrases
        mode: ``PREFIX`` to match only at the start, ``CONTAINS`` anywhere
    """

    phrases: Tuple[str, ...]
    mode: str = CONTAINS

    def matches(self, lowercased: str) -> bool:
        if self.mode == PREFIX:
            return any(lowercased.startswith(p) for p in self.phrases)
        return any(p in lowercased for p in self.phrases)


# Primary type assignment, most specific first. First match wins.
TYPE_RULES: List[Tuple[PhraseRule, QuestionType]] = [
    (PhraseRule(tuple(HYPOTHETICAL_PHRASES), CONTAINS), QuestionType.HYPOTHETICAL),
    (PhraseRule(tuple(CLARIFYING_PHRASES), CONTAINS), QuestionType.CLARIFYING),
    (PhraseRule(tuple(PROBING_PHRASES), CONTAINS), QuestionType.PROBING),
    (PhraseRule(tuple(OPEN_ENDED_OPENERS), PREFIX), QuestionType.OPEN_ENDED),
    (PhraseRule(tuple(CLOSED_OPENERS), PREFIX), QuestionType.CLOSED),
]

FALLBACK_TYPE = QuestionType.CLOSED

# Per type: (boost rules checked in order, base confidence).
CONFIDENCE_RULES = {
    QuestionType.OPEN_ENDED: (
        [(PhraseRule(("tell me about", "walk me through"), PREFIX), 0.95),
         (PhraseRule(("how ", "what "), PREFIX), 0.85)],
        0.75,
    ),
    QuestionType.CLOSED: (
        [(PhraseRule(("do you ", "did you "), PREFIX), 0.90),
         (PhraseRule(("is ", "are "), PREFIX), 0.85)],
        0.70,
    ),
    QuestionType.LEADING: ([], 0.90),
    QuestionType.DOUBLE_BARRELED: ([], 0.80),
    QuestionType.PROBING: (
        [(PhraseRule(("why ",), PREFIX), 0.90),
         (PhraseRule(("tell me more",), CONTAINS), 0.90)],
        0.80,
    ),
    QuestionType.CLARIFYING: (
        [(PhraseRule(("what do you mean",), CONTAINS), 0.95)],
        0.85,
    ),
    QuestionType.HYPOTHETICAL: (
        [(PhraseRule(("what if ", "imagine "), PREFIX), 0.90)],
        0.80,
    ),
    QuestionType.NOT_A_QUESTION: ([], 0.60),
}

_INTERROGATIVE_RULE = PhraseRule(tuple(INTERROGATIVE_OPENERS), PREFIX)
_LEADING_RULE = PhraseRule(tuple(LEADING_PHRASES), CONTAINS)
_ASSUMPTIVE_RULE = PhraseRule(tuple(ASSUMPTIVE_PHRASES), CONTAINS)
_CONJUNCTION_RULE = PhraseRule(tuple(DOUBLE_BARREL_CONJUNCTIONS), CONTAINS)
_INTERROGATIVE_WORD_RULE = PhraseRule(tuple(INTERROGATIVE_WORDS), CONTAINS)


# ---------------------------------------------------------------------------
#  Pure helpers
# ---------------------------------------------------------------------------

def is_question(text: str) -> bool:
    """Return True if *text* ends with "?" or opens with an interrogative."""
    text = text.strip()
    if text.endswith("?"):
        return True
    return _INTERROGATIVE_RULE.matches(text.lower())


def primary_question_type(lowercased: str) -> QuestionType:
    """Assign the primary type by walking ``TYPE_RULES`` top to bottom."""
    for rule, question_type in TYPE_RULES:
        if rule.matches(lowercased):
            return question_type
    return FALLBACK_TYPE


def base_confidence(question_type: QuestionType, lowercased: str) -> float:
    """Type-specific confidence with boosts for stronger lexical signals."""
    boosts, default = CONFIDENCE_RULES[question_type]
    for rule, score in boosts:
        if rule.matches(lowercased):
            return score
    return default


def has_leading_language(lowercased: str) -> bool:
    return _LEADING_RULE.matches(lowercased)


def has_assumptive_language(lowercased: str) -> bool:
    return _ASSUMPTIVE_RULE.matches(lowercased)


def is_double_barreled(lowercased: str) -> bool:
    """
    Detect two questions asked as one.

    Fires on a joining conjunction ("and do you", "and how", ...), on two
    or more question marks, or when the first two halves of an " and "
    split each contain an interrogative word. The last check can misfire
    on compound single questions such as "How do you work and live here?".
    """
    if _CONJUNCTION_RULE.matches(lowercased):
        return True

    if lowercased.count("?") >= 2:
        return True

    if " and " in lowercased:
        parts = lowercased.split(" and ")
        first, second = parts[0].strip(), parts[1].strip()
        if _INTERROGATIVE_WORD_RULE.matches(first) and _INTERROGATIVE_WORD_RULE.matches(second):
            return True

    return False


def compute_question_stats(
    classifications: Sequence[QuestionClassification],
) -> QuestionStats:
    """
    Recompute session statistics from a full classification log.

    Quality score = desirable share * 100 - (leading + double-barreled)
    share * 30, clamped to [0, 100].

    Args:
        classifications: Classification log in arrival order

    Returns:
        QuestionStats; the empty value when the log is empty
    """
    total = len(classifications)
    if total == 0:
        return QuestionStats()

    counts = Counter(c.type for c in classifications)
    desirable = sum(n for qtype, n in counts.items() if qtype.is_desirable)
    penalty = counts[QuestionType.LEADING] + counts[QuestionType.DOUBLE_BARRELED]

    base_score = (desirable / total) * 100.0
    penalty_score = (penalty / total) * QUALITY_PENALTY_WEIGHT
    quality_score = max(0.0, min(100.0, base_score - penalty_score))

    return QuestionStats(
        total_questions=total,
        open_ended_count=counts[QuestionType.OPEN_ENDED],
        closed_count=counts[QuestionType.CLOSED],
        leading_count=counts[QuestionType.LEADING],
        double_barreled_count=counts[QuestionType.DOUBLE_BARRELED],
        probing_count=counts[QuestionType.PROBING],
        clarifying_count=counts[QuestionType.CLARIFYING],
        hypothetical_count=counts[QuestionType.HYPOTHETICAL],
        open_ended_percentage=(counts[QuestionType.OPEN_ENDED] / total) * 100.0,
        quality_score=quality_score,
        type_counts=dict(counts),
    )


def recent_anti_patterns(
    classifications: Sequence[QuestionClassification],
    window: int = ANTI_PATTERN_WINDOW,
) -> Tuple[AntiPattern, ...]:
    """De-duplicated anti-patterns of the last *window* entries, most severe first."""
    seen: List[AntiPattern] = []
    for classification in classifications[-window:]:
        for pattern in classification.anti_patterns:
            if pattern not in seen:
                seen.append(pattern)
    # Stable sort keeps first-appearance order among equal severities.
    return tuple(sorted(seen, key=lambda p: p.severity, reverse=True))


# ---------------------------------------------------------------------------
#  Session-scoped classifier
# ---------------------------------------------------------------------------

class QuestionClassifier:
    """
    Classifies interviewer questions and tracks anti-patterns for one session.

    Only interviewer utterances that look like questions are classified.
    Every other input returns None, which callers should treat as a normal
    outcome rather than a failure.
    """

    def __init__(self, closed_run_threshold: int = DEFAULT_CLOSED_RUN_THRESHOLD):
        """
        Initialize an empty session.

        Args:
            closed_run_threshold: Consecutive closed questions that count
                as a closed-question run (minimum 1)
        """
        self.closed_run_threshold = max(1, int(closed_run_threshold))
        self._classifications: List[QuestionClassification] = []
        self._session_stats = QuestionStats()
        self._current_anti_patterns: Tuple[AntiPattern, ...] = ()
        self._consecutive_closed = 0

    @property
    def classifications(self) -> Tuple[QuestionClassification, ...]:
        """Session classification log in arrival order."""
        return tuple(self._classifications)

    @property
    def session_stats(self) -> QuestionStats:
        return self._session_stats

    @property
    def current_anti_patterns(self) -> Tuple[AntiPattern, ...]:
        """Anti-patterns seen in the last five classifications, most severe first."""
        return self._current_anti_patterns

    @property
    def consecutive_closed_count(self) -> int:
        return self._consecutive_closed

    def classify(self, utterance: Utterance) -> Optional[QuestionClassification]:
        """
        Classify an utterance and record the result in the session log.

        Args:
            utterance: Transcribed utterance

        Returns:
            The classification, or None when the utterance is not an
            interviewer question
        """
        if utterance.speaker != Speaker.INTERVIEWER:
            # Another speaker's turn breaks a closed-question run.
            self._consecutive_closed = 0
            return None

        text = utterance.text.strip()
        if not text:
            return None

        if not is_question(text):
            self._consecutive_closed = 0
            return None

        lowercased = text.lower()
        question_type = primary_question_type(lowercased)
        confidence = base_confidence(question_type, lowercased)
        anti_patterns: List[AntiPattern] = []

        if has_leading_language(lowercased):
            question_type = QuestionType.LEADING
            confidence = max(confidence, LEADING_CONFIDENCE_FLOOR)
            anti_patterns.append(AntiPattern.LEADING_QUESTION)

        if has_assumptive_language(lowercased):
            anti_patterns.append(AntiPattern.ASSUMPTIVE_LANGUAGE)
            if question_type != QuestionType.LEADING:
                confidence = max(confidence, ASSUMPTIVE_CONFIDENCE_FLOOR)

        if is_double_barreled(lowercased):
            question_type = QuestionType.DOUBLE_BARRELED
            confidence = max(confidence, DOUBLE_BARRELED_CONFIDENCE_FLOOR)
            anti_patterns.append(AntiPattern.DOUBLE_BARRELED_QUESTION)

        if question_type == QuestionType.CLOSED:
            self._consecutive_closed += 1
            if self._consecutive_closed >= self.closed_run_threshold:
                anti_patterns.append(AntiPattern.CLOSED_QUESTION_RUN)
        else:
            self._consecutive_closed = 0

        classification = QuestionClassification(
            utterance_id=utterance.id,
            type=question_type,
            confidence=confidence,
            text=text,
            timestamp=utterance.timestamp_seconds,
            anti_patterns=tuple(anti_patterns),
        )

        self._classifications.append(classification)
        self._session_stats = compute_question_stats(self._classifications)
        self._current_anti_patterns = recent_anti_patterns(self._classifications)

        logger.debug(
            "Classified %s as %s (%.2f) anti_patterns=%s",
            utterance.id,
            question_type.value,
            confidence,
            [p.value for p in anti_patterns],
        )
        return classification

    def reset(self) -> None:
        """Clear the log, statistics, anti-pattern view and run counter."""
        self._classifications = []
        self._session_stats = QuestionStats()
        self._current_anti_patterns = ()
        self._consecutive_closed = 0
