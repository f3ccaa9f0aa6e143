"""
Silence-first prompt gate.

Turns a candidate prompt's confidence and the session's timing state into
a show / don't-show decision using ``CoachingThresholds``. Rules, in the
order they are checked:

1. Coaching must be enabled (off by default)
2. Session prompt budget not exhausted
3. Confidence at or above the effective (sensitivity-adjusted) bar
4. No prompt currently visible
5. Effective cooldown elapsed since the last prompt
6. Speech cooldown elapsed since the last detected speech

All times are session-relative seconds supplied by the caller. The gate
owns no timers and never schedules anything; deciding when to re-check a
held prompt is left to the orchestration layer, helped by
``GateDecision.wait_seconds``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from interview_coach.coaching.thresholds import (
    CoachingThresholds,
    effective_confidence_threshold,
    effective_cooldown,
)

logger = logging.getLogger(__name__)


class GateReason(str, Enum):
    """Why a prompt was allowed or held back."""
    ALLOWED = "allowed"
    COACHING_DISABLED = "coaching_disabled"
    SESSION_BUDGET = "session_budget"
    LOW_CONFIDENCE = "low_confidence"
    PROMPT_VISIBLE = "prompt_visible"
    COOLDOWN = "cooldown"
    SPEECH_COOLDOWN = "speech_cooldown"


@dataclass
class GateState:
    """
    Prompt timing state for one session.

    Attributes:
        enabled: Whether coaching is switched on for this session
        prompts_shown: Prompts shown so far
        last_prompt_time: When the last prompt was shown (or snoozed)
        last_speech_time: When speech was last detected
        is_showing_prompt: Whether a prompt is on screen right now
    """

    enabled: bool = False
    prompts_shown: int = 0
    last_prompt_time: Optional[float] = None
    last_speech_time: Optional[float] = None
    is_showing_prompt: bool = False

    def record_prompt(self, now: float) -> None:
        """Record that a prompt was shown at *now*."""
        self.prompts_shown += 1
        self.last_prompt_time = now
        self.is_showing_prompt = True

    def record_speech(self, now: float) -> None:
        self.last_speech_time = now

    def dismiss(self) -> None:
        self.is_showing_prompt = False

    def snooze(self, now: float) -> None:
        """Dismiss the visible prompt and restart the cooldown from *now*."""
        self.last_prompt_time = now
        self.is_showing_prompt = False


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of a gate evaluation.

    Attributes:
        allowed: True if the prompt may be shown now
        reason: The rule that decided the outcome
        wait_seconds: For timing holds, seconds until that rule clears
    """

    allowed: bool
    reason: GateReason
    wait_seconds: float = 0.0


def _held(reason: GateReason, wait_seconds: float = 0.0) -> GateDecision:
    return GateDecision(allowed=False, reason=reason, wait_seconds=wait_seconds)


def evaluate_prompt(
    thresholds: CoachingThresholds,
    state: GateState,
    confidence: float,
    now: float,
) -> GateDecision:
    """
    Decide whether a prompt with *confidence* may be shown at *now*.

    Args:
        thresholds: Active (possibly culture-adjusted) thresholds
        state: Session timing state; not modified
        confidence: Confidence of the candidate prompt (0-1)
        now: Current session-relative time in seconds

    Returns:
        GateDecision naming the first rule that held the prompt back,
        or ``GateReason.ALLOWED``
    """
    if not state.enabled:
        return _held(GateReason.COACHING_DISABLED)

    if state.prompts_shown >= thresholds.max_prompts_per_session:
        return _held(GateReason.SESSION_BUDGET)

    if confidence < effective_confidence_threshold(thresholds):
        return _held(GateReason.LOW_CONFIDENCE)

    if state.is_showing_prompt:
        return _held(GateReason.PROMPT_VISIBLE)

    if state.last_prompt_time is not None:
        remaining = effective_cooldown(thresholds) - (now - state.last_prompt_time)
        if remaining > 0:
            return _held(GateReason.COOLDOWN, remaining)

    if state.last_speech_time is not None:
        remaining = thresholds.speech_cooldown - (now - state.last_speech_time)
        if remaining > 0:
            return _held(GateReason.SPEECH_COOLDOWN, remaining)

    logger.debug("Prompt allowed at %.1fs (confidence %.2f)", now, confidence)
    return GateDecision(allowed=True, reason=GateReason.ALLOWED)
