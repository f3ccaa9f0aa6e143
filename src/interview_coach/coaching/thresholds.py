"""
Coaching thresholds: confidence, cooldown and session-budget parameters.

The defaults follow a silence-first philosophy and are deliberately
conservative: an 85% confidence bar, two minutes between prompts, five
seconds of quiet after speech and at most three prompts per session.

Every field is clamped into its valid range when a ``CoachingThresholds``
value is built, whichever way it is built (keyword arguments,
``model_validate`` on persisted data, ``create_thresholds``). Construction
never raises: out-of-range numbers are clamped and unparseable values
fall back to the field default with a logged warning.

Derived values (effective confidence bar and cooldown) and the cultural
adjustment are plain functions returning new values; nothing here mutates
a thresholds object.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, model_validator

from interview_coach.models.cultural import BASELINE_SILENCE_TOLERANCE, CulturalContext

logger = logging.getLogger(__name__)

# Floor and ceiling for the sensitivity-adjusted confidence bar.
EFFECTIVE_CONFIDENCE_FLOOR = 0.5
EFFECTIVE_CONFIDENCE_CEILING = 1.0

# field -> (default, lower bound, upper bound or None)
THRESHOLD_BOUNDS: Dict[str, Tuple[float, float, Optional[float]]] = {
    "minimum_confidence": (0.85, 0.0, 1.0),
    "cooldown_duration": (120.0, 0.0, None),
    "speech_cooldown": (5.0, 0.0, None),
    "max_prompts_per_session": (3, 0, None),
    "auto_dismiss_duration": (8.0, 1.0, None),
    "fade_in_duration": (0.3, 0.1, None),
    "fade_out_duration": (0.25, 0.1, None),
    "sensitivity_multiplier": (1.0, 0.1, 3.0),
}

_INTEGER_FIELDS = {"max_prompts_per_session"}


def _clamp_field(name: str, value: Any) -> Union[int, float]:
    default, lower, upper = THRESHOLD_BOUNDS[name]
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s, using default %s", value, name, default)
        return default

    if math.isnan(number) or (number == math.inf and upper is None):
        logger.warning("Non-finite value %r for %s, using default %s", value, name, default)
        return default

    clamped = max(lower, number)
    if upper is not None:
        clamped = min(upper, clamped)
    if clamped != number:
        logger.debug("Clamped %s from %s to %s", name, number, clamped)

    if name in _INTEGER_FIELDS:
        return int(clamped)
    return clamped


class CoachingThresholds(BaseModel):
    """
    Numeric parameters that gate when a coaching prompt may be shown.

    Attributes:
        minimum_confidence: Confidence (0-1) a prompt needs before showing
        cooldown_duration: Seconds between prompts
        speech_cooldown: Seconds of quiet required after any speech
        max_prompts_per_session: Prompt budget for one session
        auto_dismiss_duration: Seconds before an untouched prompt fades
        fade_in_duration: Fade-in animation length in seconds
        fade_out_duration: Fade-out animation length in seconds
        sensitivity_multiplier: Scales the confidence bar and cooldown;
            higher means more eager coaching
    """
    model_config = ConfigDict(frozen=True)

    minimum_confidence: float = 0.85
    cooldown_duration: float = 120.0
    speech_cooldown: float = 5.0
    max_prompts_per_session: int = 3
    auto_dismiss_duration: float = 8.0
    fade_in_duration: float = 0.3
    fade_out_duration: float = 0.25
    sensitivity_multiplier: float = 1.0

    @model_validator(mode="before")
    @classmethod
    def clamp_to_bounds(cls, data: Any) -> Any:
        """Clamp every supplied field into its valid range."""
        if not isinstance(data, Mapping):
            return data
        clamped = {}
        for key, value in data.items():
            if key not in THRESHOLD_BOUNDS:
                clamped[key] = value
            elif value is not None:
                clamped[key] = _clamp_field(key, value)
        return clamped

    def with_overrides(self, **overrides: Any) -> "CoachingThresholds":
        """Return a new, re-clamped thresholds value with *overrides* applied."""
        return CoachingThresholds(**{**self.model_dump(), **overrides})


def create_thresholds(
    overrides: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> CoachingThresholds:
    """
    Build thresholds from partial overrides, clamping every field.

    Args:
        overrides: Mapping of field name to value (e.g. loaded from YAML)
        **kwargs: Further overrides; these win over *overrides*

    Returns:
        CoachingThresholds with defaults for anything not supplied

    Example:
        >>> create_thresholds({"minimum_confidence": 5.0}).minimum_confidence
        1.0
    """
    merged: Dict[str, Any] = dict(overrides or {})
    merged.update(kwargs)
    return CoachingThresholds(**merged)


def effective_confidence_threshold(thresholds: CoachingThresholds) -> float:
    """
    Confidence bar after the sensitivity multiplier.

    Higher sensitivity lowers the bar; the result stays within [0.5, 1.0].
    """
    adjusted = thresholds.minimum_confidence / thresholds.sensitivity_multiplier
    return min(EFFECTIVE_CONFIDENCE_CEILING, max(EFFECTIVE_CONFIDENCE_FLOOR, adjusted))


def effective_cooldown(thresholds: CoachingThresholds) -> float:
    """Cooldown in seconds after the sensitivity multiplier."""
    return thresholds.cooldown_duration / thresholds.sensitivity_multiplier


def adjust_for_culture(
    thresholds: CoachingThresholds,
    context: CulturalContext,
) -> CoachingThresholds:
    """
    Rescale thresholds for a cultural communication style.

    ``speech_cooldown`` scales with silence tolerance relative to the 5s
    baseline and ``cooldown_duration`` scales with the pacing multiplier.
    All other fields pass through unchanged.

    Args:
        thresholds: Base thresholds (left untouched)
        context: Cultural context to apply

    Returns:
        A new CoachingThresholds value
    """
    return thresholds.with_overrides(
        speech_cooldown=thresholds.speech_cooldown
        * (context.silence_tolerance_seconds / BASELINE_SILENCE_TOLERANCE),
        cooldown_duration=thresholds.cooldown_duration * context.question_pacing_multiplier,
    )


# ---------------------------------------------------------------------------
#  Presets
# ---------------------------------------------------------------------------

class CoachingLevel(str, Enum):
    """Predefined coaching strictness levels."""
    OFF = "off"
    MINIMAL = "minimal"
    BALANCED = "balanced"
    ACTIVE = "active"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return COACHING_LEVEL_DESCRIPTIONS[self]


COACHING_LEVEL_DESCRIPTIONS: Dict[CoachingLevel, str] = {
    CoachingLevel.OFF: "No coaching prompts will be shown",
    CoachingLevel.MINIMAL: "Only essential prompts for experienced researchers",
    CoachingLevel.BALANCED: "Moderate guidance for most situations",
    CoachingLevel.ACTIVE: "More frequent prompts for learning researchers",
}

DEFAULT_THRESHOLDS = create_thresholds()

OFF_THRESHOLDS = create_thresholds(max_prompts_per_session=0)

MINIMAL_THRESHOLDS = create_thresholds(
    minimum_confidence=0.95,
    cooldown_duration=180.0,
    speech_cooldown=8.0,
    max_prompts_per_session=2,
    auto_dismiss_duration=6.0,
    sensitivity_multiplier=0.5,
)

BALANCED_THRESHOLDS = create_thresholds(
    minimum_confidence=0.80,
    cooldown_duration=90.0,
    speech_cooldown=4.0,
    max_prompts_per_session=4,
    auto_dismiss_duration=10.0,
    sensitivity_multiplier=1.0,
)

ACTIVE_THRESHOLDS = create_thresholds(
    minimum_confidence=0.70,
    cooldown_duration=60.0,
    speech_cooldown=3.0,
    max_prompts_per_session=6,
    auto_dismiss_duration=12.0,
    sensitivity_multiplier=1.5,
)

LEVEL_THRESHOLDS: Dict[CoachingLevel, CoachingThresholds] = {
    CoachingLevel.OFF: OFF_THRESHOLDS,
    CoachingLevel.MINIMAL: MINIMAL_THRESHOLDS,
    CoachingLevel.BALANCED: BALANCED_THRESHOLDS,
    CoachingLevel.ACTIVE: ACTIVE_THRESHOLDS,
}


def thresholds_for_level(level: Union[CoachingLevel, str]) -> CoachingThresholds:
    """
    Return the preset thresholds for a coaching level.

    Raises:
        ValueError: If *level* is not a known level name
    """
    return LEVEL_THRESHOLDS[CoachingLevel(level)]
