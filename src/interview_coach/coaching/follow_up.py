"""
Template-driven follow-up question suggestions.

Looks at a participant utterance (and optionally a detected dominant
emotion) and proposes follow-up questions for the interviewer. The
trigger/suggestion tables are plain data: the general set is always
consulted, and the active methodology (jobs-to-be-done, usability or
discovery) adds its own set on top.

The suggester keeps no session state. Apart from the methodology setting
it is a pure function of its inputs and may be shared between sessions.

Example:
    >>> suggester = FollowUpSuggester(methodology=Methodology.USABILITY)
    >>> for s in suggester.suggest(utterance, dominant_emotion="confusion"):
    ...     print(f"{s.relevance:.2f} {s.text}")
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from interview_coach.models.entities import (
    FollowUpCategory,
    FollowUpSuggestion,
    Methodology,
    Speaker,
    Utterance,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class SuggestionTemplate:
    """A candidate follow-up with a fixed relevance score."""

    text: str
    reason: str
    category: FollowUpCategory
    relevance: float

    def build(self) -> FollowUpSuggestion:
        """Stamp the template with a fresh identifier."""
        return FollowUpSuggestion(
            text=self.text,
            reason=self.reason,
            category=self.category,
            relevance=self.relevance,
        )


@dataclass(frozen=True)
class FollowUpTemplate:
    """
    A rule that fires when any trigger substring appears in the utterance.

    Attributes:
        triggers: Lower-case substrings, matched case-insensitively
        suggestions: Candidates emitted when the rule fires
    """

    triggers: Tuple[str, ...]
    suggestions: Tuple[SuggestionTemplate, ...]

    def fires(self, lowercased: str) -> bool:
        return any(trigger in lowercased for trigger in self.triggers)


def _template(triggers: Sequence[str], *suggestions: SuggestionTemplate) -> FollowUpTemplate:
    return FollowUpTemplate(tuple(triggers), tuple(suggestions))


_S = SuggestionTemplate
_C = FollowUpCategory


# ---------------------------------------------------------------------------
#  Template tables
# ---------------------------------------------------------------------------

GENERAL_TEMPLATES: List[FollowUpTemplate] = [
    _template(
        ["difficult", "hard", "struggle", "challenge", "problem"],
        _S("Can you walk me through what happened step by step?",
           "Participant mentioned a difficulty - get the detailed story", _C.PROCESS, 0.85),
        _S("How did that make you feel in the moment?",
           "Explore emotional impact of the difficulty", _C.EMOTIONAL, 0.80),
        _S("What did you try to do to work around it?",
           "Understand coping strategies and workarounds", _C.PROCESS, 0.75),
    ),
    _template(
        ["like", "love", "enjoy", "great", "awesome", "favorite"],
        _S("What specifically about that do you find most valuable?",
           "Dig deeper into what drives the positive reaction", _C.DEEP_DIVE, 0.85),
        _S("How does that compare to other alternatives you've tried?",
           "Get comparative context for the positive experience", _C.COMPARISON, 0.75),
    ),
    _template(
        ["confus", "unclear", "don't understand", "lost", "puzzl"],
        _S("What were you expecting to happen instead?",
           "Understand the mental model mismatch", _C.CLARIFICATION, 0.90),
        _S("At what point did you first feel confused?",
           "Pinpoint the exact moment of confusion", _C.PROCESS, 0.85),
    ),
    _template(
        ["frustrat", "annoy", "irritat", "upset", "angry"],
        _S("Tell me more about what triggered that feeling.",
           "Explore the root cause of frustration", _C.EMOTIONAL, 0.90),
        _S("How often does this come up for you?",
           "Understand frequency and severity of the pain point", _C.IMPACT, 0.80),
    ),
    _template(
        ["wish", "hope", "want", "need", "would be nice"],
        _S("Can you describe what that would ideally look like for you?",
           "Capture the participant's ideal solution vision", _C.DEEP_DIVE, 0.85),
        _S("What impact would that have on your workflow?",
           "Understand the downstream value of the desired change", _C.IMPACT, 0.80),
    ),
    _template(
        ["usually", "typically", "normally", "always", "every time"],
        _S("Can you give me a specific recent example?",
           "Move from general patterns to concrete instances", _C.PROCESS, 0.85),
        _S("Has there been a time when that wasn't the case?",
           "Find edge cases and exceptions to the pattern", _C.COMPARISON, 0.75),
    ),
]

JTBD_TEMPLATES: List[FollowUpTemplate] = [
    _template(
        ["switch", "change", "move", "replace", "start using"],
        _S("What was the moment that triggered you to make that switch?",
           "JTBD: Identify the triggering event", _C.PROCESS, 0.90),
        _S("What were you using before, and what wasn't working?",
           "JTBD: Understand the push from the old solution", _C.COMPARISON, 0.85),
        _S("Were there any concerns or hesitations before making the change?",
           "JTBD: Identify anxieties and barriers to switching", _C.EMOTIONAL, 0.80),
    ),
    _template(
        ["trying to", "goal", "accomplish", "get done", "outcome"],
        _S("What does success look like when you're done?",
           "JTBD: Define the desired outcome", _C.DEEP_DIVE, 0.90),
        _S("Who else is involved when you're trying to do this?",
           "JTBD: Map the social and functional context", _C.PROCESS, 0.75),
    ),
]

USABILITY_TEMPLATES: List[FollowUpTemplate] = [
    _template(
        ["click", "tap", "press", "button", "link", "menu"],
        _S("What did you expect to happen when you did that?",
           "Usability: Understand expectation vs. reality gap", _C.CLARIFICATION, 0.90),
        _S("How did you know to look there?",
           "Usability: Understand navigation mental model", _C.PROCESS, 0.85),
    ),
    _template(
        ["find", "look for", "search", "where", "locate"],
        _S("Where did you first try looking for that?",
           "Usability: Understand information architecture expectations", _C.PROCESS, 0.90),
        _S("On a scale of easy to difficult, how would you rate finding that?",
           "Usability: Get a findability rating", _C.IMPACT, 0.75),
    ),
]

DISCOVERY_TEMPLATES: List[FollowUpTemplate] = [
    _template(
        ["workflow", "process", "routine", "day", "morning", "week"],
        _S("Can you walk me through a typical day when you do this?",
           "Discovery: Map the full workflow context", _C.PROCESS, 0.90),
        _S("What tools or resources do you rely on during this process?",
           "Discovery: Identify the ecosystem and dependencies", _C.DEEP_DIVE, 0.80),
    ),
    _template(
        ["team", "colleague", "manager", "stakeholder", "client"],
        _S("How do you currently communicate or collaborate on this?",
           "Discovery: Understand collaboration patterns", _C.PROCESS, 0.85),
        _S("What happens when there's a disagreement about this?",
           "Discovery: Surface friction in collaboration", _C.IMPACT, 0.80),
    ),
]

METHODOLOGY_TEMPLATES: Dict[Methodology, List[FollowUpTemplate]] = {
    Methodology.GENERAL: [],
    Methodology.JTBD: JTBD_TEMPLATES,
    Methodology.USABILITY: USABILITY_TEMPLATES,
    Methodology.DISCOVERY: DISCOVERY_TEMPLATES,
}

EMOTION_SUGGESTIONS: Dict[str, SuggestionTemplate] = {
    "frustration": _S(
        "It sounds like that was frustrating. What would have made it better?",
        "Detected frustration - explore desired improvements", _C.EMOTIONAL, 0.85),
    "delight": _S(
        "You seem really positive about that. What makes it stand out?",
        "Detected delight - understand the drivers", _C.EMOTIONAL, 0.80),
    "confusion": _S(
        "It sounds like that wasn't clear. What would have helped you understand better?",
        "Detected confusion - identify clarity gaps", _C.CLARIFICATION, 0.85),
    "anxiety": _S(
        "What's the biggest concern on your mind about this?",
        "Detected anxiety - surface specific worries", _C.EMOTIONAL, 0.85),
    "satisfaction": _S(
        "What was the most important factor in making you feel that way?",
        "Detected satisfaction - identify key success factors", _C.DEEP_DIVE, 0.75),
    "disappointment": _S(
        "What were you hoping for that didn't happen?",
        "Detected disappointment - understand unmet expectations", _C.EMOTIONAL, 0.85),
    "excitement": _S(
        "What gets you most excited about this?",
        "Detected excitement - capture motivations", _C.EMOTIONAL, 0.80),
    "relief": _S(
        "What was the situation like before that changed?",
        "Detected relief - understand the prior pain point", _C.COMPARISON, 0.80),
}

FALLBACK_SUGGESTION = _S(
    "Can you tell me more about that?",
    "Encourage the participant to elaborate",
    _C.DEEP_DIVE,
    0.60,
)


# ---------------------------------------------------------------------------
#  Suggester
# ---------------------------------------------------------------------------

def match_templates(
    text: str,
    templates: Sequence[FollowUpTemplate],
) -> List[FollowUpSuggestion]:
    """Return every candidate of every template whose triggers occur in *text*."""
    lowercased = text.lower()
    results: List[FollowUpSuggestion] = []
    for template in templates:
        if template.fires(lowercased):
            results.extend(s.build() for s in template.suggestions)
    return results


def emotion_suggestion(emotion: Optional[str]) -> Optional[FollowUpSuggestion]:
    """Return the candidate for a recognised emotion label, else None."""
    if not emotion:
        return None
    template = EMOTION_SUGGESTIONS.get(emotion.strip().lower())
    return template.build() if template else None


def rank_suggestions(
    suggestions: Sequence[FollowUpSuggestion],
    limit: int,
) -> List[FollowUpSuggestion]:
    """De-duplicate by text (first wins), sort by relevance, truncate."""
    seen = set()
    unique: List[FollowUpSuggestion] = []
    for suggestion in suggestions:
        if suggestion.text in seen:
            continue
        seen.add(suggestion.text)
        unique.append(suggestion)
    unique.sort(key=lambda s: s.relevance, reverse=True)
    return unique[:limit]


class FollowUpSuggester:
    """
    Generates ranked follow-up suggestions for participant utterances.

    Attributes:
        max_suggestions: Upper bound on returned suggestions
    """

    def __init__(
        self,
        methodology: Union[Methodology, str] = Methodology.GENERAL,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    ):
        self._methodology = Methodology(methodology)
        self.max_suggestions = max(0, int(max_suggestions))

    @property
    def methodology(self) -> Methodology:
        return self._methodology

    @methodology.setter
    def methodology(self, value: Union[Methodology, str]) -> None:
        self._methodology = Methodology(value)

    def suggest(
        self,
        utterance: Utterance,
        dominant_emotion: Optional[str] = None,
    ) -> List[FollowUpSuggestion]:
        """
        Suggest follow-up questions for a participant utterance.

        Args:
            utterance: The utterance to react to
            dominant_emotion: Optional emotion label from an external detector

        Returns:
            Suggestions sorted by descending relevance, at most
            ``max_suggestions`` long. Empty for non-participant speakers.
        """
        if utterance.speaker != Speaker.PARTICIPANT:
            return []

        candidates = match_templates(utterance.text, GENERAL_TEMPLATES)
        candidates.extend(
            match_templates(utterance.text, METHODOLOGY_TEMPLATES[self._methodology])
        )

        emotional = emotion_suggestion(dominant_emotion)
        if emotional is not None:
            candidates.append(emotional)

        if not candidates:
            candidates.append(FALLBACK_SUGGESTION.build())

        ranked = rank_suggestions(candidates, self.max_suggestions)
        logger.debug(
            "Suggested %d follow-up(s) for %s (methodology=%s, emotion=%s)",
            len(ranked),
            utterance.id,
            self._methodology.value,
            dominant_emotion,
        )
        return ranked

    def suggest_from_context(
        self,
        utterances: Sequence[Utterance],
        dominant_emotion: Optional[str] = None,
    ) -> List[FollowUpSuggestion]:
        """
        Suggest follow-ups for the most recent participant turn in a window.

        Args:
            utterances: Recent utterances in arrival order (typically 3-5)
            dominant_emotion: Optional emotion label

        Returns:
            Suggestions for the last participant utterance, or an empty
            list if the window has none
        """
        for utterance in reversed(utterances):
            if utterance.speaker == Speaker.PARTICIPANT:
                return self.suggest(utterance, dominant_emotion)
        return []
