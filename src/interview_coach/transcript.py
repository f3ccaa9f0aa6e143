"""
Transcript loading and offline replay.

Loads an already-transcribed interview (JSON or YAML list of turns) and
replays it through the coaching pipeline in arrival order, the way the
live tool would see it. Used by ``interview-coach analyze``.

A transcript file is a list of mappings:

    - speaker: interviewer
      text: "How do you usually plan your week?"
      timestamp_seconds: 12.5
    - speaker: participant
      text: "It's always a struggle on Mondays."
      timestamp_seconds: 15.0
      emotion: frustration

``id`` is optional and ``timestamp`` is accepted for ``timestamp_seconds``.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from interview_coach.coaching.follow_up import FollowUpSuggester
from interview_coach.coaching.gate import GateState, evaluate_prompt
from interview_coach.coaching.question_classifier import QuestionClassifier
from interview_coach.coaching.thresholds import CoachingThresholds
from interview_coach.exceptions import TranscriptLoadError
from interview_coach.models.entities import (
    FollowUpSuggestion,
    QuestionClassification,
    QuestionStats,
    Utterance,
)

logger = logging.getLogger(__name__)


@dataclass
class TranscriptTurn:
    """An utterance plus the emotion label detected for it, if any."""

    utterance: Utterance
    emotion: Optional[str] = None


def parse_turns(records: Any) -> List[TranscriptTurn]:
    """
    Validate raw transcript records.

    Args:
        records: List of mappings as loaded from JSON/YAML

    Returns:
        List of TranscriptTurn in file order

    Raises:
        TranscriptLoadError: If the data is not a list of valid turns
    """
    if not isinstance(records, list):
        raise TranscriptLoadError("Transcript must be a list of utterances")

    turns: List[TranscriptTurn] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise TranscriptLoadError(f"Utterance {index} is not a mapping")
        data = dict(record)
        emotion = data.pop("emotion", None)
        if emotion is not None and not isinstance(emotion, str):
            raise TranscriptLoadError(f"Utterance {index} emotion must be a string")
        if "timestamp_seconds" not in data and "timestamp" in data:
            data["timestamp_seconds"] = data.pop("timestamp")
        try:
            utterance = Utterance.model_validate(data)
        except ValidationError as exc:
            raise TranscriptLoadError(f"Utterance {index} is invalid: {exc}") from exc
        turns.append(TranscriptTurn(utterance=utterance, emotion=emotion))
    return turns


def load_transcript(path: Union[str, Path]) -> List[TranscriptTurn]:
    """
    Load a transcript file.

    ``.json`` files are parsed as JSON; anything else as YAML.

    Raises:
        TranscriptLoadError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise TranscriptLoadError(f"Transcript not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                records = json.load(f)
            else:
                records = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TranscriptLoadError(f"Could not parse {path}: {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise TranscriptLoadError(f"Could not read {path}: {exc}") from exc

    turns = parse_turns(records)
    logger.info("Loaded %d utterance(s) from %s", len(turns), path)
    return turns


@dataclass
class TurnReport:
    """
    Pipeline output for one transcript turn.

    Attributes:
        utterance: The replayed utterance
        classification: Question classification, for interviewer questions
        suggestions: Follow-up suggestions, for participant turns
        prompt_allowed: Whether the top suggestion would clear the gate
            once the speech cooldown has passed
        gate_reason: Gate rule that decided ``prompt_allowed``
    """

    utterance: Utterance
    classification: Optional[QuestionClassification] = None
    suggestions: List[FollowUpSuggestion] = field(default_factory=list)
    prompt_allowed: bool = False
    gate_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "utterance": self.utterance.model_dump(mode="json"),
            "classification": (
                self.classification.model_dump(mode="json")
                if self.classification else None
            ),
            "suggestions": [s.model_dump(mode="json") for s in self.suggestions],
            "prompt_allowed": self.prompt_allowed,
            "gate_reason": self.gate_reason,
        }


@dataclass
class ReplayResult:
    """
    Result of replaying a transcript.

    Attributes:
        turns: Per-turn reports in arrival order
        stats: Final question statistics for the session
        anti_patterns: Anti-patterns active at the end of the session
        prompts_shown: Prompts the gate would have let through
    """

    turns: List[TurnReport] = field(default_factory=list)
    stats: QuestionStats = field(default_factory=QuestionStats)
    anti_patterns: List[str] = field(default_factory=list)
    prompts_shown: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "turns": [t.to_dict() for t in self.turns],
            "stats": self.stats.model_dump(mode="json"),
            "anti_patterns": self.anti_patterns,
            "prompts_shown": self.prompts_shown,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def replay_transcript(
    turns: List[TranscriptTurn],
    classifier: QuestionClassifier,
    suggester: FollowUpSuggester,
    thresholds: CoachingThresholds,
) -> ReplayResult:
    """
    Run every turn through the classifier, suggester and gate.

    Each turn counts as speech at its timestamp. The top suggestion for a
    participant turn is gated as if the interviewer paused for exactly the
    speech cooldown afterwards; a prompt that clears the gate is counted
    and treated as dismissed before the next turn.

    Args:
        turns: Transcript turns in arrival order
        classifier: Fresh per-session classifier
        suggester: Follow-up suggester
        thresholds: Active thresholds for the gate

    Returns:
        ReplayResult with per-turn reports and final statistics
    """
    gate = GateState(enabled=True)
    result = ReplayResult()

    for turn in turns:
        utterance = turn.utterance
        gate.record_speech(utterance.timestamp_seconds)

        report = TurnReport(
            utterance=utterance,
            classification=classifier.classify(utterance),
            suggestions=suggester.suggest(utterance, turn.emotion),
        )

        if report.suggestions:
            now = utterance.timestamp_seconds + thresholds.speech_cooldown
            decision = evaluate_prompt(thresholds, gate, report.suggestions[0].relevance, now)
            report.prompt_allowed = decision.allowed
            report.gate_reason = decision.reason.value
            if decision.allowed:
                gate.record_prompt(now)
                gate.dismiss()

        result.turns.append(report)

    result.stats = classifier.session_stats
    result.anti_patterns = [p.value for p in classifier.current_anti_patterns]
    result.prompts_shown = gate.prompts_shown
    logger.info(
        "Replayed %d turn(s): %d question(s), quality %.1f, %d prompt(s)",
        len(turns),
        result.stats.total_questions,
        result.stats.quality_score,
        result.prompts_shown,
    )
    return result
