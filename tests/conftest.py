"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- Utterance factories for each speaker role
- A fresh per-session question classifier
- A follow-up suggester with default settings
- Sample transcript files
"""

import json
from pathlib import Path
from typing import Callable, List

import pytest

from interview_coach.coaching.follow_up import FollowUpSuggester
from interview_coach.coaching.question_classifier import QuestionClassifier
from interview_coach.models.entities import Speaker, Utterance


def make_utterance(
    text: str,
    speaker: Speaker = Speaker.INTERVIEWER,
    timestamp: float = 0.0,
) -> Utterance:
    """Build an utterance for tests."""
    return Utterance(speaker=speaker, text=text, timestamp_seconds=timestamp)


@pytest.fixture
def ask() -> Callable[[str], Utterance]:
    """
    Factory for interviewer utterances.

    Returns:
        Callable taking text and returning an interviewer Utterance
    """
    return lambda text, timestamp=0.0: make_utterance(text, Speaker.INTERVIEWER, timestamp)


@pytest.fixture
def answer() -> Callable[[str], Utterance]:
    """Factory for participant utterances."""
    return lambda text, timestamp=0.0: make_utterance(text, Speaker.PARTICIPANT, timestamp)


@pytest.fixture
def classifier() -> QuestionClassifier:
    """Fresh classifier for one session."""
    return QuestionClassifier()


@pytest.fixture
def suggester() -> FollowUpSuggester:
    return FollowUpSuggester()


@pytest.fixture
def sample_turns() -> List[dict]:
    """
    A short interview transcript as raw records.

    Returns:
        List of utterance mappings in arrival order
    """
    return [
        {"id": "u1", "speaker": "interviewer",
         "text": "Tell me about your morning routine.", "timestamp_seconds": 0.0},
        {"id": "u2", "speaker": "participant",
         "text": "Honestly it's always a struggle to get the kids out the door.",
         "timestamp_seconds": 4.0, "emotion": "frustration"},
        {"id": "u3", "speaker": "interviewer",
         "text": "Do you use a calendar app?", "timestamp_seconds": 20.0},
        {"id": "u4", "speaker": "interviewer",
         "text": "Did you set it up yourself?", "timestamp_seconds": 25.0},
        {"id": "u5", "speaker": "interviewer",
         "text": "Is it easy to use?", "timestamp_seconds": 30.0},
        {"id": "u6", "speaker": "participant",
         "text": "Mostly, I just wish it synced with school.", "timestamp": 33.0},
    ]


@pytest.fixture
def transcript_file(tmp_path: Path, sample_turns: List[dict]) -> Path:
    """Write the sample transcript to a JSON file."""
    path = tmp_path / "interview.json"
    path.write_text(json.dumps(sample_turns), encoding="utf-8")
    return path
