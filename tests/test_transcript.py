"""
Tests for transcript loading and offline replay through the pipeline.
"""

import json

import pytest
import yaml

from interview_coach.coaching.follow_up import FollowUpSuggester
from interview_coach.coaching.question_classifier import QuestionClassifier
from interview_coach.coaching.thresholds import BALANCED_THRESHOLDS, OFF_THRESHOLDS
from interview_coach.exceptions import CoachError, TranscriptLoadError
from interview_coach.models.entities import AntiPattern, QuestionType, Speaker
from interview_coach.transcript import load_transcript, parse_turns, replay_transcript


def replay(turns, thresholds=BALANCED_THRESHOLDS):
    return replay_transcript(turns, QuestionClassifier(), FollowUpSuggester(), thresholds)


class TestLoading:
    def test_load_json(self, transcript_file):
        turns = load_transcript(transcript_file)
        assert [t.utterance.id for t in turns] == ["u1", "u2", "u3", "u4", "u5", "u6"]
        assert turns[0].utterance.speaker == Speaker.INTERVIEWER
        assert turns[1].emotion == "frustration"
        assert turns[0].emotion is None

    def test_timestamp_alias(self, transcript_file):
        turns = load_transcript(transcript_file)
        assert turns[5].utterance.timestamp_seconds == 33.0

    def test_load_yaml(self, tmp_path, sample_turns):
        path = tmp_path / "interview.yaml"
        path.write_text(yaml.safe_dump(sample_turns), encoding="utf-8")
        turns = load_transcript(path)
        assert len(turns) == 6
        assert turns[1].utterance.speaker == Speaker.PARTICIPANT

    def test_missing_file(self, tmp_path):
        with pytest.raises(TranscriptLoadError):
            load_transcript(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(TranscriptLoadError):
            load_transcript(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"speaker": "participant", "text": "\xff\xfe"}]')
        with pytest.raises(TranscriptLoadError):
            load_transcript(path)

    def test_directory_path(self, tmp_path):
        folder = tmp_path / "interview.yaml"
        folder.mkdir()
        with pytest.raises(TranscriptLoadError):
            load_transcript(folder)

    def test_yaml_emotion_must_be_text(self, tmp_path):
        path = tmp_path / "interview.yaml"
        path.write_text(
            "- speaker: participant\n  text: Fine.\n  emotion: yes\n",
            encoding="utf-8",
        )
        with pytest.raises(TranscriptLoadError):
            load_transcript(path)

    @pytest.mark.parametrize("records", [
        {"speaker": "interviewer"},
        ["not a mapping"],
        [{"speaker": "moderator", "text": "Hi?"}],
        [{"speaker": "interviewer", "text": "Hi?", "timestamp_seconds": -1}],
        [{"speaker": "participant", "text": "Fine.", "emotion": 5}],
        [{"speaker": "participant", "text": "Fine.", "emotion": True}],
    ])
    def test_invalid_records(self, records):
        with pytest.raises(TranscriptLoadError):
            parse_turns(records)

    def test_load_error_is_coach_error(self):
        assert issubclass(TranscriptLoadError, CoachError)


class TestReplay:
    def test_per_turn_reports(self, sample_turns):
        result = replay(parse_turns(sample_turns))
        reports = result.turns
        assert len(reports) == 6

        assert reports[0].classification.type == QuestionType.OPEN_ENDED
        assert reports[0].suggestions == []
        assert reports[0].gate_reason is None

        assert reports[1].classification is None
        assert len(reports[1].suggestions) == 3
        assert reports[1].prompt_allowed
        assert reports[1].gate_reason == "allowed"

        assert AntiPattern.CLOSED_QUESTION_RUN in reports[4].classification.anti_patterns

        assert not reports[5].prompt_allowed
        assert reports[5].gate_reason == "cooldown"

    def test_session_summary(self, sample_turns):
        result = replay(parse_turns(sample_turns))
        assert result.stats.total_questions == 4
        assert result.stats.open_ended_count == 1
        assert result.stats.closed_count == 3
        assert result.stats.quality_score == pytest.approx(25.0)
        assert result.anti_patterns == ["closed_question_run"]
        assert result.prompts_shown == 1

    def test_off_level_shows_nothing(self, sample_turns):
        result = replay(parse_turns(sample_turns), thresholds=OFF_THRESHOLDS)
        assert result.prompts_shown == 0
        assert result.turns[1].gate_reason == "session_budget"

    def test_json_serialization(self, sample_turns):
        data = json.loads(replay(parse_turns(sample_turns)).to_json())
        assert data["turns"][0]["classification"]["type"] == "open_ended"
        assert data["turns"][0]["utterance"]["speaker"] == "interviewer"
        assert data["stats"]["type_counts"] == {"open_ended": 1, "closed": 3}
        assert data["prompts_shown"] == 1
