"""
Tests for the interview-coach command-line interface.
"""

import json

import pytest

from interview_coach.cli import main
from interview_coach.config import ENV_PREFIX, Config


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in Config.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{name}".upper(), raising=False)


def run_json(capsys, argv):
    main(argv)
    return json.loads(capsys.readouterr().out)


class TestAnalyze:
    def test_json_output(self, capsys, transcript_file):
        data = run_json(capsys, ["analyze", str(transcript_file), "--output-json"])
        assert len(data["turns"]) == 6
        assert data["stats"]["total_questions"] == 4
        assert data["anti_patterns"] == ["closed_question_run"]
        assert data["prompts_shown"] == 1

    def test_level_flag(self, capsys, transcript_file):
        data = run_json(capsys, ["analyze", str(transcript_file), "--level", "off", "--output-json"])
        assert data["prompts_shown"] == 0

    def test_methodology_flag(self, capsys, transcript_file):
        data = run_json(
            capsys,
            ["analyze", str(transcript_file), "--methodology", "discovery", "--output-json"],
        )
        assert data["turns"][1]["suggestions"]

    def test_text_output(self, capsys, transcript_file):
        main(["analyze", str(transcript_file)])
        out = capsys.readouterr().out
        assert "Questions: 4" in out
        assert "Closed Run" in out
        assert "Prompts shown: 1" in out

    def test_missing_transcript(self, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["analyze", str(tmp_path / "missing.json")])
        assert exc.value.code == 1
        assert "ERROR" in capsys.readouterr().out

    def test_non_text_emotion_reports_error(self, capsys, tmp_path):
        path = tmp_path / "interview.yaml"
        path.write_text("- speaker: participant\n  text: Fine.\n  emotion: 5\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["analyze", str(path)])
        assert exc.value.code == 1
        assert "ERROR" in capsys.readouterr().out

    def test_undecodable_transcript_reports_error(self, capsys, tmp_path):
        path = tmp_path / "interview.json"
        path.write_bytes(b'[{"speaker": "participant", "text": "\xff\xfe"}]')
        with pytest.raises(SystemExit) as exc:
            main(["analyze", str(path)])
        assert exc.value.code == 1
        assert "ERROR" in capsys.readouterr().out


class TestThresholds:
    def test_level_and_culture(self, capsys):
        data = run_json(
            capsys,
            ["thresholds", "--level", "active", "--culture", "east_asian", "--output-json"],
        )
        assert data["cooldown_duration"] == pytest.approx(90.0)
        assert data["speech_cooldown"] == pytest.approx(7.2)
        assert data["effective_cooldown"] == pytest.approx(60.0)
        assert data["effective_confidence_threshold"] == pytest.approx(0.5)

    def test_reads_coach_yaml(self, capsys, tmp_path):
        (tmp_path / "coach.yaml").write_text("coaching_level: minimal\n", encoding="utf-8")
        data = run_json(capsys, ["thresholds", "--output-json"])
        assert data["max_prompts_per_session"] == 2
        assert data["effective_confidence_threshold"] == 1.0

    @pytest.mark.parametrize("flags", [
        [],
        ["--level", "balanced"],
        ["--culture", "east_asian"],
        ["--level", "active", "--culture", "western"],
    ])
    def test_flags_keep_yaml_overrides(self, capsys, tmp_path, flags):
        (tmp_path / "coach.yaml").write_text(
            "thresholds:\n  max_prompts_per_session: 9\n", encoding="utf-8"
        )
        data = run_json(capsys, ["thresholds", *flags, "--output-json"])
        assert data["max_prompts_per_session"] == 9

    def test_flags_match_analyze_thresholds(self, capsys, tmp_path):
        (tmp_path / "coach.yaml").write_text(
            "thresholds:\n  cooldown_duration: 30\n", encoding="utf-8"
        )
        data = run_json(
            capsys,
            ["thresholds", "--level", "minimal", "--culture", "east_asian", "--output-json"],
        )
        assert data["cooldown_duration"] == pytest.approx(45.0)
        assert data["speech_cooldown"] == pytest.approx(19.2)
        assert data["minimum_confidence"] == pytest.approx(0.95)

    def test_text_output(self, capsys):
        main(["thresholds"])
        assert "minimum_confidence" in capsys.readouterr().out

    def test_invalid_config(self, capsys, tmp_path):
        (tmp_path / "coach.yaml").write_text("closed_run_threshold: 0\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            main(["thresholds"])
        assert exc.value.code == 1
        assert "ERROR" in capsys.readouterr().out


class TestMain:
    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 0
        assert "interview-coach" in capsys.readouterr().out
