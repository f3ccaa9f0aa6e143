"""
Tests for coaching thresholds: clamping, derived values, presets and
cultural adjustment.
"""

import math

import pytest
from pydantic import ValidationError

from interview_coach.coaching.thresholds import (
    ACTIVE_THRESHOLDS,
    BALANCED_THRESHOLDS,
    DEFAULT_THRESHOLDS,
    MINIMAL_THRESHOLDS,
    OFF_THRESHOLDS,
    CoachingLevel,
    CoachingThresholds,
    adjust_for_culture,
    create_thresholds,
    effective_confidence_threshold,
    effective_cooldown,
    thresholds_for_level,
)
from interview_coach.models.cultural import CulturalContext, CulturalPreset


class TestDefaults:
    def test_silence_first_defaults(self):
        t = CoachingThresholds()
        assert t.minimum_confidence == 0.85
        assert t.cooldown_duration == 120.0
        assert t.speech_cooldown == 5.0
        assert t.max_prompts_per_session == 3
        assert t.auto_dismiss_duration == 8.0
        assert t.fade_in_duration == 0.3
        assert t.fade_out_duration == 0.25
        assert t.sensitivity_multiplier == 1.0

    def test_create_without_overrides_is_default(self):
        assert create_thresholds() == DEFAULT_THRESHOLDS == CoachingThresholds()

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_THRESHOLDS.cooldown_duration = 1.0


class TestClamping:
    @pytest.mark.parametrize("field,value,expected", [
        ("minimum_confidence", 5.0, 1.0),
        ("minimum_confidence", -1.0, 0.0),
        ("sensitivity_multiplier", 10, 3.0),
        ("sensitivity_multiplier", 0, 0.1),
        ("cooldown_duration", -5, 0.0),
        ("speech_cooldown", -0.5, 0.0),
        ("auto_dismiss_duration", 0, 1.0),
        ("fade_in_duration", 0, 0.1),
        ("fade_out_duration", 0.01, 0.1),
        ("max_prompts_per_session", -2, 0),
        ("max_prompts_per_session", 2.7, 2),
    ])
    def test_out_of_range_clamped(self, field, value, expected):
        t = create_thresholds({field: value})
        assert getattr(t, field) == pytest.approx(expected)

    def test_unbounded_fields_keep_large_values(self):
        assert create_thresholds(cooldown_duration=3600).cooldown_duration == 3600.0

    def test_kwargs_win_over_mapping(self):
        t = create_thresholds({"speech_cooldown": 2.0}, speech_cooldown=7.0)
        assert t.speech_cooldown == 7.0

    @pytest.mark.parametrize("value", ["soon", math.nan, None, [1, 2]])
    def test_unusable_value_falls_back_to_default(self, value):
        t = create_thresholds(cooldown_duration=value)
        assert t.cooldown_duration == 120.0

    def test_infinity_without_upper_bound_falls_back(self):
        assert create_thresholds(speech_cooldown=math.inf).speech_cooldown == 5.0

    def test_infinity_with_upper_bound_clamps(self):
        assert create_thresholds(minimum_confidence=math.inf).minimum_confidence == 1.0

    def test_numeric_strings_accepted(self):
        assert create_thresholds(minimum_confidence="0.9").minimum_confidence == pytest.approx(0.9)

    def test_persisted_data_clamped(self):
        t = CoachingThresholds.model_validate({"minimum_confidence": 2, "cooldown_duration": -1})
        assert t.minimum_confidence == 1.0
        assert t.cooldown_duration == 0.0

    def test_with_overrides_reclamps_and_leaves_original(self):
        base = CoachingThresholds()
        changed = base.with_overrides(sensitivity_multiplier=9.0, speech_cooldown=2.0)
        assert changed.sensitivity_multiplier == 3.0
        assert changed.speech_cooldown == 2.0
        assert base.sensitivity_multiplier == 1.0
        assert base.speech_cooldown == 5.0


class TestDerivedValues:
    def test_default_effective_threshold(self):
        assert effective_confidence_threshold(DEFAULT_THRESHOLDS) == pytest.approx(0.85)

    def test_low_sensitivity_capped_at_one(self):
        t = create_thresholds(sensitivity_multiplier=0.5)
        assert effective_confidence_threshold(t) == 1.0

    def test_high_sensitivity_floored(self):
        assert effective_confidence_threshold(ACTIVE_THRESHOLDS) == 0.5

    def test_monotonic_in_sensitivity(self):
        values = [
            effective_confidence_threshold(create_thresholds(sensitivity_multiplier=s))
            for s in (0.1, 0.5, 0.9, 1.0, 1.2, 1.5, 2.0, 3.0)
        ]
        assert values == sorted(values, reverse=True)
        assert all(0.5 <= v <= 1.0 for v in values)

    def test_effective_cooldown(self):
        t = create_thresholds(cooldown_duration=120, sensitivity_multiplier=2.0)
        assert effective_cooldown(t) == pytest.approx(60.0)


class TestPresets:
    def test_off_allows_no_prompts(self):
        assert OFF_THRESHOLDS.max_prompts_per_session == 0
        assert OFF_THRESHOLDS.minimum_confidence == DEFAULT_THRESHOLDS.minimum_confidence

    @pytest.mark.parametrize("preset,confidence,cooldown,speech,prompts,dismiss,sensitivity", [
        (MINIMAL_THRESHOLDS, 0.95, 180.0, 8.0, 2, 6.0, 0.5),
        (BALANCED_THRESHOLDS, 0.80, 90.0, 4.0, 4, 10.0, 1.0),
        (ACTIVE_THRESHOLDS, 0.70, 60.0, 3.0, 6, 12.0, 1.5),
    ])
    def test_preset_values(self, preset, confidence, cooldown, speech, prompts, dismiss, sensitivity):
        assert preset.minimum_confidence == confidence
        assert preset.cooldown_duration == cooldown
        assert preset.speech_cooldown == speech
        assert preset.max_prompts_per_session == prompts
        assert preset.auto_dismiss_duration == dismiss
        assert preset.sensitivity_multiplier == sensitivity

    def test_lookup_by_name(self):
        assert thresholds_for_level("balanced") == BALANCED_THRESHOLDS
        assert thresholds_for_level(CoachingLevel.OFF) == OFF_THRESHOLDS

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            thresholds_for_level("aggressive")

    def test_level_descriptions(self):
        assert CoachingLevel.ACTIVE.display_name == "Active"
        assert all(level.description for level in CoachingLevel)


class TestCulturalAdjustment:
    def test_custom_context_scaling(self):
        context = CulturalContext(silence_tolerance_seconds=12.0, question_pacing_multiplier=1.5)
        base = CoachingThresholds()
        adjusted = adjust_for_culture(base, context)
        assert adjusted.speech_cooldown == pytest.approx(12.0)
        assert adjusted.cooldown_duration == pytest.approx(180.0)
        assert adjusted.minimum_confidence == base.minimum_confidence
        assert adjusted.max_prompts_per_session == base.max_prompts_per_session
        assert base.speech_cooldown == 5.0
        assert base.cooldown_duration == 120.0

    def test_western_is_identity(self):
        adjusted = adjust_for_culture(DEFAULT_THRESHOLDS, CulturalContext.for_preset("western"))
        assert adjusted == DEFAULT_THRESHOLDS

    @pytest.mark.parametrize("preset,speech,cooldown", [
        (CulturalPreset.EAST_ASIAN, 12.0, 180.0),
        (CulturalPreset.LATIN_AMERICAN, 4.0, 96.0),
        (CulturalPreset.MIDDLE_EASTERN, 8.0, 156.0),
    ])
    def test_presets(self, preset, speech, cooldown):
        adjusted = adjust_for_culture(DEFAULT_THRESHOLDS, CulturalContext.for_preset(preset))
        assert adjusted.speech_cooldown == pytest.approx(speech)
        assert adjusted.cooldown_duration == pytest.approx(cooldown)
