"""
Cultural context settings consumed by the coaching threshold model.

Each preset describes a communication style: how long a silence may run
before it is significant, and how quickly questions are normally paced.
The coaching core only reads these values; it never owns or mutates them.
"""

from enum import Enum
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field

# Silence tolerance of the baseline (western) preset, in seconds.
BASELINE_SILENCE_TOLERANCE = 5.0


class CulturalPreset(str, Enum):
    """Predefined communication style presets."""
    WESTERN = "western"
    EAST_ASIAN = "east_asian"
    LATIN_AMERICAN = "latin_american"
    MIDDLE_EASTERN = "middle_eastern"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return CULTURAL_PRESET_DISPLAY_NAMES[self]


CULTURAL_PRESET_DISPLAY_NAMES: Dict[CulturalPreset, str] = {
    CulturalPreset.WESTERN: "Western",
    CulturalPreset.EAST_ASIAN: "East Asian",
    CulturalPreset.LATIN_AMERICAN: "Latin American",
    CulturalPreset.MIDDLE_EASTERN: "Middle Eastern",
    CulturalPreset.CUSTOM: "Custom",
}


class FormalityLevel(str, Enum):
    """Tone used for coaching prompt language."""
    CASUAL = "casual"
    NEUTRAL = "neutral"
    FORMAL = "formal"


class CulturalContext(BaseModel):
    """
    Cultural context configuration.

    Only ``silence_tolerance_seconds`` and ``question_pacing_multiplier``
    influence threshold derivation; the remaining fields are carried for
    the presentation layer.
    """
    model_config = ConfigDict(frozen=True)

    preset: CulturalPreset = CulturalPreset.WESTERN
    silence_tolerance_seconds: float = Field(default=BASELINE_SILENCE_TOLERANCE, gt=0.0)
    question_pacing_multiplier: float = Field(default=1.0, gt=0.0)
    interruption_sensitivity: float = Field(default=0.5, ge=0.0, le=1.0)
    formality_level: FormalityLevel = FormalityLevel.CASUAL
    show_coaching_explanations: bool = True
    enable_bias_alerts: bool = True

    @classmethod
    def for_preset(cls, preset: Union[CulturalPreset, str]) -> "CulturalContext":
        """
        Build the context for a named preset.

        Args:
            preset: Preset enum member or its string value

        Returns:
            CulturalContext with the preset's fixed values

        Raises:
            ValueError: If the preset name is not recognised
        """
        preset = CulturalPreset(preset)
        if preset == CulturalPreset.CUSTOM:
            # Custom starts from the western baseline.
            return cls(**{**_PRESET_VALUES[CulturalPreset.WESTERN], "preset": preset})
        return cls(preset=preset, **_PRESET_VALUES[preset])


_PRESET_VALUES: Dict[CulturalPreset, dict] = {
    CulturalPreset.WESTERN: {
        "silence_tolerance_seconds": 5.0,
        "question_pacing_multiplier": 1.0,
        "interruption_sensitivity": 0.5,
        "formality_level": FormalityLevel.CASUAL,
    },
    CulturalPreset.EAST_ASIAN: {
        "silence_tolerance_seconds": 12.0,
        "question_pacing_multiplier": 1.5,
        "interruption_sensitivity": 0.8,
        "formality_level": FormalityLevel.FORMAL,
    },
    CulturalPreset.LATIN_AMERICAN: {
        "silence_tolerance_seconds": 4.0,
        "question_pacing_multiplier": 0.8,
        "interruption_sensitivity": 0.3,
        "formality_level": FormalityLevel.CASUAL,
    },
    CulturalPreset.MIDDLE_EASTERN: {
        "silence_tolerance_seconds": 8.0,
        "question_pacing_multiplier": 1.3,
        "interruption_sensitivity": 0.7,
        "formality_level": FormalityLevel.FORMAL,
    },
}

DEFAULT_CULTURAL_CONTEXT = CulturalContext.for_preset(CulturalPreset.WESTERN)
