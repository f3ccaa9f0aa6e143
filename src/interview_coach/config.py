"""
Configuration management for Interview Coach.

Provides centralized configuration using Pydantic for validation and
environment variable support. Supports coach.yaml for per-project settings.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from interview_coach.coaching.follow_up import FollowUpSuggester
from interview_coach.coaching.question_classifier import QuestionClassifier
from interview_coach.coaching.thresholds import (
    CoachingLevel,
    CoachingThresholds,
    adjust_for_culture,
    thresholds_for_level,
)
from interview_coach.exceptions import ConfigError
from interview_coach.models.cultural import CulturalContext, CulturalPreset
from interview_coach.models.entities import Methodology

logger = logging.getLogger(__name__)

ENV_PREFIX = "INTERVIEW_COACH_"
CONFIG_FILENAME = "coach.yaml"


def load_coach_yaml(search_dir: Optional[Path] = None) -> dict:
    """
    Load coach.yaml configuration file.

    Searches for coach.yaml starting from search_dir (or the current
    working directory) and walking up to 3 parent directories.

    Args:
        search_dir: Directory to start searching from

    Returns:
        Dictionary with coach.yaml contents, or empty dict if not found

    Raises:
        ConfigError: If the file exists but is not a YAML mapping
    """
    start = Path(search_dir) if search_dir else Path.cwd()
    for parent in [start] + list(start.parents)[:3]:
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            with open(candidate, "r", encoding="utf-8") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as exc:
                    raise ConfigError(f"Could not parse {candidate}: {exc}") from exc
            if not isinstance(data, dict):
                raise ConfigError(f"{candidate} must contain a mapping")
            logger.debug("Loaded configuration from %s", candidate)
            return data
    return {}


class Config(BaseSettings):
    """
    Application configuration with environment variable support.

    Configuration can be provided via:
    1. Environment variables (prefixed with INTERVIEW_COACH_)
    2. .env file
    3. coach.yaml
    4. Default values

    Keyword arguments (how coach.yaml values are passed in) rank below
    environment variables and the .env file.

    Example:
        export INTERVIEW_COACH_COACHING_LEVEL="active"
        export INTERVIEW_COACH_THRESHOLDS='{"cooldown_duration": 45}'
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Coaching gate
    coaching_level: CoachingLevel = Field(
        default=CoachingLevel.BALANCED,
        description="Preset strictness level (off/minimal/balanced/active)"
    )
    thresholds: Dict[str, Any] = Field(
        default_factory=dict,
        description="Threshold overrides applied on top of the level preset"
    )
    cultural_preset: CulturalPreset = Field(
        default=CulturalPreset.WESTERN,
        description="Cultural communication style used to rescale timing"
    )

    # Question classifier
    closed_run_threshold: int = Field(
        default=3,
        ge=1,
        description="Consecutive closed questions that count as a run"
    )

    # Follow-up suggester
    methodology: Methodology = Field(
        default=Methodology.GENERAL,
        description="Research methodology lens (general/jtbd/usability/discovery)"
    )
    max_suggestions: int = Field(
        default=3,
        ge=0,
        description="Maximum follow-up suggestions returned per utterance"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the command-line interface"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Init kwargs carry coach.yaml values, so they rank below .env.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def get_config(search_dir: Optional[Path] = None) -> Config:
    """
    Get the application configuration instance.

    Merges settings from environment variables, .env file,
    and coach.yaml (if present). Environment variables and .env
    values win over coach.yaml values.

    Args:
        search_dir: Directory to start the coach.yaml search from

    Returns:
        Config: Application configuration

    Raises:
        ConfigError: If a value fails validation
    """
    yaml_values = {
        key: value
        for key, value in load_coach_yaml(search_dir).items()
        if key in Config.model_fields
    }
    try:
        return Config(**yaml_values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def build_thresholds(config: Config) -> CoachingThresholds:
    """
    Build the active thresholds for a configuration.

    Starts from the coaching level preset, applies any threshold overrides
    and then rescales for the configured cultural preset.
    """
    base = thresholds_for_level(config.coaching_level)
    if config.thresholds:
        base = base.with_overrides(**config.thresholds)
    context = CulturalContext.for_preset(config.cultural_preset)
    return adjust_for_culture(base, context)


def build_classifier(config: Config) -> QuestionClassifier:
    """Create a fresh per-session classifier from configuration."""
    return QuestionClassifier(closed_run_threshold=config.closed_run_threshold)


def build_suggester(config: Config) -> FollowUpSuggester:
    return FollowUpSuggester(
        methodology=config.methodology,
        max_suggestions=config.max_suggestions,
    )
