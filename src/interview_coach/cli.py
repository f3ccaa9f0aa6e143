"""
Command-line interface for Interview Coach.

Usage:
    interview-coach analyze transcript.json                # Replay a transcript
    interview-coach analyze transcript.yaml --methodology jtbd
    interview-coach analyze transcript.json --output-json  # JSON output for CI
    interview-coach thresholds                             # Active thresholds
    interview-coach thresholds --level active --culture east_asian
"""

import argparse
import json
import logging
import sys

from interview_coach.coaching.thresholds import (
    CoachingLevel,
    effective_confidence_threshold,
    effective_cooldown,
)
from interview_coach.config import (
    build_classifier,
    build_suggester,
    build_thresholds,
    get_config,
)
from interview_coach.exceptions import CoachError
from interview_coach.models.cultural import CulturalPreset
from interview_coach.models.entities import Methodology
from interview_coach.transcript import load_transcript, replay_transcript


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_analyze(args):
    """Replay a transcript through the coaching pipeline."""
    config = get_config()
    if args.methodology:
        config.methodology = Methodology(args.methodology)
    if args.level:
        config.coaching_level = CoachingLevel(args.level)

    turns = load_transcript(args.transcript)
    result = replay_transcript(
        turns,
        classifier=build_classifier(config),
        suggester=build_suggester(config),
        thresholds=build_thresholds(config),
    )

    # JSON output mode (for CI/automation)
    if args.output_json:
        print(result.to_json())
        return

    for report in result.turns:
        utterance = report.utterance
        print(f"[{utterance.timestamp_seconds:7.1f}s] {utterance.speaker.value}: {utterance.text}")
        if report.classification is not None:
            c = report.classification
            flags = ", ".join(p.display_name for p in c.anti_patterns)
            flag_str = f"  !! {flags}" if flags else ""
            print(f"    -> {c.type.display_name} ({c.confidence:.2f}){flag_str}")
        for suggestion in report.suggestions:
            print(f"    ?  {suggestion.text} ({suggestion.relevance:.2f}, {suggestion.category.value})")
        if report.prompt_allowed:
            print("    *  prompt would be shown")

    stats = result.stats
    print()
    print(f"Questions: {stats.total_questions}")
    print(f"Open-ended: {stats.open_ended_percentage:.1f}%")
    print(f"Quality score: {stats.quality_score:.1f}")
    if result.anti_patterns:
        print(f"Recent anti-patterns: {', '.join(result.anti_patterns)}")
    print(f"Prompts shown: {result.prompts_shown}")


def cmd_thresholds(args):
    """Show effective thresholds for a coaching level and cultural preset."""
    config = get_config()
    if args.level:
        config.coaching_level = CoachingLevel(args.level)
    if args.culture:
        config.cultural_preset = CulturalPreset(args.culture)
    thresholds = build_thresholds(config)

    data = thresholds.model_dump()
    data["effective_confidence_threshold"] = effective_confidence_threshold(thresholds)
    data["effective_cooldown"] = effective_cooldown(thresholds)

    if args.output_json:
        print(json.dumps(data, indent=2))
        return

    for key, value in data.items():
        print(f"{key:32s} {value}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="interview-coach",
        description="Interview Coach -- rules-based coaching for research interviews",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze
    sub_analyze = subparsers.add_parser("analyze", help="Replay a transcript file")
    sub_analyze.add_argument("transcript", help="Path to a JSON or YAML transcript")
    sub_analyze.add_argument(
        "--methodology",
        choices=[m.value for m in Methodology],
        default=None,
        help="Research methodology lens for follow-up suggestions",
    )
    sub_analyze.add_argument(
        "--level",
        choices=[lvl.value for lvl in CoachingLevel],
        default=None,
        help="Coaching level preset for the prompt gate",
    )
    sub_analyze.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for CI/automation)",
    )
    sub_analyze.set_defaults(func=cmd_analyze)

    # thresholds
    sub_thresholds = subparsers.add_parser("thresholds", help="Show active coaching thresholds")
    sub_thresholds.add_argument(
        "--level",
        choices=[lvl.value for lvl in CoachingLevel],
        default=None,
        help="Coaching level preset",
    )
    sub_thresholds.add_argument(
        "--culture",
        choices=[p.value for p in CulturalPreset],
        default=None,
        help="Cultural communication style preset",
    )
    sub_thresholds.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for CI/automation)",
    )
    sub_thresholds.set_defaults(func=cmd_thresholds)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        _configure_logging("DEBUG" if args.verbose else get_config().log_level)
        args.func(args)
    except CoachError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
