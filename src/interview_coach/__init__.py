"""
Interview Coach

A deterministic, rules-based coaching engine for research interviews.
Classifies interviewer questions, flags interviewing anti-patterns,
suggests follow-up questions and gates when prompts may be shown.
"""

__version__ = "0.1.0"
__author__ = "Interview Coach Team"

from interview_coach.config import Config

__all__ = ["Config", "__version__"]
