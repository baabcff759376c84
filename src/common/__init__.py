# ABOUTME: Makes the shared common package importable across engine and session layers.
# ABOUTME: Re-exports schema types and boundary validation helpers for convenience.

from .schemas import (
    AdaptationDecision,
    AnswerEvent,
    DifficultyLevel,
    DifficultyRecord,
    PerformanceInsights,
    PerformanceState,
    PromptParams,
    TopicAccuracy,
    TopicInsights,
    TopicStats,
    new_state,
)
from .validation import InvalidInputError, validate_event, validate_state

__all__ = [
    "AdaptationDecision",
    "AnswerEvent",
    "DifficultyLevel",
    "DifficultyRecord",
    "InvalidInputError",
    "PerformanceInsights",
    "PerformanceState",
    "PromptParams",
    "TopicAccuracy",
    "TopicInsights",
    "TopicStats",
    "new_state",
    "validate_event",
    "validate_state",
]
