# ABOUTME: Boundary checks for answer events and performance states.
# ABOUTME: Callers validate here so the engine itself can stay total.

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schemas import AnswerEvent, PerformanceState


class InvalidInputError(ValueError):
    """Raised when a caller hands the engine a malformed event or state."""


def validate_event(event: "AnswerEvent") -> "AnswerEvent":
    rt = event.response_time_ms
    if rt is None or not isinstance(rt, (int, float)) or math.isnan(rt) or rt < 0:
        raise InvalidInputError(f"response_time_ms must be a non-negative number, got {rt!r}")
    if not isinstance(event.topic, str) or not event.topic.strip():
        raise InvalidInputError("topic must be a non-empty string")
    return event


def validate_state(state: "PerformanceState", window_size: int = 5) -> "PerformanceState":
    """
    Reject states no sequence of valid events could have produced.

    `window_size` must match the engine that owns the state; pass
    `EngineConfig.window_size` or use `AdaptiveDifficultyEngine.validate_state`.
    """
    if state.total_count < 0 or state.correct_count < 0 or state.streak_count < 0:
        raise InvalidInputError("counts must be non-negative")
    if state.correct_count > state.total_count:
        raise InvalidInputError(
            f"correct_count ({state.correct_count}) exceeds total_count ({state.total_count})"
        )
    if len(state.recent_outcomes) > window_size:
        raise InvalidInputError(f"recent_outcomes holds more than {window_size} entries")
    if state.average_response_time_ms < 0:
        raise InvalidInputError("average_response_time_ms must be non-negative")
    for topic, stats in state.topic_performance.items():
        if stats.correct < 0 or stats.correct > stats.total:
            raise InvalidInputError(f"inconsistent topic stats for '{topic}'")
    return state
