# ABOUTME: Applies answer events to a performance state without mutating it.
# ABOUTME: Maintains counters, the rolling outcome window, running latency mean, and topic tallies.

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from src.common.schemas import (
    AnswerEvent,
    DifficultyLevel,
    DifficultyRecord,
    PerformanceState,
    TopicStats,
)


def update_state(state: PerformanceState, event: AnswerEvent, window_size: int = 5) -> PerformanceState:
    """
    Return the state that follows `state` after one answer.

    The running mean must divide by the new total and weight the old mean by
    the old total; reordering these silently corrupts the average.
    """
    total = state.total_count + 1
    if event.is_correct:
        correct = state.correct_count + 1
        streak = state.streak_count + 1
    else:
        correct = state.correct_count
        streak = 0

    window = (state.recent_outcomes + (bool(event.is_correct),))[-window_size:]

    average = (state.average_response_time_ms * (total - 1) + event.response_time_ms) / total

    topics = dict(state.topic_performance)
    prior = topics.get(event.topic, TopicStats())
    topics[event.topic] = TopicStats(
        correct=prior.correct + (1 if event.is_correct else 0),
        total=prior.total + 1,
    )

    return replace(
        state,
        correct_count=correct,
        total_count=total,
        streak_count=streak,
        recent_outcomes=window,
        average_response_time_ms=average,
        topic_performance=topics,
    )


def record_difficulty(
    state: PerformanceState,
    difficulty: DifficultyLevel,
    timestamp: Optional[datetime] = None,
) -> PerformanceState:
    """Append a difficulty change to the history log."""
    entry = DifficultyRecord(
        difficulty=DifficultyLevel.parse(difficulty),
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    return replace(state, difficulty_history=state.difficulty_history + (entry,))
