# ABOUTME: Tests performance-state updates from answer events.
# ABOUTME: Covers counters, streak resets, the rolling window, running mean, and topic tallies.

from datetime import datetime, timezone

import pytest

from src.adaptive_engine.state import record_difficulty, update_state
from src.common.schemas import AnswerEvent, DifficultyLevel, PerformanceState, TopicStats, new_state


def _ev(correct: bool, rt: float = 20000, topic: str = "Algebra") -> AnswerEvent:
    return AnswerEvent(is_correct=correct, response_time_ms=rt, topic=topic)


def _replay(outcomes, rts=None, topic="Algebra") -> PerformanceState:
    state = new_state(DifficultyLevel.MEDIUM)
    rts = rts or [20000] * len(outcomes)
    for correct, rt in zip(outcomes, rts):
        state = update_state(state, _ev(correct, rt, topic))
    return state


def test_totals_track_event_count():
    outcomes = [True, False, True, True, False, False, True]
    state = _replay(outcomes)
    assert state.total_count == 7
    assert state.correct_count == 4
    assert state.correct_count <= state.total_count


def test_streak_increments_and_resets():
    state = _replay([True, True, True])
    assert state.streak_count == 3
    state = update_state(state, _ev(False))
    assert state.streak_count == 0
    state = update_state(state, _ev(True))
    assert state.streak_count == 1


def test_window_keeps_last_five_outcomes():
    outcomes = [False, True, True, False, True, True]
    state = _replay(outcomes)
    assert len(state.recent_outcomes) == 5
    assert state.recent_outcomes == tuple(outcomes[1:])


def test_running_mean_matches_arithmetic_mean():
    rts = [1200.0, 45000.0, 8000.5, 0.0, 61000.0, 15000.0, 3333.0]
    state = _replay([True] * len(rts), rts)
    assert state.average_response_time_ms == pytest.approx(sum(rts) / len(rts))


def test_first_event_sets_mean_to_its_response_time():
    state = update_state(new_state(), _ev(True, 12345))
    assert state.average_response_time_ms == 12345


def test_topic_tallies_accumulate_per_topic():
    state = new_state()
    state = update_state(state, _ev(True, topic="Algebra"))
    state = update_state(state, _ev(False, topic="Algebra"))
    state = update_state(state, _ev(True, topic="Geometry"))
    assert state.topic_performance["Algebra"] == TopicStats(correct=1, total=2)
    assert state.topic_performance["Geometry"] == TopicStats(correct=1, total=1)


def test_update_does_not_touch_prior_state():
    before = update_state(new_state(), _ev(True, topic="Algebra"))
    snapshot = before.to_dict()
    after = update_state(before, _ev(False, topic="Algebra"))

    assert before.to_dict() == snapshot
    assert before.topic_performance["Algebra"].total == 1
    assert after.topic_performance["Algebra"].total == 2
    assert after.topic_performance is not before.topic_performance


def test_custom_window_size():
    state = new_state()
    for correct in [True, False, True]:
        state = update_state(state, _ev(correct), window_size=2)
    assert state.recent_outcomes == (False, True)


def test_new_state_seeds_difficulty_history():
    started = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    state = new_state(DifficultyLevel.HARD, started_at=started)
    assert state.total_count == 0
    assert len(state.difficulty_history) == 1
    assert state.difficulty_history[0].difficulty == DifficultyLevel.HARD
    assert state.difficulty_history[0].timestamp == started
    assert state.current_difficulty == DifficultyLevel.HARD


def test_record_difficulty_appends():
    state = new_state(DifficultyLevel.MEDIUM)
    ts = datetime(2024, 3, 1, 9, 5, tzinfo=timezone.utc)
    updated = record_difficulty(state, DifficultyLevel.HARD, ts)
    assert [r.difficulty for r in updated.difficulty_history] == [DifficultyLevel.MEDIUM, DifficultyLevel.HARD]
    assert updated.difficulty_history[-1].timestamp == ts
    assert len(state.difficulty_history) == 1


def test_empty_history_defaults_to_medium():
    assert PerformanceState().current_difficulty == DifficultyLevel.MEDIUM
