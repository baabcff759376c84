# ABOUTME: Implements the adaptive difficulty engine over explicit performance states.
# ABOUTME: Decides whether to raise, lower, or hold difficulty and packages insights.

from __future__ import annotations

from typing import Optional

from src.common.schemas import (
    AdaptationDecision,
    AnswerEvent,
    DifficultyLevel,
    PerformanceState,
    PromptParams,
    TopicInsights,
)
from src.common.validation import validate_state as _check_state

from .config import EngineConfig
from .insights import adaptation_reason, focus_topics, generate_insights
from .state import update_state as _apply_event
from .topics import analyze_topic_performance


class AdaptiveDifficultyEngine:
    """
    Rule-based difficulty adaptation.

    Algorithm:
    1. Accuracy over all answers and over the rolling window
    2. Streak bonus once the learner has enough consecutive correct answers
    3. Response-time factor: very fast nudges up, very slow nudges down
    4. Combined score compared against baseline +/- threshold
    5. Step at most one level, clamped at easy and hard

    Instances hold only configuration; every call takes and returns state.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def update_state(self, state: PerformanceState, event: AnswerEvent) -> PerformanceState:
        return _apply_event(state, event, window_size=self.config.window_size)

    def validate_state(self, state: PerformanceState) -> PerformanceState:
        """Boundary check using this engine's configured window size."""
        return _check_state(state, window_size=self.config.window_size)

    def analyze_response_time(self, average_response_time_ms: float) -> float:
        """Map average latency to a factor in {-adj, 0, +adj}."""
        seconds = average_response_time_ms / 1000
        if seconds < self.config.fast_response_seconds:
            return self.config.response_time_adjustment
        if seconds > self.config.slow_response_seconds:
            return -self.config.response_time_adjustment
        return 0.0

    def next_difficulty(
        self,
        current_difficulty: DifficultyLevel,
        adjusted_accuracy: float,
        response_time_factor: float,
        total_answers: int,
    ) -> DifficultyLevel:
        current = DifficultyLevel.parse(current_difficulty)
        if total_answers < self.config.min_answers_for_adaptation:
            return current

        combined = adjusted_accuracy + response_time_factor * self.config.response_time_weight
        if combined > self.config.upper_bound:
            return current.step(1)
        if combined < self.config.lower_bound:
            return current.step(-1)
        return current

    def confidence_for(self, total_answers: int) -> str:
        if total_answers < 5:
            return "low"
        if total_answers < 10:
            return "medium"
        return "high"

    def analyze_topics(self, state: PerformanceState) -> TopicInsights:
        return analyze_topic_performance(
            state.topic_performance,
            baseline_accuracy=self.config.baseline_accuracy,
            mastery_threshold=self.config.topic_mastery_threshold,
        )

    def decide(self, state: PerformanceState, current_difficulty: DifficultyLevel) -> AdaptationDecision:
        """Compute the next difficulty and insights; `state` is left untouched."""
        current = DifficultyLevel.parse(current_difficulty)
        total = state.total_count

        current_accuracy = state.correct_count / total if total > 0 else 0.0
        window = state.recent_outcomes
        recent_accuracy = sum(1 for v in window if v) / len(window) if window else current_accuracy

        if state.streak_count >= self.config.streak_length:
            adjusted_accuracy = min(1.0, recent_accuracy + self.config.streak_bonus)
        else:
            adjusted_accuracy = recent_accuracy

        rt_factor = self.analyze_response_time(state.average_response_time_ms)
        nxt = self.next_difficulty(current, adjusted_accuracy, rt_factor, total)
        changed = nxt != current

        topic_insights = self.analyze_topics(state)
        insights = generate_insights(current_accuracy, state.streak_count, window, topic_insights)

        return AdaptationDecision(
            next_difficulty=nxt,
            changed=changed,
            current_accuracy=current_accuracy,
            recent_accuracy=recent_accuracy,
            adjusted_accuracy=adjusted_accuracy,
            response_time_factor=rt_factor,
            confidence=self.confidence_for(total),
            topic_insights=topic_insights,
            insights=insights,
            adaptation_reason=adaptation_reason(changed, nxt, current_accuracy),
        )

    def prompt_params(self, decision: AdaptationDecision) -> PromptParams:
        """Parameters for generating the next question at the chosen difficulty."""
        return PromptParams(
            target_difficulty=decision.next_difficulty,
            focus_topics=focus_topics(decision.topic_insights),
            user_performance=decision.insights.accuracy,
            strong_topics=decision.insights.strong_areas,
            weak_topics=decision.insights.weak_areas,
            adaptation_reason=decision.adaptation_reason,
        )


def update_state(state: PerformanceState, event: AnswerEvent) -> PerformanceState:
    """Apply one answer with the default configuration."""
    return AdaptiveDifficultyEngine().update_state(state, event)


def decide(state: PerformanceState, current_difficulty: DifficultyLevel) -> AdaptationDecision:
    """Decide the next difficulty with the default configuration."""
    return AdaptiveDifficultyEngine().decide(state, current_difficulty)
