# ABOUTME: Turns performance numbers into trend labels and recommendation text.
# ABOUTME: Mirrors the wording learners see after each answer and in prompt parameters.

from __future__ import annotations

from typing import Sequence, Tuple

from src.common.schemas import DifficultyLevel, PerformanceInsights, TopicInsights

TREND_MARGIN = 0.2
MIN_TREND_WINDOW = 4


def calculate_trend(recent_outcomes: Sequence[bool]) -> str:
    """Compare the first two and last two outcomes of the rolling window."""
    if len(recent_outcomes) < MIN_TREND_WINDOW:
        return "stable"

    first_half = sum(1 for v in recent_outcomes[:2] if v) / 2
    second_half = sum(1 for v in recent_outcomes[-2:] if v) / 2

    if second_half > first_half + TREND_MARGIN:
        return "improving"
    if second_half < first_half - TREND_MARGIN:
        return "declining"
    return "stable"


def build_recommendation(current_accuracy: float, topic_insights: TopicInsights) -> str:
    if current_accuracy >= 0.8:
        rec = "Excellent performance! Ready for more challenging questions."
    elif current_accuracy >= 0.6:
        rec = "Good progress. Continue at this pace for optimal learning."
    else:
        rec = "Consider reviewing the material before continuing."

    if topic_insights.weak_topics:
        weakest = topic_insights.weak_topics[0].topic
        rec += f" Focus on improving your understanding of {weakest}."
    return rec


def adaptation_reason(changed: bool, next_difficulty: DifficultyLevel, accuracy: float) -> str:
    if not changed:
        return "Maintaining current difficulty level based on performance"
    level = DifficultyLevel.parse(next_difficulty).value
    if accuracy > 0.8:
        return f"Increasing difficulty to {level} - you're doing great!"
    if accuracy < 0.6:
        return f"Adjusting to {level} difficulty to help you learn better"
    return f"Adapting difficulty to {level} based on your progress"


def generate_insights(
    current_accuracy: float,
    streak_count: int,
    recent_outcomes: Sequence[bool],
    topic_insights: TopicInsights,
) -> PerformanceInsights:
    return PerformanceInsights(
        accuracy=current_accuracy,
        trend=calculate_trend(recent_outcomes),
        recommendation=build_recommendation(current_accuracy, topic_insights),
        streak_count=streak_count,
        strong_areas=tuple(t.topic for t in topic_insights.strong_topics),
        weak_areas=tuple(t.topic for t in topic_insights.weak_topics),
        mastered_areas=tuple(t.topic for t in topic_insights.mastered_topics),
    )


def focus_topics(topic_insights: TopicInsights, limit: int = 2) -> Tuple[str, ...]:
    # Weak topics first for remediation; otherwise challenge the strong ones.
    if topic_insights.weak_topics:
        return tuple(t.topic for t in topic_insights.weak_topics[:limit])
    if topic_insights.strong_topics:
        return tuple(t.topic for t in topic_insights.strong_topics[:limit])
    return ()
