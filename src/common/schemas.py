# ABOUTME: Defines canonical data structures shared by the engine and the session layer.
# ABOUTME: Centralizes answer events, performance state, and adaptation decision schemas.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .validation import InvalidInputError


class DifficultyLevel(str, Enum):
    """Ordinal difficulty category controlling question selection."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def ordered(cls) -> List["DifficultyLevel"]:
        return [cls.EASY, cls.MEDIUM, cls.HARD]

    @classmethod
    def parse(cls, value) -> "DifficultyLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for level in cls:
                if level.value == normalized:
                    return level
        raise InvalidInputError(
            f"Unsupported difficulty '{value}'. Expected one of: easy, medium, hard."
        )

    @property
    def rank(self) -> int:
        return DifficultyLevel.ordered().index(self)

    def step(self, delta: int) -> "DifficultyLevel":
        """Move `delta` levels, clamped at easy and hard."""
        levels = DifficultyLevel.ordered()
        new_index = max(0, min(len(levels) - 1, self.rank + delta))
        return levels[new_index]


@dataclass(frozen=True)
class AnswerEvent:
    """One graded answer fed to the engine."""

    is_correct: bool
    response_time_ms: float
    topic: str


@dataclass(frozen=True)
class TopicStats:
    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total > 0 else 0.0


@dataclass(frozen=True)
class DifficultyRecord:
    difficulty: DifficultyLevel
    timestamp: datetime


@dataclass(frozen=True)
class PerformanceState:
    """Rolling performance profile for a single quiz attempt."""

    correct_count: int = 0
    total_count: int = 0
    streak_count: int = 0
    recent_outcomes: Tuple[bool, ...] = ()
    average_response_time_ms: float = 0.0
    difficulty_history: Tuple[DifficultyRecord, ...] = ()
    topic_performance: Mapping[str, TopicStats] = field(default_factory=dict)

    @property
    def current_difficulty(self) -> DifficultyLevel:
        if not self.difficulty_history:
            return DifficultyLevel.MEDIUM
        return self.difficulty_history[-1].difficulty

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible representation for the persistence layer."""
        return {
            "correct_count": self.correct_count,
            "total_count": self.total_count,
            "streak_count": self.streak_count,
            "recent_outcomes": list(self.recent_outcomes),
            "average_response_time_ms": self.average_response_time_ms,
            "difficulty_history": [
                {"difficulty": rec.difficulty.value, "timestamp": rec.timestamp.isoformat()}
                for rec in self.difficulty_history
            ],
            "topic_performance": {
                topic: {"correct": stats.correct, "total": stats.total}
                for topic, stats in self.topic_performance.items()
            },
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PerformanceState":
        history = tuple(
            DifficultyRecord(
                difficulty=DifficultyLevel.parse(rec["difficulty"]),
                timestamp=datetime.fromisoformat(rec["timestamp"]),
            )
            for rec in payload.get("difficulty_history", [])
        )
        topics = {
            str(topic): TopicStats(correct=int(stats.get("correct", 0)), total=int(stats.get("total", 0)))
            for topic, stats in (payload.get("topic_performance") or {}).items()
        }
        return cls(
            correct_count=int(payload.get("correct_count", 0)),
            total_count=int(payload.get("total_count", 0)),
            streak_count=int(payload.get("streak_count", 0)),
            recent_outcomes=tuple(bool(v) for v in payload.get("recent_outcomes", [])),
            average_response_time_ms=float(payload.get("average_response_time_ms", 0.0)),
            difficulty_history=history,
            topic_performance=topics,
        )


def new_state(
    initial_difficulty: DifficultyLevel = DifficultyLevel.MEDIUM,
    started_at: Optional[datetime] = None,
) -> PerformanceState:
    """Empty state for a session start, seeded with the initial difficulty."""
    timestamp = started_at or datetime.now(timezone.utc)
    return PerformanceState(
        difficulty_history=(DifficultyRecord(DifficultyLevel.parse(initial_difficulty), timestamp),),
    )


@dataclass(frozen=True)
class TopicAccuracy:
    topic: str
    accuracy: float


@dataclass(frozen=True)
class TopicInsights:
    strong_topics: Tuple[TopicAccuracy, ...] = ()
    weak_topics: Tuple[TopicAccuracy, ...] = ()
    mastered_topics: Tuple[TopicAccuracy, ...] = ()


@dataclass(frozen=True)
class PerformanceInsights:
    accuracy: float
    trend: str
    recommendation: str
    streak_count: int
    strong_areas: Tuple[str, ...] = ()
    weak_areas: Tuple[str, ...] = ()
    mastered_areas: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AdaptationDecision:
    """Output of a single difficulty decision."""

    next_difficulty: DifficultyLevel
    changed: bool
    current_accuracy: float
    recent_accuracy: float
    adjusted_accuracy: float
    response_time_factor: float
    confidence: str
    topic_insights: TopicInsights
    insights: PerformanceInsights
    adaptation_reason: str


@dataclass(frozen=True)
class PromptParams:
    """Parameters handed to the external question generator."""

    target_difficulty: DifficultyLevel
    focus_topics: Tuple[str, ...]
    user_performance: float
    strong_topics: Tuple[str, ...]
    weak_topics: Tuple[str, ...]
    adaptation_reason: str
