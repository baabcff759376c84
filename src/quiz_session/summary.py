# ABOUTME: Builds end-of-session summaries from a learner's answer log.
# ABOUTME: Computes score, topic strengths, learning velocity, and response-time consistency.

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterable, List

import numpy as np
import pandas as pd

from src.common.validation import InvalidInputError

STRONG_TOPIC_ACCURACY = 0.8
WEAK_TOPIC_ACCURACY = 0.6

TRUE_VALUES = {"true", "1"}
FALSE_VALUES = {"false", "0"}


def coerce_correct(value) -> bool:
    """Accept real booleans, 0/1, and true/false strings; reject everything else."""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
    elif isinstance(value, (int, float, np.integer, np.floating)) and value in (0, 1):
        return bool(value)
    raise InvalidInputError(f"is_correct must be a boolean, 0/1, or true/false, got {value!r}")


def coerce_correct_column(values: pd.Series) -> pd.Series:
    return values.map(coerce_correct).astype(bool)


@dataclass
class SessionSummary:
    score: int
    total: int
    accuracy_pct: float
    strong_topics: List[str] = field(default_factory=list)
    weak_topics: List[str] = field(default_factory=list)
    recommended_actions: List[str] = field(default_factory=list)
    learning_velocity: int = 0
    consistency_score: int = 100


def answers_to_frame(answers: Iterable) -> pd.DataFrame:
    """Convert AnswerRecord instances (or dicts) into a DataFrame."""
    rows = [a if isinstance(a, dict) else asdict(a) for a in answers]
    if not rows:
        return pd.DataFrame(columns=["question_id", "is_correct", "response_time_ms", "topic"])
    df = pd.DataFrame(rows)
    df["is_correct"] = coerce_correct_column(df["is_correct"])
    df["response_time_ms"] = pd.to_numeric(df["response_time_ms"], errors="coerce").fillna(0.0)
    return df


def learning_velocity(correct: pd.Series) -> int:
    """Second-half accuracy minus first-half accuracy, in percentage points."""
    if len(correct) < 4:
        return 0
    mid = len(correct) // 2
    first = float(correct.iloc[:mid].mean())
    second = float(correct.iloc[mid:].mean())
    return int(round((second - first) * 100))


def consistency_score(response_times: pd.Series) -> int:
    """100 for perfectly even pacing, decreasing with latency variance."""
    if len(response_times) < 3:
        return 100
    variance = float(np.var(response_times.to_numpy(dtype=float)))
    score = max(0.0, 100 - variance / 1000)
    return int(round(min(100.0, score)))


def summarize_session(answers: Iterable) -> SessionSummary:
    df = answers_to_frame(answers)
    total = len(df)
    if total == 0:
        return SessionSummary(score=0, total=0, accuracy_pct=0.0)

    score = int(df["is_correct"].sum())
    accuracy_pct = score / total * 100

    by_topic = df.groupby("topic", sort=False)["is_correct"].mean()
    strong = [str(t) for t, acc in by_topic.items() if acc >= STRONG_TOPIC_ACCURACY]
    weak = [str(t) for t, acc in by_topic.items() if acc < WEAK_TOPIC_ACCURACY]

    actions: List[str] = []
    if weak:
        actions.append(f"Review concepts related to: {', '.join(weak)}")
    if strong:
        actions.append(f"Great job on: {', '.join(strong)}")

    return SessionSummary(
        score=score,
        total=total,
        accuracy_pct=accuracy_pct,
        strong_topics=strong,
        weak_topics=weak,
        recommended_actions=actions,
        learning_velocity=learning_velocity(df["is_correct"].astype(float)),
        consistency_score=consistency_score(df["response_time_ms"]),
    )
