# ABOUTME: Runs one quiz attempt by feeding graded answers through the adaptive engine.
# ABOUTME: Shared by the answer-submission service and locally simulated quiz flows.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from src.adaptive_engine.engine import AdaptiveDifficultyEngine
from src.adaptive_engine.state import record_difficulty
from src.common.schemas import (
    AdaptationDecision,
    AnswerEvent,
    DifficultyLevel,
    PerformanceState,
    new_state,
)
from src.common.validation import InvalidInputError, validate_event

from .grading import evaluate_answer
from .selection import Question, select_next_question

DEFAULT_RESPONSE_TIME_MS = 30000.0


@dataclass(frozen=True)
class SessionSettings:
    default_response_time_ms: float = DEFAULT_RESPONSE_TIME_MS
    initial_difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


def load_session_settings(config_path: Path) -> SessionSettings:
    """Read the `session:` section of a YAML config."""
    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    section = cfg.get("session") or {}
    return SessionSettings(
        default_response_time_ms=float(section.get("default_response_time_ms", DEFAULT_RESPONSE_TIME_MS)),
        initial_difficulty=DifficultyLevel.parse(section.get("initial_difficulty", "medium")),
    )


@dataclass(frozen=True)
class AnswerRecord:
    question_id: str
    user_answer: str
    is_correct: bool
    response_time_ms: float
    question_difficulty: DifficultyLevel
    topic: str
    answered_at: datetime


@dataclass(frozen=True)
class AnswerOutcome:
    is_correct: bool
    decision: AdaptationDecision
    adaptation_reason: Optional[str]
    answered: int
    total_questions: int

    @property
    def progress_pct(self) -> int:
        if self.total_questions <= 0:
            return 0
        return round(self.answered / self.total_questions * 100)


class QuizSession:
    """
    Owns the performance state for one attempt.

    Submissions must be applied one at a time; the engine itself keeps no state.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        engine: Optional[AdaptiveDifficultyEngine] = None,
        settings: Optional[SessionSettings] = None,
        started_at: Optional[datetime] = None,
    ):
        self.questions = list(questions)
        self.engine = engine or AdaptiveDifficultyEngine()
        self.settings = settings or SessionSettings()
        self.state: PerformanceState = new_state(self.settings.initial_difficulty, started_at)
        self.answers: List[AnswerRecord] = []

    @property
    def current_difficulty(self) -> DifficultyLevel:
        return self.state.current_difficulty

    @property
    def is_complete(self) -> bool:
        return len(self.answers) >= len(self.questions)

    def _answered_ids(self) -> Dict[str, AnswerRecord]:
        return {a.question_id: a for a in self.answers}

    def next_question(self) -> Optional[Question]:
        weak = [t.topic for t in self.engine.analyze_topics(self.state).weak_topics]
        return select_next_question(self.questions, self._answered_ids(), self.current_difficulty, weak)

    def submit(
        self,
        question: Question,
        answer: str,
        response_time_ms: Optional[float] = None,
        answered_at: Optional[datetime] = None,
    ) -> AnswerOutcome:
        if question.id not in {q.id for q in self.questions}:
            raise InvalidInputError(f"Question {question.id} not in this quiz")
        if question.id in self._answered_ids():
            raise InvalidInputError(f"Question {question.id} already answered")

        rt = self.settings.default_response_time_ms if not response_time_ms else float(response_time_ms)
        is_correct = evaluate_answer(answer, question.correct_answer, question.type)
        event = validate_event(AnswerEvent(is_correct=is_correct, response_time_ms=rt, topic=question.topic))
        answered_at = answered_at or datetime.now(timezone.utc)

        self.answers.append(
            AnswerRecord(
                question_id=question.id,
                user_answer=answer,
                is_correct=is_correct,
                response_time_ms=rt,
                question_difficulty=question.difficulty,
                topic=question.topic,
                answered_at=answered_at,
            )
        )

        self.state = self.engine.update_state(self.state, event)
        decision = self.engine.decide(self.state, self.current_difficulty)
        if decision.changed:
            self.state = record_difficulty(self.state, decision.next_difficulty, answered_at)

        return AnswerOutcome(
            is_correct=is_correct,
            decision=decision,
            adaptation_reason=decision.adaptation_reason if decision.changed else None,
            answered=len(self.answers),
            total_questions=len(self.questions),
        )
