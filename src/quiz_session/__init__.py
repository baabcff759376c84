# ABOUTME: Groups the caller-side collaborators of the adaptive engine.
# ABOUTME: Re-exports grading, question selection, the session runner, and summaries.

from .grading import evaluate_answer
from .selection import Question, select_next_question
from .session import (
    AnswerOutcome,
    AnswerRecord,
    QuizSession,
    SessionSettings,
    load_session_settings,
)
from .summary import SessionSummary, summarize_session

__all__ = [
    "AnswerOutcome",
    "AnswerRecord",
    "Question",
    "QuizSession",
    "SessionSettings",
    "SessionSummary",
    "evaluate_answer",
    "load_session_settings",
    "select_next_question",
    "summarize_session",
]
