# ABOUTME: Tests the caller-side session flow around the adaptive engine.
# ABOUTME: Covers answer grading, next-question selection, and difficulty history bookkeeping.

import pytest

from src.common.schemas import DifficultyLevel
from src.common.validation import InvalidInputError
from src.quiz_session.grading import evaluate_answer
from src.quiz_session.selection import Question, select_next_question
from src.quiz_session.session import QuizSession, SessionSettings, load_session_settings


def _q(qid: str, difficulty: str = "medium", topic: str = "Algebra", answer: str = "4", qtype: str = "multiple-choice"):
    return Question(
        id=qid,
        text=f"Question {qid}",
        type=qtype,
        difficulty=DifficultyLevel.parse(difficulty),
        topic=topic,
        correct_answer=answer,
    )


def test_exact_match_is_case_and_whitespace_insensitive():
    assert evaluate_answer("  True ", "true", "true-false")
    assert not evaluate_answer("B", "C", "multiple-choice")
    assert evaluate_answer("paris", "Paris", "fill-in")


def test_short_answer_keyword_overlap():
    correct = "Photosynthesis converts sunlight into chemical energy"
    assert evaluate_answer("it converts sunlight to chemical energy", correct, "short-answer")
    assert not evaluate_answer("plants are green", correct, "short-answer")


def test_short_answer_without_keywords_needs_exact_match():
    assert evaluate_answer("yes", "Yes", "short-answer")
    assert not evaluate_answer("no", "yes", "short-answer")


def test_selection_prefers_target_difficulty_and_weak_topics():
    questions = [
        _q("q1", "easy", "Algebra"),
        _q("q2", "hard", "Algebra"),
        _q("q3", "hard", "Geometry"),
    ]
    picked = select_next_question(questions, set(), DifficultyLevel.HARD, weak_topics=["Geometry"])
    assert picked.id == "q3"
    picked = select_next_question(questions, set(), DifficultyLevel.HARD)
    assert picked.id == "q2"


def test_selection_falls_back_and_exhausts():
    questions = [_q("q1", "easy"), _q("q2", "easy")]
    assert select_next_question(questions, {"q1"}, DifficultyLevel.HARD).id == "q2"
    assert select_next_question(questions, {"q1", "q2"}, DifficultyLevel.EASY) is None


def test_public_view_hides_answer():
    view = _q("q1").public_view()
    assert "correct_answer" not in view
    assert view["difficulty"] == "medium"


def test_question_from_stored_payload():
    question = Question.from_dict(
        {
            "id": 7,
            "question": "What is 2 + 2?",
            "difficulty": "Hard",
            "topic": "Arithmetic",
            "correct_answer": 4,
            "options": ["3", "4", "5"],
        }
    )
    assert question.id == "7"
    assert question.text == "What is 2 + 2?"
    assert question.difficulty == DifficultyLevel.HARD
    assert question.type == "multiple-choice"
    assert question.correct_answer == "4"
    view = question.public_view()
    assert view["options"] == ["3", "4", "5"]
    assert "correct_answer" not in view


def test_question_from_payload_rejects_unknown_difficulty():
    with pytest.raises(InvalidInputError):
        Question.from_dict({"id": "q1", "difficulty": "extreme", "topic": "A", "correct_answer": "x"})


def test_session_raises_difficulty_after_three_correct():
    questions = [_q(f"q{i}") for i in range(6)]
    session = QuizSession(questions)

    outcomes = [session.submit(questions[i], "4", response_time_ms=15000) for i in range(3)]

    assert [o.decision.changed for o in outcomes] == [False, False, True]
    assert outcomes[-1].adaptation_reason.startswith("Increasing difficulty to hard")
    assert outcomes[0].adaptation_reason is None
    assert session.current_difficulty == DifficultyLevel.HARD
    assert [r.difficulty for r in session.state.difficulty_history] == [DifficultyLevel.MEDIUM, DifficultyLevel.HARD]
    assert outcomes[-1].progress_pct == 50


def test_session_missing_response_time_uses_default():
    questions = [_q("q1")]
    session = QuizSession(questions, settings=SessionSettings(default_response_time_ms=42000))
    session.submit(questions[0], "4")
    assert session.answers[0].response_time_ms == 42000
    assert session.state.average_response_time_ms == 42000
    assert session.is_complete


def test_session_rejects_duplicate_answer():
    questions = [_q("q1")]
    session = QuizSession(questions)
    session.submit(questions[0], "4", response_time_ms=10000)
    with pytest.raises(InvalidInputError):
        session.submit(questions[0], "4", response_time_ms=10000)
    assert session.state.total_count == 1


def test_session_rejects_question_from_another_quiz():
    q1 = _q("q1")
    session = QuizSession([q1])
    session.submit(q1, "4", response_time_ms=10000)
    with pytest.raises(InvalidInputError, match="not in this quiz"):
        session.submit(_q("zz"), "4", response_time_ms=10000)
    assert session.state.total_count == 1
    assert len(session.answers) == 1
    assert session.is_complete


def test_next_question_targets_weak_topic_at_current_difficulty():
    questions = [
        _q("q1", topic="Algebra"),
        _q("q2", topic="Geometry"),
        _q("q3", topic="Geometry"),
        _q("q4", "easy", topic="Geometry"),
    ]
    session = QuizSession(questions)
    assert session.next_question().id == "q1"

    session.submit(questions[1], "wrong", response_time_ms=20000)
    assert session.next_question().id == "q3"


def test_load_session_settings(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("session:\n  default_response_time_ms: 25000\n  initial_difficulty: easy\n", encoding="utf-8")
    settings = load_session_settings(path)
    assert settings.default_response_time_ms == 25000
    assert settings.initial_difficulty == DifficultyLevel.EASY
    session = QuizSession([_q("q1")], settings=settings)
    assert session.current_difficulty == DifficultyLevel.EASY
