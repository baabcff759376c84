# ABOUTME: Grades submitted answers before they become engine answer events.
# ABOUTME: Uses exact matching for choice questions and keyword overlap for short answers.

from __future__ import annotations

import math
import re

KEYWORD_MIN_LENGTH = 3
KEYWORD_MATCH_RATIO = 0.6


def _normalize(answer: str) -> str:
    return (answer or "").strip().lower()


def evaluate_answer(user_answer: str, correct_answer: str, question_type: str = "multiple-choice") -> bool:
    """
    Return True when `user_answer` matches `correct_answer`.

    Short answers pass when at least 60% of the correct answer's keywords
    (words longer than three characters) appear in the response.
    """
    if question_type != "short-answer":
        return _normalize(user_answer) == _normalize(correct_answer)

    user_words = [w for w in re.split(r"\s+", _normalize(user_answer)) if w]
    keywords = [w for w in re.split(r"\s+", _normalize(correct_answer)) if len(w) > KEYWORD_MIN_LENGTH]
    if not keywords:
        return _normalize(user_answer) == _normalize(correct_answer)

    matched = [kw for kw in keywords if any(kw in uw or uw in kw for uw in user_words)]
    return len(matched) >= math.ceil(len(keywords) * KEYWORD_MATCH_RATIO)
