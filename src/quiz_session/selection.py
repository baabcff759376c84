# ABOUTME: Picks the next quiz question for the difficulty chosen by the engine.
# ABOUTME: Prefers unanswered questions at the target level, then weak topics within it.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence, Tuple

from src.common.schemas import DifficultyLevel


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    type: str
    difficulty: DifficultyLevel
    topic: str
    correct_answer: str
    options: Tuple[str, ...] = ()
    explanation: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Question":
        return cls(
            id=str(payload["id"]),
            text=str(payload.get("question", payload.get("text", ""))),
            type=str(payload.get("type", "multiple-choice")),
            difficulty=DifficultyLevel.parse(payload.get("difficulty", "medium")),
            topic=str(payload["topic"]),
            correct_answer=str(payload["correct_answer"]),
            options=tuple(payload.get("options") or ()),
            explanation=str(payload.get("explanation", "")),
        )

    def public_view(self) -> Dict[str, Any]:
        """Question payload without the answer key."""
        return {
            "id": self.id,
            "question": self.text,
            "type": self.type,
            "options": list(self.options),
            "difficulty": self.difficulty.value,
            "topic": self.topic,
        }


def select_next_question(
    questions: Sequence[Question],
    answered_ids: Collection[str],
    target_difficulty: DifficultyLevel,
    weak_topics: Collection[str] = (),
) -> Optional[Question]:
    available: List[Question] = [q for q in questions if q.id not in answered_ids]
    if not available:
        return None

    target = DifficultyLevel.parse(target_difficulty)
    at_target = [q for q in available if q.difficulty == target]
    if not at_target:
        return available[0]

    weak = set(weak_topics)
    for q in at_target:
        if q.topic in weak:
            return q
    return at_target[0]
