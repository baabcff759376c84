# ABOUTME: Holds tunable settings for the adaptive difficulty engine.
# ABOUTME: Loads overrides from the engine section of a YAML config file.

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from src.common.validation import InvalidInputError


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for difficulty adaptation."""

    baseline_accuracy: float = 0.70
    adaptation_threshold: float = 0.15
    streak_bonus: float = 0.10
    streak_length: int = 3  # streak needed before the bonus applies
    min_answers_for_adaptation: int = 3
    response_time_weight: float = 0.20
    topic_mastery_threshold: float = 0.80
    window_size: int = 5
    fast_response_seconds: float = 10.0
    slow_response_seconds: float = 60.0
    response_time_adjustment: float = 0.3

    def __post_init__(self) -> None:
        if self.topic_mastery_threshold <= self.baseline_accuracy:
            raise InvalidInputError("topic_mastery_threshold must exceed baseline_accuracy")
        if self.window_size < 1:
            raise InvalidInputError("window_size must be at least 1")
        if self.fast_response_seconds > self.slow_response_seconds:
            raise InvalidInputError("fast_response_seconds must not exceed slow_response_seconds")

    @property
    def upper_bound(self) -> float:
        return self.baseline_accuracy + self.adaptation_threshold

    @property
    def lower_bound(self) -> float:
        return self.baseline_accuracy - self.adaptation_threshold

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "EngineConfig":
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidInputError(f"Unknown engine settings: {', '.join(unknown)}")
        return cls(**values)


def load_engine_config(config_path: Path) -> EngineConfig:
    """Read the `engine:` section of a YAML config; absent section means defaults."""
    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    return EngineConfig.from_mapping(cfg.get("engine"))
