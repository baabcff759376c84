# ABOUTME: Exposes the adaptive difficulty engine entrypoints.
# ABOUTME: Groups configuration, state updates, decisions, topic analysis, and insights.

from .config import EngineConfig, load_engine_config
from .engine import AdaptiveDifficultyEngine, decide, update_state
from .state import record_difficulty
from .topics import analyze_topic_performance

__all__ = [
    "AdaptiveDifficultyEngine",
    "EngineConfig",
    "analyze_topic_performance",
    "decide",
    "load_engine_config",
    "record_difficulty",
    "update_state",
]
