# ABOUTME: Classifies per-topic accuracy into mastered, strong, and weak buckets.
# ABOUTME: Runs on the full-history topic tallies, not the rolling outcome window.

from __future__ import annotations

from typing import List, Mapping

from src.common.schemas import TopicAccuracy, TopicInsights, TopicStats


def analyze_topic_performance(
    topic_performance: Mapping[str, TopicStats],
    baseline_accuracy: float = 0.70,
    mastery_threshold: float = 0.80,
) -> TopicInsights:
    """
    Split topics into exclusive buckets.

    - accuracy >= mastery_threshold: mastered (highest first)
    - accuracy >= baseline_accuracy: strong (highest first)
    - otherwise: weak (weakest first)

    Topics with no answers are skipped. Equal accuracies keep topic-name order.
    """
    mastered: List[TopicAccuracy] = []
    strong: List[TopicAccuracy] = []
    weak: List[TopicAccuracy] = []

    for topic in sorted(topic_performance):
        stats = topic_performance[topic]
        if stats.total <= 0:
            continue
        entry = TopicAccuracy(topic=topic, accuracy=stats.correct / stats.total)
        if entry.accuracy >= mastery_threshold:
            mastered.append(entry)
        elif entry.accuracy >= baseline_accuracy:
            strong.append(entry)
        else:
            weak.append(entry)

    # sorted() is stable, so name order survives ties
    return TopicInsights(
        strong_topics=tuple(sorted(strong, key=lambda t: -t.accuracy)),
        weak_topics=tuple(sorted(weak, key=lambda t: t.accuracy)),
        mastered_topics=tuple(sorted(mastered, key=lambda t: -t.accuracy)),
    )
