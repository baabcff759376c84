# ABOUTME: Provides a CLI that replays a learner's answer log through the adaptive engine.
# ABOUTME: Prints per-answer difficulty decisions and end-of-session summaries.

import json
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from src.adaptive_engine.config import EngineConfig, load_engine_config
from src.adaptive_engine.engine import AdaptiveDifficultyEngine
from src.adaptive_engine.state import record_difficulty
from src.common.schemas import AnswerEvent, DifficultyLevel, new_state
from src.common.validation import InvalidInputError, validate_event
from src.quiz_session.session import load_session_settings
from src.quiz_session.summary import coerce_correct_column, summarize_session

console = Console()
app = typer.Typer(help="Replay answer logs through the adaptive difficulty engine.")

REQUIRED_COLUMNS = ("is_correct", "response_time_ms", "topic")


def load_answer_log(path: Path) -> pd.DataFrame:
    """Read an answer log from CSV, parquet, or JSON records."""
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        df = pd.read_parquet(path)
    elif suffix == ".json":
        df = pd.read_json(path, orient="records")
    else:
        df = pd.read_csv(path)

    if "is_correct" not in df.columns and "correct" in df.columns:
        df = df.rename(columns={"correct": "is_correct"})
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidInputError(f"Answer log {path} is missing columns: {', '.join(missing)}")

    df["is_correct"] = coerce_correct_column(df["is_correct"])
    df["response_time_ms"] = pd.to_numeric(df["response_time_ms"], errors="coerce")
    df["topic"] = df["topic"].astype(str)
    return df


@app.command()
def replay(
    answers: Path = typer.Option(..., "--answers", help="Answer log (csv, parquet, or json)."),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config with engine and session sections."),
    initial_difficulty: Optional[str] = typer.Option(None, "--initial-difficulty", help="easy, medium, or hard."),
    state_out: Optional[Path] = typer.Option(None, "--state-out", help="Write the final performance state as JSON."),
) -> None:
    """
    Feed each answer through update and decide, tracking difficulty changes.
    """
    try:
        if config is not None:
            console.print(f"[replay] Loading config from {config}")
            engine_config = load_engine_config(config)
            default_level = load_session_settings(config).initial_difficulty
        else:
            engine_config = EngineConfig()
            default_level = DifficultyLevel.MEDIUM
        level = DifficultyLevel.parse(initial_difficulty) if initial_difficulty else default_level
        df = load_answer_log(answers)
    except (InvalidInputError, OSError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[replay] Replaying {len(df)} answers starting at {level.value}")
    engine = AdaptiveDifficultyEngine(engine_config)
    state = new_state(level)
    decision = None

    table = Table(show_header=True, header_style="bold magenta")
    for column in ("#", "Topic", "Correct", "Recent", "RT factor", "Difficulty", "Confidence"):
        table.add_column(column)

    for i, row in enumerate(df.itertuples(index=False), start=1):
        event = AnswerEvent(
            is_correct=bool(row.is_correct),
            response_time_ms=float(row.response_time_ms),
            topic=str(row.topic),
        )
        try:
            validate_event(event)
        except InvalidInputError as exc:
            console.print(f"[red]Row {i}: {exc}[/red]")
            raise typer.Exit(code=1)

        state = engine.update_state(state, event)
        decision = engine.decide(state, state.current_difficulty)
        marker = ""
        if decision.changed:
            marker = f" ({state.current_difficulty.value} → {decision.next_difficulty.value})"
            state = record_difficulty(state, decision.next_difficulty)
        table.add_row(
            str(i),
            event.topic,
            "✅" if event.is_correct else "❌",
            f"{decision.recent_accuracy:.2f}",
            f"{decision.response_time_factor:+.1f}",
            decision.next_difficulty.value + marker,
            decision.confidence,
        )

    console.rule("[bold blue]Adaptive Difficulty Replay[/bold blue]")
    console.print(table)

    if decision is not None:
        console.print()
        console.print(f"[bold]Trend:[/] {decision.insights.trend}")
        console.print(f"[bold]Recommendation:[/] {decision.insights.recommendation}")
        if decision.insights.mastered_areas:
            console.print(f"[bold green]Mastered:[/] {', '.join(decision.insights.mastered_areas)}")
        if decision.insights.weak_areas:
            console.print(f"[bold yellow]Weak:[/] {', '.join(decision.insights.weak_areas)}")

    if state_out is not None:
        state_out.parent.mkdir(parents=True, exist_ok=True)
        state_out.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
        console.print(f"✅ Wrote final state to {state_out}")


@app.command()
def summary(
    answers: Path = typer.Option(..., "--answers", help="Answer log (csv, parquet, or json)."),
) -> None:
    """
    Print the end-of-session summary for an answer log.
    """
    try:
        df = load_answer_log(answers)
    except (InvalidInputError, OSError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    result = summarize_session(df.to_dict(orient="records"))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Score", f"{result.score}/{result.total}")
    table.add_row("Accuracy", f"{result.accuracy_pct:.0f}%")
    table.add_row("Learning velocity", f"{result.learning_velocity:+d} pts")
    table.add_row("Consistency", str(result.consistency_score))
    console.print(table)
    for action in result.recommended_actions:
        console.print(f"  → {action}")


if __name__ == "__main__":
    app()
