"""
Practice Engine CLI - try the engine against JSON fixture files.

Usage:
    practice-engine recommend -c candidates.json -h history.json -u alice -d Medium -t Array -m DP
    practice-engine path -c candidates.json -h history.json -u alice -p leetcode -d Medium
    practice-engine reachable ABC_C ARC_B --max-steps 2
    practice-engine due -h history.json -u alice
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from practice_engine.config import get_settings
from practice_engine.engine import PracticeEngine
from practice_engine.exceptions import CandidatePoolUnavailableError, ConfigurationError
from practice_engine.logging_config import configure_logging
from practice_engine.models import LearningStyle, QuestionScore, SelectionCriteria
from practice_engine.progression.tables import load_registry
from practice_engine.repositories import InMemoryCandidateRepository, load_candidates, load_history
from practice_engine.scheduling.review_scheduler import due_reviews, review_priority, review_stats
from practice_engine.scoring.composite import utc_now
from practice_engine.selection.ranking import rank_by_tag_relevance

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="practice-engine",
    help="Rank practice problems: what should I practice next?",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["--help"]},
)

console = Console()

CandidatesOption = Annotated[
    Path, typer.Option("--candidates", "-c", help="JSON array of candidate problems")
]
HistoryOption = Annotated[
    Optional[Path], typer.Option("--history", "-h", help="JSON array of history records")
]


def _render_scores(scores: list[QuestionScore], title: str) -> None:
    if not scores:
        console.print("[yellow]No recommendations.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Problem", style="cyan")
    table.add_column("Difficulty")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Why")

    for rank, s in enumerate(scores, start=1):
        table.add_row(str(rank), s.title, s.difficulty, f"{s.score:.3f}", ", ".join(s.reasons))

    console.print(table)


def _build_engine(candidates: Path, history: Optional[Path]) -> tuple[PracticeEngine, InMemoryCandidateRepository]:
    try:
        repository = load_candidates(candidates)
        return PracticeEngine(repository, load_history(history)), repository
    except CandidatePoolUnavailableError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except (ConfigurationError, OSError, ValueError) as e:
        console.print(f"[red]Cannot start engine: {escape(str(e))}[/red]")
        raise typer.Exit(2)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def recommend(
    candidates: CandidatesOption,
    history: HistoryOption = None,
    user: Annotated[Optional[str], typer.Option("--user", "-u", help="Learner id")] = None,
    difficulty: Annotated[str, typer.Option("--difficulty", "-d", help="Current difficulty or tier")] = "Medium",
    topic: Annotated[Optional[list[str]], typer.Option("--topic", "-t", help="Current topic (repeatable)")] = None,
    missing: Annotated[Optional[list[str]], typer.Option("--missing", "-m", help="Missing concept (repeatable)")] = None,
    platform: Annotated[str, typer.Option("--platform", "-p", help="Platform key")] = "",
    style: Annotated[LearningStyle, typer.Option("--style", "-s", help="Learning style")] = LearningStyle.PROGRESSIVE,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum results")] = None,
) -> None:
    """Rank the candidate pool for a learner."""
    engine, repository = _build_engine(candidates, history)
    pool = asyncio.run(repository.fetch_candidates(platform, None, len(repository)))

    if user is None:
        # No learner: plain tag-relevance ordering
        ranked = rank_by_tag_relevance(pool, list(topic or []) + list(missing or []))
        cap = engine.settings.default_result_limit if limit is None else limit
        for c in ranked[:cap]:
            console.print(f"[cyan]{c.title}[/cyan] ({c.difficulty}) {', '.join(c.tags)}")
        return

    criteria = SelectionCriteria(
        user_id=user,
        current_difficulty=difficulty,
        topics=tuple(topic or ()),
        missing_concepts=tuple(missing or ()),
        platform=platform,
        learning_style=style,
    )
    scores = asyncio.run(engine.select_optimal_questions(criteria, pool, limit))
    _render_scores(scores, f"Recommendations for {user}")


@app.command()
def path(
    candidates: CandidatesOption,
    user: Annotated[str, typer.Option("--user", "-u", help="Learner id")],
    platform: Annotated[str, typer.Option("--platform", "-p", help="Platform key")],
    target_difficulty: Annotated[str, typer.Option("--target-difficulty", "-d", help="Difficulty filter")],
    history: HistoryOption = None,
    count: Annotated[int, typer.Option("--count", "-n", help="Number of problems")] = 10,
) -> None:
    """Build a learning path from the learner's history."""
    engine, _ = _build_engine(candidates, history)
    try:
        scores = asyncio.run(engine.get_learning_path(user, platform, target_difficulty, count))
    except CandidatePoolUnavailableError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        scores = []
    _render_scores(scores, f"Learning path for {user}")


@app.command()
def reachable(
    from_tier: Annotated[str, typer.Argument(help="Starting tier, e.g. ABC_C")],
    to_tier: Annotated[str, typer.Argument(help="Target tier, e.g. ARC_B")],
    platform: Annotated[str, typer.Option("--platform", "-p", help="Platform key")] = "atcoder",
    max_steps: Annotated[Optional[int], typer.Option("--max-steps", help="Step bound")] = None,
) -> None:
    """Check whether a tier is a sane progression step from another."""
    settings = get_settings()
    try:
        registry = load_registry(settings.progression_file)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)
    progression = registry.for_platform(platform)
    if progression is None:
        console.print(f"[red]No progression graph for platform '{platform}'[/red]")
        raise typer.Exit(1)

    steps = settings.reachability_max_steps if max_steps is None else max_steps
    if progression.graph.reachable(from_tier, to_tier, steps):
        console.print(f"[green]{to_tier} is reachable from {from_tier} within {steps} steps[/green]")
    else:
        console.print(f"[yellow]{to_tier} is not reachable from {from_tier} within {steps} steps[/yellow]")
        raise typer.Exit(1)


@app.command()
def due(
    history: Annotated[Path, typer.Option("--history", "-h", help="JSON array of history records")],
    user: Annotated[str, typer.Option("--user", "-u", help="Learner id")],
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum results")] = 10,
) -> None:
    """List problems due for review."""
    try:
        store = load_history(history)
    except (OSError, ValueError) as e:
        console.print(f"[red]Cannot read history: {escape(str(e))}[/red]")
        raise typer.Exit(2)
    records = asyncio.run(store.list_history(user))
    now = utc_now()

    queue = due_reviews(records, now, limit)
    stats = review_stats(records, now)

    table = Table(title=f"Due reviews for {user}")
    table.add_column("Problem", style="cyan")
    table.add_column("Due", style="yellow")
    table.add_column("Repetition", justify="right")
    table.add_column("Avg quality", justify="right")
    table.add_column("Priority")
    table.add_column("Reason", style="dim")
    for record in queue:
        advice = review_priority(record, now)
        average = record.average_quality
        table.add_row(
            record.candidate_id,
            record.next_review_date.date().isoformat(),
            str(record.repetition),
            f"{average:.1f}" if average is not None else "-",
            advice.priority,
            advice.reason,
        )
    console.print(table)
    console.print(
        f"[dim]{stats['due_reviews']} due of {stats['total_reviews']} in review, "
        f"retention {stats['retention_rate']}%[/dim]"
    )


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    app()


if __name__ == "__main__":
    main()
