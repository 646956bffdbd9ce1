#!/usr/bin/env python3
"""
LyftUp analytics CLI.

Workout progress from the command line: streaks, weekly volume, exercise
history and personal records.

Usage:
    lyftup import sessions.json       # Load session documents into the database
    lyftup summary                    # Headline progress metrics
    lyftup weekly                     # 12-week volume and duration series
    lyftup exercise "Bench Press" --range month
    lyftup pr "Bench Press"           # Personal record for an exercise
    lyftup sync                       # Write recalculated counters to the profile
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analysis.dates import FixedClock, SystemClock
from .analysis.queries import ProgressQueries
from .config import get_settings
from .db.database import WorkoutDatabase
from .exceptions import ConfigurationError, InvalidSessionDataError, LyftUpError
from .models.profile import UserProfile
from .models.progress import TimeRange
from .models.sessions import WorkoutSession
from .services.profile_store import DatabaseProfileStore
from .services.progress_service import ProgressAnalyticsService
from .services.session_store import DatabaseSessionStore, InMemorySessionStore

console = Console()
logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    """Format seconds as '1h 05m' or '45m'."""
    minutes = int(round(seconds / 60))
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def load_sessions_file(path: Path) -> List[WorkoutSession]:
    """
    Read session documents from a JSON file.

    The file holds either a list of documents or an object with a
    ``sessions`` list. Documents that fail to parse are skipped.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("sessions")
    if not isinstance(data, list):
        raise InvalidSessionDataError(
            "Expected a list of session documents",
            details={"path": str(path)},
        )

    sessions = []
    for document in data:
        try:
            sessions.append(WorkoutSession.from_document(document))
        except InvalidSessionDataError as e:
            logger.warning(f"Skipping session document: {e.message}")
    return sessions


def parse_now(value: str) -> datetime:
    """Parse the --now option as an ISO 8601 timestamp."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ConfigurationError(
            f"--now must be an ISO 8601 timestamp, got '{value}'",
            setting="now",
        ) from e


def build_service(args) -> ProgressAnalyticsService:
    """Wire stores and clock from command-line arguments."""
    settings = get_settings()
    clock = FixedClock(parse_now(args.now)) if args.now else SystemClock()

    if args.file:
        store = InMemorySessionStore(load_sessions_file(args.file))
        return ProgressAnalyticsService(store, clock=clock, settings=settings)

    db = WorkoutDatabase(args.db)
    return ProgressAnalyticsService(
        DatabaseSessionStore(db, settings.user_id),
        profile_store=DatabaseProfileStore(db, settings.user_id),
        clock=clock,
        settings=settings,
    )


def cmd_import(args):
    """Load session documents into the database."""
    settings = get_settings()
    sessions = load_sessions_file(args.path)
    db = WorkoutDatabase(args.db)
    count = db.replace_sessions(sessions, settings.user_id)
    if db.get_profile(settings.user_id) is None:
        db.save_profile(UserProfile(id=settings.user_id))
    console.print(f"[green]Imported {count} sessions into {db.db_path}[/green]")


def cmd_summary(args, queries: ProgressQueries):
    """Show headline progress metrics."""
    metrics = queries.metrics

    console.print()
    console.print(Panel("[bold]LyftUp - Progress Summary[/bold]"))

    last = queries.last_workout()
    last_text = f"{last.title} ({last.date:%Y-%m-%d})" if last else "none yet"

    summary_text = f"""
[cyan]Workouts (7 days):[/cyan]    {metrics.weekly_workouts}
[cyan]Workouts (30 days):[/cyan]   {metrics.monthly_workouts}
[cyan]Total workouts:[/cyan]       {metrics.total_workouts}
[cyan]Streak:[/cyan]               {metrics.streak_days} days

[cyan]Volume (7 days):[/cyan]      {metrics.total_volume_this_week:,.0f} lbs
[cyan]Volume (30 days):[/cyan]     {metrics.total_volume_this_month:,.0f} lbs
[cyan]Volume (all time):[/cyan]    {queries.total_volume_all_time():,.0f} lbs

[cyan]Average session:[/cyan]      {format_duration(metrics.average_workout_duration)}
[cyan]Last workout:[/cyan]         {last_text}
"""
    console.print(Panel(summary_text, title="Progress", box=box.ROUNDED))
    console.print()


def cmd_weekly(args, queries: ProgressQueries):
    """Show the weekly series."""
    table = Table(title="Weekly Progress", box=box.ROUNDED)
    table.add_column("Week of", style="cyan")
    table.add_column("Workouts", justify="right")
    table.add_column("Volume (lbs)", justify="right")
    table.add_column("Avg duration", justify="right")

    for week in queries.weekly_progress:
        table.add_row(
            f"{week.week_start:%Y-%m-%d}",
            str(week.workouts),
            f"{week.total_volume:,.0f}",
            format_duration(week.average_duration) if week.workouts else "-",
        )

    console.print(table)


def cmd_exercise(args, queries: ProgressQueries):
    """Show the history of one exercise."""
    time_range = TimeRange(args.range)
    rows = queries.exercise_progress(args.name, time_range)

    if not rows:
        console.print(f"No {args.name} sessions in the last {time_range.days} days.")
        return

    table = Table(title=f"{args.name} - last {time_range.days} days", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Max weight", justify="right")
    table.add_column("Max reps", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume", justify="right")

    for row in rows:
        table.add_row(
            f"{row.date:%Y-%m-%d}",
            f"{row.max_weight:g}",
            str(row.max_reps),
            str(row.sets),
            f"{row.total_volume:,.0f}",
        )

    console.print(table)


def cmd_pr(args, queries: ProgressQueries):
    """Show the personal record for an exercise."""
    record = queries.personal_record(args.name)
    if record is None:
        console.print(f"[yellow]No sessions logged for {args.name}.[/yellow]")
        return

    console.print(
        f"[bold]{record.exercise_name}[/bold]: "
        f"[green]{record.weight:g} lbs x {record.reps}[/green] "
        f"on {record.date:%Y-%m-%d}"
    )


def cmd_sync(args, service: ProgressAnalyticsService):
    """Recalculate profile counters and persist them."""
    profile = asyncio.run(service.recalculate_profile_stats())
    console.print(
        f"[green]Profile updated:[/green] {profile.total_workouts} workouts, "
        f"{profile.total_weight_lifted:,.0f} lbs lifted"
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="LyftUp - workout progress analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lyftup import sessions.json
  lyftup summary
  lyftup --file sessions.json weekly
  lyftup exercise squat --range three_months
  lyftup pr "Bench Press"
        """,
    )
    parser.add_argument("--db", type=str, help="SQLite database path")
    parser.add_argument("--file", "-f", type=Path, help="Read sessions from a JSON file instead of the database")
    parser.add_argument("--now", type=str, help="Evaluate as of this ISO timestamp")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_p = subparsers.add_parser("import", help="Import session documents")
    import_p.add_argument("path", type=Path, help="JSON file of session documents")

    subparsers.add_parser("summary", help="Show progress summary")
    subparsers.add_parser("weekly", help="Show 12-week series")

    exercise_p = subparsers.add_parser("exercise", help="Show exercise history")
    exercise_p.add_argument("name", help="Exercise name (case-insensitive)")
    exercise_p.add_argument(
        "--range", "-r",
        choices=[r.value for r in TimeRange],
        default=TimeRange.MONTH.value,
        help="Time range",
    )

    pr_p = subparsers.add_parser("pr", help="Show personal record")
    pr_p.add_argument("name", help="Exercise name (case-insensitive)")

    subparsers.add_parser("sync", help="Write recalculated counters to the profile")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "import":
            cmd_import(args)
            return 0

        service = build_service(args)
        if args.command == "sync":
            cmd_sync(args, service)
            return 0

        queries = service.queries()
        if args.command == "summary":
            cmd_summary(args, queries)
        elif args.command == "weekly":
            cmd_weekly(args, queries)
        elif args.command == "exercise":
            cmd_exercise(args, queries)
        elif args.command == "pr":
            cmd_pr(args, queries)
    except LyftUpError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
