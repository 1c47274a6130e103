"""Command-line front end for the habit store and metrics engine.

Usage:
    habit-metrics init-db
    habit-metrics add-habit "Read" --kind numeric --target 20 --unit pages
    habit-metrics log <habit-id> 5 [--date 2026-10-18] [--increment]
    habit-metrics summary [DATE] [--days 7]
    habit-metrics analytics week [--end DATE] [--habit ID]
    habit-metrics streak
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.config import get_settings
from .core.database import close_database, get_db_session, init_database
from .core.typed_config_loader import get_metrics_config
from .domain.errors import DomainError
from .services.analytics import AnalyticsRange, completion_series, streak_info
from .services.calendar_dates import add_days, dates_in_range, format_date_title, parse_date, today
from .services.day_summary import DaySummaryCache
from .services.habit_store_service import HabitStoreService
from .services.preferences_service import PreferencesService
from .utils.logging import MetricsLogContext, setup_logging
from .version import __version__

console = Console()
app = typer.Typer(help="Habit tracking metrics", no_args_is_help=True)


def progress_style(percent: float) -> str:
    """Rich colour for a completion percentage."""
    if percent >= 70:
        return "green"
    if percent >= 50:
        return "yellow"
    if percent >= 30:
        return "dark_orange"
    if percent > 0:
        return "red"
    return "grey50"


def _run(action: Callable[..., Awaitable[Any]], *args: Any) -> Any:
    async def runner() -> Any:
        await init_database()
        try:
            async with get_db_session() as session:
                return await action(session, *args)
        finally:
            await close_database()

    try:
        return asyncio.run(runner())
    except DomainError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _check_date(value: Optional[str]) -> str:
    if value is None:
        return today()
    if parse_date(value) is None:
        console.print(f"[red]Invalid date {value!r}; expected YYYY-MM-DD[/red]")
        raise typer.Exit(2)
    return value


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL"),
) -> None:
    settings = get_settings()
    setup_logging(log_level or settings.log_level, log_to_file=settings.log_to_file)


@app.command()
def version() -> None:
    """Print the installed version."""
    console.print(__version__)


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""

    async def create() -> None:
        await init_database()
        await close_database()

    asyncio.run(create())
    console.print(f"Database ready at {get_settings().database_url}")


@app.command("add-habit")
def add_habit(
    name: str,
    kind: str = typer.Option("boolean", help="boolean or numeric"),
    frequency: str = typer.Option("daily", help="daily, weekly or monthly"),
    target: float = typer.Option(1, help="Goal (build) or limit (break)"),
    goal_type: str = typer.Option("build", "--goal", help="build or break"),
    unit: Optional[str] = typer.Option(None),
) -> None:
    """Create a habit starting today."""

    async def action(session):
        store = HabitStoreService(session)
        return await store.add_habit(
            name, kind=kind, frequency=frequency, target=target, goal_type=goal_type, unit=unit
        )

    habit = _run(action)
    console.print(f"Added [bold]{habit.name}[/bold] ({habit.id})")


@app.command()
def log(
    habit_id: str,
    value: float,
    date: Optional[str] = typer.Option(None, help="YYYY-MM-DD, default today"),
    increment: bool = typer.Option(False, help="Add to the day's value instead of replacing it"),
) -> None:
    """Log a value for a habit on a date."""
    day = _check_date(date)

    async def action(session):
        store = HabitStoreService(session)
        if increment:
            return await store.increment_entry(habit_id, day, value)
        return await store.log_entry(habit_id, day, value)

    entry = _run(action)
    console.print(f"{habit_id} on {day}: {entry.value:g}")


async def _load(session):
    store = HabitStoreService(session)
    prefs = PreferencesService(session, get_metrics_config().week_starts_on)
    return await store.snapshot(), await prefs.get_week_starts_on()


@app.command()
def summary(
    date: Optional[str] = typer.Argument(None, help="YYYY-MM-DD, default today"),
    days: int = typer.Option(1, min=1, help="Also show the days before DATE"),
) -> None:
    """Show the day summary: score, daily-only and overall completion."""
    end = _check_date(date)
    snapshot, week_starts_on = _run(_load)
    config = get_metrics_config()
    cache = DaySummaryCache(config.summary_cache_size)

    table = Table(title=format_date_title(end) if days == 1 else f"{days} days ending {end}")
    table.add_column("Date")
    table.add_column("Daily score", justify="right")
    table.add_column("Daily habits", justify="right")
    table.add_column("All habits", justify="right")
    for day in dates_in_range(add_days(end, 1 - days), end):
        result = cache.get_or_compute(
            snapshot.habits,
            snapshot.entries,
            day,
            habits_version=snapshot.habits_version,
            entries_version=snapshot.entries_version,
            week_starts_on=week_starts_on,
            options=config.score,
        )
        table.add_row(
            day,
            *(
                f"[{progress_style(value)}]{value:g}%[/]"
                for value in (
                    result.daily_score,
                    result.daily_only_completion_pct,
                    result.completion_pct,
                )
            ),
        )
    console.print(table)


@app.command()
def analytics(
    range_: AnalyticsRange = typer.Argument(AnalyticsRange.WEEK, metavar="RANGE"),
    end: Optional[str] = typer.Option(None, help="Last day of the range, default today"),
    habit: Optional[str] = typer.Option(None, help="Restrict to one habit id"),
) -> None:
    """Completion bars for a day, week, month, 6month or year range."""
    end_date = _check_date(end)
    snapshot, week_starts_on = _run(_load)

    with MetricsLogContext("completion_series", range=range_.value, end=end_date):
        bars = completion_series(
            snapshot.habits,
            snapshot.entries,
            range_,
            end_date,
            week_starts_on,
            habit_id=habit,
        )

    table = Table(title=f"{range_.value} ending {end_date}")
    table.add_column("Period")
    table.add_column("Done", justify="right")
    table.add_column("%", justify="right")
    for bar in bars:
        table.add_row(
            bar.label,
            f"{bar.completed}/{bar.target}",
            f"[{progress_style(bar.percent)}]{bar.percent}[/]",
        )
    console.print(table)


@app.command()
def streak() -> None:
    """Current and longest all-habits streak."""
    snapshot, week_starts_on = _run(_load)
    config = get_metrics_config()
    info = streak_info(
        snapshot.habits,
        snapshot.entries,
        today(),
        week_starts_on,
        config.streak_lookback_days,
    )
    console.print(f"Current streak: [bold]{info.current}[/bold] days")
    console.print(f"Longest streak: {info.longest} days")


if __name__ == "__main__":
    app()
