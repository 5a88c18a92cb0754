"""Command line interface for HabitPulse."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import HabitPulseError
from .logging_config import setup_logging
from .models.completion import CompletionRecord
from .models.dates import DateRange
from .models.habit import Habit
from .models.schedule import (
    AnnualSchedule,
    EveryDaySchedule,
    MonthlySchedule,
    PeriodicSchedule,
    Schedule,
    WeeklySchedule,
)
from .models.vacation import Vacation
from .services.completion import insert_habit_completion
from .services.streaks import current_streak, longest_streak

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _today(value: Optional[datetime]) -> date:
    return _as_date(value) or date.today()


def _int_list(raw: str) -> list[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise click.BadParameter(f"expected comma-separated integers, got {raw!r}") from exc


def _build_schedule(
    kind: str,
    *,
    start: date,
    end: Optional[date],
    days: str,
    annual_dates: str,
    last_day_of_month: bool,
    period_length: Optional[int],
    backlog: bool,
    completing_ahead: bool,
    period_separation: bool,
) -> Schedule:
    common = {
        "start_date": start,
        "end_date": end,
        "backlog_enabled": backlog,
        "completing_ahead_enabled": completing_ahead,
    }
    if kind == "every-day":
        return EveryDaySchedule(**common)
    if kind == "weekly":
        return WeeklySchedule(due_days_of_week=frozenset(_int_list(days)), **common)
    if kind == "monthly":
        return MonthlySchedule(
            due_days_of_month=frozenset(_int_list(days)),
            include_last_day_of_month=last_day_of_month,
            **common,
        )
    if kind == "annual":
        pairs = []
        for part in annual_dates.split(","):
            if part.strip():
                month, _, day = part.strip().partition("-")
                pairs.append((int(month), int(day)))
        return AnnualSchedule(due_dates=frozenset(pairs), **common)
    if period_length is None:
        raise click.BadParameter("--period-length is required for periodic schedules")
    return PeriodicSchedule(
        period_length_days=period_length,
        due_day_offsets=frozenset(_int_list(days) or [0]),
        period_separation_enabled=period_separation,
        **common,
    )


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the database and logs (defaults to HABITPULSE_DATA_DIR).",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str]) -> None:
    """Track habits and inspect their per-date statuses."""

    config = BaseConfig(data_dir=data_dir)
    setup_logging(config)
    app = create_app_context(config)
    ctx.call_on_close(app.dispose)
    ctx.obj = app


@cli.command("init-db")
@click.pass_obj
def init_db(app: AppContext) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("add-habit")
@click.argument("name")
@click.option(
    "--schedule",
    "kind",
    type=click.Choice(["every-day", "weekly", "monthly", "annual", "periodic"]),
    default="every-day",
    show_default=True,
)
@click.option("--start", type=ISO_DATE, required=True, help="First day of the habit.")
@click.option("--end", type=ISO_DATE, default=None, help="Last day of the habit.")
@click.option("--days", default="", help="Weekdays (0=Mon), days of month or period offsets.")
@click.option("--dates", "annual_dates", default="", help="Annual due dates as MM-DD,MM-DD.")
@click.option("--last-day-of-month", is_flag=True, default=False)
@click.option("--period-length", type=click.IntRange(min=1), default=None)
@click.option("--backlog/--no-backlog", default=True, show_default=True)
@click.option("--completing-ahead/--no-completing-ahead", default=True, show_default=True)
@click.option("--period-separation/--no-period-separation", default=True, show_default=True)
@click.pass_obj
def add_habit(
    app: AppContext,
    name: str,
    kind: str,
    start: datetime,
    end: Optional[datetime],
    days: str,
    annual_dates: str,
    last_day_of_month: bool,
    period_length: Optional[int],
    backlog: bool,
    completing_ahead: bool,
    period_separation: bool,
) -> None:
    """Create a habit and print its id."""

    try:
        schedule = _build_schedule(
            kind,
            start=start.date(),
            end=_as_date(end),
            days=days,
            annual_dates=annual_dates,
            last_day_of_month=last_day_of_month,
            period_length=period_length,
            backlog=backlog,
            completing_ahead=completing_ahead,
            period_separation=period_separation,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    habit = app.habit_repo.create(Habit.from_schedule(name=name, schedule=schedule))
    click.echo(f"Created habit {habit.id}: {habit.name}")


@cli.command("add-vacation")
@click.argument("habit_id", type=int)
@click.argument("start", type=ISO_DATE)
@click.option("--end", type=ISO_DATE, default=None, help="Last vacation day (open-ended if omitted).")
@click.pass_obj
def add_vacation(app: AppContext, habit_id: int, start: datetime, end: Optional[datetime]) -> None:
    """Put a habit on vacation."""

    try:
        app.habit_repo.get_by_id(habit_id)
        vacation = app.vacation_repo.create(
            Vacation(habit_id=habit_id, start_date=start.date(), end_date=_as_date(end))
        )
    except (HabitPulseError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    until = vacation.end_date.isoformat() if vacation.end_date else "further notice"
    click.echo(f"Habit {habit_id} on vacation from {vacation.start_date.isoformat()} until {until}")


@cli.command("complete")
@click.argument("habit_id", type=int)
@click.argument("day", type=ISO_DATE)
@click.option("--times", type=click.FloatRange(min=0), default=1.0, show_default=True)
@click.option("--today", "today_opt", type=ISO_DATE, default=None)
@click.pass_obj
def complete(
    app: AppContext, habit_id: int, day: datetime, times: float, today_opt: Optional[datetime]
) -> None:
    """Record how many times a habit was completed on DAY (0 clears it)."""

    record = CompletionRecord(habit_id=habit_id, occurred_on=day.date(), num_of_times_completed=times)
    try:
        stored = insert_habit_completion(
            habit_repository=app.habit_repo,
            completion_repository=app.completion_repo,
            habit_id=habit_id,
            record=record,
            today=_today(today_opt),
        )
    except HabitPulseError as exc:
        raise click.ClickException(str(exc)) from exc
    if stored is None:
        click.echo(f"Cleared completion on {record.occurred_on.isoformat()}")
    else:
        click.echo(
            f"Recorded {stored.num_of_times_completed:g} completion(s) on {stored.occurred_on.isoformat()}"
        )


@cli.command("status")
@click.argument("habit_id", type=int)
@click.option("--date", "day", type=ISO_DATE, default=None, help="Date to classify (defaults to today).")
@click.option("--today", "today_opt", type=ISO_DATE, default=None)
@click.pass_obj
def status(
    app: AppContext, habit_id: int, day: Optional[datetime], today_opt: Optional[datetime]
) -> None:
    """Print the status of one date."""

    today = _today(today_opt)
    validation_date = _as_date(day) or today
    try:
        result = app.status_service.compute_status(habit_id, validation_date, today)
    except HabitPulseError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{validation_date.isoformat()} {result.value}")


@cli.command("calendar")
@click.argument("habit_id", type=int)
@click.option("--month", default=None, help="Month as YYYY-MM (defaults to the current month).")
@click.option("--today", "today_opt", type=ISO_DATE, default=None)
@click.pass_obj
def calendar_cmd(
    app: AppContext, habit_id: int, month: Optional[str], today_opt: Optional[datetime]
) -> None:
    """Print every date of a month with its status and completion count."""

    today = _today(today_opt)
    if month is None:
        year, month_number = today.year, today.month
    else:
        try:
            parsed = datetime.strptime(month, "%Y-%m")
        except ValueError as exc:
            raise click.BadParameter(f"expected YYYY-MM, got {month!r}") from exc
        year, month_number = parsed.year, parsed.month

    last_day = calendar.monthrange(year, month_number)[1]
    days = DateRange(date(year, month_number, 1), date(year, month_number, last_day))
    try:
        data = app.completion_data_service.get_completion_data_for_dates(habit_id, days, today)
    except HabitPulseError as exc:
        raise click.ClickException(str(exc)) from exc

    for day in days:
        entry = data[day]
        marker = "*" if day == today else " "
        click.echo(
            f"{marker}{day.isoformat()} {day.strftime('%a')} "
            f"{entry.habit_status.value:<30} {entry.num_of_times_completed:g}"
        )


@cli.command("streaks")
@click.argument("habit_id", type=int)
@click.option("--today", "today_opt", type=ISO_DATE, default=None)
@click.pass_obj
def streaks(app: AppContext, habit_id: int, today_opt: Optional[datetime]) -> None:
    """Print the current and longest streaks."""

    try:
        found = app.completion_data_service.get_streaks(habit_id, _today(today_opt))
    except HabitPulseError as exc:
        raise click.ClickException(str(exc)) from exc

    current = current_streak(found)
    longest = longest_streak(found)
    click.echo(f"Current streak: {current.duration_days if current else 0} day(s)")
    click.echo(f"Longest streak: {longest.duration_days if longest else 0} day(s)")
    for streak in found:
        click.echo(
            f"  {streak.start_date.isoformat()} .. {streak.end_date.isoformat()}"
            f" ({streak.duration_days} day(s){', ongoing' if streak.ongoing else ''})"
        )


if __name__ == "__main__":  # pragma: no cover
    cli()
