#!/usr/bin/env python3
"""
Boostly CLI

Task list, points and levels, weekly histogram and a focus timer.

Usage:
    boostly add "Write report" --priority high
    boostly list
    boostly done 1
    boostly move 1 3
    boostly focus --mode custom --minutes 50
    boostly status
"""

from __future__ import annotations

import asyncio
import contextlib

import click
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from .config import get_config, store_option, verbose_option
from .engine import BoostlyEngine
from .errors import BoostlyError, NotFoundError
from .events import Event, EventType
from .log import setup_logging
from .presenter import ConsolePresenter, render_header, render_tasks, render_timer, render_week
from .state import Priority, format_clock
from .ticker import FocusTicker
from .timer import TimerMode, TimerStatus

console = Console()

PRIORITY_CHOICES = [p.value for p in Priority]
MODE_CHOICES = [m.value for m in TimerMode]
TICK_SECONDS = 1


@contextlib.contextmanager
def _engine_errors(position: int | None = None):
    """Report engine errors as click errors (exit code 1)."""
    try:
        yield
    except NotFoundError as e:
        if position is not None:
            raise click.ClickException(f"No task #{position}") from e
        raise click.ClickException(str(e)) from e
    except BoostlyError as e:
        raise click.ClickException(str(e)) from e


def _engine(ctx: click.Context) -> BoostlyEngine:
    return ctx.obj["engine"]


@click.group()
@store_option
@verbose_option
@click.pass_context
def cli(ctx, store, verbose):
    """Boostly - tasks, points, levels and focus sessions."""
    config = get_config(store=store, verbose=verbose)

    setup_logging(config.log_path, config.verbose)

    with _engine_errors():
        engine = BoostlyEngine(config.build_gateway())
    engine.select_timer_mode(config.timer_mode, config.custom_minutes)
    engine.bus.subscribe(ConsolePresenter(console))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["engine"] = engine

    if config.verbose:
        click.echo(f"Using {config.backend.name} store at {config.state_path}", err=True)


@cli.command()
@click.argument("text")
@click.option(
    "--priority", "-p",
    type=click.Choice(PRIORITY_CHOICES),
    default=Priority.MEDIUM.value,
    show_default=True,
    help="Task priority",
)
@click.pass_context
def add(ctx, text, priority):
    """Add a task to the top of the list."""
    with _engine_errors():
        _engine(ctx).add_task(text, priority)


@cli.command(name="list")
@click.pass_context
def list_tasks(ctx):
    """Show points, level and the task list."""
    state = _engine(ctx).snapshot()
    console.print(render_header(state))
    console.print(render_tasks(state))


@cli.command()
@click.pass_context
def week(ctx):
    """Show tasks completed per weekday."""
    console.print(render_week(_engine(ctx).snapshot()))


@cli.command()
@click.pass_context
def status(ctx):
    """Show everything: header, tasks, weekly histogram."""
    state = _engine(ctx).snapshot()
    console.print(Panel(render_header(state), title="Boostly"))
    console.print(render_tasks(state))
    console.print(Panel(render_week(state), title="This week"))


@cli.command()
@click.argument("position", type=int)
@click.pass_context
def done(ctx, position):
    """Toggle task POSITION between done and open."""
    with _engine_errors(position):
        _engine(ctx).toggle_done(position - 1)


@cli.command()
@click.argument("position", type=int)
@click.argument("text")
@click.pass_context
def edit(ctx, position, text):
    """Replace the text of task POSITION (blank text keeps the old one)."""
    with _engine_errors(position):
        changed = _engine(ctx).edit_text(position - 1, text)
    if not changed:
        click.echo("Text unchanged.")


@cli.command()
@click.argument("position", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete(ctx, position, yes):
    """Delete task POSITION."""
    if not yes:
        click.confirm("Delete this task?", abort=True)
    with _engine_errors(position):
        _engine(ctx).delete_task(position - 1)


@cli.command()
@click.argument("from_position", type=int)
@click.argument("to_position", type=int)
@click.pass_context
def move(ctx, from_position, to_position):
    """Move a task from one position to another."""
    engine = _engine(ctx)
    try:
        engine.reorder(from_position - 1, to_position - 1)
    except NotFoundError as e:
        raise click.ClickException(f"Positions must be between 1 and {len(engine.tasks)}") from e


@cli.command()
@click.option("--mode", "-m", type=click.Choice(MODE_CHOICES), default=None, help="Focus mode (default: from config)")
@click.option("--minutes", type=click.IntRange(min=0), default=None, help="Length of a custom session")
@click.pass_context
def focus(ctx, mode, minutes):
    """Run a focus session. Ctrl+C stops it without a reward."""
    engine = _engine(ctx)
    config = ctx.obj["config"]
    if mode or minutes is not None:
        if minutes is not None and mode is None:
            mode = TimerMode.CUSTOM.value
        with _engine_errors():
            engine.select_timer_mode(mode or config.timer_mode, minutes if minutes is not None else config.custom_minutes)

    try:
        asyncio.run(_run_focus(engine, TICK_SECONDS))
    except KeyboardInterrupt:
        click.echo(f"\nFocus session stopped at {format_clock(engine.timer.remaining_seconds)}. No points awarded.")


async def _run_focus(engine: BoostlyEngine, interval_seconds: float) -> None:
    scheduler = AsyncIOScheduler()
    ticker = FocusTicker(engine, scheduler, interval_seconds)
    finished = asyncio.Event()

    def _timer_view():
        return render_timer(engine.timer.remaining_seconds, engine.timer.progress, engine.timer.status.value)

    with Live(_timer_view(), console=console, refresh_per_second=4, transient=False) as live:

        def _on_event(event: Event) -> None:
            if event.type == EventType.TIMER_TICK:
                live.update(_timer_view())
            elif event.type == EventType.TIMER_EXPIRED:
                finished.set()

        unsubscribe = engine.bus.subscribe(_on_event)
        scheduler.start()
        try:
            ticker.start()
            live.update(_timer_view())
            await finished.wait()
        finally:
            if engine.timer.status == TimerStatus.RUNNING:
                ticker.pause()
            scheduler.shutdown(wait=False)
            unsubscribe()


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def reset(ctx, yes):
    """Wipe all tasks, points and history."""
    if not yes:
        click.confirm("Reset app data?", abort=True)
    _engine(ctx).reset()


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
