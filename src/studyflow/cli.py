"""StudyFlow CLI - Assignment tracker."""

import json
import logging
import sys
import time
from dataclasses import asdict
from datetime import date, datetime

import click

from .adapters.file_store import FileAssignmentStore
from .config import Config, ConnectionSettings, load_config
from .core.assignments import Assignment, AssignmentSource, Priority, StudyFlowError
from .core.classification import urgency_tier
from .core.filters import ALL, FilterState, filter_due_on, group_by_due_date
from .scheduler import AutoSyncScheduler
from .sync import SyncOrchestrator, SyncResult, create_sources
from .tracker import AssignmentTracker

SOURCES = {
    "canvas": AssignmentSource.CANVAS,
    "classroom": AssignmentSource.GOOGLE_CLASSROOM,
}


class App:
    """Wires the store, tracker and sync orchestrator from config."""

    def __init__(self, config: Config):
        self.config = config
        self.store = FileAssignmentStore(config.data_path)
        self.settings = ConnectionSettings()
        self.tracker = AssignmentTracker(self.store, timezone=config.timezone)
        self.orchestrator = SyncOrchestrator(
            self.store,
            create_sources(config, self.settings),
            settings=self.settings,
        )


def _format_line(a: Assignment, now: datetime) -> str:
    check = "x" if a.completed else " "
    tier = urgency_tier(a, now)
    label = f" [{tier.value}]" if tier else ""
    course = f" ({a.course_name})" if a.course_name else ""
    return (
        f"[{check}] {a.id:>4}  {a.due_date.strftime('%a %m/%d')} {a.due_time}  "
        f"{a.priority.display_name:6} {a.title}{course}{label}"
    )


def _show(assignments: list[Assignment], as_json: bool, now: datetime, empty_msg: str) -> None:
    if as_json:
        click.echo(json.dumps([a.to_dict() for a in assignments], indent=2))
        return
    if not assignments:
        click.echo(empty_msg)
        return
    for a in assignments:
        click.echo(_format_line(a, now))


def _report(result: SyncResult | None) -> None:
    if result is None:
        click.echo("No sources connected with auto-sync enabled.")
        return
    if result.busy:
        click.echo("A sync is already running.")
    status = "done" if result.ok else "finished with errors"
    click.echo(f"Sync {status}: {result.inserted} new, {result.skipped} already stored.")


@click.group()
@click.version_option(package_name="studyflow")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """StudyFlow - Assignment tracker CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.obj = App(load_config())


@main.command()
@click.argument("title")
@click.option("--due", "due", required=True, help="Due date/time (YYYY-MM-DD or YYYY-MM-DDTHH:MM)")
@click.option("--subject", default="other", help="Subject tag")
@click.option("--course", default="", help="Course name")
@click.option(
    "--priority",
    type=click.Choice([p.name.lower() for p in Priority]),
    default="medium",
    help="Priority",
)
@click.option("--description", default="", help="Description")
@click.option("--hours", type=float, default=0.0, help="Estimated hours")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--notes", default="", help="Notes")
@click.pass_obj
def add(app: App, title, due, subject, course, priority, description, hours, tags, notes):
    """Add an assignment."""
    try:
        due_date = datetime.fromisoformat(due)
    except ValueError:
        click.echo(f"Error: invalid due date {due!r}", err=True)
        sys.exit(1)
    if len(due) == 10:
        due_date = due_date.replace(hour=23, minute=59)

    try:
        assignment = app.tracker.add_assignment(
            title,
            due_date,
            description=description,
            subject=subject,
            course_name=course,
            priority=Priority[priority.upper()],
            estimated_hours=hours,
            tags=list(tags),
            notes=notes,
        )
    except StudyFlowError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Added #{assignment.id}: {assignment.title} (due {assignment.due_date:%Y-%m-%d %H:%M})")


@main.command("list")
@click.option("--query", "-q", default="", help="Search title, description and subject")
@click.option("--subject", default=ALL, help="Subject tag, or 'all'")
@click.option(
    "--priority",
    type=click.Choice([ALL] + [p.name.lower() for p in Priority], case_sensitive=False),
    default=ALL,
)
@click.option("--all", "include_completed", is_flag=True, help="Include completed assignments")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_cmd(app: App, query, subject, priority, include_completed, as_json):
    """List assignments, filtered and sorted by due date."""
    state = FilterState(
        query=query,
        subject=subject,
        priority=priority,
        include_completed=include_completed,
    )
    _show(app.tracker.filtered(state), as_json, app.tracker.now(), "No assignments found.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def tiers(app: App, as_json: bool):
    """Show pending work by urgency, plus recently completed."""
    now = app.tracker.now()
    result = app.tracker.tiers(now)
    completed = app.tracker.completed()

    sections = [
        ("Overdue", result.overdue),
        ("High Priority", result.high_priority),
        ("Coming Up", result.coming_up),
        ("Long Term", result.long_term),
        ("Completed", completed),
    ]

    if as_json:
        click.echo(
            json.dumps(
                {title.lower().replace(" ", "_"): [a.to_dict() for a in items] for title, items in sections},
                indent=2,
            )
        )
        return

    for title, items in sections:
        click.echo(f"### {title} ({len(items)})")
        for a in items:
            click.echo(f"  {_format_line(a, now)}")
        click.echo()


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stats(app: App, as_json: bool):
    """Show completion statistics."""
    s = app.tracker.stats()
    if as_json:
        click.echo(json.dumps(asdict(s), indent=2))
        return
    click.echo(f"Active:        {s.total_active}")
    click.echo(f"Completed:     {s.completed} ({s.completion_percentage:.0f}%)")
    click.echo(f"Overdue:       {s.overdue}")
    click.echo(f"High priority: {s.high_priority}")


@main.command()
@click.argument("assignment_id", type=int)
@click.pass_obj
def done(app: App, assignment_id: int):
    """Toggle an assignment's completion."""
    updated = app.tracker.toggle_completion(assignment_id)
    if updated is None:
        click.echo(f"Error: no assignment #{assignment_id}", err=True)
        sys.exit(1)
    state = "completed" if updated.completed else "reopened"
    click.echo(f"#{updated.id} {state}: {updated.title}")


@main.command()
@click.argument("assignment_id", type=int)
@click.pass_obj
def delete(app: App, assignment_id: int):
    """Delete an assignment."""
    if not app.tracker.delete(assignment_id):
        click.echo(f"Error: no assignment #{assignment_id}", err=True)
        sys.exit(1)
    click.echo(f"Deleted #{assignment_id}")


@main.command("clear-completed")
@click.pass_obj
def clear_completed(app: App):
    """Delete every completed assignment."""
    removed = app.tracker.delete_all_completed()
    click.echo(f"Deleted {removed} completed assignments.")


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Day to show (YYYY-MM-DD)")
@click.pass_obj
def calendar(app: App, target_date: str | None):
    """Show pending assignments grouped by due day."""
    now = app.tracker.now()
    pending = app.tracker.pending()

    if target_date:
        try:
            day = date.fromisoformat(target_date)
        except ValueError:
            click.echo(f"Error: invalid date {target_date!r}", err=True)
            sys.exit(1)
        _show(filter_due_on(pending, day), False, now, f"Nothing due on {day.strftime('%A, %b %d')}.")
        return

    groups = group_by_due_date(pending)
    if not groups:
        click.echo("Nothing due.")
        return
    for day, items in groups.items():
        click.echo(f"### {day.strftime('%A, %B %d')}")
        for a in items:
            click.echo(f"  {a.due_time} {a.title}")


@main.command()
@click.argument("source", type=click.Choice(list(SOURCES)))
@click.option("--token", prompt=True, hide_input=True, help="API access token")
@click.option("--url", "base_url", default=None, help="Canvas base URL, e.g. https://school.instructure.com")
@click.pass_obj
def connect(app: App, source: str, token: str, base_url: str | None):
    """Connect a learning-management system and sync it."""
    kind = SOURCES[source]
    if kind is AssignmentSource.CANVAS and not (base_url or app.orchestrator.sources[kind].connection.base_url):
        click.echo("Error: --url is required for Canvas", err=True)
        sys.exit(1)

    if not app.orchestrator.connect(kind, token, base_url=base_url):
        click.echo(f"Error: could not connect to {kind.display_name}", err=True)
        sys.exit(1)

    click.echo(f"Connected to {kind.display_name}.")
    _report(app.orchestrator.last_result)


@main.command()
@click.argument("source", type=click.Choice(list(SOURCES)))
@click.pass_obj
def disconnect(app: App, source: str):
    """Forget a source's token."""
    kind = SOURCES[source]
    app.orchestrator.disconnect(kind)
    click.echo(f"Disconnected from {kind.display_name}.")


@main.command("auto-sync")
@click.argument("source", type=click.Choice(list(SOURCES)))
@click.argument("enabled", type=bool)
@click.pass_obj
def auto_sync(app: App, source: str, enabled: bool):
    """Turn auto-sync on or off for a source."""
    connection = app.orchestrator.sources[SOURCES[source]].connection
    connection.auto_sync = enabled
    app.settings.save(connection)
    click.echo(f"Auto-sync for {source}: {'on' if enabled else 'off'}")


@main.command()
@click.pass_obj
def sync(app: App):
    """Pull assignments from connected sources now."""
    if not app.orchestrator.auto_sync_sources():
        _report(None)
        return
    _report(app.orchestrator.refresh())


@main.command()
@click.pass_obj
def watch(app: App):
    """Keep syncing in the background and print stats as they change."""

    def on_stats(s):
        click.echo(
            f"{datetime.now():%H:%M} active={s.total_active} overdue={s.overdue} "
            f"done={s.completion_percentage:.0f}%"
        )

    subscription = app.tracker.watch_stats(on_stats)
    scheduler = AutoSyncScheduler(app.orchestrator, app.config.sync_interval_minutes)
    click.echo("Press Ctrl+C to stop")
    try:
        scheduler.start()
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopped.")
    finally:
        scheduler.shutdown()
        subscription.cancel()


if __name__ == "__main__":
    main()
