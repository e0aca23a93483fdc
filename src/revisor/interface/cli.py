"""revisor CLI: root commands and the config subgroup."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Annotated

import typer

from revisor.application.config import config_file_candidates
from revisor.application.views import (
    format_date,
    partition_due,
    partition_items,
    parse_intervals,
)
from revisor.consts import VERSION
from revisor.domain.models import RevisionItem
from revisor.domain.ports import StorageError
from revisor.infrastructure.storage.records import RevisionItemRecord
from revisor.interface._common import (
    _get_service,
    _render_item,
    _resolve_item_or_exit,
    _resolve_with_overrides,
    _save_failed,
    _status_label,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="revisor: spaced-repetition tracker for the topics you are learning.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)

config_app = typer.Typer(help="Manage revisor configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"revisor {VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="Path to the revisions JSON file."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
        ),
    ] = False,
):
    """Global settings for revisor."""
    ctx.ensure_object(dict)
    overrides = ctx.obj.setdefault("overrides", {})
    if verbose:
        overrides["verbose"] = 1 + verbose
    if data_file is not None:
        overrides["data_file"] = data_file


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Topic to learn.")],
    intervals: Annotated[
        str | None,
        typer.Option(
            "--intervals",
            "-i",
            help="Review gaps in days, comma-separated (e.g. '1, 3, 7'). Defaults to config.",
        ),
    ] = None,
):
    """[bold green]Add[/bold green] a topic and schedule its first review."""
    schedule = None
    if intervals is not None:
        schedule = parse_intervals(intervals)
        if not schedule:
            typer.secho(
                f"No positive day counts found in '{intervals}'.", fg="yellow", err=True
            )
            raise typer.Exit(2)

    service = _get_service(ctx)
    try:
        item = service.add(title, schedule)
    except StorageError as e:
        raise _save_failed(e)

    if item is None:
        typer.secho("Nothing added: the title is blank.", fg="yellow")
        return

    typer.secho(f"Added '{item.title}' ({item.id}).", fg="green")
    typer.echo(f"First review: {format_date(item.next_revision_date)}")


@app.command("list")
def list_items(
    ctx: typer.Context,
    show_all: Annotated[
        bool, typer.Option("--all", "-a", help="Also list mastered and archived items.")
    ] = False,
    archived: Annotated[bool, typer.Option("--archived", help="List archived items.")] = False,
    mastered: Annotated[bool, typer.Option("--mastered", help="List mastered items.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List active items grouped by when they are due."""
    service = _get_service(ctx)
    now = service.now()
    groups = partition_items(service.items)
    due = partition_due(groups.active, now)
    show_archived = archived or show_all
    show_mastered = mastered or show_all

    if json_output:

        def dump(items: list[RevisionItem]) -> list[dict]:
            return [RevisionItemRecord.from_domain(i).to_json_dict() for i in items]

        payload = {
            "overdue": dump(due.overdue),
            "dueToday": dump(due.due_today),
            "upcoming": dump(due.upcoming),
        }
        if show_mastered:
            payload["mastered"] = dump(groups.mastered)
        if show_archived:
            payload["archived"] = dump(groups.archived)
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if groups.is_empty:
        typer.secho("No revisions yet.", bold=True)
        typer.echo("Add a topic with 'revisor add' to start your learning journey!")
        return

    def section(title: str, items: list[RevisionItem], color: str) -> None:
        if not items:
            return
        typer.secho(f"\n{title} ({len(items)})", fg=color, bold=True)
        for item in items:
            typer.echo(
                _render_item(item, now, service.default_intervals, service.retention_days)
            )

    section("Overdue", due.overdue, "red")
    section("Due Today", due.due_today, "yellow")
    section("Upcoming", due.upcoming, "cyan")

    if show_mastered:
        section("Mastered", groups.mastered, "green")
    if show_archived:
        section("Archived", groups.archived, "bright_black")

    hidden = []
    if groups.mastered and not show_mastered:
        hidden.append(f"{len(groups.mastered)} mastered (--mastered)")
    if groups.archived and not show_archived:
        hidden.append(f"{len(groups.archived)} archived (--archived)")
    if hidden:
        typer.echo(f"\nHidden: {', '.join(hidden)}")


@app.command()
def show(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
):
    """Show every detail of one item."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    now = service.now()

    typer.secho(item.title, bold=True)
    typer.echo(f"ID:       {item.id}")
    typer.echo(f"Status:   {_status_label(item)}")
    typer.echo(_render_item(item, now, service.default_intervals, service.retention_days))
    typer.echo(f"Created:  {format_date(item.created_at)}")
    typer.echo(f"Reviewed: {format_date(item.last_revision_date)}")


@app.command()
def complete(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
):
    """Mark today's review of an item as done."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    if not item.is_active:
        typer.secho(
            f"'{item.title}' is {_status_label(item)}; only active items can be reviewed.",
            fg="yellow",
        )
        return

    try:
        updated = service.complete(item.id)
    except StorageError as e:
        raise _save_failed(e)

    if updated.is_completed:
        typer.secho(f"Mastered '{updated.title}'. Schedule complete.", fg="green")
    else:
        typer.secho(f"Reviewed '{updated.title}', now level {updated.level}.", fg="green")
        typer.echo(f"Next review: {format_date(updated.next_revision_date)}")


@app.command()
def archive(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
):
    """Archive an active item. Archived items are deleted after the retention window."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    if not item.is_active:
        typer.secho(
            f"'{item.title}' is {_status_label(item)}; only active items can be archived.",
            fg="yellow",
        )
        return

    try:
        service.archive(item.id)
    except StorageError as e:
        raise _save_failed(e)
    typer.secho(
        f"Archived '{item.title}'. It will be deleted in {service.retention_days} days "
        "unless restored.",
        fg="green",
    )


@app.command()
def restore(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
):
    """Return an archived item to the active list."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    if not item.is_archived:
        typer.secho(f"'{item.title}' is not archived.", fg="yellow")
        return

    try:
        service.restore(item.id)
    except StorageError as e:
        raise _save_failed(e)
    typer.secho(f"Restored '{item.title}'.", fg="green")


@app.command()
def delete(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
):
    """Delete an item permanently, whatever its state."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    try:
        service.delete_permanently(item.id)
    except StorageError as e:
        raise _save_failed(e)
    typer.secho(f"Deleted '{item.title}'.", fg="green")


@app.command("clear-completed")
def clear_completed(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation.")] = False,
):
    """Delete every mastered item."""
    service = _get_service(ctx)
    count = sum(1 for item in service.items if item.is_completed)
    if not count:
        typer.echo("No mastered items to clear.")
        return

    if not yes:
        typer.confirm(f"Delete {count} mastered item(s)?", abort=True)

    try:
        removed = service.clear_completed()
    except StorageError as e:
        raise _save_failed(e)
    typer.secho(f"Cleared {removed} mastered item(s).", fg="green")


@app.command()
def rename(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID or unique prefix.")],
    title: Annotated[str, typer.Argument(help="New title.")],
):
    """Change the title of an active item."""
    service = _get_service(ctx)
    item = _resolve_item_or_exit(service, item_id)
    if not item.is_active:
        typer.secho(
            f"'{item.title}' is {_status_label(item)}; only active items can be renamed.",
            fg="yellow",
        )
        return
    if not title.strip():
        typer.secho("Title unchanged: the new title is blank.", fg="yellow")
        return

    try:
        updated = service.update_title(item.id, title)
    except StorageError as e:
        raise _save_failed(e)

    if updated is None:
        typer.echo(f"Title unchanged: '{item.title}'.")
    else:
        typer.secho(f"Renamed '{item.title}' to '{updated.title}'.", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("open")
def config_open():
    """Open the config file in your default editor."""
    import subprocess

    cfg_path = next((f for f in config_file_candidates() if f.exists()), None)
    if cfg_path is None:
        cfg_path = config_file_candidates()[0]
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        cfg_path.touch()

    if sys.platform == "darwin":
        subprocess.run(["open", str(cfg_path)])
    elif sys.platform == "win32":
        os.startfile(str(cfg_path))
    else:
        subprocess.run(["xdg-open", str(cfg_path)])


@config_app.command("path")
def config_path(ctx: typer.Context):
    """Print where items are stored."""
    typer.echo(str(_resolve_with_overrides(ctx).data_file))
