"""Shared helpers for CLI commands: config resolution, service wiring, rendering."""

import logging
from datetime import datetime
from typing import Any

import typer

from revisor.application.config import AppConfig, resolve_config
from revisor.application.factory import get_revision_service
from revisor.application.scheduler import effective_schedule
from revisor.application.service import AmbiguousItemIdError, RevisionService
from revisor.application.views import deletion_text, due_status_text, format_date
from revisor.domain.models import RevisionItem
from revisor.domain.ports import StorageError


def _log_level(verbose: int) -> int:
    # 0 and 1 (default) show warnings; any -v shows debug detail
    return logging.DEBUG if verbose >= 2 else logging.WARNING


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering global CLI options from the context under explicit overrides."""
    merged: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        merged.update(ctx.obj.get("overrides", {}))
    merged.update(overrides)
    return resolve_config(merged)


def _get_service(ctx: typer.Context) -> RevisionService:
    config = _resolve_with_overrides(ctx)
    logging.getLogger().setLevel(_log_level(config.verbose))
    try:
        # Loading runs the retention sweep, which may write
        return get_revision_service(config)
    except StorageError as e:
        raise _save_failed(e)


def _save_failed(e: StorageError) -> typer.Exit:
    typer.secho(str(e), fg="red", err=True)
    return typer.Exit(1)


def _resolve_item_or_exit(service: RevisionService, ref: str) -> RevisionItem:
    try:
        item = service.resolve(ref)
    except AmbiguousItemIdError as e:
        typer.secho(f"'{ref}' is ambiguous; it matches:", fg="red", err=True)
        for match in e.matches:
            typer.echo(f"  {match.id}  {match.title}", err=True)
        raise typer.Exit(1)

    if item is None:
        typer.secho(f"No item matches '{ref}'.", fg="yellow", err=True)
        raise typer.Exit(1)
    return item


def _status_label(item: RevisionItem) -> str:
    if item.is_archived:
        return "archived"
    if item.is_completed:
        return "mastered"
    return "active"


def _render_item(
    item: RevisionItem,
    now: datetime,
    default_intervals: tuple[int, ...],
    retention_days: int,
) -> str:
    if item.is_archived:
        return (
            f"  {item.id}  {item.title}\n"
            f"      Archived on {format_date(item.archived_at)}. "
            f"{deletion_text(item, now, retention_days)}."
        )
    if item.is_completed:
        return f"  {item.id}  {item.title}\n      Mastered on {format_date(item.completed_at)}."

    schedule = effective_schedule(item, default_intervals)
    return (
        f"  {item.id}  {item.title}\n"
        f"      Level {item.level}/{len(schedule)}"
        f" · Next {format_date(item.next_revision_date)} ({due_status_text(item, now)})"
        f" · Schedule {', '.join(str(d) for d in schedule)}"
    )
