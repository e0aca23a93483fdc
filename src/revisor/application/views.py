"""
Read-side helpers for presenting the collection.

Groups items the way the list view shows them and renders the short
status strings next to each item. Pure computation, no I/O.
"""

from dataclasses import dataclass, field
from datetime import datetime

from revisor.application.retention import deletion_deadline
from revisor.domain.constants import AUTO_DELETE_DAYS
from revisor.domain.models import RevisionItem


@dataclass
class ItemGroups:
    active: list[RevisionItem] = field(default_factory=list)
    archived: list[RevisionItem] = field(default_factory=list)  # newest archive first
    mastered: list[RevisionItem] = field(default_factory=list)  # newest completion first

    @property
    def is_empty(self) -> bool:
        return not (self.active or self.archived or self.mastered)


@dataclass
class DueGroups:
    overdue: list[RevisionItem] = field(default_factory=list)
    due_today: list[RevisionItem] = field(default_factory=list)
    upcoming: list[RevisionItem] = field(default_factory=list)


def partition_items(items: list[RevisionItem]) -> ItemGroups:
    groups = ItemGroups()
    for item in items:
        if item.is_archived:
            groups.archived.append(item)
        elif item.is_completed:
            groups.mastered.append(item)
        else:
            groups.active.append(item)

    groups.archived.sort(key=lambda i: i.archived_at, reverse=True)
    groups.mastered.sort(key=lambda i: i.completed_at, reverse=True)
    return groups


def days_until(target: datetime, now: datetime) -> int:
    """
    Whole calendar days from `now` to `target` in local time.

    Negative when `target` falls on an earlier day, 0 on the same day.
    """
    return (target.astimezone().date() - now.astimezone().date()).days


def partition_due(active: list[RevisionItem], now: datetime) -> DueGroups:
    """Split active items by due day, each group ordered by next review date."""
    groups = DueGroups()
    for item in sorted(active, key=lambda i: i.next_revision_date):
        days = days_until(item.next_revision_date, now)
        if days < 0:
            groups.overdue.append(item)
        elif days == 0:
            groups.due_today.append(item)
        else:
            groups.upcoming.append(item)
    return groups


def _plural_days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def due_status_text(item: RevisionItem, now: datetime) -> str:
    days = days_until(item.next_revision_date, now)
    if days < 0:
        return f"Overdue by {_plural_days(-days)}"
    if days == 0:
        return "Due today"
    return f"Due in {_plural_days(days)}"


def deletion_text(item: RevisionItem, now: datetime, retention_days: int = AUTO_DELETE_DAYS) -> str:
    deadline = deletion_deadline(item, retention_days)
    if deadline is None:
        return ""
    days = days_until(deadline, now)
    if days < 1:
        return "Auto-deletes today"
    return f"Auto-deletes in {_plural_days(days)}"


def parse_intervals(text: str) -> list[int]:
    """
    Parse comma-separated day counts such as "1, 3, 7".

    Entries that are not integers or are not positive are dropped.
    """
    intervals = []
    for part in text.split(","):
        part = part.strip()
        try:
            value = int(part)
        except ValueError:
            continue
        if value > 0:
            intervals.append(value)
    return intervals


def format_date(dt: datetime) -> str:
    """Short local date, e.g. 'Mar 4, 2025'."""
    local = dt.astimezone()
    return f"{local:%b} {local.day}, {local.year}"
