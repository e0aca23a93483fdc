"""
Scheduler for fixed-interval spaced repetition.

Pure functions over RevisionItem: no I/O, no clock. Callers pass `now`.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from ulid import ULID

from revisor.application.utils.time import add_days
from revisor.domain.constants import DEFAULT_REVISION_INTERVALS
from revisor.domain.models import Completed, RevisionItem

logger = logging.getLogger(__name__)


def generate_item_id() -> str:
    """Generate an opaque, creation-ordered item ID using ULID."""
    return str(ULID())


def normalize_title(title: str | None) -> str | None:
    """Trim a title, returning None when nothing is left."""
    if title is None:
        return None
    title = title.strip()
    return title or None


def is_valid_schedule(intervals: Sequence[int] | None) -> bool:
    """A schedule must be a non-empty sequence of positive integer day counts."""
    if not intervals:
        return False
    return all(isinstance(n, int) and not isinstance(n, bool) and n > 0 for n in intervals)


def effective_schedule(
    item: RevisionItem, default_intervals: Sequence[int] = DEFAULT_REVISION_INTERVALS
) -> tuple[int, ...]:
    """The item's own schedule, or the default when it has none."""
    if item.revision_intervals:
        return tuple(item.revision_intervals)
    return tuple(default_intervals)


def clamp_level(
    item: RevisionItem, default_intervals: Sequence[int] = DEFAULT_REVISION_INTERVALS
) -> RevisionItem:
    """Pull a stored level back inside its schedule; the level never exceeds its length."""
    limit = len(effective_schedule(item, default_intervals))
    if item.level <= limit:
        return item
    logger.warning(f"Item {item.id} has level {item.level} beyond its schedule; using {limit}")
    return item.evolve(level=limit)


def create_item(
    title: str,
    intervals: Sequence[int] | None,
    now: datetime,
    default_intervals: Sequence[int] = DEFAULT_REVISION_INTERVALS,
    item_id: str | None = None,
) -> RevisionItem | None:
    """
    Build a new Active item at level 0.

    Args:
        title: Display title; surrounding whitespace is trimmed.
        intervals: Per-item schedule in days. None selects `default_intervals`.
        now: Creation instant.
        default_intervals: Schedule used when `intervals` is None.
        item_id: Explicit ID; generated when omitted.

    Returns:
        The new item, or None if the title is blank or the schedule is
        empty or contains non-positive entries.
    """
    clean_title = normalize_title(title)
    if clean_title is None:
        logger.debug("Rejected new item: blank title")
        return None

    schedule = tuple(default_intervals) if intervals is None else tuple(intervals)
    if not is_valid_schedule(schedule):
        logger.debug(f"Rejected new item {clean_title!r}: invalid schedule {list(schedule)}")
        return None

    return RevisionItem(
        id=item_id or generate_item_id(),
        title=clean_title,
        level=0,
        last_revision_date=now,
        next_revision_date=add_days(now, schedule[0]),
        created_at=now,
        revision_intervals=schedule,
    )


def complete_revision(
    item: RevisionItem,
    now: datetime,
    default_intervals: Sequence[int] = DEFAULT_REVISION_INTERVALS,
) -> RevisionItem:
    """
    Record a completed review and schedule the next one.

    The level advances by one. When it reaches the end of the schedule the
    item becomes Completed and `next_revision_date` is pinned to `now`.
    Otherwise the next review is `schedule[new_level]` days from `now`.

    Completed and Archived items are returned unchanged.
    """
    if not item.is_active:
        logger.debug(f"Ignored completion of {item.id}: status is {type(item.status).__name__}")
        return item

    schedule = effective_schedule(item, default_intervals)
    new_level = item.level + 1

    if new_level >= len(schedule):
        return item.evolve(
            level=len(schedule),
            last_revision_date=now,
            next_revision_date=now,
            status=Completed(at=now),
        )

    return item.evolve(
        level=new_level,
        last_revision_date=now,
        next_revision_date=add_days(now, schedule[new_level]),
    )
