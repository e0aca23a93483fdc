"""
Domain models for revision tracking.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class Active:
    """The item is in the review rotation."""


@dataclass(frozen=True)
class Archived:
    """
    The item is shelved; progress is frozen.

    Attributes:
        at: When the item was archived. Starts the retention countdown.
    """

    at: datetime


@dataclass(frozen=True)
class Completed:
    """
    The item exhausted its schedule (mastered). Terminal.

    Attributes:
        at: When the final review was completed.
    """

    at: datetime


ItemStatus = Active | Archived | Completed

ACTIVE = Active()


@dataclass(frozen=True)
class RevisionItem:
    """
    One topic being tracked.

    Attributes:
        id: Opaque identifier assigned at creation.
        title: Display title, never blank.
        level: Index into the schedule; incremented on each completed review.
        last_revision_date: When the item was created or last reviewed.
        next_revision_date: When the next review is due.
        created_at: Creation instant.
        revision_intervals: Per-item schedule in days. None means the default schedule.
        status: Active, Archived or Completed.
    """

    id: str
    title: str
    level: int
    last_revision_date: datetime
    next_revision_date: datetime
    created_at: datetime
    revision_intervals: tuple[int, ...] | None = None
    status: ItemStatus = ACTIVE

    @property
    def is_active(self) -> bool:
        return isinstance(self.status, Active)

    @property
    def is_archived(self) -> bool:
        return isinstance(self.status, Archived)

    @property
    def is_completed(self) -> bool:
        return isinstance(self.status, Completed)

    @property
    def archived_at(self) -> datetime | None:
        return self.status.at if isinstance(self.status, Archived) else None

    @property
    def completed_at(self) -> datetime | None:
        return self.status.at if isinstance(self.status, Completed) else None

    def evolve(self, **changes) -> "RevisionItem":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
