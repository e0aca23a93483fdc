"""
Revision Service: application layer orchestrator.

Owns the in-memory item collection, applies scheduling and lifecycle rules,
and persists the whole collection through an ItemStore after each mutation.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from revisor.application.retention import sweep_expired
from revisor.application.scheduler import (
    clamp_level,
    complete_revision,
    create_item,
    normalize_title,
)
from revisor.application.utils.time import utc_now
from revisor.domain.constants import AUTO_DELETE_DAYS, DEFAULT_REVISION_INTERVALS
from revisor.domain.models import ACTIVE, Archived, RevisionItem
from revisor.domain.ports import ItemStore

logger = logging.getLogger(__name__)


class AmbiguousItemIdError(ValueError):
    """Raised when an ID prefix matches more than one item."""

    def __init__(self, prefix: str, matches: list[RevisionItem]):
        self.prefix = prefix
        self.matches = matches
        super().__init__(f"'{prefix}' matches {len(matches)} items")


class RevisionService:
    """
    Application service for the revision collection.

    Follows Dependency Inversion: depends on the ItemStore abstraction,
    not on a concrete storage adapter. The clock is injectable for tests.

    Every mutating operation is a no-op (returning None) when the ID is
    unknown or the input is invalid; nothing is written in that case.
    """

    def __init__(
        self,
        store: ItemStore,
        clock: Callable[[], datetime] | None = None,
        default_intervals: Sequence[int] = DEFAULT_REVISION_INTERVALS,
        retention_days: int = AUTO_DELETE_DAYS,
    ):
        """
        Args:
            store: The repository (port) holding the collection.
            clock: Returns the current instant; defaults to UTC now.
            default_intervals: Schedule for items added without one, and for
                stored items that lack a schedule.
            retention_days: Grace period before archived items are purged.
        """
        self._store = store
        self._clock = clock or utc_now
        self.default_intervals = tuple(default_intervals)
        self.retention_days = retention_days
        self._items: list[RevisionItem] = []
        self.refresh()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[RevisionItem]:
        """A copy of the collection in insertion order."""
        return list(self._items)

    def now(self) -> datetime:
        return self._clock()

    def get(self, item_id: str) -> RevisionItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def resolve(self, ref: str) -> RevisionItem | None:
        """
        Find an item by exact ID or by a unique, case-insensitive ID prefix.

        Raises:
            AmbiguousItemIdError: If the prefix matches several items.
        """
        exact = self.get(ref)
        if exact is not None:
            return exact

        needle = ref.strip().upper()
        if not needle:
            return None
        matches = [item for item in self._items if item.id.upper().startswith(needle)]
        if len(matches) > 1:
            raise AmbiguousItemIdError(ref, matches)
        return matches[0] if matches else None

    def refresh(self) -> int:
        """
        Reload the collection and run the retention sweep.

        Returns:
            Number of archived items purged. The store is only written
            when at least one item was purged.
        """
        loaded = [clamp_level(item, self.default_intervals) for item in self._store.load()]
        kept = sweep_expired(loaded, self.now(), self.retention_days)
        purged = len(loaded) - len(kept)
        if purged:
            logger.info(
                f"Purged {purged} archived item(s) older than {self.retention_days} days"
            )
            self._store.save(kept)
        self._items = kept
        return purged

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, title: str, intervals: Sequence[int] | None = None) -> RevisionItem | None:
        """Append a new item. Blank titles and empty or non-positive schedules are ignored."""
        item = create_item(title, intervals, self.now(), self.default_intervals)
        if item is None:
            return None
        self._commit([*self._items, item])
        logger.debug(f"Added {item.id} {item.title!r} schedule={list(item.revision_intervals)}")
        return item

    def complete(self, item_id: str) -> RevisionItem | None:
        """Advance an Active item one level. Completed and Archived items are left alone."""
        now = self.now()
        return self._update(
            item_id, lambda item: complete_revision(item, now, self.default_intervals)
        )

    def archive(self, item_id: str) -> RevisionItem | None:
        """Move an Active item to the archive, freezing its progress."""
        now = self.now()

        def _archive(item: RevisionItem) -> RevisionItem:
            if not item.is_active:
                return item
            return item.evolve(status=Archived(at=now))

        return self._update(item_id, _archive)

    def restore(self, item_id: str) -> RevisionItem | None:
        """Return an Archived item to the active pool with its progress untouched."""

        def _restore(item: RevisionItem) -> RevisionItem:
            if not item.is_archived:
                return item
            return item.evolve(status=ACTIVE)

        return self._update(item_id, _restore)

    def update_title(self, item_id: str, new_title: str) -> RevisionItem | None:
        """Rename an item. Blank titles leave it unchanged."""
        clean = normalize_title(new_title)
        if clean is None:
            logger.debug(f"Rejected rename of {item_id}: blank title")
            return None

        def _rename(item: RevisionItem) -> RevisionItem:
            if item.title == clean:
                return item
            return item.evolve(title=clean)

        return self._update(item_id, _rename)

    def delete_permanently(self, item_id: str) -> RevisionItem | None:
        """Remove an item whatever its state. Returns the removed item."""
        target = self.get(item_id)
        if target is None:
            logger.debug(f"Delete ignored: no item {item_id}")
            return None
        self._commit([item for item in self._items if item.id != item_id])
        return target

    def clear_completed(self) -> int:
        """Remove every Completed item. Returns how many were removed."""
        kept = [item for item in self._items if not item.is_completed]
        removed = len(self._items) - len(kept)
        if removed:
            self._commit(kept)
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update(
        self, item_id: str, change: Callable[[RevisionItem], RevisionItem]
    ) -> RevisionItem | None:
        for index, item in enumerate(self._items):
            if item.id != item_id:
                continue
            updated = change(item)
            if updated == item:
                return None
            items = list(self._items)
            items[index] = updated
            self._commit(items)
            return updated

        logger.debug(f"Update ignored: no item {item_id}")
        return None

    def _commit(self, items: list[RevisionItem]) -> None:
        self._store.save(items)
        self._items = items
