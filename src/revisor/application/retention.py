"""Retention sweep: drops archived items once their grace period has passed."""

from datetime import datetime

from revisor.application.utils.time import add_days
from revisor.domain.constants import AUTO_DELETE_DAYS
from revisor.domain.models import RevisionItem


def deletion_deadline(item: RevisionItem, retention_days: int = AUTO_DELETE_DAYS) -> datetime | None:
    """When an archived item becomes eligible for removal. None if not archived."""
    archived_at = item.archived_at
    if archived_at is None:
        return None
    return add_days(archived_at, retention_days)


def sweep_expired(
    items: list[RevisionItem], now: datetime, retention_days: int = AUTO_DELETE_DAYS
) -> list[RevisionItem]:
    """
    Keep every non-archived item, and archived items still inside their
    retention window (`now < archived_at + retention_days`). Order is preserved.
    """
    kept = []
    for item in items:
        deadline = deletion_deadline(item, retention_days)
        if deadline is None or now < deadline:
            kept.append(item)
    return kept
