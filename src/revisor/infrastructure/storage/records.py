"""
Wire records for persisted revision items.

The JSON shape keeps camelCase keys and ISO-8601 UTC strings:

    {"id": "...", "title": "...", "level": 0,
     "lastRevisionDate": "2025-01-01T09:00:00.000Z",
     "nextRevisionDate": "2025-01-02T09:00:00.000Z",
     "createdAt": "2025-01-01T09:00:00.000Z",
     "revisionIntervals": [1, 3, 7, 14, 30],
     "archivedAt": "...", "completedAt": "..."}

`revisionIntervals`, `archivedAt` and `completedAt` are optional.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, PositiveInt, field_serializer, field_validator

from revisor.application.utils.time import parse_iso_z, to_iso_z
from revisor.domain.models import ACTIVE, Archived, Completed, RevisionItem


class RevisionItemRecord(BaseModel):
    """One stored item."""

    id: str = Field(..., min_length=1)
    title: str
    level: int = Field(0, ge=0)
    lastRevisionDate: datetime
    nextRevisionDate: datetime
    createdAt: datetime
    revisionIntervals: list[PositiveInt] | None = None
    archivedAt: datetime | None = None
    completedAt: datetime | None = None

    @field_validator(
        "lastRevisionDate", "nextRevisionDate", "createdAt", "archivedAt", "completedAt",
        mode="before",
    )
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_iso_z(v)
        return v

    @field_serializer(
        "lastRevisionDate", "nextRevisionDate", "createdAt", "archivedAt", "completedAt"
    )
    def serialize_timestamp(self, v: datetime | None) -> str | None:
        return to_iso_z(v) if v is not None else None

    @classmethod
    def from_domain(cls, item: RevisionItem) -> "RevisionItemRecord":
        return cls(
            id=item.id,
            title=item.title,
            level=item.level,
            lastRevisionDate=item.last_revision_date,
            nextRevisionDate=item.next_revision_date,
            createdAt=item.created_at,
            revisionIntervals=list(item.revision_intervals) if item.revision_intervals else None,
            archivedAt=item.archived_at,
            completedAt=item.completed_at,
        )

    def to_domain(self) -> RevisionItem:
        # archivedAt wins over completedAt for legacy records carrying both
        if self.archivedAt is not None:
            status = Archived(at=self.archivedAt)
        elif self.completedAt is not None:
            status = Completed(at=self.completedAt)
        else:
            status = ACTIVE

        return RevisionItem(
            id=self.id,
            title=self.title,
            level=self.level,
            last_revision_date=self.lastRevisionDate,
            next_revision_date=self.nextRevisionDate,
            created_at=self.createdAt,
            revision_intervals=tuple(self.revisionIntervals) if self.revisionIntervals else None,
            status=status,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
