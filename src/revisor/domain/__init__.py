# Domain Package
from .models import ACTIVE, Active, Archived, Completed, ItemStatus, RevisionItem
from .ports import ItemStore, StorageError

__all__ = [
    "ACTIVE",
    "Active",
    "Archived",
    "Completed",
    "ItemStatus",
    "RevisionItem",
    "ItemStore",
    "StorageError",
]
