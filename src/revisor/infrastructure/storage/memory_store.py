"""In-memory store, for embedding the service without touching disk."""

from revisor.domain.models import RevisionItem
from revisor.domain.ports import ItemStore


class MemoryStore(ItemStore):
    def __init__(self, items: list[RevisionItem] | None = None):
        self._items = list(items or [])
        self.save_count = 0

    def load(self) -> list[RevisionItem]:
        return list(self._items)

    def save(self, items: list[RevisionItem]) -> None:
        self._items = list(items)
        self.save_count += 1
