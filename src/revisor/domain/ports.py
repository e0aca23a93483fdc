"""
Ports (interfaces) for item persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import RevisionItem


class StorageError(Exception):
    """Raised when the collection cannot be written."""


class ItemStore(ABC):
    """
    Port for loading and saving the whole item collection.

    Implementations:
        - JsonFileStore: One named slot inside a JSON document on disk.
        - MemoryStore: Keeps the collection in process memory.
    """

    @abstractmethod
    def load(self) -> list[RevisionItem]:
        """
        Read the persisted collection.

        Returns:
            Items in insertion order. An empty list when nothing is stored
            or the stored data cannot be parsed. Never raises.
        """
        pass

    @abstractmethod
    def save(self, items: list[RevisionItem]) -> None:
        """
        Replace the persisted collection with the given items.

        Raises:
            StorageError: If the collection could not be written.
        """
        pass
