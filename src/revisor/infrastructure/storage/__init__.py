# Storage Adapters Package
from .json_store import JsonFileStore
from .memory_store import MemoryStore
from .records import RevisionItemRecord

__all__ = ["JsonFileStore", "MemoryStore", "RevisionItemRecord"]
