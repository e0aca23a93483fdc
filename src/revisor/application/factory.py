"""
Service Factory
Centralizes wiring the storage adapter and the revision service from config.
"""

from revisor.application.config import AppConfig
from revisor.application.service import RevisionService
from revisor.domain.ports import ItemStore
from revisor.infrastructure.storage import JsonFileStore


def get_item_store(config: AppConfig) -> ItemStore:
    """
    Returns the ItemStore implementation for the configured data file.
    """
    return JsonFileStore(config.data_file, key=config.storage_key)


def get_revision_service(config: AppConfig) -> RevisionService:
    """
    Returns a RevisionService with the collection loaded and swept.
    """
    return RevisionService(
        get_item_store(config),
        default_intervals=config.default_intervals,
        retention_days=config.retention_days,
    )
