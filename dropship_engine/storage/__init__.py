"""Storage package"""

from dropship_engine.config import Settings, get_settings
from dropship_engine.storage.base import (
    AuditStore,
    BaseStorage,
    CatalogStore,
    ConfigStore,
    FulfillmentStore,
)
from dropship_engine.storage.json_storage import JSONStorage
from dropship_engine.storage.memory_storage import MemoryStorage
from dropship_engine.storage.supabase_storage import SupabaseStorage


def create_storage(settings: Settings = None) -> BaseStorage:
    """설정된 백엔드로 저장소 생성"""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "json":
        return JSONStorage(str(settings.local_data_path))
    return SupabaseStorage()


__all__ = [
    "AuditStore",
    "BaseStorage",
    "CatalogStore",
    "ConfigStore",
    "FulfillmentStore",
    "JSONStorage",
    "MemoryStorage",
    "SupabaseStorage",
    "create_storage",
]
