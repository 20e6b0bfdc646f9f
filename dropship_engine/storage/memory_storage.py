"""
메모리 저장소
DB 없이 개발/테스트할 수 있도록 프로세스 메모리에 데이터 보관
"""

import asyncio
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from dropship_engine.models.config import ProviderConfig
from dropship_engine.models.order import FulfillmentRecord
from dropship_engine.models.product import CatalogEntry, StorefrontProduct
from dropship_engine.models.sync import SyncLogEntry
from dropship_engine.monitoring import get_logger
from dropship_engine.storage.base import (
    AuditStore,
    BaseStorage,
    CatalogStore,
    ConfigStore,
    FulfillmentStore,
)

logger = get_logger(__name__)


class MemoryConfigStore(ConfigStore):
    """메모리 설정 저장소"""

    def __init__(self):
        self._configs: List[ProviderConfig] = []
        self._lock = asyncio.Lock()

    async def get_active_config(self, provider: Optional[str] = None) -> Optional[ProviderConfig]:
        active = [c for c in self._configs if c.is_active]
        if not active:
            return None
        latest = active[-1]
        if provider and latest.provider != provider:
            return None
        return latest.model_copy()

    async def upsert_config(
        self,
        provider: str,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> ProviderConfig:
        async with self._lock:
            now = datetime.now()
            self._configs = [
                c.model_copy(update={"is_active": False, "superseded_at": now}) if c.is_active else c
                for c in self._configs
            ]
            config = ProviderConfig(
                provider=provider,
                api_key=api_key,
                api_secret=api_secret,
                settings=settings or {},
            )
            self._configs.append(config)
            return config.model_copy()

    async def list_configs(self, provider: Optional[str] = None) -> List[ProviderConfig]:
        configs = [c for c in self._configs if provider is None or c.provider == provider]
        return list(reversed(configs))


class MemoryCatalogStore(CatalogStore):
    """메모리 카탈로그 저장소"""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], CatalogEntry] = {}
        self._mirrors: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def find_by_external_id(self, provider: str, external_id: str) -> Optional[CatalogEntry]:
        entry = self._entries.get((provider, external_id))
        return entry.model_copy(deep=True) if entry else None

    async def insert(self, entry: CatalogEntry) -> CatalogEntry:
        async with self._lock:
            if entry.identity in self._entries:
                raise ValueError(f"이미 등록된 상품: {entry.provider}/{entry.external_id}")
            self._entries[entry.identity] = entry.model_copy(deep=True)
            return entry

    async def insert_mirror(self, product: StorefrontProduct) -> str:
        async with self._lock:
            key = (product.provider, product.external_id)
            if key in self._mirrors:
                raise ValueError(f"이미 등록된 미러 상품: {product.provider}/{product.external_id}")
            record_id = str(uuid.uuid4())
            self._mirrors[key] = {"id": record_id, "product": product.model_copy(deep=True)}
            return record_id

    async def update_stock(self, provider: str, external_id: str, stock_level: int) -> None:
        async with self._lock:
            key = (provider, external_id)
            entry = self._entries.get(key)
            if entry is None:
                raise ValueError(f"카탈로그 항목 없음: {provider}/{external_id}")

            now = datetime.now()
            self._entries[key] = entry.model_copy(
                update={"stock_level": stock_level, "last_synced": now, "updated_at": now}
            )
            mirror = self._mirrors.get(key)
            if mirror:
                mirror["product"] = mirror["product"].model_copy(
                    update={"stock_quantity": stock_level}
                )

    async def list_active(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[CatalogEntry]:
        entries = [
            e.model_copy(deep=True)
            for e in self._entries.values()
            if e.is_active and (provider is None or e.provider == provider)
        ]
        return entries[:limit] if limit else entries

    async def get_mirror(self, provider: str, external_id: str) -> Optional[StorefrontProduct]:
        """미러 레코드 조회"""
        mirror = self._mirrors.get((provider, external_id))
        return mirror["product"].model_copy(deep=True) if mirror else None

    async def count(self) -> int:
        return len(self._entries)


class MemoryAuditStore(AuditStore):
    """메모리 감사 기록 저장소"""

    def __init__(self):
        self._logs: List[SyncLogEntry] = []

    async def append_sync_log(self, entry: SyncLogEntry) -> None:
        self._logs.append(entry)

    async def list_sync_logs(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[SyncLogEntry]:
        logs = [log for log in reversed(self._logs) if provider is None or log.provider == provider]
        return logs[:limit] if limit else logs


class MemoryFulfillmentStore(FulfillmentStore):
    """메모리 주문 전달 기록 저장소"""

    def __init__(self):
        self._records: List[FulfillmentRecord] = []

    async def insert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        self._records.append(record.model_copy(deep=True))
        return record

    async def find_by_order_id(self, order_id: str) -> Optional[FulfillmentRecord]:
        records = await self.list_by_order_id(order_id)
        return records[0] if records else None

    async def list_by_order_id(self, order_id: str) -> List[FulfillmentRecord]:
        return [r.model_copy(deep=True) for r in reversed(self._records) if r.order_id == order_id]


class MemoryStorage(BaseStorage):
    """메모리 저장소 묶음"""

    backend = "memory"

    def __init__(self):
        super().__init__(
            config=MemoryConfigStore(),
            catalog=MemoryCatalogStore(),
            audit=MemoryAuditStore(),
            fulfillment=MemoryFulfillmentStore(),
        )
        logger.info("메모리 저장소 초기화")
