"""
Supabase 저장소 구현
PostgreSQL 기반 데이터 저장 및 관리

supabase 클라이언트는 동기 방식이므로 asyncio.to_thread로 감싸서 호출한다.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from dropship_engine.config import settings
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

# 테이블 이름
CONFIG_TABLE = "dropshipping_config"
CATALOG_TABLE = "dropshipping_products"
MIRROR_TABLE = "products"
SYNC_LOG_TABLE = "dropshipping_sync_logs"
ORDER_TABLE = "dropshipping_orders"


class _SupabaseTable:
    """supabase 테이블 접근 공통 기능"""

    table_name = ""

    def __init__(self, client: Client):
        self.client = client

    def table(self):
        return self.client.table(self.table_name)

    async def _run(self, build: Callable[[], Any]) -> List[Dict[str, Any]]:
        """쿼리를 스레드에서 실행하고 결과 행 반환"""
        try:
            result = await asyncio.to_thread(lambda: build().execute())
        except Exception as e:
            logger.error(f"{self.table_name} 쿼리 실패: {str(e)}")
            raise
        return result.data or []


class SupabaseConfigStore(_SupabaseTable, ConfigStore):
    """dropshipping_config 테이블"""

    table_name = CONFIG_TABLE

    async def get_active_config(self, provider: Optional[str] = None) -> Optional[ProviderConfig]:
        rows = await self._run(
            lambda: self.table()
            .select("*")
            .eq("is_active", True)
            .order("created_at", desc=True)
            .limit(1)
        )
        if not rows:
            return None
        config = ProviderConfig(**rows[0])
        if provider and config.provider != provider:
            return None
        return config

    async def upsert_config(
        self,
        provider: str,
        api_key: str,
        api_secret: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> ProviderConfig:
        config = ProviderConfig(
            provider=provider,
            api_key=api_key,
            api_secret=api_secret,
            settings=settings or {},
        )
        # 새 설정 저장 후 나머지 활성 설정을 비활성화
        rows = await self._run(lambda: self.table().insert(config.to_record()))
        superseded_at = datetime.now().isoformat()
        await self._run(
            lambda: self.table()
            .update({"is_active": False, "superseded_at": superseded_at})
            .eq("is_active", True)
            .neq("id", config.id)
        )
        return ProviderConfig(**rows[0]) if rows else config

    async def list_configs(self, provider: Optional[str] = None) -> List[ProviderConfig]:
        def build():
            query = self.table().select("*")
            if provider:
                query = query.eq("provider", provider)
            return query.order("created_at", desc=True)

        return [ProviderConfig(**row) for row in await self._run(build)]


class SupabaseCatalogStore(_SupabaseTable, CatalogStore):
    """dropshipping_products 테이블 + products 미러 테이블"""

    table_name = CATALOG_TABLE

    def mirror(self):
        return self.client.table(MIRROR_TABLE)

    async def find_by_external_id(self, provider: str, external_id: str) -> Optional[CatalogEntry]:
        rows = await self._run(
            lambda: self.table()
            .select("*")
            .eq("provider", provider)
            .eq("external_id", external_id)
            .limit(1)
        )
        return CatalogEntry(**rows[0]) if rows else None

    async def insert(self, entry: CatalogEntry) -> CatalogEntry:
        record = entry.model_dump(mode="json")
        rows = await self._run(lambda: self.table().insert(record))
        logger.debug(f"카탈로그 항목 저장: {entry.provider}/{entry.external_id}")
        return CatalogEntry(**rows[0]) if rows else entry

    async def insert_mirror(self, product: StorefrontProduct) -> str:
        record = product.model_dump(mode="json")
        rows = await self._run(lambda: self.mirror().insert(record))
        if not rows:
            raise ValueError("미러 상품 저장 실패")
        return str(rows[0]["id"])

    async def update_stock(self, provider: str, external_id: str, stock_level: int) -> None:
        now = datetime.now().isoformat()
        await self._run(
            lambda: self.table()
            .update({"stock_level": stock_level, "last_synced": now, "updated_at": now})
            .eq("provider", provider)
            .eq("external_id", external_id)
        )
        await self._run(
            lambda: self.mirror()
            .update({"stock_quantity": stock_level})
            .eq("provider", provider)
            .eq("external_id", external_id)
        )

    async def list_active(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[CatalogEntry]:
        def build():
            query = self.table().select("*").eq("is_active", True)
            if provider:
                query = query.eq("provider", provider)
            query = query.order("created_at")
            return query.limit(limit) if limit else query

        return [CatalogEntry(**row) for row in await self._run(build)]


class SupabaseAuditStore(_SupabaseTable, AuditStore):
    """dropshipping_sync_logs 테이블"""

    table_name = SYNC_LOG_TABLE

    async def append_sync_log(self, entry: SyncLogEntry) -> None:
        record = entry.model_dump(mode="json")
        await self._run(lambda: self.table().insert(record))

    async def list_sync_logs(
        self, provider: Optional[str] = None, limit: Optional[int] = None
    ) -> List[SyncLogEntry]:
        def build():
            query = self.table().select("*")
            if provider:
                query = query.eq("provider", provider)
            query = query.order("started_at", desc=True)
            return query.limit(limit) if limit else query

        return [SyncLogEntry(**row) for row in await self._run(build)]


class SupabaseFulfillmentStore(_SupabaseTable, FulfillmentStore):
    """dropshipping_orders 테이블"""

    table_name = ORDER_TABLE

    async def insert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        data = record.model_dump(mode="json")
        rows = await self._run(lambda: self.table().insert(data))
        return FulfillmentRecord(**rows[0]) if rows else record

    async def find_by_order_id(self, order_id: str) -> Optional[FulfillmentRecord]:
        records = await self.list_by_order_id(order_id)
        return records[0] if records else None

    async def list_by_order_id(self, order_id: str) -> List[FulfillmentRecord]:
        rows = await self._run(
            lambda: self.table()
            .select("*")
            .eq("order_id", order_id)
            .order("created_at", desc=True)
        )
        return [FulfillmentRecord(**row) for row in rows]


class SupabaseStorage(BaseStorage):
    """Supabase 저장소 묶음"""

    backend = "supabase"

    def __init__(
        self,
        url: Optional[str] = None,
        service_key: Optional[str] = None,
        client: Optional[Client] = None,
    ):
        """
        Args:
            url: Supabase 프로젝트 URL
            service_key: Supabase service role key
            client: 미리 생성된 클라이언트 (테스트용)
        """
        if client is None:
            url = url or (settings.supabase.url if settings.supabase else None)
            service_key = service_key or (
                settings.supabase.service_role_key if settings.supabase else None
            )
            if not url or not service_key:
                raise ValueError("Supabase URL과 Service Key가 필요합니다")

            client = create_client(
                url,
                service_key,
                options=ClientOptions(
                    auto_refresh_token=False,  # Service role key는 갱신 불필요
                    persist_session=False,
                ),
            )
            logger.info(f"Supabase 저장소 초기화: {url}")

        self.client = client
        super().__init__(
            config=SupabaseConfigStore(client),
            catalog=SupabaseCatalogStore(client),
            audit=SupabaseAuditStore(client),
            fulfillment=SupabaseFulfillmentStore(client),
        )
