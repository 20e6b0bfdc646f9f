"""
재고 동기화 서비스
활성 공급사의 활성 카탈로그 항목 재고를 공급사 기준으로 갱신
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

from dropship_engine.config import Settings, get_settings
from dropship_engine.errors import TransportFailure
from dropship_engine.models.product import CatalogEntry
from dropship_engine.models.sync import SyncLogEntry, SyncOperation, SyncResult
from dropship_engine.monitoring import get_logger
from dropship_engine.services.provider_config import ProviderConfigService
from dropship_engine.storage.base import BaseStorage
from dropship_engine.suppliers.client import SupplierClient

logger = get_logger(__name__)


class InventoryReconciler:
    """재고 동기화"""

    def __init__(
        self,
        storage: BaseStorage,
        configs: ProviderConfigService,
        settings: Optional[Settings] = None,
    ):
        self.storage = storage
        self.configs = configs
        self.settings = settings or get_settings()

    async def sync_inventory(self) -> SyncResult:
        """
        재고 동기화 1회 실행

        개별 항목의 조회 실패는 집계만 하고 전체 작업을 중단하지 않는다.
        실패한 항목은 재고와 동기화 시각을 갱신하지 않는다.

        Raises:
            ConfigurationMissing: 활성 공급사 설정 없음
        """
        config = await self.configs.require_active()
        provider = config.provider
        started_at = datetime.now()

        entries = await self.storage.catalog.list_active(provider)
        logger.info(f"재고 동기화 시작: provider={provider}, 대상 {len(entries)}개")

        lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)
        updated = 0
        errors: List[Dict[str, Any]] = []

        async with self.configs.open_client(config) as client:

            async def run(entry: CatalogEntry):
                nonlocal updated
                async with semaphore:
                    error = await self._sync_one(client, entry)
                async with lock:
                    if error is None:
                        updated += 1
                    else:
                        errors.append({"product": entry.external_id, "error": error})

            await asyncio.gather(*(run(entry) for entry in entries))

        log_entry = SyncLogEntry.for_run(
            SyncOperation.INVENTORY_SYNC,
            provider,
            processed=len(entries),
            updated=updated,
            failed=len(errors),
            started_at=started_at,
            errors=errors,
        )
        await self.storage.audit.append_sync_log(log_entry)

        logger.info(
            f"재고 동기화 완료: 처리 {len(entries)}, 갱신 {updated}, 실패 {len(errors)} "
            f"({log_entry.status.value})"
        )
        return SyncResult(processed=len(entries), updated=updated, failed=len(errors), errors=errors)

    async def _sync_one(self, client: SupplierClient, entry: CatalogEntry) -> Optional[str]:
        """항목 1개 동기화 (실패 시 오류 메시지 반환)"""
        try:
            stock_level = await client.fetch_stock(entry.external_id)
        except TransportFailure as e:
            logger.warning(f"재고 조회 실패 ({entry.external_id}): {e.message}")
            return e.message

        try:
            await self.storage.catalog.update_stock(entry.provider, entry.external_id, stock_level)
        except Exception as e:
            logger.warning(f"재고 저장 실패 ({entry.external_id}): {e}")
            return str(e)

        logger.debug(f"재고 갱신: {entry.external_id} {entry.stock_level} -> {stock_level}")
        return None
