"""
카탈로그 가져오기 서비스
공급사 상품 목록을 조회하여 신규 상품만 카탈로그에 등록 (기존 상품은 갱신하지 않음)
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

from dropship_engine.config import Settings, get_settings
from dropship_engine.errors import TransportFailure
from dropship_engine.models.product import CatalogEntry, SupplierProduct
from dropship_engine.models.sync import ImportResult, SyncLogEntry, SyncOperation, SyncStatus
from dropship_engine.monitoring import get_logger
from dropship_engine.services.provider_config import ProviderConfigService
from dropship_engine.storage.base import BaseStorage

logger = get_logger(__name__)


class _ImportCounters:
    """동시 처리 중 집계 (락으로 보호)"""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.processed = 0
        self.skipped = 0
        self.imported: List[CatalogEntry] = []
        self.errors: List[Dict[str, Any]] = []
        self.mirror_errors: List[Dict[str, Any]] = []


class CatalogImporter:
    """카탈로그 가져오기"""

    def __init__(
        self,
        storage: BaseStorage,
        configs: ProviderConfigService,
        settings: Optional[Settings] = None,
    ):
        self.storage = storage
        self.configs = configs
        self.settings = settings or get_settings()

    async def import_products(
        self, category: Optional[str] = None, limit: Optional[int] = None
    ) -> ImportResult:
        """
        가져오기 1회 실행

        Args:
            category: 내부 카테고리 필터 (공급사 매핑이 없으면 필터 없이 조회)
            limit: 최대 조회 개수

        Returns:
            실행 결과 요약

        Raises:
            ConfigurationMissing: 활성 공급사 설정 없음
            TransportFailure: 상품 목록 조회 실패 (처리할 항목이 없으므로 중단)
        """
        config = await self.configs.require_active()
        provider = config.provider
        limit = limit or self.settings.default_import_limit
        started_at = datetime.now()

        logger.info(f"상품 가져오기 시작: provider={provider}, category={category}, limit={limit}")

        async with self.configs.open_client(config) as client:
            try:
                products = await client.list_products(category, limit)
            except TransportFailure as e:
                logger.error(f"상품 목록 조회 실패: {e.message}")
                await self.storage.audit.append_sync_log(
                    SyncLogEntry.for_run(
                        SyncOperation.PRODUCT_IMPORT,
                        provider,
                        processed=0,
                        updated=0,
                        failed=0,
                        started_at=started_at,
                        errors=[{"stage": "fetch", "error": e.message}],
                        status=SyncStatus.ERROR,
                    )
                )
                raise

        # 같은 목록 안의 중복 ID는 처음 항목만 처리
        unique: Dict[str, SupplierProduct] = {}
        for product in products:
            unique.setdefault(product.external_id, product)

        counters = _ImportCounters()
        counters.skipped = len(products) - len(unique)
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def run(product: SupplierProduct):
            async with semaphore:
                await self._import_one(product, counters)

        await asyncio.gather(*(run(product) for product in unique.values()))

        extra_details: Dict[str, Any] = {"fetched": len(products), "skipped": counters.skipped}
        if counters.mirror_errors:
            extra_details["mirror_errors"] = counters.mirror_errors

        entry = SyncLogEntry.for_run(
            SyncOperation.PRODUCT_IMPORT,
            provider,
            processed=counters.processed,
            updated=len(counters.imported),
            failed=len(counters.errors),
            started_at=started_at,
            errors=counters.errors,
            extra_details=extra_details,
            status=SyncStatus.classify(len(products), len(counters.errors)),
        )
        await self.storage.audit.append_sync_log(entry)

        logger.info(
            f"상품 가져오기 완료: 조회 {len(products)}, 등록 {len(counters.imported)}, "
            f"중복 {counters.skipped}, 실패 {len(counters.errors)} ({entry.status.value})"
        )

        return ImportResult(
            imported=len(counters.imported),
            total=len(products),
            errors=len(counters.errors),
            skipped=counters.skipped,
            error_details=counters.errors,
            products=counters.imported,
        )

    async def _import_one(self, product: SupplierProduct, counters: _ImportCounters):
        """상품 1개 등록 (실패는 기록만 하고 예외를 전파하지 않음)"""
        catalog = self.storage.catalog

        try:
            existing = await catalog.find_by_external_id(product.provider, product.external_id)
        except Exception as e:
            await self._record_error(counters, product, f"조회 실패: {e}")
            return

        if existing is not None:
            async with counters.lock:
                counters.skipped += 1
            return

        entry = CatalogEntry.from_supplier_product(product)
        try:
            entry = await catalog.insert(entry)
        except Exception as e:
            await self._record_error(counters, product, str(e))
            return

        async with counters.lock:
            counters.processed += 1
            counters.imported.append(entry)

        # 미러 저장 실패는 정규 레코드를 유지하고 기록만 남김
        try:
            await catalog.insert_mirror(entry.to_storefront())
        except Exception as e:
            logger.warning(f"미러 상품 저장 실패 ({product.external_id}): {e}")
            async with counters.lock:
                counters.mirror_errors.append({"product": product.external_id, "error": str(e)})

    async def _record_error(self, counters: _ImportCounters, product: SupplierProduct, message: str):
        logger.warning(f"상품 등록 실패 ({product.external_id}): {message}")
        async with counters.lock:
            counters.processed += 1
            counters.errors.append({"product": product.external_id, "error": message})
